"""Routecache exception hierarchy.

Shared across RouteCache, the codec, and the registry so every module
raises and catches the same types.
"""


class RouteCacheError(Exception):
    """Base for all routecache-specific errors."""


class ConfigurationError(RouteCacheError):
    """Raised when cache configuration or a route definition is invalid.

    Typically raised at construction time, before any I/O happens.
    """


class InvalidCacheDirectory(RouteCacheError):  # noqa: N818
    """The directory holding the cache file is missing or not writable.

    Raised by ``RouteCache.write_cache()``. Recoverable by the caller
    (create the directory, fix permissions) and retrying.
    """


class WriteCacheFailure(RouteCacheError):  # noqa: N818
    """Writing the cache artifact did not complete.

    The previous artifact, if any, is left untouched.
    """


class InvalidCache(RouteCacheError):  # noqa: N818
    """The cache artifact exists but is empty, truncated, or unreadable.

    Callers should treat the cache as broken and fall back to full
    recompilation rather than crash.
    """
