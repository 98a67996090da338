"""routecache — a write-through, file-backed cache for compiled routes.

Skips recompiling routing rules on every boot by persisting a compiled
snapshot of the route table and reloading it on the next start.

Basic usage::

    from routecache import CacheConfig, RouteCache, RouteCollection

    cache = RouteCache(CacheConfig(enabled=True, file_path="var/routes.json"))
    routes = cache.populate_from_cache(RouteCollection())
    ...
    cache.write_cache()
"""

import importlib

__version__ = "0.1.0-dev"
__all__ = [
    "CacheConfig",
    "CompiledRoute",
    "ConfigurationError",
    "InvalidCache",
    "InvalidCacheDirectory",
    "Route",
    "RouteCache",
    "RouteCacheError",
    "RouteCollection",
    "RouteRegistry",
    "WriteCacheFailure",
]

# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "CacheConfig": "routecache.config",
    "CompiledRoute": "routecache.routing.route",
    "ConfigurationError": "routecache.errors",
    "InvalidCache": "routecache.errors",
    "InvalidCacheDirectory": "routecache.errors",
    "Route": "routecache.routing.route",
    "RouteCache": "routecache.cache",
    "RouteCacheError": "routecache.errors",
    "RouteCollection": "routecache.routing.collection",
    "RouteRegistry": "routecache.registry",
    "WriteCacheFailure": "routecache.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import routecache`` fast while providing a clean top-level API.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(importlib.import_module(module_path), name)
