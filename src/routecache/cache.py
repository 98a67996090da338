"""File-backed cache for compiled routes.

One ``RouteCache`` per process. The bootstrap layer builds it from
configuration, the router populates its collection from it once at
startup, hands every freshly compiled route to ``add()``, and calls
``write_cache()`` when registration is done. Deleting the artifact with
``invalidate_cache_file()`` forces the next process to rebuild.

Disabled and cold (no artifact yet) caches are not errors; they are the
normal state on first boot or when caching is off.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from routecache import codec
from routecache._internal.fileio import atomic_write_bytes
from routecache.config import CacheConfig
from routecache.errors import InvalidCache, InvalidCacheDirectory, WriteCacheFailure
from routecache.routing.collection import RouteCollection
from routecache.routing.route import CompiledRoute, Route

logger = logging.getLogger("routecache.cache")


class RouteCache:
    """Write-through cache of compiled routes, persisted to one file.

    Usage::

        cache = RouteCache(CacheConfig(enabled=True, file_path="var/routes.json"))
        routes = cache.populate_from_cache(RouteCollection())
        if "home" not in routes:
            cache.add("home", Route("/", name="home"))
        cache.write_cache()

    Construction performs no I/O.
    """

    __slots__ = ("_config", "_fetched", "_needs_update", "_table")

    def __init__(self, config: CacheConfig | Mapping[str, Any] | None = None) -> None:
        if not isinstance(config, CacheConfig):
            config = CacheConfig.from_mapping(config)
        self._config = config
        self._table: codec.RouteTable = {}
        self._fetched = False
        self._needs_update = False

    # -- accessors -------------------------------------------------------

    @property
    def is_cache_enabled(self) -> bool:
        return self._config.enabled

    @property
    def cache_file(self) -> Path | None:
        return self._config.file_path

    @property
    def needs_update(self) -> bool:
        """True once ``add()`` has run since the last successful write."""
        return self._needs_update

    def route_names(self) -> list[str]:
        return list(self._table)

    # -- operations ------------------------------------------------------

    def populate_from_cache(self, collection: RouteCollection) -> RouteCollection:
        """Copy every cached route into *collection* and return it.

        Cached entries replace whatever *collection* already holds under
        the same name. With caching disabled the collection comes back
        untouched and no file is read.

        Raises ``InvalidCache`` if the artifact exists but is unusable.
        """
        if not self._config.enabled:
            return collection

        for name, route in self.fetch_cache().items():
            collection.add(name, route)
        return collection

    def add(self, name: str, route: Route | CompiledRoute) -> None:
        """Compile *route* and store it under *name*. Never touches disk."""
        if not self._config.enabled:
            return

        self._table[name] = route.compile()
        self._needs_update = True

    def has(self, name: str) -> bool:
        return name in self._table

    def write_cache(self) -> bool:
        """Persist the in-memory table if it changed.

        Returns ``True`` on success, including the no-op cases (caching
        disabled, nothing added). Raises ``InvalidCacheDirectory`` when
        the target directory is missing or read-only, ``WriteCacheFailure``
        when the write itself fails. A failed write leaves any previous
        artifact in place.
        """
        if not self._config.enabled or not self._needs_update:
            return True

        cache_file = self._config.file_path
        if cache_file is None:
            msg = "No cache file configured"
            raise InvalidCacheDirectory(msg)

        cache_dir = cache_file.parent
        if not cache_dir.is_dir():
            msg = f'The cache directory "{cache_dir}" does not exist'
            raise InvalidCacheDirectory(msg)
        if not os.access(cache_dir, os.W_OK):
            msg = f'The cache directory "{cache_dir}" is not writable'
            raise InvalidCacheDirectory(msg)

        payload = codec.encode(self._table)
        try:
            written = atomic_write_bytes(cache_file, payload)
        except OSError as exc:
            msg = f"Unable to write cache file: {cache_file}"
            raise WriteCacheFailure(msg) from exc

        if written != len(payload):
            msg = f"Unable to write cache file: {cache_file}"
            raise WriteCacheFailure(msg)

        logger.debug("Wrote %d routes to %s", len(self._table), cache_file)
        self._needs_update = False
        return True

    def invalidate_cache_file(self) -> None:
        """Delete the artifact so the next process rebuilds from scratch.

        The in-memory table and the dirty flag are left alone.
        """
        cache_file = self._config.file_path
        if not self._config.enabled or cache_file is None or not cache_file.is_file():
            return

        cache_file.unlink()
        logger.debug("Removed route cache %s", cache_file)

    def fetch_cache(self) -> codec.RouteTable:
        """Return the persisted route table, reading the artifact once.

        Returns an empty table when caching is disabled, no file is
        configured, or the file does not exist yet. The first successful
        read is kept for the life of this instance.

        Raises ``InvalidCache`` if the artifact cannot be decoded.
        """
        cache_file = self._config.file_path
        if not self._config.enabled or cache_file is None:
            return {}
        if self._fetched:
            return dict(self._table)
        if not cache_file.is_file():
            logger.debug("No route cache at %s", cache_file)
            return {}

        try:
            data = cache_file.read_bytes()
        except OSError as exc:
            msg = f"Unable to read cache file: {cache_file}"
            raise InvalidCache(msg) from exc

        # Full replace: population runs before any add() in a session
        self._table = codec.decode(data)
        self._fetched = True
        logger.debug("Loaded %d routes from %s", len(self._table), cache_file)
        return dict(self._table)
