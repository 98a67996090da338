"""Shared helper: build an enabled RouteCache for a CLI-supplied path."""

from routecache.cache import RouteCache
from routecache.config import CacheConfig


def open_cache(cache_file: str) -> RouteCache:
    return RouteCache(CacheConfig(enabled=True, file_path=cache_file))
