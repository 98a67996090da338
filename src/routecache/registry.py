"""Route registration backed by a RouteCache.

The glue a router runs at startup: load whatever the cache holds, compile
only the routes it does not, and flush the result back to disk.
"""

import logging

from routecache.cache import RouteCache
from routecache.errors import ConfigurationError, InvalidCache
from routecache.routing.collection import RouteCollection
from routecache.routing.route import CompiledRoute, Route

logger = logging.getLogger("routecache.registry")


class RouteRegistry:
    """Collects named routes, reusing compiled forms from the cache.

    Usage::

        registry = RouteRegistry(cache)
        registry.load()
        registry.register(Route("/users/{id:int}", name="user_detail"))
        registry.flush()
    """

    __slots__ = ("_cache", "_loaded", "_routes")

    def __init__(self, cache: RouteCache) -> None:
        self._cache = cache
        self._routes = RouteCollection()
        self._loaded = False

    @property
    def routes(self) -> RouteCollection:
        return self._routes

    @property
    def cache(self) -> RouteCache:
        return self._cache

    def load(self) -> RouteCollection:
        """Populate the collection from the cache. Runs once.

        A broken artifact is removed and registration continues cold,
        so every route gets recompiled and the next flush rewrites it.
        """
        if self._loaded:
            return self._routes
        self._loaded = True

        try:
            self._cache.populate_from_cache(self._routes)
        except InvalidCache as exc:
            logger.warning("Discarding route cache %s: %s", self._cache.cache_file, exc)
            self._cache.invalidate_cache_file()
        return self._routes

    def register(self, route: Route | CompiledRoute) -> CompiledRoute:
        """Add a named route, compiling it unless the cache holds the same one.

        A cached entry whose definition differs from *route* is stale and
        gets replaced. Returns the compiled route now held by the collection.
        """
        name = route.name
        if not name:
            msg = f"Route {route.path!r} needs a name to be cached"
            raise ConfigurationError(msg)
        if not self._loaded:
            self.load()

        declared = route.route if isinstance(route, CompiledRoute) else route
        cached = self._routes.get(name)
        if isinstance(cached, CompiledRoute) and self._cache.has(name):
            if cached.route == declared:
                return cached
            logger.debug("Cached route %r is stale; recompiling", name)

        compiled = route.compile()
        self._routes.add(name, compiled)
        self._cache.add(name, compiled)
        return compiled

    def flush(self) -> bool:
        return self._cache.write_cache()
