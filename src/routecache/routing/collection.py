"""Ordered name -> route mapping handed between the cache and the router."""

from collections.abc import Iterator

from routecache.routing.route import CompiledRoute, Route


class RouteCollection:
    """Named routes in registration order.

    Adding a name that already exists replaces the route but keeps the
    original position, so the table stays reproducible across runs.

    Usage::

        routes = RouteCollection()
        routes.add("user_detail", Route("/users/{id:int}"))
        "user_detail" in routes  # True
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: dict[str, Route | CompiledRoute] = {}

    def add(self, name: str, route: Route | CompiledRoute) -> None:
        self._routes[name] = route

    def get(self, name: str) -> Route | CompiledRoute | None:
        return self._routes.get(name)

    def remove(self, name: str) -> None:
        self._routes.pop(name, None)

    def names(self) -> list[str]:
        return list(self._routes)

    def items(self) -> list[tuple[str, Route | CompiledRoute]]:
        return list(self._routes.items())

    def __contains__(self, name: object) -> bool:
        return name in self._routes

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RouteCollection({self.names()!r})"
