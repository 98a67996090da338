"""Routing collaborator types — routes and their compiled form.

Routes compile once into a ``CompiledRoute`` that can be persisted and
restored without re-parsing the path.
"""

from routecache.routing.collection import RouteCollection
from routecache.routing.route import CompiledRoute, PathSegment, Route, parse_path

__all__ = ["CompiledRoute", "PathSegment", "Route", "RouteCollection", "parse_path"]
