"""Route, PathSegment and CompiledRoute frozen dataclasses.

A ``Route`` is what the application declares. ``Route.compile()`` parses
the path once into a ``CompiledRoute`` carrying everything needed to
match without re-parsing; that compiled form is what the cache persists.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from routecache.errors import ConfigurationError
from routecache.routing.params import CONVERTERS, convert_param, param_group


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"

    def to_dict(self) -> dict[str, Any]:
        if not self.is_param:
            return {"value": self.value}
        return {"value": self.value, "name": self.param_name, "type": self.param_type}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PathSegment":
        value = data["value"]
        if not isinstance(value, str):
            msg = f"segment value must be a string, got {value!r}"
            raise TypeError(msg)
        if "name" not in data:
            return cls(value=value)
        return cls(
            value=value,
            is_param=True,
            param_name=str(data["name"]),
            param_type=str(data["type"]),
        )


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/{id}"     -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}" -> [PathSegment("{id:int}", is_param=True, param_type="int")]
        "/files/{path:path}" -> [PathSegment("{path:path}", is_param=True, param_type="path")]

    Raises ``ConfigurationError`` for ``<param>`` placeholders, unknown
    converters, duplicate parameter names, or a ``path`` parameter that
    is not the last segment.
    """
    segments: list[PathSegment] = []
    seen: set[str] = set()
    parts = [p for p in path.strip("/").split("/") if p]
    for index, part in enumerate(parts):
        if part.startswith("<") and part.endswith(">"):
            msg = f"Route {path!r} uses <param> syntax; write {{param}} instead."
            raise ConfigurationError(msg)
        if not (part.startswith("{") and part.endswith("}")):
            segments.append(PathSegment(value=part))
            continue

        inner = part[1:-1]
        if ":" in inner:
            param_name, param_type = inner.split(":", 1)
        else:
            param_name = inner
            param_type = "str"
        if param_type not in CONVERTERS:
            msg = f"Route {path!r}: unknown converter {param_type!r}"
            raise ConfigurationError(msg)
        if param_name in seen:
            msg = f"Route {path!r}: duplicate parameter {param_name!r}"
            raise ConfigurationError(msg)
        if param_type == "path" and index != len(parts) - 1:
            msg = f"Route {path!r}: path parameter {param_name!r} must be the last segment"
            raise ConfigurationError(msg)
        seen.add(param_name)
        segments.append(
            PathSegment(
                value=part,
                is_param=True,
                param_name=param_name,
                param_type=param_type,
            )
        )
    return segments


def normalize_path(path: str) -> str:
    """Collapse empty segments so ``//users/`` and ``/users`` match alike."""
    return "/" + "/".join(p for p in path.strip("/").split("/") if p)


@lru_cache(maxsize=1024)
def _pattern(regex: str) -> re.Pattern[str]:
    return re.compile(regex)


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``handler`` is an import string (``"myapp.views:show_user"``) so the
    route survives serialization; the cache never resolves it.
    """

    path: str
    methods: frozenset[str] = frozenset({"GET"})
    name: str | None = None
    handler: str | None = None
    defaults: tuple[tuple[str, str], ...] = ()

    def compile(self) -> "CompiledRoute":
        """Build the matching structures for this route."""
        segments = tuple(parse_path(self.path))
        pieces: list[str] = []
        for seg in segments:
            if seg.is_param:
                pieces.append(param_group(seg.param_name or "", seg.param_type))
            else:
                pieces.append(re.escape(seg.value))
        regex = "^/" + "/".join(pieces) + "$"

        prefix: list[str] = []
        for seg in segments:
            if seg.is_param:
                break
            prefix.append(seg.value)

        return CompiledRoute(
            route=self,
            segments=segments,
            param_names=tuple(s.param_name or "" for s in segments if s.is_param),
            static_prefix="/" + "/".join(prefix),
            regex=regex,
        )


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """A route with its matcher state built.

    Compiling a ``CompiledRoute`` again returns it unchanged.
    """

    route: Route
    segments: tuple[PathSegment, ...]
    param_names: tuple[str, ...]
    static_prefix: str
    regex: str

    @property
    def name(self) -> str | None:
        return self.route.name

    @property
    def path(self) -> str:
        return self.route.path

    @property
    def methods(self) -> frozenset[str]:
        return self.route.methods

    def compile(self) -> "CompiledRoute":
        return self

    def allows(self, method: str) -> bool:
        return method.upper() in self.route.methods

    def match(self, path: str) -> dict[str, Any] | None:
        """Return converted path parameters if *path* matches, else ``None``.

        Route defaults fill in parameters the path does not carry.
        """
        normalized = normalize_path(path)
        if not normalized.startswith(self.static_prefix):
            return None
        found = _pattern(self.regex).match(normalized)
        if found is None:
            return None
        types = {s.param_name: s.param_type for s in self.segments if s.is_param}
        params: dict[str, Any] = dict(self.route.defaults)
        for name, raw in found.groupdict().items():
            try:
                params[name] = convert_param(raw, types.get(name, "str"))
            except ValueError:
                return None
        return params

    # -- serialization ---------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.route.name,
            "path": self.route.path,
            "methods": sorted(self.route.methods),
            "handler": self.route.handler,
            "defaults": dict(self.route.defaults),
            "compiled": {
                "regex": self.regex,
                "params": list(self.param_names),
                "static_prefix": self.static_prefix,
                "segments": [s.to_dict() for s in self.segments],
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CompiledRoute":
        """Rebuild from ``to_dict()`` output without re-parsing the path.

        Raises ``KeyError``, ``TypeError`` or ``ValueError`` on malformed
        input; the codec turns those into ``InvalidCache``.
        """
        methods = data["methods"]
        defaults = data.get("defaults") or {}
        if not isinstance(methods, list) or not isinstance(defaults, dict):
            msg = "methods must be a list and defaults an object"
            raise TypeError(msg)
        name = data.get("name")
        handler = data.get("handler")
        for label, value in (("name", name), ("handler", handler)):
            if value is not None and not isinstance(value, str):
                msg = f"route {label} must be a string or null, got {value!r}"
                raise TypeError(msg)
        route = Route(
            path=str(data["path"]),
            methods=frozenset(str(m) for m in methods),
            name=name,
            handler=handler,
            defaults=tuple((str(k), str(v)) for k, v in defaults.items()),
        )
        compiled = data["compiled"]
        segments = tuple(PathSegment.from_dict(s) for s in compiled["segments"])
        param_names = tuple(str(p) for p in compiled["params"])
        if param_names != tuple(s.param_name for s in segments if s.is_param):
            msg = f"compiled params {param_names!r} disagree with segments"
            raise ValueError(msg)
        return cls(
            route=route,
            segments=segments,
            param_names=param_names,
            static_prefix=str(compiled["static_prefix"]),
            regex=str(compiled["regex"]),
        )
