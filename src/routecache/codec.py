"""Cache artifact format.

The artifact is a UTF-8 JSON document with an explicit header::

    {
      "format": "routecache",
      "version": 1,
      "count": 2,
      "checksum": "<sha256 hex of the canonical routes payload>",
      "routes": [ {...CompiledRoute.to_dict()...}, ... ]
    }

``count`` makes an empty table distinguishable from a damaged file, and
``checksum`` catches truncated or hand-edited artifacts. Unknown versions
are rejected outright; there is no best-effort decode.
"""

import hashlib
import json
from typing import Any

from routecache.errors import InvalidCache
from routecache.routing.route import CompiledRoute

FORMAT_NAME = "routecache"
FORMAT_VERSION = 1

RouteTable = dict[str, CompiledRoute]


def _canonical(records: list[dict[str, Any]]) -> bytes:
    return json.dumps(records, separators=(",", ":"), sort_keys=True, ensure_ascii=True).encode(
        "ascii"
    )


def checksum(records: list[dict[str, Any]]) -> str:
    return hashlib.sha256(_canonical(records)).hexdigest()


def encode(table: RouteTable) -> bytes:
    """Serialize a route table to artifact bytes.

    Each record carries its table key as ``name``; the route's own
    ``name`` attribute is kept separately under ``route_name``.
    """
    records: list[dict[str, Any]] = []
    for name, route in table.items():
        record = route.compile().to_dict()
        record["route_name"] = record.pop("name")
        record["name"] = name
        records.append(record)

    document = {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "count": len(records),
        "checksum": checksum(records),
        "routes": records,
    }
    return json.dumps(document, indent=1, ensure_ascii=False).encode("utf-8")


def decode(data: bytes) -> RouteTable:
    """Parse artifact bytes back into a route table.

    Raises ``InvalidCache`` for anything that is not a complete artifact
    of the current version.
    """
    if not data:
        msg = "Cache artifact is empty"
        raise InvalidCache(msg)

    try:
        document = json.loads(data.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        # JSONDecodeError, UnicodeDecodeError, int digit limit, nesting depth
        msg = f"Cache artifact is not valid JSON: {exc}"
        raise InvalidCache(msg) from exc

    if not isinstance(document, dict) or document.get("format") != FORMAT_NAME:
        msg = "Cache artifact has no routecache header"
        raise InvalidCache(msg)

    version = document.get("version")
    if version != FORMAT_VERSION:
        msg = f"Unsupported cache artifact version {version!r} (expected {FORMAT_VERSION})"
        raise InvalidCache(msg)

    records = document.get("routes")
    if not isinstance(records, list):
        msg = "Cache artifact has no route list"
        raise InvalidCache(msg)

    count = document.get("count")
    if count != len(records):
        msg = f"Cache artifact declares {count!r} routes but holds {len(records)}"
        raise InvalidCache(msg)

    if document.get("checksum") != checksum(records):
        msg = "Cache artifact checksum mismatch"
        raise InvalidCache(msg)

    table: RouteTable = {}
    for index, record in enumerate(records):
        try:
            name = record["name"]
            if not isinstance(name, str) or not name:
                msg = f"route name must be a non-empty string, got {name!r}"
                raise TypeError(msg)
            fields = {**record, "name": record.get("route_name")}
            route = CompiledRoute.from_dict(fields)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            msg = f"Cache artifact route #{index} is malformed: {exc!r}"
            raise InvalidCache(msg) from exc
        if name in table:
            msg = f"Cache artifact holds route {name!r} twice"
            raise InvalidCache(msg)
        table[name] = route
    return table
