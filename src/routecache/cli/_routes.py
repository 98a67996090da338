"""``routecache routes`` — list the routes held by a cache artifact.

Prints a table of NAME, METHOD, and PATH for every cached route.
"""

import argparse
import sys

from routecache.cli._open import open_cache
from routecache.errors import InvalidCache


def run_routes(args: argparse.Namespace) -> None:
    """List cached routes.

    Exits with code 1 if the artifact cannot be loaded.
    """
    cache = open_cache(args.cache_file)
    try:
        table = cache.fetch_cache()
    except InvalidCache as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not table:
        print("No routes cached.")
        return

    # Build rows: (name, methods_str, path)
    rows: list[tuple[str, str, str]] = []
    for name, route in table.items():
        rows.append((name, ", ".join(sorted(route.methods)), route.path))

    # Column widths
    max_name = max(max(len(r[0]) for r in rows), 4)  # "NAME" header
    max_methods = max(max(len(r[1]) for r in rows), 6)  # "METHOD" header

    fmt = f"{{:<{max_name}}}  {{:<{max_methods}}}  {{}}"
    print(fmt.format("NAME", "METHOD", "PATH"))
    sep_len = max_name + max_methods + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for name, methods_str, path in rows:
        print(fmt.format(name, methods_str, path))
