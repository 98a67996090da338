"""``routecache check`` — validate a cache artifact.

Exits with code 1 if the artifact exists but cannot be loaded. A missing
artifact is a cold cache, which is fine.
"""

import argparse
import sys

from routecache.cli._open import open_cache
from routecache.errors import InvalidCache


def run_check(args: argparse.Namespace) -> None:
    """Load the artifact and report whether the router could trust it."""
    cache = open_cache(args.cache_file)
    try:
        table = cache.fetch_cache()
    except InvalidCache as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    path = cache.cache_file
    if path is None or not path.is_file():
        print(f"No cache at {args.cache_file} (cold cache).")
        return
    print(f"OK: {len(table)} routes in {path}")
