"""``routecache info`` — report what the cache artifact looks like."""

import argparse
import sys

from routecache.cli._open import open_cache
from routecache.errors import InvalidCache


def run_info(args: argparse.Namespace) -> None:
    cache = open_cache(args.cache_file)
    path = cache.cache_file
    if path is None:
        print("Error: no cache file configured", file=sys.stderr)
        raise SystemExit(1)

    print(f"file:    {path}")
    if not path.is_file():
        print("status:  cold (no artifact)")
        return

    print(f"size:    {path.stat().st_size} bytes")
    try:
        table = cache.fetch_cache()
    except InvalidCache as exc:
        print(f"status:  invalid ({exc})")
        return
    print("status:  valid")
    print(f"routes:  {len(table)}")
