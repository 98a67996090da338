"""``routecache invalidate`` — delete the artifact so the next boot rebuilds."""

import argparse

from routecache.cli._open import open_cache


def run_invalidate(args: argparse.Namespace) -> None:
    cache = open_cache(args.cache_file)
    path = cache.cache_file
    existed = path is not None and path.is_file()
    cache.invalidate_cache_file()
    if existed:
        print(f"Removed {path}")
    else:
        print(f"Nothing to remove at {args.cache_file}")
