"""Routecache CLI — inspect and invalidate route cache artifacts.

Entry point registered as ``routecache`` in ``pyproject.toml``::

    [project.scripts]
    routecache = "routecache.cli:main"

Deployment hooks call ``routecache invalidate var/routes.json`` after
shipping new routes so the next boot rebuilds the cache.
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``routecache`` command."""
    parser = argparse.ArgumentParser(
        prog="routecache",
        description="routecache — file-backed cache for compiled routes.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- routecache info --------------------------------------------------
    info_parser = subparsers.add_parser("info", help="Show cache file status")
    info_parser.add_argument("cache_file", help="Path to the cache artifact")

    # -- routecache routes ------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List cached routes")
    routes_parser.add_argument("cache_file", help="Path to the cache artifact")

    # -- routecache check -------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate the cache artifact")
    check_parser.add_argument("cache_file", help="Path to the cache artifact")

    # -- routecache invalidate --------------------------------------------
    invalidate_parser = subparsers.add_parser(
        "invalidate", help="Delete the cache artifact to force a rebuild"
    )
    invalidate_parser.add_argument("cache_file", help="Path to the cache artifact")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "info":
        from routecache.cli._info import run_info

        run_info(args)
    elif args.command == "routes":
        from routecache.cli._routes import run_routes

        run_routes(args)
    elif args.command == "check":
        from routecache.cli._check import run_check

        run_check(args)
    elif args.command == "invalidate":
        from routecache.cli._invalidate import run_invalidate

        run_invalidate(args)
