"""roost CLI: route listing and route table validation.

Entry point registered as ``roost`` in ``pyproject.toml``::

    [project.scripts]
    roost = "roost.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``roost`` command."""
    parser = argparse.ArgumentParser(
        prog="roost",
        description="roost: a small MVC web framework.",
    )
    subparsers = parser.add_subparsers(dest="command")

    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument("app", help="Import string (e.g. myapp:app)")

    check_parser = subparsers.add_parser("check", help="Validate the route table")
    check_parser.add_argument("app", help="Import string (e.g. myapp:app)")
    check_parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings (overwritten or shadowed routes) as failures",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from roost.cli._routes import run_routes

        run_routes(args)
    elif args.command == "check":
        from roost.cli._check import run_check

        run_check(args)
