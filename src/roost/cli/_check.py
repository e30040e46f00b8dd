"""``roost check``: validate the route table.

Exits with code 1 when errors are found.
"""

import argparse
import sys

from roost.cli._resolve import resolve_app


def run_check(args: argparse.Namespace) -> None:
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    result = app.check_routes()
    print(result.summary())
    if not result.ok or (args.strict and result.warnings):
        raise SystemExit(1)
