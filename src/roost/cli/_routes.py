"""``roost routes``: print the route table."""

import argparse
import sys

from roost.cli._resolve import resolve_app


def run_routes(args: argparse.Namespace) -> None:
    """Print METHOD, PATTERN, TARGET and MIDDLEWARE for every route."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = app.router.routes
    if not routes:
        print("No routes registered.")
        return

    rows = [
        (r.method, f"/{r.pattern}", r.target, ", ".join(r.middleware) or "-")
        for r in routes
    ]
    headers = ("METHOD", "PATTERN", "TARGET", "MIDDLEWARE")
    widths = [max(len(h), *(len(row[i]) for row in rows)) for i, h in enumerate(headers)]
    fmt = "  ".join(f"{{:<{w}}}" for w in widths[:-1]) + "  {}"

    print(fmt.format(*headers))
    print("-" * min(sum(widths) + 2 * (len(widths) - 1), 100))
    for row in rows:
        print(fmt.format(*row))
