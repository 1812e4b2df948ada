"""``wren routes`` — list registered routes.

Prints METHOD, PATH, CONTENT-TYPE, and handler name, in the order the
route table searches them.
"""

import argparse
import sys

from wren.cli._resolve import resolve_app


def run_routes(args: argparse.Namespace) -> None:
    """List registered routes for a wren app."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    app._ensure_frozen()
    router = app._router
    routes = router.routes if router is not None else []
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str, str]] = [
        (
            route.method,
            route.path,
            route.content_type,
            getattr(route.handler, "__name__", str(route.handler)),
        )
        for route in routes
    ]

    headers = ("METHOD", "PATH", "CONTENT-TYPE", "HANDLER")
    widths = [max(len(h), *(len(r[i]) for r in rows)) for i, h in enumerate(headers[:3])]
    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"
    print(fmt.format(*headers))
    print("-" * min(sum(widths) + 6 + max(len(r[3]) for r in rows), 80))
    for row in rows:
        print(fmt.format(*row))
