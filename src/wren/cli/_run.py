"""``wren run`` — start the server for an app import string."""

import argparse
import sys

from wren.cli import configure_logging
from wren.cli._resolve import resolve_app


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and serve it; ``--host``/``--port`` override config."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    configure_logging(app.config.log_level)

    from wren.server.runner import run_server as _serve

    app._ensure_frozen()
    _serve(
        app,
        args.host or app.config.host,
        args.port or app.config.port,
        reload=app.config.debug,
        app_path=args.app,
    )
