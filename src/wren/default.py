"""Process-scoped default app for quick scripts.

A thin convenience layer over one explicit ``App`` instance, for
scripts that don't want to build one::

    import wren

    wren.get("/hello-world/simple", lambda request, response, params: "Hello World!")
    wren.run()

The instance is created by ``init()`` (implicitly, on first
registration) and dropped by ``reset()``. Nothing in the core depends
on it.
"""

import logging
import re
from collections.abc import Callable
from typing import Any

from wren.app import App
from wren.config import AppConfig

logger = logging.getLogger("wren.app")

_app: App | None = None

type Handler = Callable[..., Any]


def init(config: AppConfig | None = None) -> App:
    """Create the default app if needed and return it.

    *config* only applies when the app is created by this call.
    """
    global _app
    if _app is None:
        _app = App(config)
    return _app


def default_app() -> App | None:
    """The default app, or ``None`` if nothing was registered yet."""
    return _app


def reset() -> None:
    """Drop the default app (tests, or before re-configuring a script)."""
    global _app
    _app = None


def _register(
    method: str,
    path: str | re.Pattern[str],
    handler: Handler | None,
    content_type: str | None,
) -> Any:
    app = init()
    if handler is not None:
        app.add_route(method, path, handler, content_type=content_type)
        return handler
    return app.route(path, method=method, content_type=content_type)


def get(path: str | re.Pattern[str], handler: Handler | None = None, *, content_type: str | None = None) -> Any:
    """Register a GET route. Call directly with a handler, or use as a decorator."""
    return _register("GET", path, handler, content_type)


def post(path: str | re.Pattern[str], handler: Handler | None = None, *, content_type: str | None = None) -> Any:
    """Register a POST route. Call directly with a handler, or use as a decorator."""
    return _register("POST", path, handler, content_type)


def put(path: str | re.Pattern[str], handler: Handler | None = None, *, content_type: str | None = None) -> Any:
    """Register a PUT route. Call directly with a handler, or use as a decorator."""
    return _register("PUT", path, handler, content_type)


def delete(path: str | re.Pattern[str], handler: Handler | None = None, *, content_type: str | None = None) -> Any:
    """Register a DELETE route. Call directly with a handler, or use as a decorator."""
    return _register("DELETE", path, handler, content_type)


def run(host: str | None = None, port: int | None = None) -> None:
    """Serve the default app. Logs and returns if no routes were registered."""
    if _app is None or not _app.routes:
        logger.warning("You didn't define any endpoints! Exiting now...")
        return
    _app.run(host, port)
