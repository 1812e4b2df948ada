"""Server runner.

Starts a pounce ASGI server with the live wren App object, single
worker, one event loop.
"""

import logging

logger = logging.getLogger("wren.server")


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    app_path: str | None = None,
) -> None:
    """Start a pounce server for the given wren App.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:app"``),
    but wren has a live ``App`` object. We use ``pounce.Server``
    directly with the ASGI callable.

    Args:
        app: ASGI callable (wren App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes.
        app_path: Optional ``"module:attribute"`` import string, so a
            reloading server can reimport the app.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
    )
    logger.info("Serving on http://%s:%s", host, port)
    server = Server(config, app, app_path=app_path)
    server.run()
