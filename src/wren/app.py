"""Wren application class.

Mutable during setup (route registration, lifecycle hooks).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import inspect
import logging
import re
import threading
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

from kida import Environment

from wren._internal.asgi import Receive, Scope, Send
from wren.config import AppConfig
from wren.errors import ConfigurationError
from wren.routing.route import METHODS, Route
from wren.routing.router import Router
from wren.server.handler import handle_request
from wren.templating.integration import create_environment

logger = logging.getLogger("wren.app")

type Handler = Callable[..., Any]
type PathArg = str | re.Pattern[str]


class App:
    """The wren application.

    Mutable during setup (route registration, hooks).
    Frozen at runtime when ``app.run()`` or ``__call__()`` is first invoked.

    Handlers take ``(request, response, params)`` and return the body,
    a function that will call a continuation with the body, or ``None``
    after arranging completion (typically ``response.render(...)``)::

        app = App()

        @app.get("/hello/:name")
        def hello(request, response, params):
            return f"Hello, {params['name']}!"

    Thread safety:
        The setup phase is single-threaded. The freeze transition uses a
        Lock + double-check so exactly one caller compiles the route table.
    """

    __slots__ = (
        "_custom_kida_env",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_pending_routes",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        routes: Iterable[Mapping[str, Any]] | None = None,
        kida_env: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[Route] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._custom_kida_env: Environment | None = kida_env

        # Compiled state, set during _freeze()
        self._router: Router | None = None
        self._kida_env: Environment | None = None

        if routes is not None:
            self.add_routes(routes)

    # -- Route registration --

    def add_route(
        self,
        method: str | None,
        path: PathArg,
        handler: Handler,
        *,
        content_type: str | None = None,
    ) -> Route:
        """Register *handler* for *method* and *path*.

        *path* is a literal string, a string with ``:name`` placeholders,
        or a compiled regular expression. The path is compiled here, once.
        """
        self._check_not_frozen()
        method = (method or "GET").upper()
        if method not in METHODS:
            allowed = ", ".join(sorted(METHODS))
            msg = f"Unsupported method {method!r}. Use one of: {allowed}"
            raise ConfigurationError(msg)
        if isinstance(path, str) and not path:
            msg = "Route path must not be empty."
            raise ConfigurationError(msg)
        if not callable(handler):
            msg = f"Handler for {method} {path!r} is not callable."
            raise ConfigurationError(msg)

        route = Route.create(method, path, handler, content_type)
        self._pending_routes.append(route)
        return route

    def add_routes(self, routes: Iterable[Mapping[str, Any]]) -> None:
        """Register a batch of route configurations.

        Each mapping has ``path`` (or ``url``), ``handler`` (or ``body``),
        and optional ``method`` (or ``type``) and ``content_type``::

            app.add_routes([
                {"method": "GET", "path": "/hello/:and/:junk", "handler": hello},
                {"type": "POST", "url": "/hello/:and/:junk", "body": greet},
            ])
        """
        for config in routes:
            path = config.get("path", config.get("url"))
            handler = config.get("handler", config.get("body"))
            if path is None or handler is None:
                msg = f"Route configuration needs a path and a handler: {dict(config)!r}"
                raise ConfigurationError(msg)
            self.add_route(
                config.get("method", config.get("type")),
                path,
                handler,
                content_type=config.get("content_type"),
            )

    def route(
        self,
        path: PathArg,
        *,
        method: str = "GET",
        content_type: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: Literal path, ``:name`` placeholder path, or compiled regex.
            method: One of GET, POST, PUT, DELETE. Defaults to GET.
            content_type: Content type applied when the handler sets none.
                Defaults to ``text/html``.
        """

        def decorator(func: Handler) -> Handler:
            self.add_route(method, path, func, content_type=content_type)
            return func

        return decorator

    def get(self, path: PathArg, *, content_type: str | None = None) -> Callable[[Handler], Handler]:
        return self.route(path, method="GET", content_type=content_type)

    def post(self, path: PathArg, *, content_type: str | None = None) -> Callable[[Handler], Handler]:
        return self.route(path, method="POST", content_type=content_type)

    def put(self, path: PathArg, *, content_type: str | None = None) -> Callable[[Handler], Handler]:
        return self.route(path, method="PUT", content_type=content_type)

    def delete(self, path: PathArg, *, content_type: str | None = None) -> Callable[[Handler], Handler]:
        return self.route(path, method="DELETE", content_type=content_type)

    @property
    def routes(self) -> tuple[Route, ...]:
        """Routes registered so far, in registration order."""
        return tuple(self._pending_routes)

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start serving on *host*:*port* (defaults from ``AppConfig``).

        Compiles the app (freezing routes and templates) before the
        first connection is accepted. Logging is configured from
        ``config.log_level`` unless the root logger already has handlers.
        """
        self._ensure_frozen()

        from wren.cli import configure_logging
        from wren.server.runner import run_server

        configure_logging(self.config.log_level)

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the request handler pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()

        assert self._router is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            kida_env=self._kida_env,
            completion_timeout=self.config.completion_timeout,
            access_log=self.config.access_log,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before first HTTP request), then
        runs registered startup/shutdown hooks and signals completion
        back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self._run_hooks(self._startup_hooks)
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send(
                        {
                            "type": "lifespan.startup.failed",
                            "message": str(exc),
                        }
                    )
                    return

            elif msg_type == "lifespan.shutdown":
                await self._run_hooks(self._shutdown_hooks)
                await send({"type": "lifespan.shutdown.complete"})
                return

    @staticmethod
    async def _run_hooks(hooks: list[Callable[..., Any]]) -> None:
        for hook in hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        # 1. Compile route table
        router = Router()
        for route in self._pending_routes:
            router.add(route)
        router.compile()
        self._router = router

        # 2. Initialize kida environment (only when there is a template dir)
        if self._custom_kida_env is not None:
            self._kida_env = self._custom_kida_env
        elif Path(self.config.template_dir).is_dir():
            self._kida_env = create_environment(self.config)
        else:
            logger.debug("No template directory at %s", self.config.template_dir)

        self._frozen = True
        logger.debug("App frozen with %d route(s)", len(router))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and hooks before calling app.run()."
            )
            raise RuntimeError(msg)
