"""Per-request response context.

Handlers receive a ``ResponseContext`` alongside the request and the
parameters. It carries what the handler decides about the response
(status, headers, a pending render) until the finalizer writes it.
Unlike ``Request`` it is mutable, and it lives for one request only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from wren.dispatch.results import Continuation, Deferred
from wren.errors import ResponseFinishedError

if TYPE_CHECKING:
    from kida import Environment

    from wren.dispatch.completion import Completion


class ResponseContext:
    """Mutable response state owned by one in-flight request.

    Usage inside a handler::

        def show(request, response, params):
            response.set_header("X-Item", params["id"])
            return response.render("item.html", id=params["id"])
    """

    __slots__ = ("_completion", "_finished", "_headers", "_kida_env", "_queued_render", "status")

    def __init__(self, kida_env: Environment | None = None) -> None:
        self.status: int | None = None
        self._headers: list[tuple[str, str]] = []
        self._kida_env = kida_env
        self._completion: Completion | None = None
        self._queued_render: Deferred | None = None
        self._finished = False

    # -- Headers --

    def set_header(self, name: str, value: str) -> None:
        """Set header *name*, replacing any existing value (case-insensitive)."""
        lower = name.lower()
        self._headers = [(n, v) for n, v in self._headers if n.lower() != lower]
        self._headers.append((name, value))

    def get_header(self, name: str) -> str | None:
        lower = name.lower()
        for n, v in self._headers:
            if n.lower() == lower:
                return v
        return None

    def remove_header(self, name: str) -> None:
        lower = name.lower()
        self._headers = [(n, v) for n, v in self._headers if n.lower() != lower]

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._headers)

    def reset(self) -> None:
        """Drop status and headers set so far (used before error responses)."""
        self.status = None
        self._headers = []

    # -- Helpers --

    def redirect(self, url: str, status: int = 301) -> None:
        """Set a redirect status and ``location`` header.

        Does not end the response: the handler still returns (or
        completes) a body as usual.
        """
        self.status = status
        self.set_header("location", url)

    def render(self, template: str, /, **context: Any) -> Deferred:
        """Render a kida template into the response body.

        Either return the result from the handler, or call this and
        return ``None``; the dispatcher starts the render in both cases,
        exactly once.
        """
        if self._kida_env is None:
            msg = "No template environment is configured for this response."
            raise RuntimeError(msg)

        from wren.templating.integration import render_to_string

        env = self._kida_env

        async def run(continuation: Continuation) -> None:
            continuation(await render_to_string(env, template, context))

        deferred = Deferred(run)
        if self._queued_render is None:
            self._queued_render = deferred
        return deferred

    @property
    def queued_render(self) -> Deferred | None:
        """The first render requested by the handler, if any."""
        return self._queued_render

    # -- Completion --

    def bind(self, completion: Completion) -> None:
        """Attach the request's completion hook. Called by the dispatcher."""
        self._completion = completion

    def complete(self, body: Any = None) -> None:
        """Complete the request out-of-band with *body*.

        For handlers that return ``None`` and produce their output later.
        Raises ``ResponseFinishedError`` if the request was already completed.
        """
        if self._completion is None:
            msg = "Response is not attached to an in-flight request."
            raise RuntimeError(msg)
        self._completion(body)

    @property
    def finished(self) -> bool:
        return self._finished

    def mark_finished(self) -> None:
        """Record that the response was written. A second call raises."""
        if self._finished:
            msg = "Response was already finalized."
            raise ResponseFinishedError(msg)
        self._finished = True
