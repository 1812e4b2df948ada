"""Response finalization — the single place a response is written.

Applies default status and content type, logs the access line, and
sends the body. Each ``ResponseContext`` can be finalized once; a
second attempt raises ``ResponseFinishedError`` before anything is
written.
"""

from typing import Any

from wren._internal.asgi import Send
from wren.http.request import Request
from wren.http.response import ResponseContext
from wren.routing.route import DEFAULT_CONTENT_TYPE, Route
from wren.server.access_log import access_logger, format_access_line
from wren.server.sender import send_response

NOT_FOUND_BODY = "Sorry, route not found"
SERVER_ERROR_BODY = "Internal Server Error"


def encode_body(body: Any) -> bytes:
    """Turn a handler's output into response bytes."""
    if body is None:
        return b""
    if isinstance(body, bytes | bytearray | memoryview):
        return bytes(body)
    return str(body).encode("utf-8")


async def finish(
    route: Route | None,
    request: Request,
    response: ResponseContext,
    body: Any,
    send: Send,
    *,
    access_log: bool = True,
) -> None:
    """Write *body* as the response to *request*, exactly once."""
    response.mark_finished()

    if response.status is None:
        response.status = 200
    if response.get_header("content-type") is None:
        content_type = route.content_type if route is not None else DEFAULT_CONTENT_TYPE
        response.set_header("Content-Type", content_type)

    payload = encode_body(body)

    if access_log:
        access_logger.info(
            format_access_line(
                request.client_host,
                request.method,
                request.target,
                request.http_version,
                response.status,
                len(payload),
            )
        )

    await send_response(response.status, response.headers, payload, send)


async def finish_plain(
    status: int,
    body: str,
    request: Request,
    response: ResponseContext,
    send: Send,
    *,
    access_log: bool = True,
) -> None:
    """Finalize with a fixed plain-text body, discarding handler headers."""
    response.reset()
    response.status = status
    response.set_header("Content-Type", "text/plain")
    await finish(None, request, response, body, send, access_log=access_log)


async def not_found(
    request: Request, response: ResponseContext, send: Send, *, access_log: bool = True
) -> None:
    await finish_plain(404, NOT_FOUND_BODY, request, response, send, access_log=access_log)


async def server_error(
    request: Request, response: ResponseContext, send: Send, *, access_log: bool = True
) -> None:
    await finish_plain(500, SERVER_ERROR_BODY, request, response, send, access_log=access_log)
