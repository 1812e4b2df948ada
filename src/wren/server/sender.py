"""ASGI response sending — translates a finished response into ASGI messages."""

from wren._internal.asgi import Send


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(
    status: int,
    headers: tuple[tuple[str, str], ...],
    body: bytes,
    send: Send,
) -> None:
    """Send status, headers, and a single body message."""
    if not _body_allowed(status):
        body = b""

    raw_headers: list[tuple[bytes, bytes]] = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in headers
        if name.lower() != "content-length"
    ]
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
