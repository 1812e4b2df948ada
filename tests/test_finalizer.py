"""Tests for wren.server.finalizer — writing each response exactly once."""

import logging
from typing import Any

import pytest

from wren.errors import ResponseFinishedError
from wren.http.request import Request
from wren.http.response import ResponseContext
from wren.routing.route import Route
from wren.server.finalizer import encode_body, finish, not_found, server_error


def _handler(request, response, params) -> str:
    return "ok"


def _request(path: str = "/hello", query: bytes = b"") -> Request:
    async def receive() -> dict[str, Any]:
        return {"type": "http.disconnect"}

    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": query,
        "headers": [],
        "http_version": "1.1",
        "client": ("10.1.2.3", 4000),
    }
    return Request.from_asgi(scope, receive)


class _Recorder:
    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def status(self) -> int:
        return self.messages[0]["status"]

    @property
    def headers(self) -> dict[bytes, bytes]:
        return dict(self.messages[0]["headers"])

    @property
    def body(self) -> bytes:
        return self.messages[1]["body"]


class TestEncodeBody:
    def test_none(self) -> None:
        assert encode_body(None) == b""

    def test_bytes(self) -> None:
        assert encode_body(bytearray(b"raw")) == b"raw"

    def test_str(self) -> None:
        assert encode_body("héllo") == "héllo".encode()

    def test_other_values_stringified(self) -> None:
        assert encode_body(42) == b"42"


class TestFinish:
    async def test_defaults(self) -> None:
        send = _Recorder()
        route = Route.create("GET", "/hello", _handler)
        await finish(route, _request(), ResponseContext(), "Hello", send, access_log=False)
        assert send.status == 200
        assert send.headers[b"content-type"] == b"text/html"
        assert send.body == b"Hello"

    async def test_route_content_type(self) -> None:
        send = _Recorder()
        route = Route.create("GET", "/hello", _handler, "application/json")
        await finish(route, _request(), ResponseContext(), "{}", send, access_log=False)
        assert send.headers[b"content-type"] == b"application/json"

    async def test_handler_status_and_content_type_kept(self) -> None:
        send = _Recorder()
        response = ResponseContext()
        response.status = 201
        response.set_header("Content-Type", "text/csv")
        route = Route.create("GET", "/hello", _handler)
        await finish(route, _request(), response, "a,b", send, access_log=False)
        assert send.status == 201
        assert send.headers[b"content-type"] == b"text/csv"

    async def test_second_finish_raises_without_sending(self) -> None:
        send = _Recorder()
        response = ResponseContext()
        route = Route.create("GET", "/hello", _handler)
        await finish(route, _request(), response, "once", send, access_log=False)
        with pytest.raises(ResponseFinishedError):
            await finish(route, _request(), response, "twice", send, access_log=False)
        assert len(send.messages) == 2

    async def test_access_line_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="wren.access")
        send = _Recorder()
        route = Route.create("GET", "/hello", _handler)
        await finish(route, _request(query=b"x=1"), ResponseContext(), "Hello", send)
        [record] = [r for r in caplog.records if r.name == "wren.access"]
        message = record.getMessage()
        assert message.startswith("10.1.2.3 - [")
        assert message.endswith('"GET /hello?x=1 HTTP/1.1" 200 5')

    async def test_access_log_disabled(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="wren.access")
        route = Route.create("GET", "/hello", _handler)
        await finish(route, _request(), ResponseContext(), "x", _Recorder(), access_log=False)
        assert not [r for r in caplog.records if r.name == "wren.access"]


class TestErrorResponses:
    async def test_not_found(self) -> None:
        send = _Recorder()
        await not_found(_request(), ResponseContext(), send, access_log=False)
        assert send.status == 404
        assert send.headers[b"content-type"] == b"text/plain"
        assert send.body == b"Sorry, route not found"

    async def test_server_error_discards_handler_headers(self) -> None:
        send = _Recorder()
        response = ResponseContext()
        response.status = 301
        response.set_header("location", "/elsewhere")
        await server_error(_request(), response, send, access_log=False)
        assert send.status == 500
        assert b"location" not in send.headers
        assert send.body == b"Internal Server Error"
