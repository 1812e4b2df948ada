"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any

from wren._internal.asgi import Receive


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is accessed asynchronously via ``.body()`` or ``.text()``.
    """

    method: str
    path: str
    query_string: bytes
    headers: tuple[tuple[bytes, bytes], ...]
    http_version: str
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Undecoded path as sent by the client, when the server reports it
    raw_path: bytes | None = None

    # Private: mutable cache for the buffered body
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def query(self) -> str:
        return self.query_string.decode("latin-1")

    @property
    def url(self) -> str:
        """Decoded path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query}"
        return self.path

    @property
    def target(self) -> str:
        """Request target as the client sent it: raw path plus query string.

        Falls back to the decoded path when the server gave no ``raw_path``.
        """
        path = self.raw_path.decode("latin-1") if self.raw_path else self.path
        if self.query_string:
            return f"{path}?{self.query}"
        return path

    @property
    def client_host(self) -> str:
        """Client address, or ``"-"`` when the server did not report one."""
        return self.client[0] if self.client else "-"

    @property
    def content_type(self) -> str | None:
        return self.header("content-type")

    @property
    def body_received(self) -> bool:
        """True once the body is buffered (read, or supplied by the transport)."""
        return "_body" in self._cache

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of header *name* (case-insensitive)."""
        key = name.lower().encode("latin-1")
        for raw_name, value in self.headers:
            if raw_name.lower() == key:
                return value.decode("latin-1")
        return default

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Chunks are appended in arrival order. The result is cached; the
        ASGI receive is consumed once.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: dict[str, Any],
        receive: Receive,
        *,
        body: bytes | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable.

        Pass *body* when the transport has already buffered the request
        body; the dispatcher then leaves it alone.
        """
        client = scope.get("client")
        request = cls(
            method=scope["method"].upper(),
            path=scope["path"],
            query_string=scope.get("query_string", b""),
            headers=tuple(scope.get("headers", ())),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
            raw_path=scope.get("raw_path"),
        )
        if body is not None:
            request._cache["_body"] = body
        return request
