"""Immutable HTTP request.

Frozen metadata with async body access, built from an ASGI scope.
Services receive this object; the dispatcher only needs its path and
method (see :class:`wren.dispatch.types.RouteRequest`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs

from wren._internal.asgi import Receive


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers) is frozen at creation. Body is read
    asynchronously via ``.body()`` / ``.text()`` / ``.json()``.
    """

    method: str
    path: str
    headers: tuple[tuple[str, str], ...] = ()
    query_string: str = ""
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: body cache (dict contents are mutable, the reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def header(self, name: str, default: str | None = None) -> str | None:
        """First value of header *name* (case-insensitive)."""
        lowered = name.lower()
        for key, value in self.headers:
            if key == lowered:
                return value
        return default

    @property
    def query(self) -> dict[str, list[str]]:
        """Query string parsed into lists of values."""
        return parse_qs(self.query_string, keep_blank_values=True)

    @property
    def content_type(self) -> str | None:
        return self.header("content-type")

    async def body(self) -> bytes:
        """Read the full request body (cached after the first call)."""
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks: list[bytes] = []
        if self._receive is not None:
            while True:
                message = await self._receive()
                chunk = message.get("body", b"")
                if chunk:
                    chunks.append(chunk)
                if not message.get("more_body", False):
                    break
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def text(self) -> str:
        raw = await self.body()
        return raw.decode("utf-8")

    async def json(self) -> Any:
        import json as json_module

        raw = await self.body()
        return json_module.loads(raw)

    @classmethod
    def from_asgi(cls, scope: dict[str, Any], receive: Receive | None = None) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        headers = tuple(
            (name.decode("latin-1").lower(), value.decode("latin-1"))
            for name, value in scope.get("headers", ())
        )
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope.get("path") or "/",
            headers=headers,
            query_string=scope.get("query_string", b"").decode("latin-1"),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
        )
