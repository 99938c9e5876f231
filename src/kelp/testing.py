"""In-process client for exercising a kelp app over ASGI.

Requests never touch a socket: the client builds an ``http`` scope, feeds
the body through ``receive`` in one message, and folds the messages the
app sends back into an ordinary :class:`~kelp.transport.response.Response`.

Usage::

    async with TestClient(app) as client:
        response = await client.get("/users/1")
        assert response.status == 200
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from kelp._internal.asgi import Message, Scope
from kelp.transport.response import Response

DEFAULT_CONTENT_TYPE = "text/html; charset=utf-8"


def build_scope(method: str, target: str, headers: Mapping[str, str]) -> Scope:
    """Return an ASGI ``http`` scope for *method* on *target* (path plus query)."""
    path, _, query = target.partition("?")
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method.upper(),
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query.encode("latin-1"),
        "root_path": "",
        "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


def encode_body(
    body: bytes | None, json: Any, form: Mapping[str, str] | None
) -> tuple[bytes, dict[str, str]]:
    """Return the request bytes and any content-type header they imply."""
    if json is not None:
        return json_module.dumps(json).encode("utf-8"), {"content-type": "application/json"}
    if form is not None:
        return urlencode(form).encode("utf-8"), {
            "content-type": "application/x-www-form-urlencoded"
        }
    return body or b"", {}


class _Exchange:
    """One request/response round trip on the ASGI channel."""

    __slots__ = ("_pending", "body", "headers", "status")

    def __init__(self, body: bytes) -> None:
        self._pending: list[Message] = [{"type": "http.request", "body": body, "more_body": False}]
        self.status = 200
        self.headers: list[tuple[bytes, bytes]] = []
        self.body = bytearray()

    async def receive(self) -> Message:
        if self._pending:
            return self._pending.pop()
        return {"type": "http.disconnect"}

    async def send(self, message: Message) -> None:
        kind = message["type"]
        if kind == "http.response.start":
            self.status = message["status"]
            self.headers = list(message.get("headers", ()))
        elif kind == "http.response.body":
            self.body += message.get("body", b"")

    def response(self) -> Response:
        content_type = DEFAULT_CONTENT_TYPE
        kept: list[tuple[str, str]] = []
        for raw_name, raw_value in self.headers:
            name, value = raw_name.decode("latin-1"), raw_value.decode("latin-1")
            if name == "content-type":
                content_type = value
            elif name != "content-length":
                kept.append((name, value))
        return Response(
            body=bytes(self.body),
            status=self.status,
            content_type=content_type,
            headers=tuple(kept),
        )


class TestClient:
    """Drive any ASGI callable, typically a kelp :class:`~kelp.transport.app.App`."""

    __test__ = False  # not a pytest test class
    __slots__ = ("app",)

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("GET", path, headers=headers)

    async def head(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("HEAD", path, headers=headers)

    async def delete(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("DELETE", path, headers=headers)

    async def post(self, path: str, **kwargs: Any) -> Response:
        """POST with optional ``body``, ``json`` or ``form`` keyword."""
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Response:
        return await self.request("PUT", path, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
        form: dict[str, str] | None = None,
    ) -> Response:
        """Send *method* to *path* and return the collected response.

        Explicit *headers* override the content type implied by *json*
        or *form*.
        """
        payload, implied = encode_body(body, json, form)
        exchange = _Exchange(payload)
        scope = build_scope(method, path, {**implied, **(headers or {})})
        await self.app(scope, exchange.receive, exchange.send)
        return exchange.response()
