"""The request object handed to every layer.

Immutable: layers that add information (path parameters, cookies, the
parsed body) pass a copy down the stack with :meth:`Request.replace`.
The body is read from the ASGI channel at most once; every copy of a
request shares the bytes once they have been read.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from kelp._internal.asgi import Receive, Scope
from kelp.transport.fields import Fields


@dataclass(frozen=True, slots=True)
class Request:
    """An HTTP request as seen by handlers and middleware.

    ``cookies`` and ``parsed_body`` stay empty until the built-in parsing
    middleware runs. Route handlers run before it and read the body
    themselves with ``await request.json()``.
    """

    method: str
    path: str
    headers: Fields = field(default_factory=lambda: Fields(fold_case=True))
    query: Fields = field(default_factory=Fields)
    query_string: str = ""
    client: tuple[str, int] | None = None
    path_params: Mapping[str, str] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)
    parsed_body: Any = None

    _receive: Receive | None = field(default=None, repr=False, compare=False)
    # one-slot list so replace() copies share the bytes once read
    _body: list[bytes] = field(default_factory=list, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Build a request from an ASGI ``http`` scope."""
        raw_query: bytes = scope.get("query_string", b"")
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Fields.from_asgi_headers(scope.get("headers", ())),
            query=Fields.from_query_string(raw_query),
            query_string=raw_query.decode("latin-1"),
            client=tuple(client) if client else None,
            _receive=receive,
        )

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Path plus query string, as requested."""
        return f"{self.path}?{self.query_string}" if self.query_string else self.path

    def replace(self, **changes: Any) -> Request:
        """Return a copy with *changes* applied."""
        return replace(self, **changes)

    async def body(self) -> bytes:
        """The full request body."""
        if not self._body:
            chunks: list[bytes] = []
            while self._receive is not None:
                message = await self._receive()
                chunks.append(message.get("body", b""))
                if not message.get("more_body", False):
                    break
            self._body.append(b"".join(chunks))
        return self._body[0]

    async def text(self) -> str:
        """The body decoded as UTF-8."""
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        """The body parsed as JSON."""
        return json_module.loads(await self.body())
