"""What handlers return.

A :class:`Response` is immutable; every ``with_*`` method hands back a
changed copy. Handlers may instead return a :class:`Template` for the
configured view engine, or a plain value that content negotiation turns
into a response.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    # header names keep the case they were set with; lookups ignore it
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    def with_header(self, name: str, value: str) -> Response:
        """Set *name* to *value*, dropping any earlier value for that name."""
        return self.with_headers({name: value})

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Set every header in *headers* in one copy."""
        replaced = {name.lower() for name in headers}
        kept = [(n, v) for n, v in self.headers if n.lower() not in replaced]
        return replace(self, headers=(*kept, *headers.items()))

    def header(self, name: str) -> str | None:
        """Value of header *name*, ignoring case; None when unset."""
        wanted = name.lower()
        return next((v for n, v in self.headers if n.lower() == wanted), None)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body


@dataclass(frozen=True, slots=True, init=False)
class Template:
    """A view to render: ``Template("users/show.html", user=user)``."""

    name: str
    context: dict[str, Any] = field(default_factory=dict)

    def __init__(self, name: str, /, **context: Any) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "context", context)
