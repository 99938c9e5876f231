"""Route descriptor: one validated route, every field defaulted."""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from kelp.handlers import passthrough, route_not_configured

# Methods a route file may declare
HTTP_METHODS: tuple[str, ...] = (
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "DELETE",
    "CONNECT",
    "OPTIONS",
    "TRACE",
    "PATCH",
)


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """A route ready for registration.

    ``source`` and ``index`` only feed diagnostics: the file the route
    came from and its position in discovery order.
    """

    method: str
    path: str
    handler: Callable[..., Any] = route_not_configured
    disabled: bool = False
    development_route: bool = False
    route_middleware: Callable[..., Any] = passthrough
    source: Path | None = field(default=None, compare=False)
    index: int = field(default=0, compare=False)

    @property
    def label(self) -> str:
        """``METHOD path``, as it appears in logs."""
        return f"{self.method} {self.path}"
