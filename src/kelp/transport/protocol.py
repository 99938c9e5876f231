"""Handler shapes and the Transport protocol.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

An endpoint takes only the request and returns a response value; an
error handler takes the request and the exception. Sync and async
callables are both accepted. No base classes: the transport checks the
shape, not the lineage.

``Transport`` is the capability object the bootstrap pipeline
configures. ``kelp.transport.App`` implements it; tests use recording
fakes.
"""

from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from kelp.transport.request import Request
from kelp.transport.response import Response

# The next layer in the stack
type Next = Callable[[Request], Awaitable[Response]]

# (request, exc) -> response value
type ErrorHandler = Callable[..., Any]


class Middleware(Protocol):
    """Protocol for kelp middleware.

    Accepts both functions and callable objects::

        async def timing(request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next(request)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...


@runtime_checkable
class Transport(Protocol):
    """What the bootstrap pipeline needs from an HTTP application object.

    Registration order is significant: layers run in the order they were
    added, the way they will be added by ``kelp.orchestrator``.
    """

    def serve_static(self, directory: str | Path) -> None:
        """Serve files from *directory* at the site root."""
        ...

    def set_view_engine(self, engine: str, directory: str | Path) -> None:
        """Render ``Template`` return values with *engine*."""
        ...

    def use(self, middleware: Middleware) -> None:
        """Append a middleware that sees every request."""
        ...

    def add_route(self, path: str, *layers: Callable[..., Any]) -> None:
        """Append a rule that matches *path* for every HTTP method.

        All but the last layer are middleware; the last is the endpoint.
        """
        ...

    def add_error_handler(self, handler: ErrorHandler) -> None:
        """Append an error handler for exceptions raised by earlier layers."""
        ...

    def listen(self, port: int, host: str | None = None) -> None:
        """Start serving. Blocks until the server shuts down."""
        ...
