"""The bundled kelp transport: an ordered-layer ASGI application.

Mutable during setup (layers are appended in registration order).
Frozen at runtime when ``listen()`` or ``__call__()`` is first invoked.

Every request walks the layer stack from the top:

- middleware layers see every request and decide whether to call ``next``;
- route layers match on path only, never on method, and end the walk;
- error layers are skipped, and only run when an earlier layer raises.

An exception raised by a layer goes to the first error layer registered
after it. ``HTTPError`` bypasses error layers and becomes a plain
response with its status; so does a walk that falls off the bottom
(404).
"""

import inspect
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kelp._internal.asgi import Receive, Scope, Send
from kelp._internal.invoke import invoke
from kelp.errors import ConfigurationError, HTTPError, NotFound
from kelp.transport.negotiation import negotiate
from kelp.transport.patterns import PathPattern
from kelp.transport.protocol import ErrorHandler, Middleware, Next
from kelp.transport.request import Request
from kelp.transport.response import Response
from kelp.transport.sender import send_response
from kelp.transport.static import StaticFiles
from kelp.transport.views import ViewRenderer, create_renderer

logger = logging.getLogger("kelp.transport")


@dataclass(frozen=True, slots=True)
class Layer:
    """One entry in the layer stack."""

    kind: str  # "middleware" | "route" | "error"
    handler: Callable[..., Any]
    pattern: PathPattern | None = None


class App:
    """An ASGI application assembled from ordered layers.

    Usage::

        app = App()
        app.use(request_logger)
        app.add_route("/users/{id:int}", show_user)
        app.add_error_handler(on_error)
        app.listen(3000)

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread snapshots the stack, even if
        several ASGI workers receive their first request at once.
    """

    __slots__ = ("_freeze_lock", "_frozen", "_layers", "_stack", "_views")

    def __init__(self) -> None:
        self._layers: list[Layer] = []
        self._views: ViewRenderer | None = None
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._stack: tuple[Layer, ...] = ()

    # -- Registration --

    def use(self, middleware: Middleware) -> None:
        """Append a middleware that sees every request."""
        self._check_not_frozen()
        self._layers.append(Layer("middleware", middleware))

    def add_route(self, path: str, *layers: Callable[..., Any]) -> None:
        """Append a rule answering every method on *path*.

        All but the last of *layers* are middleware; the last one is the
        endpoint. The first rule whose pattern matches ends the walk, so a
        later rule with the same pattern is never reached.
        """
        self._check_not_frozen()
        if not layers:
            msg = f"add_route({path!r}) needs at least an endpoint."
            raise ConfigurationError(msg)
        pattern = PathPattern(path)
        self._layers.append(Layer("route", self._chain(layers), pattern))

    def add_error_handler(self, handler: ErrorHandler) -> None:
        """Append an error handler for exceptions raised by earlier layers.

        Handlers may accept ``(request, exc)``, ``(request)``, or nothing.
        """
        self._check_not_frozen()
        self._layers.append(Layer("error", handler))

    def serve_static(self, directory: str | Path) -> None:
        """Serve files from *directory* at the site root."""
        self.use(StaticFiles(directory))

    def set_view_engine(self, engine: str, directory: str | Path) -> None:
        """Render ``Template`` return values with *engine* from *directory*."""
        self._check_not_frozen()
        self._views = create_renderer(engine, directory)

    # -- Introspection --

    @property
    def layers(self) -> tuple[Layer, ...]:
        """The registered layers, in order."""
        return tuple(self._layers)

    @property
    def route_paths(self) -> tuple[str, ...]:
        """Patterns of every route layer, in registration order."""
        return tuple(layer.pattern.path for layer in self._layers if layer.pattern is not None)

    @property
    def views(self) -> ViewRenderer | None:
        """The configured view renderer, if any."""
        return self._views

    # -- Server --

    def listen(self, port: int, host: str | None = None) -> None:
        """Freeze the app and serve it with pounce. Blocks."""
        from kelp.transport.server import run_server

        self._ensure_frozen()
        run_server(self, host or "127.0.0.1", port)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        self._ensure_frozen()
        request = Request.from_asgi(scope, receive)
        try:
            response = await self._walk(request, 0)
        except HTTPError as exc:
            logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)
            response = Response(body=exc.detail or str(exc.status), status=exc.status)
            for name, value in exc.headers:
                response = response.with_header(name, value)
        await send_response(response, send, head=request.method == "HEAD")

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        self._ensure_frozen()
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Dispatch --

    async def _walk(self, request: Request, start: int) -> Response:
        """Run the first applicable layer at or after *start*."""
        stack = self._stack
        for index in range(start, len(stack)):
            layer = stack[index]
            if layer.kind == "error":
                continue

            current = request
            if layer.pattern is not None:
                params = layer.pattern.match(request.path)
                if params is None:
                    continue
                current = request.replace(path_params=params)

            async def next_layer(req: Request, _after: int = index + 1) -> Response:
                return await self._walk(req, _after)

            try:
                result = await invoke(layer.handler, current, next_layer)
                return negotiate(result, views=self._views)
            except HTTPError:
                raise
            except Exception as exc:
                return await self._handle_error(current, exc, index + 1)

        raise NotFound(f"No layer answered {request.method} {request.path!r}")

    async def _handle_error(self, request: Request, exc: Exception, start: int) -> Response:
        """Hand *exc* to the first error layer at or after *start*."""
        stack = self._stack
        for index in range(start, len(stack)):
            layer = stack[index]
            if layer.kind != "error":
                continue
            try:
                result = await _call_error_handler(layer.handler, request, exc)
                return negotiate(result, views=self._views)
            except HTTPError:
                raise
            except Exception as handler_exc:
                exc = handler_exc

        logger.error(
            "500 %s %s",
            request.method,
            request.path,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return Response(body="Internal Server Error", status=500)

    def _chain(self, layers: tuple[Callable[..., Any], ...]) -> Callable[..., Any]:
        """Compose route middleware and an endpoint into one terminal layer."""
        *middleware, endpoint = layers

        async def run(request: Request, _outer: Next) -> Response:
            async def call(position: int, req: Request) -> Response:
                if position == len(middleware):
                    return negotiate(await invoke(endpoint, req), views=self._views)

                async def next_in_route(r: Request, _pos: int = position + 1) -> Response:
                    return await call(_pos, r)

                result = await invoke(middleware[position], req, next_in_route)
                return negotiate(result, views=self._views)

            return await call(0, request)

        return run

    # -- Internal --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._stack = tuple(self._layers)
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register layers before calling listen()."
            )
            raise ConfigurationError(msg)


async def _call_error_handler(
    handler: ErrorHandler,
    request: Request,
    exc: Exception,
) -> Any:
    """Call *handler* with as many of ``(request, exc)`` as it accepts."""
    try:
        params = list(inspect.signature(handler).parameters.values())
    except (TypeError, ValueError):
        return await invoke(handler, request, exc)

    positional = [
        p for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    if any(p.kind == p.VAR_POSITIONAL for p in params) or len(positional) >= 2:
        return await invoke(handler, request, exc)
    if len(positional) == 1:
        return await invoke(handler, request)
    return await invoke(handler)
