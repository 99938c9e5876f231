"""Route registration.

Filters descriptors by environment and binds the survivors to the
transport. Each route becomes one path rule that answers every method:
the descriptor's method reaches its handler, anything else reaches the
method-not-allowed handler.

Two routes whose paths match the same URLs never share a rule, even when
spelled differently (``/x`` and ``/x/``, ``/u/{id}`` and ``/u/{uid}``). The
first one bound answers every request to those URLs, so the second is
unreachable and a request using its method gets a 405 from the first.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from kelp._internal.invoke import invoke
from kelp.config import KelpConfig
from kelp.handlers import passthrough
from kelp.routes.descriptor import RouteDescriptor
from kelp.routes.manifest import RouteManifest
from kelp.transport.patterns import PathPattern
from kelp.transport.protocol import Transport
from kelp.transport.request import Request

logger = logging.getLogger("kelp.routes")


@dataclass(frozen=True, slots=True)
class RouteOutcome:
    """What the registrar did with one descriptor."""

    descriptor: RouteDescriptor
    bound: bool
    reason: str = ""


@dataclass(frozen=True, slots=True)
class MethodGuard:
    """Endpoint that runs the route handler only for the route's method."""

    method: str
    path: str
    handler: Callable[..., Any]
    method_not_allowed: Callable[..., Any]
    development: bool = False

    async def __call__(self, request: Request) -> Any:
        if request.method == self.method:
            return await invoke(self.handler, request)
        if self.development:
            logger.warning(
                "405: %s %s (expected %s)", request.method, request.path, self.method
            )
        return await invoke(self.method_not_allowed, request)


def should_bind(descriptor: RouteDescriptor, environment: str) -> bool:
    """Decide whether *descriptor* is registered in *environment*.

    Disabled routes never bind; development routes bind only in
    development.
    """
    if descriptor.disabled:
        return False
    return not (descriptor.development_route and environment != "development")


def bind_route(app: Transport, descriptor: RouteDescriptor, config: KelpConfig) -> None:
    """Register *descriptor* as one path rule on *app*."""
    guard = MethodGuard(
        method=descriptor.method,
        path=descriptor.path,
        handler=descriptor.handler,
        method_not_allowed=config.method_not_allowed_handler,
        development=config.is_development,
    )
    if descriptor.route_middleware is passthrough:
        app.add_route(descriptor.path, guard)
    else:
        app.add_route(descriptor.path, descriptor.route_middleware, guard)


def register_routes(
    app: Transport,
    manifest: RouteManifest,
    config: KelpConfig,
) -> list[RouteOutcome]:
    """Bind every eligible route in *manifest*, in order."""
    outcomes: list[RouteOutcome] = []
    # path shape -> first descriptor bound to it
    bound_shapes: dict[str, RouteDescriptor] = {}

    for descriptor in manifest:
        if not should_bind(descriptor, config.environment):
            reason = "disabled" if descriptor.disabled else "development route"
            logger.info("Skipped route: %s (%s)", descriptor.label, reason)
            outcomes.append(RouteOutcome(descriptor, bound=False, reason=reason))
            continue

        shape = PathPattern(descriptor.path).shape
        earlier = bound_shapes.get(shape)
        if earlier is not None:
            logger.warning(
                "Route %s is unreachable: %s was bound to the same path first.",
                descriptor.label,
                earlier.label,
            )
        else:
            bound_shapes[shape] = descriptor

        bind_route(app, descriptor, config)
        logger.info("Loaded route: %s", descriptor.label)
        outcomes.append(RouteOutcome(descriptor, bound=True))

    return outcomes
