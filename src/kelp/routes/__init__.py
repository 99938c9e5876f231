"""Route files: discovery, validation, and registration."""

from kelp.routes.descriptor import HTTP_METHODS, RouteDescriptor
from kelp.routes.discovery import discover_route_files, load_route_module, load_routes
from kelp.routes.manifest import RouteManifest
from kelp.routes.registrar import (
    MethodGuard,
    RouteOutcome,
    bind_route,
    register_routes,
    should_bind,
)
from kelp.routes.validation import validate_route

__all__ = [
    "HTTP_METHODS",
    "MethodGuard",
    "RouteDescriptor",
    "RouteManifest",
    "RouteOutcome",
    "bind_route",
    "discover_route_files",
    "load_route_module",
    "load_routes",
    "register_routes",
    "should_bind",
    "validate_route",
]
