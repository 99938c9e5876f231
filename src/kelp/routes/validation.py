"""Route descriptor validation.

A route file is loaded into a plain mapping of the fields it defines;
:func:`validate_route` checks that mapping and fills the defaults.
"""

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from kelp.errors import InvalidRouteMethod, InvalidRouteShape
from kelp.handlers import passthrough, route_not_configured
from kelp.routes.descriptor import HTTP_METHODS, RouteDescriptor

# field -> (expected type name, check, default); no default means required
_REQUIRED = object()

ROUTE_FIELDS: dict[str, tuple[str, Callable[[Any], bool], Any]] = {
    "method": ("string", lambda v: isinstance(v, str), _REQUIRED),
    "path": ("string", lambda v: isinstance(v, str), _REQUIRED),
    "handler": ("function", callable, route_not_configured),
    "disabled": ("boolean", lambda v: isinstance(v, bool), False),
    "development_route": ("boolean", lambda v: isinstance(v, bool), False),
    "route_middleware": ("function", callable, passthrough),
}


def validate_route(
    raw: Mapping[str, Any],
    index: int,
    *,
    source: Path | None = None,
) -> RouteDescriptor:
    """Check *raw* against the route shape and return a descriptor.

    *index* is the route's position in discovery order; it and *source*
    appear in error messages.

    Raises:
        InvalidRouteShape: a required field is missing or a field has
            the wrong type.
        InvalidRouteMethod: ``method`` is not a supported HTTP method.
    """
    values: dict[str, Any] = {}
    for name, (expected, check, default) in ROUTE_FIELDS.items():
        value = raw.get(name, default)
        if value is _REQUIRED or not check(value):
            raise InvalidRouteShape(index, name, expected, source=source)
        values[name] = value

    method = values["method"].upper()
    if method not in HTTP_METHODS:
        raise InvalidRouteMethod(index, values["method"], HTTP_METHODS, source=source)
    values["method"] = method

    return RouteDescriptor(**values, source=source, index=index)
