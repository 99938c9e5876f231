"""Content negotiation — maps handler return values to Response objects.

isinstance-based dispatch, no magic, fully predictable.
"""

from __future__ import annotations

import json as json_module
from typing import TYPE_CHECKING, Any

from kelp.errors import ConfigurationError
from kelp.transport.response import Response, Template

if TYPE_CHECKING:
    from kelp.transport.views import ViewRenderer


def negotiate(value: Any, *, views: ViewRenderer | None = None) -> Response:
    """Convert a handler's return value to a Response.

    Dispatch order:

    1. ``Response``         -> pass through
    2. ``Template``         -> render with the view engine
    3. ``str``              -> 200, text/html
    4. ``bytes``            -> 200, application/octet-stream
    5. ``dict`` / ``list``  -> 200, application/json
    6. ``None``             -> 204, empty body
    7. ``(value, int)``     -> negotiate value, override status
    """
    match value:
        case Response():
            return value
        case Template():
            if views is None:
                msg = (
                    f"Cannot render template {value.name!r}: no view engine is "
                    "configured. Set the view_engine option and create the "
                    "views directory."
                )
                raise ConfigurationError(msg)
            return Response(body=views.render(value.name, value.context))
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response(
                body=json_module.dumps(value, default=str),
                content_type="application/json",
            )
        case None:
            return Response(body="", status=204)
        case (inner, int() as status):
            return negotiate(inner, views=views).with_status(status)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. Return a "
                "Response, Template, str, bytes, dict, list, or (value, status)."
            )
            raise TypeError(msg)
