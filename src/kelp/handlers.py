"""Built-in handlers and middleware.

The default 404, 405 and 500 pages, the placeholder for routes without a
handler, and the middleware that stamps headers on every response.

The defaults are module-level functions or frozen dataclasses, so two
resolutions of the same options compare equal.
"""

import logging
from dataclasses import dataclass

from kelp.config import POWERED_BY_HEADER, POWERED_BY_VALUE
from kelp.transport.protocol import Next
from kelp.transport.request import Request
from kelp.transport.response import Response

logger = logging.getLogger("kelp.transport")

NOT_FOUND_BODY = """
<h1>404 - Not Found</h1>
<p>This route could not be found on the server. Please double-check your URL and path route option (if you are a webmaster).</p>
"""

SERVER_ERROR_BODY = """
<h1>500 - Internal Server Error</h1>
<p>While processing your request, the server encountered an error. This is likely an issue with the application. Please see your server console for more information.</p>
"""

METHOD_NOT_ALLOWED_BODY = """
<h1>405 - Method not Allowed</h1>
<p>This route is not configured to receive requests with the method of your request.</p>
"""

ROUTE_NOT_CONFIGURED_BODY = """
<h1>Route not Configured</h1>
<p>This route hasn't been configured yet! Make sure the route file has a handler set. If you do not administrate this website, please contact the owner.</p>
"""


@dataclass(frozen=True, slots=True)
class NotFoundPage:
    """Default not-found handler. Logs each miss in development."""

    environment: str = "development"

    def __call__(self, request: Request) -> Response:
        if self.environment == "development":
            logger.warning("404: %s %s", request.method, request.path)
        return Response(body=NOT_FOUND_BODY, status=404)


@dataclass(frozen=True, slots=True)
class ErrorPage:
    """Default error handler. Logs the exception and answers 500."""

    def __call__(self, request: Request, exc: Exception) -> Response:
        logger.error(
            "Unhandled error on %s %s",
            request.method,
            request.path,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return Response(body=SERVER_ERROR_BODY, status=500)


def method_not_allowed_page(request: Request) -> Response:
    """Default method-not-allowed handler."""
    return Response(body=METHOD_NOT_ALLOWED_BODY, status=405)


def route_not_configured(request: Request) -> Response:
    """Placeholder handler for route files that define none."""
    return Response(body=ROUTE_NOT_CONFIGURED_BODY)


async def passthrough(request: Request, next: Next) -> Response:
    """Default route middleware: hand the request straight on."""
    return await next(request)


class HeaderInjector:
    """Middleware that sets ``X-Powered-By`` and the configured headers.

    A configured header the response already carries is left as the
    handler set it. ``X-Powered-By`` is always overwritten.

    Usage::

        app.use(HeaderInjector((("X-Frame-Options", "DENY"),)))
    """

    __slots__ = ("_headers",)

    def __init__(self, headers: tuple[tuple[str, str], ...] = ()) -> None:
        self._headers = headers

    async def __call__(self, request: Request, next: Next) -> Response:
        response = await next(request)
        for name, value in self._headers:
            if response.header(name) is None:
                response = response.with_header(name, value)
        return response.with_header(POWERED_BY_HEADER, POWERED_BY_VALUE)
