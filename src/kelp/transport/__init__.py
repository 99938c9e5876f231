"""The HTTP application object kelp configures.

``Transport`` is the protocol the bootstrap pipeline depends on;
``App`` is the bundled ASGI implementation.
"""

from kelp.transport.app import App
from kelp.transport.protocol import Middleware, Next, Transport
from kelp.transport.request import Request
from kelp.transport.response import Response, Template

__all__ = [
    "App",
    "Middleware",
    "Next",
    "Request",
    "Response",
    "Template",
    "Transport",
]
