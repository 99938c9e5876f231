"""Kelp — filesystem routes and middleware checkpoints for an ASGI app.

Drop route files into a directory, point kelp at it, and it wires them
onto the app with static files, views, body parsing, and error pages.

Basic usage::

    from kelp import App, kelpify

    app = App()
    kelpify(app, {"routes_directory": "routes", "port": 8080})

A route file::

    # routes/hello.py
    method = "GET"
    path = "/hello"

    def handler(request):
        return "<h1>Hello!</h1>"

Templates (``pip install kelp[jinja2]`` or ``kelp[kida]``)::

    kelpify(app, {"view_engine": "jinja2", "views_directory": "views"})
"""

__version__ = "0.1.0-dev"
__all__ = [
    "App",
    "BootstrapError",
    "BootstrapResult",
    "ConfigurationError",
    "HTTPError",
    "KelpConfig",
    "KelpError",
    "Middleware",
    "MiddlewareCheckpoints",
    "Next",
    "Request",
    "Response",
    "RouteDescriptor",
    "RouteManifest",
    "Template",
    "Transport",
    "bootstrap",
    "kelpify",
    "resolve_options",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import kelp`` fast while providing a clean top-level API.
    """
    if name in ("App", "Middleware", "Next", "Request", "Response", "Template", "Transport"):
        from kelp import transport as _transport

        return getattr(_transport, name)

    if name in ("BootstrapResult", "bootstrap", "kelpify"):
        from kelp import orchestrator as _orchestrator

        return getattr(_orchestrator, name)

    if name in ("KelpConfig", "MiddlewareCheckpoints"):
        from kelp import config as _config

        return getattr(_config, name)

    if name == "resolve_options":
        from kelp.options import resolve_options

        return resolve_options

    if name in ("RouteDescriptor", "RouteManifest"):
        from kelp import routes as _routes

        return getattr(_routes, name)

    if name in ("BootstrapError", "ConfigurationError", "HTTPError", "KelpError"):
        from kelp import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
