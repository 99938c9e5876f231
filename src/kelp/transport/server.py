"""Serve an App with pounce.

Pounce's ``run()`` takes an import string, but ``listen()`` has a live
App object, so ``pounce.Server`` is used directly with the ASGI callable.
pounce is an optional dependency (``pip install kelp[server]``); any
other ASGI server can serve the App object too.
"""

from __future__ import annotations

import logging

from kelp.errors import ConfigurationError

logger = logging.getLogger("kelp.transport")


def run_server(app: object, host: str, port: int) -> None:
    """Start a single-worker pounce server and block until it stops."""
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError as exc:
        msg = (
            "Serving requires the pounce ASGI server. Install it with: "
            "pip install kelp[server], or serve the app with any ASGI server."
        )
        raise ConfigurationError(msg) from exc

    config = ServerConfig(host=host, port=port, workers=1)
    server = Server(config, app)
    logger.info("Server started on port %d", port)
    server.run()
