"""Logging setup for the ``kelp`` logger tree.

Modules log through named standard-library loggers (``kelp.bootstrap``,
``kelp.routes``, ``kelp.transport``). Verbosity follows the environment
mode: the startup narrative is INFO and only shows in development;
warnings and fatal errors show in every environment.
"""

import logging

_ROOT = "kelp"
_FORMAT = "KELP: %(message)s"


def configure_logging(environment: str) -> logging.Logger:
    """Set the ``kelp`` logger level for *environment*.

    Installs one stream handler the first time it is called, unless the
    application already attached its own handlers.
    """
    root = logging.getLogger(_ROOT)
    root.setLevel(logging.INFO if environment == "development" else logging.WARNING)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    return root
