"""Checkpoint middleware injection.

Each checkpoint is a named point in the bootstrap sequence where one
user middleware may be appended to the transport. Because layers run in
registration order, a middleware at ``before_route_load`` sees requests
before any route does, and one at ``after_error_register`` only sees
requests nothing earlier answered.
"""

import logging

from kelp.config import MiddlewareCheckpoints
from kelp.transport.protocol import Transport

logger = logging.getLogger("kelp.bootstrap")


def inject_checkpoint(app: Transport, checkpoints: MiddlewareCheckpoints, name: str) -> bool:
    """Append the middleware in slot *name* to *app*, if there is one.

    Returns True when a middleware was appended.

    Raises:
        ValueError: *name* is not a checkpoint.
    """
    middleware = checkpoints.get(name)
    if middleware is None:
        return False
    logger.debug("Checkpoint %s: %r", name, middleware)
    app.use(middleware)
    return True
