"""Bootstrap orchestration.

:func:`bootstrap` turns a bare transport into a configured one::

    1. resolve options, register static files, views, and headers
    2. checkpoint ``before_route_load``
    3. discover, validate, and register routes
    4. checkpoints ``after_route_load``, ``before_builtin_middleware_register``
    5. body and cookie parsing
    6. checkpoints ``after_builtin_middleware_register``, ``before_404_register``
    7. the not-found handler
    8. checkpoints ``after_404_register``, ``before_error_register``
    9. the error handler
   10. checkpoints ``after_error_register``, ``before_serve``

It never exits the process: a fatal error is captured in the returned
:class:`BootstrapResult`. :func:`kelpify` is the process entry point. It
runs :func:`bootstrap` on an event loop, exits with status 1 on failure,
and starts listening when ``autostart`` is on::

    from kelp import App, kelpify

    app = App()
    kelpify(app, {"port": 8080, "routes_directory": "routes"})
"""

import functools
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import anyio

from kelp._internal.invoke import invoke
from kelp.checkpoints import inject_checkpoint
from kelp.config import ENVIRONMENTS, KelpConfig
from kelp.errors import BootstrapError, ConfigurationError, KelpError
from kelp.handlers import HeaderInjector
from kelp.log import configure_logging
from kelp.options import register_assets, resolve_options
from kelp.routes.manifest import RouteManifest
from kelp.routes.registrar import RouteOutcome, register_routes
from kelp.transport.parsers import BodyParser, cookie_parser
from kelp.transport.protocol import Next, Transport
from kelp.transport.request import Request

logger = logging.getLogger("kelp.bootstrap")


@dataclass(frozen=True, slots=True)
class BootstrapResult:
    """Outcome of :func:`bootstrap`.

    On success ``config`` is set and ``error`` is None. On failure
    ``error`` holds the fatal error and nothing was served.
    """

    config: KelpConfig | None = None
    outcomes: tuple[RouteOutcome, ...] = ()
    warnings: tuple[str, ...] = ()
    error: KelpError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def bound_routes(self) -> tuple[RouteOutcome, ...]:
        return tuple(outcome for outcome in self.outcomes if outcome.bound)

    def exit_on_failure(self) -> None:
        """Raise ``SystemExit(1)`` if bootstrap failed."""
        if self.error is not None:
            raise SystemExit(1) from self.error


@dataclass(frozen=True, slots=True)
class NotFoundLayer:
    """Middleware that answers every request with the not-found handler.

    Registered after the routes, so it only sees requests no route took.
    """

    handler: Callable[..., Any]

    async def __call__(self, request: Request, next: Next) -> Any:
        return await invoke(self.handler, request)


async def bootstrap(
    app: Transport,
    options: Mapping[str, Any] | None = None,
    *,
    cwd: str | Path | None = None,
) -> BootstrapResult:
    """Configure *app* from *options*. Does not start serving."""
    logger.info("Starting kelp...")
    config: KelpConfig | None = None
    warnings: tuple[str, ...] = ()
    outcomes: list[RouteOutcome] = []

    try:
        resolved = resolve_options(options, cwd=cwd)
        config = resolved.config
        warnings = resolved.warnings
        for warning in warnings:
            logger.warning("%s", warning)

        register_assets(app, resolved)
        app.use(HeaderInjector(config.always_added_headers))
        logger.info("Initialized options. Loading routes...")
        logger.info(
            "Loading kelp with environment %s (dev enabled: %s)",
            config.environment,
            config.is_development,
        )

        checkpoints = config.middleware_checkpoints
        inject_checkpoint(app, checkpoints, "before_route_load")

        manifest = await RouteManifest.from_directory(config.routes_directory)
        outcomes = register_routes(app, manifest, config)

        inject_checkpoint(app, checkpoints, "after_route_load")
        inject_checkpoint(app, checkpoints, "before_builtin_middleware_register")

        app.use(BodyParser())
        app.use(cookie_parser)

        inject_checkpoint(app, checkpoints, "after_builtin_middleware_register")
        inject_checkpoint(app, checkpoints, "before_404_register")

        app.use(NotFoundLayer(config.not_found_handler))

        inject_checkpoint(app, checkpoints, "after_404_register")
        inject_checkpoint(app, checkpoints, "before_error_register")

        app.add_error_handler(config.error_handler)

        inject_checkpoint(app, checkpoints, "after_error_register")
        inject_checkpoint(app, checkpoints, "before_serve")
    except (BootstrapError, ConfigurationError) as exc:
        logger.error("%s", exc)
        return BootstrapResult(
            config=config,
            outcomes=tuple(outcomes),
            warnings=warnings,
            error=exc,
        )

    return BootstrapResult(config=config, outcomes=tuple(outcomes), warnings=warnings)


def kelpify(
    app: Transport,
    options: Mapping[str, Any] | None = None,
    *,
    cwd: str | Path | None = None,
    exit_on_error: bool = True,
) -> BootstrapResult:
    """Bootstrap *app* and, when ``autostart`` is on, serve it. Blocks.

    Raises:
        SystemExit: bootstrap failed and *exit_on_error* is True.
    """
    configure_logging(_requested_environment(options))

    result = anyio.run(functools.partial(bootstrap, app, options, cwd=cwd))
    if not result.ok:
        if exit_on_error:
            result.exit_on_failure()
        return result

    config = result.config
    assert config is not None
    if config.autostart:
        logger.info("Loaded routes. Starting server...")
        app.listen(config.port)
    else:
        logger.info("Kelp has finished initializing. Autostart is disabled.")
    return result


def _requested_environment(options: Mapping[str, Any] | None) -> str:
    environment = (options or {}).get("environment", "development")
    return environment if environment in ENVIRONMENTS else "development"
