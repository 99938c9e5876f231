"""Resolved kelp configuration.

KelpConfig is a frozen dataclass: built once by the option resolver and
threaded explicitly into every component. Nothing writes to it after
resolution, and nothing stores it in module-level state.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

# Supported values for ``view_engine``
VIEW_ENGINES: tuple[str, ...] = ("none", "kida", "jinja2")

# Supported values for ``environment``
ENVIRONMENTS: tuple[str, ...] = ("development", "production")

# Header kelp always sets; users cannot override it
POWERED_BY_HEADER = "X-Powered-By"
POWERED_BY_VALUE = "kelp"


@dataclass(frozen=True, slots=True)
class MiddlewareCheckpoints:
    """The nine named middleware slots, in firing order.

    Each slot holds ``None`` (no-op) or one middleware callable::

        MiddlewareCheckpoints(before_route_load=request_logger)
    """

    before_route_load: Callable[..., Any] | None = None
    after_route_load: Callable[..., Any] | None = None
    before_builtin_middleware_register: Callable[..., Any] | None = None
    after_builtin_middleware_register: Callable[..., Any] | None = None
    before_404_register: Callable[..., Any] | None = None
    after_404_register: Callable[..., Any] | None = None
    before_error_register: Callable[..., Any] | None = None
    after_error_register: Callable[..., Any] | None = None
    before_serve: Callable[..., Any] | None = None

    def get(self, name: str) -> Callable[..., Any] | None:
        """Return the middleware in slot *name*."""
        if name not in CHECKPOINT_NAMES:
            msg = f"Unknown middleware checkpoint: {name!r}"
            raise ValueError(msg)
        return getattr(self, name)

    def __iter__(self) -> Iterator[tuple[str, Callable[..., Any] | None]]:
        for name in CHECKPOINT_NAMES:
            yield name, getattr(self, name)


# Firing order is the declaration order above
CHECKPOINT_NAMES: tuple[str, ...] = tuple(f.name for f in fields(MiddlewareCheckpoints))


@dataclass(frozen=True, slots=True)
class KelpConfig:
    """Fully resolved bootstrap configuration. Immutable after creation.

    Produced by :func:`kelp.options.resolve_options`; build one directly
    only in tests. Directories are absolute paths.
    """

    routes_directory: Path
    public_directory: Path
    views_directory: Path
    not_found_handler: Callable[..., Any]
    error_handler: Callable[..., Any]
    method_not_allowed_handler: Callable[..., Any]
    view_engine: str = "none"
    middleware_checkpoints: MiddlewareCheckpoints = MiddlewareCheckpoints()
    always_added_headers: tuple[tuple[str, str], ...] = ()
    port: int = 3000
    environment: str = "development"
    autostart: bool = True

    @property
    def is_development(self) -> bool:
        """True when development-only routes and verbose logging are on."""
        return self.environment == "development"
