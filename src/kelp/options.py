"""Option resolution.

Merges user options with defaults, validates their types and the
filesystem prerequisites, and returns an immutable :class:`KelpConfig`.

Resolution only reads: it checks that directories exist but registers
nothing, so resolving the same raw options twice yields equal results.
Registering static serving and the view engine on the transport is a
separate step, :func:`register_assets`.

Usage::

    resolved = resolve_options({"port": 8080, "view_engine": "jinja2"})
    resolved.config.port        # 8080
    resolved.warnings           # ("The public directory does not exist...",)
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kelp.config import (
    CHECKPOINT_NAMES,
    ENVIRONMENTS,
    POWERED_BY_HEADER,
    VIEW_ENGINES,
    KelpConfig,
    MiddlewareCheckpoints,
)
from kelp.errors import (
    InvalidCheckpoint,
    InvalidOptionType,
    InvalidViewEngine,
    MissingRoutesDirectory,
)
from kelp.handlers import ErrorPage, NotFoundPage, method_not_allowed_page

if TYPE_CHECKING:
    from kelp.transport.protocol import Transport


# -- Type checks ---------------------------------------------------------------


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_path(value: Any) -> bool:
    return isinstance(value, (str, os.PathLike))


def _is_function(value: Any) -> bool:
    return callable(value)


def _is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def _is_number(value: Any) -> bool:
    # bool is an int subclass; True is not a port number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


# option name -> (expected type name, check)
OPTION_TYPES: dict[str, tuple[str, Callable[[Any], bool]]] = {
    "routes_directory": ("string", _is_path),
    "public_directory": ("string", _is_path),
    "views_directory": ("string", _is_path),
    "view_engine": ("string", _is_string),
    "not_found_handler": ("function", _is_function),
    "error_handler": ("function", _is_function),
    "method_not_allowed_handler": ("function", _is_function),
    "middleware_checkpoints": ("object", _is_object),
    "always_added_headers": ("object", _is_object),
    "port": ("number", _is_number),
    "environment": ("string", _is_string),
    "autostart": ("boolean", _is_boolean),
}


def default_options(cwd: str | Path | None = None, environment: str = "development") -> dict[str, Any]:
    """Return the default value of every recognized option.

    Directory defaults are relative to *cwd* (the process working
    directory when omitted). The default not-found handler logs misses
    only when *environment* is development.
    """
    base = Path(cwd) if cwd is not None else Path.cwd()
    return {
        "routes_directory": base / "routes",
        "public_directory": base / "public",
        "views_directory": base / "views",
        "view_engine": "none",
        "not_found_handler": NotFoundPage(environment),
        "error_handler": ErrorPage(),
        "method_not_allowed_handler": method_not_allowed_page,
        "middleware_checkpoints": {},
        "always_added_headers": {},
        "port": 3000,
        "environment": "development",
        "autostart": True,
    }


@dataclass(frozen=True, slots=True)
class ResolvedOptions:
    """Outcome of a successful resolution.

    ``serve_static`` and ``render_views`` record which optional assets
    :func:`register_assets` should wire up; ``warnings`` holds the
    non-fatal problems found along the way, in discovery order.
    """

    config: KelpConfig
    serve_static: bool
    render_views: bool
    warnings: tuple[str, ...] = ()


def resolve_options(
    raw: Mapping[str, Any] | None = None,
    *,
    cwd: str | Path | None = None,
) -> ResolvedOptions:
    """Merge *raw* with the defaults and validate the result.

    *raw* is never modified. Unrecognized keys are ignored.

    Raises:
        InvalidOptionType: an option has the wrong type or value.
        MissingRoutesDirectory: the routes directory does not exist.
        InvalidViewEngine: ``view_engine`` is not a supported engine.
        InvalidCheckpoint: a checkpoint slot holds a non-callable.
    """
    raw = dict(raw or {})
    base = Path(cwd) if cwd is not None else Path.cwd()

    # environment first: the default 404 handler depends on it
    environment = raw.get("environment", "development")
    _check_type("environment", environment)
    if environment not in ENVIRONMENTS:
        raise InvalidOptionType("environment", " or ".join(repr(e) for e in ENVIRONMENTS))

    options = default_options(base, environment)
    options.update({key: value for key, value in raw.items() if key in OPTION_TYPES})

    for key in OPTION_TYPES:
        _check_type(key, options[key])

    port = options["port"]
    if (isinstance(port, float) and not port.is_integer()) or not 0 <= port <= 65535:
        raise InvalidOptionType("port", "number between 0 and 65535")

    warnings: list[str] = []

    routes_directory = _absolute(options["routes_directory"], base)
    if not routes_directory.is_dir():
        raise MissingRoutesDirectory(routes_directory)

    public_directory = _absolute(options["public_directory"], base)
    serve_static = public_directory.is_dir()
    if not serve_static:
        warnings.append(
            "The public directory does not exist. Your static files will not be "
            "served. To configure a public directory, use the public_directory option."
        )

    view_engine = options["view_engine"]
    if view_engine not in VIEW_ENGINES:
        raise InvalidViewEngine(view_engine, VIEW_ENGINES)
    views_directory = _absolute(options["views_directory"], base)
    render_views = view_engine != "none" and views_directory.is_dir()
    if view_engine != "none" and not render_views:
        warnings.append(
            "The views directory does not exist but you have a view engine "
            "configured. To configure a views directory, use the views_directory option."
        )

    checkpoints = _resolve_checkpoints(options["middleware_checkpoints"], warnings)
    headers = _resolve_headers(options["always_added_headers"], warnings)

    config = KelpConfig(
        routes_directory=routes_directory,
        public_directory=public_directory,
        views_directory=views_directory,
        view_engine=view_engine,
        not_found_handler=options["not_found_handler"],
        error_handler=options["error_handler"],
        method_not_allowed_handler=options["method_not_allowed_handler"],
        middleware_checkpoints=checkpoints,
        always_added_headers=headers,
        port=int(port),
        environment=environment,
        autostart=options["autostart"],
    )
    return ResolvedOptions(
        config=config,
        serve_static=serve_static,
        render_views=render_views,
        warnings=tuple(warnings),
    )


def register_assets(app: Transport, resolved: ResolvedOptions) -> None:
    """Register static serving and the view engine, when available."""
    config = resolved.config
    if resolved.serve_static:
        app.serve_static(config.public_directory)
    if resolved.render_views:
        app.set_view_engine(config.view_engine, config.views_directory)


# -- Helpers -------------------------------------------------------------------


def _check_type(key: str, value: Any) -> None:
    expected, check = OPTION_TYPES[key]
    if not check(value):
        raise InvalidOptionType(key, expected)


def _absolute(value: str | os.PathLike[str], base: Path) -> Path:
    path = Path(value)
    if not path.is_absolute():
        path = base / path
    return path


def _resolve_checkpoints(slots: Mapping[str, Any], warnings: list[str]) -> MiddlewareCheckpoints:
    known: dict[str, Any] = {}
    for name, value in slots.items():
        if value is not None and not callable(value):
            raise InvalidCheckpoint(str(name))
        if name in CHECKPOINT_NAMES:
            known[name] = value
        else:
            warnings.append(f"Unknown middleware checkpoint {name!r} will never fire.")
    return MiddlewareCheckpoints(**known)


def _resolve_headers(headers: Mapping[str, Any], warnings: list[str]) -> tuple[tuple[str, str], ...]:
    resolved: list[tuple[str, str]] = []
    for name, value in headers.items():
        if not isinstance(name, str) or not isinstance(value, str):
            raise InvalidOptionType("always_added_headers", "mapping of header name to string")
        if name.lower() == POWERED_BY_HEADER.lower():
            warnings.append(f"The {POWERED_BY_HEADER} header cannot be overridden.")
            continue
        resolved.append((name, value))
    return tuple(resolved)
