"""Kelp exception hierarchy.

Shared across the option resolver, route pipeline, orchestrator, and the
bundled transport so every module raises and catches the same types.

Everything under ``BootstrapError`` is fatal at startup: the orchestrator
captures it into a ``BootstrapResult`` and ``kelpify()`` turns it into a
non-zero exit.
"""

from dataclasses import dataclass
from pathlib import Path


class KelpError(Exception):
    """Base for all kelp-specific errors."""


class ConfigurationError(KelpError):
    """Raised when the transport is used in a way it cannot honour.

    For example registering a layer after the app started serving, or
    returning a ``Template`` when no view engine was configured.
    """


class BootstrapError(KelpError):
    """Base for errors that halt bootstrap before serving begins."""


class InvalidOptionType(BootstrapError):
    """An option has the wrong type (or an out-of-range value)."""

    def __init__(self, key: str, expected: str) -> None:
        self.key = key
        self.expected = expected
        super().__init__(f"Invalid option: {key}. {key} must be of type {expected}.")


class MissingRoutesDirectory(BootstrapError):
    """The resolved routes directory does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Routes directory does not exist: {path}")


class InvalidViewEngine(BootstrapError):
    """``view_engine`` is not one of the supported engines."""

    def __init__(self, engine: str, supported: tuple[str, ...] = ()) -> None:
        self.engine = engine
        msg = f"Invalid view engine: {engine!r}."
        if supported:
            msg += f" Supported engines: {', '.join(supported)}."
        super().__init__(msg)


class InvalidCheckpoint(BootstrapError):
    """A middleware checkpoint slot holds something that is not callable."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Invalid middleware checkpoint: {name}. {name} must be a function."
        )


class InvalidRouteShape(BootstrapError):
    """A route descriptor is missing a field or a field has the wrong type."""

    def __init__(self, index: int, field: str, expected: str, *, source: Path | None = None) -> None:
        self.index = index
        self.field = field
        self.expected = expected
        self.source = source
        where = f" ({source})" if source is not None else ""
        super().__init__(f"Invalid route: {index}{where}. {field} must be of type {expected}.")


class InvalidRouteMethod(BootstrapError):
    """A route descriptor declares a method outside the supported set."""

    def __init__(
        self,
        index: int,
        method: str,
        allowed: tuple[str, ...] = (),
        *,
        source: Path | None = None,
    ) -> None:
        self.index = index
        self.method = method
        self.source = source
        where = f" ({source})" if source is not None else ""
        msg = f"Invalid route: {index}{where}. Method {method!r} is not supported."
        if allowed:
            msg += f" Method must be one of the following: {', '.join(allowed)}."
        super().__init__(msg)


class FilesystemDiscoveryFailure(BootstrapError):
    """Listing a directory under the routes tree failed."""

    def __init__(self, path: Path, reason: str = "") -> None:
        self.path = path
        msg = f"Could not read routes directory: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


@dataclass(frozen=True, slots=True)
class HTTPError(KelpError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers or middleware. The transport turns uncaught ones
    into a plain response with the matching status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — nothing in the layer stack answered the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)

