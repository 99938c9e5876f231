"""Shared fixtures: route trees on disk and a recording transport."""

import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest


class RecordingTransport:
    """Transport that records every registration call, in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.listened_on: int | None = None

    def serve_static(self, directory: str | Path) -> None:
        self.calls.append(("serve_static", Path(directory)))

    def set_view_engine(self, engine: str, directory: str | Path) -> None:
        self.calls.append(("set_view_engine", engine))

    def use(self, middleware: Any) -> None:
        self.calls.append(("use", middleware))

    def add_route(self, path: str, *layers: Any) -> None:
        self.calls.append(("add_route", (path, layers)))

    def add_error_handler(self, handler: Any) -> None:
        self.calls.append(("add_error_handler", handler))

    def listen(self, port: int, host: str | None = None) -> None:
        self.listened_on = port

    @property
    def used(self) -> list[Any]:
        return [arg for kind, arg in self.calls if kind == "use"]

    @property
    def route_paths(self) -> list[str]:
        return [arg[0] for kind, arg in self.calls if kind == "add_route"]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def routes_dir(tmp_path: Path) -> Path:
    routes = tmp_path / "routes"
    routes.mkdir()
    return routes


@pytest.fixture
def write_route(routes_dir: Path) -> Callable[..., Path]:
    """Write a route module under the routes directory.

    ``write_route("users/show.py", method="GET", path="/users")`` writes
    the given fields plus a handler returning *body*.
    """

    def write(relative: str, *, body: str = "ok", source: str | None = None, **fields: Any) -> Path:
        file = routes_dir / relative
        file.parent.mkdir(parents=True, exist_ok=True)
        if source is None:
            lines = [f"{name} = {value!r}" for name, value in fields.items()]
            lines += ["", "", "def handler(request):", f"    return {body!r}"]
            source = "\n".join(lines) + "\n"
        file.write_text(textwrap.dedent(source))
        return file

    return write
