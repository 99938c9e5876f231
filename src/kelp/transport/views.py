"""View engine adapters.

Each supported ``view_engine`` value maps to one adapter that loads
templates from the views directory and renders them to a string. Engine
libraries are optional dependencies, imported only when selected::

    pip install kelp[kida]     # view_engine="kida"
    pip install kelp[jinja2]   # view_engine="jinja2"
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from kelp.errors import ConfigurationError, InvalidViewEngine


class ViewRenderer(Protocol):
    """Anything that renders a named template with a context."""

    engine: str

    def render(self, name: str, context: dict[str, Any]) -> str: ...


class KidaViews:
    """Render templates with kida."""

    __slots__ = ("_env", "directory", "engine")

    def __init__(self, directory: str | Path) -> None:
        try:
            from kida import Environment, FileSystemLoader
        except ImportError as exc:
            msg = (
                "view_engine='kida' requires the kida template engine. "
                "Install it with: pip install kelp[kida]"
            )
            raise ConfigurationError(msg) from exc

        self.engine = "kida"
        self.directory = Path(directory)
        self._env = Environment(
            loader=FileSystemLoader(str(self.directory)),
            autoescape=True,
        )

    def render(self, name: str, context: dict[str, Any]) -> str:
        template = self._env.get_template(name)
        return template.render(context)


class Jinja2Views:
    """Render templates with Jinja2."""

    __slots__ = ("_env", "directory", "engine")

    def __init__(self, directory: str | Path) -> None:
        try:
            from jinja2 import Environment, FileSystemLoader, select_autoescape
        except ImportError as exc:
            msg = (
                "view_engine='jinja2' requires Jinja2. "
                "Install it with: pip install kelp[jinja2]"
            )
            raise ConfigurationError(msg) from exc

        self.engine = "jinja2"
        self.directory = Path(directory)
        self._env = Environment(
            loader=FileSystemLoader(str(self.directory)),
            autoescape=select_autoescape(),
        )

    def render(self, name: str, context: dict[str, Any]) -> str:
        template = self._env.get_template(name)
        return template.render(context)


ENGINES: dict[str, Callable[[Path], ViewRenderer]] = {
    "kida": KidaViews,
    "jinja2": Jinja2Views,
}


def create_renderer(engine: str, directory: str | Path) -> ViewRenderer:
    """Build the adapter for *engine*, rooted at *directory*."""
    factory = ENGINES.get(engine)
    if factory is None:
        raise InvalidViewEngine(engine, tuple(ENGINES))
    return factory(Path(directory))
