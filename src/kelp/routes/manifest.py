"""Route manifest: an ordered registry of route descriptors.

The registrar binds whatever a manifest holds, so routes can come from
a routes directory or be built in code::

    manifest = RouteManifest()
    manifest.add({"method": "GET", "path": "/", "handler": home})
    manifest.add(RouteDescriptor("POST", "/login", handler=login))
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any

from kelp.routes.descriptor import RouteDescriptor
from kelp.routes.discovery import load_routes
from kelp.routes.validation import validate_route


class RouteManifest:
    """Descriptors in insertion order."""

    __slots__ = ("_routes",)

    def __init__(self, routes: Iterable[RouteDescriptor] = ()) -> None:
        self._routes: list[RouteDescriptor] = list(routes)

    @classmethod
    async def from_directory(cls, root: str | Path) -> RouteManifest:
        """Build a manifest from the route files under *root*."""
        return cls(await load_routes(root))

    def add(self, route: RouteDescriptor | Mapping[str, Any]) -> RouteDescriptor:
        """Append *route*, validating it first when it is a raw mapping."""
        if not isinstance(route, RouteDescriptor):
            route = validate_route(route, len(self._routes))
        self._routes.append(route)
        return route

    def __iter__(self) -> Iterator[RouteDescriptor]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RouteManifest({len(self._routes)} routes)"
