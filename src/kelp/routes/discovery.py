"""Filesystem route discovery.

Walks the routes directory depth-first, pre-order, and loads every file
it finds as a route module. A route module defines its descriptor as
module-level names::

    # routes/users/show.py
    method = "GET"
    path = "/users/{id:int}"

    def handler(request):
        return {"id": request.path_params["id"]}

Entries whose names start with ``_`` or ``.`` (``__pycache__``,
``__init__.py``, editor swap files) are neither walked nor loaded.

Files are visited in directory-listing order (``os.scandir``), which is
not sorted and may differ between platforms and filesystems.
"""

import importlib.util
import os
from pathlib import Path
from typing import Any

import anyio

from kelp.errors import FilesystemDiscoveryFailure, InvalidRouteShape
from kelp.routes.descriptor import RouteDescriptor
from kelp.routes.validation import ROUTE_FIELDS, validate_route


def _is_hidden(name: str) -> bool:
    return name.startswith(("_", "."))


def _list_directory(directory: Path) -> list[tuple[Path, bool]]:
    with os.scandir(directory) as entries:
        return [
            (Path(entry.path), entry.is_dir())
            for entry in entries
            if not _is_hidden(entry.name)
        ]


async def discover_route_files(root: str | Path) -> list[Path]:
    """Return every route file under *root*, depth-first, pre-order.

    Raises:
        FilesystemDiscoveryFailure: a directory could not be listed.
    """
    files: list[Path] = []
    await _walk(Path(root), files)
    return files


async def _walk(directory: Path, files: list[Path]) -> None:
    try:
        entries = await anyio.to_thread.run_sync(_list_directory, directory)
    except OSError as exc:
        raise FilesystemDiscoveryFailure(directory, exc.strerror or str(exc)) from exc

    for path, is_dir in entries:
        if is_dir:
            await _walk(path, files)
        else:
            files.append(path)


def load_route_module(path: Path, index: int) -> dict[str, Any]:
    """Import the route file at *path* and return the fields it defines.

    Raises:
        InvalidRouteShape: *path* is not a Python module or fails to import.
    """
    if path.suffix != ".py":
        raise InvalidRouteShape(index, "module", "Python route module", source=path)

    module_name = f"_kelp_route_{index}_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise InvalidRouteShape(index, "module", "Python route module", source=path)

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise InvalidRouteShape(index, "module", "importable module", source=path) from exc

    return {name: getattr(module, name) for name in ROUTE_FIELDS if hasattr(module, name)}


async def load_routes(root: str | Path) -> list[RouteDescriptor]:
    """Discover, load and validate every route under *root*, in order."""
    descriptors: list[RouteDescriptor] = []
    for index, path in enumerate(await discover_route_files(root)):
        raw = load_route_module(path, index)
        descriptors.append(validate_route(raw, index, source=path))
    return descriptors
