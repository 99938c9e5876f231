"""Tests for kelp.routes.discovery — walking and loading route files."""

import os
from pathlib import Path

import pytest

from kelp.errors import FilesystemDiscoveryFailure, InvalidRouteShape
from kelp.handlers import passthrough, route_not_configured
from kelp.routes.discovery import discover_route_files, load_route_module, load_routes


class TestDiscoverRouteFiles:
    async def test_empty_directory(self, routes_dir: Path) -> None:
        assert await discover_route_files(routes_dir) == []

    async def test_nested_two_levels(self, routes_dir: Path, write_route) -> None:
        write_route("index.py", method="GET", path="/")
        write_route("users/list.py", method="GET", path="/users")
        write_route("users/admin/ban.py", method="POST", path="/users/ban")
        write_route("users/admin/unban.py", method="POST", path="/users/unban")

        files = await discover_route_files(routes_dir)

        on_disk = [
            Path(dirpath) / name
            for dirpath, _, names in os.walk(routes_dir)
            for name in names
        ]
        assert len(files) == len(on_disk) == 4
        assert set(files) == set(on_disk)

    async def test_subtrees_are_contiguous(self, routes_dir: Path, write_route) -> None:
        write_route("a/b/deep.py", method="GET", path="/deep")
        write_route("a/shallow.py", method="GET", path="/shallow")
        write_route("top.py", method="GET", path="/top")
        names = [f.name for f in await discover_route_files(routes_dir)]
        # listing order is unsorted, but a directory is finished before its siblings
        assert names.index("top.py") in (0, 2)

    async def test_skips_private_and_hidden(self, routes_dir: Path, write_route) -> None:
        write_route("visible.py", method="GET", path="/")
        write_route("_helpers.py", method="GET", path="/helpers")
        write_route("__pycache__/visible.cpython-312.py", method="GET", path="/cache")
        (routes_dir / ".swp").write_text("")
        files = await discover_route_files(routes_dir)
        assert [f.name for f in files] == ["visible.py"]

    async def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(FilesystemDiscoveryFailure) as exc_info:
            await discover_route_files(tmp_path / "nope")
        assert isinstance(exc_info.value.__cause__, OSError)


class TestLoadRouteModule:
    def test_reads_module_fields(self, write_route) -> None:
        file = write_route("ping.py", method="GET", path="/ping", disabled=True)
        raw = load_route_module(file, 0)
        assert raw["method"] == "GET"
        assert raw["path"] == "/ping"
        assert raw["disabled"] is True
        assert callable(raw["handler"])

    def test_ignores_other_names(self, write_route) -> None:
        file = write_route("ping.py", method="GET", path="/ping", helper_value=1)
        assert "helper_value" not in load_route_module(file, 0)

    def test_non_python_file(self, routes_dir: Path) -> None:
        file = routes_dir / "notes.txt"
        file.write_text("hello")
        with pytest.raises(InvalidRouteShape) as exc_info:
            load_route_module(file, 4)
        assert exc_info.value.index == 4
        assert exc_info.value.source == file

    def test_import_error(self, write_route) -> None:
        file = write_route("broken.py", source="method = 'GET'\nraise RuntimeError('boom')\n")
        with pytest.raises(InvalidRouteShape) as exc_info:
            load_route_module(file, 0)
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestLoadRoutes:
    async def test_validates_in_discovery_order(self, routes_dir: Path, write_route) -> None:
        write_route("a.py", method="get", path="/a")
        write_route("nested/b.py", method="POST", path="/b")

        files = await discover_route_files(routes_dir)
        routes = await load_routes(routes_dir)

        assert [r.source for r in routes] == files
        assert [r.index for r in routes] == [0, 1]
        assert {r.method for r in routes} == {"GET", "POST"}

    async def test_defaults_filled(self, write_route, routes_dir: Path) -> None:
        write_route("bare.py", source="method = 'GET'\npath = '/bare'\n")
        [route] = await load_routes(routes_dir)
        assert route.handler is route_not_configured
        assert route.route_middleware is passthrough
        assert route.disabled is False
        assert route.development_route is False

    async def test_invalid_route_stops_loading(self, write_route, routes_dir: Path) -> None:
        write_route("nopath.py", source="method = 'GET'\n")
        with pytest.raises(InvalidRouteShape, match="path"):
            await load_routes(routes_dir)
