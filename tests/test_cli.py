"""Tests for kelp.cli — CLI entrypoint and ``kelp routes``."""

from pathlib import Path

import pytest

from kelp.cli import main


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_routes_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "--help"])
        assert exc_info.value.code == 0

    def test_routes_missing_directory_arg(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes"])
        assert exc_info.value.code == 2

    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "kelp" in capsys.readouterr().out


class TestRoutesCommand:
    def test_lists_routes(self, routes_dir: Path, write_route, capsys) -> None:
        write_route("home.py", method="GET", path="/")
        write_route("admin/debug.py", method="GET", path="/debug", development_route=True)

        main(["routes", str(routes_dir), "--environment", "production"])

        out = capsys.readouterr().out
        lines = out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "STATUS", "FILE"]
        assert any(line.split() == ["GET", "/", "bound", "home.py"] for line in lines)
        debug_file = str(Path("admin") / "debug.py")
        assert any(line.split() == ["GET", "/debug", "skipped", debug_file] for line in lines)

    def test_empty_directory(self, routes_dir: Path, capsys) -> None:
        main(["routes", str(routes_dir)])
        assert "No routes found." in capsys.readouterr().out

    def test_missing_directory(self, tmp_path: Path, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", str(tmp_path / "nope")])
        assert exc_info.value.code == 1
        assert "does not exist" in capsys.readouterr().err

    def test_invalid_route(self, routes_dir: Path, write_route, capsys) -> None:
        write_route("bad.py", method="FETCH", path="/")
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", str(routes_dir)])
        assert exc_info.value.code == 1
        assert "FETCH" in capsys.readouterr().err
