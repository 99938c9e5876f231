"""Tests for kelp.options — option resolution and validation."""

from pathlib import Path

import pytest

from kelp.config import MiddlewareCheckpoints
from kelp.errors import (
    InvalidCheckpoint,
    InvalidOptionType,
    InvalidViewEngine,
    MissingRoutesDirectory,
)
from kelp.handlers import ErrorPage, NotFoundPage, method_not_allowed_page
from kelp.options import register_assets, resolve_options


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "routes").mkdir()
    return tmp_path


async def _mw(request, next):
    return await next(request)


class TestDefaults:
    def test_every_option_defaults(self, project: Path) -> None:
        config = resolve_options(cwd=project).config
        assert config.routes_directory == project / "routes"
        assert config.public_directory == project / "public"
        assert config.views_directory == project / "views"
        assert config.view_engine == "none"
        assert config.not_found_handler == NotFoundPage("development")
        assert config.error_handler == ErrorPage()
        assert config.method_not_allowed_handler is method_not_allowed_page
        assert config.middleware_checkpoints == MiddlewareCheckpoints()
        assert config.always_added_headers == ()
        assert config.port == 3000
        assert config.environment == "development"
        assert config.autostart is True

    def test_not_found_page_follows_environment(self, project: Path) -> None:
        config = resolve_options({"environment": "production"}, cwd=project).config
        assert config.not_found_handler == NotFoundPage("production")

    def test_relative_directories_resolve_against_cwd(self, project: Path) -> None:
        (project / "src" / "endpoints").mkdir(parents=True)
        config = resolve_options({"routes_directory": "src/endpoints"}, cwd=project).config
        assert config.routes_directory == project / "src" / "endpoints"

    def test_unknown_keys_are_ignored(self, project: Path) -> None:
        resolved = resolve_options({"colour": "blue"}, cwd=project)
        assert not hasattr(resolved.config, "colour")


class TestPurity:
    def test_same_input_gives_equal_results(self, project: Path) -> None:
        raw = {"port": 8080, "middleware_checkpoints": {"before_serve": _mw}}
        assert resolve_options(raw, cwd=project) == resolve_options(raw, cwd=project)

    def test_input_is_not_modified(self, project: Path) -> None:
        raw = {"port": 8080}
        resolve_options(raw, cwd=project)
        assert raw == {"port": 8080}


class TestTypeChecks:
    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("routes_directory", 42),
            ("public_directory", 3),
            ("views_directory", 3),
            ("view_engine", None),
            ("not_found_handler", "nope"),
            ("error_handler", 1),
            ("method_not_allowed_handler", {}),
            ("middleware_checkpoints", []),
            ("always_added_headers", "X-A: b"),
            ("port", "3000"),
            ("port", True),
            ("environment", 1),
            ("autostart", "yes"),
        ],
    )
    def test_wrong_type_names_the_key(self, project: Path, key: str, value: object) -> None:
        with pytest.raises(InvalidOptionType) as exc_info:
            resolve_options({key: value}, cwd=project)
        assert exc_info.value.key == key

    @pytest.mark.parametrize("port", [-1, 65536, 80.5])
    def test_port_out_of_range(self, project: Path, port: float) -> None:
        with pytest.raises(InvalidOptionType, match="port"):
            resolve_options({"port": port}, cwd=project)

    def test_port_zero_is_allowed(self, project: Path) -> None:
        assert resolve_options({"port": 0}, cwd=project).config.port == 0

    def test_unknown_environment(self, project: Path) -> None:
        with pytest.raises(InvalidOptionType, match="environment"):
            resolve_options({"environment": "staging"}, cwd=project)


class TestDirectories:
    def test_missing_routes_directory(self, tmp_path: Path) -> None:
        with pytest.raises(MissingRoutesDirectory) as exc_info:
            resolve_options(cwd=tmp_path)
        assert exc_info.value.path == tmp_path / "routes"

    def test_missing_public_directory_warns(self, project: Path) -> None:
        resolved = resolve_options(cwd=project)
        assert resolved.serve_static is False
        assert any("public directory does not exist" in w for w in resolved.warnings)

    def test_existing_public_directory(self, project: Path) -> None:
        (project / "public").mkdir()
        resolved = resolve_options(cwd=project)
        assert resolved.serve_static is True
        assert resolved.warnings == ()

    def test_view_engine_without_views_directory_warns(self, project: Path) -> None:
        (project / "public").mkdir()
        resolved = resolve_options({"view_engine": "jinja2"}, cwd=project)
        assert resolved.render_views is False
        assert any("views directory does not exist" in w for w in resolved.warnings)

    def test_no_view_engine_never_renders(self, project: Path) -> None:
        (project / "views").mkdir()
        assert resolve_options(cwd=project).render_views is False


class TestViewEngine:
    def test_unsupported_engine(self, project: Path) -> None:
        with pytest.raises(InvalidViewEngine) as exc_info:
            resolve_options({"view_engine": "pug"}, cwd=project)
        assert exc_info.value.engine == "pug"

    def test_unsupported_engine_fails_even_without_views(self, project: Path) -> None:
        with pytest.raises(InvalidViewEngine):
            resolve_options({"view_engine": "ejs", "views_directory": "missing"}, cwd=project)


class TestCheckpoints:
    def test_known_slot(self, project: Path) -> None:
        config = resolve_options(
            {"middleware_checkpoints": {"before_serve": _mw}}, cwd=project
        ).config
        assert config.middleware_checkpoints.before_serve is _mw

    def test_non_callable_slot(self, project: Path) -> None:
        with pytest.raises(InvalidCheckpoint) as exc_info:
            resolve_options({"middleware_checkpoints": {"after_route_load": "x"}}, cwd=project)
        assert exc_info.value.name == "after_route_load"

    def test_non_callable_unknown_slot_is_fatal(self, project: Path) -> None:
        with pytest.raises(InvalidCheckpoint):
            resolve_options({"middleware_checkpoints": {"whenever": 3}}, cwd=project)

    def test_unknown_slot_warns(self, project: Path) -> None:
        resolved = resolve_options({"middleware_checkpoints": {"whenever": _mw}}, cwd=project)
        assert resolved.config.middleware_checkpoints == MiddlewareCheckpoints()
        assert any("'whenever'" in w for w in resolved.warnings)

    def test_none_slot(self, project: Path) -> None:
        config = resolve_options(
            {"middleware_checkpoints": {"before_serve": None}}, cwd=project
        ).config
        assert config.middleware_checkpoints.before_serve is None


class TestHeaders:
    def test_headers_kept_in_order(self, project: Path) -> None:
        config = resolve_options(
            {"always_added_headers": {"X-Frame-Options": "DENY", "X-Team": "kelp"}},
            cwd=project,
        ).config
        assert config.always_added_headers == (("X-Frame-Options", "DENY"), ("X-Team", "kelp"))

    def test_powered_by_cannot_be_overridden(self, project: Path) -> None:
        resolved = resolve_options(
            {"always_added_headers": {"x-powered-by": "PHP", "X-A": "b"}}, cwd=project
        )
        assert resolved.config.always_added_headers == (("X-A", "b"),)
        assert any("X-Powered-By" in w for w in resolved.warnings)

    def test_non_string_value(self, project: Path) -> None:
        with pytest.raises(InvalidOptionType, match="always_added_headers"):
            resolve_options({"always_added_headers": {"X-Count": 3}}, cwd=project)


class TestRegisterAssets:
    def test_registers_static_and_views(self, project: Path, transport) -> None:
        (project / "public").mkdir()
        (project / "views").mkdir()
        resolved = resolve_options({"view_engine": "jinja2"}, cwd=project)
        register_assets(transport, resolved)
        assert transport.calls == [
            ("serve_static", project / "public"),
            ("set_view_engine", "jinja2"),
        ]

    def test_registers_nothing_when_missing(self, project: Path, transport) -> None:
        register_assets(transport, resolve_options({"view_engine": "kida"}, cwd=project))
        assert transport.calls == []
