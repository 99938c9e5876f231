"""Tests for kelp.config — frozen configuration types."""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from kelp.config import CHECKPOINT_NAMES, KelpConfig, MiddlewareCheckpoints
from kelp.handlers import ErrorPage, NotFoundPage, method_not_allowed_page


def _config(**overrides):
    values = {
        "routes_directory": Path("/app/routes"),
        "public_directory": Path("/app/public"),
        "views_directory": Path("/app/views"),
        "not_found_handler": NotFoundPage(),
        "error_handler": ErrorPage(),
        "method_not_allowed_handler": method_not_allowed_page,
    }
    values.update(overrides)
    return KelpConfig(**values)


class TestMiddlewareCheckpoints:
    def test_nine_slots_in_firing_order(self) -> None:
        assert CHECKPOINT_NAMES == (
            "before_route_load",
            "after_route_load",
            "before_builtin_middleware_register",
            "after_builtin_middleware_register",
            "before_404_register",
            "after_404_register",
            "before_error_register",
            "after_error_register",
            "before_serve",
        )

    def test_defaults_are_empty(self) -> None:
        assert all(value is None for _, value in MiddlewareCheckpoints())

    def test_get(self) -> None:
        def mw(request, next):
            return next(request)

        checkpoints = MiddlewareCheckpoints(before_serve=mw)
        assert checkpoints.get("before_serve") is mw
        assert checkpoints.get("before_route_load") is None

    def test_get_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="beforeServe"):
            MiddlewareCheckpoints().get("beforeServe")


class TestKelpConfig:
    def test_defaults(self) -> None:
        config = _config()
        assert config.port == 3000
        assert config.environment == "development"
        assert config.view_engine == "none"
        assert config.autostart is True
        assert config.always_added_headers == ()

    def test_frozen(self) -> None:
        config = _config()
        with pytest.raises(FrozenInstanceError):
            config.port = 8080  # type: ignore[misc]

    def test_is_development(self) -> None:
        assert _config().is_development
        assert not _config(environment="production").is_development
