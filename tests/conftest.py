from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from app.config import AppSettings, GeometrySettings


def _clear_wbg_env() -> None:
    for key in list(os.environ):
        if key.startswith("WBG_"):
            os.environ.pop(key, None)


_clear_wbg_env()


@pytest.fixture(autouse=True)
def clear_wbg_env() -> Generator[None, None, None]:
    _clear_wbg_env()
    yield
    _clear_wbg_env()


@pytest.fixture
def geometry_settings() -> GeometrySettings:
    return GeometrySettings(
        overview_width=200,
        overview_height=140,
        padding=40,
        default_region_width=1000,
        default_region_height=700,
    )


@pytest.fixture
def geometry_settings_factory(
    geometry_settings: GeometrySettings,
) -> Callable[..., GeometrySettings]:
    def _factory(**overrides: object) -> GeometrySettings:
        return geometry_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def app_settings(geometry_settings: GeometrySettings) -> AppSettings:
    return AppSettings(geometry=geometry_settings)


@pytest.fixture
def app_settings_factory(
    geometry_settings_factory: Callable[..., GeometrySettings],
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(geometry=geometry_settings_factory(**overrides))

    return _factory
