from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.models import GeometryConfig, Size

DEFAULT_CONFIG_PATH = Path("config/geometry.yaml")


class GeometrySettings(BaseModel):
    overview_width: float = Field(default=200.0, gt=0)
    overview_height: float = Field(default=140.0, gt=0)
    padding: float = Field(default=40.0, ge=0)
    default_region_width: float = Field(default=1000.0, gt=0)
    default_region_height: float = Field(default=700.0, gt=0)
    default_arrow_size: float = Field(default=10.0, ge=0)
    unknown_shape_size: float = Field(default=100.0, gt=0)
    default_font_size: float = Field(default=18.0, gt=0)
    char_width_ratio: float = Field(default=0.6, gt=0)
    line_height_ratio: float = Field(default=1.2, gt=0)
    min_extent_size: float = Field(default=1.0, gt=0)
    stroke_sample_limit: int = Field(default=50, gt=0)

    def to_geometry_config(self) -> GeometryConfig:
        return GeometryConfig(
            overview_size=Size(self.overview_width, self.overview_height),
            padding=self.padding,
            default_region=Size(self.default_region_width, self.default_region_height),
            default_arrow_size=self.default_arrow_size,
            unknown_shape_size=self.unknown_shape_size,
            default_font_size=self.default_font_size,
            char_width_ratio=self.char_width_ratio,
            line_height_ratio=self.line_height_ratio,
            min_extent_size=self.min_extent_size,
            stroke_sample_limit=self.stroke_sample_limit,
        )


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WBG_", env_nested_delimiter="__")

    geometry: GeometrySettings = GeometrySettings()
    log_level: str = "INFO"

    _yaml_path: ClassVar[Path | None] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        level = str(value or "INFO").strip().upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level: {value}"
            raise ValueError(msg)
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def resolve_config_path(config_path: Path | None = None) -> Path | None:
    """Explicit path, then ``WBG_CONFIG_PATH``, then the default file if present.

    A path that was asked for explicitly must exist; the default is optional.
    """
    requested = config_path
    if requested is None and os.getenv("WBG_CONFIG_PATH"):
        requested = Path(os.environ["WBG_CONFIG_PATH"])
    if requested is None:
        return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None
    if not requested.exists():
        msg = f"Config file not found: {requested}"
        raise FileNotFoundError(msg)
    return requested


def load_settings(config_path: Path | None = None) -> AppSettings:
    yaml_path = resolve_config_path(config_path)
    previous = AppSettings._yaml_path
    AppSettings._yaml_path = yaml_path
    try:
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous


def configure_logging(settings: AppSettings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("domain").setLevel(settings.log_level)
    logging.getLogger("app").setLevel(settings.log_level)
