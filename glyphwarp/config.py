"""Pydantic schemas for the rendering configuration.

The font size, DPI and hinting mode are carried in an immutable
`RenderConfig` that is passed explicitly into every render call. `Settings`
wraps it together with the font directory and log level, and can be populated
from keyword arguments, a YAML file, environment variables or a `.env` file.
"""

from pathlib import Path
from typing import Literal, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from glyphwarp.env import FONTS_ROOT


class RenderConfig(BaseModel):
    """Rasterization parameters for a typeface."""

    model_config = ConfigDict(frozen=True)

    size: float = Field(72.0, gt=0, description="The font size in points.")
    dpi: float = Field(72.0, gt=0, description="The rendering resolution in dots per inch.")
    hinting: Literal["none", "full"] = Field("full", description="The glyph hinting mode used for measurement.")

    @property
    def pixel_size(self) -> float:
        """The nominal em size in pixels."""
        return self.size * self.dpi / 72


class Settings(BaseSettings):
    """The root configuration object for glyphwarp.

    Values can be overridden with environment variables prefixed with
    `GLYPHWARP_`, using `__` to reach nested fields, e.g.
    `GLYPHWARP_RENDER__SIZE=48`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="GLYPHWARP_",
        env_nested_delimiter="__",
    )

    fonts_dir: Path = Field(FONTS_ROOT, description="The directory scanned for font files.")
    render: RenderConfig = Field(default_factory=RenderConfig, description="The rasterization parameters.")
    log_level: str = Field("INFO", description="The minimum level of log messages to emit.")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Define the priority of configuration sources.

        Earlier sources override later ones:
        1.  `init_settings`: Values passed directly to the constructor.
        2.  `YamlConfigSettingsSource`: Values from the `yaml_file` argument.
        3.  `env_settings`: System environment variables.
        4.  `dotenv_settings`: Variables loaded from a `.env` file.
        5.  `file_secret_settings`: Settings from Docker-style secrets files.
        """
        yaml_file = init_settings.init_kwargs.get("yaml_file")
        return (
            init_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
