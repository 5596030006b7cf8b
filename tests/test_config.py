"""Tests for the configuration schemas."""

import pytest
from pydantic import ValidationError

from glyphwarp.config import RenderConfig, Settings
from glyphwarp.env import FONTS_ROOT


def test_render_config_defaults():
    config = RenderConfig()
    assert config.size == 72.0
    assert config.dpi == 72.0
    assert config.hinting == "full"
    assert config.pixel_size == 72.0


def test_render_config_pixel_size():
    assert RenderConfig(size=12, dpi=144).pixel_size == 24.0


def test_render_config_is_frozen():
    config = RenderConfig()
    with pytest.raises(ValidationError):
        config.size = 10


@pytest.mark.parametrize(
    "kwargs",
    [
        {"size": 0},
        {"size": -1},
        {"dpi": 0},
        {"hinting": "slight"},
    ],
)
def test_render_config_rejects_invalid_values(kwargs):
    with pytest.raises(ValidationError):
        RenderConfig(**kwargs)


def test_settings_defaults(monkeypatch):
    for var in ("GLYPHWARP_FONTS_DIR", "GLYPHWARP_LOG_LEVEL", "GLYPHWARP_RENDER__SIZE"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings()
    assert settings.fonts_dir == FONTS_ROOT
    assert settings.render == RenderConfig()
    assert settings.log_level == "INFO"


def test_settings_from_environment(monkeypatch, tmp_path):
    """Tests that prefixed environment variables reach nested fields."""
    monkeypatch.setenv("GLYPHWARP_RENDER__SIZE", "36")
    monkeypatch.setenv("GLYPHWARP_FONTS_DIR", str(tmp_path))
    settings = Settings()
    assert settings.render.size == 36.0
    assert settings.render.hinting == "full"
    assert settings.fonts_dir == tmp_path


def test_settings_from_yaml(monkeypatch, tmp_path):
    """Tests that a YAML file is loaded and overrides the environment."""
    monkeypatch.setenv("GLYPHWARP_LOG_LEVEL", "WARNING")
    config_file = tmp_path / "glyphwarp.yaml"
    config_file.write_text("log_level: DEBUG\nrender:\n  size: 48\n  dpi: 96\n  hinting: none\n")

    settings = Settings(yaml_file=config_file)
    assert settings.log_level == "DEBUG"
    assert settings.render == RenderConfig(size=48, dpi=96, hinting="none")


def test_settings_invalid_yaml_value(tmp_path):
    config_file = tmp_path / "glyphwarp.yaml"
    config_file.write_text("render:\n  hinting: light\n")
    with pytest.raises(ValidationError):
        Settings(yaml_file=config_file)
