"""Application configuration with pydantic-settings + TOML."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict, TomlConfigSettingsSource

from paintforge.models.enums import PaintPreset


def _default_config_dir() -> Path:
    return Path.home() / ".paintforge"


class RenderSettings(BaseSettings):
    """Output canvas and frame clock."""

    width: int = Field(default=1920, gt=0)
    height: int = Field(default=1080, gt=0)
    fps: int = Field(default=30, ge=1, le=240)
    background: str = "#1A1A1A"
    show_debug: bool = False


class MotionSettings(BaseSettings):
    """Blend lengths, in frames."""

    expression_transition_frames: int = Field(default=10, ge=0)
    camera_transition_frames: int = Field(default=28, ge=0)


class EffectSettings(BaseSettings):
    """Default post-processing preset when a scene does not choose one."""

    preset: PaintPreset = PaintPreset.STANDARD


class AppConfig(BaseSettings):
    """Root application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PAINTFORGE_",
        env_nested_delimiter="__",
    )

    config_dir: Path = Field(default_factory=_default_config_dir)
    render: RenderSettings = Field(default_factory=RenderSettings)
    motion: MotionSettings = Field(default_factory=MotionSettings)
    effects: EffectSettings = Field(default_factory=EffectSettings)

    @classmethod
    def settings_customise_sources(cls, settings_cls, **kwargs):  # type: ignore[override]
        toml_path = _default_config_dir() / "config.toml"
        sources = (
            kwargs.get("init_settings"),
            kwargs.get("env_settings"),
        )
        if toml_path.exists():
            sources = (*sources, TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        return (*sources, kwargs.get("dotenv_settings"), kwargs.get("file_secret_settings"))


def load_config() -> AppConfig:
    """Load application config from the environment and ``config.toml``.

    Nothing is written to disk; a missing config directory is fine.
    """
    return AppConfig()
