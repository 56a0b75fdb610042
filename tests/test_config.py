"""Tests for configuration system."""

import pytest
from pydantic import ValidationError

from paintforge.config import AppConfig, EffectSettings, MotionSettings, RenderSettings, load_config
from paintforge.models.enums import PaintPreset


def test_render_settings_defaults():
    s = RenderSettings()
    assert (s.width, s.height) == (1920, 1080)
    assert s.fps == 30
    assert s.background == "#1A1A1A"
    assert s.show_debug is False


def test_motion_settings_defaults():
    m = MotionSettings()
    assert m.expression_transition_frames == 10
    assert m.camera_transition_frames == 28


def test_effect_settings_default_preset():
    assert EffectSettings().preset is PaintPreset.STANDARD


def test_app_config_defaults():
    config = AppConfig()
    assert config.config_dir.name == ".paintforge"
    assert config.render.fps == 30


@pytest.mark.parametrize("bad", [0, -1, 241, 1000])
def test_fps_rejected(bad: int) -> None:
    with pytest.raises(ValidationError):
        RenderSettings(fps=bad)


@pytest.mark.parametrize("good", [1, 24, 30, 60, 240])
def test_fps_accepted(good: int) -> None:
    assert RenderSettings(fps=good).fps == good


def test_negative_transition_frames_rejected():
    with pytest.raises(ValidationError):
        MotionSettings(camera_transition_frames=-1)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PAINTFORGE_RENDER__WIDTH", "1280")
    monkeypatch.setenv("PAINTFORGE_EFFECTS__PRESET", "cinematic")
    config = AppConfig()
    assert config.render.width == 1280
    assert config.effects.preset is PaintPreset.CINEMATIC


def test_load_config_leaves_filesystem_alone(monkeypatch, tmp_path):
    target = tmp_path / "cfg"
    monkeypatch.setenv("PAINTFORGE_CONFIG_DIR", str(target))
    config = load_config()
    assert config.config_dir == target
    assert not target.exists()
