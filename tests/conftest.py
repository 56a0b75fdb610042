"""Shared fixtures for PaintForge tests."""

import json
from pathlib import Path

import pytest

from paintforge.models.enums import Emotion, TransitionType
from paintforge.models.scene import (
    CharacterPlacement,
    SceneRecord,
    SceneTransition,
    Timeline,
)
from paintforge.pipeline.render import clear_renderers


@pytest.fixture
def sample_scenes() -> list[SceneRecord]:
    return [
        SceneRecord(
            id="s1",
            start=0,
            end=100,
            bg="classroom",
            board_text="Photosynthesis",
            characters=[
                CharacterPlacement(id="presenter", x=960, y=700, emotion=Emotion.NEUTRAL, talking=True),
            ],
            subtitle="Plants make food from light.",
        ),
        SceneRecord(
            id="s2",
            start=100,
            end=200,
            bg="forest",
            characters=[
                CharacterPlacement(id="presenter", position="left_mid", emotion=Emotion.HAPPY),
                CharacterPlacement(id="student", position="right_mid", emotion=Emotion.CONFUSED),
            ],
            transition=SceneTransition(type=TransitionType.CROSSFADE, duration=15),
        ),
    ]


@pytest.fixture
def sample_timeline(sample_scenes: list[SceneRecord]) -> Timeline:
    return Timeline(scenes=sample_scenes)


@pytest.fixture
def timeline_data() -> dict:
    """Raw camelCase timeline JSON as written by authoring tools."""
    return {
        "scenes": [
            {
                "id": "intro",
                "start": 0,
                "end": 90,
                "bg": "studio",
                "boardText": "Welcome",
                "characters": [{"id": "presenter", "position": "podium", "emotion": "happy"}],
                "subtitle": "Hello there",
            },
            {
                "id": "main",
                "start": 90,
                "end": 180,
                "bg": "lab",
                "cameraPath": {"preset": "slowZoomIn"},
                "characters": [{"id": "presenter", "x": 800, "y": 600, "emotion": "thinking"}],
                "transition": {"type": "iris", "duration": 20},
                "effects": {"preset": "cinematic"},
            },
        ],
    }


@pytest.fixture
def timeline_file(tmp_path: Path, timeline_data: dict) -> Path:
    path = tmp_path / "timeline.json"
    path.write_text(json.dumps(timeline_data))
    return path


@pytest.fixture(autouse=True)
def _reset_renderers():
    clear_renderers()
    yield
    clear_renderers()
