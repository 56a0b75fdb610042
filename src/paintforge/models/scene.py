"""Scene timeline models.

Timelines arrive as JSON from an external authoring step, so field names
accept both the camelCase spelling used in scene files and snake_case.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from paintforge.models.effects import EffectsConfig
from paintforge.models.enums import Emotion, Gesture, OverlayType, TransitionType, coerce_enum

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class TimelineError(ValueError):
    """Raised when scene intervals overlap or are out of order."""


class TimelineLoadError(ValueError):
    """Raised when a timeline file cannot be loaded."""


class _SceneModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CameraPose(_SceneModel):
    """Camera target offset from canvas centre plus zoom factor."""

    x: float = 0.0
    y: float = 0.0
    zoom: float = Field(default=1.0, gt=0.0)


class CameraKeyframe(_SceneModel):
    """Camera pose at a frame offset from scene start."""

    frame: int = Field(ge=0)
    x: float = 0.0
    y: float = 0.0
    zoom: float = Field(default=1.0, gt=0.0)


class CameraPath(_SceneModel):
    """Keyframed camera motion within a scene.

    Either explicit ``keyframes`` or a named ``preset`` expanded against the
    scene duration.  Explicit keyframes win when both are given.
    """

    keyframes: list[CameraKeyframe] = Field(default_factory=list)
    preset: str | None = None
    track_character: str | None = None
    track_offset_x: float = 0.0
    track_offset_y: float = 0.0


class CharacterPlacement(_SceneModel):
    """One character in a scene.  Recomputed every frame, never persisted.

    Without an explicit ``seed``, jitter is seeded by the character's index
    in the scene so neighbours land on different offsets.
    """

    id: str
    x: float = 0.0
    y: float = 0.0
    position: str | None = None
    jitter: bool = False
    seed: int | None = None
    scale: float | None = None
    emotion: Emotion = Emotion.NEUTRAL
    talking: bool = False
    gesture: Gesture | None = None

    @field_validator("emotion", mode="before")
    @classmethod
    def _known_emotion(cls, value: object) -> Emotion:
        return coerce_enum(Emotion, value, Emotion.NEUTRAL)

    @field_validator("gesture", mode="before")
    @classmethod
    def _known_gesture(cls, value: object) -> Gesture | None:
        if value is None:
            return None
        return coerce_enum(Gesture, value, Gesture.IDLE)


class SceneTransition(_SceneModel):
    """Entry transition applied to a scene's content."""

    type: TransitionType = TransitionType.NONE
    duration: int = Field(default=0, ge=0)

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, value: object) -> TransitionType:
        return coerce_enum(TransitionType, value, TransitionType.NONE)


class OverlayData(_SceneModel):
    """A timed data card drawn in screen space over the scene.

    ``start_frame`` and ``end_frame`` are absolute and inclusive.  ``props``
    carries the card content (value and label, bars, text, topic).  An
    unknown ``type`` is kept as ``None`` and draws nothing.
    """

    type: OverlayType | None
    start_frame: int = Field(ge=0)
    end_frame: int
    props: dict[str, Any] = Field(default_factory=dict)

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, value: object) -> OverlayType | None:
        if isinstance(value, OverlayType):
            return value
        try:
            return OverlayType(value)
        except ValueError:
            logger.warning("Unknown overlay type %r, skipping", value)
            return None

    @model_validator(mode="after")
    def _ordered_window(self) -> OverlayData:
        if self.end_frame < self.start_frame:
            msg = f"overlay ends before it starts ({self.start_frame}..{self.end_frame})"
            raise ValueError(msg)
        return self


class SceneRecord(_SceneModel):
    """A contiguous half-open frame interval ``[start, end)`` with its content."""

    id: str
    start: int = Field(ge=0)
    end: int
    bg: str = ""
    board_text: str = ""
    camera: CameraPose | None = None
    camera_path: CameraPath | None = None
    characters: list[CharacterPlacement] = Field(default_factory=list)
    subtitle: str = ""
    transition: SceneTransition | None = None
    effects: EffectsConfig | None = None
    overlays: list[OverlayData] = Field(default_factory=list)

    @model_validator(mode="after")
    def _positive_length(self) -> SceneRecord:
        if self.end <= self.start:
            msg = f"scene {self.id!r} must end after it starts ({self.start}..{self.end})"
            raise ValueError(msg)
        return self

    @property
    def duration(self) -> int:
        return self.end - self.start

    def contains(self, frame: int) -> bool:
        return self.start <= frame < self.end

    def character(self, character_id: str) -> CharacterPlacement | None:
        return next((c for c in self.characters if c.id == character_id), None)


class PhonemeEvent(_SceneModel):
    """A phoneme label starting at *time* seconds into its audio segment."""

    time: float = Field(ge=0.0)
    phoneme: str


class AudioSegment(_SceneModel):
    """Narration audio for one character, with phoneme timing for lip sync."""

    character_id: str
    start_frame: int = Field(ge=0)
    audio_file: str = ""
    phonemes: list[PhonemeEvent] = Field(default_factory=list)


class Timeline(_SceneModel):
    """An ordered, non-overlapping list of scenes plus optional narration audio.

    ``global_overlays`` are drawn whenever their window covers the frame,
    whichever scene is active.
    """

    scenes: list[SceneRecord] = Field(default_factory=list)
    audio_segments: list[AudioSegment] = Field(default_factory=list)
    global_overlays: list[OverlayData] = Field(default_factory=list)

    @model_validator(mode="after")
    def _ordered_and_disjoint(self) -> Timeline:
        for prev, cur in zip(self.scenes, self.scenes[1:]):
            if cur.start < prev.start:
                msg = f"scene {cur.id!r} starts before preceding scene {prev.id!r}"
                raise TimelineError(msg)
            if cur.start < prev.end:
                msg = (
                    f"scene {cur.id!r} [{cur.start}, {cur.end}) overlaps "
                    f"scene {prev.id!r} [{prev.start}, {prev.end})"
                )
                raise TimelineError(msg)
        return self

    @property
    def end(self) -> int:
        return self.scenes[-1].end if self.scenes else 0

    @classmethod
    def load(cls, path: Path) -> Timeline:
        """Load a timeline from a JSON file.

        Accepts either ``{"scenes": [...]}`` or a bare list of scene records.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            msg = f"timeline file not found: {path}"
            raise TimelineLoadError(msg) from None
        except PermissionError:
            msg = f"permission denied reading timeline file: {path}"
            raise TimelineLoadError(msg) from None
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"timeline file contains invalid JSON: {exc}"
            raise TimelineLoadError(msg) from None
        if isinstance(data, list):
            data = {"scenes": data}
        try:
            return cls.model_validate(data)
        except PydanticValidationError as exc:
            msg = f"timeline file has invalid structure: {exc}"
            raise TimelineLoadError(msg) from None
