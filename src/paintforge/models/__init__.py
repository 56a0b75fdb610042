"""PaintForge data models - pure Pydantic, no I/O beyond timeline loading."""

from paintforge.models.asset import AssetBox, AssetMetadata, ViewBox
from paintforge.models.effects import EffectsConfig, PaintEffectConfig
from paintforge.models.enums import (
    AnchorPoint,
    AssetCategory,
    AssetPaintCategory,
    BlendMode,
    CameraPreset,
    CanvasPreset,
    ColorGradePreset,
    Emotion,
    Gesture,
    KuwaharaStrength,
    MouthShape,
    OverlayType,
    PaintPreset,
    PaintStrength,
    TransitionType,
)
from paintforge.models.expression import ExpressionParams, TransitionRecord
from paintforge.models.scene import (
    AudioSegment,
    CameraKeyframe,
    CameraPath,
    CameraPose,
    CharacterPlacement,
    OverlayData,
    PhonemeEvent,
    SceneRecord,
    SceneTransition,
    Timeline,
    TimelineError,
    TimelineLoadError,
)

__all__ = [
    "AnchorPoint",
    "AssetBox",
    "AssetCategory",
    "AssetMetadata",
    "AssetPaintCategory",
    "AudioSegment",
    "BlendMode",
    "CameraKeyframe",
    "CameraPath",
    "CameraPose",
    "CameraPreset",
    "CanvasPreset",
    "CharacterPlacement",
    "ColorGradePreset",
    "EffectsConfig",
    "Emotion",
    "ExpressionParams",
    "Gesture",
    "KuwaharaStrength",
    "MouthShape",
    "OverlayData",
    "OverlayType",
    "PaintEffectConfig",
    "PaintPreset",
    "PaintStrength",
    "PhonemeEvent",
    "SceneRecord",
    "SceneTransition",
    "Timeline",
    "TimelineError",
    "TimelineLoadError",
    "TransitionRecord",
    "TransitionType",
    "ViewBox",
]
