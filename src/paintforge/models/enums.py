"""Enumerations used throughout PaintForge.

String values are the public vocabulary that scene-authoring tools target;
existing values must never change meaning.
"""

import logging
from enum import IntEnum, StrEnum
from typing import TypeVar

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=StrEnum)


class Emotion(StrEnum):
    NEUTRAL = "neutral"
    HAPPY = "happy"
    SHOCKED = "shocked"
    THINKING = "thinking"
    ANGRY = "angry"
    SAD = "sad"
    EXCITED = "excited"
    CONFUSED = "confused"
    PROUD = "proud"
    WHISPER = "whisper"
    DRAMATIC = "dramatic"
    SKEPTICAL = "skeptical"


class Gesture(StrEnum):
    IDLE = "idle"
    WAVE = "wave"
    POINT = "point"
    SHRUG = "shrug"
    EXPLAIN = "explain"
    CHEERS = "cheers"


class MouthShape(IntEnum):
    CLOSED = 0
    SLIGHT = 1
    MEDIUM = 2
    WIDE = 3


class TransitionType(StrEnum):
    CROSSFADE = "crossfade"
    WIPE = "wipe"
    ZOOM_IN = "zoomIn"
    SLIDE = "slide"
    IRIS = "iris"
    NONE = "none"


class CameraPreset(StrEnum):
    STATIC = "static"
    SLOW_ZOOM_IN = "slowZoomIn"
    SLOW_ZOOM_OUT = "slowZoomOut"
    PAN_LEFT_TO_RIGHT = "panLeftToRight"
    PAN_RIGHT_TO_LEFT = "panRightToLeft"
    TILT_DOWN = "tiltDown"
    TILT_UP = "tiltUp"
    ESTABLISHING_SHOT = "establishingShot"
    DRAMATIC_ZOOM = "dramaticZoom"
    FOLLOW_CHARACTER = "followCharacter"
    SWEEPING_PAN = "sweepingPan"
    REVEAL_DOWN = "revealDown"


class AnchorPoint(StrEnum):
    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    CENTER_LEFT = "center-left"
    CENTER = "center"
    CENTER_RIGHT = "center-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"


class AssetCategory(StrEnum):
    SKY = "sky"
    TERRAIN = "terrain"
    STRUCTURE = "structure"
    PROP = "prop"
    CHARACTER = "character"
    VEGETATION = "vegetation"
    FOREGROUND = "foreground"
    ATMOSPHERE = "atmosphere"


class PaintPreset(StrEnum):
    NONE = "none"
    SUBTLE = "subtle"
    STANDARD = "standard"
    CINEMATIC = "cinematic"
    HEAVY = "heavy"
    CUSTOM = "custom"


class PaintStrength(StrEnum):
    SUBTLE = "subtle"
    MEDIUM = "medium"
    HEAVY = "heavy"


class KuwaharaStrength(StrEnum):
    SUBTLE = "subtle"
    MEDIUM = "medium"
    HEAVY = "heavy"


class CanvasPreset(StrEnum):
    LINEN = "linen"
    WATERCOLOR = "watercolor"
    BURLAP = "burlap"
    PARCHMENT = "parchment"
    SMOOTH = "smooth"


class ColorGradePreset(StrEnum):
    GOLDEN = "golden"
    MOONLIT = "moonlit"
    SEPIA = "sepia"
    EMERALD = "emerald"
    NONE = "none"


class BlendMode(StrEnum):
    NORMAL = "normal"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    OVERLAY = "overlay"
    SOFT_LIGHT = "soft-light"


class AssetPaintCategory(StrEnum):
    SKY_DAY = "sky_day"
    SKY_TWILIGHT = "sky_twilight"
    SKY_NIGHT = "sky_night"
    SKY_STORM = "sky_storm"
    SKY_SPECIAL = "sky_special"
    TERRAIN = "terrain"
    TERRAIN_INDOOR = "terrain_indoor"
    CHARACTER = "character"
    NONE = "none"


class OverlayType(StrEnum):
    STAT_CARD = "statCard"
    BAR_CHART = "barChart"
    FACT_BOX = "factBox"
    TOPIC_CARD = "topicCard"


def coerce_enum(enum_cls: type[E], value: object, default: E) -> E:
    """Resolve *value* to a member of *enum_cls*, falling back to *default*.

    Unknown names are an authoring slip rather than a fatal error, so they are
    logged and replaced instead of raised.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning(
            "Unknown %s %r, using %r", enum_cls.__name__, value, default.value,
        )
        return default
