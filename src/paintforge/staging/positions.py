"""Named stage positions on the 1920x1080 canvas.

Three depth rows (back, mid, front) cross five horizontal slots, plus a few
special-purpose spots.  Scene authors pick a name instead of raw pixels.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType

logger = logging.getLogger(__name__)

CANVAS_W = 1920
CANVAS_H = 1080

DEFAULT_PRESET = "center_mid"

JITTER_X = 30.0
JITTER_Y = 15.0
JITTER_SCALE = 0.05


@dataclass(frozen=True)
class PositionPreset:
    x: float
    y: float
    scale: float
    description: str


@dataclass(frozen=True)
class ResolvedPosition:
    x: float
    y: float
    scale: float


_COLUMNS = {
    "far_left": (CANVAS_W * 0.1, "Far left"),
    "left": (CANVAS_W * 0.25, "Left side"),
    "center": (CANVAS_W * 0.5, "Center"),
    "right": (CANVAS_W * 0.75, "Right side"),
    "far_right": (CANVAS_W * 0.9, "Far right"),
}

_ROWS = {
    "back": (CANVAS_H * 0.35, 0.6, "background, small and distant"),
    "mid": (CANVAS_H * 0.5, 1.0, "middle ground, normal size"),
    "front": (CANVAS_H * 0.65, 1.5, "foreground, large and close up"),
}


def _build_presets() -> dict[str, PositionPreset]:
    presets = {
        f"{col}_{row}": PositionPreset(x=x, y=y, scale=scale, description=f"{label}, {depth}")
        for row, (y, scale, depth) in _ROWS.items()
        for col, (x, label) in _COLUMNS.items()
    }
    presets.update({
        "podium": PositionPreset(
            x=CANVAS_W * 0.5, y=CANVAS_H * 0.55, scale=1.8,
            description="Center podium, extra large, for a solo presenter",
        ),
        "duo_left": PositionPreset(
            x=CANVAS_W * 0.35, y=CANVAS_H * 0.55, scale=1.3,
            description="Left side of a two-person conversation",
        ),
        "duo_right": PositionPreset(
            x=CANVAS_W * 0.65, y=CANVAS_H * 0.55, scale=1.3,
            description="Right side of a two-person conversation",
        ),
    })
    return presets


POSITION_PRESETS: MappingProxyType[str, PositionPreset] = MappingProxyType(_build_presets())


def _jitter_rand(seed: int) -> float:
    h = math.sin(seed * 9301 + 49297) * 49297
    return h - math.floor(h)


def resolve_position(name: str, jitter: bool = False, seed: int = 0) -> ResolvedPosition:
    """Resolve a preset name to pixel coordinates and scale.

    With *jitter*, offsets of at most +/-30px, +/-15px and +/-5% scale are
    derived from *seed*, *seed + 1* and *seed + 2*.  Unknown names fall back
    to ``center_mid``.
    """
    preset = POSITION_PRESETS.get(name)
    if preset is None:
        logger.warning("Unknown position preset %r, using %s", name, DEFAULT_PRESET)
        preset = POSITION_PRESETS[DEFAULT_PRESET]

    if not jitter:
        return ResolvedPosition(x=preset.x, y=preset.y, scale=preset.scale)

    return ResolvedPosition(
        x=preset.x + (_jitter_rand(seed) - 0.5) * 2 * JITTER_X,
        y=preset.y + (_jitter_rand(seed + 1) - 0.5) * 2 * JITTER_Y,
        scale=preset.scale * (1 + (_jitter_rand(seed + 2) - 0.5) * 2 * JITTER_SCALE),
    )


def preset_manifest() -> list[dict[str, str]]:
    """Name and description of every preset, for scene-authoring prompts."""
    return [
        {"name": name, "description": preset.description}
        for name, preset in POSITION_PRESETS.items()
    ]
