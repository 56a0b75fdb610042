"""Scene-level painterly post-processing stack.

Seven stages in a fixed order.  The first two (colour smoothing and paint
warp) wrap the content itself; the rest are overlays stacked above it:

1. Kuwahara-style colour smoothing
2. Oil paint warp (displacement, emboss, warm saturation)
3. Canvas texture
4. Film grain (new seed every frame)
5. Pigment density variation
6. Colour grade
7. Vignette

Stages are plain values built from a :class:`PaintEffectConfig`.  Each one
describes its filter without naming it; :func:`apply_effects` assigns
identifiers from stage position, so two effect stacks never share a
namespace.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic.alias_generators import to_snake

from paintforge.models.effects import EffectsConfig, PaintEffectConfig
from paintforge.models.enums import (
    BlendMode,
    CanvasPreset,
    ColorGradePreset,
    KuwaharaStrength,
    PaintPreset,
    PaintStrength,
)
from paintforge.motion.easing import long_cycle_noise
from paintforge.pipeline.tree import Node

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Preset tables
# ---------------------------------------------------------------------------

PAINT_PRESETS: Mapping[PaintPreset, PaintEffectConfig] = MappingProxyType({
    PaintPreset.NONE: PaintEffectConfig(),
    PaintPreset.SUBTLE: PaintEffectConfig(
        canvas_texture=True, canvas_preset=CanvasPreset.SMOOTH, canvas_opacity=0.03,
        film_grain=True, film_grain_intensity=0.025,
        pigment_variation=True, pigment_intensity=0.03,
        color_grade=ColorGradePreset.GOLDEN, color_grade_intensity=0.5,
        vignette=True, vignette_intensity=0.25,
    ),
    PaintPreset.STANDARD: PaintEffectConfig(
        oil_paint=True, oil_paint_strength=PaintStrength.SUBTLE,
        canvas_texture=True, canvas_preset=CanvasPreset.LINEN, canvas_opacity=0.05,
        film_grain=True, film_grain_intensity=0.035,
        pigment_variation=True, pigment_intensity=0.04,
        color_grade=ColorGradePreset.GOLDEN, color_grade_intensity=0.7,
        vignette=True, vignette_intensity=0.35,
    ),
    PaintPreset.CINEMATIC: PaintEffectConfig(
        oil_paint=True, oil_paint_strength=PaintStrength.MEDIUM,
        kuwahara=True, kuwahara_strength=KuwaharaStrength.SUBTLE,
        canvas_texture=True, canvas_preset=CanvasPreset.WATERCOLOR, canvas_opacity=0.06,
        film_grain=True, film_grain_intensity=0.04,
        pigment_variation=True, pigment_intensity=0.05,
        color_grade=ColorGradePreset.GOLDEN, color_grade_intensity=1.0,
        vignette=True, vignette_intensity=0.45,
    ),
    PaintPreset.HEAVY: PaintEffectConfig(
        oil_paint=True, oil_paint_strength=PaintStrength.HEAVY,
        kuwahara=True, kuwahara_strength=KuwaharaStrength.MEDIUM,
        canvas_texture=True, canvas_preset=CanvasPreset.BURLAP, canvas_opacity=0.08,
        film_grain=True, film_grain_intensity=0.05,
        pigment_variation=True, pigment_intensity=0.06,
        color_grade=ColorGradePreset.SEPIA, color_grade_intensity=1.0,
        vignette=True, vignette_intensity=0.5,
    ),
})


@dataclass(frozen=True)
class OilPaintParams:
    turbulence_freq: float
    octaves: int
    displacement: float
    emboss: float
    soft_blur: float
    saturation: float
    warmth: float


OIL_PAINT_PRESETS: Mapping[PaintStrength, OilPaintParams] = MappingProxyType({
    PaintStrength.SUBTLE: OilPaintParams(0.015, 2, 2, 0.3, 0.3, 1.08, 0.02),
    PaintStrength.MEDIUM: OilPaintParams(0.012, 3, 4, 0.6, 0.5, 1.15, 0.04),
    PaintStrength.HEAVY: OilPaintParams(0.008, 4, 7, 1.2, 0.8, 1.25, 0.06),
})


@dataclass(frozen=True)
class KuwaharaParams:
    blur_radius: float
    edge_radius: float
    quant_steps: int
    detail_mix: float


KUWAHARA_PRESETS: Mapping[KuwaharaStrength, KuwaharaParams] = MappingProxyType({
    KuwaharaStrength.SUBTLE: KuwaharaParams(0.8, 0.5, 32, 0.7),
    KuwaharaStrength.MEDIUM: KuwaharaParams(1.5, 1.0, 20, 0.5),
    KuwaharaStrength.HEAVY: KuwaharaParams(2.5, 1.5, 12, 0.3),
})


@dataclass(frozen=True)
class CanvasParams:
    frequency: float
    octaves: int
    grain_color: str
    blend: BlendMode
    default_opacity: float
    noise_type: str


CANVAS_PRESETS: Mapping[CanvasPreset, CanvasParams] = MappingProxyType({
    CanvasPreset.LINEN: CanvasParams(0.65, 4, "#8A7A60", BlendMode.MULTIPLY, 0.06, "fractalNoise"),
    CanvasPreset.WATERCOLOR: CanvasParams(0.02, 5, "#A09080", BlendMode.OVERLAY, 0.08, "turbulence"),
    CanvasPreset.BURLAP: CanvasParams(1.2, 2, "#7A6A50", BlendMode.MULTIPLY, 0.05, "fractalNoise"),
    CanvasPreset.PARCHMENT: CanvasParams(0.04, 6, "#C8B898", BlendMode.SOFT_LIGHT, 0.1, "turbulence"),
    CanvasPreset.SMOOTH: CanvasParams(0.3, 3, "#908070", BlendMode.MULTIPLY, 0.04, "fractalNoise"),
})


@dataclass(frozen=True)
class GradeParams:
    color: tuple[int, int, int]
    blend: BlendMode
    opacity: float


COLOR_GRADES: Mapping[ColorGradePreset, GradeParams] = MappingProxyType({
    ColorGradePreset.GOLDEN: GradeParams((255, 200, 100), BlendMode.MULTIPLY, 0.12),
    ColorGradePreset.MOONLIT: GradeParams((100, 130, 200), BlendMode.SCREEN, 0.08),
    ColorGradePreset.SEPIA: GradeParams((180, 140, 80), BlendMode.MULTIPLY, 0.15),
    ColorGradePreset.EMERALD: GradeParams((80, 180, 120), BlendMode.MULTIPLY, 0.08),
})

PIGMENT_COLOR = "#8A7A60"
PIGMENT_FREQUENCY = 0.005
PIGMENT_OCTAVES = 3
PIGMENT_SEED = 42

GRAIN_FREQUENCY = 0.8
GRAIN_OCTAVES = 2


# ---------------------------------------------------------------------------
# Seeds
# ---------------------------------------------------------------------------


def oil_paint_seed(frame: int) -> int:
    """Turbulence seed for the paint warp; drifts over many seconds."""
    return math.floor(long_cycle_noise(frame * 0.01, 777) * 3 + 5)


def canvas_seed(frame: int) -> int:
    return math.floor(long_cycle_noise(frame * 0.002, 1234) * 3 + 7)


def grain_seed(frame: int) -> int:
    """Film grain seed; changes every frame."""
    return (frame * 7 + 13) % 1000


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    value = color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def saturation_matrix(saturation: float, warmth: float = 0.0) -> list[float]:
    """Row-major 4x5 colour matrix: luminance-preserving saturation plus warm offset."""
    s = saturation
    return [
        0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s, 0, warmth,
        0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s, 0, warmth * 0.5,
        0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s, 0, 0,
        0, 0, 0, 1, 0,
    ]


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KuwaharaStage:
    strength: KuwaharaStrength

    tag: ClassVar[str] = "kuwahara"
    wraps_content: ClassVar[bool] = True

    @property
    def params(self) -> KuwaharaParams:
        return KUWAHARA_PRESETS[self.strength]

    def describe(self, frame: int) -> dict[str, Any]:
        p = self.params
        steps = p.quant_steps
        table = [round(i / (steps - 1), 6) for i in range(steps)]
        return {
            "primitives": [
                {"op": "morphology", "operator": "dilate", "radius": p.edge_radius, "result": "dilated"},
                {"op": "morphology", "operator": "erode", "radius": p.edge_radius, "result": "eroded"},
                {"op": "gaussian_blur", "std_deviation": p.blur_radius, "result": "smoothed"},
                {"op": "component_transfer", "in": "smoothed", "type": "discrete",
                 "table_values": table, "result": "quantized"},
                {"op": "composite", "in": "dilated", "in2": "eroded", "operator": "arithmetic",
                 "k": [0, 1, -1, 0], "result": "edges"},
                {"op": "blend", "in": "quantized", "in2": "SourceGraphic",
                 "detail_mix": p.detail_mix, "result": "mixed"},
                {"op": "composite", "in": "mixed", "in2": "edges", "operator": "arithmetic",
                 "k": [0, 1, -0.06, 0], "result": "final"},
            ],
        }


@dataclass(frozen=True)
class OilPaintStage:
    strength: PaintStrength

    tag: ClassVar[str] = "oil_paint"
    wraps_content: ClassVar[bool] = True

    @property
    def params(self) -> OilPaintParams:
        return OIL_PAINT_PRESETS[self.strength]

    def describe(self, frame: int) -> dict[str, Any]:
        p = self.params
        e = p.emboss
        primitives: list[dict[str, Any]] = [
            {"op": "turbulence", "type": "turbulence", "base_frequency": p.turbulence_freq,
             "octaves": p.octaves, "seed": oil_paint_seed(frame), "result": "noise"},
            {"op": "displacement", "in": "SourceGraphic", "in2": "noise",
             "scale": p.displacement, "result": "displaced"},
        ]
        if e > 0:
            primitives.append({
                "op": "convolve", "in": "displaced", "order": 3,
                "kernel": [-e, -e, 0, -e, 1, e, 0, e, e], "result": "embossed",
            })
        primitives += [
            {"op": "gaussian_blur", "in": "embossed" if e > 0 else "displaced",
             "std_deviation": p.soft_blur, "result": "blurred"},
            {"op": "color_matrix", "in": "blurred",
             "values": saturation_matrix(p.saturation, p.warmth), "result": "colored"},
            {"op": "blend", "in": "colored", "in2": "SourceGraphic", "mode": "normal", "result": "final"},
        ]
        return {"primitives": primitives}


@dataclass(frozen=True)
class CanvasTextureStage:
    preset: CanvasPreset
    opacity: float

    tag: ClassVar[str] = "canvas_texture"
    wraps_content: ClassVar[bool] = False

    def describe(self, frame: int) -> dict[str, Any]:
        p = CANVAS_PRESETS[self.preset]
        return {
            "noise": {"type": p.noise_type, "base_frequency": p.frequency,
                      "octaves": p.octaves, "seed": canvas_seed(frame)},
            "tint": p.grain_color,
            "blend": p.blend.value,
            "opacity": self.opacity,
        }


@dataclass(frozen=True)
class FilmGrainStage:
    intensity: float

    tag: ClassVar[str] = "film_grain"
    wraps_content: ClassVar[bool] = False

    def describe(self, frame: int) -> dict[str, Any]:
        return {
            "noise": {"type": "fractalNoise", "base_frequency": GRAIN_FREQUENCY,
                      "octaves": GRAIN_OCTAVES, "seed": grain_seed(frame)},
            "saturate": 0,
            "blend": BlendMode.OVERLAY.value,
            "opacity": self.intensity,
        }


@dataclass(frozen=True)
class PigmentStage:
    intensity: float

    tag: ClassVar[str] = "pigment"
    wraps_content: ClassVar[bool] = False

    def describe(self, frame: int) -> dict[str, Any]:
        return {
            "noise": {"type": "fractalNoise", "base_frequency": PIGMENT_FREQUENCY,
                      "octaves": PIGMENT_OCTAVES, "seed": PIGMENT_SEED},
            "tint": PIGMENT_COLOR,
            "blend": BlendMode.MULTIPLY.value,
            "opacity": self.intensity,
        }


@dataclass(frozen=True)
class ColorGradeStage:
    preset: ColorGradePreset
    intensity: float

    tag: ClassVar[str] = "color_grade"
    wraps_content: ClassVar[bool] = False

    def describe(self, frame: int) -> dict[str, Any]:
        grade = COLOR_GRADES[self.preset]
        r, g, b = grade.color
        return {
            "fill": f"rgb({r}, {g}, {b})",
            "blend": grade.blend.value,
            "opacity": grade.opacity * self.intensity,
        }


@dataclass(frozen=True)
class VignetteStage:
    intensity: float
    radius: float = 0.5

    tag: ClassVar[str] = "vignette"
    wraps_content: ClassVar[bool] = False

    def describe(self, frame: int) -> dict[str, Any]:
        i = self.intensity
        return {
            "gradient": {
                "type": "radial", "cx": 0.5, "cy": 0.5, "r": self.radius, "color": "#000000",
                "stops": [[0.0, 0.0], [0.7, 0.0], [0.9, i * 0.5], [1.0, i]],
            },
        }


Stage = (
    KuwaharaStage | OilPaintStage | CanvasTextureStage | FilmGrainStage
    | PigmentStage | ColorGradeStage | VignetteStage
)


# ---------------------------------------------------------------------------
# Resolution and composition
# ---------------------------------------------------------------------------


def resolve_effect_config(effects: EffectsConfig | None) -> PaintEffectConfig:
    """Concrete stage settings for *effects*.

    ``custom`` starts from ``standard`` and applies ``overrides``; override
    keys may be snake_case or camelCase.  Overrides are ignored for every
    other preset.
    """
    effects = effects or EffectsConfig()
    if effects.preset is not PaintPreset.CUSTOM:
        if effects.overrides:
            logger.debug("Ignoring overrides for non-custom preset %s", effects.preset)
        return PAINT_PRESETS[effects.preset]
    base = PAINT_PRESETS[PaintPreset.STANDARD].model_dump()
    base.update({to_snake(key): value for key, value in effects.overrides.items()})
    return PaintEffectConfig.model_validate(base)


def build_stages(config: PaintEffectConfig) -> list[Stage]:
    """Enabled stages for *config*, in compositing order."""
    candidates: list[Stage | None] = [
        KuwaharaStage(config.kuwahara_strength) if config.kuwahara else None,
        OilPaintStage(config.oil_paint_strength) if config.oil_paint else None,
        CanvasTextureStage(config.canvas_preset, config.canvas_opacity) if config.canvas_texture else None,
        FilmGrainStage(config.film_grain_intensity) if config.film_grain else None,
        PigmentStage(config.pigment_intensity) if config.pigment_variation else None,
        (
            ColorGradeStage(config.color_grade, config.color_grade_intensity)
            if config.color_grade is not ColorGradePreset.NONE else None
        ),
        VignetteStage(config.vignette_intensity, config.vignette_radius) if config.vignette else None,
    ]
    return [stage for stage in candidates if stage is not None]


def apply_effects(
    content: Node,
    effects: EffectsConfig | None,
    frame: int,
    *,
    id_prefix: str = "fx",
) -> Node:
    """Wrap *content* with the effect stack for *effects* at *frame*.

    The ``none`` preset returns *content* itself, without any wrapper.
    """
    effects = effects or EffectsConfig()
    if effects.preset is PaintPreset.NONE:
        return content

    stages = build_stages(resolve_effect_config(effects))
    logger.debug("Effect stages for frame %d: %s", frame, [s.tag for s in stages])

    body = content
    overlays: list[Node] = []
    for index, stage in enumerate(stages):
        props = {"id": f"{id_prefix}-{index}-{stage.tag}", "stage": stage.tag, **stage.describe(frame)}
        if stage.wraps_content:
            body = Node("filter", props, (body,))
        else:
            overlays.append(Node("overlay", props))
    return Node("effects", {"preset": effects.preset.value}, (body, *overlays))
