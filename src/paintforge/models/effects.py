"""Post-processing effect configuration models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from paintforge.models.enums import (
    CanvasPreset,
    ColorGradePreset,
    KuwaharaStrength,
    PaintPreset,
    PaintStrength,
    coerce_enum,
)


class PaintEffectConfig(BaseModel):
    """Toggles and intensities for every stage of the scene effect stack."""

    model_config = ConfigDict(frozen=True)

    # Stage 1: edge-preserving colour smoothing
    kuwahara: bool = False
    kuwahara_strength: KuwaharaStrength = KuwaharaStrength.SUBTLE
    # Stage 2: paint warp
    oil_paint: bool = False
    oil_paint_strength: PaintStrength = PaintStrength.SUBTLE
    # Stage 3: canvas texture
    canvas_texture: bool = False
    canvas_preset: CanvasPreset = CanvasPreset.LINEN
    canvas_opacity: float = Field(default=0.0, ge=0.0, le=1.0)
    # Stage 4: per-frame grain
    film_grain: bool = False
    film_grain_intensity: float = Field(default=0.0, ge=0.0, le=1.0)
    # Stage 5: pigment density
    pigment_variation: bool = False
    pigment_intensity: float = Field(default=0.0, ge=0.0, le=1.0)
    # Stage 6: colour grade
    color_grade: ColorGradePreset = ColorGradePreset.NONE
    color_grade_intensity: float = Field(default=0.0, ge=0.0, le=1.0)
    # Stage 7: vignette
    vignette: bool = False
    vignette_intensity: float = Field(default=0.0, ge=0.0, le=1.0)
    vignette_radius: float = Field(default=0.5, gt=0.0, le=1.0)


class EffectsConfig(BaseModel):
    """Which effect preset to apply, plus overrides for the ``custom`` preset."""

    preset: PaintPreset = PaintPreset.STANDARD
    overrides: dict[str, Any] = Field(default_factory=dict)

    @field_validator("preset", mode="before")
    @classmethod
    def _known_preset(cls, value: object) -> PaintPreset:
        return coerce_enum(PaintPreset, value, PaintPreset.STANDARD)
