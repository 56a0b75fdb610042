"""Per-asset paint treatment.

Scene-wide effects (grade, vignette, film grain) live in
:mod:`paintforge.pipeline.effects`.  This module handles what should match
each asset's own level of detail: edge displacement, optional edge
roughening, a saturation bump and a canvas grain layer.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from paintforge.models.enums import AssetPaintCategory, BlendMode, coerce_enum
from paintforge.pipeline.tree import Node, Renderer

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetPaintParams:
    displacement: float
    turbulence_freq: float
    grain_frequency: float
    grain_octaves: int
    grain_opacity: float
    grain_blend: BlendMode
    edge_radius: float
    saturation: float


ASSET_PAINT_PRESETS: Mapping[AssetPaintCategory, AssetPaintParams] = MappingProxyType({
    AssetPaintCategory.SKY_DAY: AssetPaintParams(1.2, 0.025, 0.5, 3, 0.04, BlendMode.MULTIPLY, 0, 1.05),
    AssetPaintCategory.SKY_TWILIGHT: AssetPaintParams(1.5, 0.02, 0.4, 4, 0.05, BlendMode.OVERLAY, 0, 1.08),
    AssetPaintCategory.SKY_NIGHT: AssetPaintParams(0.5, 0.015, 0.6, 2, 0.025, BlendMode.MULTIPLY, 0, 1.03),
    AssetPaintCategory.SKY_STORM: AssetPaintParams(2.0, 0.03, 0.35, 4, 0.05, BlendMode.MULTIPLY, 0, 1.04),
    AssetPaintCategory.SKY_SPECIAL: AssetPaintParams(1.0, 0.02, 0.45, 3, 0.04, BlendMode.MULTIPLY, 0, 1.05),
    AssetPaintCategory.TERRAIN: AssetPaintParams(1.8, 0.03, 0.55, 4, 0.05, BlendMode.MULTIPLY, 0.3, 1.06),
    AssetPaintCategory.TERRAIN_INDOOR: AssetPaintParams(0.8, 0.02, 0.7, 3, 0.035, BlendMode.MULTIPLY, 0, 1.02),
    AssetPaintCategory.CHARACTER: AssetPaintParams(0.6, 0.025, 0.6, 2, 0.03, BlendMode.SOFT_LIGHT, 0, 1.04),
})

_SKY_CATEGORIES = {
    "day": AssetPaintCategory.SKY_DAY,
    "twilight": AssetPaintCategory.SKY_TWILIGHT,
    "night": AssetPaintCategory.SKY_NIGHT,
    "storm": AssetPaintCategory.SKY_STORM,
    "special": AssetPaintCategory.SKY_SPECIAL,
}


def asset_paint_seed(frame: int) -> int:
    return math.floor((frame * 0.003 + 7.3) % 10 + 5)


def _boost_matrix(s: float) -> list[float]:
    sr = (1 - s) * 0.2126
    sg = (1 - s) * 0.7152
    sb = (1 - s) * 0.0722
    return [
        sr + s, sg, sb, 0, 0,
        sr, sg + s, sb, 0, 0,
        sr, sg, sb + s, 0, 0,
        0, 0, 0, 1, 0,
    ]


def _paint_filter(params: AssetPaintParams, seed: int) -> dict[str, Any]:
    primitives: list[dict[str, Any]] = [
        {"op": "turbulence", "type": "fractalNoise", "base_frequency": params.turbulence_freq,
         "octaves": 2, "seed": seed, "result": "paintNoise"},
        {"op": "displacement", "in": "SourceGraphic", "in2": "paintNoise",
         "scale": params.displacement, "result": "displaced"},
    ]
    source = "displaced"
    if params.edge_radius > 0:
        primitives += [
            {"op": "morphology", "in": "displaced", "operator": "dilate",
             "radius": params.edge_radius * 0.5, "result": "dilated"},
            {"op": "morphology", "in": "displaced", "operator": "erode",
             "radius": params.edge_radius * 0.3, "result": "eroded"},
            {"op": "composite", "in": "dilated", "in2": "eroded", "operator": "atop", "result": "roughened"},
        ]
        source = "roughened"
    primitives.append({"op": "color_matrix", "in": source, "values": _boost_matrix(params.saturation)})
    return {"primitives": primitives}


def paint_asset(
    content: Node,
    category: AssetPaintCategory | str,
    frame: int,
    *,
    asset_id: str = "asset",
) -> Node:
    """Apply the paint treatment for *category* to a rendered asset.

    ``none`` (or an unknown category) returns *content* untouched.
    """
    resolved = coerce_enum(AssetPaintCategory, category, AssetPaintCategory.NONE)
    if resolved is AssetPaintCategory.NONE:
        return content

    params = ASSET_PAINT_PRESETS[resolved]
    seed = asset_paint_seed(frame)
    body = content
    if params.displacement > 0:
        body = Node(
            "filter",
            {"id": f"{asset_id}-asset-paint", "stage": "asset_paint", **_paint_filter(params, seed)},
            (content,),
        )
    children = [body]
    if params.grain_opacity > 0:
        children.append(Node("overlay", {
            "id": f"{asset_id}-asset-grain",
            "stage": "asset_grain",
            "noise": {"type": "fractalNoise", "base_frequency": params.grain_frequency,
                      "octaves": params.grain_octaves, "seed": seed + 100},
            "saturate": 0,
            "blend": params.grain_blend.value,
            "opacity": params.grain_opacity,
        }))
    return Node("asset", {"id": asset_id, "paint": resolved.value}, tuple(children))


def with_asset_paint(renderer: Renderer, category: AssetPaintCategory | str, asset_id: str) -> Renderer:
    """Wrap *renderer* so every node it produces gets the paint treatment."""
    resolved = coerce_enum(AssetPaintCategory, category, AssetPaintCategory.NONE)
    if resolved is AssetPaintCategory.NONE:
        return renderer

    def painted(frame: int, config: Mapping[str, Any]) -> Node:
        return paint_asset(renderer(frame, config), resolved, frame, asset_id=asset_id)

    painted.__name__ = f"painted_{asset_id}"
    return painted


def sky_paint_category(category: str) -> AssetPaintCategory:
    return _SKY_CATEGORIES.get(category, AssetPaintCategory.SKY_DAY)


def terrain_paint_category(category: str) -> AssetPaintCategory:
    return AssetPaintCategory.TERRAIN_INDOOR if category == "indoor" else AssetPaintCategory.TERRAIN
