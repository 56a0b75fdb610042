"""Pillow rasterisation of composited frames for look development.

This is a preview, not the production renderer: scene content is drawn as
flat fills and placeholder boxes, then the effect stages are approximated
with Pillow filters.  Output is deterministic for a given frame.
"""

from __future__ import annotations

import logging
import math
import random
from typing import TYPE_CHECKING

from PIL import Image, ImageChops, ImageDraw, ImageEnhance, ImageFilter

from paintforge.models.enums import BlendMode
from paintforge.pipeline.effects import (
    CANVAS_PRESETS,
    COLOR_GRADES,
    GRAIN_FREQUENCY,
    GRAIN_OCTAVES,
    PIGMENT_COLOR,
    PIGMENT_FREQUENCY,
    PIGMENT_OCTAVES,
    PIGMENT_SEED,
    CanvasTextureStage,
    ColorGradeStage,
    FilmGrainStage,
    KuwaharaStage,
    OilPaintStage,
    PigmentStage,
    Stage,
    VignetteStage,
    build_stages,
    canvas_seed,
    grain_seed,
    hex_to_rgb,
    oil_paint_seed,
    resolve_effect_config,
)
from paintforge.pipeline.render import render_frame_at, scene_effects
from paintforge.pipeline.timeline import find_scene_at_frame

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from paintforge.config import AppConfig
    from paintforge.models.effects import EffectsConfig
    from paintforge.models.scene import Timeline
    from paintforge.pipeline.tree import Node

logger = logging.getLogger(__name__)

# Coarsest noise lattice generated in Python; finer detail comes from resampling.
MAX_NOISE_CELLS = 256
MESH_CELL = 48


# ---------------------------------------------------------------------------
# Noise and blending helpers
# ---------------------------------------------------------------------------


def noise_image(
    size: tuple[int, int],
    frequency: float,
    octaves: int,
    seed: int,
) -> Image.Image:
    """Greyscale value noise: seeded random lattices upsampled and summed."""
    width, height = size
    # Seeded RNG for reproducible procedural textures, not cryptographic use.
    rng = random.Random(seed)  # noqa: S311
    acc = Image.new("L", size, 128)
    weight = 1.0
    total = 0.0
    for octave in range(max(1, octaves)):
        cells_x = max(2, min(MAX_NOISE_CELLS, round(width * frequency * 2**octave)))
        cells_y = max(2, min(MAX_NOISE_CELLS, round(cells_x * height / width)))
        lattice = Image.new("L", (cells_x, cells_y))
        lattice.putdata([rng.randrange(256) for _ in range(cells_x * cells_y)])
        layer = lattice.resize(size, Image.Resampling.BICUBIC)
        total += weight
        acc = Image.blend(acc, layer, weight / total)
        weight *= 0.5
    return acc


def tinted(noise: Image.Image, color: str) -> Image.Image:
    """Map noise onto a colour: 0.3 x noise plus the tint, per channel."""
    r, g, b = hex_to_rgb(color)
    channels = [noise.point(lambda v, c=c: min(255, int(v * 0.3 + c))) for c in (r, g, b)]
    return Image.merge("RGB", channels)


def blend(base: Image.Image, layer: Image.Image, mode: BlendMode | str, opacity: float) -> Image.Image:
    """Composite *layer* over *base* with a CSS-style blend mode."""
    if opacity <= 0:
        return base
    mode = BlendMode(mode)
    if mode is BlendMode.MULTIPLY:
        mixed = ImageChops.multiply(base, layer)
    elif mode is BlendMode.SCREEN:
        mixed = ImageChops.screen(base, layer)
    elif mode is BlendMode.OVERLAY:
        mixed = ImageChops.overlay(base, layer)
    elif mode is BlendMode.SOFT_LIGHT:
        mixed = ImageChops.soft_light(base, layer)
    else:
        mixed = layer
    return Image.blend(base, mixed, min(1.0, opacity))


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def kuwahara(image: Image.Image, stage: KuwaharaStage) -> Image.Image:
    """Smooth, quantise and darken edges: a cheap stand-in for Kuwahara."""
    p = stage.params
    smoothed = image.filter(ImageFilter.GaussianBlur(p.blur_radius))
    step = 255 / (p.quant_steps - 1)
    quantised = smoothed.point(lambda v: round(round(v / step) * step))
    mixed = Image.blend(quantised, image, p.detail_mix)

    size = max(3, 2 * math.ceil(p.edge_radius) + 1)
    edges = ImageChops.subtract(image.filter(ImageFilter.MaxFilter(size)), image.filter(ImageFilter.MinFilter(size)))
    return ImageChops.subtract(mixed, edges.point(lambda v: round(v * 0.06)))


def _displacement_mesh(
    size: tuple[int, int],
    scale: float,
    seed: int,
) -> list[tuple[tuple[int, int, int, int], tuple[float, ...]]]:
    width, height = size
    cols = max(1, math.ceil(width / MESH_CELL))
    rows = max(1, math.ceil(height / MESH_CELL))
    # Seeded RNG for reproducible procedural textures, not cryptographic use.
    rng = random.Random(seed)  # noqa: S311
    offsets = [
        [(rng.uniform(-0.5, 0.5) * scale, rng.uniform(-0.5, 0.5) * scale) for _ in range(cols + 1)]
        for _ in range(rows + 1)
    ]

    def corner(col: int, row: int) -> tuple[float, float]:
        x = min(col * MESH_CELL, width)
        y = min(row * MESH_CELL, height)
        # Keep the frame border fixed so no transparent gaps appear.
        if col in (0, cols) or row in (0, rows):
            return float(x), float(y)
        dx, dy = offsets[row][col]
        return x + dx, y + dy

    mesh = []
    for row in range(rows):
        for col in range(cols):
            box = (
                col * MESH_CELL,
                row * MESH_CELL,
                min((col + 1) * MESH_CELL, width),
                min((row + 1) * MESH_CELL, height),
            )
            quad = (*corner(col, row), *corner(col, row + 1), *corner(col + 1, row + 1), *corner(col + 1, row))
            mesh.append((box, quad))
    return mesh


def oil_paint(image: Image.Image, stage: OilPaintStage, frame: int) -> Image.Image:
    """Warp edges, emboss, soften and enrich colour."""
    p = stage.params
    warped = image.transform(
        image.size,
        Image.Transform.MESH,
        _displacement_mesh(image.size, p.displacement, oil_paint_seed(frame)),
        resample=Image.Resampling.BILINEAR,
    )
    e = p.emboss
    if e > 0:
        warped = warped.filter(ImageFilter.Kernel((3, 3), [-e, -e, 0, -e, 1, e, 0, e, e], scale=1))
    softened = warped.filter(ImageFilter.GaussianBlur(p.soft_blur))
    enriched = ImageEnhance.Color(softened).enhance(p.saturation)
    warm_r = round(p.warmth * 255)
    warm_g = round(p.warmth * 0.5 * 255)
    r, g, b = enriched.split()
    r = r.point(lambda v: min(255, v + warm_r))
    g = g.point(lambda v: min(255, v + warm_g))
    return Image.merge("RGB", (r, g, b))


def canvas_texture(image: Image.Image, stage: CanvasTextureStage, frame: int) -> Image.Image:
    p = CANVAS_PRESETS[stage.preset]
    layer = tinted(noise_image(image.size, p.frequency, p.octaves, canvas_seed(frame)), p.grain_color)
    return blend(image, layer, p.blend, stage.opacity)


def film_grain(image: Image.Image, stage: FilmGrainStage, frame: int) -> Image.Image:
    grain = noise_image(image.size, GRAIN_FREQUENCY, GRAIN_OCTAVES, grain_seed(frame)).convert("RGB")
    return blend(image, grain, BlendMode.OVERLAY, stage.intensity)


def pigment(image: Image.Image, stage: PigmentStage) -> Image.Image:
    layer = tinted(noise_image(image.size, PIGMENT_FREQUENCY, PIGMENT_OCTAVES, PIGMENT_SEED), PIGMENT_COLOR)
    return blend(image, layer, BlendMode.MULTIPLY, stage.intensity)


def color_grade(image: Image.Image, stage: ColorGradeStage) -> Image.Image:
    grade = COLOR_GRADES[stage.preset]
    layer = Image.new("RGB", image.size, grade.color)
    return blend(image, layer, grade.blend, grade.opacity * stage.intensity)


def _vignette_alpha(t: float, intensity: float) -> float:
    stops = ((0.0, 0.0), (0.7, 0.0), (0.9, intensity * 0.5), (1.0, intensity))
    if t >= 1.0:
        return intensity
    for (t0, a0), (t1, a1) in zip(stops, stops[1:]):
        if t <= t1:
            return a0 + (a1 - a0) * (t - t0) / (t1 - t0)
    return intensity


def vignette(image: Image.Image, stage: VignetteStage) -> Image.Image:
    # Compute at low resolution, then resample.
    mw, mh = 160, 90
    mask = Image.new("L", (mw, mh))
    mask.putdata([
        round(255 * _vignette_alpha(math.hypot((x + 0.5) / mw - 0.5, (y + 0.5) / mh - 0.5) / stage.radius,
                                    stage.intensity))
        for y in range(mh)
        for x in range(mw)
    ])
    mask = mask.resize(image.size, Image.Resampling.BILINEAR)
    return Image.composite(Image.new("RGB", image.size, (0, 0, 0)), image, mask)


def apply_stages(image: Image.Image, stages: Sequence[Stage], frame: int) -> Image.Image:
    """Run *stages* over *image* in order."""
    out = image.convert("RGB")
    for stage in stages:
        if isinstance(stage, KuwaharaStage):
            out = kuwahara(out, stage)
        elif isinstance(stage, OilPaintStage):
            out = oil_paint(out, stage, frame)
        elif isinstance(stage, CanvasTextureStage):
            out = canvas_texture(out, stage, frame)
        elif isinstance(stage, FilmGrainStage):
            out = film_grain(out, stage, frame)
        elif isinstance(stage, PigmentStage):
            out = pigment(out, stage)
        elif isinstance(stage, ColorGradeStage):
            out = color_grade(out, stage)
        elif isinstance(stage, VignetteStage):
            out = vignette(out, stage)
    return out


# ---------------------------------------------------------------------------
# Scene drawing
# ---------------------------------------------------------------------------


def _apply_matrix(matrix: Sequence[float], x: float, y: float) -> tuple[float, float]:
    a, b, c, d, e, f = matrix
    return a * x + c * y + e, b * x + d * y + f


SCREEN_KINDS = frozenset({"card", "subtitle", "debug"})


def draw_tree(tree: Node, width: int, height: int) -> Image.Image:
    """Flat drawing of the scene content: fills and placeholder characters.

    Screen-space children (cards, subtitles, debug) are left for
    :func:`draw_screen` so the effect stages never touch them.
    """
    image = Image.new("RGB", (width, height), tree.props.get("background", "#1A1A1A"))
    draw = ImageDraw.Draw(image)
    matrix: Sequence[float] = (1, 0, 0, 1, 0, 0)
    for child in tree.children:
        if child.kind in SCREEN_KINDS:
            continue
        for node in child.walk():
            if node.kind == "camera":
                matrix = node.props["matrix"]
            elif node.kind == "fill":
                draw.rectangle((0, 0, width, height), fill=node.props["color"])
            elif node.kind == "character":
                x, y = _apply_matrix(matrix, node.props["x"], node.props["y"])
                zoom = matrix[0]
                half_w = 30 * zoom * node.props["scale"]
                half_h = 40 * zoom * node.props["scale"]
                draw.rounded_rectangle(
                    (x - half_w, y - half_h, x + half_w, y + half_h),
                    radius=8,
                    fill=(200, 110, 100),
                    outline=(255, 140, 140),
                    width=2,
                )
                draw.text((x - half_w + 4, y - 6), node.props["id"], fill=(255, 255, 255))
    return image


def _card_lines(card: Node) -> list[str]:
    p = card.props
    if p["type"] == "statCard":
        return [p["value"], p["label"]]
    if p["type"] == "barChart":
        lines = [p["title"]] if p["title"] else []
        return lines + [f"{bar.props['label']}: {bar.props['shown_value']}" for bar in card.children]
    if p["type"] == "factBox":
        return [f"{p['accent']} {p['text']}"]
    return [p["subtitle"], p["topic"]] if p["subtitle"] else [p["topic"]]


def _draw_card(draw: ImageDraw.ImageDraw, card: Node, width: int, height: int) -> None:
    p = card.props
    lines = [line for line in _card_lines(card) if line]
    box_w = max((draw.textlength(line) for line in lines), default=0) + 32
    box_h = 20 * len(lines) + 16
    if p["position"] == "left":
        left = p["margin"]
    elif p["position"] == "right":
        left = width - p["margin"] - box_w
    else:
        left = (width - box_w) / 2
    top = p["top"] if "top" in p else height - p["bottom"] - box_h
    left += p["translate_x"]
    top += p["translate_y"]
    alpha = round(255 * p["opacity"])
    draw.rectangle((left, top, left + box_w, top + box_h), fill=(0, 0, 0, round(alpha * 0.8)))
    for i, line in enumerate(lines):
        draw.text((left + 16, top + 8 + 20 * i), line, fill=(255, 255, 255, alpha))


def draw_screen(image: Image.Image, tree: Node) -> Image.Image:
    """Cards and subtitles drawn over an already processed frame."""
    width, height = image.size
    layer = Image.new("RGBA", image.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    for node in tree.children:
        if node.kind == "card" and node.props["opacity"] > 0:
            _draw_card(draw, node, width, height)
        elif node.kind == "subtitle" and node.props["opacity"] > 0:
            text = node.props["text"]
            top = height - node.props["bottom"] - 40 + node.props["translate_y"]
            left, _, right, _ = draw.textbbox((0, 0), text)
            x = (width - (right - left)) / 2
            draw.rectangle((x - 16, top - 6, x + (right - left) + 16, top + 24), fill=(0, 0, 0, 255))
            draw.text((x, top), text, fill=(255, 255, 255, 255))
    return Image.alpha_composite(image.convert("RGBA"), layer).convert("RGB")


def preview_frame(
    frame: int,
    timeline: Timeline,
    effects: EffectsConfig | None = None,
    *,
    config: AppConfig | None = None,
) -> Image.Image:
    """Rasterise *frame* with the scene's effect stack approximated in Pillow."""
    tree = render_frame_at(frame, timeline, effects, config=config)
    width, height = tree.props["width"], tree.props["height"]
    base = draw_tree(tree, width, height)

    scene = find_scene_at_frame(timeline.scenes, frame)
    if scene is None:
        return draw_screen(base, tree)
    chosen = scene_effects(scene, effects, config.effects if config else None)
    stages = build_stages(resolve_effect_config(chosen))
    logger.debug("Preview of frame %d with %d stages", frame, len(stages))
    return draw_screen(apply_stages(base, stages, frame), tree)


def save_preview(image: Image.Image, output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    image.save(output, "PNG")
    return output
