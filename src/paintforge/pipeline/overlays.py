"""Screen-space overlays drawn above the camera: data cards, subtitles and debug info."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from paintforge.models.enums import OverlayType
from paintforge.motion.easing import ease_out, ease_out_back, map_range
from paintforge.pipeline.tree import Node

if TYPE_CHECKING:
    from paintforge.models.scene import OverlayData
    from paintforge.pipeline.timeline import ResolvedFrame

SUBTITLE_MARGIN = 5
SUBTITLE_FADE = 8
SUBTITLE_RISE = 10.0

ACCENT_COLOR = "#D4A012"
BAR_MAX_WIDTH = 220.0
BAR_STAGGER = 5
BAR_GROW = 15
STAT_SLIDE = {"left": -60.0, "right": 60.0, "center": 0.0}


def fade_envelope(local: float, duration: float, fade_in: float, fade_out: float) -> float:
    """Opacity ramping 0 -> 1 over *fade_in* frames and back to 0 over the last *fade_out*."""
    return min(
        map_range(local, 0, fade_in, 0.0, 1.0),
        map_range(local, duration - fade_out, duration, 1.0, 0.0),
    )


def subtitle_node(text: str, start_frame: int, end_frame: int, frame: int) -> Node | None:
    """Subtitle card visible on ``[start_frame, end_frame]``.

    Fades in and out over eight frames and rises into place on entry.
    """
    if not text or frame < start_frame or frame > end_frame:
        return None
    local = frame - start_frame
    return Node("subtitle", {
        "text": text,
        "opacity": fade_envelope(local, end_frame - start_frame, SUBTITLE_FADE, SUBTITLE_FADE),
        "translate_y": map_range(local, 0, SUBTITLE_FADE, SUBTITLE_RISE, 0.0, ease_out),
        "bottom": 80,
    })


def scene_subtitle(resolved: ResolvedFrame) -> Node | None:
    scene = resolved.scene
    return subtitle_node(
        scene.subtitle,
        scene.start + SUBTITLE_MARGIN,
        scene.end - SUBTITLE_MARGIN,
        resolved.frame,
    )


# ---------------------------------------------------------------------------
# Data cards
# ---------------------------------------------------------------------------


def _position(props: Mapping[str, Any], default: str) -> str:
    position = props.get("position") or default
    return position if position in STAT_SLIDE else default


def stat_card(props: Mapping[str, Any], local: int, duration: int) -> tuple[dict[str, Any], tuple[Node, ...]]:
    """Big number plus label; pops in with a slight overshoot."""
    position = _position(props, "right")
    return {
        "position": position,
        "margin": 80,
        "top": 160,
        "opacity": fade_envelope(local, duration, 12, 10),
        "scale": map_range(local, 0, 12, 0.8, 1.0, ease_out_back),
        "translate_x": map_range(local, 0, 12, STAT_SLIDE[position], 0.0, ease_out),
        "translate_y": 0.0,
        "value": str(props.get("value", "")),
        "label": str(props.get("label", "")),
        "color": props.get("color") or ACCENT_COLOR,
    }, ()


def bar_chart(props: Mapping[str, Any], local: int, duration: int) -> tuple[dict[str, Any], tuple[Node, ...]]:
    """Horizontal bars growing one after another once the card has faded in."""
    fade_in = 15
    bars = props.get("bars") or []
    peak = max((float(bar.get("value", 0)) for bar in bars), default=0.0)
    children = []
    for i, bar in enumerate(bars):
        delay = fade_in + i * BAR_STAGGER
        progress = map_range(local, delay, delay + BAR_GROW, 0.0, 1.0, ease_out)
        value = float(bar.get("value", 0))
        children.append(Node("bar", {
            "label": str(bar.get("label", "")),
            "value": value,
            "shown_value": round(value * progress),
            "width": value / peak * BAR_MAX_WIDTH * progress if peak > 0 else 0.0,
            "color": bar.get("color") or f"hsl({40 + i * 30}, 70%, 55%)",
        }))
    position = props.get("position") if props.get("position") in ("left", "right") else "left"
    return {
        "position": position,
        "margin": 60,
        "top": 140,
        "opacity": fade_envelope(local, duration, fade_in, 10),
        "scale": 1.0,
        "translate_x": 0.0,
        "translate_y": 0.0,
        "title": str(props.get("title") or ""),
    }, tuple(children)


def fact_box(props: Mapping[str, Any], local: int, duration: int) -> tuple[dict[str, Any], tuple[Node, ...]]:
    """Callout text with a round accent badge, rising into place."""
    return {
        "position": _position(props, "right"),
        "margin": 60,
        "top": 320,
        "opacity": fade_envelope(local, duration, 10, 8),
        "scale": 1.0,
        "translate_x": 0.0,
        "translate_y": map_range(local, 0, 10, 20.0, 0.0, ease_out),
        "text": str(props.get("text", "")),
        "accent": str(props.get("accent") or "!"),
    }, ()


def topic_card(props: Mapping[str, Any], local: int, duration: int) -> tuple[dict[str, Any], tuple[Node, ...]]:
    """Lower third sliding in from the left with a growing accent bar."""
    return {
        "position": "left",
        "margin": 60,
        "bottom": 160,
        "opacity": fade_envelope(local, duration, 15, 12),
        "scale": 1.0,
        "translate_x": map_range(local, 0, 15, -300.0, 0.0, ease_out),
        "translate_y": 0.0,
        "bar_width": map_range(local, 5, 20, 0.0, 360.0, ease_out),
        "topic": str(props.get("topic", "")),
        "subtitle": str(props.get("subtitle") or ""),
        "color": ACCENT_COLOR,
    }, ()


CardBuilder = Callable[[Mapping[str, Any], int, int], tuple[dict[str, Any], tuple[Node, ...]]]

CARD_BUILDERS: dict[OverlayType, CardBuilder] = {
    OverlayType.STAT_CARD: stat_card,
    OverlayType.BAR_CHART: bar_chart,
    OverlayType.FACT_BOX: fact_box,
    OverlayType.TOPIC_CARD: topic_card,
}


def overlay_node(overlay: OverlayData, frame: int) -> Node | None:
    """The card for *overlay* at absolute *frame*, or ``None`` outside its window."""
    if overlay.type is None or frame < overlay.start_frame or frame > overlay.end_frame:
        return None
    local = frame - overlay.start_frame
    props, children = CARD_BUILDERS[overlay.type](overlay.props, local, overlay.end_frame - overlay.start_frame)
    return Node("card", {"type": overlay.type.value, **props}, children)


def overlay_nodes(overlays: Sequence[OverlayData], frame: int) -> list[Node]:
    nodes = (overlay_node(overlay, frame) for overlay in overlays)
    return [node for node in nodes if node is not None]


# ---------------------------------------------------------------------------
# Debug
# ---------------------------------------------------------------------------


def debug_node(
    resolved: ResolvedFrame,
    scene_count: int,
    talking: dict[str, bool],
    audio_segments: int = 0,
) -> Node:
    scene = resolved.scene
    cast = " | ".join(
        f"{c.id}: {c.emotion}{' (talking)' if talking.get(c.id) else ''}"
        for c in scene.characters
    )
    lines = [
        f"Scene {resolved.index + 1}/{scene_count} [{scene.id}]",
        f"Frame {resolved.frame} | {scene.start}-{scene.end}",
        cast,
    ]
    if audio_segments:
        lines.append(f"Audio: {audio_segments} segments")
    return Node("debug", {"lines": lines})
