"""Scene entry transitions: wrap incoming content in a time-varying container."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from paintforge.models.enums import TransitionType, coerce_enum
from paintforge.motion.easing import clamp01, ease_out, lerp, map_range
from paintforge.pipeline.tree import Node

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def transition_progress(frame: int, start_frame: int, duration: int) -> float:
    """0 before *start_frame*, linear over *duration* frames, then 1."""
    if duration <= 0:
        return 1.0 if frame >= start_frame else 0.0
    return clamp01((frame - start_frame) / duration)


def _crossfade(p: float) -> dict[str, object]:
    return {"opacity": ease_out(p)}


def _wipe(p: float) -> dict[str, object]:
    revealed = ease_out(p) * 100
    return {"clip": {"shape": "inset", "top": 0, "right": 100 - revealed, "bottom": 0, "left": 0}}


def _zoom_in(p: float) -> dict[str, object]:
    return {
        "scale": lerp(0.6, 1.0, ease_out(p)),
        "origin": "center",
        "opacity": map_range(p, 0.0, 0.3, 0.0, 1.0),
    }


def _slide(p: float) -> dict[str, object]:
    return {"translate_x_percent": lerp(100.0, 0.0, ease_out(p))}


def _iris(p: float) -> dict[str, object]:
    # 142% of the half-size covers the diagonal of a 16:9 frame.
    return {"clip": {"shape": "circle", "radius_percent": lerp(0.0, 142.0, ease_out(p)), "cx": 50, "cy": 50}}


_STYLES: dict[TransitionType, Callable[[float], dict[str, object]]] = {
    TransitionType.CROSSFADE: _crossfade,
    TransitionType.WIPE: _wipe,
    TransitionType.ZOOM_IN: _zoom_in,
    TransitionType.SLIDE: _slide,
    TransitionType.IRIS: _iris,
}


def wrap_transition(content: Node, kind: TransitionType | str, progress: float) -> Node | None:
    """Wrap *content* for an entry transition at *progress*.

    Returns ``None`` (draw nothing) at or before progress 0 and a plain
    container once complete or for ``none``.
    """
    style = coerce_enum(TransitionType, kind, TransitionType.NONE)
    if style is TransitionType.NONE or progress >= 1:
        return Node("transition", {"type": TransitionType.NONE.value}, (content,))
    if progress <= 0:
        return None
    props = {"type": style.value, "progress": progress, **_STYLES[style](progress)}
    return Node("transition", props, (content,))
