"""Top-level frame compositor.

:func:`render_frame_at` turns a timeline and an absolute frame index into a
visual tree.  It holds no state between calls, so any frame can be rendered
on its own, out of order or in another process, and rendering the same frame
twice yields identical trees.

Concrete artwork lives outside this package.  Character and background
renderers are registered by id and called as ``(frame, config) -> Node``;
ids without a renderer get a labelled placeholder.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from paintforge.config import EffectSettings, MotionSettings, RenderSettings
from paintforge.models.effects import EffectsConfig
from paintforge.models.enums import MouthShape
from paintforge.models.scene import CameraPose, SceneRecord, Timeline
from paintforge.motion.lipsync import is_talking_at_frame, lip_sync
from paintforge.motion.pose import pose_character
from paintforge.pipeline.effects import apply_effects
from paintforge.pipeline.overlays import debug_node, overlay_nodes, scene_subtitle
from paintforge.pipeline.timeline import ResolvedCharacter, ResolvedFrame, resolve_frame
from paintforge.pipeline.transitions import wrap_transition
from paintforge.pipeline.tree import Node, Renderer
from paintforge.staging.camera import (
    HOME,
    TrackedCharacter,
    camera_path_pose,
    camera_pose_at,
    camera_transform,
)
from paintforge.staging.positions import resolve_position

if TYPE_CHECKING:
    from paintforge.config import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_CHARACTER_SCALE = 2.0
FALLBACK_BACKGROUND = "#2A2A2A"

_character_renderers: dict[str, Renderer] = {}
_background_renderers: dict[str, Renderer] = {}


def register_character(character_id: str, renderer: Renderer) -> None:
    """Register the renderer drawing *character_id*.  Call at start-up."""
    _character_renderers[character_id] = renderer


def register_background(name: str, renderer: Renderer) -> None:
    """Register the renderer drawing background *name*.  Call at start-up."""
    _background_renderers[name] = renderer


def clear_renderers() -> None:
    _character_renderers.clear()
    _background_renderers.clear()


def registered_renderers() -> dict[str, list[str]]:
    return {
        "characters": sorted(_character_renderers),
        "backgrounds": sorted(_background_renderers),
    }


@dataclass(frozen=True)
class _Settings:
    render: RenderSettings
    motion: MotionSettings
    effects: EffectSettings

    @classmethod
    def from_config(cls, config: AppConfig | None) -> _Settings:
        if config is None:
            return cls(RenderSettings(), MotionSettings(), EffectSettings())
        return cls(config.render, config.motion, config.effects)


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------


def render_background(bg: str, board_text: str, frame: int, settings: RenderSettings) -> Node:
    renderer = _background_renderers.get(bg)
    config = {"board_text": board_text, "width": settings.width, "height": settings.height}
    if renderer is not None:
        return Node("background", {"name": bg}, (renderer(frame, config),))
    return Node("background", {"name": bg}, (
        Node("fill", {"color": FALLBACK_BACKGROUND}),
        Node("label", {"text": f"BG: {bg}", "color": "rgba(255,255,255,0.2)", "font_size": 24}),
    ))


def _placement(character: ResolvedCharacter, index: int) -> tuple[float, float, float]:
    p = character.placement
    if p.position:
        seed = p.seed if p.seed is not None else index
        spot = resolve_position(p.position, jitter=p.jitter, seed=seed)
        return spot.x, spot.y, p.scale if p.scale is not None else spot.scale
    return p.x, p.y, p.scale if p.scale is not None else DEFAULT_CHARACTER_SCALE


def _voice(
    timeline: Timeline,
    character_id: str,
    frame: int,
    scripted: bool,
    fps: int,
) -> tuple[bool, MouthShape | None]:
    """Talking flag and mouth override; narration audio beats the scene flag.

    The flag ends at the last phoneme onset.  Past it the mouth is closed even
    though the lip-sync tail is still running.
    """
    if not timeline.audio_segments:
        return scripted, None
    talking = is_talking_at_frame(timeline.audio_segments, character_id, frame, fps)
    if not talking:
        return False, MouthShape.CLOSED
    mouth, _ = lip_sync(timeline.audio_segments, character_id, frame, fps)
    return True, mouth


def render_character(
    character: ResolvedCharacter,
    resolved: ResolvedFrame,
    timeline: Timeline,
    fps: int,
    index: int = 0,
) -> Node:
    p = character.placement
    x, y, scale = _placement(character, index)
    talking, mouth = _voice(timeline, p.id, resolved.frame, p.talking, fps)
    pose = pose_character(
        resolved.frame,
        emotion=p.emotion,
        previous_emotion=character.previous_emotion,
        emotion_progress=character.emotion_progress,
        talking=talking,
        gesture=p.gesture,
        gesture_frame=resolved.frames_into_scene,
        mouth=mouth,
    )
    props = {"id": p.id, "x": x, "y": y, "scale": scale}

    renderer = _character_renderers.get(p.id)
    if renderer is None:
        return Node("character", {**props, "placeholder": True, "pose": pose.to_props()}, (
            Node("label", {"text": p.id, "width": 60, "height": 80, "color": "rgba(255,100,100,0.3)"}),
        ))
    config = {
        **props,
        "emotion": p.emotion.value,
        "previous_emotion": character.previous_emotion.value,
        "emotion_progress": character.emotion_progress,
        "talking": talking,
        "gesture": p.gesture.value if p.gesture else None,
        "pose": pose.to_props(),
    }
    return Node("character", props, (renderer(resolved.frame, config),))


def scene_camera(
    resolved: ResolvedFrame,
    positions: list[TrackedCharacter],
    settings: _Settings,
) -> CameraPose:
    scene = resolved.scene
    current = scene.camera or HOME
    previous = (resolved.previous.camera if resolved.previous else None) or HOME
    entry = settings.motion.camera_transition_frames
    if scene.camera_path is not None:
        return camera_path_pose(
            scene.camera_path,
            resolved.frame,
            scene.start,
            scene.end,
            previous=previous,
            fallback=current,
            characters=positions,
            width=settings.render.width,
            height=settings.render.height,
            entry_frames=entry,
        )
    return camera_pose_at(resolved.frame, previous, current, scene.start, entry)


def scene_effects(
    scene: SceneRecord,
    effects: EffectsConfig | None,
    defaults: EffectSettings | None = None,
) -> EffectsConfig:
    """Effects for *scene*: its own, else *effects*, else the default preset."""
    if scene.effects is not None:
        return scene.effects
    if effects is not None:
        return effects
    return EffectsConfig(preset=(defaults or EffectSettings()).preset)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _frame_props(frame: int, settings: RenderSettings, **extra: Any) -> dict[str, Any]:
    return {
        "frame": frame,
        "width": settings.width,
        "height": settings.height,
        "background": settings.background,
        **extra,
    }


def render_frame_at(
    frame: int,
    timeline: Timeline | Sequence[SceneRecord],
    effects: EffectsConfig | None = None,
    *,
    config: AppConfig | None = None,
    show_debug: bool | None = None,
) -> Node:
    """Composite *frame* of *timeline* into a visual tree.

    Effects resolve as: the scene's own ``effects``, else *effects*, else the
    configured default preset.  With no active scene the result is a bare
    background fill.  *timeline* may also be a bare ordered list of scene
    records; it is checked for overlaps the same way.
    """
    if not isinstance(timeline, Timeline):
        timeline = Timeline(scenes=list(timeline))
    settings = _Settings.from_config(config)
    resolved = resolve_frame(
        timeline, frame, expression_frames=settings.motion.expression_transition_frames,
    )
    if resolved is None:
        return Node("frame", _frame_props(frame, settings.render, scene=None))

    scene = resolved.scene
    fps = settings.render.fps

    characters = [
        render_character(c, resolved, timeline, fps, index) for index, c in enumerate(resolved.characters)
    ]
    tracked = [
        TrackedCharacter(node.props["id"], node.props["x"], node.props["y"]) for node in characters
    ]
    pose = scene_camera(resolved, tracked, settings)
    transform = camera_transform(pose, settings.render.width, settings.render.height)
    content = Node(
        "camera",
        {
            "x": pose.x,
            "y": pose.y,
            "zoom": pose.zoom,
            "transform": transform.css,
            "matrix": [transform.a, transform.b, transform.c, transform.d, transform.e, transform.f],
        },
        (render_background(scene.bg, scene.board_text, frame, settings.render), *characters),
    )

    chosen = scene_effects(scene, effects, settings.effects)
    content = apply_effects(content, chosen, frame, id_prefix=f"{scene.id}-fx")

    layer: Node | None = content
    if resolved.in_transition and scene.transition is not None:
        layer = wrap_transition(content, scene.transition.type, resolved.transition_progress)

    children: list[Node | None] = [
        layer,
        *overlay_nodes(scene.overlays, frame),
        *overlay_nodes(timeline.global_overlays, frame),
        scene_subtitle(resolved),
    ]
    debug = settings.render.show_debug if show_debug is None else show_debug
    if debug:
        talking = {
            c.placement.id: _voice(timeline, c.placement.id, frame, c.placement.talking, fps)[0]
            for c in resolved.characters
        }
        children.append(debug_node(resolved, len(timeline.scenes), talking, len(timeline.audio_segments)))

    return Node(
        "frame",
        _frame_props(frame, settings.render, scene=scene.id),
        tuple(c for c in children if c is not None),
    )
