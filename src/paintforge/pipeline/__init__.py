"""PaintForge frame pipeline - resolves scenes and composites visual trees."""

from paintforge.pipeline.asset_paint import paint_asset, with_asset_paint
from paintforge.pipeline.effects import apply_effects, build_stages, resolve_effect_config
from paintforge.pipeline.render import register_background, register_character, render_frame_at
from paintforge.pipeline.timeline import find_scene_at_frame, resolve_frame
from paintforge.pipeline.transitions import transition_progress, wrap_transition
from paintforge.pipeline.tree import Node

__all__ = [
    "Node",
    "apply_effects",
    "build_stages",
    "find_scene_at_frame",
    "paint_asset",
    "register_background",
    "register_character",
    "render_frame_at",
    "resolve_effect_config",
    "resolve_frame",
    "transition_progress",
    "with_asset_paint",
]
