"""Closed-form character motion: every value is a pure function of the frame."""

from paintforge.motion.easing import (
    clamp01,
    ease_in_out,
    ease_out,
    ease_out_back,
    hash01,
    lerp,
    long_cycle_noise,
    map_range,
    oscillate,
)
from paintforge.motion.expressions import (
    ExpressionTracker,
    TrackerOrderError,
    expression_params,
    interpolate,
    params_for_record,
)
from paintforge.motion.gestures import gesture_duration, gesture_state
from paintforge.motion.idle import blink, breathing, idle_state, sway
from paintforge.motion.lipsync import is_talking_at_frame, lip_sync
from paintforge.motion.pose import CharacterPose, pose_character
from paintforge.motion.talking import mouth_shape, mouth_shape_from_phonemes

__all__ = [
    "CharacterPose",
    "ExpressionTracker",
    "TrackerOrderError",
    "blink",
    "breathing",
    "clamp01",
    "ease_in_out",
    "ease_out",
    "ease_out_back",
    "expression_params",
    "gesture_duration",
    "gesture_state",
    "hash01",
    "idle_state",
    "interpolate",
    "is_talking_at_frame",
    "lerp",
    "lip_sync",
    "long_cycle_noise",
    "map_range",
    "mouth_shape",
    "mouth_shape_from_phonemes",
    "oscillate",
    "params_for_record",
    "pose_character",
    "sway",
]
