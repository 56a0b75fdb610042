"""Named arm gestures layered on top of idle and talking motion."""

from __future__ import annotations

from dataclasses import dataclass

from paintforge.models.enums import Gesture, coerce_enum
from paintforge.motion.easing import ease_in_out, ease_out, oscillate

DEFAULT_GESTURE_DURATION = 30

GESTURE_DURATIONS: dict[Gesture, int] = {
    Gesture.WAVE: 45,
    Gesture.POINT: 30,
    Gesture.SHRUG: 40,
    Gesture.EXPLAIN: 60,
    Gesture.CHEERS: 35,
}


@dataclass(frozen=True)
class GestureState:
    """Rotation offsets in degrees, added to the base arm pose."""

    left_arm_rotation: float = 0.0
    left_forearm_angle: float = 0.0
    right_arm_rotation: float = 0.0
    right_forearm_angle: float = 0.0


REST = GestureState()


def gesture_state(gesture: Gesture | str, frame: float, gesture_frame: float) -> GestureState:
    """Arm offsets for *gesture*.

    *frame* is the absolute frame (drives looping motion); *gesture_frame* is
    frames since the gesture began and drives the eased onset.
    """
    kind = coerce_enum(Gesture, gesture, Gesture.IDLE)
    entry = ease_out(min(1.0, gesture_frame / 8))

    if kind is Gesture.WAVE:
        wave = oscillate(frame, 3) * 20
        return GestureState(
            left_arm_rotation=(-45 + wave) * entry,
            left_forearm_angle=-40 * entry,
        )
    if kind is Gesture.POINT:
        return GestureState(left_arm_rotation=-55 * entry, left_forearm_angle=-70 * entry)
    if kind is Gesture.SHRUG:
        hold = ease_in_out(min(1.0, gesture_frame / 12))
        return GestureState(
            left_arm_rotation=-30 * hold,
            left_forearm_angle=-50 * hold,
            right_arm_rotation=30 * hold,
            right_forearm_angle=50 * hold,
        )
    if kind is Gesture.EXPLAIN:
        circ_x = oscillate(frame, 1.5) * 15
        circ_y = oscillate(frame, 1.5, 1.57) * 8
        return GestureState(
            left_arm_rotation=(-35 + circ_x) * entry,
            left_forearm_angle=(-45 + circ_y) * entry,
        )
    if kind is Gesture.CHEERS:
        raise_ = ease_out(min(1.0, gesture_frame / 15))
        return GestureState(right_arm_rotation=-15 * raise_, right_forearm_angle=-20 * raise_)
    return REST


def gesture_duration(gesture: Gesture | str) -> int:
    """Nominal length of one gesture cycle, in frames."""
    return GESTURE_DURATIONS.get(
        coerce_enum(Gesture, gesture, Gesture.IDLE), DEFAULT_GESTURE_DURATION,
    )
