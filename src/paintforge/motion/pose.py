"""Assemble every motion layer into one character pose for a frame."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from paintforge.models.enums import Emotion, Gesture, MouthShape
from paintforge.models.expression import ExpressionParams
from paintforge.motion.expressions import interpolate
from paintforge.motion.gestures import REST, GestureState, gesture_state
from paintforge.motion.idle import IdleState, idle_state
from paintforge.motion.talking import mouth_shape, talking_bounce, talking_gesture


@dataclass(frozen=True)
class CharacterPose:
    """Everything a character renderer needs to draw one frame."""

    expression: ExpressionParams
    idle: IdleState
    mouth: MouthShape
    talking: bool
    bounce: float
    hand_rotation: float
    gesture: GestureState

    def to_props(self) -> dict[str, object]:
        """JSON-friendly view passed to renderers."""
        return {
            "expression": self.expression.model_dump(),
            "idle": asdict(self.idle),
            "mouth": int(self.mouth),
            "talking": self.talking,
            "bounce": self.bounce,
            "hand_rotation": self.hand_rotation,
            "gesture": asdict(self.gesture),
        }


def pose_character(
    frame: int,
    *,
    emotion: Emotion,
    previous_emotion: Emotion | None = None,
    emotion_progress: float = 1.0,
    talking: bool = False,
    gesture: Gesture | None = None,
    gesture_frame: int = 0,
    mouth: MouthShape | None = None,
) -> CharacterPose:
    """Compute the full pose of one character at *frame*.

    *mouth* overrides the synthetic talking cycle, e.g. with a phoneme-derived
    shape from narration audio.
    """
    expression = interpolate(previous_emotion or emotion, emotion, emotion_progress)
    arms = gesture_state(gesture, frame, gesture_frame) if gesture else REST
    return CharacterPose(
        expression=expression,
        idle=idle_state(frame),
        mouth=mouth if mouth is not None else mouth_shape(frame, talking),
        talking=talking,
        bounce=talking_bounce(frame, talking),
        hand_rotation=talking_gesture(frame, talking),
        gesture=arms,
    )
