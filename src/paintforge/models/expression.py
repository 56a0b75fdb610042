"""Facial expression parameter models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from paintforge.models.enums import Emotion


class ExpressionParams(BaseModel):
    """Facial feature offsets for one emotion, relative to neutral."""

    model_config = ConfigDict(frozen=True)

    eye_scale_y: float = 1.0  # 1 = normal, >1 wider, <1 squint
    eye_offset_y: float = 0.0
    pupil_scale: float = 1.0
    brow_left_y: float = 0.0  # negative = raised
    brow_right_y: float = 0.0
    brow_left_rotation: float = 0.0  # degrees
    brow_right_rotation: float = 0.0
    mouth_curve: float = 0.0  # positive = smile
    mouth_width: float = 1.0
    mouth_open: float = 0.0  # 0 closed .. 1 fully open
    blush_opacity: float = 0.0
    head_tilt: float = 0.0  # degrees


class TransitionRecord(BaseModel):
    """An explicit expression transition: which emotion blends into which, and when.

    Threaded by callers instead of hidden in a mutable tracker so frames can be
    evaluated in any order.
    """

    model_config = ConfigDict(frozen=True)

    from_emotion: Emotion = Emotion.NEUTRAL
    to_emotion: Emotion = Emotion.NEUTRAL
    start_frame: int = 0

    def retarget(self, emotion: Emotion, frame: int) -> TransitionRecord:
        """Return the record after requesting *emotion* at *frame*.

        Requesting the current target is a no-op; anything else starts a new
        transition from the old target, discarding in-flight progress.
        """
        if emotion == self.to_emotion:
            return self
        return TransitionRecord(from_emotion=self.to_emotion, to_emotion=emotion, start_frame=frame)
