"""Emotion parameter table, interpolation and transition tracking."""

from __future__ import annotations

import logging
from types import MappingProxyType

from paintforge.models.enums import Emotion, coerce_enum
from paintforge.models.expression import ExpressionParams, TransitionRecord
from paintforge.motion.easing import clamp01, ease_out, lerp

logger = logging.getLogger(__name__)

# Frames for a full emotion blend (~0.33s at 30fps).
TRANSITION_FRAMES = 10

EXPRESSIONS: MappingProxyType[Emotion, ExpressionParams] = MappingProxyType({
    Emotion.NEUTRAL: ExpressionParams(),
    Emotion.HAPPY: ExpressionParams(
        eye_scale_y=0.8, eye_offset_y=0.5, pupil_scale=1.05,
        brow_left_y=-2, brow_right_y=-2, brow_left_rotation=-3, brow_right_rotation=3,
        mouth_curve=8, mouth_width=1.15, mouth_open=0.2,
        blush_opacity=0.3, head_tilt=2,
    ),
    Emotion.SHOCKED: ExpressionParams(
        eye_scale_y=1.5, eye_offset_y=-1, pupil_scale=0.7,
        brow_left_y=-6, brow_right_y=-6, brow_left_rotation=0, brow_right_rotation=0,
        mouth_curve=-2, mouth_width=0.8, mouth_open=0.8,
        blush_opacity=0, head_tilt=0,
    ),
    Emotion.THINKING: ExpressionParams(
        eye_scale_y=0.9, eye_offset_y=-1, pupil_scale=1,
        brow_left_y=-1, brow_right_y=-4, brow_left_rotation=0, brow_right_rotation=8,
        mouth_curve=-1, mouth_width=0.85, mouth_open=0,
        blush_opacity=0, head_tilt=-5,
    ),
    Emotion.ANGRY: ExpressionParams(
        eye_scale_y=0.7, eye_offset_y=1, pupil_scale=0.85,
        brow_left_y=1, brow_right_y=1, brow_left_rotation=12, brow_right_rotation=-12,
        mouth_curve=-5, mouth_width=1.1, mouth_open=0.1,
        blush_opacity=0, head_tilt=-2,
    ),
    Emotion.SAD: ExpressionParams(
        eye_scale_y=0.85, eye_offset_y=1, pupil_scale=1.1,
        brow_left_y=-2, brow_right_y=-2, brow_left_rotation=-8, brow_right_rotation=8,
        mouth_curve=-6, mouth_width=0.9, mouth_open=0,
        blush_opacity=0, head_tilt=3,
    ),
    Emotion.EXCITED: ExpressionParams(
        eye_scale_y=1.3, eye_offset_y=-0.5, pupil_scale=1.15,
        brow_left_y=-5, brow_right_y=-5, brow_left_rotation=-4, brow_right_rotation=4,
        mouth_curve=10, mouth_width=1.25, mouth_open=0.5,
        blush_opacity=0.4, head_tilt=3,
    ),
    Emotion.CONFUSED: ExpressionParams(
        eye_scale_y=1.1, eye_offset_y=0, pupil_scale=0.9,
        brow_left_y=2, brow_right_y=-5, brow_left_rotation=-5, brow_right_rotation=10,
        mouth_curve=-2, mouth_width=0.8, mouth_open=0.1,
        blush_opacity=0, head_tilt=-7,
    ),
    Emotion.PROUD: ExpressionParams(
        eye_scale_y=0.85, eye_offset_y=0.5, pupil_scale=1.05,
        brow_left_y=-1, brow_right_y=-1, brow_left_rotation=-2, brow_right_rotation=2,
        mouth_curve=5, mouth_width=1.05, mouth_open=0.1,
        blush_opacity=0.15, head_tilt=-4,
    ),
    Emotion.WHISPER: ExpressionParams(
        eye_scale_y=1.1, eye_offset_y=0, pupil_scale=1,
        brow_left_y=-2, brow_right_y=-2, brow_left_rotation=0, brow_right_rotation=0,
        mouth_curve=0, mouth_width=0.7, mouth_open=0.15,
        blush_opacity=0, head_tilt=6,
    ),
    Emotion.DRAMATIC: ExpressionParams(
        eye_scale_y=1.4, eye_offset_y=-1, pupil_scale=1.2,
        brow_left_y=-6, brow_right_y=-6, brow_left_rotation=-6, brow_right_rotation=6,
        mouth_curve=3, mouth_width=1.2, mouth_open=0.6,
        blush_opacity=0.1, head_tilt=0,
    ),
    Emotion.SKEPTICAL: ExpressionParams(
        eye_scale_y=0.85, eye_offset_y=0.5, pupil_scale=0.95,
        brow_left_y=2, brow_right_y=-4, brow_left_rotation=5, brow_right_rotation=8,
        mouth_curve=-2, mouth_width=0.85, mouth_open=0,
        blush_opacity=0, head_tilt=-3,
    ),
})


class TrackerOrderError(ValueError):
    """Raised when an expression tracker is asked to go back in time."""


def expression_params(emotion: Emotion | str) -> ExpressionParams:
    """Return the parameter set for *emotion*; unknown names give neutral."""
    return EXPRESSIONS[coerce_enum(Emotion, emotion, Emotion.NEUTRAL)]


def interpolate(
    from_emotion: Emotion | str,
    to_emotion: Emotion | str,
    progress: float,
) -> ExpressionParams:
    """Blend two expressions field by field after cubic ease-out of *progress*.

    Progress 0 returns exactly the source set and 1 exactly the target set.
    """
    src = expression_params(from_emotion)
    dst = expression_params(to_emotion)
    if src is dst:
        return src
    t = ease_out(progress)
    if t == 0.0:
        return src
    if t == 1.0:
        return dst
    blended = {
        name: lerp(getattr(src, name), getattr(dst, name), t)
        for name in ExpressionParams.model_fields
    }
    return ExpressionParams(**blended)


def transition_progress(
    record: TransitionRecord,
    frame: int,
    duration: int = TRANSITION_FRAMES,
) -> float:
    """Linear progress of *record* at *frame*, clamped to [0, 1]."""
    if duration <= 0:
        return 1.0
    return clamp01((frame - record.start_frame) / duration)


def params_for_record(
    record: TransitionRecord,
    frame: int,
    duration: int = TRANSITION_FRAMES,
) -> ExpressionParams:
    """Expression for an explicit transition record at *frame*."""
    return interpolate(
        record.from_emotion, record.to_emotion, transition_progress(record, frame, duration),
    )


class ExpressionTracker:
    """Per-character emotion transition state for sequential rendering.

    Holds a single pending transition: a new target arriving mid-blend
    restarts from the previous *target*, discarding progress.  Frames must
    be non-decreasing; use :func:`params_for_record` for out-of-order work.
    """

    def __init__(self, duration: int = TRANSITION_FRAMES) -> None:
        self.duration = duration
        self.record = TransitionRecord()
        self._last_frame: int | None = None

    @property
    def current_emotion(self) -> Emotion:
        return self.record.from_emotion

    @property
    def target_emotion(self) -> Emotion:
        return self.record.to_emotion

    @property
    def transition_start(self) -> int:
        return self.record.start_frame

    def get_params(self, frame: int, emotion: Emotion | str) -> ExpressionParams:
        if self._last_frame is not None and frame < self._last_frame:
            msg = f"frame {frame} requested after frame {self._last_frame}"
            raise TrackerOrderError(msg)
        self._last_frame = frame

        target = coerce_enum(Emotion, emotion, Emotion.NEUTRAL)
        updated = self.record.retarget(target, frame)
        if updated is not self.record:
            logger.debug(
                "Expression transition %s -> %s at frame %d",
                updated.from_emotion, updated.to_emotion, frame,
            )
            self.record = updated
        return params_for_record(self.record, frame, self.duration)
