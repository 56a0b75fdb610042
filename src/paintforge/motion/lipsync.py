"""Audio-driven talking state from phoneme-timed narration segments."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

from paintforge.models.enums import MouthShape
from paintforge.motion.easing import FPS
from paintforge.motion.talking import mouth_shape_from_phonemes

if TYPE_CHECKING:
    from paintforge.models.scene import AudioSegment


def segment_end_frame(segment: AudioSegment, fps: int = FPS) -> int:
    """Frame of the segment's last phoneme onset."""
    last = segment.phonemes[-1].time
    return segment.start_frame + math.ceil(last * fps)


def is_talking_at_frame(
    segments: Sequence[AudioSegment],
    character_id: str,
    frame: int,
    fps: int = FPS,
) -> bool:
    """Whether *character_id* has narration covering *frame*."""
    return any(
        seg.character_id == character_id
        and seg.phonemes
        and seg.start_frame <= frame <= segment_end_frame(seg, fps)
        for seg in segments
    )


def lip_sync(
    segments: Sequence[AudioSegment],
    character_id: str,
    frame: int,
    fps: int = FPS,
) -> tuple[MouthShape, bool]:
    """Mouth shape and talking flag for *character_id* at *frame*.

    Segments stay active for one second past their last phoneme so the final
    syllable can close naturally.
    """
    for seg in segments:
        if seg.character_id != character_id or not seg.phonemes:
            continue
        if seg.start_frame <= frame <= segment_end_frame(seg, fps) + fps:
            shape = mouth_shape_from_phonemes(frame - seg.start_frame, seg.phonemes, fps)
            return shape, shape > MouthShape.CLOSED
    return MouthShape.CLOSED, False
