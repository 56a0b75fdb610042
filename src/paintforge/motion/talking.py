"""Speech-driven mouth shapes, bounce and free-hand gesturing."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from paintforge.models.enums import MouthShape
from paintforge.motion.easing import FPS, oscillate

if TYPE_CHECKING:
    from paintforge.models.scene import PhonemeEvent

WIDE_OPEN_PHONEMES = frozenset({"AA", "AE", "AH", "AY", "EH", "EY"})
ROUNDED_PHONEMES = frozenset({"AO", "OW", "UH", "UW", "OY"})
CLOSED_LIP_PHONEMES = frozenset({"B", "M", "P", "F", "V", "W"})
SILENCE = frozenset({"", "SIL"})


def mouth_shape(frame: float, talking: bool) -> MouthShape:
    """Speech-like mouth cycling without phoneme data."""
    if not talking:
        return MouthShape.CLOSED

    syllable = oscillate(frame, 4.5)
    word = oscillate(frame, 2.2, 0.7)
    sentence = oscillate(frame, 0.8, 1.3)

    if sentence < -0.6:
        return MouthShape.CLOSED

    combined = syllable * 0.6 + word * 0.4
    if combined > 0.5:
        return MouthShape.WIDE
    if combined > 0.0:
        return MouthShape.MEDIUM
    if combined > -0.4:
        return MouthShape.SLIGHT
    return MouthShape.CLOSED


def phoneme_to_shape(phoneme: str) -> MouthShape:
    label = phoneme.upper()
    if label in WIDE_OPEN_PHONEMES:
        return MouthShape.WIDE
    if label in ROUNDED_PHONEMES:
        return MouthShape.MEDIUM
    if label in CLOSED_LIP_PHONEMES:
        return MouthShape.SLIGHT
    if label in SILENCE:
        return MouthShape.CLOSED
    return MouthShape.SLIGHT


def active_phoneme(time: float, phonemes: Sequence[PhonemeEvent]) -> str:
    """Label of the last listed event at or before *time*; ``""`` before the first.

    Events are expected sorted by time.  Unsorted input is not repaired: the
    scan runs from the end and the first qualifying event wins.
    """
    return next((p.phoneme for p in reversed(phonemes) if p.time <= time), "")


def mouth_shape_from_phonemes(
    frame: float,
    phonemes: Sequence[PhonemeEvent],
    fps: int = FPS,
) -> MouthShape:
    if not phonemes:
        return MouthShape.CLOSED
    return phoneme_to_shape(active_phoneme(frame / fps, phonemes))


def talking_bounce(frame: float, talking: bool) -> float:
    """Upward body offset synced to syllables (negative = up)."""
    if not talking:
        return 0.0
    return -abs(oscillate(frame, 3.5)) * 1.2


def talking_gesture(frame: float, talking: bool) -> float:
    """Free-hand rotation while speaking, within +/-12 degrees."""
    if not talking:
        return 0.0
    return oscillate(frame, 1.2, 0.5) * 12
