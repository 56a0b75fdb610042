"""Always-on idle motion: breathing, blinking, sway, pupil drift.

Every function is a pure function of the absolute frame, so frames can be
computed in any order or in parallel.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from paintforge.motion.easing import FPS, hash01, oscillate

BLINK_WINDOW = FPS * 2
BLINK_LENGTH = 5
BLINK_PROBABILITY_CUTOFF = 0.35  # hash above this -> blink (~65% of windows)


@dataclass(frozen=True)
class Breathing:
    y: float
    scale_x: float


@dataclass(frozen=True)
class Sway:
    x: float
    rotation: float


@dataclass(frozen=True)
class PupilOffset:
    x: float
    y: float


@dataclass(frozen=True)
class PropSway:
    rotation: float
    liquid_offset: float


@dataclass(frozen=True)
class IdleState:
    breathing: Breathing
    blink: float
    sway: Sway
    pupil: PupilOffset
    prop_sway: PropSway


def breathing(frame: float) -> Breathing:
    """~0.5 Hz torso rise of 1.5px with a slight chest widening on inhale."""
    wave = oscillate(frame, 0.5)
    return Breathing(y=wave * 1.5, scale_x=1 + wave * 0.003)


def blink_window(frame: int) -> int:
    return math.floor(frame / BLINK_WINDOW)


def should_blink(window: int) -> bool:
    return hash01(window * 7) > BLINK_PROBABILITY_CUTOFF


def blink_offset(window: int) -> int:
    """Frame within *window* at which its blink starts."""
    return math.floor(hash01(window * 13) * (BLINK_WINDOW - 10))


def blink(frame: int) -> float:
    """Eye openness: 1 open, 0 closed.

    Time is cut into 2-second windows; each window has at most one blink,
    decided and placed purely from the window index.
    """
    window = blink_window(frame)
    if not should_blink(window):
        return 1.0
    start = window * BLINK_WINDOW + blink_offset(window)
    t = frame - start
    if t < 0 or t > BLINK_LENGTH:
        return 1.0
    if t <= 2:
        return 1 - t / 2
    if t == 3:
        return 0.05
    return (t - 3) / 2


def sway(frame: float) -> Sway:
    # Two frequencies so the lean never looks metronomic.
    x = oscillate(frame, 0.15) * 0.8 + oscillate(frame, 0.23, 1.5) * 0.4
    return Sway(x=x, rotation=x * 0.3)


def pupil_drift(frame: float) -> PupilOffset:
    x = oscillate(frame, 0.3, 0) * 0.5 + oscillate(frame, 0.7, 2) * 0.3
    y = oscillate(frame, 0.25, 1) * 0.4 + oscillate(frame, 0.6, 3) * 0.2
    return PupilOffset(x=x, y=y)


def prop_sway(frame: float) -> PropSway:
    """Liquid slosh for a hand-held glass."""
    return PropSway(
        rotation=oscillate(frame, 0.2, 0.5) * 1.5,
        liquid_offset=oscillate(frame, 0.3, 1) * 0.8,
    )


def idle_state(frame: int) -> IdleState:
    return IdleState(
        breathing=breathing(frame),
        blink=blink(frame),
        sway=sway(frame),
        pupil=pupil_drift(frame),
        prop_sway=prop_sway(frame),
    )
