"""Easing, interpolation and deterministic noise primitives.

Every function here is total.  NaN input propagates to NaN output.  Infinite
input gives NaN from the oscillators, the hash and the noise; the clamped
helpers pin it to the nearer end of their range.

All oscillators assume the canonical 30 ticks per second.  Callers working
at another rate must rescale ``frame`` before calling.
"""

from __future__ import annotations

import math
from collections.abc import Callable

FPS = 30

EasingFn = Callable[[float], float]


def clamp01(t: float) -> float:
    """Clamp *t* into [0, 1].  NaN passes through."""
    if math.isnan(t):
        return t
    return max(0.0, min(1.0, t))


def ease_out(t: float) -> float:
    """Cubic ease-out: fast start, smooth deceleration."""
    c = clamp01(t)
    return 1 - (1 - c) ** 3


def ease_in_out(t: float) -> float:
    """Cubic ease-in-out: smooth start and end."""
    c = clamp01(t)
    if c < 0.5:
        return 4 * c * c * c
    return 1 - (-2 * c + 2) ** 3 / 2


def ease_out_back(t: float, overshoot: float = 1.5) -> float:
    """Ease-out that overshoots past 1 before settling."""
    u = 1 - clamp01(t)
    return 1 - u * u * ((overshoot + 1) * u - overshoot)


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation with *t* clamped to [0, 1]."""
    return a + (b - a) * clamp01(t)


def map_range(
    value: float,
    in_min: float,
    in_max: float,
    out_min: float,
    out_max: float,
    easing: EasingFn | None = None,
) -> float:
    """Map *value* from one range to another, clamped, with optional easing.

    An empty input range is a step: *out_max* from *in_max* on.
    """
    if math.isnan(value):
        return value
    if in_max == in_min:
        t = 1.0 if value >= in_max else 0.0
    else:
        t = clamp01((value - in_min) / (in_max - in_min))
    eased = easing(t) if easing else t
    return out_min + (out_max - out_min) * eased


def oscillate(frame: float, freq_hz: float, phase: float = 0.0) -> float:
    """Sine oscillation in [-1, 1] at *freq_hz* cycles per second."""
    angle = frame / FPS * freq_hz * math.pi * 2 + phase
    if not math.isfinite(angle):
        return math.nan
    return math.sin(angle)


def hash01(seed: float) -> float:
    """Deterministic pseudo-random value in [0, 1) derived from *seed*.

    Uses plain double-precision ``math.sin`` so the result is stable across
    runs and platforms.
    """
    if not math.isfinite(seed):
        return math.nan
    x = math.sin(seed * 12.9898 + 78.233) * 43758.5453
    return x - math.floor(x)


def long_cycle_noise(t: float, seed: float = 0.0) -> float:
    """Smooth noise in [-1, 1] that takes a long time to visibly repeat.

    Three sines at incommensurate rates with seed-dependent phases.
    """
    if not (math.isfinite(t) and math.isfinite(seed)):
        return math.nan
    return (
        math.sin(t + seed * 1.618) * 0.5
        + math.sin(t * 0.3731 + seed * 2.414) * 0.3
        + math.sin(t * 0.1379 + seed * 3.303) * 0.2
    )
