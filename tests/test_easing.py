"""Tests for easing, interpolation and noise primitives."""

import math

import pytest

from paintforge.motion.easing import (
    clamp01,
    ease_in_out,
    ease_out,
    hash01,
    lerp,
    long_cycle_noise,
    map_range,
    oscillate,
)

NAN = float("nan")
INF = float("inf")


@pytest.mark.parametrize(("value", "expected"), [(-1.0, 0.0), (0.0, 0.0), (0.4, 0.4), (1.0, 1.0), (3.0, 1.0)])
def test_clamp01(value: float, expected: float) -> None:
    assert clamp01(value) == expected


def test_ease_out_endpoints_and_clamping():
    assert ease_out(0) == 0
    assert ease_out(1) == 1
    assert ease_out(-5) == 0
    assert ease_out(5) == 1
    assert ease_out(0.5) == pytest.approx(0.875)


def test_ease_in_out_is_symmetric():
    assert ease_in_out(0) == 0
    assert ease_in_out(1) == 1
    assert ease_in_out(0.5) == pytest.approx(0.5)
    assert ease_in_out(0.25) == pytest.approx(1 - ease_in_out(0.75))


def test_lerp_clamps_t():
    assert lerp(10, 20, 0.5) == 15
    assert lerp(10, 20, 2) == 20
    assert lerp(10, 20, -1) == 10


def test_map_range_clamps_and_eases():
    assert map_range(5, 0, 10, 0, 100) == 50
    assert map_range(-5, 0, 10, 0, 100) == 0
    assert map_range(50, 0, 10, 0, 100) == 100
    assert map_range(5, 0, 10, 100, 0) == 50
    assert map_range(5, 0, 10, 0, 1, ease_out) == pytest.approx(0.875)


def test_oscillate_period():
    # 1 Hz at 30 fps: quarter period is 7.5 frames
    assert oscillate(0, 1) == pytest.approx(0)
    assert oscillate(7.5, 1) == pytest.approx(1)
    assert oscillate(22.5, 1) == pytest.approx(-1)


def test_hash01_is_deterministic_and_in_range():
    values = [hash01(i) for i in range(500)]
    assert values == [hash01(i) for i in range(500)]
    assert all(0 <= v < 1 for v in values)
    assert len(set(values)) > 450


@pytest.mark.parametrize("value", [NAN, INF, -INF])
def test_sine_based_functions_give_nan_for_non_finite(value: float) -> None:
    assert math.isnan(hash01(value))
    assert math.isnan(oscillate(value, 1.0))
    assert math.isnan(long_cycle_noise(value))
    assert math.isnan(long_cycle_noise(1.0, seed=value))


def test_nan_propagates_through_clamped_helpers():
    assert math.isnan(clamp01(NAN))
    assert math.isnan(ease_out(NAN))
    assert math.isnan(ease_in_out(NAN))
    assert math.isnan(lerp(0, 10, NAN))
    assert math.isnan(map_range(NAN, 0, 10, 0, 1))
    assert math.isnan(map_range(NAN, 5, 5, 0, 1))


def test_infinity_clamps_in_clamped_helpers():
    assert ease_out(INF) == 1
    assert ease_out(-INF) == 0
    assert lerp(2, 8, INF) == 8
    assert map_range(INF, 0, 10, 0, 100) == 100


def test_long_cycle_noise_bounded():
    samples = [long_cycle_noise(t * 0.37, seed=3) for t in range(2000)]
    assert all(-1.0 <= s <= 1.0 for s in samples)
    assert long_cycle_noise(12.5, 2) == long_cycle_noise(12.5, 2)
    assert long_cycle_noise(12.5, 2) != long_cycle_noise(12.5, 3)


@pytest.mark.parametrize("t", [-3.0, -0.01, 1.01, 42.0])
def test_out_of_range_behaves_as_clamped(t: float) -> None:
    edge = clamp01(t)
    assert ease_out(t) == ease_out(edge)
    assert ease_in_out(t) == ease_in_out(edge)
    assert lerp(2, 8, t) == lerp(2, 8, edge)


def test_map_range_empty_input_range_is_step():
    assert map_range(9, 10, 10, 0, 1) == 0
    assert map_range(10, 10, 10, 0, 1) == 1
    assert map_range(11, 10, 10, 0, 1, ease_out) == 1
