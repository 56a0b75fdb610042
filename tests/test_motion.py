"""Tests for idle, talking and gesture motion generators."""

import pytest

from paintforge.models.enums import Emotion, Gesture, MouthShape
from paintforge.models.scene import PhonemeEvent
from paintforge.motion.gestures import REST, gesture_duration, gesture_state
from paintforge.motion.idle import (
    BLINK_WINDOW,
    blink,
    blink_offset,
    blink_window,
    breathing,
    idle_state,
    should_blink,
)
from paintforge.motion.pose import pose_character
from paintforge.motion.talking import (
    active_phoneme,
    mouth_shape,
    mouth_shape_from_phonemes,
    phoneme_to_shape,
    talking_bounce,
    talking_gesture,
)

# --- idle ---


def test_breathing_amplitude():
    for frame in range(0, 120):
        b = breathing(frame)
        assert -1.5 <= b.y <= 1.5
        assert b.scale_x == pytest.approx(1, abs=0.0031)


def test_blink_in_unit_range():
    assert all(0.0 <= blink(f) <= 1.0 for f in range(0, 3000))


def test_blink_shape_within_window():
    window = next(w for w in range(100) if should_blink(w))
    start = window * BLINK_WINDOW + blink_offset(window)
    assert blink(start) == 1.0
    assert blink(start + 1) == pytest.approx(0.5)
    assert blink(start + 2) == 0.0
    assert blink(start + 3) == 0.05
    assert blink(start + 4) == pytest.approx(0.5)
    assert blink(start + 5) == 1.0
    assert blink(start + 6) == 1.0


def test_window_without_blink_stays_open():
    window = next(w for w in range(200) if not should_blink(w))
    frames = range(window * BLINK_WINDOW, (window + 1) * BLINK_WINDOW)
    assert all(blink(f) == 1.0 for f in frames)


def test_blink_window_index():
    assert blink_window(0) == 0
    assert blink_window(59) == 0
    assert blink_window(60) == 1


def test_idle_state_is_deterministic():
    assert idle_state(321) == idle_state(321)


# --- talking ---


def test_mouth_closed_when_silent():
    assert all(mouth_shape(f, False) is MouthShape.CLOSED for f in range(200))


def test_mouth_cycles_when_talking():
    shapes = {mouth_shape(f, True) for f in range(300)}
    assert MouthShape.WIDE in shapes
    assert MouthShape.CLOSED in shapes


@pytest.mark.parametrize(
    ("phoneme", "shape"),
    [
        ("AA", MouthShape.WIDE),
        ("ey", MouthShape.WIDE),
        ("OW", MouthShape.MEDIUM),
        ("M", MouthShape.SLIGHT),
        ("SIL", MouthShape.CLOSED),
        ("", MouthShape.CLOSED),
        ("TH", MouthShape.SLIGHT),
    ],
)
def test_phoneme_to_shape(phoneme: str, shape: MouthShape) -> None:
    assert phoneme_to_shape(phoneme) is shape


def test_active_phoneme_lookup():
    events = [PhonemeEvent(time=0.0, phoneme="HH"), PhonemeEvent(time=0.5, phoneme="AA")]
    assert active_phoneme(0.2, events) == "HH"
    assert active_phoneme(0.5, events) == "AA"
    late = [PhonemeEvent(time=1.0, phoneme="AA")]
    assert active_phoneme(0.5, late) == ""


def test_mouth_shape_from_phonemes():
    events = [PhonemeEvent(time=0.0, phoneme="M"), PhonemeEvent(time=1.0, phoneme="AA")]
    assert mouth_shape_from_phonemes(0, []) is MouthShape.CLOSED
    assert mouth_shape_from_phonemes(15, events) is MouthShape.SLIGHT
    assert mouth_shape_from_phonemes(30, events) is MouthShape.WIDE


def test_bounce_and_hand_rotation():
    assert talking_bounce(17, False) == 0
    assert talking_gesture(17, False) == 0
    for f in range(120):
        assert -1.2 <= talking_bounce(f, True) <= 0
        assert -12 <= talking_gesture(f, True) <= 12


# --- gestures ---


def test_gesture_starts_at_rest():
    assert gesture_state(Gesture.POINT, 100, 0) == REST


def test_point_fully_raised():
    state = gesture_state("point", 100, 8)
    assert state.left_arm_rotation == pytest.approx(-55)
    assert state.left_forearm_angle == pytest.approx(-70)
    assert state.right_arm_rotation == 0


def test_shrug_uses_both_arms():
    state = gesture_state(Gesture.SHRUG, 0, 12)
    assert state.left_arm_rotation == pytest.approx(-30)
    assert state.right_arm_rotation == pytest.approx(30)
    assert state.right_forearm_angle == pytest.approx(50)


def test_cheers_raises_right_arm():
    state = gesture_state(Gesture.CHEERS, 0, 15)
    assert state.right_arm_rotation == pytest.approx(-15)
    assert state.left_arm_rotation == 0


def test_unknown_gesture_is_rest():
    assert gesture_state("juggle", 40, 20) == REST


@pytest.mark.parametrize(
    ("gesture", "frames"),
    [("wave", 45), ("point", 30), ("shrug", 40), ("explain", 60), ("cheers", 35), ("idle", 30), ("nope", 30)],
)
def test_gesture_duration(gesture: str, frames: int) -> None:
    assert gesture_duration(gesture) == frames


# --- pose ---


def test_pose_mouth_override():
    pose = pose_character(10, emotion=Emotion.HAPPY, talking=True, mouth=MouthShape.WIDE)
    assert pose.mouth is MouthShape.WIDE
    assert pose.talking is True


def test_pose_props_are_json_friendly():
    props = pose_character(10, emotion=Emotion.SAD, gesture=Gesture.WAVE, gesture_frame=20).to_props()
    assert props["mouth"] == 0
    assert props["expression"]["mouth_curve"] == -6
    assert set(props["idle"]) == {"breathing", "blink", "sway", "pupil", "prop_sway"}
    assert props["gesture"]["left_forearm_angle"] == pytest.approx(-40)
