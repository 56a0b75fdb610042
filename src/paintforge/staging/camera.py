"""Camera poses, eased camera moves, keyframed paths and character tracking.

The camera model zooms about the canvas centre: translate to centre, scale
by zoom, then translate by the negative target offset.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from paintforge.models.enums import CameraPreset, coerce_enum
from paintforge.models.scene import CameraKeyframe, CameraPath, CameraPose
from paintforge.motion.easing import ease_out, map_range

logger = logging.getLogger(__name__)

CAMERA_TRANSITION_FRAMES = 28
TRACKING_STRENGTH = 0.3

HOME = CameraPose()


@dataclass(frozen=True)
class CameraTransform:
    """Affine transform ``(a, b, c, d, e, f)`` applied to scene content."""

    a: float
    b: float
    c: float
    d: float
    e: float
    f: float
    css: str

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)


@dataclass(frozen=True)
class TrackedCharacter:
    id: str
    x: float
    y: float


def _blend(previous: CameraPose, target: CameraPose, t: float) -> CameraPose:
    return CameraPose(
        x=previous.x + (target.x - previous.x) * t,
        y=previous.y + (target.y - previous.y) * t,
        zoom=previous.zoom + (target.zoom - previous.zoom) * t,
    )


def camera_pose_at(
    frame: int,
    previous: CameraPose,
    current: CameraPose,
    start_frame: int,
    duration: int = CAMERA_TRANSITION_FRAMES,
) -> CameraPose:
    """Eased move from *previous* to *current* over ``[start, start + duration)``.

    Clamps to the endpoint poses outside the window.
    """
    if duration <= 0:
        return current if frame >= start_frame else previous
    t = map_range(frame, start_frame, start_frame + duration, 0.0, 1.0, ease_out)
    return _blend(previous, current, t)


def camera_transform(pose: CameraPose, width: float = 1920, height: float = 1080) -> CameraTransform:
    cx = width / 2
    cy = height / 2
    z = pose.zoom
    css = (
        f"translate({cx}px, {cy}px) scale({z}) "
        f"translate({-cx - pose.x}px, {-cy - pose.y}px)"
    )
    return CameraTransform(
        a=z, b=0.0, c=0.0, d=z,
        e=cx - z * (cx + pose.x),
        f=cy - z * (cy + pose.y),
        css=css,
    )


# ---------------------------------------------------------------------------
# Keyframed paths
# ---------------------------------------------------------------------------


def _kf(frame: int, x: float, y: float, zoom: float) -> CameraKeyframe:
    return CameraKeyframe(frame=frame, x=x, y=y, zoom=zoom)


CAMERA_PRESETS: dict[CameraPreset, Callable[[int], CameraPath]] = {
    CameraPreset.STATIC: lambda d: CameraPath(keyframes=[_kf(0, 0, 0, 1)]),
    CameraPreset.SLOW_ZOOM_IN: lambda d: CameraPath(
        keyframes=[_kf(0, 0, 0, 1), _kf(d, 0, -30, 1.3)],
    ),
    CameraPreset.SLOW_ZOOM_OUT: lambda d: CameraPath(
        keyframes=[_kf(0, 0, -20, 1.3), _kf(d, 0, 0, 1)],
    ),
    CameraPreset.PAN_LEFT_TO_RIGHT: lambda d: CameraPath(
        keyframes=[_kf(0, -200, 0, 1.15), _kf(d, 200, 0, 1.15)],
    ),
    CameraPreset.PAN_RIGHT_TO_LEFT: lambda d: CameraPath(
        keyframes=[_kf(0, 200, 0, 1.15), _kf(d, -200, 0, 1.15)],
    ),
    CameraPreset.TILT_DOWN: lambda d: CameraPath(
        keyframes=[_kf(0, 0, -120, 1.2), _kf(d, 0, 60, 1.2)],
    ),
    CameraPreset.TILT_UP: lambda d: CameraPath(
        keyframes=[_kf(0, 0, 60, 1.2), _kf(d, 0, -120, 1.2)],
    ),
    CameraPreset.ESTABLISHING_SHOT: lambda d: CameraPath(
        keyframes=[_kf(0, 0, 0, 1), _kf(math.floor(d * 0.3), 0, 0, 1), _kf(d, 50, -20, 1.4)],
    ),
    CameraPreset.DRAMATIC_ZOOM: lambda d: CameraPath(
        keyframes=[
            _kf(0, 0, 0, 1.1),
            _kf(math.floor(d * 0.6), 0, 0, 1.1),
            _kf(math.floor(d * 0.8), 0, -30, 1.6),
            _kf(d, 0, -30, 1.6),
        ],
    ),
    CameraPreset.FOLLOW_CHARACTER: lambda d: CameraPath(
        keyframes=[_kf(0, 0, 0, 1.2), _kf(d, 0, 0, 1.2)],
        track_character="presenter",
        track_offset_y=-40,
    ),
    CameraPreset.SWEEPING_PAN: lambda d: CameraPath(
        keyframes=[
            _kf(0, -300, -50, 1.1),
            _kf(math.floor(d * 0.5), 0, 0, 1.15),
            _kf(d, 300, -50, 1.1),
        ],
    ),
    CameraPreset.REVEAL_DOWN: lambda d: CameraPath(
        keyframes=[_kf(0, 0, -200, 1.3), _kf(math.floor(d * 0.7), 0, 0, 1.15), _kf(d, 0, 0, 1.15)],
    ),
}


def preset_path(preset: CameraPreset | str, scene_duration: int) -> CameraPath:
    """Expand a named camera preset for a scene of *scene_duration* frames."""
    name = coerce_enum(CameraPreset, preset, CameraPreset.STATIC)
    return CAMERA_PRESETS[name](scene_duration)


def expand_path(path: CameraPath, scene_duration: int) -> CameraPath:
    """Fill in keyframes from the path's preset when none are given."""
    if path.keyframes or path.preset is None:
        return path
    expanded = preset_path(path.preset, scene_duration)
    return path.model_copy(update={"keyframes": expanded.keyframes})


def interpolate_keyframes(keyframes: Sequence[CameraKeyframe], frame_in_scene: float) -> CameraPose:
    """Eased pose between the keyframes bracketing *frame_in_scene*."""
    if not keyframes:
        return HOME
    first = keyframes[0]
    if len(keyframes) == 1:
        return CameraPose(x=first.x, y=first.y, zoom=first.zoom)

    before, after = first, keyframes[-1]
    for a, b in zip(keyframes, keyframes[1:]):
        if a.frame <= frame_in_scene <= b.frame:
            before, after = a, b
            break

    if frame_in_scene <= before.frame:
        return CameraPose(x=before.x, y=before.y, zoom=before.zoom)
    if frame_in_scene >= after.frame:
        return CameraPose(x=after.x, y=after.y, zoom=after.zoom)

    t = ease_out((frame_in_scene - before.frame) / (after.frame - before.frame))
    return CameraPose(
        x=before.x + (after.x - before.x) * t,
        y=before.y + (after.y - before.y) * t,
        zoom=before.zoom + (after.zoom - before.zoom) * t,
    )


def camera_path_pose(
    path: CameraPath,
    frame: int,
    scene_start: int,
    scene_end: int,
    previous: CameraPose = HOME,
    fallback: CameraPose = HOME,
    characters: Sequence[TrackedCharacter] = (),
    width: float = 1920,
    height: float = 1080,
    entry_frames: int = CAMERA_TRANSITION_FRAMES,
) -> CameraPose:
    """Camera pose along *path*, tracking a character and blending in from *previous*."""
    frame_in_scene = frame - scene_start
    path = expand_path(path, scene_end - scene_start)

    if path.keyframes:
        target = interpolate_keyframes(path.keyframes, frame_in_scene)
        if path.track_character:
            tracked = next((c for c in characters if c.id == path.track_character), None)
            if tracked is not None:
                target = CameraPose(
                    x=target.x + (tracked.x - width / 2) * TRACKING_STRENGTH + path.track_offset_x,
                    y=target.y + (tracked.y - height / 2) * TRACKING_STRENGTH + path.track_offset_y,
                    zoom=target.zoom,
                )
    else:
        target = fallback

    entry = map_range(frame_in_scene, 0, entry_frames, 0.0, 1.0, ease_out)
    return _blend(previous, target, entry)


_BEAT_PRESETS: dict[str, Callable[[int], CameraPreset]] = {
    "intro": lambda i: CameraPreset.ESTABLISHING_SHOT,
    "hook": lambda i: CameraPreset.SLOW_ZOOM_IN if i % 2 == 0 else CameraPreset.PAN_LEFT_TO_RIGHT,
    "explain": lambda i: (
        CameraPreset.TILT_DOWN,
        CameraPreset.SLOW_ZOOM_IN,
        CameraPreset.PAN_RIGHT_TO_LEFT,
    )[i % 3],
    "example": lambda i: CameraPreset.SWEEPING_PAN if i % 2 == 0 else CameraPreset.PAN_LEFT_TO_RIGHT,
    "revelation": lambda i: CameraPreset.DRAMATIC_ZOOM,
    "recap": lambda i: CameraPreset.SLOW_ZOOM_OUT,
    "outro": lambda i: CameraPreset.SLOW_ZOOM_OUT,
}


def suggest_camera_preset(beat_type: str, scene_index: int) -> CameraPreset:
    """Pick a camera move that suits a narrative beat."""
    chooser = _BEAT_PRESETS.get(beat_type)
    return chooser(scene_index) if chooser else CameraPreset.SLOW_ZOOM_IN
