"""Where things sit on the canvas and how the camera looks at them."""

from paintforge.staging.assets import (
    MissingGroundLineError,
    calculate_asset_position,
    get_asset_metadata,
    position_on_ground,
    register_asset_metadata,
)
from paintforge.staging.camera import (
    camera_path_pose,
    camera_pose_at,
    camera_transform,
    interpolate_keyframes,
    suggest_camera_preset,
)
from paintforge.staging.positions import preset_manifest, resolve_position

__all__ = [
    "MissingGroundLineError",
    "calculate_asset_position",
    "camera_path_pose",
    "camera_pose_at",
    "camera_transform",
    "get_asset_metadata",
    "interpolate_keyframes",
    "position_on_ground",
    "preset_manifest",
    "register_asset_metadata",
    "resolve_position",
    "suggest_camera_preset",
]
