"""Asset metadata registry and anchor-based placement geometry."""

from __future__ import annotations

import logging

from paintforge.models.asset import AssetBox, AssetMetadata
from paintforge.models.enums import AnchorPoint

logger = logging.getLogger(__name__)


class MissingGroundLineError(ValueError):
    """Raised when ground placement is requested for an asset without a ground line."""


# Fraction of the asset box to subtract from the anchor position, per anchor.
_ANCHOR_SHIFT: dict[AnchorPoint, tuple[float, float]] = {
    AnchorPoint.TOP_LEFT: (0.0, 0.0),
    AnchorPoint.TOP_CENTER: (0.5, 0.0),
    AnchorPoint.TOP_RIGHT: (1.0, 0.0),
    AnchorPoint.CENTER_LEFT: (0.0, 0.5),
    AnchorPoint.CENTER: (0.5, 0.5),
    AnchorPoint.CENTER_RIGHT: (1.0, 0.5),
    AnchorPoint.BOTTOM_LEFT: (0.0, 1.0),
    AnchorPoint.BOTTOM_CENTER: (0.5, 1.0),
    AnchorPoint.BOTTOM_RIGHT: (1.0, 1.0),
}

_registry: dict[str, AssetMetadata] = {}


def register_asset_metadata(metadata: AssetMetadata) -> None:
    """Register placement metadata.  Intended for start-up, not per frame."""
    if metadata.id in _registry:
        logger.debug("Replacing asset metadata for %s", metadata.id)
    _registry[metadata.id] = metadata


def get_asset_metadata(asset_id: str) -> AssetMetadata | None:
    return _registry.get(asset_id)


def calculate_asset_position(
    metadata: AssetMetadata,
    canvas_width: float,
    canvas_height: float,
    custom_x: float | None = None,
    custom_y: float | None = None,
) -> AssetBox:
    """Pixel box for an asset placed by its anchor.

    *custom_x* / *custom_y* are canvas fractions.  Without them the anchor
    sits at the horizontal centre and at the ground line (or vertical centre
    when the asset has none).
    """
    width = metadata.natural_width * canvas_width
    height = metadata.natural_height * canvas_height

    pos_x = custom_x * canvas_width if custom_x is not None else canvas_width * 0.5
    if custom_y is not None:
        pos_y = custom_y * canvas_height
    elif metadata.ground_line is not None:
        pos_y = metadata.ground_line * canvas_height
    else:
        pos_y = canvas_height * 0.5

    shift_x, shift_y = _ANCHOR_SHIFT[metadata.anchor]
    return AssetBox(x=pos_x - width * shift_x, y=pos_y - height * shift_y, width=width, height=height)


def position_on_ground(
    metadata: AssetMetadata,
    canvas_width: float,
    canvas_height: float,
    x_position: float,
) -> AssetBox:
    """Place an asset so its anchor rests on its ground line at *x_position*."""
    if metadata.ground_line is None:
        msg = f"Asset {metadata.id} has no ground_line defined"
        raise MissingGroundLineError(msg)
    return calculate_asset_position(
        metadata, canvas_width, canvas_height, custom_x=x_position, custom_y=metadata.ground_line,
    )
