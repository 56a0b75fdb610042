"""Asset placement metadata models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from paintforge.models.enums import AnchorPoint, AssetCategory


class ViewBox(BaseModel):
    """Source artwork dimensions, used to keep the aspect ratio."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(gt=0)
    height: float = Field(gt=0)


class AssetMetadata(BaseModel):
    """Placement metadata for one visual asset.

    Sizes and the ground line are fractions of the canvas.  The core only
    reads these values; it never draws the asset itself.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    category: AssetCategory
    anchor: AnchorPoint = AnchorPoint.CENTER
    natural_width: float = Field(ge=0.0)
    natural_height: float = Field(ge=0.0)
    ground_line: float | None = None
    view_box: ViewBox | None = None
    notes: str = ""

    @property
    def aspect_ratio(self) -> float | None:
        if self.view_box is None:
            return None
        return self.view_box.width / self.view_box.height


class AssetBox(BaseModel):
    """Resolved pixel rectangle for a placed asset."""

    x: float
    y: float
    width: float
    height: float
