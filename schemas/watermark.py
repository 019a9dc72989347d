"""
Watermark placement model.
"""

from typing import Optional

from pydantic import AliasChoices, ConfigDict, Field

from core.constants import WatermarkConstants

from .base import HostModel


class WatermarkPlacement(HostModel):
    """
    Where to put the watermark on the base image.

    top wins over bottom and left wins over right; an axis with neither
    set is placed at offset 0 from the top/left edge.
    """

    model_config = ConfigDict(frozen=True)

    top: Optional[int] = Field(None, description="Pixel offset from the top edge")
    left: Optional[int] = Field(None, description="Pixel offset from the left edge")
    right: Optional[int] = Field(None, description="Pixel offset from the right edge")
    bottom: Optional[int] = Field(None, description="Pixel offset from the bottom edge")
    scale: float = Field(
        WatermarkConstants.DEFAULT_SCALE,
        gt=0,
        validation_alias=AliasChoices("scale", "watermarkScale", "watermark_scale"),
        description="Scale applied to the watermark width, aspect ratio preserved",
    )
