"""
Common data structures shared across operations.

- Region: rectangular area used when clipping a composite to its canvas
- RGBOffset / ColorBalance: per-zone color offsets for color correction
- BinaryData: encoded bytes plus metadata handed back to the host
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.constants import ColorCorrectionConstants

from .base import HostModel


class Region(BaseModel):
    """Rectangular region in image coordinates (may extend past the canvas)."""

    x: int = Field(..., description="X coordinate")
    y: int = Field(..., description="Y coordinate")
    width: int = Field(..., ge=0, description="Width")
    height: int = Field(..., ge=0, description="Height")

    @classmethod
    def from_points(cls, x1: int, y1: int, x2: int, y2: int) -> "Region":
        """Create Region from two corner points."""
        return cls(x=min(x1, x2), y=min(y1, y2), width=abs(x2 - x1), height=abs(y2 - y1))

    @property
    def x2(self) -> int:
        """Get right edge coordinate."""
        return self.x + self.width

    @property
    def y2(self) -> int:
        """Get bottom edge coordinate."""
        return self.y + self.height

    def intersects(self, other: "Region") -> bool:
        """Check if this region overlaps another."""
        return not (
            self.x2 <= other.x or other.x2 <= self.x or self.y2 <= other.y or other.y2 <= self.y
        )

    def intersection(self, other: "Region") -> Optional["Region"]:
        """Get intersection with another region, or None if they do not overlap."""
        if not self.intersects(other):
            return None

        x1 = max(self.x, other.x)
        y1 = max(self.y, other.y)
        x2 = min(self.x2, other.x2)
        y2 = min(self.y2, other.y2)

        return Region.from_points(x1, y1, x2, y2)


class RGBOffset(HostModel):
    """Per-channel offset added to the pixels of one tonal zone."""

    model_config = ConfigDict(frozen=True)

    red: int = Field(
        0,
        ge=ColorCorrectionConstants.MIN_OFFSET,
        le=ColorCorrectionConstants.MAX_OFFSET,
        description="Cyan-Red offset",
    )
    green: int = Field(
        0,
        ge=ColorCorrectionConstants.MIN_OFFSET,
        le=ColorCorrectionConstants.MAX_OFFSET,
        description="Magenta-Green offset",
    )
    blue: int = Field(
        0,
        ge=ColorCorrectionConstants.MIN_OFFSET,
        le=ColorCorrectionConstants.MAX_OFFSET,
        description="Yellow-Blue offset",
    )

    @classmethod
    def from_tuple(cls, values: Tuple[int, int, int]) -> "RGBOffset":
        red, green, blue = values
        return cls(red=red, green=green, blue=blue)

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)


_ZONE_DEFAULTS = {
    "shadows": ColorCorrectionConstants.DEFAULT_SHADOWS,
    "midtones": ColorCorrectionConstants.DEFAULT_MIDTONES,
    "highlights": ColorCorrectionConstants.DEFAULT_HIGHLIGHTS,
}


class ColorBalance(HostModel):
    """
    Offsets for the three luminance zones.

    A zone left out by the host keeps its default; a zone given with only
    some channels fills the missing channels from that zone's default.
    The host's collection wrapper (``{"shadows": {"shadows": {...}}}``) is
    unwrapped.
    """

    model_config = ConfigDict(frozen=True)

    shadows: RGBOffset = Field(
        default_factory=lambda: RGBOffset.from_tuple(ColorCorrectionConstants.DEFAULT_SHADOWS)
    )
    midtones: RGBOffset = Field(
        default_factory=lambda: RGBOffset.from_tuple(ColorCorrectionConstants.DEFAULT_MIDTONES)
    )
    highlights: RGBOffset = Field(
        default_factory=lambda: RGBOffset.from_tuple(ColorCorrectionConstants.DEFAULT_HIGHLIGHTS)
    )

    @model_validator(mode="before")
    @classmethod
    def fill_zone_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        values = dict(data)
        for zone, default in _ZONE_DEFAULTS.items():
            zone_value = values.get(zone)
            if isinstance(zone_value, dict) and isinstance(zone_value.get(zone), dict):
                zone_value = zone_value[zone]
            if zone_value is None or zone_value == {}:
                values.pop(zone, None)
                continue
            if isinstance(zone_value, dict):
                merged = dict(zip(("red", "green", "blue"), default))
                merged.update(zone_value)
                values[zone] = merged
        return values

    @classmethod
    def neutral(cls) -> "ColorBalance":
        """Balance with all offsets zero (no color shift)."""
        zero = RGBOffset()
        return cls(shadows=zero, midtones=zero, highlights=zero)


class BinaryData(BaseModel):
    """Encoded output bytes with the metadata the host stores alongside them."""

    data: bytes = Field(repr=False)
    mime_type: str
    file_extension: str
    file_name: str
    format: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    size: int

    def metadata(self) -> Dict[str, Any]:
        """Descriptive metadata without the payload."""
        return self.model_dump(exclude={"data"})
