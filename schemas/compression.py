"""
Compression configuration models.

Exactly one mode is active per invocation:
- fixed: encode once at a given quality and effort
- auto: search the highest quality whose output fits a byte budget
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import ConfigDict, Field, model_validator

from core.constants import CompressionConstants

from .base import HostModel


class FixedQuality(HostModel):
    """Single encode at a fixed quality"""

    model_config = ConfigDict(frozen=True)

    mode: Literal["fixed"] = "fixed"
    quality: int = Field(
        CompressionConstants.DEFAULT_QUALITY,
        ge=CompressionConstants.MIN_QUALITY,
        le=CompressionConstants.MAX_QUALITY,
        description="Encoder quality",
    )
    effort: Optional[int] = Field(
        CompressionConstants.DEFAULT_EFFORT,
        ge=CompressionConstants.MIN_EFFORT,
        le=CompressionConstants.MAX_EFFORT,
        description="CPU effort, 0 is the fastest, 6 is the slowest",
    )


class AutoQuality(HostModel):
    """Budget-targeted quality search"""

    model_config = ConfigDict(frozen=True)

    mode: Literal["auto"] = "auto"
    min_quality: int = Field(
        CompressionConstants.AUTO_MIN_QUALITY,
        ge=CompressionConstants.AUTO_MIN_QUALITY,
        le=CompressionConstants.AUTO_MAX_QUALITY,
    )
    max_quality: int = Field(
        CompressionConstants.AUTO_MAX_QUALITY,
        ge=CompressionConstants.AUTO_MIN_QUALITY,
        le=CompressionConstants.AUTO_MAX_QUALITY,
    )
    max_size: int = Field(
        CompressionConstants.DEFAULT_MAX_SIZE,
        gt=0,
        description="Maximum size of the compressed image, in bytes",
    )

    @model_validator(mode="after")
    def check_quality_range(self) -> "AutoQuality":
        if self.min_quality > self.max_quality:
            raise ValueError(
                f"min_quality ({self.min_quality}) must not exceed max_quality ({self.max_quality})"
            )
        return self


CompressionConfig = Annotated[Union[FixedQuality, AutoQuality], Field(discriminator="mode")]
