"""
Operation request models.

One model per operation. Each accepts the structured form
(``image``, ``compression``, ``placement`` ...) as well as the host's flat
form fields, which are folded into the structured form before validation.
"""

from typing import Any, List, Literal

from pydantic import Field, field_validator, model_validator

from core.constants import CompressionConstants, RemoteConstants

from .base import OperationRequest
from .common import ColorBalance
from .compression import AutoQuality, CompressionConfig
from .image import ImageInput, image_input_from_host
from .watermark import WatermarkPlacement


class ColorCorrectionRequest(OperationRequest):
    """Request to apply the three-zone color correction"""

    image: ImageInput
    color_balance: ColorBalance = Field(default_factory=ColorBalance)

    @model_validator(mode="before")
    @classmethod
    def from_host_form(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        values = image_input_from_host(data)
        if "color_balance" not in values and "colorBalance" not in values:
            zones = {
                zone: values.pop(zone) for zone in ("shadows", "midtones", "highlights") if zone in values
            }
            values["color_balance"] = zones
        return values


class CompressImageRequest(OperationRequest):
    """Request to re-encode an image as WebP"""

    image: ImageInput
    compression: CompressionConfig = Field(default_factory=AutoQuality)
    on_budget_unreachable: Literal["return_original", "error"] = Field(
        "return_original",
        description="What to do when no quality in range fits the size budget",
    )

    @model_validator(mode="before")
    @classmethod
    def from_host_form(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        values = image_input_from_host(data)
        if "compression" in values:
            return values

        options = values.pop("options", None) or {}
        auto_quality = values.pop("autoQuality", values.pop("auto_quality", True))
        if auto_quality:
            compression = {"mode": "auto"}
            for host_key, field in (
                ("minQuality", "min_quality"),
                ("maxQuality", "max_quality"),
                ("maxSize", "max_size"),
            ):
                if host_key in values:
                    compression[field] = values.pop(host_key)
        else:
            compression = {
                "mode": "fixed",
                "quality": values.pop("customQuality", CompressionConstants.DEFAULT_QUALITY),
            }
            effort = options.get("compressEffort", options.get("effort"))
            if effort is not None:
                compression["effort"] = effort
        values["compression"] = compression
        return values


class AddWatermarkRequest(OperationRequest):
    """Request to overlay a watermark image"""

    image: ImageInput
    watermark: ImageInput
    placement: WatermarkPlacement = Field(default_factory=WatermarkPlacement)

    @model_validator(mode="before")
    @classmethod
    def from_host_form(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        values = image_input_from_host(data)
        if "watermark" not in values and "watermarkUrl" in values:
            values["watermark"] = {"source": "url", "url": values.pop("watermarkUrl")}
        if "placement" not in values and "options" in values:
            values["placement"] = values.pop("options") or {}
        return values


class DownloadImageRequest(OperationRequest):
    """Request to download an image into a binary field"""

    url: str = Field(..., min_length=1, description="URL of the image to download")

    @field_validator("url")
    @classmethod
    def strip_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("URL must not be empty")
        return value


class AnalyzeImageRequest(OperationRequest):
    """Request to describe one or more images with a vision-capable chat model"""

    urls: List[str] = Field(..., min_length=1, description="Image URLs")
    prompt: str = Field(RemoteConstants.DEFAULT_ANALYSIS_PROMPT, min_length=1)
    temperature: float = Field(RemoteConstants.DEFAULT_TEMPERATURE, ge=0, le=2)

    @model_validator(mode="before")
    @classmethod
    def from_host_form(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        values = dict(data)
        options = values.pop("options", None) or {}
        if "temperature" in options and "temperature" not in values:
            values["temperature"] = options["temperature"]
        return values

    @field_validator("urls", mode="before")
    @classmethod
    def split_urls(cls, value: Any) -> Any:
        # Host sends a comma separated string
        if isinstance(value, str):
            return [url.strip() for url in value.split(",") if url.strip()]
        return value


class ImageToImageRequest(OperationRequest):
    """Request to edit an image with an image generation model"""

    image: ImageInput
    prompt: str = Field(..., min_length=1)
    model: Literal["gpt-image-1", "dall-e-2"] = RemoteConstants.DEFAULT_IMAGE_MODEL
    size: str = RemoteConstants.DEFAULT_IMAGE_SIZE
    convert_unsupported: bool = Field(
        False, description="Convert inputs the API does not accept to PNG instead of failing"
    )

    @model_validator(mode="before")
    @classmethod
    def from_host_form(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return image_input_from_host(data)

    @model_validator(mode="after")
    def check_size_for_model(self) -> "ImageToImageRequest":
        allowed = RemoteConstants.IMAGE_MODEL_SIZES[self.model]
        if self.size not in allowed:
            raise ValueError(f"Size {self.size} is not supported by {self.model} ({', '.join(allowed)})")
        return self
