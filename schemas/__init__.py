"""
Schemas Package

This package contains all Pydantic schemas for parameter validation and
result packaging, organized by domain:

- base: camelCase-tolerant base models
- common: regions, color balance, binary outputs
- image: URL / binary-field image inputs
- compression: fixed and budget-targeted compression configs
- watermark: watermark placement
- credentials: remote service credentials
- operations: one request model per operation
- host: host context and operation result
"""

from .base import HostModel, OperationRequest
from .common import BinaryData, ColorBalance, Region, RGBOffset
from .compression import AutoQuality, CompressionConfig, FixedQuality
from .credentials import AzureOpenAICredentials, OpenAICredentials
from .host import HostContext, OperationResult
from .image import BinaryImageInput, ImageInput, UrlImageInput, image_input_from_host
from .operations import (
    AddWatermarkRequest,
    AnalyzeImageRequest,
    ColorCorrectionRequest,
    CompressImageRequest,
    DownloadImageRequest,
    ImageToImageRequest,
)
from .watermark import WatermarkPlacement

# Explicitly declare public API for re-export
__all__ = [
    # Base
    "HostModel",
    "OperationRequest",
    # Common models
    "BinaryData",
    "ColorBalance",
    "Region",
    "RGBOffset",
    # Inputs and configs
    "BinaryImageInput",
    "ImageInput",
    "UrlImageInput",
    "image_input_from_host",
    "AutoQuality",
    "CompressionConfig",
    "FixedQuality",
    "WatermarkPlacement",
    # Credentials
    "AzureOpenAICredentials",
    "OpenAICredentials",
    # Requests
    "AddWatermarkRequest",
    "AnalyzeImageRequest",
    "ColorCorrectionRequest",
    "CompressImageRequest",
    "DownloadImageRequest",
    "ImageToImageRequest",
    # Host contract
    "HostContext",
    "OperationResult",
]
