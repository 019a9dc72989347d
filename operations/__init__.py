"""
Operations exposed to the workflow host.

Each module holds one operation handler; registry builds the lookup table
the host dispatches through.
"""

from .add_watermark import AddWatermarkOperation
from .analyze_image import AnalyzeImageOperation
from .base import BaseOperation
from .color_correction import ColorCorrectionOperation
from .compress_image import CompressImageOperation
from .download_image import DownloadImageOperation
from .image_to_image import ImageToImageOperation
from .registry import OperationRegistry, create_registry

__all__ = [
    "AddWatermarkOperation",
    "AnalyzeImageOperation",
    "BaseOperation",
    "ColorCorrectionOperation",
    "CompressImageOperation",
    "DownloadImageOperation",
    "ImageToImageOperation",
    "OperationRegistry",
    "create_registry",
]
