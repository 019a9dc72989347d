"""
Image processing operations.

Handles image manipulation tasks:
- Resizing with preserved aspect ratio
- Metadata extraction for binary outputs
"""

import io
import logging
import math
from typing import Any, Dict

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from core.constants import WatermarkConstants
from core.image.converters import ImageConverters

logger = logging.getLogger(__name__)


def resize_to_width(image: np.ndarray, width: int) -> np.ndarray:
    """
    Resize image to a target width, maintaining aspect ratio.

    Args:
        image: Input image as NumPy array
        width: Target width in pixels

    Returns:
        Resized image as NumPy array
    """
    h, w = image.shape[:2]
    width = max(WatermarkConstants.MIN_DIMENSION, int(width))
    if width == w:
        return image

    height = max(WatermarkConstants.MIN_DIMENSION, int(round(h * width / w)))

    # INTER_AREA avoids moire when shrinking
    interpolation = cv2.INTER_AREA if width < w else cv2.INTER_CUBIC
    resized = cv2.resize(image, (width, height), interpolation=interpolation)

    # cv2 drops the channel axis for single channel images
    if resized.ndim == 2 and image.ndim == 3:
        resized = resized[..., np.newaxis]

    logger.debug(f"Resized image from {w}x{h} to {width}x{height}")
    return resized


def scale_image(image: np.ndarray, scale: float) -> np.ndarray:
    """
    Scale image uniformly by a width factor.

    Args:
        image: Input image as NumPy array
        scale: Width scale factor (1.0 keeps the image unchanged)

    Returns:
        Scaled image
    """
    if scale == 1:
        return image
    w = image.shape[1]
    return resize_to_width(image, math.floor(w * scale))


def image_metadata(data: bytes) -> Dict[str, Any]:
    """
    Describe an encoded image for the host.

    Args:
        data: Encoded image bytes

    Returns:
        Dict with format, width, height and size (width/height None if undecodable)
    """
    metadata: Dict[str, Any] = {"format": None, "width": None, "height": None, "size": len(data)}
    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = ImageConverters.normalize_format(image.format)
            metadata["format"] = image_format.lower() if image_format else None
            metadata["width"], metadata["height"] = image.size
    except (UnidentifiedImageError, OSError, ValueError):
        logger.debug("Binary output is not a recognizable image")
    return metadata
