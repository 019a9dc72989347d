"""
Image I/O utilities.

This package provides focused image utilities:
- converters: Signature detection, decode/encode between bytes, PIL and NumPy
- processors: Resizing and metadata extraction
"""

from core.image.converters import ImageConverters
from core.image.processors import image_metadata, resize_to_width, scale_image

__all__ = ["ImageConverters", "image_metadata", "resize_to_width", "scale_image"]
