"""
Image format conversion utilities.

Handles conversions between the representations used by the operations:
- Raw encoded bytes (PNG, JPEG, WebP, ...)
- PIL Images
- NumPy arrays (RGB or RGBA, uint8)
- MIME types and Pillow format names
"""

import io
import logging
from typing import Optional, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from core.constants import ImageConstants
from core.exceptions import ImageDecodeError

logger = logging.getLogger(__name__)


class ImageConverters:
    """Utilities for converting between image formats."""

    @staticmethod
    def detect_format(data: bytes) -> Optional[str]:
        """
        Detect the image format from the buffer's signature.

        Pillow only reads the header here, the pixel data is not decoded.

        Args:
            data: Encoded image bytes

        Returns:
            Pillow format name (e.g. "PNG", "JPEG") or None if unrecognized.
            Aliases such as "MPO" are reported as the format they encode.
        """
        if not data:
            return None
        try:
            with Image.open(io.BytesIO(data)) as image:
                return ImageConverters.normalize_format(image.format)
        except (UnidentifiedImageError, OSError, ValueError):
            return None

    @staticmethod
    def normalize_format(image_format: Optional[str]) -> Optional[str]:
        """Map Pillow container names to the format they are encoded in (MPO -> JPEG)."""
        if image_format is None:
            return None
        image_format = image_format.upper()
        return ImageConstants.FORMAT_ALIASES.get(image_format, image_format)

    @staticmethod
    def format_to_mime(image_format: Optional[str]) -> str:
        """Map a Pillow format name to a MIME type (PNG when unknown)."""
        image_format = ImageConverters.normalize_format(image_format)
        if image_format is None:
            return ImageConstants.DEFAULT_MIME_TYPE
        return ImageConstants.FORMAT_TO_MIME.get(
            image_format, Image.MIME.get(image_format, ImageConstants.DEFAULT_MIME_TYPE)
        )

    @staticmethod
    def detect_mime_type(data: bytes, default: str = ImageConstants.DEFAULT_MIME_TYPE) -> str:
        """
        Best-effort MIME type of an encoded buffer.

        Args:
            data: Encoded image bytes
            default: MIME type to report when detection fails

        Returns:
            Detected MIME type, or default
        """
        image_format = ImageConverters.detect_format(data)
        if image_format is None:
            logger.debug(f"Could not detect image format, defaulting to {default}")
            return default
        return ImageConverters.format_to_mime(image_format)

    @staticmethod
    def output_mime_type(
        mime_type: Optional[str], size: Optional[Tuple[int, int]] = None
    ) -> str:
        """
        MIME type encode() will actually produce for a requested type.

        Args:
            mime_type: Requested MIME type
            size: Optional (width, height) of the image to encode

        Returns:
            mime_type if it can be written at that size, PNG otherwise
        """
        if mime_type not in ImageConstants.MIME_TO_FORMAT:
            return ImageConstants.DEFAULT_MIME_TYPE
        if (
            mime_type == ImageConstants.FORMAT_TO_MIME["ICO"]
            and size is not None
            and max(size) > ImageConstants.ICO_MAX_DIMENSION
        ):
            return ImageConstants.DEFAULT_MIME_TYPE
        return mime_type

    @staticmethod
    def mime_to_extension(mime_type: str) -> str:
        """File extension (without dot) for a MIME type."""
        return ImageConstants.MIME_TO_EXTENSION.get(mime_type, mime_type.rsplit("/", 1)[-1])

    @staticmethod
    def open_image(data: bytes) -> Image.Image:
        """
        Decode bytes into a fully loaded PIL Image in RGB or RGBA mode.

        Args:
            data: Encoded image bytes

        Returns:
            PIL Image in RGB or RGBA mode

        Raises:
            ImageDecodeError: If the buffer is not a decodable image
        """
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise ImageDecodeError(str(e)) from e

        has_alpha = image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info
        target_mode = "RGBA" if has_alpha else "RGB"
        if image.mode != target_mode:
            image = image.convert(target_mode)
        return image

    @staticmethod
    def decode(data: bytes) -> Tuple[np.ndarray, Optional[str]]:
        """
        Decode bytes into a NumPy array.

        Args:
            data: Encoded image bytes

        Returns:
            Tuple of (RGB/RGBA uint8 array, detected Pillow format name)
        """
        image_format = ImageConverters.detect_format(data)
        image = ImageConverters.open_image(data)
        return ImageConverters.pil_to_numpy(image), image_format

    @staticmethod
    def pil_to_numpy(image: Image.Image) -> np.ndarray:
        """Convert a PIL Image to a uint8 NumPy array (channels last)."""
        return np.asarray(image, dtype=np.uint8).copy()

    @staticmethod
    def numpy_to_pil(image: np.ndarray) -> Image.Image:
        """Convert an RGB/RGBA uint8 NumPy array to a PIL Image."""
        # mode is inferred from the shape: (H, W, 3) RGB, (H, W, 4) RGBA
        return Image.fromarray(image)

    @staticmethod
    def encode(image: np.ndarray, mime_type: str) -> bytes:
        """
        Encode a NumPy array into the container named by mime_type.

        Unknown or unwritable MIME types fall back to PNG, as do images too
        large for the ICO container. Formats without alpha support drop the
        alpha channel.

        Args:
            image: RGB/RGBA uint8 array
            mime_type: Target MIME type

        Returns:
            Encoded bytes
        """
        height, width = image.shape[:2]
        mime_type = ImageConverters.output_mime_type(mime_type, (width, height))
        image_format = ImageConstants.MIME_TO_FORMAT[mime_type]

        if image_format in ImageConstants.NO_ALPHA_FORMATS and image.ndim == 3 and image.shape[2] == 4:
            image = image[..., :3]

        pil_image = ImageConverters.numpy_to_pil(np.ascontiguousarray(image))
        save_kwargs = {"format": image_format}
        if image_format == "JPEG":
            save_kwargs["quality"] = ImageConstants.REENCODE_JPEG_QUALITY
        elif image_format == "WEBP":
            save_kwargs["quality"] = ImageConstants.REENCODE_WEBP_QUALITY

        buffer = io.BytesIO()
        try:
            pil_image.save(buffer, **save_kwargs)
        except (OSError, KeyError, ValueError) as e:
            logger.warning(f"Failed to encode as {image_format} ({e}), falling back to PNG")
            buffer = io.BytesIO()
            pil_image.save(buffer, format=ImageConstants.DEFAULT_FORMAT)
        return buffer.getvalue()

    @staticmethod
    def to_png(data: bytes) -> bytes:
        """Re-encode any decodable buffer as PNG."""
        image = ImageConverters.open_image(data)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()
