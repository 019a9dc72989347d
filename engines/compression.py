"""
Quality-targeted WebP compression.

Two modes:
- fixed: encode once at the requested quality and effort
- auto: binary search over quality for the highest setting whose encoded
  size fits a byte budget

The search relies on encoded size being non-decreasing in quality, which
holds for the WebP encoder in practice. It needs O(log(max - min)) encodes.
"""

import io
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from PIL import Image

from core.constants import CompressionConstants
from core.exceptions import OperationCancelledError, UnsupportedFormatError
from core.image.converters import ImageConverters
from schemas.compression import AutoQuality, CompressionConfig, FixedQuality

logger = logging.getLogger(__name__)

# (image, quality, effort) -> encoded bytes
Encoder = Callable[[Image.Image, int, Optional[int]], bytes]


@dataclass
class QualitySearchResult:
    """Outcome of a budget-targeted quality search"""

    buffer: Optional[bytes]
    quality: int
    encode_calls: int

    @property
    def found(self) -> bool:
        return self.buffer is not None


@dataclass
class CompressionResult:
    """Outcome of a compression, fixed or auto"""

    original_size: int
    compressed_size: int
    compressed_buffer: bytes
    achieved_quality: int
    mode: str
    encode_calls: int
    mime_type: str = CompressionConstants.OUTPUT_MIME_TYPE

    @property
    def budget_reached(self) -> bool:
        """False when the auto search found no quality within the budget."""
        if self.mode != "auto":
            return True
        return self.achieved_quality != CompressionConstants.UNREACHABLE_QUALITY


def encode_webp(image: Image.Image, quality: int, effort: Optional[int] = None) -> bytes:
    """
    Encode a PIL image as lossy WebP.

    Args:
        image: RGB or RGBA image
        quality: 0-100
        effort: 0-6 (Pillow "method"); encoder default when None

    Returns:
        Encoded bytes

    Raises:
        UnsupportedFormatError: If the encoder rejects the image (e.g. a side
            longer than the WebP limit of 16383 pixels)
    """
    save_kwargs = {"format": CompressionConstants.OUTPUT_FORMAT, "quality": quality}
    if effort is not None:
        save_kwargs["method"] = effort
    buffer = io.BytesIO()
    try:
        image.save(buffer, **save_kwargs)
    except (OSError, ValueError, RuntimeError) as e:
        logger.error(f"WebP encode of {image.width}x{image.height} image failed: {e}")
        raise UnsupportedFormatError(
            CompressionConstants.OUTPUT_FORMAT, reason=str(e) or e.__class__.__name__
        ) from e
    return buffer.getvalue()


def search_quality(
    encode: Callable[[int], bytes],
    min_quality: int,
    max_quality: int,
    max_size: int,
    cancel_event: Optional[threading.Event] = None,
) -> QualitySearchResult:
    """
    Find the highest quality in [min_quality, max_quality] whose encoding fits max_size.

    Args:
        encode: Callable encoding at a given quality
        min_quality: Lower bound (inclusive)
        max_quality: Upper bound (inclusive)
        max_size: Byte budget
        cancel_event: Optional event checked before every encode

    Returns:
        QualitySearchResult; quality is UNREACHABLE_QUALITY and buffer None
        when no candidate fits
    """
    best_buffer: Optional[bytes] = None
    best_quality = CompressionConstants.UNREACHABLE_QUALITY
    calls = 0

    left, right = min_quality, max_quality
    while left <= right:
        if cancel_event is not None and cancel_event.is_set():
            raise OperationCancelledError("quality search")

        mid = (left + right) // 2
        out = encode(mid)
        calls += 1
        logger.debug(f"Quality {mid}: {len(out)} bytes (budget {max_size})")

        if len(out) <= max_size:
            best_buffer = out
            best_quality = mid
            left = mid + 1
        else:
            right = mid - 1

    return QualitySearchResult(buffer=best_buffer, quality=best_quality, encode_calls=calls)


class QualityCompressor:
    """Re-encodes images to WebP, optionally within a byte budget."""

    def __init__(self, encoder: Encoder = encode_webp):
        """
        Initialize compressor.

        Args:
            encoder: Function (image, quality, effort) -> bytes
        """
        self.encoder = encoder

    def compress(
        self,
        data: bytes,
        config: CompressionConfig,
        cancel_event: Optional[threading.Event] = None,
    ) -> CompressionResult:
        """
        Compress an encoded image.

        Args:
            data: Encoded source image
            config: FixedQuality or AutoQuality
            cancel_event: Optional cancellation token

        Returns:
            CompressionResult. In auto mode an unreachable budget returns the
            original bytes with achieved_quality 0 and budget_reached False.
        """
        image = ImageConverters.open_image(data)
        original_size = len(data)

        if isinstance(config, FixedQuality):
            if cancel_event is not None and cancel_event.is_set():
                raise OperationCancelledError("compression")
            compressed = self.encoder(image, config.quality, config.effort)
            logger.info(
                f"Compressed {original_size} -> {len(compressed)} bytes "
                f"at quality {config.quality}, effort {config.effort}"
            )
            return CompressionResult(
                original_size=original_size,
                compressed_size=len(compressed),
                compressed_buffer=compressed,
                achieved_quality=config.quality,
                mode=config.mode,
                encode_calls=1,
            )

        if isinstance(config, AutoQuality):
            search = search_quality(
                lambda quality: self.encoder(image, quality, None),
                config.min_quality,
                config.max_quality,
                config.max_size,
                cancel_event=cancel_event,
            )
            if not search.found:
                logger.warning(
                    f"No quality in [{config.min_quality}, {config.max_quality}] fits "
                    f"{config.max_size} bytes after {search.encode_calls} encodes; "
                    f"returning original image"
                )
                return CompressionResult(
                    original_size=original_size,
                    compressed_size=original_size,
                    compressed_buffer=data,
                    achieved_quality=search.quality,
                    mode=config.mode,
                    encode_calls=search.encode_calls,
                    mime_type=ImageConverters.detect_mime_type(data),
                )

            logger.info(
                f"Compressed {original_size} -> {len(search.buffer)} bytes at quality "
                f"{search.quality} ({search.encode_calls} encodes, budget {config.max_size})"
            )
            return CompressionResult(
                original_size=original_size,
                compressed_size=len(search.buffer),
                compressed_buffer=search.buffer,
                achieved_quality=search.quality,
                mode=config.mode,
                encode_calls=search.encode_calls,
            )

        raise TypeError(f"Unsupported compression config: {type(config).__name__}")
