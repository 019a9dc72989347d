"""
Luminance-zone color correction.

Every pixel is assigned to a tonal zone (shadows, midtones, highlights) by
its luminance, shifted by that zone's RGB offset, and then rescaled so its
luminance matches the original again, so perceived brightness stays
stable while the color moves.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from core.constants import ColorCorrectionConstants
from core.image.converters import ImageConverters
from schemas.common import ColorBalance

logger = logging.getLogger(__name__)

LUMA_WEIGHTS = np.array(ColorCorrectionConstants.LUMA_WEIGHTS, dtype=np.float64)


@dataclass
class ColorCorrectionResult:
    """Encoded corrected image"""

    data: bytes
    mime_type: str
    width: int
    height: int


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Per-pixel luma (0.299 R + 0.587 G + 0.114 B) of a float RGB array."""
    return (
        LUMA_WEIGHTS[0] * rgb[..., 0] + LUMA_WEIGHTS[1] * rgb[..., 1] + LUMA_WEIGHTS[2] * rgb[..., 2]
    )


def zone_offsets(lum: np.ndarray, color_balance: ColorBalance) -> np.ndarray:
    """
    Look up the RGB offset for every pixel from its luminance.

    Args:
        lum: Luminance array (H, W)
        color_balance: Offsets per zone

    Returns:
        Offset array (H, W, 3)
    """
    table = np.array(
        [
            color_balance.shadows.as_tuple(),
            color_balance.midtones.as_tuple(),
            color_balance.highlights.as_tuple(),
        ],
        dtype=np.float64,
    )
    zones = np.where(
        lum < ColorCorrectionConstants.SHADOW_THRESHOLD,
        0,
        np.where(lum < ColorCorrectionConstants.HIGHLIGHT_THRESHOLD, 1, 2),
    )
    return table[zones]


def apply_color_balance(pixels: np.ndarray, color_balance: ColorBalance) -> np.ndarray:
    """
    Apply the three-zone correction to a decoded image.

    Args:
        pixels: uint8 array (H, W, 3) or (H, W, 4); alpha is left untouched
        color_balance: Offsets per zone

    Returns:
        New uint8 array of the same shape
    """
    rgb = pixels[..., :3].astype(np.float64)

    original = luminance(rgb)
    shifted = np.clip(rgb + zone_offsets(original, color_balance), 0, 255)

    adjusted = luminance(shifted)
    # Black after shifting: divide by 1 instead of 0
    ratio = original / np.where(adjusted == 0, 1.0, adjusted)

    corrected = np.clip(shifted * ratio[..., np.newaxis], 0, 255)

    result = pixels.copy()
    # astype truncates toward zero, values are already within [0, 255]
    result[..., :3] = corrected.astype(np.uint8)
    return result


class ColorCorrector:
    """Decode, correct and re-encode images in their source format."""

    def __init__(self, color_balance: Optional[ColorBalance] = None):
        """
        Initialize corrector.

        Args:
            color_balance: Zone offsets (defaults to ColorBalance())
        """
        self.color_balance = color_balance or ColorBalance()

    def correct(self, data: bytes, mime_type: Optional[str] = None) -> ColorCorrectionResult:
        """
        Correct an encoded image.

        Args:
            data: Encoded source image
            mime_type: Output MIME type; detected from data when None

        Returns:
            ColorCorrectionResult encoded in the source format (PNG fallback)
        """
        if mime_type is None:
            mime_type = ImageConverters.detect_mime_type(data)
        pixels, _ = ImageConverters.decode(data)
        height, width = pixels.shape[:2]
        mime_type = ImageConverters.output_mime_type(mime_type, (width, height))

        corrected = apply_color_balance(pixels, self.color_balance)
        encoded = ImageConverters.encode(corrected, mime_type)

        logger.info(f"Color corrected {width}x{height} image ({mime_type}, {len(encoded)} bytes)")
        return ColorCorrectionResult(data=encoded, mime_type=mime_type, width=width, height=height)
