"""
Watermark compositing.

The watermark is optionally scaled, placed at an offset resolved from
top/left/right/bottom margins, and blended over the base image. Parts of
the watermark that fall outside the base canvas are clipped; a watermark
entirely outside the canvas leaves the base unchanged.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from core.image.converters import ImageConverters
from core.image.processors import scale_image
from schemas.common import Region
from schemas.watermark import WatermarkPlacement

logger = logging.getLogger(__name__)


@dataclass
class WatermarkResult:
    """Encoded watermarked image"""

    data: bytes
    mime_type: str
    width: int
    height: int
    top: int
    left: int
    clipped: bool


def resolve_offsets(
    image_size: Tuple[int, int],
    watermark_size: Tuple[int, int],
    placement: WatermarkPlacement,
) -> Tuple[int, int]:
    """
    Compute the watermark's top-left corner.

    top/left win over bottom/right; an axis with neither set gets offset 0.

    Args:
        image_size: Base (width, height)
        watermark_size: Watermark (width, height)
        placement: Requested margins

    Returns:
        Tuple of (top, left)
    """
    image_width, image_height = image_size
    watermark_width, watermark_height = watermark_size

    if placement.top is not None:
        top = placement.top
    elif placement.bottom is not None:
        top = image_height - watermark_height - placement.bottom
    else:
        top = 0

    if placement.left is not None:
        left = placement.left
    elif placement.right is not None:
        left = image_width - watermark_width - placement.right
    else:
        left = 0

    return top, left


def _match_channels(image: np.ndarray, channels: int) -> np.ndarray:
    if image.shape[2] == channels:
        return image
    if channels == 4:
        alpha = np.full(image.shape[:2] + (1,), 255, dtype=np.uint8)
        return np.concatenate([image, alpha], axis=2)
    return image[..., :3]


def _blend_over(source: np.ndarray, backdrop: np.ndarray) -> np.ndarray:
    """
    Porter-Duff "over" with straight (non-premultiplied) alpha.

    Args:
        source: RGBA uint8 watermark pixels
        backdrop: RGB or RGBA uint8 base pixels of the same height and width

    Returns:
        Blended uint8 pixels with the backdrop's channel count
    """
    src_alpha = source[..., 3:4].astype(np.float64) / 255.0
    src_rgb = source[..., :3].astype(np.float64)
    dst_rgb = backdrop[..., :3].astype(np.float64)

    if backdrop.shape[2] == 3:
        # Opaque backdrop: out alpha is 1
        return np.rint(src_rgb * src_alpha + dst_rgb * (1.0 - src_alpha)).astype(np.uint8)

    dst_alpha = backdrop[..., 3:4].astype(np.float64) / 255.0
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    weighted = src_rgb * src_alpha + dst_rgb * dst_alpha * (1.0 - src_alpha)
    out_rgb = np.divide(weighted, out_alpha, out=np.zeros_like(weighted), where=out_alpha > 0)

    blended = np.empty(backdrop.shape, dtype=np.uint8)
    blended[..., :3] = np.rint(np.clip(out_rgb, 0, 255)).astype(np.uint8)
    blended[..., 3:4] = np.rint(out_alpha * 255.0).astype(np.uint8)
    return blended


def composite(base: np.ndarray, watermark: np.ndarray, top: int, left: int) -> Tuple[np.ndarray, bool]:
    """
    Blend watermark over base at (top, left), clipping to the canvas.

    Args:
        base: RGB/RGBA uint8 base image
        watermark: RGB/RGBA uint8 watermark (alpha used as coverage)
        top: Row of the watermark's top edge (may be negative)
        left: Column of the watermark's left edge (may be negative)

    Returns:
        Tuple of (new image, whether the watermark was clipped)
    """
    base_h, base_w = base.shape[:2]
    mark_h, mark_w = watermark.shape[:2]

    canvas = Region(x=0, y=0, width=base_w, height=base_h)
    placed = Region(x=left, y=top, width=mark_w, height=mark_h)
    visible: Optional[Region] = placed.intersection(canvas)

    result = base.copy()
    if visible is None or visible.width == 0 or visible.height == 0:
        logger.debug(f"Watermark at ({left},{top}) lies outside the {base_w}x{base_h} canvas")
        return result, True

    clipped = visible.width != mark_w or visible.height != mark_h

    mark = watermark[
        visible.y - top : visible.y2 - top,
        visible.x - left : visible.x2 - left,
    ]
    target = result[visible.y : visible.y2, visible.x : visible.x2]

    if mark.shape[2] == 4:
        target[...] = _blend_over(mark, target)
    else:
        target[...] = _match_channels(mark, target.shape[2])

    return result, clipped


class WatermarkCompositor:
    """Decode, composite and re-encode in the base image's format."""

    def add_watermark(
        self,
        image_data: bytes,
        watermark_data: bytes,
        placement: Optional[WatermarkPlacement] = None,
    ) -> WatermarkResult:
        """
        Overlay a watermark on an encoded image.

        Args:
            image_data: Encoded base image
            watermark_data: Encoded watermark image
            placement: Margins and scale (defaults to top-left, unscaled)

        Returns:
            WatermarkResult encoded in the base image's format
        """
        placement = placement or WatermarkPlacement()

        base, base_format = ImageConverters.decode(image_data)
        watermark, _ = ImageConverters.decode(watermark_data)

        watermark = scale_image(watermark, placement.scale)

        base_h, base_w = base.shape[:2]
        mark_h, mark_w = watermark.shape[:2]
        top, left = resolve_offsets((base_w, base_h), (mark_w, mark_h), placement)

        result, clipped = composite(base, watermark, top, left)
        if clipped:
            logger.warning(
                f"Watermark {mark_w}x{mark_h} at ({left},{top}) clipped to {base_w}x{base_h} canvas"
            )

        mime_type = ImageConverters.output_mime_type(
            ImageConverters.format_to_mime(base_format), (base_w, base_h)
        )
        encoded = ImageConverters.encode(result, mime_type)

        logger.info(f"Added {mark_w}x{mark_h} watermark at ({left},{top}) to {base_w}x{base_h} image")
        return WatermarkResult(
            data=encoded,
            mime_type=mime_type,
            width=base_w,
            height=base_h,
            top=top,
            left=left,
            clipped=clipped,
        )
