"""
Image processing engines.

- color_correction: luminance-zone color offsets with brightness preservation
- compression: fixed-quality and budget-targeted WebP encoding
- watermark: offset resolution and clipped alpha compositing
"""

from .color_correction import ColorCorrectionResult, ColorCorrector, apply_color_balance
from .compression import (
    CompressionResult,
    QualityCompressor,
    QualitySearchResult,
    encode_webp,
    search_quality,
)
from .watermark import WatermarkCompositor, WatermarkResult, composite, resolve_offsets

__all__ = [
    "ColorCorrectionResult",
    "ColorCorrector",
    "apply_color_balance",
    "CompressionResult",
    "QualityCompressor",
    "QualitySearchResult",
    "encode_webp",
    "search_quality",
    "WatermarkCompositor",
    "WatermarkResult",
    "composite",
    "resolve_offsets",
]
