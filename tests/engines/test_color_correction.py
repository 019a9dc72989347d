"""
Tests for the luminance-zone color correction
"""

import numpy as np
import pytest

from engines.color_correction import ColorCorrector, apply_color_balance, luminance
from schemas.common import ColorBalance, RGBOffset


def balance(shadows=(0, 0, 0), midtones=(0, 0, 0), highlights=(0, 0, 0)) -> ColorBalance:
    return ColorBalance(
        shadows=RGBOffset.from_tuple(shadows),
        midtones=RGBOffset.from_tuple(midtones),
        highlights=RGBOffset.from_tuple(highlights),
    )


def pixel(r, g, b) -> np.ndarray:
    return np.array([[[r, g, b]]], dtype=np.uint8)


# Dark, mid and bright pixels with channels at or near 0 and 255
EDGE_PIXELS = [
    (0, 0, 0),
    (3, 1, 2),
    (250, 2, 5),
    (0, 0, 255),
    (255, 0, 0),
    (1, 254, 3),
    (0, 255, 0),
    (120, 130, 140),
    (255, 255, 0),
    (254, 253, 255),
    (255, 255, 255),
    (200, 180, 250),
]


def reference_pixel(rgb, offsets):
    """Scalar rendition of the correction for one pixel with one offset in every zone"""
    r, g, b = (float(v) for v in rgb)
    lum = 0.299 * r + 0.587 * g + 0.114 * b
    shifted = [min(max(c + o, 0.0), 255.0) for c, o in zip((r, g, b), offsets)]
    shifted_lum = 0.299 * shifted[0] + 0.587 * shifted[1] + 0.114 * shifted[2]
    ratio = lum / (shifted_lum if shifted_lum != 0 else 1.0)
    return tuple(int(min(max(c * ratio, 0.0), 255.0)) for c in shifted)


class TestApplyColorBalance:
    """Test the per-pixel transform"""

    def test_mid_gray_default_balance(self):
        """(128,128,128) is a midtone and becomes (121,127,147)"""
        result = apply_color_balance(pixel(128, 128, 128), ColorBalance())
        assert tuple(result[0, 0]) == (121, 127, 147)

    def test_zero_offsets_are_identity(self, noisy_image, test_image):
        neutral = ColorBalance.neutral()
        np.testing.assert_array_equal(apply_color_balance(noisy_image, neutral), noisy_image)
        np.testing.assert_array_equal(apply_color_balance(test_image, neutral), test_image)

    @pytest.mark.parametrize("offset", [20, -20])
    def test_matches_per_pixel_reference(self, offset):
        """Clamped values never wrap around at either end of the range"""
        offsets = (offset, -offset, offset)
        color_balance = balance(offsets, offsets, offsets)
        pixels = np.array([EDGE_PIXELS], dtype=np.uint8)

        result = apply_color_balance(pixels, color_balance)

        expected = [reference_pixel(rgb, offsets) for rgb in EDGE_PIXELS]
        assert [tuple(int(v) for v in px) for px in result[0]] == expected

    @pytest.mark.parametrize(
        "value,zone",
        [(85, "midtones"), (170, "highlights")],
    )
    def test_zone_threshold_is_inclusive(self, value, zone):
        """Luminance equal to a threshold belongs to the upper zone"""
        offsets = {"shadows": (0, 0, 0), "midtones": (0, 0, 0), "highlights": (0, 0, 0)}
        offsets[zone] = (0, 0, 20)
        result = apply_color_balance(pixel(value, value, value), balance(**offsets))
        assert result[0, 0, 2] > value

        below = {name: (0, 0, 0) if name == zone else (0, 0, 20) for name in offsets}
        untouched = apply_color_balance(pixel(value, value, value), balance(**below))
        assert tuple(untouched[0, 0]) == (value, value, value)

    def test_black_stays_black(self):
        """Zero luminance scales any shifted color back to black"""
        result = apply_color_balance(pixel(0, 0, 0), balance(shadows=(20, 0, 0)))
        assert tuple(result[0, 0]) == (0, 0, 0)

    def test_negative_offsets_on_black(self):
        """Shifted luminance of zero must not divide by zero"""
        result = apply_color_balance(pixel(0, 0, 0), balance(shadows=(-20, -20, -20)))
        assert tuple(result[0, 0]) == (0, 0, 0)

    def test_white_saturates(self):
        result = apply_color_balance(pixel(255, 255, 255), balance(highlights=(20, 20, 20)))
        assert tuple(result[0, 0]) == (255, 255, 255)

    @pytest.mark.parametrize(
        "value,zone",
        [(84, "shadows"), (86, "midtones"), (169, "midtones"), (171, "highlights")],
    )
    def test_zone_selection(self, value, zone):
        """Only the offset of the pixel's own zone moves its blue channel"""
        offsets = {"shadows": (0, 0, 0), "midtones": (0, 0, 0), "highlights": (0, 0, 0)}
        offsets[zone] = (0, 0, 20)
        result = apply_color_balance(pixel(value, value, value), balance(**offsets))
        assert result[0, 0, 2] > value

        other = {name: (0, 0, 0) if name == zone else (0, 0, 20) for name in offsets}
        untouched = apply_color_balance(pixel(value, value, value), balance(**other))
        assert tuple(untouched[0, 0]) == (value, value, value)

    def test_luminance_preserved(self, test_image):
        """Truncation may lose at most one level of luminance"""
        result = apply_color_balance(test_image, ColorBalance())
        before = luminance(test_image.astype(np.float64))
        after = luminance(result.astype(np.float64))
        # Clipped highlights cannot be restored exactly; compare unclipped pixels
        mask = result[..., :3].max(axis=-1) < 255
        assert np.all(np.abs(before[mask] - after[mask]) <= 1.0)

    def test_alpha_untouched(self):
        rgba = np.zeros((4, 4, 4), dtype=np.uint8)
        rgba[..., :3] = 128
        rgba[..., 3] = np.arange(16, dtype=np.uint8).reshape(4, 4) * 10
        result = apply_color_balance(rgba, ColorBalance())
        np.testing.assert_array_equal(result[..., 3], rgba[..., 3])
        assert tuple(result[0, 0, :3]) == (121, 127, 147)

    def test_input_not_modified(self, test_image):
        original = test_image.copy()
        apply_color_balance(test_image, ColorBalance())
        np.testing.assert_array_equal(test_image, original)


class TestColorCorrector:
    """Test decode, correct and re-encode"""

    def test_gray_png_end_to_end(self, gray_png, decode):
        result = ColorCorrector().correct(gray_png)
        assert result.mime_type == "image/png"
        assert (result.width, result.height) == (8, 8)
        pixels = decode(result.data)
        assert np.all(pixels == np.array([121, 127, 147], dtype=np.uint8))

    def test_jpeg_stays_jpeg(self, jpeg_bytes):
        result = ColorCorrector().correct(jpeg_bytes)
        assert result.mime_type == "image/jpeg"
        assert result.data[:2] == b"\xff\xd8"

    def test_mpo_stays_jpeg(self, mpo_bytes):
        """Multi-picture JPEGs decode to their first frame and re-encode as JPEG"""
        result = ColorCorrector().correct(mpo_bytes)
        assert result.mime_type == "image/jpeg"
        assert result.data[:2] == b"\xff\xd8"
        assert (result.width, result.height) == (160, 120)

    def test_unwritable_mime_falls_back_to_png(self, png_bytes):
        result = ColorCorrector().correct(png_bytes, mime_type="image/svg+xml")
        assert result.mime_type == "image/png"

    def test_rgba_png_keeps_alpha(self, encode, decode):
        rgba = np.full((6, 6, 4), 128, dtype=np.uint8)
        rgba[..., 3] = 50
        result = ColorCorrector().correct(encode(rgba, "PNG"))
        pixels = decode(result.data)
        assert pixels.shape == (6, 6, 4)
        assert np.all(pixels[..., 3] == 50)
