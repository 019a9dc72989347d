"""
Tests for request models and the host's flat form parameters
"""

import pytest
from pydantic import ValidationError

from schemas.common import ColorBalance, Region
from schemas.compression import AutoQuality, FixedQuality
from schemas.image import BinaryImageInput, UrlImageInput
from schemas.operations import (
    AddWatermarkRequest,
    AnalyzeImageRequest,
    ColorCorrectionRequest,
    CompressImageRequest,
    DownloadImageRequest,
    ImageToImageRequest,
)


class TestColorBalance:
    """Test zone defaults and host wrappers"""

    def test_defaults(self):
        balance = ColorBalance()
        assert balance.shadows.as_tuple() == (-5, 0, 10)
        assert balance.midtones.as_tuple() == (-6, 0, 20)
        assert balance.highlights.as_tuple() == (-6, 0, 15)

    def test_missing_zone_keeps_default(self):
        balance = ColorBalance.model_validate({"midtones": {"red": 3, "green": 4, "blue": 5}})
        assert balance.midtones.as_tuple() == (3, 4, 5)
        assert balance.shadows.as_tuple() == (-5, 0, 10)

    def test_partial_zone_fills_channels(self):
        balance = ColorBalance.model_validate({"highlights": {"green": 7}})
        assert balance.highlights.as_tuple() == (-6, 7, 15)

    def test_collection_wrapper_unwrapped(self):
        balance = ColorBalance.model_validate({"shadows": {"shadows": {"red": 1, "green": 2, "blue": 3}}})
        assert balance.shadows.as_tuple() == (1, 2, 3)

    def test_empty_zone_keeps_default(self):
        balance = ColorBalance.model_validate({"shadows": {}})
        assert balance.shadows.as_tuple() == (-5, 0, 10)

    @pytest.mark.parametrize("value", [-21, 21])
    def test_offset_out_of_range(self, value):
        with pytest.raises(ValidationError):
            ColorBalance.model_validate({"shadows": {"red": value}})


class TestRegion:
    """Test rectangle intersection used for clipping"""

    def test_intersection(self):
        region = Region(x=-5, y=0, width=10, height=10).intersection(Region(x=0, y=0, width=50, height=50))
        assert (region.x, region.y, region.width, region.height) == (0, 0, 5, 10)

    def test_disjoint(self):
        assert Region(x=60, y=0, width=10, height=10).intersection(
            Region(x=0, y=0, width=50, height=50)
        ) is None


class TestCompressImageRequest:
    """Test compression parameters"""

    def test_default_is_auto(self):
        request = CompressImageRequest.model_validate({"binaryFile": True})
        assert isinstance(request.compression, AutoQuality)
        assert request.compression.max_size == 1048576
        assert isinstance(request.image, BinaryImageInput)
        assert request.image.binary_field == "data"

    def test_host_auto_form(self):
        request = CompressImageRequest.model_validate(
            {"url": "https://x.test/a.png", "autoQuality": True, "minQuality": 20, "maxSize": 2000}
        )
        assert isinstance(request.image, UrlImageInput)
        assert request.compression == AutoQuality(min_quality=20, max_size=2000)

    def test_host_fixed_form(self):
        request = CompressImageRequest.model_validate(
            {
                "binaryFile": True,
                "inputBinaryField": "photo",
                "autoQuality": False,
                "customQuality": 55,
                "options": {"compressEffort": 2},
            }
        )
        assert request.compression == FixedQuality(quality=55, effort=2)
        assert request.image.binary_field == "photo"

    def test_structured_form(self):
        request = CompressImageRequest.model_validate(
            {
                "image": {"source": "binary", "binaryField": "photo"},
                "compression": {"mode": "fixed", "quality": 10},
                "onBudgetUnreachable": "error",
            }
        )
        assert request.compression.quality == 10
        assert request.on_budget_unreachable == "error"

    def test_min_above_max_rejected(self):
        with pytest.raises(ValidationError):
            CompressImageRequest.model_validate(
                {"binaryFile": True, "minQuality": 90, "maxQuality": 10}
            )

    @pytest.mark.parametrize("quality", [-1, 101])
    def test_quality_out_of_range(self, quality):
        with pytest.raises(ValidationError):
            FixedQuality(quality=quality)

    def test_effort_out_of_range(self):
        with pytest.raises(ValidationError):
            FixedQuality(effort=7)


class TestOtherRequests:
    """Test the remaining operation requests"""

    def test_color_correction_flat_zones(self):
        request = ColorCorrectionRequest.model_validate(
            {"binaryFile": True, "shadows": {"shadows": {"red": 1, "green": 1, "blue": 1}}}
        )
        assert request.color_balance.shadows.as_tuple() == (1, 1, 1)
        assert request.color_balance.midtones.as_tuple() == (-6, 0, 20)

    def test_color_correction_requires_image(self):
        with pytest.raises(ValidationError):
            ColorCorrectionRequest.model_validate({})

    def test_watermark_host_form(self):
        request = AddWatermarkRequest.model_validate(
            {
                "url": "https://x.test/base.png",
                "watermarkUrl": "https://x.test/mark.png",
                "options": {"bottom": 10, "right": 10, "watermarkScale": 0.5},
            }
        )
        assert request.image.url == "https://x.test/base.png"
        assert request.watermark.url == "https://x.test/mark.png"
        assert request.placement.bottom == 10
        assert request.placement.scale == 0.5

    def test_watermark_scale_must_be_positive(self):
        with pytest.raises(ValidationError):
            AddWatermarkRequest.model_validate(
                {"url": "a", "watermarkUrl": "b", "options": {"scale": 0}}
            )

    def test_download_strips_url(self):
        assert DownloadImageRequest(url="  https://x.test/a.png ").url == "https://x.test/a.png"

    def test_download_blank_url_rejected(self):
        with pytest.raises(ValidationError):
            DownloadImageRequest(url="   ")

    def test_analysis_splits_urls(self):
        request = AnalyzeImageRequest.model_validate(
            {"urls": "https://a.test/1.png, https://a.test/2.png,", "options": {"temperature": 0.7}}
        )
        assert request.urls == ["https://a.test/1.png", "https://a.test/2.png"]
        assert request.temperature == 0.7
        assert request.prompt == "What's in this image?"

    def test_analysis_requires_url(self):
        with pytest.raises(ValidationError):
            AnalyzeImageRequest.model_validate({"urls": " , "})

    def test_image_to_image_size_checked_per_model(self):
        with pytest.raises(ValidationError):
            ImageToImageRequest.model_validate(
                {"binaryFile": True, "prompt": "p", "model": "dall-e-2", "size": "1536x1024"}
            )
        request = ImageToImageRequest.model_validate(
            {"binaryFile": True, "prompt": "p", "model": "dall-e-2", "size": "512x512"}
        )
        assert request.size == "512x512"

    def test_output_binary_field_alias(self):
        request = DownloadImageRequest.model_validate({"url": "u", "outputBinaryField": "out"})
        assert request.output_binary_field == "out"
