"""
Image Compress operation.
"""

from typing import Optional

from core.exceptions import BudgetUnreachableError
from engines.compression import QualityCompressor
from schemas.compression import AutoQuality
from schemas.host import HostContext, OperationResult
from schemas.operations import CompressImageRequest
from services.image_service import ImageService

from .base import BaseOperation


class CompressImageOperation(BaseOperation):
    """
    Compress an image to WebP.

    When the auto search finds no quality within the budget the result is
    flagged (``budgetReached: false``, ``quality: 0``) and carries the
    original bytes, unless the request asks for an error instead.
    """

    name = "Image Compress"
    description = "Compress image and output in WebP format"
    operation_id = "imageCompress"
    request_model = CompressImageRequest

    def __init__(
        self,
        image_service: ImageService,
        compressor: Optional[QualityCompressor] = None,
        **kwargs,
    ):
        super().__init__(image_service, **kwargs)
        self.compressor = compressor or QualityCompressor()

    def execute(self, context: HostContext) -> OperationResult:
        request: CompressImageRequest = self.parse(context)

        source = self.image_service.load(context, request.image)
        result = self.compressor.compress(source.data, request.compression, context.cancel_event)
        context.check_cancelled("compression")

        if not result.budget_reached and request.on_budget_unreachable == "error":
            config: AutoQuality = request.compression
            raise BudgetUnreachableError(config.max_size, config.min_quality, config.max_quality)

        payload = {
            "quality": result.achieved_quality,
            "originalSize": result.original_size,
            "compressedSize": result.compressed_size,
            "budgetReached": result.budget_reached,
            "encodeCalls": result.encode_calls,
            "mode": result.mode,
        }
        binary = self.image_service.to_binary(result.compressed_buffer, result.mime_type, "compressed")
        return self.binary_result(request, binary, payload)
