"""
Add Watermark operation.
"""

from typing import Optional

from engines.watermark import WatermarkCompositor
from schemas.host import HostContext, OperationResult
from schemas.operations import AddWatermarkRequest
from services.image_service import ImageService

from .base import BaseOperation


class AddWatermarkOperation(BaseOperation):
    """Overlay a watermark image; base and watermark are fetched in parallel."""

    name = "Add Watermark"
    description = "Add watermark to image"
    operation_id = "addWatermark"
    request_model = AddWatermarkRequest

    def __init__(
        self,
        image_service: ImageService,
        compositor: Optional[WatermarkCompositor] = None,
        **kwargs,
    ):
        super().__init__(image_service, **kwargs)
        self.compositor = compositor or WatermarkCompositor()

    def execute(self, context: HostContext) -> OperationResult:
        request: AddWatermarkRequest = self.parse(context)

        base, watermark = self.image_service.load_many(context, [request.image, request.watermark])

        context.check_cancelled("watermark compositing")
        result = self.compositor.add_watermark(base.data, watermark.data, request.placement)
        context.check_cancelled("watermark compositing")

        payload = {"top": result.top, "left": result.left, "clipped": result.clipped}
        binary = self.image_service.to_binary(result.data, result.mime_type, "watermarked")
        return self.binary_result(request, binary, payload)
