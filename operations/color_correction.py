"""
Color Correction operation.
"""

from engines.color_correction import ColorCorrector
from schemas.host import HostContext, OperationResult
from schemas.operations import ColorCorrectionRequest

from .base import BaseOperation


class ColorCorrectionOperation(BaseOperation):
    """Adjust the color tone of an image per luminance zone."""

    name = "Color Correction"
    description = "Adjust the color tone of the ai generated image"
    operation_id = "colorCorrection"
    request_model = ColorCorrectionRequest

    def execute(self, context: HostContext) -> OperationResult:
        request: ColorCorrectionRequest = self.parse(context)

        source = self.image_service.load(context, request.image)

        context.check_cancelled("color correction")
        corrected = ColorCorrector(request.color_balance).correct(source.data, source.mime_type)
        context.check_cancelled("color correction")

        binary = self.image_service.to_binary(corrected.data, corrected.mime_type, "corrected")
        return self.binary_result(request, binary)
