"""
Image to Image operation.
"""

import logging

from core.constants import RemoteConstants
from core.exceptions import UnsupportedFormatError
from core.image.converters import ImageConverters
from schemas.credentials import OpenAICredentials
from schemas.host import HostContext, OperationResult
from schemas.operations import ImageToImageRequest
from services.image_service import ImageService
from services.openai_service import OpenAIService

from .base import BaseOperation

logger = logging.getLogger(__name__)

CREDENTIAL_NAME = "openAIApi"


class ImageToImageOperation(BaseOperation):
    """Edit an image with an OpenAI image model."""

    name = "Image to Image"
    description = "Generate an image from a prompt"
    operation_id = "image2image"
    request_model = ImageToImageRequest
    required_credentials = (CREDENTIAL_NAME,)

    def __init__(self, image_service: ImageService, openai_service: OpenAIService, **kwargs):
        super().__init__(image_service, **kwargs)
        self.openai_service = openai_service

    def execute(self, context: HostContext) -> OperationResult:
        request: ImageToImageRequest = self.parse(context)
        credentials = self.validate(OpenAICredentials, context.get_credentials(CREDENTIAL_NAME))

        source = self.image_service.load(context, request.image)
        data = source.data
        image_format = ImageConverters.detect_format(data)

        if image_format not in RemoteConstants.EDIT_INPUT_FORMATS:
            supported = sorted(RemoteConstants.EDIT_INPUT_FORMATS)
            if not request.convert_unsupported:
                raise UnsupportedFormatError(image_format, supported)
            logger.info(f"Converting {image_format or 'unknown'} input to PNG for image edit")
            data = ImageConverters.to_png(data)
            image_format = "PNG"

        content_type, file_name = RemoteConstants.EDIT_INPUT_FORMATS[image_format]

        context.check_cancelled("image generation")
        generated = self.openai_service.edit_image(
            credentials,
            data,
            file_name,
            content_type,
            request.prompt,
            model=request.model,
            size=request.size,
        )
        context.check_cancelled("image generation")

        binary = self.image_service.to_binary(generated, file_stem="generated")
        return self.binary_result(request, binary, {"model": request.model, "size": request.size})
