"""
Image Analysis operation.
"""

from schemas.credentials import AzureOpenAICredentials
from schemas.host import HostContext, OperationResult
from schemas.operations import AnalyzeImageRequest
from services.image_service import ImageService
from services.openai_service import OpenAIService

from .base import BaseOperation

CREDENTIAL_NAME = "azureOpenAIApi"


class AnalyzeImageOperation(BaseOperation):
    """Describe or label images with an Azure OpenAI chat deployment."""

    name = "Image Analysis"
    description = "Using Azure OpenAI for image analysis and labeling"
    operation_id = "imageAnalysis"
    request_model = AnalyzeImageRequest
    required_credentials = (CREDENTIAL_NAME,)

    def __init__(self, image_service: ImageService, openai_service: OpenAIService, **kwargs):
        super().__init__(image_service, **kwargs)
        self.openai_service = openai_service

    def execute(self, context: HostContext) -> OperationResult:
        request: AnalyzeImageRequest = self.parse(context)
        credentials = self.validate(AzureOpenAICredentials, context.get_credentials(CREDENTIAL_NAME))

        context.check_cancelled("image analysis")
        content = self.openai_service.analyze_images(
            credentials, request.urls, request.prompt, request.temperature
        )
        context.check_cancelled("image analysis")

        return OperationResult(payload={"content": content})
