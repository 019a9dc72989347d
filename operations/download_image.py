"""
Image Download operation.
"""

from schemas.host import HostContext, OperationResult
from schemas.operations import DownloadImageRequest

from .base import BaseOperation


class DownloadImageOperation(BaseOperation):
    """Download an image from a URL into a binary field."""

    name = "Image Download"
    description = "Download image from URL"
    operation_id = "imageDownload"
    request_model = DownloadImageRequest

    def execute(self, context: HostContext) -> OperationResult:
        request: DownloadImageRequest = self.parse(context)
        data = self.image_service.fetch(context, request.url)
        return self.binary_result(request, self.image_service.to_binary(data, file_stem="download"))
