"""
Operation Registry - lookup and dispatch by operation id.
"""

import logging
from typing import Dict, Iterable, List, Optional

from config import Settings, get_settings
from core.exceptions import ImageToolError, UnknownOperationError
from core.image_source import ImageSourceResolver
from core.utils.decorators import timer
from schemas.host import HostContext, OperationResult
from services.image_service import ImageService
from services.openai_service import OpenAIService

from .add_watermark import AddWatermarkOperation
from .analyze_image import AnalyzeImageOperation
from .base import BaseOperation
from .color_correction import ColorCorrectionOperation
from .compress_image import CompressImageOperation
from .download_image import DownloadImageOperation
from .image_to_image import ImageToImageOperation

logger = logging.getLogger(__name__)


class OperationRegistry:
    """Table of operation handlers keyed by operation id."""

    def __init__(self, operations: Iterable[BaseOperation] = ()):
        self._operations: Dict[str, BaseOperation] = {}
        for operation in operations:
            self.register(operation)

    def register(self, operation: BaseOperation) -> None:
        """Add a handler; operation ids must be unique."""
        if operation.operation_id in self._operations:
            raise ValueError(f"Operation {operation.operation_id} is already registered")
        self._operations[operation.operation_id] = operation

    def get(self, operation_id: str) -> BaseOperation:
        """
        Look up a handler.

        Raises:
            UnknownOperationError: If operation_id is not registered
        """
        try:
            return self._operations[operation_id]
        except KeyError:
            raise UnknownOperationError(operation_id, list(self._operations)) from None

    @property
    def operation_ids(self) -> List[str]:
        return list(self._operations)

    def __contains__(self, operation_id: str) -> bool:
        return operation_id in self._operations

    def __len__(self) -> int:
        return len(self._operations)

    def describe(self) -> List[Dict]:
        """Descriptions of all registered operations, in registration order."""
        return [operation.describe() for operation in self._operations.values()]

    def dispatch(self, operation_id: str, context: HostContext) -> OperationResult:
        """
        Execute one operation for the host.

        Args:
            operation_id: Registered operation id
            context: Parameters, binary fields, credentials and cancel token

        Returns:
            OperationResult
        """
        operation = self.get(operation_id)
        logger.info(f"Executing {operation_id}")

        try:
            with timer() as t:
                result = operation.execute(context)
        except ImageToolError as e:
            logger.error(f"{operation_id} failed: {e.message}")
            raise

        logger.info(f"{operation_id} completed in {t['ms']}ms")
        return result


def create_registry(
    settings: Optional[Settings] = None,
    resolver: Optional[ImageSourceResolver] = None,
    openai_service: Optional[OpenAIService] = None,
) -> OperationRegistry:
    """
    Build the registry with every built-in operation.

    Args:
        settings: Settings (defaults to get_settings())
        resolver: Image source resolver (built from settings when None)
        openai_service: Remote AI service (built from settings when None)

    Returns:
        Populated OperationRegistry
    """
    settings = settings or get_settings()
    resolver = resolver or ImageSourceResolver(
        timeout=settings.fetch.timeout_seconds,
        max_redirects=settings.fetch.max_redirects,
        max_bytes=settings.fetch.max_bytes,
        user_agent=settings.fetch.user_agent,
    )
    openai_service = openai_service or OpenAIService(
        timeout=settings.remote.timeout_seconds, max_retries=settings.remote.max_retries
    )

    image_service = ImageService(resolver)
    output_field = settings.output.binary_field

    return OperationRegistry(
        [
            AnalyzeImageOperation(image_service, openai_service, default_output_field=output_field),
            ColorCorrectionOperation(image_service, default_output_field=output_field),
            CompressImageOperation(image_service, default_output_field=output_field),
            AddWatermarkOperation(image_service, default_output_field=output_field),
            DownloadImageOperation(image_service, default_output_field=output_field),
            ImageToImageOperation(image_service, openai_service, default_output_field=output_field),
        ]
    )
