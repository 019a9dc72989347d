"""
Shared operation plumbing.

Every operation exposes the same surface to the registry: a display name,
a description, its operation id, a parameter schema generated from its
request model, the credentials it needs, and execute(context).
"""

import logging
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from core.constants import OutputConstants
from core.exceptions import InvalidParametersError
from schemas.base import OperationRequest
from schemas.common import BinaryData
from schemas.host import HostContext, OperationResult
from services.image_service import ImageService

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class BaseOperation:
    """Base class for operation handlers."""

    name: str = ""
    description: str = ""
    operation_id: str = ""
    request_model: Type[OperationRequest] = OperationRequest
    required_credentials: Tuple[str, ...] = ()

    def __init__(
        self,
        image_service: ImageService,
        default_output_field: str = OutputConstants.DEFAULT_BINARY_FIELD,
    ):
        """
        Initialize operation.

        Args:
            image_service: Input resolution and output packaging
            default_output_field: Binary field used when the request names none
        """
        self.image_service = image_service
        self.default_output_field = default_output_field

    def validate(self, model: Type[M], data: Any) -> M:
        """Validate raw host data into a model, raising InvalidParametersError."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            errors = e.errors(include_url=False, include_context=False)
            logger.error(f"Invalid input for {self.operation_id}: {errors}")
            raise InvalidParametersError(self.operation_id, errors) from e

    def parse(self, context: HostContext) -> Any:
        """Validate the invocation's parameters into the request model."""
        return self.validate(self.request_model, context.parameters)

    def parameter_schema(self) -> Dict[str, Any]:
        """JSON schema of the accepted parameters."""
        return self.request_model.model_json_schema(by_alias=True)

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "operationId": self.operation_id,
            "parameterSchema": self.parameter_schema(),
            "requiredCredentials": list(self.required_credentials),
        }

    def output_field(self, request: OperationRequest) -> str:
        return request.output_binary_field or self.default_output_field

    def binary_result(
        self,
        request: OperationRequest,
        binary: BinaryData,
        payload: Optional[Dict[str, Any]] = None,
    ) -> OperationResult:
        """Wrap a single binary output under the requested field name."""
        return OperationResult(payload=payload or {}, binary={self.output_field(request): binary})

    def execute(self, context: HostContext) -> OperationResult:
        raise NotImplementedError
