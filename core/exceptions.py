"""
Exception hierarchy for the Image Tool operations.

Every error raised by the operations derives from ImageToolError and carries
a human-readable message plus a details dict the host can log or display.
"""

from typing import Any, Dict, Optional


class ImageToolError(Exception):
    """Base class for all operation errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error for the host."""
        content: Dict[str, Any] = {"error": self.__class__.__name__, "message": self.message}
        if self.details:
            content["details"] = self.details
        return content


class FetchError(ImageToolError):
    """Downloading an image URL failed (network error or non-2xx status)."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: Optional[str] = None):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        message = f"Failed to fetch image from {url}"
        if status_code is not None:
            message += f": HTTP {status_code}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, {"url": url, "status_code": status_code, "reason": reason})


class UnsupportedFormatError(ImageToolError):
    """Image format cannot be handled by the target encode path."""

    def __init__(
        self,
        image_format: Optional[str],
        supported: Optional[list] = None,
        reason: Optional[str] = None,
    ):
        self.image_format = image_format
        message = f"Unsupported image format: {image_format or 'unknown'}"
        details: Dict[str, Any] = {"format": image_format}
        if supported:
            details["supported"] = list(supported)
        if reason:
            message += f" ({reason})"
            details["reason"] = reason
        super().__init__(message, details)


class ImageDecodeError(ImageToolError):
    """Byte buffer could not be decoded as an image."""

    def __init__(self, reason: str):
        super().__init__(f"Failed to decode image: {reason}", {"reason": reason})


class BudgetUnreachableError(ImageToolError):
    """No quality in the search range produced output within the size budget."""

    def __init__(self, max_size: int, min_quality: int, max_quality: int):
        self.max_size = max_size
        super().__init__(
            f"No quality in [{min_quality}, {max_quality}] fits within {max_size} bytes",
            {"max_size": max_size, "min_quality": min_quality, "max_quality": max_quality},
        )


class RemoteServiceError(ImageToolError):
    """Delegated AI call failed or returned no usable payload."""

    def __init__(self, service: str, reason: str, cause: Optional[BaseException] = None):
        self.service = service
        self.cause = cause
        details: Dict[str, Any] = {"service": service, "reason": reason}
        if cause is not None:
            details["cause"] = repr(cause)
        super().__init__(f"{service} request failed: {reason}", details)


class UnknownOperationError(ImageToolError):
    """Dispatcher received an operation id that is not registered."""

    def __init__(self, operation_id: str, available: Optional[list] = None):
        self.operation_id = operation_id
        super().__init__(
            f"Unknown operation: {operation_id}",
            {"operation": operation_id, "available": sorted(available or [])},
        )


class BinaryFieldNotFoundError(ImageToolError):
    """Host did not supply the requested binary field."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Binary field '{field}' not found in input", {"field": field})


class MissingCredentialsError(ImageToolError):
    """Operation requires credentials the host did not supply."""

    def __init__(self, credential_name: str):
        self.credential_name = credential_name
        super().__init__(
            f"Credentials '{credential_name}' are required for this operation",
            {"credential": credential_name},
        )


class InvalidParametersError(ImageToolError):
    """Host parameters failed validation."""

    def __init__(self, operation_id: str, errors: list):
        self.errors = errors
        super().__init__(
            f"Invalid parameters for operation {operation_id}",
            {"operation": operation_id, "errors": errors},
        )


class OperationCancelledError(ImageToolError):
    """Host cancelled the invocation while it was in flight."""

    def __init__(self, stage: str):
        super().__init__(f"Operation cancelled during {stage}", {"stage": stage})
