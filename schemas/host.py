"""
Host contract models.

HostContext is what the workflow host hands to an operation; OperationResult
is what the operation hands back for persistence.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field

from core.exceptions import MissingCredentialsError, OperationCancelledError

from .common import BinaryData


@dataclass
class HostContext:
    """Resolved inputs of a single invocation"""

    parameters: Dict[str, Any] = field(default_factory=dict)
    binaries: Dict[str, bytes] = field(default_factory=dict)
    credentials: Dict[str, Mapping[str, Any]] = field(default_factory=dict)
    cancel_event: Optional[threading.Event] = None

    def get_credentials(self, name: str) -> Mapping[str, Any]:
        """Return a credential struct, raising if the host did not supply it."""
        credentials = self.credentials.get(name)
        if not credentials:
            raise MissingCredentialsError(name)
        return credentials

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def check_cancelled(self, stage: str) -> None:
        """Abort the invocation if the host cancelled it."""
        if self.cancelled:
            raise OperationCancelledError(stage)


class OperationResult(BaseModel):
    """Outputs of one invocation: a JSON payload and named binary fields"""

    payload: Dict[str, Any] = Field(default_factory=dict)
    binary: Dict[str, BinaryData] = Field(default_factory=dict)

    def summary(self) -> Dict[str, Any]:
        """JSON-safe view of the result (binary metadata without bytes)."""
        return {
            "json": self.payload,
            "binary": {name: data.metadata() for name, data in self.binary.items()},
        }
