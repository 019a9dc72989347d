"""
Base schema shared by every host-facing model.

The host passes parameters with camelCase names (``binaryFile``,
``inputBinaryField``); Python code uses snake_case. Both are accepted.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class HostModel(BaseModel):
    """Base model accepting camelCase host names and snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class OperationRequest(HostModel):
    """Parameters common to all operations."""

    output_binary_field: Optional[str] = Field(
        None,
        min_length=1,
        description="Name of the binary output field (defaults to the configured field)",
    )
