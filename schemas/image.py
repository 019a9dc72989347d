"""
Image input models.

An image reaches an operation either as a URL the operation downloads, or
as a binary field the host has already materialized.
"""

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import Field, field_validator

from core.constants import OutputConstants

from .base import HostModel


class UrlImageInput(HostModel):
    """Image downloaded from a URL"""

    source: Literal["url"] = "url"
    url: str = Field(..., min_length=1, description="URL of the image")

    @field_validator("url")
    @classmethod
    def strip_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("URL must not be empty")
        return value


class BinaryImageInput(HostModel):
    """Image taken from a host binary field"""

    source: Literal["binary"] = "binary"
    binary_field: str = Field(
        OutputConstants.DEFAULT_BINARY_FIELD,
        min_length=1,
        description="Binary field holding the image",
    )


ImageInput = Annotated[Union[UrlImageInput, BinaryImageInput], Field(discriminator="source")]


def image_input_from_host(
    data: Dict[str, Any], url_key: str = "url", target: str = "image"
) -> Dict[str, Any]:
    """
    Build a tagged image input from the host's flat form fields.

    The host form sends ``binaryFile`` (bool), ``url`` and
    ``inputBinaryField``; they become ``{"source": ..., ...}`` under target.
    Data that already carries target is returned unchanged.

    Args:
        data: Raw parameter dict
        url_key: Key holding the URL when binaryFile is false
        target: Key the tagged input is stored under

    Returns:
        New parameter dict
    """
    if target in data:
        return data

    values = dict(data)
    binary_file = values.pop("binaryFile", values.pop("binary_file", None))
    binary_field: Optional[str] = values.pop("inputBinaryField", values.pop("input_binary_field", None))

    if binary_file:
        values[target] = {
            "source": "binary",
            "binary_field": binary_field or OutputConstants.DEFAULT_BINARY_FIELD,
        }
    elif url_key in values:
        values[target] = {"source": "url", "url": values.pop(url_key)}
    return values
