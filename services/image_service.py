"""
Image Service - input resolution and output packaging for operations.
"""

import logging
from typing import List, Optional

from core.constants import OutputConstants
from core.image.converters import ImageConverters
from core.image.processors import image_metadata
from core.image_source import ImageSourceResolver, ResolvedImage
from schemas.common import BinaryData
from schemas.host import HostContext
from schemas.image import ImageInput

logger = logging.getLogger(__name__)


class ImageService:
    """Bridges host contexts and the image source resolver."""

    def __init__(self, resolver: ImageSourceResolver):
        """
        Initialize image service.

        Args:
            resolver: Image source resolver
        """
        self.resolver = resolver

    def load(self, context: HostContext, image_input: ImageInput) -> ResolvedImage:
        """Resolve a single image input of an invocation."""
        context.check_cancelled("input resolution")
        image = self.resolver.resolve(image_input, context.binaries, context.cancel_event)
        context.check_cancelled("input resolution")
        logger.debug(f"Loaded {image.size} bytes ({image.mime_type}) from {image.source}")
        return image

    def load_many(self, context: HostContext, image_inputs: List[ImageInput]) -> List[ResolvedImage]:
        """Resolve independent image inputs in parallel."""
        context.check_cancelled("input resolution")
        images = self.resolver.resolve_many(image_inputs, context.binaries, context.cancel_event)
        context.check_cancelled("input resolution")
        return images

    def fetch(self, context: HostContext, url: str) -> bytes:
        """Download a URL for an invocation."""
        context.check_cancelled("image download")
        return self.resolver.fetch(url, cancel_event=context.cancel_event)

    @staticmethod
    def to_binary(
        data: bytes,
        mime_type: Optional[str] = None,
        file_stem: str = OutputConstants.DEFAULT_FILE_STEM,
    ) -> BinaryData:
        """
        Package bytes as a host binary output.

        Args:
            data: Encoded bytes
            mime_type: MIME type (detected from data when None)
            file_stem: File name without extension

        Returns:
            BinaryData with format/width/height/size metadata
        """
        if mime_type is None:
            mime_type = ImageConverters.detect_mime_type(data)
        extension = ImageConverters.mime_to_extension(mime_type)
        metadata = image_metadata(data)
        return BinaryData(
            data=data,
            mime_type=mime_type,
            file_extension=extension,
            file_name=f"{file_stem}.{extension}",
            format=metadata["format"],
            width=metadata["width"],
            height=metadata["height"],
            size=metadata["size"],
        )
