"""
Image Source Resolver - turns an image input into bytes plus a MIME type.

URL inputs are downloaded with httpx (bounded timeout, no retry); binary
inputs are taken from the host's binary fields unchanged. The MIME type is
detected from the buffer's signature, never from the URL extension.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence

import httpx

from core.constants import FetchConstants, ImageConstants
from core.exceptions import BinaryFieldNotFoundError, FetchError, OperationCancelledError
from core.image.converters import ImageConverters
from schemas.image import BinaryImageInput, ImageInput, UrlImageInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedImage:
    """Raw image bytes and their best-effort MIME type"""

    data: bytes
    mime_type: str
    source: str

    @property
    def size(self) -> int:
        return len(self.data)


class ImageSourceResolver:
    """Resolves URL and binary-field image inputs to byte buffers."""

    def __init__(
        self,
        timeout: float = FetchConstants.DEFAULT_TIMEOUT_SECONDS,
        max_redirects: int = FetchConstants.DEFAULT_MAX_REDIRECTS,
        max_bytes: int = FetchConstants.DEFAULT_MAX_BYTES,
        user_agent: str = FetchConstants.DEFAULT_USER_AGENT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize resolver.

        Args:
            timeout: Request timeout in seconds
            max_redirects: Maximum number of redirects to follow
            max_bytes: Maximum accepted download size
            user_agent: User-Agent header sent with downloads
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.timeout = timeout
        self.max_redirects = max_redirects
        self.max_bytes = max_bytes
        self.user_agent = user_agent
        self.transport = transport

    def _create_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.timeout,
            follow_redirects=True,
            max_redirects=self.max_redirects,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        )

    def fetch(self, url: str, cancel_event: Optional[threading.Event] = None) -> bytes:
        """
        Download a URL.

        Args:
            url: Image URL
            cancel_event: Optional event; when set the download is abandoned

        Returns:
            Response body

        Raises:
            FetchError: On transport failure, non-2xx status or oversized body
            OperationCancelledError: If cancel_event is set mid-download
        """
        logger.debug(f"Fetching image from {url}")
        try:
            with self._create_client() as client:
                with client.stream("GET", url) as response:
                    if not response.is_success:
                        raise FetchError(url, status_code=response.status_code)

                    chunks = []
                    received = 0
                    for chunk in response.iter_bytes(FetchConstants.CHUNK_SIZE):
                        if cancel_event is not None and cancel_event.is_set():
                            raise OperationCancelledError("image download")
                        received += len(chunk)
                        if received > self.max_bytes:
                            raise FetchError(
                                url,
                                status_code=response.status_code,
                                reason=f"response exceeds {self.max_bytes} bytes",
                            )
                        chunks.append(chunk)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Failed to fetch {url}: {e}")
            raise FetchError(url, reason=str(e) or e.__class__.__name__) from e

        data = b"".join(chunks)
        logger.info(f"Fetched {len(data)} bytes from {url}")
        return data

    def resolve(
        self,
        image_input: ImageInput,
        binaries: Mapping[str, bytes],
        cancel_event: Optional[threading.Event] = None,
    ) -> ResolvedImage:
        """
        Resolve one image input.

        Args:
            image_input: URL or binary-field input
            binaries: Host binary fields
            cancel_event: Optional cancellation token

        Returns:
            ResolvedImage with detected MIME type (PNG if undetectable)
        """
        if isinstance(image_input, UrlImageInput):
            data = self.fetch(image_input.url, cancel_event=cancel_event)
            source = image_input.url
        elif isinstance(image_input, BinaryImageInput):
            if image_input.binary_field not in binaries:
                raise BinaryFieldNotFoundError(image_input.binary_field)
            data = binaries[image_input.binary_field]
            source = f"binary:{image_input.binary_field}"
        else:
            raise TypeError(f"Unsupported image input: {type(image_input).__name__}")

        mime_type = ImageConverters.detect_mime_type(data, default=ImageConstants.DEFAULT_MIME_TYPE)
        return ResolvedImage(data=data, mime_type=mime_type, source=source)

    def resolve_many(
        self,
        image_inputs: Sequence[ImageInput],
        binaries: Mapping[str, bytes],
        cancel_event: Optional[threading.Event] = None,
    ) -> List[ResolvedImage]:
        """
        Resolve independent inputs concurrently, preserving input order.

        A failure is re-raised after the remaining fetches have finished.
        """
        if len(image_inputs) <= 1:
            return [self.resolve(item, binaries, cancel_event) for item in image_inputs]

        workers = min(len(image_inputs), FetchConstants.MAX_PARALLEL_FETCHES)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="image-fetch") as executor:
            futures = [
                executor.submit(self.resolve, item, binaries, cancel_event) for item in image_inputs
            ]
            return [future.result() for future in futures]
