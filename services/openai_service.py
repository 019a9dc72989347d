"""
OpenAI Service - delegation to remote image analysis and image edit APIs.

The remote models are opaque: this service only builds the request, sends
it with a bounded timeout and turns the response (or its absence) into
text, bytes or a RemoteServiceError.
"""

import base64
import binascii
import logging
from typing import Any, Callable, List, Optional

from openai import AzureOpenAI, OpenAI, OpenAIError

from core.constants import RemoteConstants
from core.exceptions import RemoteServiceError
from schemas.credentials import AzureOpenAICredentials, OpenAICredentials

logger = logging.getLogger(__name__)

ANALYSIS_SERVICE = "Azure OpenAI chat"
IMAGE_EDIT_SERVICE = "OpenAI image edit"


class OpenAIService:
    """
    Service for the AI-delegation operations.

    Client classes are injectable so tests can substitute mocks.
    """

    def __init__(
        self,
        timeout: float = RemoteConstants.DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = 0,
        openai_client_factory: Callable[..., Any] = OpenAI,
        azure_client_factory: Callable[..., Any] = AzureOpenAI,
    ):
        """
        Initialize service.

        Args:
            timeout: Request timeout in seconds
            max_retries: Client-side retries (0 disables retrying)
            openai_client_factory: Factory for the OpenAI client
            azure_client_factory: Factory for the Azure OpenAI client
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.openai_client_factory = openai_client_factory
        self.azure_client_factory = azure_client_factory

    @staticmethod
    def build_analysis_messages(prompt: str, urls: List[str]) -> List[dict]:
        """Single user message: the prompt followed by one image part per URL."""
        content = [{"type": "text", "text": prompt}]
        content.extend({"type": "image_url", "image_url": {"url": url}} for url in urls)
        return [{"role": "user", "content": content}]

    def analyze_images(
        self,
        credentials: AzureOpenAICredentials,
        urls: List[str],
        prompt: str,
        temperature: float = RemoteConstants.DEFAULT_TEMPERATURE,
    ) -> str:
        """
        Ask a vision-capable chat deployment about one or more images.

        Args:
            credentials: Azure OpenAI credentials
            urls: Image URLs
            prompt: Text prompt
            temperature: Sampling temperature

        Returns:
            Model response text

        Raises:
            RemoteServiceError: On API failure or empty response
        """
        client = self.azure_client_factory(
            api_key=credentials.api_key,
            api_version=credentials.api_version,
            azure_endpoint=RemoteConstants.AZURE_ENDPOINT_TEMPLATE.format(
                instance=credentials.instance_name
            ),
            timeout=self.timeout,
            max_retries=self.max_retries,
        )

        logger.info(f"Analyzing {len(urls)} image(s) with deployment {credentials.deployment_name}")
        try:
            response = client.chat.completions.create(
                model=credentials.deployment_name,
                messages=self.build_analysis_messages(prompt, urls),
                temperature=temperature,
            )
        except OpenAIError as e:
            logger.error(f"Image analysis failed: {e}")
            raise RemoteServiceError(ANALYSIS_SERVICE, str(e), cause=e) from e

        content: Optional[str] = None
        if getattr(response, "choices", None):
            content = response.choices[0].message.content
        if not content:
            raise RemoteServiceError(ANALYSIS_SERVICE, f"empty response: {response!r}")
        return content

    def edit_image(
        self,
        credentials: OpenAICredentials,
        image: bytes,
        file_name: str,
        content_type: str,
        prompt: str,
        model: str = RemoteConstants.DEFAULT_IMAGE_MODEL,
        size: str = RemoteConstants.DEFAULT_IMAGE_SIZE,
    ) -> bytes:
        """
        Generate an edited image from an input image and a prompt.

        Args:
            credentials: OpenAI credentials
            image: Input image bytes (PNG, WebP or JPEG)
            file_name: File name sent with the upload
            content_type: MIME type of the upload
            prompt: Edit instructions
            model: Image model
            size: Output size accepted by the model

        Returns:
            Generated image bytes

        Raises:
            RemoteServiceError: On API failure or missing image payload
        """
        client = self.openai_client_factory(
            api_key=credentials.api_key, timeout=self.timeout, max_retries=self.max_retries
        )

        request = {
            "image": (file_name, image, content_type),
            "prompt": prompt,
            "model": model,
            "size": size,
            "n": 1,
        }
        # dall-e-2 answers with a URL unless asked for base64
        if model == "dall-e-2":
            request["response_format"] = "b64_json"

        logger.info(f"Editing {len(image)} byte image with {model} at {size}")
        try:
            response = client.images.edit(**request)
        except OpenAIError as e:
            logger.error(f"Image edit failed: {e}")
            raise RemoteServiceError(IMAGE_EDIT_SERVICE, str(e), cause=e) from e

        data = getattr(response, "data", None) or []
        b64 = data[0].b64_json if data else None
        if not b64:
            raise RemoteServiceError(IMAGE_EDIT_SERVICE, f"no image in response: {response!r}")

        try:
            return base64.b64decode(b64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise RemoteServiceError(IMAGE_EDIT_SERVICE, "invalid base64 payload", cause=e) from e
