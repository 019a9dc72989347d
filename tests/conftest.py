"""
Pytest configuration and fixtures for Image Tool tests
"""

import io
import threading
from unittest.mock import MagicMock

import cv2
import httpx
import numpy as np
import pytest
from PIL import Image

from core.image_source import ImageSourceResolver
from engines.compression import QualityCompressor
from operations.registry import create_registry
from services.image_service import ImageService
from services.openai_service import OpenAIService


def encode_array(image: np.ndarray, image_format: str = "PNG", **kwargs) -> bytes:
    """Encode an RGB/RGBA uint8 array with Pillow."""
    buffer = io.BytesIO()
    Image.fromarray(image).save(buffer, format=image_format, **kwargs)
    return buffer.getvalue()


def decode_bytes(data: bytes) -> np.ndarray:
    """Decode bytes to a uint8 array in the image's own RGB/RGBA mode."""
    with Image.open(io.BytesIO(data)) as image:
        image.load()
        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGB")
        return np.asarray(image, dtype=np.uint8).copy()


@pytest.fixture
def encode():
    """Array -> encoded bytes helper"""
    return encode_array


@pytest.fixture
def decode():
    """Encoded bytes -> array helper"""
    return decode_bytes


@pytest.fixture
def test_image():
    """Create a test image for testing"""
    image = np.zeros((120, 160, 3), dtype=np.uint8)
    # Add some content in every luminance zone
    cv2.rectangle(image, (10, 10), (70, 70), (255, 255, 255), -1)
    cv2.circle(image, (110, 60), 30, (128, 128, 128), -1)
    cv2.rectangle(image, (10, 90), (150, 110), (40, 60, 200), -1)
    return image


@pytest.fixture
def noisy_image():
    """Random noise compresses poorly, so sizes vary strongly with quality"""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(128, 128, 3), dtype=np.uint8)


@pytest.fixture
def png_bytes(test_image):
    """Test image encoded as PNG"""
    return encode_array(test_image, "PNG")


@pytest.fixture
def jpeg_bytes(test_image):
    """Test image encoded as JPEG"""
    return encode_array(test_image, "JPEG", quality=95)


@pytest.fixture
def mpo_bytes(test_image):
    """Two-frame MPO, the JPEG container written by many phone cameras"""
    buffer = io.BytesIO()
    Image.fromarray(test_image).save(
        buffer,
        format="MPO",
        save_all=True,
        append_images=[Image.fromarray(255 - test_image)],
        quality=95,
    )
    return buffer.getvalue()


@pytest.fixture
def gray_png():
    """Uniform mid-gray image"""
    return encode_array(np.full((8, 8, 3), 128, dtype=np.uint8), "PNG")


@pytest.fixture
def watermark_rgba():
    """Half transparent red square watermark"""
    mark = np.zeros((20, 20, 4), dtype=np.uint8)
    mark[..., 0] = 255
    mark[..., 3] = 128
    return mark


@pytest.fixture
def image_server(png_bytes):
    """
    httpx transport serving a small set of URLs.

    /image.png returns the test PNG, /missing.png returns 404, /text returns
    a non-image body. Requested URLs are recorded on transport.requests.
    """
    routes = {
        "/image.png": (200, png_bytes),
        "/missing.png": (404, b"not found"),
        "/text": (200, b"hello, not an image"),
    }
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(str(request.url))
        status, body = routes.get(request.url.path, (404, b""))
        return httpx.Response(status, content=body)

    transport = httpx.MockTransport(handler)
    transport.requests = requests
    transport.routes = routes
    return transport


@pytest.fixture
def resolver(image_server):
    """ImageSourceResolver backed by the mock transport"""
    return ImageSourceResolver(timeout=5, transport=image_server)


@pytest.fixture
def image_service(resolver):
    """Create ImageService instance for testing"""
    return ImageService(resolver)


@pytest.fixture
def compressor():
    """Create QualityCompressor instance for testing"""
    return QualityCompressor()


@pytest.fixture
def openai_clients():
    """Mock OpenAI and Azure OpenAI client factories"""
    return MagicMock(name="OpenAI"), MagicMock(name="AzureOpenAI")


@pytest.fixture
def openai_service(openai_clients):
    """OpenAIService whose clients are mocks"""
    openai_factory, azure_factory = openai_clients
    return OpenAIService(
        timeout=10, openai_client_factory=openai_factory, azure_client_factory=azure_factory
    )


@pytest.fixture
def registry(resolver, openai_service):
    """Registry with every operation, wired to mocks"""
    return create_registry(resolver=resolver, openai_service=openai_service)


@pytest.fixture
def cancel_event():
    """Already-set cancellation token"""
    event = threading.Event()
    event.set()
    return event
