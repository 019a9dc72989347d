"""
Constants and configuration values for the Image Tool operations.
Centralizes all magic numbers and default values.
"""


# Image I/O Constants
class ImageConstants:
    """Constants related to image decoding, encoding and format detection."""

    # Fallback when the byte signature is not recognized
    DEFAULT_MIME_TYPE = "image/png"
    DEFAULT_FORMAT = "PNG"

    # Pillow format name -> MIME type
    FORMAT_TO_MIME = {
        "PNG": "image/png",
        "JPEG": "image/jpeg",
        "WEBP": "image/webp",
        "GIF": "image/gif",
        "BMP": "image/bmp",
        "TIFF": "image/tiff",
        "ICO": "image/x-icon",
    }

    # Pillow names for containers that are plain JPEG on the wire (FF D8 FF).
    # MPO is what phones write: a JPEG with extra frames appended.
    FORMAT_ALIASES = {"MPO": "JPEG"}

    # MIME type -> Pillow format name (formats we are able to write back)
    MIME_TO_FORMAT = {mime: fmt for fmt, mime in FORMAT_TO_MIME.items()}

    MIME_TO_EXTENSION = {
        "image/png": "png",
        "image/jpeg": "jpg",
        "image/webp": "webp",
        "image/gif": "gif",
        "image/bmp": "bmp",
        "image/tiff": "tiff",
        "image/x-icon": "ico",
    }

    # ICO entries cannot exceed 256x256; larger images are written as PNG
    ICO_MAX_DIMENSION = 256

    # Formats that cannot carry an alpha channel
    NO_ALPHA_FORMATS = {"JPEG", "BMP"}

    # Quality used when re-encoding lossy sources after a pixel operation
    REENCODE_JPEG_QUALITY = 90
    REENCODE_WEBP_QUALITY = 90


# Color Correction Constants
class ColorCorrectionConstants:
    """Fixed constants of the luminance-zone color correction."""

    # Standard luma coefficients (R, G, B)
    LUMA_WEIGHTS = (0.299, 0.587, 0.114)

    # Zone thresholds on original luminance
    SHADOW_THRESHOLD = 85
    HIGHLIGHT_THRESHOLD = 170

    # Per-channel offset limits
    MIN_OFFSET = -20
    MAX_OFFSET = 20

    # Default color balance (red, green, blue)
    DEFAULT_SHADOWS = (-5, 0, 10)
    DEFAULT_MIDTONES = (-6, 0, 20)
    DEFAULT_HIGHLIGHTS = (-6, 0, 15)


# Compression Constants
class CompressionConstants:
    """Constants for the WebP compressor and its quality search."""

    OUTPUT_FORMAT = "WEBP"
    OUTPUT_MIME_TYPE = "image/webp"

    # Fixed mode
    MIN_QUALITY = 0
    MAX_QUALITY = 100
    DEFAULT_QUALITY = 80
    MIN_EFFORT = 0
    MAX_EFFORT = 6
    DEFAULT_EFFORT = 4

    # Auto mode
    AUTO_MIN_QUALITY = 1
    AUTO_MAX_QUALITY = 100
    DEFAULT_MAX_SIZE = 1048576  # 1 MiB

    # Reported quality when no candidate fits the budget
    UNREACHABLE_QUALITY = 0


# Watermark Constants
class WatermarkConstants:
    """Constants for watermark placement."""

    DEFAULT_SCALE = 1.0
    MIN_DIMENSION = 1


# Network Constants
class FetchConstants:
    """Constants for downloading source images."""

    DEFAULT_TIMEOUT_SECONDS = 30.0
    DEFAULT_MAX_REDIRECTS = 5
    DEFAULT_MAX_BYTES = 50 * 1024 * 1024  # 50MB
    DEFAULT_USER_AGENT = "image-tool/1.0"
    CHUNK_SIZE = 64 * 1024

    # Two independent inputs at most (base image + watermark)
    MAX_PARALLEL_FETCHES = 2


# Remote AI Constants
class RemoteConstants:
    """Constants for the delegated AI operations."""

    DEFAULT_TIMEOUT_SECONDS = 120.0

    DEFAULT_ANALYSIS_PROMPT = "What's in this image?"
    DEFAULT_TEMPERATURE = 0.0
    AZURE_ENDPOINT_TEMPLATE = "https://{instance}.openai.azure.com"

    DEFAULT_IMAGE_MODEL = "gpt-image-1"
    DEFAULT_IMAGE_SIZE = "1024x1024"
    IMAGE_MODEL_SIZES = {
        "dall-e-2": ("256x256", "512x512", "1024x1024"),
        "gpt-image-1": ("1024x1024", "1024x1536", "1536x1024", "auto"),
    }

    # Input formats accepted by the image edit endpoint
    EDIT_INPUT_FORMATS = {
        "PNG": ("image/png", "input.png"),
        "WEBP": ("image/webp", "input.webp"),
        "JPEG": ("image/jpeg", "input.jpg"),
    }


# Output Constants
class OutputConstants:
    """Constants for packaging results for the host."""

    DEFAULT_BINARY_FIELD = "data"
    DEFAULT_FILE_STEM = "image"


# System Constants
class SystemConstants:
    """Constants for system operations."""

    # Logging
    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    ENV_PREFIX = "IMAGE_TOOL_"
