"""
Service layer: orchestration shared by the operations.
"""

from .image_service import ImageService
from .openai_service import OpenAIService

__all__ = ["ImageService", "OpenAIService"]
