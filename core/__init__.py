"""
Core modules for the Image Tool operations
"""

from .exceptions import ImageToolError

__all__ = ["ImageToolError"]
