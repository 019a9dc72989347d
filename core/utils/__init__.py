"""
Utility helpers for core functionality.

Modules:
- decorators: Utility decorators and context managers (timer)
"""

from .decorators import timer

__all__ = ["timer"]
