"""
Core reader class.
"""

from .reader import BinaryReader

__all__ = ["BinaryReader"]
