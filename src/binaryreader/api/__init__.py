"""
Public API functions for loading binary files.
"""

from .cli import main
from .loaders import open_reader, read_array_table

__all__ = [
    "main",
    "open_reader",
    "read_array_table",
]
