"""
Constants and value kinds shared by the decoding layers.
"""

from __future__ import annotations

import sys
from enum import Enum

__all__ = [
    "DEFAULT_ALIGNMENT",
    "HOST_IS_LITTLE_ENDIAN",
    "LSB_GROUP_SIZE",
    "STRING_KINDS",
    "VARINT_CONTINUATION_BIT",
    "VARINT_PAYLOAD_MASK",
    "ValueKind",
]

# Queried once; EndianResolver takes it as an injectable default.
HOST_IS_LITTLE_ENDIAN: bool = sys.byteorder == "little"

DEFAULT_ALIGNMENT = 4
LSB_GROUP_SIZE = 8

VARINT_CONTINUATION_BIT = 0x80
VARINT_PAYLOAD_MASK = 0x7F

STRING_KINDS = ("string", "string_c", "string_aligned")


class ValueKind(Enum):
    """Fixed-width value kinds understood by the reader.

    Each member carries the element width in bytes, the :mod:`struct` format
    character used for scalar reads and the NumPy dtype code used for array
    reads. Byte order is never part of the member; it is supplied by the
    endianness resolver at read time.

    Example:
        >>> ValueKind.UINT32.width
        4
        >>> ValueKind.from_name("float32") is ValueKind.FLOAT
        True
    """

    BOOL = ("bool", 1, "?", "u1")
    INT8 = ("int8", 1, "b", "i1")
    UINT8 = ("uint8", 1, "B", "u1")
    INT16 = ("int16", 2, "h", "i2")
    UINT16 = ("uint16", 2, "H", "u2")
    INT32 = ("int32", 4, "i", "i4")
    UINT32 = ("uint32", 4, "I", "u4")
    INT64 = ("int64", 8, "q", "i8")
    UINT64 = ("uint64", 8, "Q", "u8")
    HALF = ("half", 2, "e", "f2")
    FLOAT = ("float", 4, "f", "f4")
    DOUBLE = ("double", 8, "d", "f8")

    def __init__(self, label: str, width: int, struct_char: str, dtype_char: str):
        self.label = label
        self.width = width
        self.struct_char = struct_char
        self.dtype_char = dtype_char

    @classmethod
    def from_name(cls, name: str) -> ValueKind:
        """Look up a kind by label, member name or common alias."""
        key = name.strip().lower()
        key = _ALIASES.get(key, key)
        for kind in cls:
            if kind.label == key:
                return kind
        raise ValueError(f"Unknown value kind: {name!r}")


_ALIASES = {
    "float16": "half",
    "float32": "float",
    "float64": "double",
    "single": "float",
}
