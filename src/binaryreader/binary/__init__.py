"""
Binary decoding primitives: endianness, value handlers, varints and LSB packing.
"""

from .endian import EndianResolver, byteswap, byteswap16, byteswap32, byteswap64
from .handlers import DataTypeHandler, HandlerRegistry
from .lsb import pack_lsb
from .varint import decode_varint

__all__ = [
    "DataTypeHandler",
    "EndianResolver",
    "HandlerRegistry",
    "byteswap",
    "byteswap16",
    "byteswap32",
    "byteswap64",
    "decode_varint",
    "pack_lsb",
]
