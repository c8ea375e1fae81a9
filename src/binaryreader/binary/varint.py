"""Variable-length integer (LEB128) decoding."""

from __future__ import annotations

from typing import Tuple

from ..constants import VARINT_CONTINUATION_BIT, VARINT_PAYLOAD_MASK
from ..exceptions import MalformedVarIntError, OutOfBoundsError

__all__ = ["decode_varint", "to_int64"]

_UINT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63


def to_int64(value: int) -> int:
    """Wrap ``value`` to 64 bits and reinterpret it as a signed int64."""
    value &= _UINT64_MASK
    return value - (1 << 64) if value & _INT64_SIGN else value


def decode_varint(
    view: memoryview, offset: int, end: int, max_bytes: int = 10
) -> Tuple[int, int]:
    """
    Decode a varint from ``view`` starting at ``offset``.

    Each byte contributes its low 7 bits at shift 0, 7, 14, ...; a set high
    bit means another byte follows. The accumulated value is truncated to 64
    bits and returned as a signed int64.

    Args:
        view: Byte view containing the varint
        offset: Starting offset in view
        end: First offset that may not be read
        max_bytes: Longest accepted encoding

    Returns:
        Tuple of (decoded value, offset after the varint)

    Raises:
        OutOfBoundsError: If the data ends before the final byte
        MalformedVarIntError: If more than ``max_bytes`` bytes carry the
            continuation bit
    """
    value = 0
    shift = 0
    pos = offset

    for _ in range(max_bytes):
        if pos >= end:
            raise OutOfBoundsError(
                "read past end of buffer while decoding varint",
                position=offset,
                requested=pos - offset + 1,
                size=end,
            )
        byte = view[pos]
        pos += 1
        value |= (byte & VARINT_PAYLOAD_MASK) << shift
        shift += 7
        if not byte & VARINT_CONTINUATION_BIT:
            return to_int64(value), pos

    raise MalformedVarIntError(
        f"varint at offset {offset} exceeds {max_bytes} bytes"
    )
