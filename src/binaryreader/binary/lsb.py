"""Packing of one-bit-per-byte data into bytes."""

from __future__ import annotations

import numpy as np

from ..constants import LSB_GROUP_SIZE

__all__ = ["pack_lsb"]


def pack_lsb(view: memoryview, offset: int, length: int, swap: bool) -> bytes:
    """Pack the lowest bit of each source byte, eight bytes per output byte.

    Only whole 8-byte groups are packed; ``length // 8`` bytes are produced.
    Without ``swap`` byte 0 of a group becomes the most significant output bit.
    With ``swap`` the order is reversed and byte 0 becomes the least
    significant bit.

    Args:
        view: Byte view holding the source data
        offset: Start of the first group
        length: Number of source bytes available
        swap: Whether the source byte order differs from the host's

    Returns:
        The packed bytes

    Example:
        >>> pack_lsb(memoryview(bytes([1, 0, 0, 0, 0, 0, 0, 0])), 0, 8, swap=False)
        b'\\x80'
    """
    groups = length // LSB_GROUP_SIZE
    if groups == 0:
        return b""
    source = np.frombuffer(
        view, dtype=np.uint8, count=groups * LSB_GROUP_SIZE, offset=offset
    )
    bits = source & 1
    return np.packbits(bits, bitorder="little" if swap else "big").tobytes()
