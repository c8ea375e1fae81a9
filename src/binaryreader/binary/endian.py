"""Endianness resolution and byte swapping."""

from __future__ import annotations

import logging
from typing import Literal

from ..constants import HOST_IS_LITTLE_ENDIAN

__all__ = [
    "EndianResolver",
    "byteswap",
    "byteswap16",
    "byteswap32",
    "byteswap64",
]

logger = logging.getLogger(__name__)

StructOrder = Literal["<", ">"]


def byteswap16(value: int) -> int:
    """Reverse the byte order of an unsigned 16-bit integer."""
    return ((value & 0x00FF) << 8) | ((value >> 8) & 0x00FF)


def byteswap32(value: int) -> int:
    """Reverse the byte order of an unsigned 32-bit integer."""
    return (
        ((value & 0x000000FF) << 24)
        | ((value & 0x0000FF00) << 8)
        | ((value >> 8) & 0x0000FF00)
        | ((value >> 24) & 0x000000FF)
    )


def byteswap64(value: int) -> int:
    """Reverse the byte order of an unsigned 64-bit integer."""
    return (byteswap32(value & 0xFFFFFFFF) << 32) | byteswap32((value >> 32) & 0xFFFFFFFF)


_SWAPS = {2: byteswap16, 4: byteswap32, 8: byteswap64}


def byteswap(value: int, width: int) -> int:
    """Reverse the byte order of ``value`` taken as an unsigned ``width``-byte integer.

    Args:
        value: Unsigned integer pattern
        width: Width in bytes (1, 2, 4 or 8)

    Returns:
        The swapped pattern; 1-byte values are returned unchanged

    Raises:
        ValueError: If width is not a supported integer width
    """
    if width == 1:
        return value
    try:
        return _SWAPS[width](value)
    except KeyError:
        raise ValueError(f"Unsupported swap width: {width}") from None


class EndianResolver:
    """Tracks whether multi-byte reads need their bytes reversed.

    The resolver compares the declared byte order of the source data with the
    byte order of the host. Reads consult :attr:`needs_swap` (or the derived
    :attr:`struct_order` / :attr:`numpy_order`) and never look at the host
    themselves.

    Example:
        >>> resolver = EndianResolver(little_endian=True, host_little_endian=True)
        >>> resolver.needs_swap
        False
        >>> resolver.little_endian = False
        >>> resolver.needs_swap, resolver.struct_order
        (True, '>')
    """

    __slots__ = ("_little_endian", "_host_little_endian", "_needs_swap")

    def __init__(
        self,
        little_endian: bool = False,
        host_little_endian: bool = HOST_IS_LITTLE_ENDIAN,
    ) -> None:
        self._host_little_endian = bool(host_little_endian)
        self._little_endian = False
        self._needs_swap = False
        self.little_endian = little_endian

    @property
    def little_endian(self) -> bool:
        """Whether the source data is declared little-endian."""
        return self._little_endian

    @little_endian.setter
    def little_endian(self, value: bool) -> None:
        self._little_endian = bool(value)
        self._needs_swap = self._little_endian != self._host_little_endian
        logger.debug(
            "Resolved source little_endian=%s against host little_endian=%s (swap=%s)",
            self._little_endian,
            self._host_little_endian,
            self._needs_swap,
        )

    @property
    def host_little_endian(self) -> bool:
        """Whether the host is treated as little-endian."""
        return self._host_little_endian

    @property
    def host_order(self) -> StructOrder:
        """Byte order prefix of the host."""
        return "<" if self._host_little_endian else ">"

    @property
    def needs_swap(self) -> bool:
        """True when source byte order differs from the host byte order."""
        return self._needs_swap

    @property
    def struct_order(self) -> StructOrder:
        """Byte order prefix for :mod:`struct` formats."""
        return "<" if self._little_endian else ">"

    @property
    def numpy_order(self) -> StructOrder:
        """Byte order prefix for NumPy dtype strings."""
        return self.struct_order

    def swap(self, value: int, width: int) -> int:
        """Swap ``value`` when the source order differs from the host's."""
        return byteswap(value, width) if self._needs_swap else value

    def __repr__(self) -> str:
        return (
            f"EndianResolver(little_endian={self._little_endian}, "
            f"host_little_endian={self._host_little_endian})"
        )
