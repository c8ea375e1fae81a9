"""
Value kind handlers and registry for scalar and array decoding.
"""

from __future__ import annotations

import logging
import struct
from typing import Any, List, Protocol

import numpy as np

from ..constants import ValueKind
from ..exceptions import InvalidArgumentError
from .endian import EndianResolver

__all__ = [
    "BoolHandler",
    "DataTypeHandler",
    "HalfHandler",
    "HandlerRegistry",
    "NumericHandler",
    "RawByteHandler",
    "SignedByteHandler",
]

logger = logging.getLogger(__name__)

_UNSIGNED_CHARS = {1: "B", 2: "H", 4: "I", 8: "Q"}


class DataTypeHandler(Protocol):
    """Protocol for value kind handlers.

    Handlers never check bounds or move a cursor; the caller guarantees that
    ``offset + count * kind.width`` bytes are available in ``view``.
    """

    def can_handle(self, kind: ValueKind) -> bool:
        """Check if this handler can decode the given kind."""
        ...

    def decode_scalar(self, view: memoryview, offset: int, resolver: EndianResolver) -> Any:
        """Decode one value at ``offset``."""
        ...

    def decode_array(
        self, view: memoryview, offset: int, count: int, resolver: EndianResolver
    ) -> Any:
        """Decode ``count`` consecutive values starting at ``offset``."""
        ...

    def decode_ndarray(
        self, view: memoryview, offset: int, count: int, resolver: EndianResolver
    ) -> np.ndarray:
        """Decode ``count`` values into a native-order NumPy array."""
        ...


class _NumpyArrayMixin:
    """Array decoding through ``np.frombuffer`` at the source byte order."""

    kind: ValueKind

    def can_handle(self, kind: ValueKind) -> bool:
        return kind is self.kind

    def _frombuffer(
        self, view: memoryview, offset: int, count: int, resolver: EndianResolver
    ) -> np.ndarray:
        dtype = np.dtype(resolver.numpy_order + self.kind.dtype_char)
        return np.frombuffer(view, dtype=dtype, count=count, offset=offset)

    def decode_array(
        self, view: memoryview, offset: int, count: int, resolver: EndianResolver
    ) -> List[Any]:
        return self._frombuffer(view, offset, count, resolver).tolist()

    def decode_ndarray(
        self, view: memoryview, offset: int, count: int, resolver: EndianResolver
    ) -> np.ndarray:
        arr = self._frombuffer(view, offset, count, resolver)
        return arr.astype(arr.dtype.newbyteorder("="))


class NumericHandler(_NumpyArrayMixin):
    """Handler for multi-byte integers and IEEE 754 single/double floats.

    Scalars follow the unsigned-pattern pipeline: the element is unpacked as an
    unsigned integer in host order, byte swapped when the resolver says so, and
    the resulting bit pattern is reinterpreted as the target type.

    Example:
        >>> handler = NumericHandler(ValueKind.INT16)
        >>> resolver = EndianResolver(little_endian=False)
        >>> handler.decode_scalar(memoryview(b"\\xff\\xfe"), 0, resolver)
        -2
    """

    def __init__(self, kind: ValueKind) -> None:
        if kind.width not in (2, 4, 8) or kind is ValueKind.HALF:
            raise ValueError(f"NumericHandler cannot decode {kind.label}")
        self.kind = kind
        # (pattern, target) per host byte order
        self._structs = {
            order: (
                struct.Struct(order + _UNSIGNED_CHARS[kind.width]),
                struct.Struct(order + kind.struct_char),
            )
            for order in ("<", ">")
        }

    def decode_scalar(self, view: memoryview, offset: int, resolver: EndianResolver) -> Any:
        pattern_struct, target_struct = self._structs[resolver.host_order]
        pattern = pattern_struct.unpack_from(view, offset)[0]
        pattern = resolver.swap(pattern, self.kind.width)
        return target_struct.unpack(pattern_struct.pack(pattern))[0]


class HalfHandler(_NumpyArrayMixin):
    """Handler for IEEE 754 binary16 values.

    The two bytes are ordered directly while unpacking (``<e`` / ``>e``) rather
    than through a 16-bit integer swap, and widened to a Python float.
    """

    kind = ValueKind.HALF

    def __init__(self) -> None:
        self._structs = {"<": struct.Struct("<e"), ">": struct.Struct(">e")}

    def decode_scalar(self, view: memoryview, offset: int, resolver: EndianResolver) -> float:
        return self._structs[resolver.struct_order].unpack_from(view, offset)[0]


class SignedByteHandler(_NumpyArrayMixin):
    """Handler for int8; byte order never applies."""

    kind = ValueKind.INT8

    def decode_scalar(self, view: memoryview, offset: int, resolver: EndianResolver) -> int:
        value = view[offset]
        return value - 0x100 if value & 0x80 else value


class RawByteHandler(_NumpyArrayMixin):
    """Handler for uint8.

    Arrays are returned as a ``bytearray`` copy of the raw bytes instead of a
    list of ints.
    """

    kind = ValueKind.UINT8

    def decode_scalar(self, view: memoryview, offset: int, resolver: EndianResolver) -> int:
        return view[offset]

    def decode_array(
        self, view: memoryview, offset: int, count: int, resolver: EndianResolver
    ) -> bytearray:
        return bytearray(view[offset : offset + count])


class BoolHandler(_NumpyArrayMixin):
    """Handler for one-byte booleans; any non-zero byte is True."""

    kind = ValueKind.BOOL

    def decode_scalar(self, view: memoryview, offset: int, resolver: EndianResolver) -> bool:
        return view[offset] != 0

    def decode_array(
        self, view: memoryview, offset: int, count: int, resolver: EndianResolver
    ) -> List[bool]:
        return self.decode_ndarray(view, offset, count, resolver).tolist()

    def decode_ndarray(
        self, view: memoryview, offset: int, count: int, resolver: EndianResolver
    ) -> np.ndarray:
        return self._frombuffer(view, offset, count, resolver) != 0


class HandlerRegistry:
    """Registry for value kind handlers with pluggable architecture.

    The registry uses a chain-of-responsibility pattern to find the handler
    for each kind. Lookups are cached per kind; registering a handler clears
    the cache so the new handler takes part in later lookups.

    Example:
        >>> registry = HandlerRegistry()
        >>> registry.get(ValueKind.DOUBLE)  # doctest: +ELLIPSIS
        <...NumericHandler object at ...>

    Note:
        Handlers registered later are checked first, so a custom handler
        overrides the default one for the kinds it accepts.
    """

    def __init__(self) -> None:
        self._handlers: List[DataTypeHandler] = []
        self._cache: dict[ValueKind, DataTypeHandler] = {}
        self._register_default_handlers()

    def _register_default_handlers(self) -> None:
        """Register default handlers for every ValueKind."""
        self.register(BoolHandler())
        self.register(SignedByteHandler())
        self.register(RawByteHandler())
        self.register(HalfHandler())
        for kind in ValueKind:
            if kind.width > 1 and kind is not ValueKind.HALF:
                self.register(NumericHandler(kind))

    def register(self, handler: DataTypeHandler) -> None:
        """Register a new handler."""
        self._handlers.append(handler)
        self._cache.clear()

    def get(self, kind: ValueKind) -> DataTypeHandler:
        """Return the most recently registered handler for ``kind``."""
        handler = self._cache.get(kind)
        if handler is not None:
            return handler
        for handler in reversed(self._handlers):
            if handler.can_handle(kind):
                self._cache[kind] = handler
                return handler
        raise InvalidArgumentError(f"No handler found for value kind: {kind!r}")


DEFAULT_REGISTRY = HandlerRegistry()
