"""
Cursor-based reader over a borrowed byte buffer.
"""

from __future__ import annotations

import logging
import mmap
import operator
from typing import Any, Callable, List, Optional, TypeVar

import numpy as np

from ..binary.endian import EndianResolver
from ..binary.handlers import DEFAULT_REGISTRY, HandlerRegistry
from ..binary.lsb import pack_lsb
from ..binary.varint import decode_varint
from ..config import DEFAULT_CONFIG, ReaderConfig
from ..constants import HOST_IS_LITTLE_ENDIAN, LSB_GROUP_SIZE, ValueKind
from ..exceptions import (
    BinaryReaderError,
    InvalidArgumentError,
    MalformedTextError,
    OutOfBoundsError,
    UnterminatedStringError,
)

__all__ = ["BinaryReader"]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

T = TypeVar("T")

# Smallest encoding of one element of each string array kind.
_C_STRING_MIN_SIZE = 1
_PREFIXED_STRING_MIN_SIZE = ValueKind.INT32.width


def _as_index(value: Any, name: str) -> int:
    """Coerce an integer-like argument, rejecting bools and non-integers."""
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be an int, not bool")
    try:
        return operator.index(value)
    except TypeError:
        raise InvalidArgumentError(
            f"{name} must be an int, not {type(value).__name__}"
        ) from None


def _as_kind(kind: ValueKind | str) -> ValueKind:
    if isinstance(kind, ValueKind):
        return kind
    if isinstance(kind, str):
        try:
            return ValueKind.from_name(kind)
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from None
    raise InvalidArgumentError(f"kind must be a ValueKind or str, not {type(kind).__name__}")


class BinaryReader:
    """Reads typed values from a byte buffer while advancing a cursor.

    The reader borrows the buffer through a ``memoryview``; nothing is copied
    and the buffer is never written. The buffer size is fixed when the reader
    is created. Every read checks that enough bytes remain before touching the
    cursor, so a failed read leaves ``position`` where it was.

    Multi-byte values are decoded in the declared source byte order
    (big-endian unless ``little_endian`` is true), whatever the host order.

    Example:
        >>> reader = BinaryReader(b"\\x00\\x00\\x01\\x2c\\x03abc", little_endian=False)
        >>> reader.read_uint32()
        300
        >>> length = reader.read_uint8()
        >>> reader.read_string(length)
        'abc'
        >>> reader.position, reader.size
        (8, 8)

    Array reads take an optional element count. Without one, a leading int32
    holds the count:

        >>> BinaryReader(b"\\x02\\x00\\x00\\x00\\x01\\x00\\x02\\x00", True).read_uint16_array()
        [1, 2]

    Attributes:
        config: Decoding configuration (encoding, varint limit, alignment)

    Thread Safety:
        A reader holds one mutable cursor and is not thread-safe. Use
        :meth:`slice` to hand disjoint sub-ranges to separate readers.
    """

    def __init__(
        self,
        buffer: Any,
        little_endian: bool = False,
        *,
        config: Optional[ReaderConfig] = None,
        host_little_endian: Optional[bool] = None,
        registry: Optional[HandlerRegistry] = None,
    ) -> None:
        try:
            view = memoryview(buffer).cast("B")
        except TypeError as e:
            raise InvalidArgumentError(
                f"Expected bytearray, bytes or buffer, not {type(buffer).__name__}"
            ) from e

        self.config = config or DEFAULT_CONFIG.reader
        self._obj = buffer
        self._view = view
        self._size = len(view)
        self._pos = 0
        self._registry = registry or DEFAULT_REGISTRY
        self._searchable = (
            buffer if isinstance(buffer, (bytes, bytearray, mmap.mmap)) else None
        )
        self._resolver = EndianResolver(
            self._as_flag(little_endian, "little_endian"),
            HOST_IS_LITTLE_ENDIAN if host_little_endian is None else host_little_endian,
        )
        logger.debug(
            "Created BinaryReader over %s of %d bytes (little_endian=%s)",
            type(buffer).__name__,
            self._size,
            self._resolver.little_endian,
        )

    # ------------------------------------------------------------------
    # state
    # ------------------------------------------------------------------

    @property
    def position(self) -> int:
        """The position of the cursor within the data."""
        return self._pos

    @position.setter
    def position(self, value: int) -> None:
        value = _as_index(value, "position")
        if value < 0:
            raise InvalidArgumentError(f"position must be non-negative, got {value}")
        # Unchecked on purpose; the next read validates.
        self._pos = value

    @property
    def size(self) -> int:
        """Size of the underlying buffer in bytes."""
        return self._size

    @property
    def remaining(self) -> int:
        """Bytes left between the cursor and the end of the buffer (never negative)."""
        return max(0, self._size - self._pos)

    @property
    def endian(self) -> bool:
        """Endianness of the source data (True - little, False - big)."""
        return self._resolver.little_endian

    @endian.setter
    def endian(self, value: bool) -> None:
        self._resolver.little_endian = self._as_flag(value, "endian")

    @property
    def needs_swap(self) -> bool:
        """Whether multi-byte values are byte swapped on read."""
        return self._resolver.needs_swap

    @property
    def obj(self) -> Any:
        """The buffer object passed to the constructor."""
        return self._obj

    underlying_buffer = obj

    @staticmethod
    def _as_flag(value: Any, name: str) -> bool:
        if isinstance(value, (bool, np.bool_)):
            return bool(value)
        try:
            return bool(operator.index(value))
        except TypeError:
            raise InvalidArgumentError(
                f"{name} must be a bool, not {type(value).__name__}"
            ) from None

    # ------------------------------------------------------------------
    # bounds and counts
    # ------------------------------------------------------------------

    def _check_span(self, start: int, length: int) -> None:
        if length < 0 or start + length > self._size:
            raise OutOfBoundsError(
                f"read of {length} bytes at offset {start} "
                f"would exceed buffer of {self._size} bytes",
                position=start,
                requested=length,
                size=self._size,
            )

    def check_readable(self, length: int) -> None:
        """Raise OutOfBoundsError unless ``length`` bytes remain at the cursor."""
        self._check_span(self._pos, length)

    def _resolve_count(self, element_size: int, count: Any) -> tuple[int, int]:
        """Apply the array-length convention without moving the cursor.

        Returns:
            Tuple of (element count, offset of the first element)
        """
        if count is None:
            kind = ValueKind.INT32
            self._check_span(self._pos, kind.width)
            count = self._registry.get(kind).decode_scalar(
                self._view, self._pos, self._resolver
            )
            start = self._pos + kind.width
        else:
            count = _as_index(count, "count")
            start = self._pos

        if count < 0:
            raise OutOfBoundsError(
                f"negative array length {count} at offset {self._pos}",
                position=self._pos,
                requested=count,
                size=self._size,
            )
        self._check_span(start, count * element_size)
        return count, start

    def _align(self, boundary: int) -> None:
        self._pos += (boundary - self._pos % boundary) % boundary

    # ------------------------------------------------------------------
    # generic decoding
    # ------------------------------------------------------------------

    def read(self, kind: ValueKind | str) -> Any:
        """Read one value of the given kind.

        Args:
            kind: A ValueKind or its name ("int16", "float", "double", ...)

        Returns:
            The decoded value (bool, int or float)

        Raises:
            OutOfBoundsError: If fewer than ``kind.width`` bytes remain
        """
        kind = _as_kind(kind)
        self.check_readable(kind.width)
        value = self._registry.get(kind).decode_scalar(self._view, self._pos, self._resolver)
        self._pos += kind.width
        return value

    def read_array(self, kind: ValueKind | str, count: Optional[int] = None) -> Any:
        """Read ``count`` values of the given kind.

        Args:
            kind: A ValueKind or its name
            count: Number of elements; read as a leading int32 when omitted

        Returns:
            A list of values, or a bytearray for uint8

        Raises:
            OutOfBoundsError: If the whole array does not fit in the buffer
            InvalidArgumentError: If count is not an int
        """
        kind = _as_kind(kind)
        count, start = self._resolve_count(kind.width, count)
        values = self._registry.get(kind).decode_array(self._view, start, count, self._resolver)
        self._pos = start + count * kind.width
        return values

    def read_ndarray(self, kind: ValueKind | str, count: Optional[int] = None) -> np.ndarray:
        """Like :meth:`read_array` but return a native-order NumPy array."""
        kind = _as_kind(kind)
        count, start = self._resolve_count(kind.width, count)
        values = self._registry.get(kind).decode_ndarray(self._view, start, count, self._resolver)
        self._pos = start + count * kind.width
        return values

    # ------------------------------------------------------------------
    # scalars
    # ------------------------------------------------------------------

    def read_bool(self) -> bool:
        return self.read(ValueKind.BOOL)

    def read_int8(self) -> int:
        return self.read(ValueKind.INT8)

    def read_uint8(self) -> int:
        return self.read(ValueKind.UINT8)

    def read_int16(self) -> int:
        return self.read(ValueKind.INT16)

    def read_uint16(self) -> int:
        return self.read(ValueKind.UINT16)

    def read_int32(self) -> int:
        return self.read(ValueKind.INT32)

    def read_uint32(self) -> int:
        return self.read(ValueKind.UINT32)

    def read_int64(self) -> int:
        return self.read(ValueKind.INT64)

    def read_uint64(self) -> int:
        return self.read(ValueKind.UINT64)

    def read_half(self) -> float:
        return self.read(ValueKind.HALF)

    def read_float(self) -> float:
        return self.read(ValueKind.FLOAT)

    def read_double(self) -> float:
        return self.read(ValueKind.DOUBLE)

    # ------------------------------------------------------------------
    # arrays
    # ------------------------------------------------------------------

    def read_bool_array(self, count: Optional[int] = None) -> List[bool]:
        return self.read_array(ValueKind.BOOL, count)

    def read_int8_array(self, count: Optional[int] = None) -> List[int]:
        return self.read_array(ValueKind.INT8, count)

    def read_uint8_array(self, count: Optional[int] = None) -> bytearray:
        """Read raw bytes; returned as a bytearray rather than a list."""
        return self.read_array(ValueKind.UINT8, count)

    def read_int16_array(self, count: Optional[int] = None) -> List[int]:
        return self.read_array(ValueKind.INT16, count)

    def read_uint16_array(self, count: Optional[int] = None) -> List[int]:
        return self.read_array(ValueKind.UINT16, count)

    def read_int32_array(self, count: Optional[int] = None) -> List[int]:
        return self.read_array(ValueKind.INT32, count)

    def read_uint32_array(self, count: Optional[int] = None) -> List[int]:
        return self.read_array(ValueKind.UINT32, count)

    def read_int64_array(self, count: Optional[int] = None) -> List[int]:
        return self.read_array(ValueKind.INT64, count)

    def read_uint64_array(self, count: Optional[int] = None) -> List[int]:
        return self.read_array(ValueKind.UINT64, count)

    def read_half_array(self, count: Optional[int] = None) -> List[float]:
        return self.read_array(ValueKind.HALF, count)

    def read_float_array(self, count: Optional[int] = None) -> List[float]:
        return self.read_array(ValueKind.FLOAT, count)

    def read_double_array(self, count: Optional[int] = None) -> List[float]:
        return self.read_array(ValueKind.DOUBLE, count)

    # ------------------------------------------------------------------
    # strings
    # ------------------------------------------------------------------

    def _decode_text(self, start: int, length: int) -> str:
        try:
            return str(
                self._view[start : start + length],
                self.config.encoding,
                self.config.errors,
            )
        except UnicodeDecodeError as e:
            raise MalformedTextError(
                f"cannot decode {length} bytes at offset {start} "
                f"as {self.config.encoding}: {e.reason}"
            ) from e

    def _find_terminator(self, start: int) -> int:
        if start >= self._size:
            return -1
        if self._searchable is not None:
            return self._searchable.find(b"\x00", start, self._size)

        chunk_size = self.config.scan_chunk_size
        pos = start
        while pos < self._size:
            stop = min(pos + chunk_size, self._size)
            window = np.frombuffer(self._view, dtype=np.uint8, count=stop - pos, offset=pos)
            hits = np.flatnonzero(window == 0)
            if hits.size:
                return pos + int(hits[0])
            pos = stop
        return -1

    def read_string_c(self) -> str:
        """Read a null-terminated string.

        Raises:
            UnterminatedStringError: If no null byte occurs before the end
            MalformedTextError: If the bytes are not valid text
        """
        start = self._pos
        end = self._find_terminator(start)
        if end < 0:
            raise UnterminatedStringError(
                f"No null terminator found starting at offset {start}",
                position=start,
                size=self._size,
            )
        text = self._decode_text(start, end - start)
        self._pos = end + 1
        return text

    def read_string(self, count: Optional[int] = None) -> str:
        """Read a length-delimited string.

        If ``count`` is not passed, the byte length is read as an int32 first.
        """
        count, start = self._resolve_count(1, count)
        text = self._decode_text(start, count)
        self._pos = start + count
        return text

    def read_string_aligned(self, count: Optional[int] = None) -> str:
        """Same as :meth:`read_string`, then skip padding up to the next
        alignment boundary (4 bytes by default). Padding is not inspected."""
        text = self.read_string(count)
        self._align(self.config.alignment)
        return text

    def _read_many(self, read_one: Callable[[], T], min_size: int, count: Any) -> List[T]:
        origin = self._pos
        count, start = self._resolve_count(min_size, count)
        self._pos = start
        try:
            return [read_one() for _ in range(count)]
        except BinaryReaderError:
            self._pos = origin
            raise

    def read_string_c_array(self, count: Optional[int] = None) -> List[str]:
        return self._read_many(self.read_string_c, _C_STRING_MIN_SIZE, count)

    def read_string_array(self, count: Optional[int] = None) -> List[str]:
        """Read ``count`` strings, each with its own int32 length prefix."""
        return self._read_many(self.read_string, _PREFIXED_STRING_MIN_SIZE, count)

    def read_string_aligned_array(self, count: Optional[int] = None) -> List[str]:
        return self._read_many(self.read_string_aligned, _PREFIXED_STRING_MIN_SIZE, count)

    # ------------------------------------------------------------------
    # varint, LSB, alignment
    # ------------------------------------------------------------------

    def read_varint(self) -> int:
        """Read an LEB128 varint as a signed 64-bit integer.

        Raises:
            OutOfBoundsError: If the buffer ends inside the varint
            MalformedVarIntError: If the varint is longer than
                ``config.max_varint_bytes``
        """
        value, self._pos = decode_varint(
            self._view, self._pos, self._size, self.config.max_varint_bytes
        )
        return value

    def read_lsb(self, length: Optional[int] = None) -> bytes:
        """Read the lsb data of the given size.

        Args:
            length: Number of source bytes; defaults to everything remaining.
                The output is ``length // 8`` bytes long.

        Returns:
            Packed bytes, one bit per source byte
        """
        if length is None:
            length = self._size - self._pos
        else:
            length = _as_index(length, "length")
        self.check_readable(length)
        packed = pack_lsb(self._view, self._pos, length, self._resolver.needs_swap)
        self._pos += len(packed) * LSB_GROUP_SIZE
        return packed

    def align(self, boundary: Optional[int] = None) -> int:
        """Advance the cursor to the next multiple of ``boundary``.

        Args:
            boundary: Alignment in bytes (default: ``config.alignment``, 4)

        Returns:
            The new position
        """
        boundary = self.config.alignment if boundary is None else _as_index(boundary, "boundary")
        if boundary <= 0:
            raise InvalidArgumentError(f"boundary must be positive, got {boundary}")
        self._align(boundary)
        return self._pos

    # ------------------------------------------------------------------
    # raw access and sub-readers
    # ------------------------------------------------------------------

    def skip(self, length: int) -> None:
        length = _as_index(length, "length")
        self.check_readable(length)
        self._pos += length

    def read_bytes(self, length: int) -> bytes:
        length = _as_index(length, "length")
        self.check_readable(length)
        data = self._view[self._pos : self._pos + length].tobytes()
        self._pos += length
        return data

    def slice(self, length: int) -> "BinaryReader":
        """Return a new BinaryReader bounded to the next ``length`` bytes.

        The sub-reader shares the buffer (no copy), endianness and
        configuration, and starts at position 0. This reader's cursor moves
        past the sliced region.
        """
        length = _as_index(length, "length")
        self.check_readable(length)
        sub = BinaryReader(
            self._view[self._pos : self._pos + length],
            self.endian,
            config=self.config,
            host_little_endian=self._resolver.host_little_endian,
            registry=self._registry,
        )
        self._pos += length
        return sub

    def close(self) -> None:
        """Release the borrowed view. The buffer object itself is untouched."""
        self._view.release()
        self._searchable = None

    def __enter__(self) -> "BinaryReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"BinaryReader(size={self._size}, position={self._pos}, "
            f"little_endian={self.endian})"
        )

    # camelCase names of the original extension module
    readBool = read_bool
    readInt8 = read_int8
    readUInt8 = read_uint8
    readInt16 = read_int16
    readUInt16 = read_uint16
    readInt32 = read_int32
    readUInt32 = read_uint32
    readInt64 = read_int64
    readUInt64 = read_uint64
    readHalf = read_half
    readFloat = read_float
    readDouble = read_double
    readBoolArray = read_bool_array
    readInt8Array = read_int8_array
    readUInt8Array = read_uint8_array
    readInt16Array = read_int16_array
    readUInt16Array = read_uint16_array
    readInt32Array = read_int32_array
    readUInt32Array = read_uint32_array
    readInt64Array = read_int64_array
    readUInt64Array = read_uint64_array
    readHalfArray = read_half_array
    readFloatArray = read_float_array
    readDoubleArray = read_double_array
    readStringC = read_string_c
    readStringCArray = read_string_c_array
    readString = read_string
    readStringArray = read_string_array
    readStringAligned = read_string_aligned
    readStringAlignedArray = read_string_aligned_array
    readVarInt = read_varint
    readLSB = read_lsb
