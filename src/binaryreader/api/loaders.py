"""
File loaders built on BinaryReader.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np
import pyarrow as pa

from ..config import DEFAULT_CONFIG, BinaryReaderConfig
from ..constants import STRING_KINDS, ValueKind
from ..core.reader import BinaryReader
from ..exceptions import ResourceLimitError

__all__ = ["open_reader", "read_array_table"]

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def open_reader(
    path: PathLike,
    little_endian: bool = False,
    config: Optional[BinaryReaderConfig] = None,
) -> BinaryReader:
    """Load a file into memory and wrap it in a BinaryReader.

    Args:
        path: Path to the binary file
        little_endian: Whether the file stores multi-byte values little-endian
        config: Configuration; ``DEFAULT_CONFIG`` when omitted

    Returns:
        A reader positioned at offset 0

    Raises:
        FileNotFoundError: If the file does not exist
        ResourceLimitError: If the file exceeds ``config.loader.max_file_size_mb``

    Example:
        >>> reader = open_reader("capture.bin", little_endian=True)
        >>> header = reader.read_uint32_array(4)
    """
    config = config or DEFAULT_CONFIG
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    file_size = path.stat().st_size
    max_size_bytes = config.loader.max_file_size_mb * 1024 * 1024
    if file_size > max_size_bytes:
        raise ResourceLimitError(
            f"File too large to load ({file_size // (1024 * 1024)} MB > "
            f"{config.loader.max_file_size_mb} MB): {path}"
        )

    data = path.read_bytes()
    logger.debug("Loaded %d bytes from %s", len(data), path)
    return BinaryReader(data, little_endian, config=config.reader)


def _read_column(reader: BinaryReader, kind: str, count: Optional[int]) -> pa.Array:
    if kind == "string":
        return pa.array(reader.read_string_array(count), type=pa.string())
    if kind == "string_c":
        return pa.array(reader.read_string_c_array(count), type=pa.string())
    if kind == "string_aligned":
        return pa.array(reader.read_string_aligned_array(count), type=pa.string())

    values: Any = reader.read_ndarray(ValueKind.from_name(kind), count)
    if values.dtype == np.float16:
        # Not every consumer (CSV via polars) handles half floats.
        values = values.astype(np.float32)
    return pa.array(values)


def read_array_table(
    path: PathLike,
    kind: str,
    offset: int = 0,
    count: Optional[int] = None,
    little_endian: bool = False,
    config: Optional[BinaryReaderConfig] = None,
) -> pa.Table:
    """Decode one array from a file into a single-column Arrow table.

    Args:
        path: Path to the binary file
        kind: Element kind ("int32", "double", "bool", "string", "string_c", ...)
        offset: Byte offset of the array (or of its int32 length prefix)
        count: Element count; read as a leading int32 when omitted
        little_endian: Whether the file stores multi-byte values little-endian
        config: Configuration; ``DEFAULT_CONFIG`` when omitted

    Returns:
        PyArrow Table with a ``value`` column. Schema metadata records the
        source file, kind, offset and byte order.

    Raises:
        ValueError: If ``kind`` is not known
        OutOfBoundsError: If the array does not fit in the file
    """
    kind = kind.strip().lower()
    if kind not in STRING_KINDS:
        kind = ValueKind.from_name(kind).label

    with open_reader(path, little_endian, config) as reader:
        reader.position = offset
        column = _read_column(reader, kind, count)
        end = reader.position

    logger.debug(
        "Decoded %d %s values from %s (bytes %d..%d)", len(column), kind, path, offset, end
    )
    metadata = {
        "source": str(path),
        "kind": kind,
        "offset": str(offset),
        "end": str(end),
        "little_endian": str(bool(little_endian)).lower(),
    }
    return pa.table({"value": column}, metadata=metadata)
