# SPDX-FileCopyrightText: 2025-present GraysonBellamy <gbellamy@umd.edu>
#
# SPDX-License-Identifier: MIT

"""
binaryreader: A cursor-based reader for typed values in binary buffers.
"""

import logging
from importlib.metadata import PackageNotFoundError, version

from .api.loaders import open_reader, read_array_table
from .binary import EndianResolver, HandlerRegistry, byteswap16, byteswap32, byteswap64
from .config import (
    DEFAULT_CONFIG,
    BinaryReaderConfig,
    LoaderConfig,
    ReaderConfig,
)
from .constants import HOST_IS_LITTLE_ENDIAN, ValueKind
from .core.reader import BinaryReader
from .exceptions import (
    BinaryReaderError,
    ConfigurationError,
    InvalidArgumentError,
    MalformedTextError,
    MalformedVarIntError,
    OutOfBoundsError,
    ResourceLimitError,
    UnterminatedStringError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

try:
    __version__ = version("binaryreader")
except PackageNotFoundError:
    __version__ = "0.0.0"
__author__ = "Grayson Bellamy"
__email__ = "gbellamy@umd.edu"

__all__ = [
    "DEFAULT_CONFIG",
    "HOST_IS_LITTLE_ENDIAN",
    "BinaryReader",
    "BinaryReaderConfig",
    "BinaryReaderError",
    "ConfigurationError",
    "EndianResolver",
    "HandlerRegistry",
    "InvalidArgumentError",
    "LoaderConfig",
    "MalformedTextError",
    "MalformedVarIntError",
    "OutOfBoundsError",
    "ReaderConfig",
    "ResourceLimitError",
    "UnterminatedStringError",
    "ValueKind",
    "__author__",
    "__email__",
    "__version__",
    "byteswap16",
    "byteswap32",
    "byteswap64",
    "open_reader",
    "read_array_table",
]
