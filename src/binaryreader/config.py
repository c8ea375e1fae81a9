"""Centralized configuration for binaryreader.

This module provides configuration classes for the reader core and the file
loaders used by the command line tool.
"""

import codecs
import logging
import os
from dataclasses import dataclass, field

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReaderConfig:
    """Configuration for BinaryReader decoding.

    Attributes:
        encoding: Text encoding used by every string reader (default: "utf-8")
        errors: Codec error handler for string decoding (default: "strict")
        max_varint_bytes: Longest accepted varint in bytes (default: 10)
        alignment: Boundary used by aligned strings and ``align()`` (default: 4)
        scan_chunk_size: Window size when searching non-bytes buffers for a
            string terminator (default: 4096)
    """

    encoding: str = "utf-8"
    errors: str = "strict"
    max_varint_bytes: int = 10
    alignment: int = 4
    scan_chunk_size: int = 4096

    def __post_init__(self) -> None:
        """Validate reader configuration."""
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigurationError(f"unknown encoding: {self.encoding}") from e
        try:
            codecs.lookup_error(self.errors)
        except LookupError as e:
            raise ConfigurationError(f"unknown error handler: {self.errors}") from e
        if self.max_varint_bytes <= 0:
            raise ConfigurationError("max_varint_bytes must be positive")
        if self.alignment <= 0:
            raise ConfigurationError("alignment must be positive")
        if self.scan_chunk_size <= 0:
            raise ConfigurationError("scan_chunk_size must be positive")


@dataclass(frozen=True, slots=True)
class LoaderConfig:
    """Configuration for loading files from disk.

    Attributes:
        max_file_size_mb: Maximum file size in MB to load (default: 1000)
    """

    max_file_size_mb: int = 1000

    def __post_init__(self) -> None:
        """Validate loader configuration."""
        if self.max_file_size_mb <= 0:
            raise ConfigurationError("max_file_size_mb must be positive")


@dataclass
class BinaryReaderConfig:
    """Main configuration container for binaryreader.

    Attributes:
        reader: Configuration for decoding
        loader: Configuration for file loading

    Examples:
        >>> config = BinaryReaderConfig()
        >>> config = BinaryReaderConfig(
        ...     reader=ReaderConfig(encoding="latin-1"),
        ...     loader=LoaderConfig(max_file_size_mb=50),
        ... )
        >>> config.reader.max_varint_bytes
        10
    """

    reader: ReaderConfig = field(default_factory=ReaderConfig)
    loader: LoaderConfig = field(default_factory=LoaderConfig)

    @classmethod
    def from_env(cls) -> "BinaryReaderConfig":
        """Create configuration from environment variables.

        Supported environment variables:
        - BINARYREADER_ENCODING: Text encoding for string reads
        - BINARYREADER_MAX_VARINT_BYTES: Longest accepted varint
        - BINARYREADER_MAX_FILE_SIZE_MB: Maximum file size in MB

        Returns:
            Configuration instance with values from environment

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        try:
            reader_config = ReaderConfig(
                encoding=os.getenv("BINARYREADER_ENCODING", "utf-8"),
                max_varint_bytes=int(os.getenv("BINARYREADER_MAX_VARINT_BYTES", "10")),
            )
            loader_config = LoaderConfig(
                max_file_size_mb=int(os.getenv("BINARYREADER_MAX_FILE_SIZE_MB", "1000"))
            )
        except ValueError as e:
            if isinstance(e, ConfigurationError):
                raise
            raise ConfigurationError(f"invalid environment configuration: {e}") from e

        logger.debug(
            "Loaded configuration from environment: encoding=%s max_varint_bytes=%d",
            reader_config.encoding,
            reader_config.max_varint_bytes,
        )
        return cls(reader=reader_config, loader=loader_config)


# Global default configuration
DEFAULT_CONFIG = BinaryReaderConfig()


__all__ = [
    "DEFAULT_CONFIG",
    "BinaryReaderConfig",
    "LoaderConfig",
    "ReaderConfig",
]
