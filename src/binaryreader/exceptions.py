"""
Custom exceptions for binary buffer decoding.
"""

__all__ = [
    "BinaryReaderError",
    "ConfigurationError",
    "InvalidArgumentError",
    "MalformedTextError",
    "MalformedVarIntError",
    "OutOfBoundsError",
    "ResourceLimitError",
    "UnterminatedStringError",
]


class BinaryReaderError(Exception):
    """Base exception for binary decoding errors."""


class OutOfBoundsError(BinaryReaderError, ValueError):
    """Raised when a read would run past the end of the buffer.

    Attributes:
        position: Cursor position at the time of the failed read
        requested: Number of bytes the read needed
        size: Total size of the buffer
    """

    def __init__(
        self,
        message: str = "read past end of buffer",
        position: int | None = None,
        requested: int | None = None,
        size: int | None = None,
    ) -> None:
        super().__init__(message)
        self.position = position
        self.requested = requested
        self.size = size


class UnterminatedStringError(OutOfBoundsError):
    """Raised when a null-terminated string runs to the end of the buffer."""


class InvalidArgumentError(BinaryReaderError, TypeError):
    """Raised when a count, position, boundary or flag has a bad type or value."""


class MalformedTextError(BinaryReaderError, ValueError):
    """Raised when string bytes cannot be decoded with the configured encoding."""


class MalformedVarIntError(BinaryReaderError, ValueError):
    """Raised when a varint keeps its continuation bit past the allowed length."""


class ConfigurationError(BinaryReaderError, ValueError):
    """Raised when configuration validation fails."""


class ResourceLimitError(BinaryReaderError):
    """Raised when resource limit exceeded (file size, memory, etc.)."""
