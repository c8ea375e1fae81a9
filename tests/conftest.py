"""
Shared fixtures for binaryreader tests.
"""

from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture(params=["<", ">"], ids=["little", "big"])
def byte_order(request: pytest.FixtureRequest) -> str:
    """Struct byte order prefix, run once per source endianness."""
    return request.param


@pytest.fixture(params=[True, False], ids=["le-host", "be-host"])
def host_little_endian(request: pytest.FixtureRequest) -> bool:
    """Host byte order injected into the reader."""
    return request.param


@pytest.fixture
def write_binary(tmp_path: Path) -> Callable[[bytes, str], Path]:
    """Factory writing bytes to a file under tmp_path."""

    def _write(data: bytes, name: str = "sample.bin") -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write
