"""
Unit tests for varints, LSB packing and alignment.
"""

import pytest

from binaryreader import (
    BinaryReader,
    InvalidArgumentError,
    MalformedVarIntError,
    OutOfBoundsError,
    ReaderConfig,
)
from binaryreader.binary.lsb import pack_lsb
from binaryreader.binary.varint import decode_varint, to_int64

from binary_samples import encode_varint


class TestVarInt:
    """Test LEB128 varint decoding."""

    def test_300(self):
        reader = BinaryReader(bytes([0xAC, 0x02]))
        assert reader.read_varint() == 300
        assert reader.position == 2

    def test_zero(self):
        reader = BinaryReader(b"\x00")
        assert reader.readVarInt() == 0
        assert reader.position == 1

    def test_sequence(self):
        values = [0, 1, 127, 128, 16383, 16384, 2**35]
        reader = BinaryReader(b"".join(encode_varint(v) for v in values))
        assert [reader.read_varint() for _ in values] == values
        assert reader.remaining == 0

    def test_endianness_is_irrelevant(self):
        data = encode_varint(123456)
        assert BinaryReader(data, True).read_varint() == BinaryReader(data, False).read_varint()

    def test_ten_byte_value_is_signed(self):
        """Sixty-four set bits come back as -1."""
        reader = BinaryReader(b"\xff" * 9 + b"\x01")
        assert reader.read_varint() == -1

    def test_largest_positive(self):
        reader = BinaryReader(encode_varint(2**63 - 1))
        assert reader.read_varint() == 2**63 - 1

    def test_bits_beyond_64_are_dropped(self):
        reader = BinaryReader(b"\x80" * 9 + b"\x7f")
        assert reader.read_varint() == -(2**63)

    def test_too_long(self):
        reader = BinaryReader(b"\x80" * 10 + b"\x00")
        with pytest.raises(MalformedVarIntError):
            reader.read_varint()
        assert reader.position == 0

    def test_configurable_limit(self):
        reader = BinaryReader(encode_varint(300), config=ReaderConfig(max_varint_bytes=1))
        with pytest.raises(MalformedVarIntError):
            reader.read_varint()

    def test_truncated(self):
        reader = BinaryReader(b"\x80\x80")
        with pytest.raises(OutOfBoundsError):
            reader.read_varint()
        assert reader.position == 0

    def test_decode_varint_returns_offset(self):
        view = memoryview(b"\xff" + encode_varint(300))
        assert decode_varint(view, 1, len(view)) == (300, 3)

    def test_to_int64(self):
        assert to_int64(2**64 - 2) == -2
        assert to_int64(2**64 + 5) == 5


class TestLSB:
    """Test LSB bit packing."""

    def test_first_byte_is_msb_without_swap(self):
        reader = BinaryReader(bytes([1, 0, 0, 0, 0, 0, 0, 0]), True, host_little_endian=True)
        assert reader.read_lsb() == b"\x80"
        assert reader.position == 8

    def test_first_byte_is_lsb_with_swap(self):
        reader = BinaryReader(bytes([1, 0, 0, 0, 0, 0, 0, 0]), False, host_little_endian=True)
        assert reader.read_lsb() == b"\x01"

    def test_big_endian_host(self):
        """Bit order depends on the swap flag, not the declared order alone."""
        data = bytes([1, 0, 0, 0, 0, 0, 0, 0])
        assert BinaryReader(data, False, host_little_endian=False).read_lsb() == b"\x80"
        assert BinaryReader(data, True, host_little_endian=False).read_lsb() == b"\x01"

    def test_only_lowest_bit_counts(self):
        reader = BinaryReader(bytes([0x02, 0xFF, 0, 0, 0, 0, 0, 0x03]), True, host_little_endian=True)
        assert reader.read_lsb() == bytes([0b01000001])

    def test_multiple_groups(self):
        data = bytes([1] * 8 + [0, 1] * 4)
        reader = BinaryReader(data, True, host_little_endian=True)
        assert reader.read_lsb() == bytes([0xFF, 0x55])

    def test_partial_group_not_consumed(self):
        reader = BinaryReader(bytes(10))
        assert reader.read_lsb() == b"\x00"
        assert reader.position == 8
        assert reader.read_lsb() == b""
        assert reader.position == 8

    def test_default_length_past_end_raises(self):
        reader = BinaryReader(bytes(8))
        reader.position = 20
        with pytest.raises(OutOfBoundsError):
            reader.read_lsb()
        with pytest.raises(OutOfBoundsError):
            reader.read_lsb(0)
        assert reader.position == 20

    def test_explicit_length(self):
        reader = BinaryReader(bytes([1] * 24), True, host_little_endian=True)
        assert reader.readLSB(16) == b"\xff\xff"
        assert reader.position == 16

    def test_explicit_length_past_end(self):
        reader = BinaryReader(bytes(8))
        with pytest.raises(OutOfBoundsError):
            reader.read_lsb(16)
        with pytest.raises(OutOfBoundsError):
            reader.read_lsb(-8)
        assert reader.position == 0

    def test_pack_lsb_offset(self):
        view = memoryview(bytes([9, 9, 1, 0, 0, 0, 0, 0, 0, 1]))
        assert pack_lsb(view, 2, 8, swap=False) == b"\x81"


class TestAlign:
    """Test public align()."""

    @pytest.mark.parametrize(
        "start,boundary,expected",
        [(0, 4, 0), (1, 4, 4), (3, 4, 4), (4, 4, 4), (5, 8, 8), (7, 2, 8), (9, 1, 9)],
    )
    def test_align_advances(self, start, boundary, expected):
        reader = BinaryReader(bytes(16))
        reader.position = start
        assert reader.align(boundary) == expected
        assert reader.position == expected

    def test_default_boundary_is_four(self):
        reader = BinaryReader(bytes(8))
        reader.position = 1
        assert reader.align() == 4

    def test_idempotent(self):
        reader = BinaryReader(bytes(8))
        reader.position = 5
        first = reader.align(4)
        assert reader.align(4) == first == 8

    def test_unchecked_past_end(self):
        reader = BinaryReader(bytes(5))
        reader.position = 5
        assert reader.align(4) == 8
        with pytest.raises(OutOfBoundsError):
            reader.read_uint8()

    @pytest.mark.parametrize("bad", [0, -4, 2.0, "4"])
    def test_invalid_boundary(self, bad):
        reader = BinaryReader(bytes(8))
        with pytest.raises(InvalidArgumentError):
            reader.align(bad)

    def test_config_alignment(self):
        reader = BinaryReader(bytes(16), config=ReaderConfig(alignment=8))
        reader.position = 3
        assert reader.align() == 8
