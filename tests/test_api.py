"""
Unit tests for the file loaders and the command line interface.
"""

import logging
import struct

import polars as pl
import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from binaryreader import (
    BinaryReaderConfig,
    LoaderConfig,
    OutOfBoundsError,
    ResourceLimitError,
    open_reader,
    read_array_table,
)
from binaryreader.api.cli import create_parser, main

from binary_samples import length_prefixed


class TestOpenReader:
    """Test open_reader."""

    def test_reads_file(self, write_binary):
        path = write_binary(struct.pack("<hI", -3, 7))
        with open_reader(path, little_endian=True) as reader:
            assert reader.size == 6
            assert reader.read_int16() == -3
            assert reader.read_uint32() == 7

    def test_default_is_big_endian(self, write_binary):
        path = write_binary(b"\x00\x05")
        assert open_reader(str(path)).read_uint16() == 5

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            open_reader(tmp_path / "missing.bin")

    def test_size_limit(self, write_binary):
        path = write_binary(bytes(1024 * 1024 + 1))
        config = BinaryReaderConfig(loader=LoaderConfig(max_file_size_mb=1))
        with pytest.raises(ResourceLimitError):
            open_reader(path, config=config)


class TestReadArrayTable:
    """Test read_array_table."""

    def test_numeric_column(self, write_binary):
        path = write_binary(struct.pack(">i3d", 3, 0.5, 1.5, -2.0))
        table = read_array_table(path, "double")

        assert isinstance(table, pa.Table)
        assert table.column_names == ["value"]
        assert table.column("value").type == pa.float64()
        assert table.column("value").to_pylist() == [0.5, 1.5, -2.0]

    def test_metadata(self, write_binary):
        path = write_binary(b"\xff\xff" + struct.pack("<2H", 1, 2))
        table = read_array_table(path, "uint16", offset=2, count=2, little_endian=True)

        metadata = table.schema.metadata
        assert metadata[b"kind"] == b"uint16"
        assert metadata[b"offset"] == b"2"
        assert metadata[b"end"] == b"6"
        assert metadata[b"little_endian"] == b"true"
        assert table.column("value").to_pylist() == [1, 2]

    def test_alias_kind_is_normalized(self, write_binary):
        path = write_binary(struct.pack("<2f", 1.0, 2.0))
        table = read_array_table(path, "Float32", count=2, little_endian=True)
        assert table.schema.metadata[b"kind"] == b"float"
        assert table.column("value").type == pa.float32()

    def test_half_is_widened(self, write_binary):
        path = write_binary(struct.pack(">2e", 0.5, 4.0))
        table = read_array_table(path, "half", count=2)
        assert table.column("value").type == pa.float32()
        assert table.column("value").to_pylist() == [0.5, 4.0]

    def test_bool_and_uint8(self, write_binary):
        path = write_binary(b"\x00\x03")
        assert read_array_table(path, "bool", count=2).column("value").to_pylist() == [False, True]
        assert read_array_table(path, "uint8", count=2).column("value").to_pylist() == [0, 3]

    @pytest.mark.parametrize(
        "kind,data",
        [
            ("string", struct.pack(">i", 2) + length_prefixed("ab", ">") + length_prefixed("c", ">")),
            ("string_c", struct.pack(">i", 2) + b"ab\x00c\x00"),
            (
                "string_aligned",
                struct.pack(">i", 2) + length_prefixed("ab", ">") + b"\x00\x00"
                + length_prefixed("c", ">"),
            ),
        ],
    )
    def test_string_kinds(self, write_binary, kind, data):
        table = read_array_table(write_binary(data), kind)
        assert table.column("value").type == pa.string()
        assert table.column("value").to_pylist() == ["ab", "c"]

    def test_unknown_kind(self, write_binary):
        with pytest.raises(ValueError):
            read_array_table(write_binary(b""), "int24")

    def test_out_of_bounds(self, write_binary):
        path = write_binary(struct.pack(">i", 10))
        with pytest.raises(OutOfBoundsError):
            read_array_table(path, "int32")


class TestCli:
    """Test the command line interface."""

    def test_parser_requires_type(self):
        parser = create_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["input.bin"])

    def test_parser_defaults(self):
        args = create_parser().parse_args(["input.bin", "-t", "int32"])
        assert args.kind == "int32"
        assert args.offset == 0
        assert args.count is None
        assert args.little_endian is False
        assert args.format == "parquet"

    def test_writes_parquet_and_csv(self, write_binary, tmp_path):
        path = write_binary(struct.pack("<3H", 10, 20, 30), "frame.bin")
        out = tmp_path / "out"

        code = main(
            [str(path), "-t", "uint16", "--count", "3", "--little-endian",
             "-o", str(out), "-f", "all"]
        )

        assert code == 0
        parquet = pq.read_table(out / "frame_uint16.parquet")
        assert parquet.column("value").to_pylist() == [10, 20, 30]
        csv = pl.read_csv(out / "frame_uint16.csv")
        assert csv["value"].to_list() == [10, 20, 30]

    def test_csv_only(self, write_binary, tmp_path):
        path = write_binary(struct.pack(">i2q", 2, -1, 1), "ticks.bin")
        assert main([str(path), "-t", "int64", "-o", str(tmp_path), "-f", "csv"]) == 0
        assert (tmp_path / "ticks_int64.csv").exists()
        assert not (tmp_path / "ticks_int64.parquet").exists()

    def test_missing_input(self, tmp_path):
        assert main([str(tmp_path / "nope.bin"), "-t", "int8"]) == 1

    def test_decode_error(self, write_binary, tmp_path):
        path = write_binary(b"\x00\x00\x00\x09")
        assert main([str(path), "-t", "int32", "-o", str(tmp_path)]) == 1

    @pytest.mark.parametrize(
        "extra",
        [["--offset", "-1"], ["--offset", "64"]],
        ids=["negative-offset", "offset-past-end"],
    )
    def test_library_errors_logged_plainly(self, write_binary, tmp_path, caplog, extra):
        path = write_binary(b"\x00" * 8)
        with caplog.at_level(logging.ERROR):
            assert main([str(path), "-t", "int8", "-o", str(tmp_path), *extra]) == 1
        assert caplog.records
        assert "Unexpected error" not in caplog.text
