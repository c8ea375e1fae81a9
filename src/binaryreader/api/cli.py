"""Command-line interface for binaryreader."""

import argparse
import logging
import sys
from pathlib import Path

import polars as pl
import pyarrow as pa
import pyarrow.parquet as pq

from ..constants import STRING_KINDS, ValueKind
from ..exceptions import BinaryReaderError
from .loaders import read_array_table

logger = logging.getLogger(__name__)

KIND_CHOICES = [kind.label for kind in ValueKind] + list(STRING_KINDS)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Decode a typed array from a binary file"
    )
    parser.add_argument("input", help="Input binary file path")
    parser.add_argument(
        "-t", "--type", dest="kind", choices=KIND_CHOICES, required=True,
        help="Element type of the array",
    )
    parser.add_argument(
        "--offset", type=int, default=0,
        help="Byte offset of the array or of its int32 length prefix (default: 0)",
    )
    parser.add_argument(
        "--count", type=int, default=None,
        help="Element count; read from a leading int32 when omitted",
    )
    parser.add_argument(
        "--little-endian", action="store_true",
        help="Source data is little-endian (default: big-endian)",
    )
    parser.add_argument("-o", "--output", help="Output directory", default=".")
    parser.add_argument(
        "-f",
        "--format",
        choices=["parquet", "csv", "all"],
        default="parquet",
        help="Output format",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    return parser


def validate_input_file(input_path: Path) -> None:
    """Validate input file exists and is a regular file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If path is not a file
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Input file does not exist: {input_path}")

    if not input_path.is_file():
        raise ValueError(f"Input path is not a file: {input_path}")

    if input_path.stat().st_size == 0:
        logger.warning(f"Input file is empty: {input_path}")


def validate_output_directory(output_path: Path) -> None:
    """Validate output directory is writable.

    Raises:
        PermissionError: If directory is not writable
        OSError: If directory cannot be created
    """
    output_path.mkdir(parents=True, exist_ok=True)

    test_file = output_path / ".write_test"
    try:
        test_file.touch()
        test_file.unlink()
    except (PermissionError, OSError) as e:
        raise PermissionError(
            f"Cannot write to output directory {output_path}: {e}"
        ) from e


def write_output_files(
    data: pa.Table,
    output_path: Path,
    base_name: str,
    output_format: str,
) -> list[Path]:
    """Write decoded data to output file(s).

    Args:
        data: PyArrow Table to write
        output_path: Directory to write files to
        base_name: Base filename (without extension)
        output_format: Output format ("parquet", "csv", or "all")

    Returns:
        Paths of the written files
    """
    written = []
    if output_format in ("parquet", "all"):
        parquet_file = output_path / f"{base_name}.parquet"
        pq.write_table(data, parquet_file, compression="snappy")
        logger.debug(f"Wrote Parquet file: {parquet_file}")
        written.append(parquet_file)

    if output_format in ("csv", "all"):
        df = pl.from_arrow(data)
        if isinstance(df, pl.DataFrame):
            csv_file = output_path / f"{base_name}.csv"
            df.write_csv(csv_file)
            logger.debug(f"Wrote CSV file: {csv_file}")
            written.append(csv_file)
    return written


def main(argv: list[str] | None = None) -> int:
    """Command-line interface for decoding one array from a binary file.

    Usage:
        python -m binaryreader input.bin -t KIND [options]

    Examples:
        # Length-prefixed big-endian float array at the start of the file
        python -m binaryreader samples.bin -t float

        # 128 little-endian uint16 values at offset 64, as CSV
        python -m binaryreader frame.bin -t uint16 --offset 64 --count 128 --little-endian -f csv

    Args:
        argv: Command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=(logging.DEBUG if args.verbose else logging.INFO))

    try:
        input_path = Path(args.input)
        validate_input_file(input_path)

        data = read_array_table(
            input_path,
            args.kind,
            offset=args.offset,
            count=args.count,
            little_endian=args.little_endian,
        )

        output_path = Path(args.output)
        validate_output_directory(output_path)

        base_name = f"{input_path.stem}_{args.kind}"
        write_output_files(data, output_path, base_name, args.format)

        logger.info(
            f"Decoded {data.num_rows} {args.kind} values from {args.input}"
        )
        return 0

    except Exception as e:
        match e:
            case BinaryReaderError() | FileNotFoundError() | ValueError() | PermissionError():
                logger.error(str(e))
            case OSError():
                logger.error(f"OS error while processing file {args.input}: {e}")
            case _:
                logger.error(f"Unexpected error while decoding file {args.input}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
