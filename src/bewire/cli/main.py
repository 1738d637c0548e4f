"""Main CLI entry point for bewire."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..codec.decoder import decode
from ..config import CodecConfig
from ..exceptions import BewireError
from .analyze import analyze_file, load_records


def decode_hex(hex_data: str, record_spec: str, *, strict: bool = False) -> str:
    """Decode a hex payload with a record class loaded from a file.

    Args:
        hex_data: Payload as hex digits (spaces and colons are ignored)
        record_spec: ``path/to/file.py:ClassName``
        strict: Reject trailing bytes

    Returns:
        The decoded record as JSON
    """
    file_name, sep, class_name = record_spec.rpartition(":")
    if not sep or not file_name or not class_name:
        raise ValueError(f"Expected FILE:Class, got {record_spec!r}")

    records = {cls.__name__: cls for cls in load_records(Path(file_name))}
    if class_name not in records:
        raise ValueError(f"No BaseRecord class {class_name!r} in {file_name}")

    data = bytes.fromhex(hex_data.replace(":", "").replace(" ", ""))
    record = decode(data, records[class_name], config=CodecConfig(strict=strict))
    return record.model_dump_json(indent=2)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the bewire CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        prog="bewire",
        description="bewire: Big-Endian Wire Records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bewire --analyze records.py                         Show record wire layouts
  bewire --decode 0000000568656c6c6f --record records.py:Greeting
  bewire --version                                    Show version
        """,
    )

    parser.add_argument(
        "--analyze",
        metavar="FILE",
        type=str,
        help="Analyze record classes and show their wire layout",
    )

    parser.add_argument(
        "--decode",
        metavar="HEX",
        type=str,
        help="Decode a hex payload (requires --record)",
    )

    parser.add_argument(
        "--record",
        metavar="FILE:CLASS",
        type=str,
        help="Record class used by --decode",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="With --decode, reject trailing bytes",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"bewire {__version__}",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s: %(message)s"
        )

    if args.analyze:
        file_path = Path(args.analyze)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            analyze_file(file_path)
            return 0
        except Exception as e:
            print(f"Error analyzing file: {e}", file=sys.stderr)
            return 1

    if args.decode:
        if not args.record:
            print("Error: --decode requires --record FILE:CLASS", file=sys.stderr)
            return 1

        try:
            print(decode_hex(args.decode, args.record, strict=args.strict))
            return 0
        except (BewireError, ValueError, OSError) as e:
            print(f"Error decoding payload: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
