"""Main module for the photobatch CLI."""

import argparse
import sys
from typing import List, Optional

from . import __version__, regenerate_thumbnails, upload_photos
from .core import UsageError, get_logger
from .processors.common import PhotoBatchArgumentParser

COMMANDS = {
    "upload": upload_photos,
    "thumbs": regenerate_thumbnails,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the unified command-line interface of photobatch.

    Dispatches "upload" and "thumbs" to their own command modules, passing
    every remaining argument through so each command owns its options and
    its --help text.
    """
    parser = PhotoBatchArgumentParser(
        prog="photobatch",
        description="photobatch - batch photo export/upload and thumbnail regeneration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Resize to 2048px and upload a directory into the "holiday" collection
  photobatch upload ~/Pictures/holiday holiday --bucket my-photos

  # Border and watermark, keep the exports, do not upload
  photobatch upload ~/Pictures/holiday holiday --border \\
                    --watermark light --watermark-dir ~/marks --no-upload

  # Regenerate missing 360px thumbnails
  photobatch thumbs --size 360

  # Show version
  photobatch version
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser(
        "upload",
        add_help=False,
        help="Export and upload a directory of photos (see: photobatch upload --help)",
    )
    subparsers.add_parser(
        "thumbs",
        add_help=False,
        help="Regenerate catalog thumbnails (see: photobatch thumbs --help)",
    )
    subparsers.add_parser("version", help="Show version information")

    try:
        args, remaining = parser.parse_known_args(argv)
    except UsageError as e:
        get_logger("cli").error(str(e))
        return e.exit_code

    if args.command in COMMANDS:
        return COMMANDS[args.command].main(remaining)

    if args.command == "version":
        print("photobatch CLI")
        print(f"Version {__version__}")
        print("Batch photo upload and thumbnail regeneration")
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
