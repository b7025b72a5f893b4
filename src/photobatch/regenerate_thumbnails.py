#!/usr/bin/env python3
"""
Thumbnail Regenerator CLI

Reads the photo catalog (newest first) → regenerates missing thumbnails
in the local thumbnail cache
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from .core import THUMBNAIL_SIZES, ThumbnailConfig
from .core.factories import ThumbnailPipelineFactory
from .core.progress import StatusLine
from .processors.common import (
    PhotoBatchArgumentParser,
    add_common_arguments,
    build_config,
    run_command,
)

DEFAULT_DATABASE = "~/.local/share/shotwell/data/photo.db"
DEFAULT_CACHE_DIR = "~/.cache/shotwell/thumbs"


def build_parser(prog: str = "photobatch-thumbs") -> argparse.ArgumentParser:
    parser = PhotoBatchArgumentParser(
        prog=prog,
        description="Regenerate missing photo thumbnails from the photo catalog",
    )
    parser.add_argument(
        "--database",
        type=Path,
        default=os.getenv("PHOTOBATCH_DATABASE", DEFAULT_DATABASE),
        help=f"Catalog database (default: $PHOTOBATCH_DATABASE or {DEFAULT_DATABASE})",
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        default=os.getenv("PHOTOBATCH_THUMB_DIR", DEFAULT_CACHE_DIR),
        help=f"Thumbnail cache root (default: $PHOTOBATCH_THUMB_DIR or {DEFAULT_CACHE_DIR})",
    )
    parser.add_argument(
        "--size",
        type=int,
        action="append",
        dest="sizes",
        choices=THUMBNAIL_SIZES,
        help="Thumbnail size to regenerate; repeat for several (default: all)",
    )
    parser.add_argument(
        "--quality", type=int, default=90, help="JPEG quality 1-95 (default: 90)"
    )
    add_common_arguments(parser)
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for the thumbnail regenerator.

    Raises:
        UsageError: Missing or invalid arguments.
    """
    return build_parser().parse_args(argv)


def configure(args: argparse.Namespace) -> ThumbnailConfig:
    return build_config(
        ThumbnailConfig,
        database=Path(args.database).expanduser(),
        cache_dir=Path(args.cache_dir).expanduser(),
        sizes=tuple(args.sizes or THUMBNAIL_SIZES),
        quality=args.quality,
        overwrite=args.overwrite,
        allow_failures=args.allow_failures,
        quiet=args.quiet,
        debug=args.debug,
    )


def create_pipeline(config: ThumbnailConfig):
    return ThumbnailPipelineFactory.create_pipeline(
        config, status=StatusLine(enabled=not config.quiet)
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the thumbnail regenerator.

    Returns the process exit code: 0 success, 1 usage error or failed
    thumbnails, 2 missing/unreadable catalog, 130 interrupted.
    """
    return run_command(
        argv, parse_args, configure, create_pipeline, "Thumbnail regenerator"
    )


if __name__ == "__main__":
    sys.exit(main())
