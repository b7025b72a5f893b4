#!/usr/bin/env python3
"""
Photo Uploader CLI

Scans a directory of JPEGs → Exports (resize/border) → Watermarks → Uploads
to a cloud photo collection → Cleans up
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from .core import UploadConfig, WatermarkVariant
from .core.factories import UploadPipelineFactory
from .core.progress import StatusLine
from .processors.common import (
    PhotoBatchArgumentParser,
    add_common_arguments,
    build_config,
    run_command,
)


def build_parser(prog: str = "photobatch-upload") -> argparse.ArgumentParser:
    parser = PhotoBatchArgumentParser(
        prog=prog,
        description="Resize, border, watermark and upload a directory of photos",
    )

    parser.add_argument("source_dir", type=Path, help="Directory holding the photos (*.jpg, *.jpeg)")
    parser.add_argument("collection", help="Destination collection (album) name")

    parser.add_argument(
        "--size",
        type=int,
        default=2048,
        help="Longest side of the exported photo in pixels (default: 2048)",
    )
    parser.add_argument(
        "--no-resize", action="store_true", help="Export at the original size"
    )
    parser.add_argument("--border", action="store_true", help="Frame the exported photo")
    parser.add_argument(
        "--border-width", type=int, default=10, help="Frame width in pixels (default: 10)"
    )
    parser.add_argument(
        "--border-color", default="white", help="Frame color name or #rrggbb (default: white)"
    )
    parser.add_argument(
        "--watermark",
        default=WatermarkVariant.NONE.value,
        choices=[variant.value for variant in WatermarkVariant],
        help="Watermark overlay to composite onto each photo (default: none)",
    )
    parser.add_argument(
        "--watermark-dir",
        type=Path,
        default=os.getenv("PHOTOBATCH_WATERMARK_DIR"),
        help="Directory holding watermark-light.png / watermark-dark.png "
        "(default: $PHOTOBATCH_WATERMARK_DIR)",
    )
    parser.add_argument(
        "--no-upload", action="store_true", help="Only export; do not upload"
    )
    parser.add_argument(
        "--keep", action="store_true", help="Keep exported files after uploading them"
    )
    parser.add_argument(
        "--delete-source",
        action="store_true",
        help="Delete the original photo once it has been processed successfully",
    )
    parser.add_argument(
        "--owner",
        default=os.getenv("PHOTOBATCH_OWNER", ""),
        help="Owner recorded with each upload (default: $PHOTOBATCH_OWNER)",
    )
    parser.add_argument(
        "--bucket",
        default=os.getenv("PHOTOBATCH_BUCKET", ""),
        help="S3 bucket holding the collections (default: $PHOTOBATCH_BUCKET)",
    )
    parser.add_argument(
        "--marker",
        default="-web",
        help="Suffix that tags exported files; pass as --marker=-x (default: -web)",
    )
    parser.add_argument(
        "--quality", type=int, default=90, help="JPEG quality 1-95 (default: 90)"
    )
    add_common_arguments(parser)
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for the photo uploader.

    Raises:
        UsageError: Missing or invalid arguments.
    """
    return build_parser().parse_args(argv)


def configure(args: argparse.Namespace) -> UploadConfig:
    return build_config(
        UploadConfig,
        source_dir=args.source_dir,
        collection=args.collection,
        resize=None if args.no_resize else args.size,
        border=args.border,
        border_width=args.border_width,
        border_color=args.border_color,
        watermark=WatermarkVariant(args.watermark),
        watermark_dir=args.watermark_dir,
        upload=not args.no_upload,
        keep_output=args.keep,
        delete_source=args.delete_source,
        owner=args.owner,
        bucket=args.bucket,
        marker=args.marker,
        quality=args.quality,
        overwrite=args.overwrite,
        allow_failures=args.allow_failures,
        quiet=args.quiet,
        debug=args.debug,
    )


def create_pipeline(config: UploadConfig):
    return UploadPipelineFactory.create_pipeline(
        config, status=StatusLine(enabled=not config.quiet)
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the photo uploader.

    Returns the process exit code: 0 success, 1 usage error or failed
    photos, 2 missing source directory, 130 interrupted.
    """
    return run_command(argv, parse_args, configure, create_pipeline, "Photo uploader")


if __name__ == "__main__":
    sys.exit(main())
