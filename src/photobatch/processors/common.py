"""Common functions shared by the uploader and the thumbnail regenerator."""

import argparse
import sys
from typing import Callable, List, NoReturn, Optional

from pydantic import ValidationError

from ..core import (
    EXIT_FAILURE,
    ConfigurationError,
    PhotoBatchError,
    PipelineConfig,
    PreconditionError,
    RunInterrupted,
    ThumbnailConfig,
    UploadConfig,
    UsageError,
    enable_debug_logging,
    get_logger,
)
from ..core.orchestrator import RunOrchestrator


class PhotoBatchArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports bad input as UsageError instead of exiting with 2."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        raise UsageError(f"{self.prog}: {message}")


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Options every batch command accepts."""
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Redo work whose output already exists (default: skip it)",
    )
    parser.add_argument(
        "--allow-failures",
        action="store_true",
        help="Exit 0 even when some items failed; failures are still listed",
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Do not draw the progress status line"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")


def build_config(factory: Callable[..., PipelineConfig], **options) -> PipelineConfig:
    """Construct a frozen config, reporting validation problems as ConfigurationError."""
    try:
        return factory(**options)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'options'}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigurationError(f"Invalid options: {problems}") from e


def log_configuration(config: PipelineConfig, title: str) -> None:
    """Log the run configuration."""
    logger = get_logger("processor")
    logger.info("=" * 80)
    logger.info(title.upper())
    logger.info("=" * 80)

    logger.info("CONFIGURATION:")
    if isinstance(config, UploadConfig):
        logger.info(f"  Source:        {config.source_dir}")
        logger.info(f"  Collection:    {config.collection}")
        if config.upload:
            logger.info(f"  Destination:   s3://{config.bucket}/{config.collection}/")
        logger.info("")
        logger.info("PROCESSING OPTIONS:")
        logger.info(f"  Resize:        {config.resize or 'off'}")
        logger.info(f"  Border:        {f'{config.border_width}px {config.border_color}' if config.border else 'off'}")
        logger.info(f"  Watermark:     {config.watermark.value}")
        logger.info(f"  Upload:        {'on' if config.upload else 'off'}")
        logger.info(f"  Keep exports:  {'yes' if config.keep_output else 'no'}")
        logger.info(f"  Delete source: {'yes' if config.delete_source else 'no'}")
    elif isinstance(config, ThumbnailConfig):
        logger.info(f"  Catalog:       {config.database}")
        logger.info(f"  Cache:         {config.cache_dir}")
        logger.info("")
        logger.info("PROCESSING OPTIONS:")
        logger.info(f"  Sizes:         {', '.join(str(size) for size in config.sizes)}")
    logger.info(f"  Overwrite:     {'yes' if config.overwrite else 'no'}")
    logger.info("=" * 80)


def run_processing(orchestrator: RunOrchestrator, config: PipelineConfig) -> int:
    """
    Run a pipeline and select the process exit code.

    Returns:
        0 on success (or failures with allow_failures), 1 if any item
        failed, 2 for a missing/unreadable source, 130 on interruption.
    """
    logger = get_logger("processor")
    try:
        summary = orchestrator.run(config)
    except PreconditionError as e:
        logger.error(f"Cannot start: {e}")
        return e.exit_code
    except RunInterrupted as e:
        logger.warning(f"Processing interrupted by user ({e}).")
        return e.exit_code

    if summary.failed:
        logger.warning(
            f"{summary.failed_count} of {summary.total} item(s) failed"
            + (" (ignored: --allow-failures)" if config.allow_failures else "")
        )
    return summary.exit_code(config.allow_failures)


def run_command(
    argv: Optional[List[str]],
    parse: Callable[[Optional[List[str]]], argparse.Namespace],
    configure: Callable[[argparse.Namespace], PipelineConfig],
    create_pipeline: Callable[[PipelineConfig], RunOrchestrator],
    title: str,
) -> int:
    """Parse, configure and run one batch command; never raises for expected errors."""
    logger = get_logger("processor")
    try:
        args = parse(argv)
        if args.debug:
            enable_debug_logging()
        config = configure(args)
    except UsageError as e:
        logger.error(str(e))
        return e.exit_code

    log_configuration(config, title)
    try:
        orchestrator = create_pipeline(config)
    except PhotoBatchError as e:
        logger.error(f"Cannot start: {e}")
        return e.exit_code
    except KeyboardInterrupt:
        return RunInterrupted.exit_code
    try:
        return run_processing(orchestrator, config)
    except KeyboardInterrupt:
        # Interrupt outside the item loop (e.g. during enumeration).
        logger.warning("Processing interrupted by user.")
        return RunInterrupted.exit_code
    except Exception as e:  # noqa: BLE001
        logger.error(f"Processing failed: {e}", exc_info=True)
        return EXIT_FAILURE
