"""Core utilities and shared components for photobatch."""

from .logging_config import (
    enable_debug_logging,
    get_logger,
    setup_logger,
)
from .exceptions import (
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_OK,
    EXIT_PRECONDITION,
    PhotoBatchError,
    UsageError,
    ConfigurationError,
    PreconditionError,
    StageError,
    RunInterrupted,
)
from .models import (
    THUMBNAIL_SIZES,
    CatalogRow,
    ItemOutcome,
    PhotoInfo,
    PipelineConfig,
    RunSummary,
    ThumbnailConfig,
    UploadConfig,
    WatermarkVariant,
    WorkItem,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "enable_debug_logging",
    "EXIT_OK",
    "EXIT_FAILURE",
    "EXIT_PRECONDITION",
    "EXIT_INTERRUPTED",
    "PhotoBatchError",
    "UsageError",
    "ConfigurationError",
    "PreconditionError",
    "StageError",
    "RunInterrupted",
    "THUMBNAIL_SIZES",
    "CatalogRow",
    "ItemOutcome",
    "PhotoInfo",
    "PipelineConfig",
    "RunSummary",
    "ThumbnailConfig",
    "UploadConfig",
    "WatermarkVariant",
    "WorkItem",
]
