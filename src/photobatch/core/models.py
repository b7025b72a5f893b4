"""Shared data models for photobatch."""

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PIL import ImageColor
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .exceptions import EXIT_FAILURE, EXIT_OK

THUMBNAIL_SIZES = (128, 360)


class ItemOutcome(str, Enum):
    """Lifecycle of a single work item."""

    PENDING = "pending"
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class WatermarkVariant(str, Enum):
    """Watermark overlays available to the uploader."""

    NONE = "none"
    LIGHT = "light"
    DARK = "dark"


class WorkItem(BaseModel):
    """One unit of batch processing: a photo file or a catalog row at one size."""

    identifier: str
    source: Path
    row_id: Optional[int] = None
    size: Optional[int] = None
    outputs: Dict[str, Path] = Field(default_factory=dict)
    outcome: ItemOutcome = ItemOutcome.PENDING
    error: str = ""
    executed_stages: List[str] = Field(default_factory=list)
    skipped_stages: List[str] = Field(default_factory=list)
    created_outputs: List[Path] = Field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not ItemOutcome.PENDING

    def output(self, name: str) -> Path:
        return self.outputs[name]

    def mark(self, outcome: ItemOutcome, error: str = "") -> None:
        """Move the item to its terminal outcome; an item is marked exactly once."""
        if self.is_terminal:
            raise ValueError(
                f"{self.identifier} already finished as {self.outcome.value}"
            )
        if outcome is ItemOutcome.PENDING:
            raise ValueError("pending is not a terminal outcome")
        self.outcome = outcome
        self.error = error


class PipelineConfig(BaseModel):
    """Options shared by every pipeline run. Built once from parsed arguments."""

    model_config = ConfigDict(frozen=True)

    overwrite: bool = False
    allow_failures: bool = False
    quiet: bool = False
    debug: bool = False


class UploadConfig(PipelineConfig):
    """Configuration for the photo uploader."""

    source_dir: Path
    collection: str
    resize: Optional[int] = 2048
    border: bool = False
    border_width: int = 10
    border_color: str = "white"
    watermark: WatermarkVariant = WatermarkVariant.NONE
    watermark_dir: Optional[Path] = None
    upload: bool = True
    keep_output: bool = False
    delete_source: bool = False
    owner: str = ""
    bucket: str = ""
    marker: str = "-web"
    quality: int = 90

    @field_validator("collection", "marker")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("resize")
    @classmethod
    def _positive_resize(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("resize target must be positive")
        return value

    @field_validator("border_width")
    @classmethod
    def _positive_border(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("border width must be positive")
        return value

    @field_validator("border_color")
    @classmethod
    def _known_color(cls, value: str) -> str:
        try:
            ImageColor.getrgb(value)
        except ValueError as e:
            raise ValueError(f"unknown border color: {value!r}") from e
        return value

    @field_validator("quality")
    @classmethod
    def _jpeg_quality(cls, value: int) -> int:
        if not 1 <= value <= 95:
            raise ValueError("JPEG quality must be between 1 and 95")
        return value

    @model_validator(mode="after")
    def _check_dependencies(self) -> "UploadConfig":
        if self.upload and not self.bucket:
            raise ValueError("an upload bucket is required unless uploading is disabled")
        if self.watermark is not WatermarkVariant.NONE and self.watermark_dir is None:
            raise ValueError("a watermark directory is required for watermarking")
        return self

    @property
    def watermark_asset(self) -> Optional[Path]:
        if self.watermark is WatermarkVariant.NONE or self.watermark_dir is None:
            return None
        return self.watermark_dir / f"watermark-{self.watermark.value}.png"


class ThumbnailConfig(PipelineConfig):
    """Configuration for the thumbnail regenerator."""

    database: Path
    cache_dir: Path
    sizes: Tuple[int, ...] = THUMBNAIL_SIZES
    quality: int = 90

    @field_validator("sizes")
    @classmethod
    def _known_sizes(cls, value: Tuple[int, ...]) -> Tuple[int, ...]:
        if not value:
            raise ValueError("at least one thumbnail size is required")
        unknown = [size for size in value if size not in THUMBNAIL_SIZES]
        if unknown:
            raise ValueError(f"unsupported thumbnail size(s): {unknown}")
        # Keep the caller's order, drop repeats.
        return tuple(dict.fromkeys(value))

    @field_validator("quality")
    @classmethod
    def _jpeg_quality(cls, value: int) -> int:
        if not 1 <= value <= 95:
            raise ValueError("JPEG quality must be between 1 and 95")
        return value


class PhotoInfo(BaseModel):
    """Metadata read from a photo before export."""

    max_dimension: int
    caption: str = ""


class CatalogRow(BaseModel):
    """One row of the photo catalog."""

    row_id: int
    filename: Path


class RunSummary(BaseModel):
    """Aggregate outcome of a batch run."""

    total: int = 0
    processed: int = 0
    skipped: int = 0
    failed: List[str] = Field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    def exit_code(self, allow_failures: bool = False) -> int:
        if self.failed and not allow_failures:
            return EXIT_FAILURE
        return EXIT_OK
