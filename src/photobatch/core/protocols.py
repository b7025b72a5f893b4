"""Protocol definitions for dependency injection and testability."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Protocol

from .models import CatalogRow, PipelineConfig, WorkItem


class S3ClientProtocol(Protocol):
    """Protocol for the S3 operations the uploader needs."""

    def head_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Fetch object metadata; raises ClientError (404) when absent."""
        ...

    def upload_file(
        self, Filename: str, Bucket: str, Key: str, ExtraArgs: Dict[str, Any]
    ) -> None:
        """Upload a local file to S3."""
        ...


class PhotoUploader(Protocol):
    """Cloud photo collection client."""

    def exists(self, collection: str, name: str) -> bool:
        """Return True if the collection already holds a photo with this name."""
        ...

    def upload(self, collection: str, path: Path, owner: str, caption: str) -> None:
        """Upload one file into the collection."""
        ...


class CatalogReader(Protocol):
    """Tabular photo catalog, rows ordered newest first."""

    def rows(self) -> List[CatalogRow]:
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        ...

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        ...

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        ...

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        ...


class WorkEnumerator(ABC):
    """Abstract source of work items for a run."""

    @abstractmethod
    def enumerate(self, config: PipelineConfig) -> List[WorkItem]:
        """Return the ordered, deduplicated work list; raise PreconditionError if unreadable."""
        ...


class Stage(ABC):
    """One conditional, idempotency-checked operation in the per-item chain."""

    name: str = "stage"

    def applies(self, config: PipelineConfig) -> bool:
        """Whether this stage is active for the run."""
        return True

    def skip_if(self, item: WorkItem, config: PipelineConfig) -> bool:
        """Idempotency check: True when the stage's work is already satisfied."""
        return False

    @abstractmethod
    def execute(self, item: WorkItem, config: PipelineConfig) -> None:
        """Perform the operation; raise StageError on failure."""
        ...


class ItemFinalizer(ABC):
    """Terminal bookkeeping that runs once an item reaches its outcome."""

    @abstractmethod
    def finalize(self, item: WorkItem, config: PipelineConfig) -> None:
        ...
