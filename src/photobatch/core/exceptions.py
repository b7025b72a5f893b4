"""Custom exceptions and exit codes for photobatch."""

from __future__ import annotations


EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_PRECONDITION = 2
EXIT_INTERRUPTED = 130


class PhotoBatchError(Exception):
    """Base exception for all photobatch errors."""

    exit_code = EXIT_FAILURE


class UsageError(PhotoBatchError):
    """Error raised for bad or missing command-line input."""


class ConfigurationError(UsageError):
    """Error raised for invalid configuration options."""


class PreconditionError(PhotoBatchError):
    """Error raised when a required path or resource is absent or unreadable."""

    exit_code = EXIT_PRECONDITION


class StageError(PhotoBatchError):
    """Error raised when one pipeline stage fails for one item."""

    def __init__(self, message: str, stage: str = "", item: str = "") -> None:
        super().__init__(message)
        self.stage = stage
        self.item = item


class RunInterrupted(PhotoBatchError):
    """Raised when the user cancels a run."""

    exit_code = EXIT_INTERRUPTED
