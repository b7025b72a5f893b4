# src/photobatch/core/error_handling.py

import functools
import logging
import sqlite3
from typing import Any, Callable, Dict, List, TypeVar

from botocore.exceptions import BotoCoreError, ClientError
from PIL import UnidentifiedImageError

from .exceptions import PhotoBatchError, StageError

F = TypeVar("F", bound=Callable[..., Any])


def with_error_handling(func: F) -> F:
    """
    Wrap a call to an external tool so any failure surfaces as StageError.

    Pillow, boto3 and sqlite3 errors are chained as the cause; photobatch's
    own errors pass through unchanged.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger("photobatch." + func.__name__)
        try:
            return func(*args, **kwargs)
        except PhotoBatchError:
            raise
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "unknown")
            logger.debug(f"S3 call '{func.__name__}' failed ({code}): {e}", exc_info=True)
            raise StageError(f"S3 operation failed in {func.__name__}: {e}") from e
        except BotoCoreError as e:
            logger.debug(f"S3 client error in '{func.__name__}': {e}", exc_info=True)
            raise StageError(f"S3 client error in {func.__name__}: {e}") from e
        except UnidentifiedImageError as e:
            logger.debug(f"Unreadable image in '{func.__name__}': {e}", exc_info=True)
            raise StageError(f"Failed to identify image in {func.__name__}: {e}") from e
        except sqlite3.Error as e:
            logger.debug(f"Catalog error in '{func.__name__}': {e}", exc_info=True)
            raise StageError(f"Catalog query failed in {func.__name__}: {e}") from e
        except (OSError, ValueError) as e:
            logger.debug(f"Error in '{func.__name__}': {e}", exc_info=True)
            raise StageError(f"{func.__name__} failed: {e}") from e
    return wrapper  # type: ignore[return-value]


class BatchOperationContextManager:
    """
    Context manager for batch operations to collect and summarize errors.
    """
    def __init__(self, operation_name="Batch Operation", logger=None):
        self.operation_name = operation_name
        self.errors: List[Dict[str, str]] = []
        self.logger = logger or logging.getLogger("photobatch." + self.__class__.__name__)

    def __enter__(self):
        self.logger.debug(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            # Interrupted or crashed runs do not get a failure report.
            return False
        if self.errors:
            self.logger.warning(
                f"{self.operation_name} completed with {len(self.errors)} failure(s)."
            )
            for i, error_detail in enumerate(self.errors):
                self.logger.warning(
                    f"  Failure {i+1}/{len(self.errors)} for '{error_detail['item']}': {error_detail['error']}"
                )
        else:
            self.logger.info(f"{self.operation_name} completed without failures.")
        return False

    @property
    def failed_items(self) -> List[str]:
        return [error["item"] for error in self.errors]

    def add_error(self, error_message: str, item_identifier: str = "Unknown item"):
        """
        Call this method within the 'with' block to report an error for a specific item.

        Args:
            error_message (str): The error message or exception string.
            item_identifier (str): A string identifying the item that failed (e.g., file path).
        """
        self.errors.append({"item": item_identifier, "error": str(error_message)})
        self.logger.debug(f"Error added for item '{item_identifier}' in {self.operation_name}: {error_message}")
