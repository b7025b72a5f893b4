"""Centralized logging configuration for photobatch."""

import os
import sys
import logging
from typing import Optional

from tqdm import tqdm


ROOT_LOGGER_NAME = "photobatch"

# Set by enable_debug_logging(); wins over LOG_LEVEL for loggers created later.
_forced_level: Optional[int] = None


class StatusAwareHandler(logging.StreamHandler):
    """Stream handler that clears an active status line before each record."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream)
            self.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Setup centralized logging with environment variable configuration.

    Args:
        name: Logger name (defaults to "photobatch")
        level: Log level override (defaults to env var or INFO)
        format_type: Logging format ("structured" or "simple")

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: Set format type ("structured" or "simple")
    """
    logger = logging.getLogger(name)

    if level:
        log_level = getattr(logging, level.upper(), logging.INFO)
    elif _forced_level is not None:
        log_level = _forced_level
    else:
        env_level = os.getenv("LOG_LEVEL", "INFO").upper()
        log_level = getattr(logging, env_level, logging.INFO)

    logger.setLevel(log_level)

    # Avoid duplicate handlers
    if not logger.handlers:
        handler = StatusAwareHandler(sys.stdout)

        env_format = os.getenv("LOG_FORMAT", format_type).lower()

        if env_format == "structured":
            formatter = logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)-8s | "
                "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """
    Get a logger for a photobatch component.

    Args:
        component: Component name, e.g. "orchestrator". The logger is
            named "photobatch.<component>"; None returns the root
            "photobatch" logger.

    Returns:
        Configured logger instance
    """
    if component:
        return setup_logger(f"{ROOT_LOGGER_NAME}.{component}")
    return setup_logger(ROOT_LOGGER_NAME)


def enable_debug_logging() -> None:
    """Raise every configured photobatch logger to DEBUG."""
    global _forced_level
    _forced_level = logging.DEBUG
    manager = logging.Logger.manager
    for name, candidate in list(manager.loggerDict.items()):
        if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
            if isinstance(candidate, logging.Logger):
                candidate.setLevel(logging.DEBUG)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.DEBUG)
