"""
Global Logging Configuration with Optional Dataset Context Support

This module configures consistent logging for the application, including:
- Console output (INFO+)
- Rotating file output (DEBUG+)
- Per-dataset contextual logging using `contextvars`

Responsibilities:
-----------------
- Configures unified logging with timestamps, levels and the logger name
- Optionally includes `[DATASET:key]` tags in logs while a dataset
  is being loaded or refreshed by the scheduler
- Ensures logs remain structured even when no dataset is set

Usage:
------
1. Call `setup_logging()` in your application entry point.

    from seoulfit.core.logger import setup_logging
    setup_logging()

2. In dataset loading coroutines, call `set_dataset_context(...)` to enable context:

    from seoulfit.core.logger import set_dataset_context
    set_dataset_context("bike_stations")

This will prefix all log messages with the current dataset key.

Example:
    2025-07-02 09:00:10 [INFO] [seoulfit.data.scheduler] [DATASET:bike_stations] Cached 2000 rows
"""

import logging
import logging.handlers
import contextvars
from seoulfit.core.config import LOG_FILE

_log_dataset = contextvars.ContextVar("log_dataset", default="-")


def set_dataset_context(key: str) -> contextvars.Token:
    """
    Sets the logging context for the dataset currently being processed.

    Each asyncio task runs in a copy of the context, so the tag never leaks
    into request handlers running concurrently.

    Args:
        key (str): Dataset key used as the identifier.

    Returns:
        contextvars.Token: Token that can be passed to `reset_dataset_context`.
    """
    return _log_dataset.set(key)

def reset_dataset_context(token: contextvars.Token) -> None:
    _log_dataset.reset(token)

def get_dataset_context() -> str:
    """
    Retrieves the currently set dataset identifier for logging.

    Returns:
        str: The currently active dataset key or "-" if not set.
    """
    return _log_dataset.get()


class ContextFilter(logging.Filter):
    """
    Logging filter that injects the current dataset context into each log record.
    """
    def filter(self, record: logging.LogRecord) -> bool:
        dataset = get_dataset_context()
        record.dataset = f"[DATASET:{dataset}]" if dataset != "-" else ""
        return True

class SafeFormatter(logging.Formatter):
    """
    Custom formatter that avoids crashing on missing fields.

    Records emitted through handlers without the `ContextFilter` still format.
    """
    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "dataset"):
            record.dataset = ""
        return super().format(record)


def setup_logging(
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5
) -> None:
    """
    Configures application-wide logging with console and rotating file output.

    Both handlers include `[DATASET:key]` if `set_dataset_context(...)`
    has been called in the current execution context.

    Args:
        console_level (int): Logging level for console (default: INFO).
        file_level (int): Logging level for file output (default: DEBUG).
        max_bytes (int): Max size in bytes before file rotation.
        backup_count (int): Number of backup files to keep.
    """
    formatter = SafeFormatter(
        fmt="%(asctime)s [%(levelname)s] [%(name)s] %(dataset)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(ContextFilter())

    file_handler = logging.handlers.RotatingFileHandler(
        LOG_FILE, mode="a", maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    file_handler.addFilter(ContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers = [console_handler, file_handler]
