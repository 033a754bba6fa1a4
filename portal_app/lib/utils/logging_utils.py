"""
Logging utilities for the portal access-control engine.

Provides category-based logging filtering
"""

import logging
import sys
from typing import Optional


class CategoryFilter(logging.Filter):
    """Filter log records by category prefix"""

    def __init__(self, categories: list[str]):
        super().__init__()
        self.categories = categories

    def filter(self, record: logging.LogRecord) -> bool:
        # If no categories specified, allow all
        if not self.categories:
            return True

        # Check if logger name starts with any allowed category
        return any(record.name.startswith(cat) for cat in self.categories)


def setup_logging(log_level: str = "INFO", log_categories: Optional[list[str]] = None):
    """
    Configure logging for the application.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_categories: List of category prefixes to log (empty = all),
            e.g. ["portal_app.lib.permissions"] to trace access decisions only
    """
    if log_categories is None:
        log_categories = []

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    # Remove existing handlers
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, log_level.upper()))

    # Format: timestamp - level - name - message
    formatter = logging.Formatter(
        fmt='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)

    if log_categories:
        handler.addFilter(CategoryFilter(log_categories))

    root_logger.addHandler(handler)

    # Keep uvicorn output in the same format when served programmatically
    for uvicorn_logger_name in ['uvicorn', 'uvicorn.error', 'uvicorn.access']:
        uvicorn_logger = logging.getLogger(uvicorn_logger_name)
        for uvicorn_handler in uvicorn_logger.handlers:
            uvicorn_handler.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module/category.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
