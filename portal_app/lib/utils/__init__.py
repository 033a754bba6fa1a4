"""
Utility functions and helpers.
"""

from portal_app.lib.utils.logging_utils import setup_logging, get_logger

__all__ = ["setup_logging", "get_logger"]
