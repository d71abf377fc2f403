"""
Utility functions for objectquery.
"""

from .logging import setup_logger, get_logger, configure_from_settings, LogContext

__all__ = [
    "setup_logger",
    "get_logger",
    "configure_from_settings",
    "LogContext",
]
