"""
Logging utilities for objectquery.
"""

import logging
import sys
from typing import Optional


# Default format
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Module-level logger cache
_loggers: dict = {}


def setup_logger(
    name: str = "objectquery",
    level: str = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Set up and configure a logger.
    
    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
        log_file: Optional file path for logging
        
    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    
    # Replace handlers from an earlier setup
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    
    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
    )
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    
    _loggers[name] = logger
    
    return logger


def get_logger(name: str = "objectquery") -> logging.Logger:
    """
    Get a logger by name.
    
    Loggers below the ``objectquery`` namespace are left unconfigured so
    their records propagate to the package logger.
    
    Args:
        name: Logger name
        
    Returns:
        Logger instance (creates default if not exists)
    """
    if name in _loggers:
        return _loggers[name]
    if name != "objectquery" and name.startswith("objectquery."):
        return logging.getLogger(name)
    return setup_logger(name)


def configure_from_settings(settings) -> logging.Logger:
    """Configure the package logger from a ``Settings`` object."""
    return setup_logger(
        "objectquery",
        level=settings.log_level,
        log_file=settings.log_file,
    )


class LogContext:
    """Context manager for temporary log level changes."""
    
    def __init__(self, logger: logging.Logger, level: str):
        self.logger = logger
        self.new_level = getattr(logging, level.upper())
        self.old_level = logger.level
    
    def __enter__(self):
        self.logger.setLevel(self.new_level)
        return self.logger
    
    def __exit__(self, *args):
        self.logger.setLevel(self.old_level)
