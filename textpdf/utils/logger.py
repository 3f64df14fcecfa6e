"""
Logging helpers for TextPDF.

Provides module loggers with a default console handler and a root logger
configuration with optional rotating log file.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(level: str) -> int:
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {level}")
    return getattr(logging, level.upper())


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance for module.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    if not name or not isinstance(name, str):
        raise ValueError("Logger name must be a non-empty string")

    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(logging.INFO)
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(console_handler)

    return logger


def configure_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
        log_file: Log file path
        max_file_size: Maximum log file size in bytes
        backup_count: Number of backup files to keep
    """
    numeric_level = _level(level)
    formatter = logging.Formatter(format_string or DETAILED_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        add_file_handler(root_logger, log_file, level, formatter, max_file_size, backup_count)


def add_file_handler(
    logger: logging.Logger,
    file_path: str,
    level: str = "INFO",
    formatter: Optional[logging.Formatter] = None,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """Attach a rotating file handler to ``logger``."""
    if not isinstance(logger, logging.Logger):
        raise ValueError("Logger must be a logging.Logger instance")
    if not file_path or not isinstance(file_path, str):
        raise ValueError("File path must be a non-empty string")

    log_dir = os.path.dirname(file_path)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)

    file_handler = RotatingFileHandler(file_path, maxBytes=max_file_size, backupCount=backup_count)
    file_handler.setLevel(_level(level))
    file_handler.setFormatter(formatter or logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(file_handler)


def set_log_level(level: str) -> None:
    """Set the level of the root logger and all of its handlers."""
    numeric_level = _level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers:
        handler.setLevel(numeric_level)
