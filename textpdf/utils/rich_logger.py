"""
Rich logging for TextPDF.

Console logging through the rich library, used by the command line.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .logger import DEFAULT_FORMAT, DATE_FORMAT, _level


def _rich_handler(console: Console) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def setup_logging(
    level: str = "INFO",
    use_rich: bool = True,
    console: Optional[Console] = None,
) -> None:
    """
    Setup logging for the application.

    Args:
        level: Log level
        use_rich: Whether to use rich logging
        console: Console to log to (stderr by default)
    """
    numeric_level = _level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    if use_rich:
        root_logger.addHandler(_rich_handler(console or Console(stderr=True)))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(handler)
