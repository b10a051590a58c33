"""Logging setup for flutter-cleaner."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "flutter_cleaner"


def setup_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """
    Attach a rich handler to the package logger.

    Safe to call more than once; the handler is installed only the first time.

    Args:
        verbose: Log at DEBUG instead of WARNING
        console: Console to write to (defaults to stderr)

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
