"""Logging configuration for gitqa.

Library modules only create loggers; handlers are installed here, by the
CLI, once per process.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure logging with a rich handler on stderr.

    Args:
        verbose: Enable DEBUG level logging (WARNING otherwise)

    Returns:
        The configured ``gitqa`` logger
    """
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )

    logger = logging.getLogger("gitqa")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)

    return logger
