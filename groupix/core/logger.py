"""
Centralized logger configuration for Groupix.

Library modules log through standard Python loggers in the 'groupix'
namespace. The command line installs a rich console handler on top.

Usage:
    from groupix.core.logger import get_logger
    logger = get_logger(__name__)
    logger.info("Message")
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "groupix"


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        A standard Python logger with at least a NullHandler attached
    """
    logger = logging.getLogger(name)

    # Avoid "No handler found" warnings when used as a library
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def configure_logging(
    verbose: bool = False,
    console: Console | None = None,
) -> logging.Logger:
    """
    Send Groupix logs to the terminal through rich.

    Args:
        verbose: Log DEBUG records as well as INFO and above
        console: Console to render to (defaults to stderr)

    Returns:
        The configured 'groupix' logger
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
