"""Logging setup for the pinleague logger tree.

Engine modules log through `pinleague.<module>` loggers and never configure
handlers themselves; scripts call setup_logging() once at start-up.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

ROOT_LOGGER = 'pinleague'

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'


def level_for(verbose: bool = False, quiet: bool = False) -> int:
    """Log level for a script's --verbose / --quiet flags; verbose wins."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path | str] = None,
    stream=None,
) -> logging.Logger:
    """
    Configure the 'pinleague' logger.

    Console output goes to stderr (or `stream`) in a short format so that
    report text on stdout stays clean. With `log_file`, a second handler
    writes the detailed format, including source location, to that file.

    Calling this again replaces the handlers from the previous call.

    Args:
        level: Level for the logger and its handlers
        log_file: Optional path of a log file to append to
        stream: Console stream (default: sys.stderr)

    Returns:
        The configured 'pinleague' logger

    Example:
        logger = setup_logging(level_for(verbose=True), log_file='logs/report.log')
        logger.debug("Loaded league 1")
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Logger under the pinleague tree; 'report' becomes 'pinleague.report'."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + '.'):
        name = f'{ROOT_LOGGER}.{name}'
    return logging.getLogger(name)
