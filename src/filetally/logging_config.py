"""
Logging configuration for filetally.

Records go to stderr through a rich handler so the ranked report on stdout
stays machine-readable. Directory walks run on worker threads named
``filetally-<dir>``; in verbose mode the console shows that thread name in
front of each message, and the optional log file always records it.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .exceptions import InvalidPathError

ROOT_LOGGER = "filetally"

FILE_FORMAT = "%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the filetally logger hierarchy.

    Args:
        verbose: Enable DEBUG level logging with thread names on the console
        quiet: Suppress all but ERROR level logging
        log_file: Optional file to append log records to

    Returns:
        Configured logger instance for filetally

    Raises:
        InvalidPathError: If log_file cannot be opened for appending
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=True,
        show_path=verbose,
    )
    if verbose:
        console_handler.setFormatter(logging.Formatter("[%(threadName)s] %(message)s"))

    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as e:
            raise InvalidPathError(Path(log_file), e.strerror or str(e), option="--log-file") from e
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    # force=True so repeated CLI invocations in one process reconfigure
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger below the filetally root logger.

    Args:
        name: Module name, usually ``__name__``. Names outside the
              ``filetally`` hierarchy are nested under it.

    Returns:
        Logger instance
    """
    if name is None or name == ROOT_LOGGER:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
