"""
Logging Configuration Module
============================

Provides centralized logging configuration for the credential report tool.

Console output goes through Rich on stderr so that JSON written to stdout
stays machine readable. A plain-text file log can be added alongside.

Functions
---------
setup_logging
    Configure application-wide logging.
get_logger
    Get a logger for a specific module.

Example
-------
>>> from src.core.logging import setup_logging, get_logger
>>>
>>> setup_logging(level="DEBUG", log_file="credential-report.log")
>>> logger = get_logger(__name__)
>>> logger.info("Generating credential report")

See Also
--------
logging : Python standard library logging module.
rich.logging : Rich library's logging handler.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are far too chatty at DEBUG
NOISY_LOGGERS = ("boto3", "botocore", "urllib3")


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[str] = None,
    rich_tracebacks: bool = True,
    console: Optional[Console] = None,
) -> None:
    """
    Configure application-wide logging.

    Parameters
    ----------
    level : str or int, default="INFO"
        Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    log_file : str, optional
        Path to log file. If provided, logs will also be written there.
    rich_tracebacks : bool, default=True
        Whether to use Rich for exception tracebacks.
    console : Console, optional
        Rich Console instance. Defaults to a new stderr console.

    Notes
    -----
    Existing root handlers are replaced, so calling this twice does not
    duplicate output.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    rich_console = console or Console(stderr=True)
    console_handler = RichHandler(
        console=rich_console,
        show_time=True,
        show_path=False,
        rich_tracebacks=rich_tracebacks,
        tracebacks_show_locals=False,
        markup=False,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT)
        )
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.debug(
        f"Logging configured: level={logging.getLevelName(level)}, "
        f"file={log_file or 'None'}"
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Parameters
    ----------
    name : str
        Logger name (typically __name__ from the calling module).

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    return logging.getLogger(name)
