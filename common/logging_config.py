"""
Logging Configuration for the Storm Forcing System.

This module provides the shared logger factory and a scoped file handler used
to write the one-time diagnostic summary produced at initialization.
"""

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union


# Configure root logger for the package
def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Get a logger configured for the storm forcing system.

    Parameters
    ----------
    name : str
        Logger name (typically __name__).
    level : int
        Logging level.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


@contextmanager
def file_logging(logger: logging.Logger, path: Union[str, Path]) -> Iterator[logging.Logger]:
    """Temporarily mirror a logger into a plain-text file.

    The file is truncated on entry and the handler is flushed, closed and
    detached on every exit path.

    Parameters
    ----------
    logger : logging.Logger
        Logger whose records are mirrored.
    path : str or Path
        Output file.

    Yields
    ------
    logging.Logger
        The same logger, for convenience.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(path, mode='w')
    file_handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(file_handler)
    try:
        yield logger
    finally:
        logger.removeHandler(file_handler)
        file_handler.flush()
        file_handler.close()
