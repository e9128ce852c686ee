"""
Logging setup for gtfinal.

All modules log through ``logging.getLogger(__name__)``. Applications call
:func:`setup_logging` once; it sends records to a rich console on stderr and
optionally to a plain-text file. A ``TRACE`` level sits below DEBUG for
per-record annotation dispatch messages, which are too noisy for DEBUG.
"""

import logging
import time
from collections.abc import Callable
from contextlib import contextmanager
from functools import wraps
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

__all__ = [
    "TRACE",
    "get_logger",
    "log_call",
    "setup_logging",
    "timed",
]

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

FILE_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# stdout stays free for callers that stream finalized records
_stderr_console = Console(stderr=True)


def _resolve_level(verbose: bool, trace: bool) -> int:
    if trace:
        return TRACE
    if verbose:
        return logging.DEBUG
    return logging.INFO


def setup_logging(verbose: bool = False, log_file: str | None = None, trace: bool = False) -> None:
    """
    Route gtfinal logging to the console and, optionally, a file.

    Args:
        verbose: Log at DEBUG instead of INFO.
        log_file: Also append plain-text records to this path.
        trace: Log at TRACE; takes precedence over ``verbose``.
    """
    level = _resolve_level(verbose, trace)
    console_handler = RichHandler(
        console=_stderr_console,
        rich_tracebacks=True,
        markup=False,
        show_path=level < logging.INFO,
    )
    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given module name."""
    return logging.getLogger(name)


@contextmanager
def timed(operation: str, logger: logging.Logger | None = None):
    """
    Log the wall-clock duration of the enclosed block at DEBUG.

    Example:
        with timed("Finalizing chr20", logger):
            finalized = pipeline.run(records)
    """
    log = logger or logging.getLogger(__name__)
    log.debug("Starting: %s", operation)
    started = time.perf_counter()
    try:
        yield
    finally:
        log.debug("Completed: %s (%.3fs)", operation, time.perf_counter() - started)


def log_call(logger: logging.Logger | None = None) -> Callable:
    """
    Decorate a function so its calls are logged at DEBUG and its failures at ERROR.

    Exceptions propagate unchanged.
    """

    def decorator(func: Callable) -> Callable:
        name = func.__qualname__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            log = logger or logging.getLogger(func.__module__)
            log.debug("Calling %s", name)
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log.error("%s failed: %s", name, e)
                raise
            log.debug("%s completed (%.3fs)", name, time.perf_counter() - started)
            return result

        return wrapper

    return decorator
