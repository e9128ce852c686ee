"""
Utility modules for gtfinal.

Provides logging, timing and attribute-parsing helpers.
"""

from .logging import TRACE, get_logger, log_call, setup_logging, timed

__all__ = [
    "TRACE",
    "get_logger",
    "log_call",
    "setup_logging",
    "timed",
]
