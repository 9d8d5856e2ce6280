"""Utility modules for the sandbox harness."""

from .logging import setup_logging, get_logger
from .output import strip_ansi, forward_stream
from .retry import retry

__all__ = [
    "setup_logging",
    "get_logger",
    "strip_ansi",
    "forward_stream",
    "retry",
]
