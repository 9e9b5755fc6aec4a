"""
DocMirror Backend Utilities Package.

Common utilities shared across all backend modules.
Requires Python 3.11+.
"""

from utils.config import Settings, get_settings
from utils.errors import (
    DestinationInsideSourceError,
    DocMirrorError,
    InvalidIntervalError,
    InvalidPatternError,
    SourceInsideDestinationError,
    SourceNotFoundError,
)
from utils.logger import configure_logging, get_logger, LoggerMixin

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggerMixin",
    "DocMirrorError",
    "SourceNotFoundError",
    "InvalidPatternError",
    "DestinationInsideSourceError",
    "SourceInsideDestinationError",
    "InvalidIntervalError",
]
