"""
DocMirror Exceptions.

Setup failures that abort the process.
Requires Python 3.11+.
"""

from pathlib import Path


class DocMirrorError(Exception):
    """Base class for unrecoverable setup errors."""


class SourceNotFoundError(DocMirrorError):
    """The source directory does not exist or is not a directory."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Source directory does not exist: {path}")
        self.path = path


class InvalidPatternError(DocMirrorError):
    """The file name pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid file name pattern {pattern!r}: {reason}")
        self.pattern = pattern


class DestinationInsideSourceError(DocMirrorError):
    """The destination would be mirrored into itself."""

    def __init__(self, source: Path, destination: Path) -> None:
        super().__init__(
            f"Destination {destination} must not be inside source {source}"
        )
        self.source = source
        self.destination = destination


class SourceInsideDestinationError(DocMirrorError):
    """Clearing the destination would delete the source."""

    def __init__(self, source: Path, destination: Path) -> None:
        super().__init__(
            f"Destination {destination} must not contain source {source}"
        )
        self.source = source
        self.destination = destination


class InvalidIntervalError(DocMirrorError):
    """The poll interval is not a positive number of seconds."""

    def __init__(self, interval: float) -> None:
        super().__init__(f"Poll interval must be positive, got {interval}")
        self.interval = interval
