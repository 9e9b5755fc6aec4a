"""
DocMirror Publish Pipeline.

One publish cycle: clear the destination, copy the source, resolve includes.
Requires Python 3.11+.
"""

import time
from dataclasses import dataclass
from pathlib import Path

from publisher.include_resolver import IncludeResolver
from publisher.mirror import DirectoryMirror
from utils.logger import LoggerMixin


@dataclass
class PublishResult:
    """Outcome of one publish cycle."""

    files_copied: int = 0
    files_resolved: int = 0
    includes_resolved: int = 0
    includes_dangling: int = 0
    files_skipped: int = 0
    error: str | None = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """Check if the cycle completed."""
        return self.error is None


class Publisher(LoggerMixin):
    """
    Publishes a source tree into a destination tree.

    Any OSError or UnicodeError aborts the cycle and is reported through
    the returned PublishResult rather than raised; the next cycle starts
    from scratch.
    """

    def __init__(
        self,
        source: Path,
        destination: Path,
        mirror: DirectoryMirror | None = None,
        resolver: IncludeResolver | None = None,
    ) -> None:
        """
        Initialize the publisher.

        Args:
            source: Directory to publish from
            destination: Directory to publish into (fully overwritten)
            mirror: Directory mirror to use
            resolver: Include resolver to use
        """
        self._source = source
        self._destination = destination
        self._mirror = mirror or DirectoryMirror()
        self._resolver = resolver or IncludeResolver()
        self._cycles = 0

    @property
    def cycles(self) -> int:
        """Number of publish cycles attempted."""
        return self._cycles

    def publish(self) -> PublishResult:
        """
        Run one full publish cycle.

        Returns:
            PublishResult describing the cycle
        """
        self._cycles += 1
        result = PublishResult()
        start_time = time.perf_counter()

        try:
            result.files_copied = self._mirror.mirror(self._source, self._destination)
            stats = self._resolver.resolve_tree(self._destination)
        except (OSError, UnicodeError) as e:
            result.error = str(e)
            result.duration_ms = (time.perf_counter() - start_time) * 1000
            self.log.error(
                "publish_failed",
                source=str(self._source),
                destination=str(self._destination),
                error=str(e),
            )
            return result

        result.files_resolved = stats.files
        result.includes_resolved = stats.includes_resolved
        result.includes_dangling = stats.includes_dangling
        result.files_skipped = stats.files_skipped
        result.duration_ms = (time.perf_counter() - start_time) * 1000

        self.log.info(
            "publish_completed",
            files=result.files_copied,
            includes_resolved=result.includes_resolved,
            includes_dangling=result.includes_dangling,
            duration_ms=round(result.duration_ms, 2),
        )
        return result
