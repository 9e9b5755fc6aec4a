"""
DocMirror Watch Loop.

Drives publishing from two sources: notifier events and a periodic
staleness poll.
Requires Python 3.11+.
"""

import re
import time
from collections.abc import Callable
from pathlib import Path

from publisher.pipeline import Publisher, PublishResult
from tracker.change_tracker import ChangeTracker, FileTimestampTable
from utils.config import get_settings
from utils.errors import (
    DestinationInsideSourceError,
    InvalidIntervalError,
    SourceInsideDestinationError,
    SourceNotFoundError,
)
from utils.fs import compile_pattern, name_matches
from utils.logger import LoggerMixin
from watcher.file_watcher import FileWatcher


class WatchLoop(LoggerMixin):
    """
    Watches a source tree and republishes it on change.

    Everything runs on the calling thread. A publish always finishes
    before the loop checks for the next change.
    """

    def __init__(
        self,
        source: Path,
        destination: Path,
        pattern: str | re.Pattern[str],
        poll_interval: float | None = None,
        publisher: Publisher | None = None,
        tracker: ChangeTracker | None = None,
        watcher: FileWatcher | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the watch loop.

        Args:
            source: Directory to watch and publish
            destination: Directory to publish into
            pattern: Regex that watched file names must fully match
            poll_interval: Seconds to sleep between iterations

        Raises:
            InvalidPatternError: If pattern is not a valid regex
            SourceNotFoundError: If source is not a directory
            DestinationInsideSourceError: If destination is source or lies within it
            SourceInsideDestinationError: If source lies within destination
            InvalidIntervalError: If poll_interval is not positive
        """
        settings = get_settings()

        self._source = source.resolve()
        self._destination = destination.resolve()
        self._pattern = compile_pattern(pattern)

        if not self._source.is_dir():
            raise SourceNotFoundError(source)
        if self._destination == self._source or self._destination.is_relative_to(self._source):
            raise DestinationInsideSourceError(self._source, self._destination)
        if self._source.is_relative_to(self._destination):
            raise SourceInsideDestinationError(self._source, self._destination)

        if poll_interval is None:
            poll_interval = settings.watcher.poll_interval_seconds
        if not poll_interval > 0:
            raise InvalidIntervalError(poll_interval)
        self._poll_interval = poll_interval
        self._publisher = publisher or Publisher(self._source, self._destination)
        self._tracker = tracker or ChangeTracker()
        self._watcher = watcher or FileWatcher(self._source)
        self._sleep = sleep

        self._table: FileTimestampTable | None = None
        self._last_result: PublishResult | None = None

    @property
    def table(self) -> FileTimestampTable | None:
        """Timestamp table owned by this loop (None before start)."""
        return self._table

    @property
    def last_result(self) -> PublishResult | None:
        """Result of the most recent publish."""
        return self._last_result

    def start(self) -> PublishResult:
        """
        Record initial timestamps, publish once, and start the notifier.

        Returns:
            Result of the initial publish
        """
        self.log.info(
            "watch_started",
            source=str(self._source),
            destination=str(self._destination),
            pattern=self._pattern.pattern,
        )
        self._table = self._tracker.initialize(self._source)
        result = self.publish()
        self._watcher.start()
        return result

    def stop(self) -> None:
        """Stop the notifier."""
        self._watcher.stop()

    def publish(self) -> PublishResult:
        """Run one publish cycle."""
        self._last_result = self._publisher.publish()
        return self._last_result

    def run_once(self) -> int:
        """
        Handle pending notifier events, then poll for stale files.

        Every qualifying notifier event triggers its own publish. The
        poll triggers at most one.

        Returns:
            Number of publishes triggered
        """
        if self._table is None:
            self._table = self._tracker.initialize(self._source)

        triggered = 0
        for path in self._watcher.drain():
            if name_matches(path, self._pattern) and self._is_file(path):
                self.log.info("change_detected", path=str(path))
                self.publish()
                triggered += 1

        if self._tracker.check_for_updates(self._source, self._table, self._pattern):
            self.publish()
            triggered += 1

        return triggered

    def _is_file(self, path: Path) -> bool:
        """Check an event path, treating unreadable paths as absent."""
        try:
            return path.is_file()
        except OSError as e:
            self.log.warning("event_path_unreadable", path=str(path), error=str(e))
            return False

    def run(self, max_iterations: int | None = None) -> None:
        """
        Publish once, then watch until interrupted.

        Args:
            max_iterations: Stop after this many iterations (None runs forever)
        """
        self.start()
        try:
            iterations = 0
            while max_iterations is None or iterations < max_iterations:
                self.run_once()
                iterations += 1
                self._sleep(self._poll_interval)
        finally:
            self.stop()
