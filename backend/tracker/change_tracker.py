"""
DocMirror Change Tracker.

Detects source changes by comparing file modification timestamps.
Requires Python 3.11+.
"""

import re
from collections.abc import Iterator
from pathlib import Path

from utils.fs import compile_pattern, list_files, name_matches
from utils.logger import LoggerMixin


def timestamp_ms(path: Path) -> int:
    """Modification time of a file in whole milliseconds."""
    return path.stat().st_mtime_ns // 1_000_000


class FileTimestampTable:
    """
    Last observed modification timestamp per source file.

    Entries are added and updated but never pruned, so files removed
    from the source tree keep their last timestamp.
    """

    def __init__(self) -> None:
        self._timestamps: dict[Path, int] = {}

    def get(self, path: Path) -> int | None:
        """Get the stored timestamp for a path."""
        return self._timestamps.get(path)

    def update(self, path: Path, timestamp: int) -> bool:
        """
        Store a timestamp.

        Returns:
            True if the entry was absent or held a different value
        """
        changed = self._timestamps.get(path) != timestamp
        self._timestamps[path] = timestamp
        return changed

    def paths(self) -> list[Path]:
        """Get all tracked paths."""
        return list(self._timestamps.keys())

    def __contains__(self, path: object) -> bool:
        return path in self._timestamps

    def __len__(self) -> int:
        return len(self._timestamps)

    def __iter__(self) -> Iterator[Path]:
        return iter(self._timestamps)


class ChangeTracker(LoggerMixin):
    """
    Polls a tree for modified files.

    This is a coarse poll: several edits to one file between two polls
    are reported as a single change.
    """

    def initialize(self, root: Path) -> FileTimestampTable:
        """
        Record the timestamp of every regular file under root.

        No name filtering is applied here.

        Args:
            root: Directory to scan

        Returns:
            Populated FileTimestampTable
        """
        table = FileTimestampTable()
        for path in list_files(root, onerror=self._walk_failed):
            timestamp = self._stat(path)
            if timestamp is not None:
                table.update(path, timestamp)

        self.log.info("timestamps_initialized", root=str(root), files=len(table))
        return table

    def changed_since(
        self,
        root: Path,
        table: FileTimestampTable,
        pattern: str | re.Pattern[str],
    ) -> list[Path]:
        """
        Find matching files whose timestamp differs from the table.

        The table is updated with every new timestamp observed.

        Args:
            root: Directory to scan
            table: Table to compare against and update
            pattern: Regex that file names must fully match

        Returns:
            Paths that are new or changed
        """
        compiled = compile_pattern(pattern)
        changed: list[Path] = []

        for path in list_files(root, onerror=self._walk_failed):
            if not name_matches(path, compiled):
                continue
            timestamp = self._stat(path)
            if timestamp is None:
                continue
            if table.update(path, timestamp):
                changed.append(path)

        if changed:
            self.log.info(
                "changes_detected",
                root=str(root),
                count=len(changed),
                paths=[str(p) for p in changed],
            )
        return changed

    def check_for_updates(
        self,
        root: Path,
        table: FileTimestampTable,
        pattern: str | re.Pattern[str],
    ) -> bool:
        """
        Check whether any matching file changed since the last scan.

        Args:
            root: Directory to scan
            table: Table to compare against and update
            pattern: Regex that file names must fully match

        Returns:
            True if at least one matching file is new or changed
        """
        return bool(self.changed_since(root, table, pattern))

    def _walk_failed(self, error: OSError) -> None:
        """Log a directory that could not be listed and keep scanning."""
        self.log.warning(
            "scan_failed",
            path=str(error.filename) if error.filename else None,
            error=str(error),
        )

    def _stat(self, path: Path) -> int | None:
        """Timestamp of a file, or None if it vanished or cannot be read."""
        try:
            return timestamp_ms(path)
        except OSError as e:
            self.log.warning("timestamp_read_failed", path=str(path), error=str(e))
            return None
