"""
DocMirror File Watcher.

Cross-platform file system notifications using watchdog, drained
without blocking by the watch loop.
Requires Python 3.11+.
"""

import queue
from pathlib import Path
from typing import Any

from watchdog.observers import Observer
from watchdog.events import (
    FileSystemEventHandler,
    FileCreatedEvent,
    FileModifiedEvent,
    DirCreatedEvent,
    DirModifiedEvent,
)

from utils.config import get_settings
from utils.logger import LoggerMixin


class QueueingFileHandler(FileSystemEventHandler, LoggerMixin):
    """
    Queues created and modified file paths.

    Runs on the observer thread; the queue is the only state it shares
    with the watch loop. Directory events are ignored.
    """

    def __init__(self, events: "queue.Queue[Path]") -> None:
        """
        Initialize the file handler.

        Args:
            events: Queue receiving changed file paths
        """
        super().__init__()
        self._events = events

    def on_created(self, event: FileCreatedEvent | DirCreatedEvent) -> None:
        """Handle file/directory creation."""
        if event.is_directory:
            return

        self.log.debug("file_created", path=event.src_path)
        self._events.put(Path(event.src_path))

    def on_modified(self, event: FileModifiedEvent | DirModifiedEvent) -> None:
        """Handle file/directory modification."""
        if event.is_directory:
            return

        self.log.debug("file_modified", path=event.src_path)
        self._events.put(Path(event.src_path))


class FileWatcher(LoggerMixin):
    """
    Watches a directory for file creation and modification.

    Events accumulate in a queue until drain() is called.
    """

    def __init__(self, root_path: Path, recursive: bool | None = None) -> None:
        """
        Initialize the file watcher.

        Args:
            root_path: Root directory to watch
            recursive: Whether to watch subdirectories
        """
        settings = get_settings()

        self._root_path = root_path
        self._recursive = settings.watcher.recursive if recursive is None else recursive
        self._events: queue.Queue[Path] = queue.Queue()
        self._handler = QueueingFileHandler(self._events)

        self._observer: Observer | None = None
        self._running = False

    def start(self) -> None:
        """Start watching for file changes."""
        if self._running:
            return

        self._observer = Observer()
        self._observer.schedule(
            self._handler,
            str(self._root_path),
            recursive=self._recursive,
        )
        self._observer.start()
        self._running = True

        self.log.info(
            "file_watcher_started",
            path=str(self._root_path),
            recursive=self._recursive,
        )

    def stop(self) -> None:
        """Stop watching for file changes."""
        if not self._running:
            return

        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5.0)
            self._observer = None

        self._running = False
        self.log.info("file_watcher_stopped")

    def drain(self) -> list[Path]:
        """Take every pending event path without blocking."""
        paths: list[Path] = []
        while True:
            try:
                paths.append(self._events.get_nowait())
            except queue.Empty:
                return paths

    @property
    def handler(self) -> QueueingFileHandler:
        """The event handler feeding the queue."""
        return self._handler

    @property
    def is_running(self) -> bool:
        """Check if the watcher is running."""
        return self._running

    @property
    def pending_count(self) -> int:
        """Approximate number of undrained events."""
        return self._events.qsize()

    def __enter__(self) -> "FileWatcher":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.stop()
