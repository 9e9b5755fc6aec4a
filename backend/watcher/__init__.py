"""
DocMirror Watcher Package.

File system monitoring and the publish loop.
Requires Python 3.11+.
"""

from watcher.file_watcher import FileWatcher
from watcher.watch_loop import WatchLoop

__all__ = ["FileWatcher", "WatchLoop"]
