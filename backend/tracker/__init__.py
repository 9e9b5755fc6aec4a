"""
DocMirror Change Tracker Package.

Timestamp-based change detection.
Requires Python 3.11+.
"""

from tracker.change_tracker import ChangeTracker, FileTimestampTable

__all__ = [
    "ChangeTracker",
    "FileTimestampTable",
]
