"""
DocMirror Directory Mirror.

Clears the destination tree and copies the source tree into it.
Requires Python 3.11+.
"""

import shutil
from pathlib import Path

from utils.fs import walk_tree
from utils.logger import LoggerMixin


class DirectoryMirror(LoggerMixin):
    """
    Mirrors a source tree into a destination directory.

    There is no transactional guarantee: an OSError part way through
    leaves the destination partially updated and propagates to the caller.
    """

    def clear(self, destination: Path) -> None:
        """
        Empty the destination directory, creating it if needed.

        Files are removed before the directories holding them, walking
        bottom-up so each directory is empty when it is removed.

        Args:
            destination: Directory to clear
        """
        removed_files = 0
        if destination.exists():
            for directory, dirnames, filenames in walk_tree(destination, topdown=False):
                for name in filenames:
                    (directory / name).unlink()
                    removed_files += 1
                for name in dirnames:
                    child = directory / name
                    # Symlinked directories are listed as dirs but are links
                    if child.is_symlink():
                        child.unlink()
                    else:
                        child.rmdir()
            destination.rmdir()

        destination.mkdir(parents=True, exist_ok=True)
        self.log.debug("destination_cleared", path=str(destination), removed_files=removed_files)

    def copy(self, source: Path, destination: Path) -> int:
        """
        Recursively copy source into destination.

        Each directory is created before any file it contains is copied.

        Args:
            source: Directory to copy from
            destination: Directory to copy into

        Returns:
            Number of files copied
        """
        copied = 0
        for directory, _, filenames in walk_tree(source):
            target_dir = destination / directory.relative_to(source)
            target_dir.mkdir(parents=True, exist_ok=True)

            for name in filenames:
                file_path = directory / name
                if not file_path.is_file():
                    continue
                shutil.copyfile(file_path, target_dir / name)
                copied += 1

        self.log.debug(
            "tree_copied",
            source=str(source),
            destination=str(destination),
            files=copied,
        )
        return copied

    def mirror(self, source: Path, destination: Path) -> int:
        """Clear the destination, then copy the source into it."""
        self.clear(destination)
        return self.copy(source, destination)
