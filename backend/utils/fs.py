"""
DocMirror Filesystem Helpers.

Deterministic tree walking shared by the tracker, mirror and resolver.
Requires Python 3.11+.
"""

import os
import re
from collections.abc import Callable, Iterator
from pathlib import Path

from utils.errors import InvalidPatternError


def _raise(error: OSError) -> None:
    raise error


def walk_tree(
    root: Path,
    topdown: bool = True,
    onerror: Callable[[OSError], None] = _raise,
) -> Iterator[tuple[Path, list[str], list[str]]]:
    """
    Walk a directory tree in sorted order.

    Unlike a bare os.walk, errors are raised by default instead of
    silently skipped.

    Args:
        root: Directory to walk
        topdown: Yield a directory before (True) or after (False) its children
        onerror: Called with each OSError hit while listing a directory

    Yields:
        (directory, sorted subdirectory names, sorted file names)
    """
    for dirpath, dirnames, filenames in os.walk(root, topdown=topdown, onerror=onerror):
        dirnames.sort()
        yield Path(dirpath), dirnames, sorted(filenames)


def list_files(root: Path, onerror: Callable[[OSError], None] = _raise) -> list[Path]:
    """List every regular file under root in a stable order."""
    files: list[Path] = []
    for directory, _, filenames in walk_tree(root, onerror=onerror):
        for name in filenames:
            path = directory / name
            try:
                is_file = path.is_file()
            except OSError as e:
                onerror(e)
                continue
            if is_file:
                files.append(path)
    return files


def compile_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """
    Compile a file name pattern.

    Raises:
        InvalidPatternError: If the pattern is not a valid regex
    """
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def name_matches(path: Path, pattern: re.Pattern[str]) -> bool:
    """Check whether a path's file name fully matches the pattern."""
    return pattern.fullmatch(path.name) is not None
