"""
DocMirror Include Resolver.

Replaces include directives in mirrored files with the contents of the
files they name.
Requires Python 3.11+.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

from publisher.charset import TextEncoding, detect_file_encoding
from utils.config import get_settings
from utils.fs import list_files
from utils.logger import LoggerMixin

INCLUDE_MARKER = "<!-- include::"
INCLUDE_TERMINATOR = " -->"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    """
    Split text into lines without their terminators.

    Recognizes \\r\\n, \\r and \\n. A terminator at the very end does not
    start another (empty) line.
    """
    lines = _LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def parse_directive(line: str) -> str | None:
    """
    Extract the file name from an include directive line.

    Returns:
        The referenced file name, or None if the line holds no
        well-formed directive
    """
    start = line.find(INCLUDE_MARKER)
    if start < 0:
        return None
    start += len(INCLUDE_MARKER)
    end = line.find(INCLUDE_TERMINATOR, start)
    if end < 0:
        return None
    return line[start:end]


@dataclass
class FileResolution:
    """Outcome of resolving one file."""

    path: Path
    encoding: TextEncoding | None = None
    resolved: list[str] = field(default_factory=list)
    dangling: list[str] = field(default_factory=list)
    skipped: bool = False


@dataclass
class ResolveStats:
    """Totals for one pass over a tree."""

    files: int = 0
    includes_resolved: int = 0
    includes_dangling: int = 0
    files_skipped: int = 0

    def add(self, result: FileResolution) -> None:
        """Fold a single file's outcome into the totals."""
        self.files += 1
        self.includes_resolved += len(result.resolved)
        self.includes_dangling += len(result.dangling)
        if result.skipped:
            self.files_skipped += 1


class IncludeResolver(LoggerMixin):
    """
    Resolves `<!-- include::name -->` directives across a tree.

    Includes are looked up by base name among all files present in the
    tree when the pass starts. Included content is not itself scanned
    for directives. OSError from reading or writing any file propagates.
    """

    def __init__(
        self,
        line_separator: str | None = None,
        fallback_encoding: str | None = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            line_separator: Terminator appended after ordinary lines
            fallback_encoding: Codec for files without a byte-order mark
        """
        settings = get_settings()
        self._line_separator = line_separator or settings.publish.line_separator
        self._fallback = fallback_encoding or settings.publish.fallback_encoding

    def resolve_tree(self, root: Path) -> ResolveStats:
        """
        Resolve directives in every file under root.

        Args:
            root: Mirrored tree to rewrite in place

        Returns:
            ResolveStats for the pass
        """
        universe = list_files(root)
        stats = ResolveStats()

        for path in universe:
            stats.add(self.resolve_file(path, universe))

        self.log.debug(
            "tree_resolved",
            root=str(root),
            files=stats.files,
            includes_resolved=stats.includes_resolved,
            includes_dangling=stats.includes_dangling,
        )
        return stats

    def resolve_file(self, path: Path, universe: list[Path]) -> FileResolution:
        """
        Rewrite one file with its directives replaced.

        Args:
            path: File to rewrite
            universe: Files that directives may refer to

        Returns:
            FileResolution describing what was done
        """
        result = FileResolution(path=path)
        encoding = detect_file_encoding(path, self._fallback)
        result.encoding = encoding

        text = self._read_text(path, encoding)
        if text is None:
            result.skipped = True
            return result

        parts: list[str] = []
        for line in split_lines(text):
            if INCLUDE_MARKER not in line:
                parts.append(line)
                parts.append(self._line_separator)
                continue

            name = parse_directive(line)
            target = self._find(name, universe) if name is not None else None
            included = self._read_included(target) if target is not None else None

            if included is None:
                parts.append(line)
                result.dangling.append(name if name is not None else line)
                continue

            parts.extend(included)
            result.resolved.append(name)

        try:
            data = encoding.encode("".join(parts))
        except UnicodeEncodeError as e:
            self.log.warning(
                "unencodable_file_skipped",
                path=str(path),
                encoding=encoding.name,
                error=str(e),
            )
            result.skipped = True
            return result
        path.write_bytes(data)

        if result.resolved or result.dangling:
            self.log.debug(
                "includes_processed",
                path=str(path),
                resolved=result.resolved,
                dangling=result.dangling,
            )
        return result

    def _find(self, name: str, universe: list[Path]) -> Path | None:
        """First file in the universe whose base name equals name."""
        for candidate in universe:
            if candidate.name == name:
                return candidate
        return None

    def _read_included(self, target: Path) -> list[str] | None:
        """Lines of an include target, or None if it cannot be decoded."""
        text = self._read_text(target, detect_file_encoding(target, self._fallback))
        if text is None:
            return None
        return split_lines(text)

    def _read_text(self, path: Path, encoding: TextEncoding) -> str | None:
        """Decode a file, returning None when its bytes do not fit the encoding."""
        data = path.read_bytes()
        try:
            return encoding.decode(data)
        except UnicodeDecodeError as e:
            self.log.warning(
                "undecodable_file_skipped",
                path=str(path),
                encoding=encoding.name,
                error=str(e),
            )
            return None
