"""
DocMirror Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

from pathlib import Path

import pytest


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """Create a small documentation tree to publish."""
    source = tmp_path / "src"
    source.mkdir()

    (source / "index.md").write_bytes(
        b"# Title\n<!-- include::header.md -->\nBody text\n"
    )
    (source / "header.md").write_bytes(b"line one\nline two\n")
    (source / "notes.txt").write_bytes(b"plain notes\n")

    guide = source / "guide"
    guide.mkdir()
    (guide / "intro.md").write_bytes(b"Intro\n<!-- include::missing.md -->\nEnd\n")

    deep = guide / "deep"
    deep.mkdir()
    (deep / "footer.md").write_bytes(b"footer\n")

    return source


@pytest.fixture
def destination(tmp_path: Path) -> Path:
    """Destination directory path (not created)."""
    return tmp_path / "dist"
