#!/usr/bin/env python3
"""
DocMirror Watch Script.

Mirrors a documentation tree and republishes it whenever it changes.
Requires Python 3.11+.

Usage:
    python scripts/watch_publish.py docs/ dist/ '.*\\.(md|html)'
"""

import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from cli.main import run


if __name__ == "__main__":
    run()
