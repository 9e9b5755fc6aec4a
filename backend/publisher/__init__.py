"""
DocMirror Publisher Package.

Directory mirroring and include resolution.
Requires Python 3.11+.
"""

from publisher.charset import TextEncoding, detect_encoding, detect_file_encoding
from publisher.mirror import DirectoryMirror
from publisher.include_resolver import IncludeResolver
from publisher.pipeline import Publisher, PublishResult

__all__ = [
    "TextEncoding",
    "detect_encoding",
    "detect_file_encoding",
    "DirectoryMirror",
    "IncludeResolver",
    "Publisher",
    "PublishResult",
]
