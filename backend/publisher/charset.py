"""
DocMirror Encoding Detector.

Byte-order-mark based text encoding classification.
Requires Python 3.11+.
"""

import codecs
from dataclasses import dataclass
from pathlib import Path

from utils.config import get_settings
from utils.logger import get_logger

logger = get_logger("charset")

PREFIX_LENGTH = 3


ESCAPE_OR_REPLACE = "docmirror-escape-or-replace"


def _escape_or_replace(error: UnicodeError) -> tuple[str | bytes, int]:
    """
    Codec error handler for BOM-less files.

    Surrogates produced by surrogateescape decoding go back out as the
    original bytes. Anything else the codec cannot represent becomes '?'.
    """
    if not isinstance(error, UnicodeEncodeError):
        raise error
    char = error.object[error.start]
    # One character at a time; the codec calls back for the rest
    if 0xDC80 <= ord(char) <= 0xDCFF:
        return bytes([ord(char) - 0xDC00]), error.start + 1
    return "?", error.start + 1


codecs.register_error(ESCAPE_OR_REPLACE, _escape_or_replace)


@dataclass(frozen=True)
class TextEncoding:
    """A detected text encoding and the byte-order mark that goes with it."""

    name: str
    codec: str
    bom: bytes = b""

    @property
    def decode_errors(self) -> str:
        """Error handler used when decoding."""
        # BOM-less fallback files may hold bytes the codec cannot map
        return "strict" if self.bom else "surrogateescape"

    @property
    def encode_errors(self) -> str:
        """Error handler used when encoding."""
        # Spliced text may carry characters or escaped bytes foreign to this codec
        return "replace" if self.bom else ESCAPE_OR_REPLACE

    def decode(self, data: bytes) -> str:
        """Decode raw file bytes, dropping the byte-order mark."""
        if self.bom and data.startswith(self.bom):
            data = data[len(self.bom):]
        return data.decode(self.codec, self.decode_errors)

    def encode(self, text: str) -> bytes:
        """Encode text, re-prepending the byte-order mark."""
        return self.bom + text.encode(self.codec, self.encode_errors)


UTF8_BOM = TextEncoding("utf-8-bom", "utf-8", codecs.BOM_UTF8)
UTF16_BE = TextEncoding("utf-16-be", "utf-16-be", codecs.BOM_UTF16_BE)
UTF16_LE = TextEncoding("utf-16-le", "utf-16-le", codecs.BOM_UTF16_LE)


def fallback_encoding(name: str | None = None) -> TextEncoding:
    """Build the encoding used for files without a byte-order mark."""
    codec = codecs.lookup(name or get_settings().publish.fallback_encoding).name
    return TextEncoding(codec, codec)


def detect_encoding(prefix: bytes, fallback: str | None = None) -> TextEncoding:
    """
    Classify a file's encoding from its leading bytes.

    Only the first three bytes are inspected. UTF-8 needs all three
    BOM bytes; the UTF-16 marks need two.

    Args:
        prefix: Leading bytes of the file (may be shorter than three)
        fallback: Codec name used when no BOM is present

    Returns:
        The detected TextEncoding
    """
    prefix = prefix[:PREFIX_LENGTH]
    if prefix == codecs.BOM_UTF8:
        return UTF8_BOM
    if prefix.startswith(codecs.BOM_UTF16_BE):
        return UTF16_BE
    if prefix.startswith(codecs.BOM_UTF16_LE):
        return UTF16_LE
    return fallback_encoding(fallback)


def detect_file_encoding(path: Path, fallback: str | None = None) -> TextEncoding:
    """
    Detect the encoding of a file on disk.

    Read errors are logged and answered with the fallback encoding.
    """
    try:
        with path.open("rb") as f:
            prefix = f.read(PREFIX_LENGTH)
    except OSError as e:
        logger.warning("encoding_detection_failed", path=str(path), error=str(e))
        return fallback_encoding(fallback)
    return detect_encoding(prefix, fallback)
