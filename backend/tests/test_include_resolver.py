"""
Tests for the Include Resolver.

Requires Python 3.11+.
"""

import codecs
import os
from pathlib import Path

import pytest

from publisher.include_resolver import IncludeResolver, parse_directive, split_lines


class TestHelpers:
    """Test cases for line splitting and directive parsing."""

    def test_split_lines_mixed_terminators(self):
        """Test that all three terminator styles split."""
        assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]

    def test_split_lines_trailing_terminator(self):
        """Test that a final terminator adds no empty line."""
        assert split_lines("a\n\n") == ["a", ""]
        assert split_lines("") == []

    def test_parse_directive(self):
        """Test file name extraction."""
        assert parse_directive("<!-- include::B.txt -->") == "B.txt"
        assert parse_directive("  text <!-- include::x.md --> tail") == "x.md"

    def test_parse_directive_uses_terminator_after_marker(self):
        """Test that a ' -->' before the marker is not used."""
        assert parse_directive("a --> <!-- include::c.md -->") == "c.md"

    def test_parse_directive_malformed(self):
        """Test lines without a closing terminator."""
        assert parse_directive("<!-- include::open.md") is None
        assert parse_directive("no directive") is None


class TestIncludeResolver:
    """Test cases for IncludeResolver."""

    @pytest.fixture
    def resolver(self) -> IncludeResolver:
        """Create a resolver with a fixed line separator."""
        return IncludeResolver(line_separator="\n", fallback_encoding="utf-8")

    def test_include_substitution(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that a directive is replaced by the joined target lines."""
        (tmp_path / "A.md").write_bytes(b"before\n<!-- include::B.txt -->\nafter\n")
        (tmp_path / "B.txt").write_bytes(b"x\ny\n")

        stats = resolver.resolve_tree(tmp_path)

        assert (tmp_path / "A.md").read_bytes() == b"before\nxyafter\n"
        assert stats.files == 2
        assert stats.includes_resolved == 1

    def test_dangling_include(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that a missing target leaves the literal directive."""
        (tmp_path / "A.md").write_bytes(b"<!-- include::missing.txt -->\nnext\n")

        stats = resolver.resolve_tree(tmp_path)

        assert (tmp_path / "A.md").read_bytes() == b"<!-- include::missing.txt -->next\n"
        assert stats.includes_dangling == 1

    def test_malformed_directive_kept(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that an unterminated directive is literal text."""
        (tmp_path / "A.md").write_bytes(b"<!-- include::B.txt\nend\n")
        (tmp_path / "B.txt").write_bytes(b"x\n")

        resolver.resolve_tree(tmp_path)

        assert (tmp_path / "A.md").read_bytes() == b"<!-- include::B.txt" + b"end\n"

    def test_lookup_by_basename_in_subdirectory(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that targets are found anywhere in the tree."""
        (tmp_path / "sub" / "deeper").mkdir(parents=True)
        (tmp_path / "sub" / "deeper" / "part.md").write_bytes(b"P\n")
        (tmp_path / "main.md").write_bytes(b"<!-- include::part.md -->\n")

        resolver.resolve_tree(tmp_path)

        assert (tmp_path / "main.md").read_bytes() == b"P"

    def test_no_nested_resolution(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that directives inside included content stay as text."""
        (tmp_path / "a.md").write_bytes(b"<!-- include::b.md -->\n")
        (tmp_path / "b.md").write_bytes(b"<!-- include::c.md -->\n")
        (tmp_path / "c.md").write_bytes(b"C\n")

        resolver.resolve_file(tmp_path / "a.md", sorted(tmp_path.iterdir()))

        assert (tmp_path / "a.md").read_bytes() == b"<!-- include::c.md -->"

    def test_self_include_reads_once(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that a file including itself splices its own content once."""
        (tmp_path / "self.md").write_bytes(b"top\n<!-- include::self.md -->\n")

        resolver.resolve_tree(tmp_path)

        assert (tmp_path / "self.md").read_bytes() == b"top\ntop<!-- include::self.md -->"

    def test_line_terminators_normalized(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that every file is rewritten with the configured separator."""
        (tmp_path / "crlf.md").write_bytes(b"one\r\ntwo\rthree")

        resolver.resolve_tree(tmp_path)

        assert (tmp_path / "crlf.md").read_bytes() == b"one\ntwo\nthree\n"

    def test_default_separator_is_platform(self, tmp_path: Path):
        """Test the platform line terminator is used by default."""
        (tmp_path / "a.md").write_bytes(b"one\ntwo\n")

        IncludeResolver(fallback_encoding="utf-8").resolve_tree(tmp_path)

        expected = f"one{os.linesep}two{os.linesep}".encode()
        assert (tmp_path / "a.md").read_bytes() == expected

    def test_idempotent_without_directives(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that a second pass leaves resolved content alone."""
        (tmp_path / "a.md").write_bytes(b"alpha\r\nbeta\n")

        resolver.resolve_tree(tmp_path)
        first = (tmp_path / "a.md").read_bytes()
        resolver.resolve_tree(tmp_path)

        assert (tmp_path / "a.md").read_bytes() == first

    def test_utf16le_round_trip(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that a UTF-16LE file keeps its mark and encoding."""
        data = codecs.BOM_UTF16_LE + "héllo\nwörld\n".encode("utf-16-le")
        (tmp_path / "le.txt").write_bytes(data)

        resolver.resolve_tree(tmp_path)

        assert (tmp_path / "le.txt").read_bytes() == data

    def test_utf8_bom_round_trip(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that a UTF-8 BOM file keeps its mark."""
        data = codecs.BOM_UTF8 + "ünï\n".encode("utf-8")
        (tmp_path / "bom.md").write_bytes(data)

        resolver.resolve_tree(tmp_path)

        assert (tmp_path / "bom.md").read_bytes() == data

    def test_include_across_encodings(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that a target is decoded with its own encoding."""
        (tmp_path / "host.md").write_bytes(
            codecs.BOM_UTF16_BE + "<!-- include::part.txt -->\n".encode("utf-16-be")
        )
        (tmp_path / "part.txt").write_bytes(codecs.BOM_UTF8 + "ß\n".encode("utf-8"))

        resolver.resolve_tree(tmp_path)

        assert (tmp_path / "host.md").read_bytes() == codecs.BOM_UTF16_BE + "ß".encode("utf-16-be")

    def test_undecodable_file_left_verbatim(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that a truncated UTF-16 file is skipped, not rewritten."""
        data = codecs.BOM_UTF16_LE + b"a\x00b"
        (tmp_path / "broken.txt").write_bytes(data)

        stats = resolver.resolve_tree(tmp_path)

        assert (tmp_path / "broken.txt").read_bytes() == data
        assert stats.files_skipped == 1

    def test_universe_snapshot_taken_before_processing(
        self, resolver: IncludeResolver, tmp_path: Path
    ):
        """Test that a target rewritten earlier contributes its new content."""
        # a.md sorts before b.md, so its terminators are normalized first
        (tmp_path / "a.md").write_bytes(b"r1\r\nr2\r\n")
        (tmp_path / "b.md").write_bytes(b"<!-- include::a.md -->\n")

        resolver.resolve_tree(tmp_path)

        assert (tmp_path / "b.md").read_bytes() == b"r1r2"


class TestMixedEncodingSplicing:
    """Test cases for hosts and targets that disagree on a byte-order mark."""

    @pytest.fixture
    def resolver(self) -> IncludeResolver:
        """Create a resolver with a UTF-8 fallback."""
        return IncludeResolver(line_separator="\n", fallback_encoding="utf-8")

    def test_legacy_target_into_utf8_bom_host(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that undecodable legacy bytes are replaced in a BOM host."""
        (tmp_path / "host.md").write_bytes(codecs.BOM_UTF8 + b"<!-- include::legacy.md -->\n")
        (tmp_path / "legacy.md").write_bytes(b"caf\xe9\n")

        stats = resolver.resolve_tree(tmp_path)

        assert (tmp_path / "host.md").read_bytes() == codecs.BOM_UTF8 + b"caf?"
        assert (tmp_path / "legacy.md").read_bytes() == b"caf\xe9\n"
        assert stats.files_skipped == 0

    def test_legacy_target_into_utf16_host(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that a UTF-16 host accepts a BOM-less target with stray bytes."""
        (tmp_path / "host.md").write_bytes(
            codecs.BOM_UTF16_LE + "<!-- include::legacy.md -->\n".encode("utf-16-le")
        )
        (tmp_path / "legacy.md").write_bytes(b"caf\xe9\n")

        resolver.resolve_tree(tmp_path)

        assert (tmp_path / "host.md").read_bytes() == (
            codecs.BOM_UTF16_LE + "caf?".encode("utf-16-le")
        )

    def test_bom_target_into_fallback_host(self, resolver: IncludeResolver, tmp_path: Path):
        """Test that a UTF-16 target is re-encoded into a BOM-less host."""
        (tmp_path / "host.md").write_bytes(b"caf\xe9\n<!-- include::wide.txt -->\n")
        (tmp_path / "wide.txt").write_bytes(codecs.BOM_UTF16_LE + "über\n".encode("utf-16-le"))

        resolver.resolve_tree(tmp_path)

        assert (tmp_path / "host.md").read_bytes() == b"caf\xe9\n" + "über".encode("utf-8")

    def test_unrepresentable_character_in_legacy_host(self, tmp_path: Path):
        """Test that characters the fallback codec lacks become '?'."""
        resolver = IncludeResolver(line_separator="\n", fallback_encoding="shift_jis")
        (tmp_path / "a.md").write_bytes(b"<!-- include::emoji.md -->\n")
        (tmp_path / "emoji.md").write_bytes(codecs.BOM_UTF8 + "x\U0001F600\n".encode("utf-8"))

        stats = resolver.resolve_tree(tmp_path)

        assert (tmp_path / "a.md").read_bytes() == b"x?"
        assert stats.files_skipped == 0
