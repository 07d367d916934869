"""
Tests for word wrapping.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ocr_layout.utils.wrap import wrap_by_chars, wrap_by_width


LOREM = (
    "Lorem ipsum dolor sit amet, consectetur   adipiscing elit, sed do\n"
    "eiusmod tempor incididunt ut labore et dolore magna aliqua. Ut enim ad "
    "minim veniam, quis nostrud exercitation ullamco laboris nisi ut aliquip"
)


class TestWrapByChars:
    """Test character-count wrapping."""

    def test_fits_exactly(self):
        """Test a line that exactly reaches the limit."""
        assert wrap_by_chars("aaa bbb ccc", 7) == ["aaa bbb", "ccc"]

    def test_single_line(self):
        """Test text shorter than the limit."""
        assert wrap_by_chars("short text", 80) == ["short text"]

    def test_overlong_word_not_split(self):
        """Test that an overlong word is emitted whole."""
        assert wrap_by_chars("supercalifragilistic ok", 5) == ["supercalifragilistic", "ok"]

    def test_blank(self):
        """Test whitespace-only text."""
        assert wrap_by_chars("   ", 10) == []

    def test_lines_within_limit(self):
        """Test that no line exceeds the limit."""
        for line in wrap_by_chars(LOREM, 20):
            assert len(line) <= 20

    def test_fidelity(self):
        """Test that wrapping drops, duplicates and reorders nothing."""
        for limit in (5, 12, 30, 200):
            lines = wrap_by_chars(LOREM, limit)
            assert " ".join(lines) == " ".join(LOREM.split())


class TestWrapByWidth:
    """Test width-accumulation wrapping."""

    def test_accumulates_width(self):
        """Test that spaces count toward the width."""
        assert wrap_by_width("ab cd", 5.0, 1.0) == [("ab cd", 5.0)]

    def test_flushes_when_full(self):
        """Test a flush when the next word does not fit."""
        assert wrap_by_width("ab cd", 4.0, 1.0) == [("ab", 2.0), ("cd", 2.0)]

    def test_overlong_word(self):
        """Test that an overlong word gets its own line."""
        lines = wrap_by_width("abcdefgh ij", 3.0, 1.0)
        assert lines == [("abcdefgh", 8.0), ("ij", 2.0)]

    def test_fidelity(self):
        """Test word fidelity and width bound."""
        lines = wrap_by_width(LOREM, 40.0, 1.76)
        assert " ".join(text for text, _ in lines) == " ".join(LOREM.split())
        for text, width in lines:
            assert width <= 40.0 or " " not in text
