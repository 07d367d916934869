"""
Tests for OCR markdown parsing.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ocr_layout.utils.parser import (
    BoundingBox,
    parse_coordinates,
    parse_image_index,
    parse_ocr_blocks,
)


class TestParseCoordinates:
    """Test bounding box payload parsing."""

    def test_valid_payload(self):
        """Test a well-formed integer payload."""
        bbox = parse_coordinates("[[10, 20, 110, 70]]")

        assert bbox == BoundingBox(10.0, 20.0, 110.0, 70.0)
        assert bbox.x == 10
        assert bbox.y == 20
        assert bbox.width == 100
        assert bbox.height == 50

    def test_real_numbers(self):
        """Test real-valued payload with surrounding whitespace."""
        bbox = parse_coordinates(" [[1.5,2.25,3,4]] ")
        assert bbox == BoundingBox(1.5, 2.25, 3.0, 4.0)

    @pytest.mark.parametrize("payload", [
        "[[1, 2, 3]]",
        "[[1, 2, 3, 4, 5]]",
        "[1, 2, 3, 4]",
        "[[a, 2, 3, 4]]",
        "[[nan,0,1,1]]",
        "[[inf,0,1,1]]",
        "[[0, -Infinity, 1, 1]]",
        "",
    ])
    def test_malformed_payload(self, payload):
        """Test that malformed or non-finite payloads are rejected."""
        assert parse_coordinates(payload) is None


class TestImageIndex:
    """Test image index sentinel parsing."""

    def test_valid(self):
        """Test a well-formed image index line."""
        assert parse_image_index("---IMAGE_INDEX:3---") == 3

    def test_invalid(self):
        """Test lines that are not image index sentinels."""
        assert parse_image_index("---IMAGE_INDEX:x---") is None
        assert parse_image_index("IMAGE_INDEX:3") is None


class TestParseBlocks:
    """Test block extraction from OCR markdown."""

    def test_single_block_joins_lines(self):
        """Test that text lines after a tag join into one block."""
        markdown = (
            "<|ref|>text<|/ref|><|det|>[[10, 20, 300, 80]]<|/det|>\n"
            "First line\n"
            "second line\n"
            "\n"
            "Unboxed text is ignored\n"
        )
        blocks = parse_ocr_blocks(markdown)

        assert len(blocks) == 1
        assert blocks[0].text == "First line second line"
        assert blocks[0].x == 10
        assert blocks[0].y == 20
        assert blocks[0].width == 290
        assert blocks[0].height == 60
        assert blocks[0].image_index == 0
        assert blocks[0].force_page_break is False

    def test_text_stops_at_next_tag(self):
        """Test that a tag line ends the previous block."""
        markdown = (
            "<|det|>[[0, 0, 10, 10]]<|/det|>\n"
            "One\n"
            "<|det|>[[0, 20, 10, 30]]<|/det|>\n"
            "Two\n"
        )
        blocks = parse_ocr_blocks(markdown)

        assert [b.text for b in blocks] == ["One", "Two"]

    def test_image_index_and_page_break(self):
        """Test image grouping and one-shot page break flags."""
        markdown = (
            "---IMAGE_INDEX:0---\n"
            "<|det|>[[0, 100, 10, 110]]<|/det|>\n"
            "Page one\n"
            "\n"
            "---PAGE_BREAK---\n"
            "\n"
            "---IMAGE_INDEX:1---\n"
            "<|det|>[[0, 50, 10, 60]]<|/det|>\n"
            "Page two\n"
            "\n"
            "<|det|>[[0, 80, 10, 90]]<|/det|>\n"
            "Still page two\n"
        )
        blocks = parse_ocr_blocks(markdown)

        assert [b.image_index for b in blocks] == [0, 1, 1]
        # The break flag is consumed by the first block after the sentinel
        assert [b.force_page_break for b in blocks] == [False, True, False]

    def test_indented_sentinels(self):
        """Test that indented sentinels are still recognized."""
        markdown = (
            "  ---IMAGE_INDEX:2---\n"
            "   ---PAGE_BREAK---\n"
            "<|det|>[[0, 0, 10, 10]]<|/det|>\n"
            "Body\n"
        )
        blocks = parse_ocr_blocks(markdown)

        assert blocks[0].image_index == 2
        assert blocks[0].force_page_break is True

    def test_sentinels_never_become_text(self):
        """Test that sentinels end a block and are not part of its text."""
        markdown = (
            "<|det|>[[0, 0, 10, 10]]<|/det|>\n"
            "Body\n"
            "---PAGE_BREAK---\n"
            "---IMAGE_INDEX:2---\n"
        )
        blocks = parse_ocr_blocks(markdown)

        assert len(blocks) == 1
        assert blocks[0].text == "Body"

    def test_malformed_tag_is_skipped(self):
        """Test that a malformed payload drops its block."""
        markdown = (
            "<|det|>[[0, 0, 10]]<|/det|>\n"
            "Orphan text\n"
            "\n"
            "<|det|>[[0, 0, 10, 10]]<|/det|>\n"
            "Kept\n"
        )
        blocks = parse_ocr_blocks(markdown)

        assert [b.text for b in blocks] == ["Kept"]

    def test_non_finite_tag_is_skipped(self):
        """Test that nan/inf coordinates never reach a block."""
        markdown = (
            "<|det|>[[nan, inf, 100, 100]]<|/det|>\n"
            "Hello\n"
            "\n"
            "<|det|>[[0, 0, 10, 10]]<|/det|>\n"
            "World\n"
        )
        blocks = parse_ocr_blocks(markdown)

        assert [b.text for b in blocks] == ["World"]

    def test_tag_without_text_is_skipped(self):
        """Test that an empty tag keeps the pending break for the next block."""
        markdown = (
            "---PAGE_BREAK---\n"
            "<|det|>[[0, 0, 10, 10]]<|/det|>\n"
            "\n"
            "<|det|>[[0, 20, 10, 30]]<|/det|>\n"
            "Text\n"
        )
        blocks = parse_ocr_blocks(markdown)

        assert len(blocks) == 1
        assert blocks[0].force_page_break is True

    def test_no_tags(self):
        """Test that untagged markdown yields no blocks."""
        assert parse_ocr_blocks("Just text\n\nMore text") == []
