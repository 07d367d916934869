"""
Tests for table rendering.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ocr_layout.config import FontFace, TableConfig, TableStyle
from ocr_layout.utils.tables import (
    AsciiTableRenderer,
    BorderedTableRenderer,
    Table,
    build_ascii_table,
    create_table_renderer,
)


class TestTable:
    """Test the Table data class."""

    def test_ragged_rows(self):
        """Test padding and column widths for unequal rows."""
        table = Table([["A", "BB", "C"], ["DDDD"]])

        assert table.num_rows == 2
        assert table.num_cols == 3
        assert table.padded_rows() == [["A", "BB", "C"], ["DDDD", "", ""]]
        np.testing.assert_array_equal(table.column_widths(), [4, 2, 1])

    def test_empty(self):
        """Test empty tables."""
        assert Table().is_empty
        assert Table([[]]).is_empty
        assert len(Table().column_widths()) == 0


class TestBorderedTable:
    """Test the bordered back end."""

    @pytest.fixture
    def renderer(self):
        return BorderedTableRenderer()

    @pytest.fixture
    def page_break(self, writer):
        def _break():
            writer.new_page()
            return 280.0
        return _break

    def test_single_row(self, renderer, writer):
        """Test borders, cell text and the returned cursor."""
        end_y = renderer.render(writer, Table([["A", "B"]]), 5.0, 280.0, 200.0, 9)
        page = writer.current_page

        # Top border, left border, one border after each cell, bottom border
        assert len(page.lines) == 5
        assert [t.text for t in page.texts] == ["A", "B"]
        # 5.5 line height + 2 * 0.5 padding, then the 2 mm gap
        assert end_y == pytest.approx(271.5)

        right_edge = max(max(l.x1, l.x2) for l in page.lines)
        assert right_edge == pytest.approx(205.0)

    def test_proportional_columns(self, renderer):
        """Test that column widths follow the longest cell."""
        widths = renderer.column_layout(Table([["AAA", "B"]]), 200.0)

        assert widths.sum() == pytest.approx(195.0)
        assert widths[0] == pytest.approx(3 * widths[1])

    def test_blank_columns_share_width(self, renderer):
        """Test equal widths when every cell is empty."""
        widths = renderer.column_layout(Table([["", ""]]), 200.0)
        np.testing.assert_allclose(widths, [97.5, 97.5])

    def test_ragged_rows_render_empty_cells(self, renderer, writer):
        """Test that missing cells still get borders."""
        renderer.render(writer, Table([["A", "B", "C"], ["D"]]), 5.0, 280.0, 200.0, 9)
        page = writer.current_page

        assert len(page.lines) == 11
        assert [t.text for t in page.texts] == ["A", "B", "C", "D"]

    def test_wrapped_cell(self, renderer, writer):
        """Test that long cells wrap and grow the row."""
        text = " ".join(["word"] * 40)
        end_y = renderer.render(writer, Table([[text]]), 5.0, 280.0, 50.0, 9)
        runs = writer.current_page.texts

        assert len(runs) == 8
        assert " ".join(r.text for r in runs) == text
        assert end_y == pytest.approx(233.0)

    def test_shorter_cell_centred(self, renderer, writer):
        """Test vertical centring of a shorter cell."""
        renderer.render(writer, Table([["one two three four", "x"]]), 5.0, 280.0, 30.0, 9)
        runs = writer.current_page.texts
        short = [r for r in runs if r.text == "x"][0]
        first = runs[0]

        assert short.y < first.y

    def test_empty_table(self, renderer, writer):
        """Test that an empty table draws nothing."""
        assert renderer.render(writer, Table(), 5.0, 100.0, 200.0, 9) == 100.0
        assert writer.current_page.is_empty

    def test_page_break_between_rows(self, renderer, writer, page_break):
        """Test splitting a table at a row boundary."""
        rows = [[f"row {i}"] for i in range(6)]

        renderer.render(writer, Table(rows), 5.0, 280.0, 200.0, 9,
                        bottom=250.0, page_break=page_break)

        assert writer.page_count == 2
        assert len(writer.document.pages[0].texts) == 4
        assert len(writer.document.pages[1].texts) == 2
        # Border is redrawn at the top of the continuation page
        assert writer.document.pages[1].lines[0].y1 == pytest.approx(280.0)

    def test_page_break_before_first_row(self, renderer, writer, page_break):
        """Test that a first row below the bottom limit moves to the next page."""
        renderer.render(writer, Table([["A"], ["B"]]), 5.0, 252.0, 200.0, 9,
                        bottom=250.0, page_break=page_break)
        first, second = writer.document.pages

        assert first.is_empty
        assert [t.text for t in second.texts] == ["A", "B"]
        assert second.lines[0].y1 == pytest.approx(280.0)
        assert min(min(l.y1, l.y2) for l in second.lines) >= 250.0

    def test_single_break_for_oversized_row(self, renderer, writer, page_break):
        """Test that a row taller than the page breaks only once."""
        text = " ".join(["word"] * 40)
        renderer.render(writer, Table([[text]]), 5.0, 280.0, 50.0, 9,
                        bottom=250.0, page_break=page_break)

        assert writer.page_count == 2
        assert len(writer.document.pages[1].texts) == 8

    def test_no_page_break_without_callback(self, renderer, writer):
        """Test that tables never split without a break callback."""
        rows = [[f"row {i}"] for i in range(6)]
        renderer.render(writer, Table(rows), 5.0, 280.0, 200.0, 9, bottom=250.0)

        assert writer.page_count == 1


class TestAsciiTable:
    """Test the ASCII back end."""

    def test_build_grid(self):
        """Test the padded grid layout."""
        lines = build_ascii_table([["A", "BB"], ["CCC"]])

        assert lines == [
            "+-----+----+",
            "| A   | BB |",
            "+-----+----+",
            "| CCC |    |",
            "+-----+----+",
        ]

    def test_empty(self):
        """Test that no rows give no lines."""
        assert build_ascii_table([]) == []

    def test_render(self, writer):
        """Test monospace runs and the returned cursor."""
        renderer = AsciiTableRenderer()
        end_y = renderer.render(writer, Table([["A", "BB"], ["CCC"]]), 5.0, 200.0, 200.0, 9)
        runs = writer.current_page.texts

        assert len(runs) == 5
        assert all(r.font == FontFace.MONO for r in runs)
        assert all(r.x == 5.0 for r in runs)
        assert end_y == pytest.approx(200.0 - 5 * 9 * 0.45 - 2.0)


class TestFactory:
    """Test renderer selection."""

    def test_default_is_bordered(self):
        """Test the default back end."""
        assert isinstance(create_table_renderer(), BorderedTableRenderer)

    def test_ascii(self):
        """Test selecting the ASCII back end."""
        renderer = create_table_renderer(TableConfig(style=TableStyle.ASCII))
        assert isinstance(renderer, AsciiTableRenderer)
