"""
Table rendering for OCR markdown tables.

Provides:
- Table data class built from parsed ``<table>`` rows
- Bordered back end: proportional columns, wrapped cells, vector borders
- ASCII back end: padded monospace grid, no wrapping
- Factory selecting the back end once from configuration

Rows may have different lengths; missing trailing cells render empty.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from ..config import FontFace, PageConfig, TableConfig, TableStyle
from .writer import DocumentWriter
from .wrap import wrap_by_chars

logger = logging.getLogger(__name__)

# Called when a table runs past the bottom limit; returns the new cursor
PageBreak = Callable[[], float]


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class Table:
    """Rows of cell strings."""
    rows: List[List[str]] = field(default_factory=list)

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    @property
    def num_cols(self) -> int:
        return max((len(r) for r in self.rows), default=0)

    @property
    def is_empty(self) -> bool:
        return self.num_rows == 0 or self.num_cols == 0

    def padded_rows(self) -> List[List[str]]:
        """Rows padded with empty cells to the widest row."""
        n = self.num_cols
        return [list(r) + [""] * (n - len(r)) for r in self.rows]

    def column_widths(self) -> np.ndarray:
        """Longest cell length per column, in characters."""
        if self.is_empty:
            return np.zeros(0, dtype=int)
        lengths = np.array(
            [[len(cell) for cell in row] for row in self.padded_rows()],
            dtype=int
        )
        return lengths.max(axis=0)


# ============================================================================
# Renderers
# ============================================================================

class TableRenderer:
    """Base class for table back ends."""

    style: TableStyle

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        page: Optional[PageConfig] = None
    ):
        self.config = config or TableConfig()
        self.page = page or PageConfig()

    def render(
        self,
        writer: DocumentWriter,
        table: Table,
        x: float,
        y: float,
        max_width: float,
        font_size: float,
        bottom: float = 0.0,
        page_break: Optional[PageBreak] = None
    ) -> float:
        """
        Draw a table with its top-left corner at (x, y).

        Args:
            writer: Destination canvas
            table: Table to draw
            x, y: Top-left corner (mm)
            max_width: Width available to the table (mm)
            font_size: Cell font size (pt)
            bottom: Lowest y a row may reach before a page break
            page_break: Starts a new page and returns its top y. Without
                it the table is never split.

        Returns:
            Cursor position below the table. Empty tables draw nothing and
            return ``y`` unchanged.
        """
        raise NotImplementedError


class BorderedTableRenderer(TableRenderer):
    """Vector table with proportional column widths and wrapped cells."""

    style = TableStyle.BORDERED

    def column_layout(self, table: Table, max_width: float) -> np.ndarray:
        """Content width of each column (mm), excluding padding and borders."""
        n = table.num_cols
        cfg = self.config
        total_border = (n + 1) * cfg.border_width
        total_padding = n * 2 * cfg.cell_padding
        available = max(max_width - total_border - total_padding, cfg.min_content_width)

        max_chars = table.column_widths().astype(float)
        total_chars = max_chars.sum()
        if total_chars > 0:
            return max_chars / total_chars * available
        return np.full(n, available / n)

    def table_width(self, widths: np.ndarray) -> float:
        n = len(widths)
        cfg = self.config
        return float(widths.sum()) + (n + 1) * cfg.border_width + n * 2 * cfg.cell_padding

    def wrap_cells(
        self,
        row: List[str],
        widths: np.ndarray,
        font_size: float
    ) -> List[List[str]]:
        char_width = self.page.char_width(font_size)
        wrapped = []
        for cell, width in zip(row, widths):
            max_chars = max(int(width * self.config.safety_factor / char_width), 1)
            wrapped.append(wrap_by_chars(cell, max_chars))
        return wrapped

    def render(self, writer, table, x, y, max_width, font_size,
               bottom=0.0, page_break=None):
        if table.is_empty:
            return y

        cfg = self.config
        widths = self.column_layout(table, max_width)
        total_width = self.table_width(widths)
        line_height = cfg.line_height
        # Baseline sits below the line's vertical centre
        text_offset = line_height / 2 + font_size * 0.1 * self.page.pt_to_mm

        rows_on_page = 0
        # Set once a break has moved the table to a fresh page top
        at_page_top = False

        for row in table.padded_rows():
            cell_lines = self.wrap_cells(row, widths, font_size)
            max_lines = max(1, max(len(lines) for lines in cell_lines))
            row_height = line_height * max_lines + 2 * cfg.cell_padding

            if (page_break is not None and y - row_height < bottom
                    and (rows_on_page or not at_page_top)):
                y = page_break()
                rows_on_page = 0
                at_page_top = True

            if not rows_on_page:
                writer.draw_horizontal_line(x, x + total_width, y)

            writer.draw_vertical_line(x, y, y - row_height)
            cell_x = x + cfg.border_width
            for lines, width in zip(cell_lines, widths):
                # Centre shorter cells within the row
                line_y = (y - cfg.cell_padding - text_offset
                          - (max_lines - len(lines)) * line_height / 2)
                for text in lines:
                    writer.draw_text(cell_x + cfg.cell_padding, line_y, text, font_size)
                    line_y -= line_height
                cell_x += width + 2 * cfg.cell_padding + cfg.border_width
                writer.draw_vertical_line(cell_x, y, y - row_height)

            y -= row_height
            writer.draw_horizontal_line(x, x + total_width, y)
            rows_on_page += 1

        return y - cfg.gap_after


def build_ascii_table(rows: List[List[str]]) -> List[str]:
    """
    Format rows as a padded ASCII grid.

    Example::

        +-----+----+
        | A   | B  |
        +-----+----+
    """
    table = Table(rows=rows)
    if table.is_empty:
        return []

    widths = table.column_widths()
    border = "+" + "+".join("-" * (int(w) + 2) for w in widths) + "+"

    lines = [border]
    for row in table.padded_rows():
        cells = [f" {cell.ljust(int(w))} " for cell, w in zip(row, widths)]
        lines.append("|" + "|".join(cells) + "|")
        lines.append(border)
    return lines


class AsciiTableRenderer(TableRenderer):
    """Monospace fallback: the ASCII grid drawn line by line."""

    style = TableStyle.ASCII

    def render(self, writer, table, x, y, max_width, font_size,
               bottom=0.0, page_break=None):
        lines = build_ascii_table(table.rows)
        if not lines:
            return y

        step = font_size * self.config.ascii_line_factor
        for line in lines:
            if page_break is not None and y < bottom:
                y = page_break()
            writer.draw_text(x, y, line, font_size, FontFace.MONO)
            y -= step

        return y - self.config.gap_after


_RENDERERS = {
    TableStyle.BORDERED: BorderedTableRenderer,
    TableStyle.ASCII: AsciiTableRenderer,
}


def create_table_renderer(
    config: Optional[TableConfig] = None,
    page: Optional[PageConfig] = None
) -> TableRenderer:
    """Create the renderer for the configured table style."""
    config = config or TableConfig()
    renderer = _RENDERERS[config.style](config=config, page=page)
    logger.debug(f"Using {config.style.value} table renderer")
    return renderer
