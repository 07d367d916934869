"""
Layout engines for OCR markdown.

Provides:
- LayoutContext: mutable layout state threaded through block placement
- CoordinateLayoutEngine: places blocks from their bounding boxes, with
  two-column tracking and page detection
- PlainLayoutEngine: sequential single-column flow, coordinates ignored
- create_layout_engine: picks the engine for the configured mode

Both engines draw onto a DocumentWriter in millimetres, origin at the
bottom-left of the page.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config import (
    BULLET_GLYPH,
    FontFace,
    LayoutMode,
    PipelineConfig,
)
from .classifier import (
    clean_markdown,
    clean_markdown_for_plain,
    is_list_item,
    is_table,
    parse_html_tags,
    parse_markdown_headers,
    parse_table_html,
    split_list_items,
    strip_leading_marker,
)
from .parser import TextBlock, parse_ocr_blocks
from .tables import Table, create_table_renderer
from .wrap import wrap_by_chars, wrap_by_width
from .writer import Document, DocumentWriter

logger = logging.getLogger(__name__)


# ============================================================================
# Layout State
# ============================================================================

@dataclass
class LayoutContext:
    """
    Mutable state shared by the placement steps of one conversion.

    Coordinate mode uses the page origin, the per-column cursors, the
    previous block position and the pending page break. Plain mode only
    uses ``cursor_y``.
    """
    writer: DocumentWriter
    page_start_y: float = 0.0
    last_y_left: float = 0.0
    last_y_right: float = 0.0
    prev_block_y: float = 0.0
    force_new_page: bool = False
    cursor_y: float = 0.0
    tables_rendered: int = 0
    tables_skipped: int = 0
    list_items: int = 0
    headers: int = 0

    def last_y(self, left: bool) -> float:
        return self.last_y_left if left else self.last_y_right

    def set_last_y(self, left: bool, y: float):
        if left:
            self.last_y_left = y
        else:
            self.last_y_right = y

    def start_page(self, page_start_y: float = 0.0):
        """
        Open a new page whose logical top is ``page_start_y`` (mm).

        A page with nothing drawn on it yet is reused.
        """
        if not self.writer.current_page.is_empty:
            self.writer.new_page()
        self.page_start_y = page_start_y
        self.last_y_left = 0.0
        self.last_y_right = 0.0


def order_blocks(blocks: List[TextBlock]) -> List[TextBlock]:
    """Group blocks by source image, then order each group top to bottom."""
    return sorted(blocks, key=lambda b: (b.image_index, b.y))


# ============================================================================
# Engines
# ============================================================================

class LayoutEngine:
    """Base class for layout engines."""

    mode: LayoutMode

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self.page = self.config.page
        self.table_renderer = create_table_renderer(self.config.table, self.page)

    def _new_context(self) -> LayoutContext:
        writer = DocumentWriter(
            page=self.page,
            title=self.config.title,
            border_width=self.config.table.border_line_width,
        )
        return LayoutContext(writer=writer)

    def layout(self, markdown: str) -> Document:
        """Lay out OCR markdown into a paginated document."""
        return self.run(markdown)[0]

    def run(self, markdown: str) -> Tuple[Document, LayoutContext]:
        raise NotImplementedError


class CoordinateLayoutEngine(LayoutEngine):
    """
    Places blocks using their bounding boxes.

    Blocks are grouped by source image and sorted vertically. A new page
    starts on an explicit break, when the vertical position jumps back
    (a new source image whose coordinates restart), or when the block lies
    more than a usable page height below the page's logical top.
    """

    mode = LayoutMode.COORDINATES

    def run(self, markdown: str) -> Tuple[Document, LayoutContext]:
        return self.run_blocks(parse_ocr_blocks(markdown))

    def layout_blocks(self, blocks: List[TextBlock]) -> Document:
        return self.run_blocks(blocks)[0]

    def run_blocks(self, blocks: List[TextBlock]) -> Tuple[Document, LayoutContext]:
        ctx = self._new_context()
        for block in order_blocks(blocks):
            self.place_block(ctx, block)
        return ctx.writer.finish(), ctx

    def font_for(self, base_size: float, header_level: int) -> Tuple[float, FontFace]:
        """Font size and face for a block; headers are scaled and bold."""
        if header_level <= 0:
            return base_size, FontFace.REGULAR
        scale, cap = self.config.coordinates.header_scales.get(header_level, (1.0, base_size))
        return min(base_size * scale, cap), FontFace.BOLD

    def place_block(self, ctx: LayoutContext, block: TextBlock):
        cfg = self.config.coordinates
        page = self.page

        if block.force_page_break:
            ctx.force_new_page = True
            logger.debug("Page break requested before block")

        if (ctx.prev_block_y > cfg.backward_jump_min_y
                and block.y < ctx.prev_block_y - cfg.backward_jump_threshold):
            ctx.force_new_page = True
            logger.debug(f"Vertical position jumped back ({ctx.prev_block_y} -> {block.y}), new page")
        ctx.prev_block_y = block.y

        # Classify before any tag is removed
        is_list = is_list_item(block.text)
        table = is_table(block.text)

        text, header_level = parse_markdown_headers(clean_markdown(block.text))
        if not table:
            text, _ = parse_html_tags(text)
        if not text:
            return

        x = min(block.x * cfg.scale + page.margin, page.usable_width)
        block_y = block.y * cfg.scale

        if ctx.force_new_page:
            ctx.start_page(0.0)
            ctx.force_new_page = False

        if block_y - ctx.page_start_y > page.usable_height:
            logger.debug("Block below usable height, new page")
            ctx.start_page(block_y)

        relative_y = block_y - ctx.page_start_y
        y = max(page.height - page.margin - relative_y, page.margin)

        left = x < cfg.left_column_threshold
        base_size = min(max(block.height * cfg.scale * cfg.font_height_factor,
                            cfg.min_font_size), cfg.max_font_size)

        min_gap = max(base_size * page.pt_to_mm * cfg.gap_factor, cfg.min_gap)
        last_y = ctx.last_y(left)
        if last_y > 0 and last_y - y < min_gap:
            y = last_y - min_gap

        font_size, font = self.font_for(base_size, header_level)
        if header_level:
            ctx.headers += 1

        width = min(
            max(block.width * cfg.scale, cfg.min_block_width),
            max(page.width - page.margin - x, cfg.min_right_space),
            cfg.max_column_width,
        )
        max_chars = max(int(width / page.char_width(font_size)), cfg.min_wrap_chars)

        ctx.writer.begin_group()

        def continue_page() -> float:
            ctx.start_page(block_y)
            return page.height - page.margin - cfg.continuation_offset

        if table:
            rows = parse_table_html(text)
            if not rows:
                logger.warning("Table block has no rows, skipping")
                ctx.tables_skipped += 1
                return
            end_y = self.table_renderer.render(
                ctx.writer, Table(rows), x, y, width, cfg.table_font_size,
                bottom=page.margin, page_break=continue_page,
            )
            ctx.tables_rendered += 1
            ctx.set_last_y(left, end_y)
        elif is_list:
            self._place_list(ctx, text, x, y, base_size, max_chars, left, continue_page)
        else:
            step = font_size * cfg.line_step_factor
            lines = wrap_by_chars(text, max_chars)
            end_y = self._flow(ctx, lines, x, y, font_size, font, step, continue_page)
            ctx.set_last_y(left, end_y)

    def _place_list(self, ctx, text, x, y, base_size, max_chars, left, continue_page):
        cfg = self.config.coordinates
        bullet_size = max(base_size, cfg.bullet_min_size)
        bullet_offset = self.page.char_width(bullet_size) * 2
        step = base_size * cfg.line_step_factor

        item_y = y
        for item in split_list_items(text):
            if item_y < self.page.margin:
                item_y = continue_page()
            ctx.writer.draw_text(x, item_y, BULLET_GLYPH, bullet_size, FontFace.BOLD)
            ctx.list_items += 1

            lines = wrap_by_chars(strip_leading_marker(item), max_chars)
            end_y = self._flow(ctx, lines, x + bullet_offset, item_y, base_size,
                               FontFace.REGULAR, step, continue_page)
            ctx.set_last_y(left, end_y)
            item_y = end_y - cfg.list_item_gap

    def _flow(self, ctx, lines, x, y, font_size, font, step, continue_page) -> float:
        """Draw lines downward, breaking pages at the bottom margin."""
        for line in lines:
            if y < self.page.margin:
                y = continue_page()
            ctx.writer.draw_text(x, y, line, font_size, font)
            y -= step
        return y


class PlainLayoutEngine(LayoutEngine):
    """
    Sequential single-column flow.

    Every tag is stripped first; bounding boxes are ignored. Each
    non-blank line becomes a list, a table, a header or a paragraph.
    """

    mode = LayoutMode.PLAIN

    def run(self, markdown: str) -> Tuple[Document, LayoutContext]:
        cfg = self.config.plain
        ctx = self._new_context()
        ctx.cursor_y = cfg.top

        lines = clean_markdown_for_plain(markdown).splitlines()
        i = 0
        while i < len(lines):
            stripped = lines[i].strip()
            if not stripped:
                ctx.cursor_y -= cfg.blank_line_gap
                i += 1
                continue

            self._ensure_room(ctx)
            ctx.writer.begin_group()

            if is_list_item(stripped):
                self._place_list(ctx, stripped)
            elif is_table(stripped):
                table_lines = [stripped]
                if "</table>" not in stripped.lower():
                    while i + 1 < len(lines):
                        i += 1
                        table_lines.append(lines[i])
                        if "</table>" in lines[i].lower():
                            break
                self._place_table(ctx, "\n".join(table_lines))
            else:
                self._place_paragraph(ctx, stripped)
            i += 1

        return ctx.writer.finish(), ctx

    def _new_page(self, ctx: LayoutContext) -> float:
        ctx.writer.new_page()
        ctx.cursor_y = self.config.plain.top
        return ctx.cursor_y

    def _ensure_room(self, ctx: LayoutContext):
        if ctx.cursor_y < self.config.plain.bottom:
            self._new_page(ctx)

    def header_style(self, text: str) -> Tuple[str, float, float, bool]:
        """Return (text, font size, line spacing, bold) for a line."""
        cfg = self.config.plain
        for marker, (size, spacing) in cfg.header_styles.items():
            if text.startswith(marker):
                return text[len(marker):].strip(), size, spacing, True
        return text, cfg.body_font_size, cfg.body_spacing, False

    def _place_paragraph(self, ctx: LayoutContext, line: str):
        cfg = self.config.plain
        page = self.page

        text, centered = parse_html_tags(line)
        text, font_size, spacing, bold = self.header_style(text)
        if bold:
            ctx.headers += 1
        font = FontFace.BOLD if bold else FontFace.REGULAR

        char_width = page.char_width(font_size)
        max_width = max(page.usable_width - 1.0, char_width)
        step = spacing * cfg.line_step_factor

        for wrapped, width in wrap_by_width(text, max_width, char_width):
            x = page.margin
            if centered:
                x += max((page.usable_width - max(width, char_width)) / 2, 0.0)
            ctx.writer.draw_text(x, ctx.cursor_y, wrapped, font_size, font)
            ctx.cursor_y -= step
            self._ensure_room(ctx)

        ctx.cursor_y -= spacing

    def _place_list(self, ctx: LayoutContext, line: str):
        cfg = self.config.plain
        page = self.page
        char_width = page.char_width(cfg.list_font_size)
        bullet_offset = char_width * 2
        max_width = page.usable_width - bullet_offset - 1.0

        for item in split_list_items(line):
            self._ensure_room(ctx)
            ctx.writer.draw_text(page.margin, ctx.cursor_y, BULLET_GLYPH,
                                 cfg.list_font_size, FontFace.BOLD)
            ctx.list_items += 1
            body = strip_leading_marker(item)
            for wrapped, _ in wrap_by_width(body, max_width, char_width):
                ctx.writer.draw_text(page.margin + bullet_offset, ctx.cursor_y,
                                     wrapped, cfg.list_font_size)
                ctx.cursor_y -= cfg.list_line_step
                self._ensure_room(ctx)
            ctx.cursor_y -= cfg.list_item_gap

    def _place_table(self, ctx: LayoutContext, markup: str):
        cfg = self.config.plain
        rows = parse_table_html(markup)
        if not rows:
            logger.warning("Table has no rows, skipping")
            ctx.tables_skipped += 1
            return

        if ctx.cursor_y < cfg.table_min_room:
            self._new_page(ctx)

        ctx.cursor_y = self.table_renderer.render(
            ctx.writer, Table(rows), self.page.margin, ctx.cursor_y,
            self.page.usable_width, cfg.table_font_size,
            bottom=cfg.bottom, page_break=lambda: self._new_page(ctx),
        )
        ctx.tables_rendered += 1
        ctx.cursor_y -= cfg.table_gap


_ENGINES = {
    LayoutMode.COORDINATES: CoordinateLayoutEngine,
    LayoutMode.PLAIN: PlainLayoutEngine,
}


def create_layout_engine(
    config: Optional[PipelineConfig] = None,
    mode: Optional[LayoutMode] = None
) -> LayoutEngine:
    """Create the engine for ``mode`` (default: the configured mode)."""
    config = config or PipelineConfig()
    mode = mode or config.layout_mode
    logger.debug(f"Using {mode.value} layout")
    return _ENGINES[mode](config)
