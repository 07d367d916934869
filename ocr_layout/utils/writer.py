"""
Document model and writer.

Provides:
- Draw commands (positioned text runs, line segments)
- Page and Document containers
- DocumentWriter, the single mutable canvas used by the layout engines

Coordinates are millimetres with the origin at the bottom-left corner of
the page, matching PDF conventions. Text runs are anchored at their
baseline.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import FontFace, PageConfig

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class TextRun:
    """A run of text placed at a baseline position."""
    x: float
    y: float
    text: str
    font_size: float
    font: FontFace = FontFace.REGULAR
    # Ordinal of the source block or line that produced this run
    group: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": round(self.x, 3),
            "y": round(self.y, 3),
            "text": self.text,
            "font_size": self.font_size,
            "font": self.font.value,
            "group": self.group,
        }


@dataclass(frozen=True)
class LineSegment:
    """A straight line, used for table borders."""
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 0.3

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": (round(self.x1, 3), round(self.y1, 3)),
            "to": (round(self.x2, 3), round(self.y2, 3)),
            "width": self.width,
        }


@dataclass
class Page:
    """A page: an ordered list of draw commands."""
    page_number: int
    width: float
    height: float
    texts: List[TextRun] = field(default_factory=list)
    lines: List[LineSegment] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.texts and not self.lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page_number": self.page_number,
            "width": self.width,
            "height": self.height,
            "texts": [t.to_dict() for t in self.texts],
            "lines": [l.to_dict() for l in self.lines],
        }


@dataclass
class Document:
    """A paginated, laid-out document."""
    pages: List[Page] = field(default_factory=list)
    title: str = "OCR Document"

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def text_runs(self) -> List[TextRun]:
        return [run for page in self.pages for run in page.texts]

    def text_groups(self) -> List[str]:
        """
        Join the text of each group, in order of first appearance.

        A group is everything flowed from one source block (coordinate
        mode) or one source line (plain mode).
        """
        groups: Dict[int, List[str]] = {}
        for run in self.text_runs():
            groups.setdefault(run.group, []).append(run.text)
        return [" ".join(parts) for parts in groups.values()]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "page_count": self.page_count,
            "pages": [p.to_dict() for p in self.pages],
        }


# ============================================================================
# Writer
# ============================================================================

class DocumentWriter:
    """
    Page/canvas abstraction.

    The first page exists as soon as the writer is created. Pages are
    finalized by creating the next one and never touched again.
    """

    def __init__(
        self,
        page: Optional[PageConfig] = None,
        title: str = "OCR Document",
        border_width: float = 0.3
    ):
        self.page_config = page or PageConfig()
        self.border_width = border_width
        self.document = Document(title=title)
        self._group = 0
        self.new_page()

    @property
    def current_page(self) -> Page:
        return self.document.pages[-1]

    @property
    def page_count(self) -> int:
        return self.document.page_count

    def new_page(self) -> Page:
        """Finalize the current page and start a new one."""
        page = Page(
            page_number=len(self.document.pages) + 1,
            width=self.page_config.width,
            height=self.page_config.height,
        )
        self.document.pages.append(page)
        if page.page_number > 1:
            logger.debug(f"Started page {page.page_number}")
        return page

    def begin_group(self) -> int:
        """Start a new text group; later runs are tagged with it."""
        self._group += 1
        return self._group

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        font_size: float,
        font: FontFace = FontFace.REGULAR
    ):
        if not text:
            return
        self.current_page.texts.append(
            TextRun(x, y, text, font_size, font, self._group)
        )

    def draw_line(self, x1: float, y1: float, x2: float, y2: float):
        self.current_page.lines.append(
            LineSegment(x1, y1, x2, y2, self.border_width)
        )

    def draw_horizontal_line(self, start_x: float, end_x: float, y: float):
        self.draw_line(start_x, y, end_x, y)

    def draw_vertical_line(self, x: float, y_top: float, y_bottom: float):
        self.draw_line(x, y_top, x, y_bottom)

    def finish(self) -> Document:
        logger.info(f"Laid out {self.page_count} page(s)")
        return self.document
