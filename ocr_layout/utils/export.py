"""
Export module for laid-out documents.

Provides:
- PDF export (reportlab canvas, standard fonts)
- JSON export of the draw-command model
- Markdown export of cleaned OCR markdown
"""

import io
import logging
from pathlib import Path
from typing import Any, Dict, Union

from reportlab.lib.units import mm
from reportlab.pdfgen import canvas as pdfcanvas

from .classifier import clean_markdown, clean_markdown_for_plain
from .io import save_json, write_bytes_atomic, write_text_atomic
from .writer import Document

logger = logging.getLogger(__name__)


# ============================================================================
# PDF Exporter
# ============================================================================

class PdfExporter:
    """Serialize a Document to PDF with reportlab."""

    def render(self, document: Document) -> bytes:
        """Render every page into an in-memory PDF."""
        buffer = io.BytesIO()
        first = document.pages[0] if document.pages else None
        pagesize = (first.width * mm, first.height * mm) if first else (210 * mm, 297 * mm)

        c = pdfcanvas.Canvas(buffer, pagesize=pagesize)
        c.setTitle(document.title)

        for page in document.pages:
            c.setPageSize((page.width * mm, page.height * mm))
            for segment in page.lines:
                c.setLineWidth(segment.width * mm)
                c.line(segment.x1 * mm, segment.y1 * mm, segment.x2 * mm, segment.y2 * mm)
            for run in page.texts:
                c.setFont(run.font.value, run.font_size)
                c.drawString(run.x * mm, run.y * mm, run.text)
            c.showPage()

        c.save()
        return buffer.getvalue()

    def export(self, document: Document, output_path: Union[str, Path]) -> Path:
        """
        Export document to a PDF file.

        The file is written in one step after the whole document has been
        rendered.
        """
        path = write_bytes_atomic(self.render(document), output_path)
        logger.info(f"Exported PDF ({document.page_count} pages) to: {path}")
        return path


# ============================================================================
# JSON Exporter
# ============================================================================

class JsonExporter:
    """Export a serialized conversion result (mode, metrics, page model)."""

    def export(
        self,
        data: Dict[str, Any],
        output_path: Union[str, Path]
    ) -> Path:
        path = save_json(data, output_path)
        logger.info(f"Exported JSON to: {path}")
        return path


# ============================================================================
# Markdown Exporter
# ============================================================================

class MarkdownExporter:
    """Export cleaned OCR markdown."""

    def __init__(self, plain: bool = True):
        self.plain = plain

    def process(self, markdown: str) -> str:
        if self.plain:
            return clean_markdown_for_plain(markdown)
        return clean_markdown(markdown)

    def export(self, markdown: str, output_path: Union[str, Path]) -> Path:
        path = write_text_atomic(self.process(markdown) + "\n", output_path)
        logger.info(f"Exported Markdown to: {path}")
        return path
