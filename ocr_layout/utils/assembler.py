"""
Document assembler for the layout pipeline.

Provides:
- Layout mode selection, with coordinate -> plain fallback
- Conversion metrics
- File-to-file conversion
"""

import logging
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..config import LayoutMode, PipelineConfig, get_config
from .export import JsonExporter, MarkdownExporter, PdfExporter
from .io import read_markdown
from .layout import CoordinateLayoutEngine, LayoutContext, create_layout_engine
from .parser import parse_ocr_blocks
from .writer import Document

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class DocumentMetrics:
    """Metrics about a conversion."""
    pages: int = 0
    blocks_parsed: int = 0
    text_groups: int = 0
    tables_rendered: int = 0
    tables_skipped: int = 0
    list_items: int = 0
    headers: int = 0
    processing_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["processing_time"] = round(self.processing_time, 3)
        return data


@dataclass
class ConversionResult:
    """A laid-out document and how it was produced."""
    document: Document
    mode_used: LayoutMode
    metrics: DocumentMetrics = field(default_factory=DocumentMetrics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode_used.value,
            "metrics": self.metrics.to_dict(),
            "document": self.document.to_dict(),
        }


# ============================================================================
# Document Assembler
# ============================================================================

class DocumentAssembler:
    """
    Main pipeline orchestrator.

    Picks the layout engine, runs it over the OCR markdown and collects
    metrics. Coordinate mode falls back to plain mode when the input has
    no usable bounding boxes.
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or get_config()
        if self.config.debug_mode:
            logging.getLogger("ocr_layout").setLevel(logging.DEBUG)

    def convert(
        self,
        markdown: str,
        use_coordinates: Optional[bool] = None
    ) -> ConversionResult:
        """
        Lay out OCR markdown.

        Args:
            markdown: OCR markdown text
            use_coordinates: Override the configured layout mode

        Returns:
            ConversionResult with the document and metrics
        """
        start_time = time.time()
        if use_coordinates is None:
            use_coordinates = self.config.use_coordinates

        mode = LayoutMode.COORDINATES if use_coordinates else LayoutMode.PLAIN
        blocks_parsed = 0

        if mode == LayoutMode.COORDINATES:
            blocks = parse_ocr_blocks(markdown)
            blocks_parsed = len(blocks)
            if blocks:
                engine = CoordinateLayoutEngine(self.config)
                document, ctx = engine.run_blocks(blocks)
            else:
                logger.warning("No bounding boxes found, falling back to plain layout")
                mode = LayoutMode.PLAIN

        if mode == LayoutMode.PLAIN:
            engine = create_layout_engine(self.config, LayoutMode.PLAIN)
            document, ctx = engine.run(markdown)

        metrics = self._calculate_metrics(document, ctx, blocks_parsed)
        metrics.processing_time = time.time() - start_time

        logger.info(
            f"Converted using {mode.value} layout: {metrics.pages} page(s), "
            f"{metrics.text_groups} text groups, {metrics.tables_rendered} tables"
        )
        return ConversionResult(document=document, mode_used=mode, metrics=metrics)

    def _calculate_metrics(
        self,
        document: Document,
        ctx: LayoutContext,
        blocks_parsed: int
    ) -> DocumentMetrics:
        return DocumentMetrics(
            pages=document.page_count,
            blocks_parsed=blocks_parsed,
            text_groups=len(document.text_groups()),
            tables_rendered=ctx.tables_rendered,
            tables_skipped=ctx.tables_skipped,
            list_items=ctx.list_items,
            headers=ctx.headers,
        )

    def convert_file(
        self,
        input_path: Union[str, Path],
        output_path: Union[str, Path],
        output_format: str = "pdf",
        use_coordinates: Optional[bool] = None,
        clean: bool = True
    ) -> Optional[ConversionResult]:
        """
        Convert an OCR markdown file and write the requested format.

        Markdown output only cleans the input; no layout runs and None is
        returned.

        Raises:
            DocumentIOError: If the input cannot be read or the output
                cannot be written
            ValueError: If the format is unknown
        """
        markdown = read_markdown(input_path)

        if output_format == "markdown":
            MarkdownExporter(plain=clean).export(markdown, output_path)
            return None

        if output_format not in ("pdf", "json"):
            raise ValueError(f"Unknown output format: {output_format}")

        result = self.convert(markdown, use_coordinates=use_coordinates)
        if output_format == "pdf":
            PdfExporter().export(result.document, output_path)
        else:
            JsonExporter().export(result.to_dict(), output_path)
        return result
