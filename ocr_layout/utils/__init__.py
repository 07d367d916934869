"""
Utility modules for the layout pipeline.
"""

from .io import read_markdown, save_json, ensure_dir, DocumentIOError
from .parser import parse_ocr_blocks, TextBlock, BoundingBox
from .classifier import (
    is_list_item, split_list_items, strip_leading_marker,
    parse_markdown_headers, parse_html_tags, is_table, parse_table_html,
    clean_markdown, clean_markdown_for_plain,
)
from .wrap import wrap_by_chars, wrap_by_width
from .tables import Table, BorderedTableRenderer, AsciiTableRenderer, build_ascii_table
from .writer import DocumentWriter, Document, Page, TextRun, LineSegment
from .layout import CoordinateLayoutEngine, PlainLayoutEngine, LayoutContext, create_layout_engine
from .assembler import DocumentAssembler, ConversionResult, DocumentMetrics
from .export import PdfExporter, JsonExporter, MarkdownExporter

__all__ = [
    # IO
    "read_markdown", "save_json", "ensure_dir", "DocumentIOError",
    # Parsing
    "parse_ocr_blocks", "TextBlock", "BoundingBox",
    # Classification
    "is_list_item", "split_list_items", "strip_leading_marker",
    "parse_markdown_headers", "parse_html_tags", "is_table", "parse_table_html",
    "clean_markdown", "clean_markdown_for_plain",
    # Wrapping
    "wrap_by_chars", "wrap_by_width",
    # Tables
    "Table", "BorderedTableRenderer", "AsciiTableRenderer", "build_ascii_table",
    # Document model
    "DocumentWriter", "Document", "Page", "TextRun", "LineSegment",
    # Layout
    "CoordinateLayoutEngine", "PlainLayoutEngine", "LayoutContext", "create_layout_engine",
    # Assembly
    "DocumentAssembler", "ConversionResult", "DocumentMetrics",
    # Export
    "PdfExporter", "JsonExporter", "MarkdownExporter",
]
