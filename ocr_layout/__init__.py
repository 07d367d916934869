"""
OCR Markdown Layout
===================

Rebuilds a paginated, laid-out document from OCR markdown: text with
optional per-block bounding boxes, headers, list markers and minimal HTML
tables, separated by image and page-break sentinels.

Main components:
- Markdown parsing into positioned text blocks
- Block classification (lists, headers, tables, centering)
- Coordinate-driven and plain sequential layout
- Bordered and ASCII table rendering
- PDF, JSON and cleaned Markdown export
"""

__version__ = "1.0.0"
