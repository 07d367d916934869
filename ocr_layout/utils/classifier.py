"""
Block classification heuristics.

Provides:
- List detection, splitting and marker stripping
- Markdown header detection
- Minimal HTML handling (centering, table tags)
- Table row/cell extraction
- Tag cleaning profiles for coordinate and plain rendering
"""

import logging
import re
from typing import List, Tuple

from ..config import BULLET_GLYPH, CHECKBOX_GLYPH

logger = logging.getLogger(__name__)


SYMBOL_MARKERS = [f"{CHECKBOX_GLYPH} ", f"{BULLET_GLYPH} ", "- ", "* "]
MAX_HEADER_LEVEL = 6

_NUMBERED_MARKER = re.compile(r'\d+[.)]\s')
_LEADING_NUMBERED_MARKER = re.compile(r'^\s*\d+[.)]\s')
_NUMBERED_ITEM = re.compile(r'^\d+[.)]\s')

_CENTER_TAG = re.compile(r'</?center>', re.IGNORECASE)
_TABLE_TAGS = re.compile(r'</?(?:table|tr|td|th|thead|tbody)>', re.IGNORECASE)
_TABLE_BODY = re.compile(r'<table>(.*?)</table>', re.IGNORECASE | re.DOTALL)
_TABLE_ROW = re.compile(r'<tr>(.*?)</tr>', re.IGNORECASE | re.DOTALL)
_TABLE_CELL = re.compile(r'<t[dh]>(.*?)</t[dh]>', re.IGNORECASE | re.DOTALL)

_REF_SPAN = re.compile(r'<\|ref\|>.*?<\|/ref\|>', re.DOTALL)
_DET_SPAN = re.compile(r'<\|det\|>.*?<\|/det\|>')
_DIRECTIVE_LINES = re.compile(r'^[ \t]*<\|(?:grounding|think|OCR)\|>.*$', re.MULTILINE)
_ANY_TAG_LINE = re.compile(r'^[ \t]*<\|[^|]+\|>.*$', re.MULTILINE)
_BLANK_WS_LINE = re.compile(r'^[ \t]+$', re.MULTILINE)
_EXTRA_NEWLINES = re.compile(r'\n{3,}')
_PAGE_BREAK_LINE = re.compile(r'^[ \t]*---PAGE_BREAK---[ \t]*$', re.MULTILINE)
_IMAGE_INDEX_LINE = re.compile(r'^[ \t]*---IMAGE_INDEX:\d+---[ \t]*$', re.MULTILINE)


# ============================================================================
# Lists
# ============================================================================

def is_list_item(text: str) -> bool:
    """
    Check whether text starts with an explicit list marker.

    Accepted markers: checkbox, bullet, ``- `` (not a ``---`` rule),
    ``* `` (not ``* *``), and ``N.``/``N)`` followed by whitespace.
    """
    trimmed = text.lstrip()

    if trimmed.startswith(f"{CHECKBOX_GLYPH} ") or trimmed.startswith(f"{BULLET_GLYPH} "):
        return True

    if trimmed.startswith("* ") and not trimmed.startswith("* *"):
        return True

    # A lone "- " carries no item text
    if trimmed.startswith("- ") and len(trimmed) > 2 and not trimmed.startswith("---"):
        return True

    return bool(_NUMBERED_ITEM.match(trimmed))


def split_list_items(text: str) -> List[str]:
    """
    Split a list block into its items.

    Rules, first match wins:
    1. a numbered marker recurring at least twice splits at each marker
    2. a symbolic marker recurring at least twice splits on that marker
    3. internal line breaks split into lines
    4. otherwise the whole block is one item
    """
    trimmed = text.strip()

    starts = [m.start() for m in _NUMBERED_MARKER.finditer(trimmed)]
    if len(starts) >= 2:
        bounds = ([0] if starts[0] != 0 else []) + starts + [len(trimmed)]
        items = [trimmed[a:b].strip() for a, b in zip(bounds, bounds[1:])]
        items = [item for item in items if item]
        if len(items) > 1:
            return items

    for marker in SYMBOL_MARKERS:
        if trimmed.count(marker) < 2:
            continue
        parts = trimmed.split(marker)
        items = []
        if parts[0].strip():
            items.append(parts[0].strip())
        items.extend(f"{marker}{part.strip()}" for part in parts[1:])
        if len(items) > 1:
            return items

    if "\n" in trimmed:
        items = [line.strip() for line in trimmed.splitlines() if line.strip()]
        if items:
            return items

    return [text]


def strip_leading_marker(item: str) -> str:
    """Remove the list marker and the space that follows it."""
    trimmed = item.strip()

    for marker in SYMBOL_MARKERS:
        if trimmed.startswith(marker):
            return trimmed[len(marker):].lstrip()

    if _LEADING_NUMBERED_MARKER.match(trimmed):
        return _LEADING_NUMBERED_MARKER.sub("", trimmed, count=1).strip()

    return trimmed


# ============================================================================
# Headers and HTML
# ============================================================================

def parse_markdown_headers(text: str) -> Tuple[str, int]:
    """
    Detect a ``#`` header.

    Returns:
        (text without the marker, level). Level is 0 and the text is
        returned unmodified unless 1-6 ``#`` are followed by whitespace.
    """
    trimmed = text.strip()
    level = len(trimmed) - len(trimmed.lstrip("#"))

    if not 1 <= level <= MAX_HEADER_LEVEL:
        return text, 0
    if len(trimmed) > level and not trimmed[level].isspace():
        return text, 0

    return trimmed[level:].strip(), level


def parse_html_tags(text: str) -> Tuple[str, bool]:
    """
    Strip the minimal HTML subset.

    Returns:
        (cleaned text, is_centered). Table structure tags become spaces.
    """
    is_centered = "<center>" in text.lower()
    cleaned = _CENTER_TAG.sub("", text)
    cleaned = _TABLE_TAGS.sub(" ", cleaned)
    return cleaned.strip(), is_centered


def is_table(text: str) -> bool:
    return "<table>" in text.lower()


def parse_table_html(table_html: str) -> List[List[str]]:
    """
    Extract rows of cell strings from ``<table>`` markup.

    Only content between a matched ``<table>``/``</table>`` pair counts.
    Rows without cells are dropped.
    """
    rows = []
    for body in _TABLE_BODY.findall(table_html):
        for row_body in _TABLE_ROW.findall(body):
            cells = [cell.strip() for cell in _TABLE_CELL.findall(row_body)]
            if cells:
                rows.append(cells)
    return rows


# ============================================================================
# Tag Cleaning
# ============================================================================

def _strip_sentinels(text: str) -> str:
    text = _PAGE_BREAK_LINE.sub("", text)
    return _IMAGE_INDEX_LINE.sub("", text)


def clean_markdown(text: str) -> str:
    """
    Remove OCR control tags but keep ``<|det|>`` bounding boxes.

    Reference spans and grounding/think/OCR directive lines are dropped,
    along with sentinel lines. Runs of blank lines collapse to one.
    """
    cleaned = _REF_SPAN.sub("", text)
    cleaned = _DIRECTIVE_LINES.sub("", cleaned)
    cleaned = _strip_sentinels(cleaned)
    cleaned = _BLANK_WS_LINE.sub("", cleaned)
    cleaned = _EXTRA_NEWLINES.sub("\n\n", cleaned)
    return cleaned.strip()


def clean_markdown_for_plain(text: str) -> str:
    """Remove every OCR tag, including bounding boxes and their payload."""
    cleaned = _DET_SPAN.sub("", text)
    cleaned = _REF_SPAN.sub("", cleaned)
    cleaned = _ANY_TAG_LINE.sub("", cleaned)
    cleaned = _strip_sentinels(cleaned)
    cleaned = _BLANK_WS_LINE.sub("", cleaned)
    cleaned = _EXTRA_NEWLINES.sub("\n\n", cleaned)
    return cleaned.strip()
