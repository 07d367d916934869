"""
OCR markdown parsing.

Turns the raw OCR markdown stream into an ordered list of positioned
text blocks. Recognizes:
- ``---IMAGE_INDEX:<n>---`` lines, which switch the current source image
- ``---PAGE_BREAK---`` lines, which force a break before the next block
- ``<|det|>[[x1,y1,x2,y2]]<|/det|>`` bounding box tags, followed by the
  lines of text that belong to the box

Malformed tags are skipped without emitting a block.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from ..config import (
    DET_CLOSE,
    DET_OPEN,
    IMAGE_INDEX_PREFIX,
    PAGE_BREAK_SENTINEL,
    SENTINEL_SUFFIX,
    TAG_PREFIX,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class BoundingBox:
    """Bounding box in source-image pixels."""
    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def x(self) -> float:
        return self.x1

    @property
    def y(self) -> float:
        return self.y1

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1


@dataclass(frozen=True)
class TextBlock:
    """A unit of OCR text with its position in the source image."""
    text: str
    bbox: BoundingBox
    image_index: int = 0
    force_page_break: bool = False

    @property
    def x(self) -> float:
        return self.bbox.x

    @property
    def y(self) -> float:
        return self.bbox.y

    @property
    def width(self) -> float:
        return self.bbox.width

    @property
    def height(self) -> float:
        return self.bbox.height


# ============================================================================
# Parsing
# ============================================================================

def parse_coordinates(payload: str) -> Optional[BoundingBox]:
    """
    Parse a ``[[x1, y1, x2, y2]]`` payload.

    Returns None unless the payload is exactly four comma-separated finite
    numbers wrapped in double brackets.
    """
    payload = payload.strip()
    if not payload.startswith("[[") or not payload.endswith("]]"):
        return None

    parts = payload[2:-2].split(",")
    if len(parts) != 4:
        return None

    try:
        values = [float(p.strip()) for p in parts]
    except ValueError:
        return None

    # float() also accepts nan/inf
    if not all(math.isfinite(v) for v in values):
        return None

    return BoundingBox(*values)


def parse_image_index(line: str) -> Optional[int]:
    """Return the index of an ``---IMAGE_INDEX:n---`` line, or None."""
    if not line.startswith(IMAGE_INDEX_PREFIX):
        return None
    rest = line[len(IMAGE_INDEX_PREFIX):].rstrip()
    if not rest.endswith(SENTINEL_SUFFIX):
        return None
    value = rest[:-len(SENTINEL_SUFFIX)].strip()
    if not value.isdigit():
        return None
    return int(value)


def is_page_break(line: str) -> bool:
    return line.strip() == PAGE_BREAK_SENTINEL


def _extract_det_payload(line: str) -> Optional[str]:
    start = line.find(DET_OPEN)
    if start < 0:
        return None
    end = line.find(DET_CLOSE, start + len(DET_OPEN))
    if end < 0:
        return None
    return line[start + len(DET_OPEN):end]


def parse_ocr_blocks(markdown: str) -> List[TextBlock]:
    """
    Parse OCR markdown into text blocks.

    Args:
        markdown: Raw OCR markdown, possibly containing several images

    Returns:
        Blocks in source order. A pending page break is attached to the
        first block emitted after the sentinel only.
    """
    blocks = []
    lines = markdown.splitlines()
    pending_break = False
    image_index = 0
    skipped = 0

    i = 0
    while i < len(lines):
        line = lines[i].strip()

        if line.startswith(IMAGE_INDEX_PREFIX):
            index = parse_image_index(line)
            if index is not None:
                image_index = index
            else:
                logger.debug(f"Ignoring malformed image index line: {line!r}")
            i += 1
            continue

        if is_page_break(line):
            pending_break = True
            i += 1
            continue

        payload = _extract_det_payload(line)
        if payload is None:
            i += 1
            continue

        bbox = parse_coordinates(payload)
        if bbox is None:
            logger.warning(f"Skipping malformed bounding box on line {i + 1}: {payload!r}")
            skipped += 1
            i += 1
            continue

        # Collect text until a blank line or the next tag
        text_lines = []
        j = i + 1
        while j < len(lines):
            next_line = lines[j].strip()
            if not next_line or next_line.startswith(TAG_PREFIX):
                break
            if is_page_break(next_line) or next_line.startswith(IMAGE_INDEX_PREFIX):
                break
            text_lines.append(next_line)
            j += 1

        if text_lines:
            blocks.append(TextBlock(
                text=" ".join(text_lines),
                bbox=bbox,
                image_index=image_index,
                force_page_break=pending_break,
            ))
            pending_break = False
        else:
            logger.debug(f"Bounding box on line {i + 1} has no text, skipping")
            skipped += 1

        i = j

    logger.info(f"Parsed {len(blocks)} blocks ({skipped} skipped)")
    return blocks
