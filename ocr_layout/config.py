"""
Configuration and constants for the OCR markdown layout engine.

This module provides:
- Global logging configuration
- Page geometry shared by every renderer
- Per-engine layout parameters (coordinate mode, plain mode, tables)
- Environment overrides
"""

import os
from dataclasses import dataclass, field
from enum import Enum
import logging

# ============================================================================
# Logging Configuration
# ============================================================================

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("ocr_layout")


# ============================================================================
# Variant Enumerations
# ============================================================================

class LayoutMode(Enum):
    """How blocks are placed on the page."""
    COORDINATES = "coordinates"
    PLAIN = "plain"


class TableStyle(Enum):
    """Table rendering back end."""
    BORDERED = "bordered"
    ASCII = "ascii"


class FontFace(Enum):
    """Standard PDF fonts used by the writer."""
    REGULAR = "Helvetica"
    BOLD = "Helvetica-Bold"
    MONO = "Courier"


# ============================================================================
# Sentinels and Tags
# ============================================================================

IMAGE_INDEX_PREFIX = "---IMAGE_INDEX:"
SENTINEL_SUFFIX = "---"
PAGE_BREAK_SENTINEL = "---PAGE_BREAK---"

DET_OPEN = "<|det|>"
DET_CLOSE = "<|/det|>"
TAG_PREFIX = "<|"

BULLET_GLYPH = "•"
CHECKBOX_GLYPH = "☐"


# ============================================================================
# Layout Configuration
# ============================================================================

@dataclass
class PageConfig:
    """Page geometry, in millimetres."""
    width: float = 210.0
    height: float = 297.0
    margin: float = 5.0
    pt_to_mm: float = 0.352778
    # Average glyph width as a fraction of the font size
    avg_char_factor: float = 0.5

    @property
    def usable_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def usable_height(self) -> float:
        return self.height - 2 * self.margin

    def char_width(self, font_size: float) -> float:
        """Estimated width of one glyph in mm."""
        return font_size * self.avg_char_factor * self.pt_to_mm


@dataclass
class CoordinateLayoutConfig:
    """Parameters for bounding-box driven layout."""
    scale: float = 0.20  # source px -> mm
    left_column_threshold: float = 95.0
    # New source image detection, in source px
    backward_jump_threshold: float = 50.0
    backward_jump_min_y: float = 100.0
    max_column_width: float = 95.0
    min_block_width: float = 25.0
    min_right_space: float = 20.0
    min_font_size: float = 6.0
    max_font_size: float = 10.0
    font_height_factor: float = 0.5
    header_scales: dict = field(default_factory=lambda: {
        1: (2.0, 18.0),
        2: (1.5, 14.0),
        3: (1.3, 12.0),
    })
    gap_factor: float = 1.5
    min_gap: float = 2.5
    line_step_factor: float = 0.35
    min_wrap_chars: int = 15
    continuation_offset: float = 10.0
    bullet_min_size: float = 8.0
    list_item_gap: float = 1.0
    table_font_size: float = 8.0


@dataclass
class PlainLayoutConfig:
    """Parameters for sequential, coordinate-free layout."""
    top: float = 280.0
    bottom: float = 20.0
    blank_line_gap: float = 3.0
    body_font_size: float = 10.0
    body_spacing: float = 5.0
    # marker -> (font size, line spacing)
    header_styles: dict = field(default_factory=lambda: {
        "# ": (18.0, 10.0),
        "## ": (16.0, 8.0),
        "### ": (14.0, 7.0),
        "#### ": (12.0, 6.0),
    })
    line_step_factor: float = 0.8
    list_font_size: float = 10.0
    list_line_step: float = 5.0
    list_item_gap: float = 2.0
    table_font_size: float = 9.0
    table_min_room: float = 50.0
    table_gap: float = 5.0


@dataclass
class TableConfig:
    """Table rendering configuration."""
    style: TableStyle = TableStyle.BORDERED
    cell_padding: float = 0.5
    border_width: float = 1.0
    line_height: float = 5.5
    safety_factor: float = 0.85
    gap_after: float = 2.0
    min_content_width: float = 10.0
    border_line_width: float = 0.3
    # ASCII rows advance by font size * factor (mm)
    ascii_line_factor: float = 0.45


@dataclass
class PipelineConfig:
    """Main pipeline configuration."""
    page: PageConfig = field(default_factory=PageConfig)
    coordinates: CoordinateLayoutConfig = field(default_factory=CoordinateLayoutConfig)
    plain: PlainLayoutConfig = field(default_factory=PlainLayoutConfig)
    table: TableConfig = field(default_factory=TableConfig)

    # Global settings
    use_coordinates: bool = False
    debug_mode: bool = False
    title: str = "OCR Document"

    @property
    def layout_mode(self) -> LayoutMode:
        return LayoutMode.COORDINATES if self.use_coordinates else LayoutMode.PLAIN


# ============================================================================
# Default Configuration Instance
# ============================================================================

def get_config() -> PipelineConfig:
    """Get the default pipeline configuration with environment overrides."""
    config = PipelineConfig()

    if os.environ.get("OCR_LAYOUT_DEBUG", "").lower() == "true":
        config.debug_mode = True

    if os.environ.get("OCR_LAYOUT_USE_COORDINATES", "").lower() == "true":
        config.use_coordinates = True

    style = os.environ.get("OCR_LAYOUT_TABLE_STYLE", "").lower()
    if style:
        try:
            config.table.style = TableStyle(style)
        except ValueError:
            logger.warning(f"Ignoring unknown table style from environment: {style}")

    return config
