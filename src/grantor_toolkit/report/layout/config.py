"""
Module: report.layout.config

Purpose:
    Configuration for the report layout engine.
    Defines page dimensions, margins, row metrics, fonts and colours.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - reportlab: A4 page size constant
    - dataclasses (std)

Used By:
    - report.layout.builder: Cursor and pagination
    - report.layout.tables: Section/table drawing
    - report.images.composer: Image page envelope
    - report.output: Rendering and footer pass
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from reportlab.lib.pagesizes import A4

# Standard A4 page dimensions in points
A4_WIDTH_PT, A4_HEIGHT_PT = A4

RGB = Tuple[float, float, float]

ACCENT_BLUE: RGB = (0.12, 0.35, 0.75)
BLACK: RGB = (0.0, 0.0, 0.0)
WHITE: RGB = (1.0, 1.0, 1.0)
FOOTER_GREY: RGB = (0.4, 0.4, 0.4)


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for report page layout (immutable).

    All distances are PDF points. Vertical positions are measured from the
    top of the page; the renderer converts them to PDF space.

    Attributes:
        page_width: Page width in points
        page_height: Page height in points
        margin_x: Left and right margin
        margin_top: Cursor position on a fresh page
        margin_bottom: Lowest point table content may reach
        row_height: Height of one table row
        header_height: Height of a section header bar
        label_column_width: Width of the bold label column
        table_gap: Space after each table
        title_gap: Space after the report title
        image_title_offset: Baseline of an image page title
        image_title_band: Height reserved for the image page title
        footer_offset: Footer baseline distance from the page bottom
        placeholder: Text drawn for absent values

    Example:
        >>> config = LayoutConfig()
        >>> config.rows_per_page
        39
    """

    # Page dimensions
    page_width: float = A4_WIDTH_PT
    page_height: float = A4_HEIGHT_PT

    # Margins
    margin_x: float = 50
    margin_top: float = 60
    margin_bottom: float = 70

    # Table metrics
    row_height: float = 18
    header_height: float = 22
    label_column_width: float = 200
    cell_padding: float = 6
    text_baseline: float = 13
    table_gap: float = 14
    title_gap: float = 35
    row_border_width: float = 0.5
    outer_border_width: float = 1.0

    # Image pages
    image_title_offset: float = 60
    image_title_band: float = 30

    # Footer
    footer_offset: float = 30
    footer_font_size: float = 9

    # Typography
    font_regular: str = "Helvetica"
    font_bold: str = "Helvetica-Bold"
    title_font_size: float = 18
    header_font_size: float = 11
    body_font_size: float = 10
    image_title_font_size: float = 16
    stamp_font_size: float = 16

    # Colours
    accent_color: RGB = ACCENT_BLUE
    text_color: RGB = BLACK
    header_text_color: RGB = WHITE
    footer_color: RGB = FOOTER_GREY

    placeholder: str = "N/A"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise ValueError(f"page_height must be positive: {self.page_height}")
        if self.row_height <= 0:
            raise ValueError(f"row_height must be positive: {self.row_height}")
        if self.content_width <= 0:
            raise ValueError("Margins exceed page width")
        if self.available_height < 2 * self.row_height:
            raise ValueError("Margins leave no room for a section header")
        if not 0 < self.label_column_width < self.content_width:
            raise ValueError(
                f"label_column_width must fit inside the content width: {self.label_column_width}"
            )

    @property
    def content_width(self) -> float:
        """Width available for content (excluding margins)."""
        return self.page_width - 2 * self.margin_x

    @property
    def content_bottom(self) -> float:
        """Lowest y (from top) that content may reach."""
        return self.page_height - self.margin_bottom

    @property
    def available_height(self) -> float:
        """Height available for content on a fresh page."""
        return self.content_bottom - self.margin_top

    @property
    def rows_per_page(self) -> int:
        """Number of whole rows that fit on a fresh page."""
        return int(self.available_height // self.row_height)
