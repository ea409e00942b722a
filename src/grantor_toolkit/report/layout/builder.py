"""
Module: report.layout.builder

Purpose:
    Page and cursor management for a vertically flowing report.
    Decides when content needs a new page and records drawn primitives.

Key Classes:
    - ReportBuilder: Owns the document, the cursor and the margins

Algorithm:
    Incremental, row by row:
    1. Callers reserve space with ensure_space(rows) before drawing
    2. If the rows do not fit above the bottom margin, new_page()
    3. Drawing appends primitives to the cursor page
    4. advance() moves the cursor down

Dependencies:
    - reportlab: Font metrics for text fitting
    - report.layout.models: Page, ReportDocument, primitives

Used By:
    - report.layout.tables: Sections and tables
    - report.images.composer: Image pages
    - report.controller: Orchestration
"""

from __future__ import annotations

import logging
from typing import Optional

from reportlab.pdfbase.pdfmetrics import stringWidth

from .config import LayoutConfig, RGB
from .models import (
    Cursor,
    ImageRun,
    LineShape,
    Page,
    RectShape,
    ReportDocument,
    TextRun,
)

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


class ReportBuilder:
    """
    Explicit document-building state.

    Holds the ReportDocument, the cursor and the layout configuration.
    Every draw operation goes through an instance, so nothing is shared
    between reports.

    Example:
        >>> builder = ReportBuilder(LayoutConfig())
        >>> builder.ensure_space(1)
        >>> builder.document.page_count
        1
    """

    def __init__(self, config: Optional[LayoutConfig] = None, title: str = "Application Report") -> None:
        self.config = config or LayoutConfig()
        self.document = ReportDocument(title=title)
        first = self.document.append_page(self.config.page_width, self.config.page_height)
        self.cursor = Cursor(
            page=first,
            y=self.config.margin_top,
            margin_x=self.config.margin_x,
            content_width=self.config.content_width,
        )

    # ─────────────────────────────────────────────────────────────────────
    # Pagination
    # ─────────────────────────────────────────────────────────────────────

    @property
    def page(self) -> Page:
        """Page currently receiving primitives."""
        return self.cursor.page

    @property
    def y(self) -> float:
        """Current vertical position (from page top)."""
        return self.cursor.y

    @property
    def remaining_height(self) -> float:
        """Vertical space left above the bottom margin."""
        return self.config.content_bottom - self.cursor.y

    def new_page(self) -> Page:
        """
        Allocate a standard-size page and move the cursor onto it.

        Returns:
            The new page
        """
        page = self.document.append_page(self.config.page_width, self.config.page_height)
        self.cursor.page = page
        self.cursor.y = self.config.margin_top
        logger.debug(f"Started page {page.index + 1}")
        return page

    def ensure_space(self, row_count: int = 1) -> None:
        """
        Break to a new page if row_count rows do not fit.

        Args:
            row_count: Number of fixed-height rows about to be drawn
        """
        required = row_count * self.config.row_height
        if required > self.remaining_height:
            self.new_page()

    def advance(self, dy: float) -> None:
        """Move the cursor down by dy points."""
        self.cursor.y += dy

    # ─────────────────────────────────────────────────────────────────────
    # Drawing
    # ─────────────────────────────────────────────────────────────────────

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        bold: bool = False,
        size: Optional[float] = None,
        color: Optional[RGB] = None,
        max_width: Optional[float] = None,
    ) -> TextRun:
        """Draw one line of text on the cursor page."""
        font = self.config.font_bold if bold else self.config.font_regular
        size = size or self.config.body_font_size
        if max_width is not None:
            text = fit_text(text, font, size, max_width)
        run = TextRun(
            x=x,
            y=y,
            text=text,
            font=font,
            size=size,
            color=color or self.config.text_color,
        )
        self.page.add(run)
        return run

    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill_color: Optional[RGB] = None,
        stroke_color: Optional[RGB] = None,
        line_width: float = 0.5,
    ) -> RectShape:
        """Draw a rectangle on the cursor page."""
        rect = RectShape(
            x=x,
            y=y,
            width=width,
            height=height,
            fill_color=fill_color,
            stroke_color=stroke_color,
            line_width=line_width,
        )
        self.page.add(rect)
        return rect

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, *, line_width: float = 0.5) -> LineShape:
        """Draw a line on the cursor page."""
        line = LineShape(x1=x1, y1=y1, x2=x2, y2=y2, line_width=line_width, color=self.config.text_color)
        self.page.add(line)
        return line

    def draw_image(self, x: float, y: float, width: float, height: float, data: bytes) -> ImageRun:
        """Draw an encoded image on the cursor page."""
        image = ImageRun(x=x, y=y, width=width, height=height, data=data)
        self.page.add(image)
        return image

    def draw_title(self, text: str) -> None:
        """Draw the report title banner at the cursor and move past it."""
        self.draw_text(
            self.config.margin_x,
            self.cursor.y,
            text,
            bold=True,
            size=self.config.title_font_size,
            color=self.config.accent_color,
        )
        self.advance(self.config.title_gap)


def fit_text(text: str, font: str, size: float, max_width: float) -> str:
    """
    Truncate text with an ellipsis so it fits max_width.

    Args:
        text: Text to fit
        font: Font name registered with ReportLab
        size: Font size in points
        max_width: Available width in points

    Returns:
        The original text if it fits, else a truncated copy ending in "..."

    Example:
        >>> fit_text("short", "Helvetica", 10, 200)
        'short'
    """
    if stringWidth(text, font, size) <= max_width:
        return text

    ellipsis_width = stringWidth(ELLIPSIS, font, size)
    if ellipsis_width > max_width:
        return ""

    # Binary search for the longest prefix that fits with the ellipsis
    lo, hi = 0, len(text)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if stringWidth(text[:mid], font, size) + ellipsis_width <= max_width:
            lo = mid
        else:
            hi = mid - 1
    return text[:lo].rstrip() + ELLIPSIS
