"""
Module: report.layout.models

Purpose:
    Data models for report layout.
    Drawn primitives, pages and the document under construction.

Key Classes:
    - TextRun, RectShape, LineShape, ImageRun: Drawn primitives
    - Page: One page and its primitives
    - ReportDocument: Ordered pages of one report
    - Cursor: Current page and vertical position

Dependencies:
    - dataclasses (std)

Used By:
    - report.layout.builder: Creates pages and primitives
    - report.output.renderer: Draws primitives with ReportLab
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .config import BLACK, RGB


@dataclass(frozen=True)
class TextRun:
    """
    Single line of text.

    Attributes:
        x: Left edge in points
        y: Baseline, measured from the page top
        text: Text to draw
        font: Font name
        size: Font size in points
        color: RGB fill colour
    """
    x: float
    y: float
    text: str
    font: str
    size: float
    color: RGB = BLACK


@dataclass(frozen=True)
class RectShape:
    """
    Rectangle with optional fill and border.

    Attributes:
        x: Left edge
        y: Top edge, measured from the page top
        width: Width in points
        height: Height in points
        fill_color: Fill colour (None = unfilled)
        stroke_color: Border colour (None = no border)
        line_width: Border thickness
    """
    x: float
    y: float
    width: float
    height: float
    fill_color: Optional[RGB] = None
    stroke_color: Optional[RGB] = BLACK
    line_width: float = 0.5

    @property
    def bottom(self) -> float:
        """Bottom y coordinate (top + height)."""
        return self.y + self.height


@dataclass(frozen=True)
class LineShape:
    """Straight line between two points (top-down coordinates)."""
    x1: float
    y1: float
    x2: float
    y2: float
    line_width: float = 0.5
    color: RGB = BLACK


@dataclass(frozen=True)
class ImageRun:
    """
    Embedded raster image.

    Attributes:
        x: Left edge
        y: Top edge, measured from the page top
        width: Drawn width in points
        height: Drawn height in points
        data: Encoded image bytes (PNG, JPEG, ...)
    """
    x: float
    y: float
    width: float
    height: float
    data: bytes = field(repr=False)

    @property
    def bottom(self) -> float:
        """Bottom y coordinate (top + height)."""
        return self.y + self.height


Primitive = Union[TextRun, RectShape, LineShape, ImageRun]


@dataclass
class Page:
    """
    One page of the report.

    Attributes:
        index: Page number (0-indexed)
        width: Page width in points
        height: Page height in points
        primitives: Drawn primitives in paint order
    """

    index: int
    width: float
    height: float
    primitives: List[Primitive] = field(default_factory=list)

    def add(self, primitive: Primitive) -> None:
        """Append a primitive to the page."""
        self.primitives.append(primitive)

    def texts(self) -> List[str]:
        """Text content of the page in draw order."""
        return [p.text for p in self.primitives if isinstance(p, TextRun)]

    def rects(self) -> List[RectShape]:
        """Rectangles drawn on the page."""
        return [p for p in self.primitives if isinstance(p, RectShape)]

    def images(self) -> List[ImageRun]:
        """Images drawn on the page."""
        return [p for p in self.primitives if isinstance(p, ImageRun)]

    @property
    def is_empty(self) -> bool:
        """Check if page has no primitives."""
        return len(self.primitives) == 0


@dataclass
class ReportDocument:
    """
    Ordered pages of a report under construction.

    Example:
        >>> doc = ReportDocument()
        >>> doc.page_count
        0
    """

    pages: List[Page] = field(default_factory=list)
    title: str = "Application Report"

    @property
    def page_count(self) -> int:
        """Number of pages in the document."""
        return len(self.pages)

    @property
    def last_page(self) -> Page:
        """The most recently added page."""
        if not self.pages:
            raise IndexError("document has no pages")
        return self.pages[-1]

    def append_page(self, width: float, height: float) -> Page:
        """Create a page owned by this document and append it."""
        page = Page(index=len(self.pages), width=width, height=height)
        self.pages.append(page)
        return page


@dataclass
class Cursor:
    """
    Drawing position within the document.

    Attributes:
        page: Page receiving new primitives (always the last page)
        y: Current vertical position, measured from the page top
        margin_x: Left margin of the content area
        content_width: Width of the content area
    """

    page: Page
    y: float
    margin_x: float
    content_width: float

    @property
    def position(self) -> Tuple[int, float]:
        """(page index, y) pair, handy for logging and tests."""
        return self.page.index, self.y
