"""
Module: report.output.renderer

Purpose:
    Render a ReportDocument to PDF bytes using ReportLab.
    Each Page becomes one PDF page with its primitives drawn in order.

Key Functions:
    - render_document(): Main rendering function

Dependencies:
    - reportlab: PDF generation
    - report.layout.models: ReportDocument, primitives

Used By:
    - report.controller: Pipeline orchestration
"""

from __future__ import annotations

import io
import logging

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..layout.models import ImageRun, LineShape, Page, RectShape, ReportDocument, TextRun

logger = logging.getLogger(__name__)


def render_document(document: ReportDocument) -> bytes:
    """
    Render every page of the document to a PDF.

    Args:
        document: Laid-out report

    Returns:
        PDF bytes

    Example:
        >>> pdf = render_document(builder.document)
        >>> pdf[:5]
        b'%PDF-'
    """
    if document.page_count == 0:
        logger.warning("Empty document, creating blank PDF")

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer)
    c.setTitle(document.title)
    c.setCreator("grantor_toolkit")

    for page in document.pages:
        c.setPageSize((page.width, page.height))
        _render_page(c, page)
        c.showPage()

    c.save()
    logger.info(f"Rendered {document.page_count} pages ({buffer.tell()} bytes)")
    return buffer.getvalue()


def _render_page(c: canvas.Canvas, page: Page) -> None:
    """Draw all primitives of one page in paint order."""
    for primitive in page.primitives:
        if isinstance(primitive, RectShape):
            _draw_rect(c, primitive, page.height)
        elif isinstance(primitive, LineShape):
            _draw_line(c, primitive, page.height)
        elif isinstance(primitive, TextRun):
            _draw_text(c, primitive, page.height)
        elif isinstance(primitive, ImageRun):
            _draw_image(c, primitive, page.height)
        else:
            raise TypeError(f"Unsupported primitive: {type(primitive).__name__}")


def _draw_rect(c: canvas.Canvas, rect: RectShape, page_height: float) -> None:
    c.saveState()
    fill = rect.fill_color is not None
    stroke = rect.stroke_color is not None
    if fill:
        c.setFillColorRGB(*rect.fill_color)
    if stroke:
        c.setStrokeColorRGB(*rect.stroke_color)
        c.setLineWidth(rect.line_width)
    c.rect(
        rect.x,
        _transform_y(page_height, rect.y, rect.height),
        rect.width,
        rect.height,
        stroke=int(stroke),
        fill=int(fill),
    )
    c.restoreState()


def _draw_line(c: canvas.Canvas, line: LineShape, page_height: float) -> None:
    c.saveState()
    c.setStrokeColorRGB(*line.color)
    c.setLineWidth(line.line_width)
    c.line(line.x1, page_height - line.y1, line.x2, page_height - line.y2)
    c.restoreState()


def _draw_text(c: canvas.Canvas, run: TextRun, page_height: float) -> None:
    c.saveState()
    c.setFont(run.font, run.size)
    c.setFillColorRGB(*run.color)
    c.drawString(run.x, page_height - run.y, run.text)
    c.restoreState()


def _draw_image(c: canvas.Canvas, image: ImageRun, page_height: float) -> None:
    reader = ImageReader(io.BytesIO(image.data))
    c.drawImage(
        reader,
        image.x,
        _transform_y(page_height, image.y, image.height),
        width=image.width,
        height=image.height,
        mask="auto",
    )


def _transform_y(page_height: float, y_top: float, height: float) -> float:
    """
    Convert a top-down y of a box to the PDF bottom-up y of its lower edge.

    Args:
        page_height: Page height in points
        y_top: Distance of the box top from the page top
        height: Box height

    Returns:
        Y position from bottom in points
    """
    return page_height - y_top - height
