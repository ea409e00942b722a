"""
Module: report.output.footer

Purpose:
    Final pass over the assembled report: "i of N" page numbers in the
    bottom-right corner of every page. Runs only once all pages exist.

Key Functions:
    - stamp_page_numbers(): Add footers to every page
    - footer_text(): Footer label for one page

Dependencies:
    - fitz (PyMuPDF): Text overlay on existing pages

Used By:
    - report.controller: Last assembly step
"""

from __future__ import annotations

import logging
from typing import Optional

import fitz

from ..layout.config import LayoutConfig

logger = logging.getLogger(__name__)

FOOTER_FONT = "helv"


def footer_text(index: int, total: int) -> str:
    """
    Footer label for a 0-indexed page.

    Example:
        >>> footer_text(0, 3)
        '1 of 3'
    """
    return f"{index + 1} of {total}"


def stamp_page_numbers(pdf: fitz.Document, layout: Optional[LayoutConfig] = None) -> int:
    """
    Right-align "i of N" near the bottom-right of every page.

    Args:
        pdf: Fully assembled report (modified in place)
        layout: Margins, font size and colour

    Returns:
        Number of pages stamped
    """
    layout = layout or LayoutConfig()
    total = pdf.page_count

    for index in range(total):
        page = pdf[index]
        text = footer_text(index, total)
        width = fitz.get_text_length(text, fontname=FOOTER_FONT, fontsize=layout.footer_font_size)
        visible = page.rect
        x = visible.width - layout.margin_x - width
        y = visible.height - layout.footer_offset
        point = fitz.Point(x, y) * page.derotation_matrix
        page.insert_text(
            point,
            text,
            fontname=FOOTER_FONT,
            fontsize=layout.footer_font_size,
            color=layout.footer_color,
            rotate=page.rotation,
        )

    logger.info(f"Stamped page numbers on {total} pages")
    return total
