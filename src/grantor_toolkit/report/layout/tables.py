"""
Module: report.layout.tables

Purpose:
    Draw titled sections holding a two-column, bordered label/value table.

Key Functions:
    - draw_section_header(): Accent bar with the section title
    - draw_table(): Label/value rows with borders and page splitting
    - draw_section(): Header followed by its table
    - format_value(): Display string for a row value

Dependencies:
    - report.layout.builder: ReportBuilder
    - report.sections: SectionSpec, TableRow

Used By:
    - report.controller: Summary pages
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .builder import ReportBuilder
from .models import Page, RectShape
from ..sections import SectionSpec, TableRow

logger = logging.getLogger(__name__)


def format_value(value: Any, placeholder: str = "N/A") -> str:
    """
    Coerce a row value to its display string.

    Args:
        value: Raw value (None, str, number, bool, ...)
        placeholder: Text used for absent values

    Returns:
        Display string, never empty

    Example:
        >>> format_value(None)
        'N/A'
        >>> format_value(72.0)
        '72'
    """
    if value is None:
        return placeholder
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    text = str(value).strip()
    return text or placeholder


def draw_section_header(builder: ReportBuilder, title: str) -> None:
    """
    Draw a filled accent bar with the section title.

    Breaks to a new page first when less than two rows of space remain.

    Args:
        builder: Report builder
        title: Section title
    """
    config = builder.config
    builder.ensure_space(2)

    top = builder.y
    builder.draw_rect(
        config.margin_x,
        top,
        config.content_width,
        config.header_height,
        fill_color=config.accent_color,
        stroke_color=None,
    )
    builder.draw_text(
        config.margin_x + 8,
        top + config.header_height - 7,
        title,
        bold=True,
        size=config.header_font_size,
        color=config.header_text_color,
        max_width=config.content_width - 16,
    )
    builder.advance(config.header_height)


def draw_table(builder: ReportBuilder, rows: Iterable[TableRow]) -> int:
    """
    Draw label/value rows as a bordered two-column table.

    Each row reserves its own space, so a long table splits across pages
    between rows. Every page segment gets its own outer border.

    Args:
        builder: Report builder
        rows: Rows in display order

    Returns:
        Number of rows drawn
    """
    config = builder.config
    value_x = config.margin_x + config.label_column_width
    label_width = config.label_column_width - 2 * config.cell_padding
    value_width = config.content_width - config.label_column_width - 2 * config.cell_padding

    segment_page = builder.page
    segment_top = builder.y
    segment_bottom = builder.y
    count = 0

    for row in rows:
        builder.ensure_space(1)
        if builder.page is not segment_page:
            _draw_outer_border(builder, segment_page, segment_top, segment_bottom)
            segment_page = builder.page
            segment_top = builder.y

        top = builder.y
        builder.draw_rect(
            config.margin_x,
            top,
            config.content_width,
            config.row_height,
            stroke_color=config.text_color,
            line_width=config.row_border_width,
        )
        builder.draw_line(value_x, top, value_x, top + config.row_height, line_width=config.row_border_width)
        builder.draw_text(
            config.margin_x + config.cell_padding,
            top + config.text_baseline,
            row.label,
            bold=True,
            max_width=label_width,
        )
        builder.draw_text(
            value_x + config.cell_padding,
            top + config.text_baseline,
            format_value(row.value, config.placeholder),
            max_width=value_width,
        )
        builder.advance(config.row_height)
        segment_bottom = builder.y
        count += 1

    _draw_outer_border(builder, segment_page, segment_top, segment_bottom)
    builder.advance(config.table_gap)
    return count


def draw_section(builder: ReportBuilder, spec: SectionSpec) -> int:
    """
    Draw a section header followed by its table.

    Returns:
        Number of rows drawn
    """
    draw_section_header(builder, spec.title)
    drawn = draw_table(builder, spec.rows)
    logger.debug(f"Drew section '{spec.title}' with {drawn} rows, cursor at {builder.cursor.position}")
    return drawn


def _draw_outer_border(builder: ReportBuilder, page: Page, top: float, bottom: float) -> None:
    """Draw the heavier outer border of one table segment on its own page."""
    if bottom <= top:
        return
    config = builder.config
    page.add(RectShape(
        x=config.margin_x,
        y=top,
        width=config.content_width,
        height=bottom - top,
        fill_color=None,
        stroke_color=config.text_color,
        line_width=config.outer_border_width,
    ))
