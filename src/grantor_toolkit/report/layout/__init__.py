"""
Module: report.layout

Purpose:
    Page layout for application reports.
    Tracks the cursor, breaks pages and draws summary tables.

Key Functions:
    - draw_section(): Header plus table for one SectionSpec
    - draw_table(): Bordered label/value rows

Key Classes:
    - LayoutConfig: Page geometry and typography
    - ReportBuilder: Document, cursor and pagination
    - ReportDocument, Page: Layout output

Dependencies:
    - reportlab: Page size and font metrics

Used By:
    - report.controller: Report orchestration
"""

from .config import LayoutConfig
from .models import Cursor, ImageRun, LineShape, Page, RectShape, ReportDocument, TextRun
from .builder import ReportBuilder, fit_text
from .tables import draw_section, draw_section_header, draw_table, format_value

__all__ = [
    # Config
    "LayoutConfig",
    # Models
    "Cursor",
    "ImageRun",
    "LineShape",
    "Page",
    "RectShape",
    "ReportDocument",
    "TextRun",
    # Builder
    "ReportBuilder",
    "fit_text",
    # Tables
    "draw_section",
    "draw_section_header",
    "draw_table",
    "format_value",
]
