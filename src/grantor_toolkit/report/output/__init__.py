"""
Module: report.output

Purpose:
    PDF output for application reports: ReportLab rendering of laid-out
    pages, PyMuPDF merge of external documents, and the page-number pass.

Key Functions:
    - render_document(): Render layout to PDF bytes
    - merge_external_documents(): Append stored applicant PDFs
    - stamp_page_numbers(): "i of N" footers

Dependencies:
    - reportlab: PDF generation
    - fitz (PyMuPDF): Merge and overlay

Used By:
    - report.controller: Pipeline orchestration
"""

from .renderer import render_document
from .merger import (
    FetchResult,
    MergeOutcome,
    SkipReason,
    fetch_documents,
    merge_external_documents,
    stamp_title,
)
from .footer import footer_text, stamp_page_numbers

__all__ = [
    "render_document",
    "FetchResult",
    "MergeOutcome",
    "SkipReason",
    "fetch_documents",
    "merge_external_documents",
    "stamp_title",
    "footer_text",
    "stamp_page_numbers",
]
