"""
Module: report

Purpose:
    Application report assembly. Builds a paginated summary of one
    scholarship application, adds captured screenshots, merges the
    applicant's stored PDFs and numbers every page.

Key Functions:
    - build_report(): Main entry point for report generation

Key Classes:
    - ReportConfig: Configuration for report assembly
    - ReportRequest: Parsed inbound request
    - ReportResult: Finished PDF plus diagnostics

Dependencies:
    - reportlab: Summary and image pages
    - fitz (PyMuPDF): Merge and page numbers
    - PIL: Screenshot decoding

Used By:
    - grantor_toolkit.api: Dashboard download endpoint
    - grantor_toolkit.cli: Offline rendering
"""

from .config import ReportConfig, ExternalDocumentRef, build_document_refs
from .errors import ReportError, ReportInputError, ImageDecodeError
from .controller import build_report, ReportRequest, ReportResult

__all__ = [
    # Config
    "ReportConfig",
    "ExternalDocumentRef",
    "build_document_refs",
    # Errors
    "ReportError",
    "ReportInputError",
    "ImageDecodeError",
    # Controller
    "build_report",
    "ReportRequest",
    "ReportResult",
]
