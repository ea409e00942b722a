"""
Module: report.controller

Purpose:
    Orchestrate the complete report assembly pipeline.
    Validate → Summary tables → Image pages → Render → Merge → Footer → Bytes

Key Functions:
    - build_report(): Main entry point for building a report

Key Classes:
    - ReportRequest: Parsed inbound request
    - ReportResult: Finished report and assembly diagnostics

Dependencies:
    - report.layout: Builder and tables
    - report.images: Screenshot pages
    - report.output: Rendering, merge and page numbers
    - fitz (PyMuPDF): Assembled document

Used By:
    - api.app: POST /api/download-pdf
    - cli: Offline rendering
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import fitz

from ..storage import ObjectStore
from .config import IMAGE_SLOTS, ReportConfig, build_document_refs
from .errors import ReportInputError
from .images import compose_image_page, decode_data_url
from .layout import ReportBuilder, draw_section
from .output import MergeOutcome, merge_external_documents, render_document, stamp_page_numbers
from .sections import ApplicationData, build_sections

logger = logging.getLogger(__name__)

SAFE_APPLICATION_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass(frozen=True)
class ReportRequest:
    """
    Inbound report request (immutable).

    Attributes:
        application_id: Application identifier
        data: Full application record
        images: Slot name -> base64 data URL (absent slots omitted)
    """
    application_id: str
    data: Mapping[str, Any]
    images: Mapping[str, Optional[str]] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> ReportRequest:
        """
        Parse the dashboard's JSON body.

        Args:
            payload: Decoded JSON ({applicationId, data, images})

        Returns:
            ReportRequest

        Raises:
            ReportInputError: If applicationId or data is missing or malformed
        """
        if not isinstance(payload, Mapping):
            raise ReportInputError("Request body must be a JSON object")

        application_id = payload.get("applicationId")
        data = payload.get("data")
        if application_id is None or str(application_id).strip() == "" or data is None:
            raise ReportInputError("Application ID and data are required")
        if not isinstance(data, Mapping):
            raise ReportInputError("data must be a JSON object")

        application_id = str(application_id).strip()
        if not SAFE_APPLICATION_ID.match(application_id) or ".." in application_id:
            raise ReportInputError(
                f"Invalid application ID {application_id!r}: "
                "only letters, digits, '.', '_' and '-' are allowed"
            )

        images = payload.get("images") or {}
        if not isinstance(images, Mapping):
            raise ReportInputError("images must be a JSON object")

        return cls(application_id=application_id, data=data, images=dict(images))

    @property
    def filename(self) -> str:
        """Download filename for the report."""
        return f"application-{self.application_id}.pdf"


@dataclass(frozen=True)
class ReportResult:
    """
    Finished report (immutable).

    Attributes:
        pdf_bytes: Serialized PDF
        filename: Download filename
        page_count: Total pages, including merged documents
        summary_pages: Pages holding the summary tables
        image_pages: Screenshot pages added
        merged: One MergeOutcome per external document ref
        elapsed_seconds: Wall time of the build
    """
    pdf_bytes: bytes = field(repr=False)
    filename: str
    page_count: int
    summary_pages: int
    image_pages: int
    merged: Tuple[MergeOutcome, ...] = ()
    elapsed_seconds: float = 0.0

    @property
    def merged_pages(self) -> int:
        """Pages appended from external documents."""
        return sum(o.pages_added for o in self.merged)

    @property
    def skipped_documents(self) -> List[str]:
        """Display titles of documents left out of the report."""
        return [o.ref.display_title for o in self.merged if not o.ok]

    @property
    def warnings(self) -> Tuple[str, ...]:
        """Human-readable notes about skipped documents."""
        return tuple(
            f"{o.ref.display_title}: {o.skip_reason.value}"
            for o in self.merged
            if not o.ok
        )


def build_report(
    request: ReportRequest,
    store: Optional[ObjectStore],
    config: Optional[ReportConfig] = None,
) -> ReportResult:
    """
    Build a report from start to finish.

    Pipeline:
    1. Validate request
    2. Title banner and the six summary sections
    3. One page per captured screenshot (fixed slot order)
    4. Render laid-out pages to PDF
    5. Merge stored applicant documents (fixed catalog order)
    6. Page numbers over the final page list
    7. Serialize

    Args:
        request: Parsed request
        store: Object store for applicant documents (None skips merging)
        config: Report configuration

    Returns:
        ReportResult with PDF bytes and diagnostics

    Raises:
        ReportInputError: If the request lacks required fields
        ImageDecodeError: If a supplied screenshot cannot be decoded

    Example:
        >>> request = ReportRequest("APP123", {"full_name": "Asha Rao"})
        >>> result = build_report(request, store, ReportConfig())
        >>> result.filename
        'application-APP123.pdf'
    """
    config = config or ReportConfig()
    start_time = time.perf_counter()

    # 1. Validate
    if not request.application_id or request.data is None:
        raise ReportInputError("Application ID and data are required")

    logger.info(f"Building report for application {request.application_id}")

    # 2. Summary sections
    builder = ReportBuilder(config.layout, title=f"Application {request.application_id}")
    builder.draw_title(config.report_title)

    data = ApplicationData.from_dict(request.data)
    for spec in build_sections(data, request.application_id):
        draw_section(builder, spec)
    summary_pages = builder.document.page_count

    # 3. Screenshot pages
    image_pages = 0
    for slot, title in IMAGE_SLOTS:
        image = decode_data_url(title, request.images.get(slot))
        if compose_image_page(builder, image):
            image_pages += 1

    logger.info(f"Laid out {summary_pages} summary pages and {image_pages} image pages")

    # 4. Render
    rendered = render_document(builder.document)

    with fitz.open(stream=rendered, filetype="pdf") as pdf:
        # 5. External documents
        outcomes: List[MergeOutcome] = []
        if store is None:
            logger.warning("No object store configured, skipping external documents")
        else:
            refs = build_document_refs(request.application_id, config)
            outcomes = merge_external_documents(
                pdf,
                refs,
                store,
                layout=config.layout,
                workers=config.fetch_workers,
                stamp_titles=config.stamp_document_titles,
            )

        # 6. Page numbers, once the page list is final
        stamp_page_numbers(pdf, config.layout)
        page_count = pdf.page_count

        # 7. Serialize
        pdf_bytes = pdf.tobytes(garbage=3, deflate=True)

    elapsed = time.perf_counter() - start_time
    result = ReportResult(
        pdf_bytes=pdf_bytes,
        filename=request.filename,
        page_count=page_count,
        summary_pages=summary_pages,
        image_pages=image_pages,
        merged=tuple(outcomes),
        elapsed_seconds=elapsed,
    )
    logger.info(
        f"Built {result.filename}: {page_count} pages "
        f"({result.merged_pages} merged, {len(result.skipped_documents)} documents skipped) "
        f"in {elapsed:.2f}s"
    )
    return result


def summarize(result: ReportResult) -> Dict[str, Any]:
    """JSON-friendly summary of a build, used by the CLI."""
    return {
        "filename": result.filename,
        "page_count": result.page_count,
        "summary_pages": result.summary_pages,
        "image_pages": result.image_pages,
        "merged_pages": result.merged_pages,
        "skipped_documents": result.skipped_documents,
        "elapsed_seconds": round(result.elapsed_seconds, 3),
    }
