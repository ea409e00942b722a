"""
Module: report.config

Purpose:
    Configuration for report assembly. Immutable configuration with
    validation on construction; environment overrides via from_env().

Key Classes:
    - ReportConfig: Main configuration for building reports
    - DocumentType: One known applicant document in the catalog
    - ExternalDocumentRef: Storage key plus display title for one document

Key Functions:
    - build_document_refs(): Refs for one application, in catalog order

Dependencies:
    - dataclasses (std)
    - report.layout.config: LayoutConfig

Used By:
    - report.controller: Orchestration
    - report.output.merger: External documents
    - api.app, cli: Request handling
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from .layout.config import LayoutConfig

DEFAULT_STORAGE_ROOT = "enroll_iq_files"


@dataclass(frozen=True)
class DocumentType:
    """
    A known applicant document (immutable).

    Attributes:
        doc_type: Storage folder name, e.g. "form16"
        file_path: Path below the doc_type folder, e.g. "form16/form16.pdf"
        display_title: Title stamped on the merged document
    """
    doc_type: str
    file_path: str
    display_title: str


@dataclass(frozen=True)
class ExternalDocumentRef:
    """
    One applicant PDF in external storage (immutable).

    Attributes:
        storage_key: Full object key
        display_title: Title stamped on its first merged page
        doc_type: Catalog doc type, for logging
    """
    storage_key: str
    display_title: str
    doc_type: str = ""


# Report order of merged documents
DOCUMENT_CATALOG: Tuple[DocumentType, ...] = (
    DocumentType("form16", "form16/form16.pdf", "Form 16"),
    DocumentType("caste_certificate", "caste.pdf", "Caste Certificate"),
    DocumentType("marksheet_10th", "marksheet10th.pdf", "10th Marksheet"),
    DocumentType("marksheet_12th", "marksheet12th.pdf", "12th Marksheet"),
    DocumentType("graduation", "graduation.pdf", "Graduation Certificate"),
    DocumentType("offer_letter", "offerLetter.pdf", "Offer Letter"),
    DocumentType("bank_passbook", "bankPassbook.pdf", "Bank Passbook"),
    DocumentType("statement_of_purpose", "statementOfPurpose.pdf", "Statement of Purpose"),
    DocumentType("cv", "cv.pdf", "Curriculum Vitae"),
)

DEFAULT_DOCUMENT_TYPES: Tuple[str, ...] = (
    "form16",
    "caste_certificate",
    "marksheet_10th",
    "marksheet_12th",
    "graduation",
)

# (request key, page title), in report order
IMAGE_SLOTS: Tuple[Tuple[str, str], ...] = (
    ("personal", "Personal Details"),
    ("documents", "Document Validation"),
    ("source", "Verification by Source"),
    ("recommendations", "Recommendations"),
)


@dataclass(frozen=True)
class ReportConfig:
    """
    Configuration for building application reports (immutable).

    Attributes:
        layout: Page geometry and typography
        storage_root: Top-level prefix of submission files
        document_types: Enabled catalog entries (merged in catalog order)
        fetch_workers: Parallel document fetches (1 = sequential)
        report_title: Banner drawn on the first page
        stamp_document_titles: Stamp each merged document's first page

    Example:
        >>> config = ReportConfig(document_types=("form16", "offer_letter"))
        >>> [d.doc_type for d in config.enabled_documents]
        ['form16', 'offer_letter']
    """

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    storage_root: str = DEFAULT_STORAGE_ROOT
    document_types: Tuple[str, ...] = DEFAULT_DOCUMENT_TYPES
    fetch_workers: int = 4
    report_title: str = "Application Summary"
    stamp_document_titles: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        known = {d.doc_type for d in DOCUMENT_CATALOG}
        unknown = [t for t in self.document_types if t not in known]
        if unknown:
            raise ValueError(f"Unknown document types: {unknown}")
        if self.fetch_workers < 1:
            raise ValueError(f"fetch_workers must be at least 1: {self.fetch_workers}")
        if not self.storage_root.strip("/"):
            raise ValueError("storage_root must not be empty")

    @property
    def enabled_documents(self) -> List[DocumentType]:
        """Enabled catalog entries in catalog order."""
        enabled = set(self.document_types)
        return [d for d in DOCUMENT_CATALOG if d.doc_type in enabled]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ReportConfig:
        """
        Build configuration from environment variables.

        REPORT_STORAGE_ROOT, REPORT_DOCUMENT_TYPES (comma-separated),
        REPORT_FETCH_WORKERS.
        """
        env = os.environ if environ is None else environ
        kwargs = {}
        root = env.get("REPORT_STORAGE_ROOT", "").strip()
        if root:
            kwargs["storage_root"] = root
        types = env.get("REPORT_DOCUMENT_TYPES", "").strip()
        if types:
            kwargs["document_types"] = tuple(t.strip() for t in types.split(",") if t.strip())
        workers = env.get("REPORT_FETCH_WORKERS", "").strip()
        if workers:
            kwargs["fetch_workers"] = int(workers)
        return cls(**kwargs)


def document_key(storage_root: str, application_id: str, document: DocumentType) -> str:
    """
    Storage key for one document of one application.

    Pattern: {root}/submission_files/{applicationId}/documents/{docType}/{fileName}

    Example:
        >>> document_key("enroll_iq_files", "APP1", DOCUMENT_CATALOG[1])
        'enroll_iq_files/submission_files/APP1/documents/caste_certificate/caste.pdf'
    """
    root = storage_root.strip("/")
    return f"{root}/submission_files/{application_id}/documents/{document.doc_type}/{document.file_path}"


def build_document_refs(application_id: str, config: ReportConfig) -> List[ExternalDocumentRef]:
    """
    External document refs for one application, in catalog order.

    Args:
        application_id: Application identifier
        config: Report configuration

    Returns:
        List of ExternalDocumentRef
    """
    return [
        ExternalDocumentRef(
            storage_key=document_key(config.storage_root, application_id, doc),
            display_title=doc.display_title,
            doc_type=doc.doc_type,
        )
        for doc in config.enabled_documents
    ]
