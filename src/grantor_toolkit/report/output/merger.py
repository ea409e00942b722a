"""
Module: report.output.merger

Purpose:
    Fetch applicant PDFs from object storage and append their pages to the
    report, stamping each document's title on its first merged page.
    A missing or broken document is skipped; it never aborts the report.

Key Functions:
    - fetch_documents(): Fetch bytes for every ref (optionally in parallel)
    - merge_external_documents(): Append fetched documents in ref order

Key Classes:
    - SkipReason: Why a document was not merged
    - FetchResult: Bytes or skip reason for one ref
    - MergeOutcome: Pages added or skip reason for one ref

Algorithm:
    1. Fetch every ref; results are re-sequenced into ref order
    2. For each ref in order: skip on missing/empty/timeout/error
    3. Open with PyMuPDF and insert all pages at the end of the report
    4. Stamp the display title on the first inserted page

Dependencies:
    - fitz (PyMuPDF): PDF parsing, page copy, text stamping
    - storage: ObjectStore and its errors

Used By:
    - report.controller: Pipeline orchestration
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

import fitz

from ...storage import ObjectNotFoundError, ObjectStore, StorageError, StorageTimeoutError
from ..config import ExternalDocumentRef
from ..layout.config import LayoutConfig

logger = logging.getLogger(__name__)

STAMP_FONT = "hebo"  # Helvetica-Bold (PDF base-14)


class SkipReason(Enum):
    """Why an external document was left out of the report."""
    NOT_FOUND = "not_found"
    EMPTY = "empty"
    TIMEOUT = "timeout"
    FETCH_ERROR = "fetch_error"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class FetchResult:
    """Fetched bytes for one ref, or the reason there are none."""
    ref: ExternalDocumentRef
    data: Optional[bytes] = field(default=None, repr=False)
    skip_reason: Optional[SkipReason] = None
    detail: str = ""


@dataclass(frozen=True)
class MergeOutcome:
    """
    Result of merging one external document (immutable).

    Attributes:
        ref: Document that was processed
        pages_added: Pages appended to the report (0 when skipped)
        skip_reason: None when merged, else why it was skipped
        detail: Error text for skipped documents
    """
    ref: ExternalDocumentRef
    pages_added: int = 0
    skip_reason: Optional[SkipReason] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        """True if the document was merged."""
        return self.skip_reason is None


def fetch_document(store: ObjectStore, ref: ExternalDocumentRef) -> FetchResult:
    """
    Fetch one document, mapping storage failures to skip reasons.

    A timeout is skipped like a missing document; the report continues.
    """
    try:
        data = store.get_object(ref.storage_key)
    except ObjectNotFoundError:
        return FetchResult(ref, skip_reason=SkipReason.NOT_FOUND)
    except StorageTimeoutError as e:
        return FetchResult(ref, skip_reason=SkipReason.TIMEOUT, detail=str(e))
    except StorageError as e:
        return FetchResult(ref, skip_reason=SkipReason.FETCH_ERROR, detail=str(e))
    except Exception as e:  # noqa: BLE001
        return FetchResult(ref, skip_reason=SkipReason.FETCH_ERROR, detail=f"{type(e).__name__}: {e}")

    if not data:
        return FetchResult(ref, skip_reason=SkipReason.EMPTY)
    return FetchResult(ref, data=data)


def fetch_documents(
    store: ObjectStore,
    refs: Sequence[ExternalDocumentRef],
    workers: int = 1,
) -> List[FetchResult]:
    """
    Fetch every ref, returning results in ref order.

    Args:
        store: Object store
        refs: Documents in report order
        workers: Concurrent fetches (1 = sequential)

    Returns:
        One FetchResult per ref, same order as refs
    """
    if not refs:
        return []
    if workers <= 1 or len(refs) == 1:
        return [fetch_document(store, ref) for ref in refs]

    with ThreadPoolExecutor(max_workers=min(workers, len(refs)), thread_name_prefix="doc-fetch") as pool:
        # map() yields in submission order, which keeps the report order
        return list(pool.map(lambda ref: fetch_document(store, ref), refs))


def merge_external_documents(
    target: fitz.Document,
    refs: Sequence[ExternalDocumentRef],
    store: ObjectStore,
    *,
    layout: Optional[LayoutConfig] = None,
    workers: int = 1,
    stamp_titles: bool = True,
) -> List[MergeOutcome]:
    """
    Append every available external document to target.

    Args:
        target: Report being assembled (modified in place)
        refs: Documents in report order
        store: Object store to fetch from
        layout: Layout config for stamp position, font and colour
        workers: Concurrent fetches
        stamp_titles: Whether to stamp display titles

    Returns:
        One MergeOutcome per ref, in ref order
    """
    layout = layout or LayoutConfig()
    outcomes: List[MergeOutcome] = []

    for fetched in fetch_documents(store, refs, workers):
        ref = fetched.ref
        if fetched.skip_reason is not None:
            _log_skip(ref, fetched.skip_reason, fetched.detail)
            outcomes.append(MergeOutcome(ref, skip_reason=fetched.skip_reason, detail=fetched.detail))
            continue

        outcome = _append_pdf(target, ref, fetched.data, layout, stamp_titles)
        outcomes.append(outcome)

    merged = [o for o in outcomes if o.ok]
    logger.info(
        f"Merged {len(merged)}/{len(outcomes)} external documents "
        f"({sum(o.pages_added for o in merged)} pages)"
    )
    return outcomes


def _append_pdf(
    target: fitz.Document,
    ref: ExternalDocumentRef,
    data: bytes,
    layout: LayoutConfig,
    stamp_titles: bool,
) -> MergeOutcome:
    """Insert all pages of one fetched PDF, rolling back on failure."""
    start = target.page_count
    try:
        with fitz.open(stream=data, filetype="pdf") as source:
            if source.needs_pass:
                raise ValueError("document is encrypted")
            if source.page_count == 0:
                raise ValueError("document has no pages")
            target.insert_pdf(source)
        if stamp_titles:
            stamp_title(target[start], ref.display_title, layout)
    except Exception as e:  # noqa: BLE001
        if target.page_count > start:
            target.delete_pages(from_page=start, to_page=target.page_count - 1)
        logger.error(f"Failed to merge {ref.display_title} ({ref.storage_key}): {e}")
        return MergeOutcome(ref, skip_reason=SkipReason.PARSE_ERROR, detail=str(e))

    added = target.page_count - start
    logger.debug(f"Merged {ref.display_title}: {added} pages")
    return MergeOutcome(ref, pages_added=added)


def stamp_title(page: fitz.Page, title: str, layout: LayoutConfig) -> None:
    """
    Overlay a document title near the top-left of a page.

    Coordinates are given in the visible (rotated) page space and mapped
    back to the unrotated space PyMuPDF draws in.
    """
    point = fitz.Point(layout.margin_x, layout.image_title_offset) * page.derotation_matrix
    page.insert_text(
        point,
        title,
        fontname=STAMP_FONT,
        fontsize=layout.stamp_font_size,
        color=layout.accent_color,
        rotate=page.rotation,
    )


def _log_skip(ref: ExternalDocumentRef, reason: SkipReason, detail: str) -> None:
    if reason in (SkipReason.NOT_FOUND, SkipReason.EMPTY):
        logger.warning(f"Document {ref.display_title} not found in storage: {ref.storage_key}")
    elif reason is SkipReason.TIMEOUT:
        logger.warning(f"Timed out fetching {ref.display_title}, skipping: {detail}")
    else:
        logger.error(f"Failed to load document {ref.display_title}: {detail}")
