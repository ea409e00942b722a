"""
End-to-end tests for report assembly.

Summary pages, screenshot pages, merged documents and page numbers are
checked on the serialized PDF.
"""

import io

import fitz
import pytest
from pypdf import PdfReader

from grantor_toolkit.report import (
    ImageDecodeError,
    ReportConfig,
    ReportInputError,
    ReportRequest,
    build_report,
)
from grantor_toolkit.report.config import build_document_refs
from grantor_toolkit.report.controller import summarize
from grantor_toolkit.report.output import SkipReason

from conftest import MemoryObjectStore, make_pdf


def _page_texts(pdf_bytes):
    reader = PdfReader(io.BytesIO(pdf_bytes))
    return [page.extract_text() for page in reader.pages]


def _doc_key(doc_type, application_id="APP123"):
    refs = build_document_refs(application_id, ReportConfig())
    return next(r.storage_key for r in refs if r.doc_type == doc_type)


class TestReportRequest:

    def test_valid_payload(self):
        request = ReportRequest.from_payload({
            "applicationId": " APP123 ",
            "data": {"full_name": "Asha Rao"},
            "images": {"personal": "data:image/png;base64,AAAA"},
        })

        assert request.application_id == "APP123"
        assert request.filename == "application-APP123.pdf"
        assert request.images == {"personal": "data:image/png;base64,AAAA"}

    def test_missing_images_default_to_empty(self):
        request = ReportRequest.from_payload({"applicationId": "APP1", "data": {}, "images": None})

        assert request.images == {}

    @pytest.mark.parametrize("payload", [
        {"data": {}},
        {"applicationId": "APP1"},
        {"applicationId": "", "data": {}},
        {"applicationId": "APP1", "data": None},
    ])
    def test_when_id_or_data_missing_then_raises(self, payload):
        with pytest.raises(ReportInputError, match="Application ID and data are required"):
            ReportRequest.from_payload(payload)

    @pytest.mark.parametrize("payload, message", [
        ([1, 2], "JSON object"),
        ({"applicationId": "APP1", "data": "text"}, "data must be"),
        ({"applicationId": "../etc", "data": {}}, "Invalid application ID"),
        ({"applicationId": "APP..1", "data": {}}, "Invalid application ID"),
        ({"applicationId": "APP 1", "data": {}}, "Invalid application ID"),
        ({"applicationId": "APP1", "data": {}, "images": ["x"]}, "images must be"),
    ])
    def test_malformed_payload_raises(self, payload, message):
        with pytest.raises(ReportInputError, match=message):
            ReportRequest.from_payload(payload)


class TestBuildReport:

    def test_when_documents_missing_then_summary_only_with_page_numbers(self):
        # Arrange
        request = ReportRequest("APP123", {"full_name": "Test"})
        store = MemoryObjectStore()

        # Act
        result = build_report(request, store, ReportConfig())

        # Assert
        texts = _page_texts(result.pdf_bytes)
        assert result.page_count == len(texts) == result.summary_pages
        assert result.image_pages == 0
        assert result.merged_pages == 0
        assert "Test" in texts[0]
        assert "N/A" in texts[0]
        assert "APP123" in "".join(texts)
        for i, text in enumerate(texts):
            assert f"{i + 1} of {result.page_count}" in text
        assert len(store.requested) == 5
        assert all(o.skip_reason is SkipReason.NOT_FOUND for o in result.merged)

    def test_full_report_order(self, sample_application, png_data_url):
        # Arrange
        store = MemoryObjectStore({
            _doc_key("form16"): make_pdf(["FORM16 CONTENT"]),
            _doc_key("marksheet_12th"): make_pdf(["TWELFTH A", "TWELFTH B"]),
        })
        request = ReportRequest("APP123", sample_application, {
            "personal": png_data_url(400, 300),
            "recommendations": png_data_url(300, 600),
        })

        # Act
        result = build_report(request, store, ReportConfig(fetch_workers=3))

        # Assert
        texts = _page_texts(result.pdf_bytes)
        total = result.page_count
        assert total == result.summary_pages + 2 + 3
        assert result.image_pages == 2
        assert result.merged_pages == 3

        image_start = result.summary_pages
        assert "Personal Details" in texts[image_start]
        assert "Recommendations" in texts[image_start + 1]
        assert "FORM16 CONTENT" in texts[image_start + 2]
        assert "Form 16" in texts[image_start + 2]
        assert "TWELFTH A" in texts[image_start + 3]
        assert "12th Marksheet" in texts[image_start + 3]
        assert "TWELFTH B" in texts[image_start + 4]
        assert texts[-1].count(f"{total} of {total}") == 1

        assert result.skipped_documents == ["Caste Certificate", "10th Marksheet", "Graduation Certificate"]

    def test_summary_contains_section_values(self, sample_application):
        result = build_report(ReportRequest("APP123", sample_application), MemoryObjectStore())

        summary = "".join(_page_texts(result.pdf_bytes)[:result.summary_pages])
        for expected in ("Application Summary", "Asha Rao", "4-11-2003", "Eligible", "Not Eligible", "West", "72"):
            assert expected in summary

    def test_when_store_missing_then_no_documents_requested(self):
        result = build_report(ReportRequest("APP123", {}), None)

        assert result.merged == ()
        assert result.page_count == result.summary_pages

    def test_when_image_undecodable_then_raises(self):
        request = ReportRequest("APP123", {}, {"documents": "data:image/png;base64,!!!"})

        with pytest.raises(ImageDecodeError, match="Document Validation"):
            build_report(request, MemoryObjectStore())

    def test_when_id_blank_then_raises(self):
        with pytest.raises(ReportInputError):
            build_report(ReportRequest("", {}), None)

    def test_corrupt_document_is_skipped(self):
        store = MemoryObjectStore({_doc_key("form16"): b"%PDF-garbage"})

        result = build_report(ReportRequest("APP123", {}), store)

        assert result.merged[0].skip_reason is SkipReason.PARSE_ERROR
        assert "Form 16: parse_error" in result.warnings
        with fitz.open(stream=result.pdf_bytes, filetype="pdf") as pdf:
            assert pdf.page_count == result.summary_pages

    def test_summarize_is_json_friendly(self):
        result = build_report(ReportRequest("APP123", {}), MemoryObjectStore())

        summary = summarize(result)

        assert summary["filename"] == "application-APP123.pdf"
        assert summary["page_count"] == result.page_count
        assert len(summary["skipped_documents"]) == 5


@pytest.mark.parametrize("workers", [1, 4])
def test_when_store_connection_resets_then_report_still_built(workers):
    # Arrange
    store = MemoryObjectStore({
        _doc_key("form16"): ConnectionResetError("peer reset while streaming body"),
        _doc_key("graduation"): make_pdf(["GRAD"]),
    })

    # Act
    result = build_report(ReportRequest("APP123", {}), store, ReportConfig(fetch_workers=workers))

    # Assert
    assert result.merged[0].skip_reason is SkipReason.FETCH_ERROR
    assert result.merged_pages == 1
    texts = _page_texts(result.pdf_bytes)
    assert "GRAD" in texts[-1]
    assert "Graduation Certificate" in texts[-1]


def test_invalid_application_id_message_lists_allowed_characters():
    with pytest.raises(ReportInputError, match="only letters, digits"):
        ReportRequest.from_payload({"applicationId": "APP/1", "data": {}})
