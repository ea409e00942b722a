"""
Tests for the grantor-report command line.
"""

import json

import pytest

from grantor_toolkit.cli import build_parser, main

from conftest import make_pdf

AWS_VARS = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_S3_BUCKET", "AWS_REGION")
REPORT_VARS = ("REPORT_STORAGE_ROOT", "REPORT_DOCUMENT_TYPES", "REPORT_FETCH_WORKERS")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in AWS_VARS + REPORT_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def payload_file(tmp_path):
    path = tmp_path / "payload.json"
    path.write_text(json.dumps({"applicationId": "APP123", "data": {"full_name": "Test"}}))
    return path


def _output(capsys):
    return json.loads(capsys.readouterr().out)


def test_render_without_documents(tmp_path, payload_file, capsys):
    # Arrange
    out = tmp_path / "out" / "report.pdf"

    # Act
    code = main(["render", "--payload", str(payload_file), "--out", str(out), "--no-documents"])

    # Assert
    assert code == 0
    assert out.read_bytes().startswith(b"%PDF-")
    result = _output(capsys)
    assert result["status"] == "ok"
    assert result["output"] == str(out.resolve())
    assert result["skipped_documents"] == []


def test_render_with_documents_dir(tmp_path, payload_file, capsys):
    docs = tmp_path / "docs"
    form16 = docs / "enroll_iq_files/submission_files/APP123/documents/form16/form16/form16.pdf"
    form16.parent.mkdir(parents=True)
    form16.write_bytes(make_pdf(["form16 page"]))
    out = tmp_path / "report.pdf"

    code = main(["render", "--payload", str(payload_file), "--out", str(out), "--documents-dir", str(docs)])

    assert code == 0
    result = _output(capsys)
    assert result["merged_pages"] == 1
    assert "Form 16" not in result["skipped_documents"]
    assert len(result["skipped_documents"]) == 4


def test_when_payload_missing_then_exit_2(tmp_path, capsys):
    code = main(["render", "--payload", str(tmp_path / "nope.json"), "--no-documents"])

    assert code == 2
    assert "Payload not found" in _output(capsys)["message"]


def test_when_payload_incomplete_then_exit_2(tmp_path, capsys):
    path = tmp_path / "payload.json"
    path.write_text(json.dumps({"applicationId": "APP123"}))

    code = main(["render", "--payload", str(path), "--no-documents"])

    assert code == 2
    assert _output(capsys)["message"] == "Application ID and data are required"


def test_when_s3_not_configured_then_exit_2(payload_file, capsys):
    code = main(["render", "--payload", str(payload_file)])

    assert code == 2
    assert "AWS S3 is not configured" in _output(capsys)["message"]


def test_document_sources_are_exclusive():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["render", "--payload", "p.json", "--no-documents", "--documents-dir", "d"])
