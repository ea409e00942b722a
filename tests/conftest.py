import base64
import io
import logging
import sys
from pathlib import Path
from typing import Dict, Iterable, Optional

import pytest
from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

# Add src to sys.path so we can import grantor_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from grantor_toolkit.storage import (  # noqa: E402
    ObjectNotFoundError,
    ObjectStore,
    StorageError,
    StorageTimeoutError,
)


class MemoryObjectStore(ObjectStore):
    """In-memory store; values may be bytes or an exception to raise."""

    def __init__(self, objects: Optional[Dict[str, object]] = None) -> None:
        self.objects: Dict[str, object] = dict(objects or {})
        self.requested: list[str] = []

    def get_object(self, key: str) -> bytes:
        self.requested.append(key)
        if key not in self.objects:
            raise ObjectNotFoundError(key)
        value = self.objects[key]
        if isinstance(value, Exception):
            raise value
        return value


def make_png(width: int = 200, height: int = 100, color: str = "white") -> bytes:
    img = Image.new("RGB", (width, height), color=color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def make_pdf(page_texts: Iterable[str]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    for text in page_texts:
        c.setFont("Helvetica", 12)
        c.drawString(72, 400, text)
        c.showPage()
    c.save()
    return buf.getvalue()


# Common test fixtures
@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers that configure_logging() bound to a captured stream."""
    yield
    package_logger = logging.getLogger("grantor_toolkit")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def png_data_url():
    """Factory for PNG data URLs of a given size."""
    def _create(width: int = 200, height: int = 100) -> str:
        encoded = base64.b64encode(make_png(width, height)).decode("ascii")
        return f"data:image/png;base64,{encoded}"
    return _create


@pytest.fixture
def pdf_factory():
    """Factory for small PDFs with one line of text per page."""
    return make_pdf


@pytest.fixture
def memory_store():
    """Empty in-memory object store."""
    return MemoryObjectStore()


@pytest.fixture
def store_errors():
    """Exceptions a store can raise, keyed by name."""
    return {
        "timeout": StorageTimeoutError("k", "read timeout"),
        "error": StorageError("connection reset"),
    }


@pytest.fixture
def sample_application():
    """Application record with every summary field filled."""
    return {
        "application_id": "APP123",
        "full_name": "Asha Rao",
        "gender": "Female",
        "dob_day": 4,
        "dob_month": 11,
        "dob_year": 2003,
        "category": "OBC",
        "father_name": "Ravi Rao",
        "mother_name": "Meena Rao",
        "address": "12 Lake Road",
        "city": "Pune",
        "state": "Maharashtra",
        "pincode": "411001",
        "phone": "9800000000",
        "email": "asha@example.com",
        "application_status": "submitted",
        "submitted_at": "2024-06-01",
        "validation_result": (
            '{"verification_results": {"form16": {"is_eligible": true}, '
            '"caste_certificate": {"is_eligible": false}}}'
        ),
        "recommendation_details": {
            "finalRank": 7,
            "scoreBreakdown": {"universityScore": 20, "academicScore": 18.5, "totalScore": 72.0},
            "courseLevelPriority": "PG",
            "universityRanking": 45,
            "daysUntilCourseStart": 30,
            "zone": "West",
        },
    }
