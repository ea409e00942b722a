"""
Tests for the "i of N" page-number pass.
"""

import io

import fitz
import pytest
from pypdf import PdfReader

from grantor_toolkit.report.layout import LayoutConfig
from grantor_toolkit.report.output import footer_text, stamp_page_numbers


@pytest.mark.parametrize("index, total, expected", [
    (0, 1, "1 of 1"),
    (0, 5, "1 of 5"),
    (4, 5, "5 of 5"),
])
def test_footer_text(index, total, expected):
    assert footer_text(index, total) == expected


def test_every_page_gets_its_number():
    # Arrange
    doc = fitz.open()
    for _ in range(4):
        doc.new_page()

    # Act
    stamped = stamp_page_numbers(doc)

    # Assert
    assert stamped == 4
    reader = PdfReader(io.BytesIO(doc.tobytes()))
    for i, page in enumerate(reader.pages):
        assert f"{i + 1} of 4" in page.extract_text()


def test_footer_sits_bottom_right_inside_margin():
    config = LayoutConfig()
    doc = fitz.open()
    doc.new_page(width=config.page_width, height=config.page_height)

    stamp_page_numbers(doc, config)

    (hit,) = doc[0].search_for("1 of 1")
    assert hit.x1 <= config.page_width - config.margin_x + 1
    assert hit.x1 >= config.page_width - config.margin_x - 5
    assert hit.y1 <= config.page_height
    assert hit.y0 >= config.page_height - config.footer_offset - 2 * config.footer_font_size


def test_mixed_page_sizes_are_numbered():
    doc = fitz.open()
    doc.new_page(width=595, height=842)
    doc.new_page(width=842, height=595)

    stamp_page_numbers(doc)

    assert "2 of 2" in doc[1].get_text()
    (hit,) = doc[1].search_for("2 of 2")
    assert hit.x1 > 595


def test_rotated_page_is_numbered():
    doc = fitz.open()
    page = doc.new_page()
    page.set_rotation(90)

    stamp_page_numbers(doc)

    assert "1 of 1" in doc[0].get_text()


def test_empty_document_stamps_nothing():
    assert stamp_page_numbers(fitz.open()) == 0
