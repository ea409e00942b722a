"""
Tests for application record normalization into summary sections.
"""

import json
import logging

from grantor_toolkit.report.sections import (
    ApplicationData,
    build_sections,
    eligibility_label,
    parse_verification_results,
)


def _rows(section):
    return {row.label: row.value for row in section.rows}


def test_sections_are_in_fixed_order(sample_application):
    sections = build_sections(ApplicationData.from_dict(sample_application), "APP123")

    assert [s.title for s in sections] == [
        "Applicant Details",
        "Address & Contact",
        "Application Status",
        "Document Verification Summary",
        "Score Breakdown",
        "Recommendation Details",
    ]


def test_when_record_complete_then_rows_carry_values(sample_application):
    sections = build_sections(ApplicationData.from_dict(sample_application), "APP123")

    applicant = _rows(sections[0])
    assert applicant["Full Name"] == "Asha Rao"
    assert applicant["Date of Birth"] == "4-11-2003"
    assert _rows(sections[1])["City"] == "Pune"
    status = _rows(sections[2])
    assert status["Application ID"] == "APP123"
    assert status["Final Rank"] == 7


def test_when_record_empty_then_every_row_kept_with_none():
    # Arrange
    data = ApplicationData.from_dict({})

    # Act
    sections = build_sections(data, "APP999")

    # Assert
    applicant = sections[0]
    assert applicant.row_count == 6
    assert all(row.value is None for row in applicant.rows)
    assert _rows(sections[2])["Application ID"] == "APP999"
    assert [s.row_count for s in sections] == [6, 6, 4, 5, 7, 4]


def test_when_any_dob_part_missing_then_date_is_none():
    data = ApplicationData.from_dict({"dob_day": 4, "dob_month": 11})

    assert data.date_of_birth is None


def test_name_and_id_fall_back_to_alternate_keys():
    data = ApplicationData.from_dict({"name": "R. Iyer", "applicationId": "APP7"})

    assert data.full_name == "R. Iyer"
    assert data.application_id == "APP7"


def test_final_rank_falls_back_to_recommendation_details():
    data = ApplicationData.from_dict({"recommendation_details": {"finalRank": 3}})

    assert data.final_rank == 3


def test_top_level_final_rank_wins_over_nested():
    data = ApplicationData.from_dict({
        "finalRank": 1,
        "recommendation_details": {"finalRank": 3},
    })

    assert data.final_rank == 1


class TestVerificationSummary:

    def test_eligibility_mapped_from_validation_blob(self, sample_application):
        sections = build_sections(ApplicationData.from_dict(sample_application), "APP123")

        verification = _rows(sections[3])
        assert verification == {
            "Form 16": "Eligible",
            "Caste Certificate": "Not Eligible",
            "10th Marksheet": "Not Eligible",
            "12th Marksheet": "Not Eligible",
            "Graduation": "Not Eligible",
        }

    def test_already_decoded_mapping_is_accepted(self):
        blob = {"verification_results": {"marksheet_12th": {"is_eligible": True}}}

        assert parse_verification_results(blob) == {"marksheet_12th": {"is_eligible": True}}

    def test_when_blob_unreadable_then_empty_and_warning_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="grantor_toolkit"):
            results = parse_verification_results("{not json")

        assert results == {}
        assert "Unreadable validation_result" in caplog.text

    def test_when_blob_not_an_object_then_empty(self):
        assert parse_verification_results(json.dumps([1, 2])) == {}
        assert parse_verification_results(None) == {}
        assert parse_verification_results("") == {}

    def test_eligibility_label_defaults_to_not_eligible(self):
        assert eligibility_label(None) == "Not Eligible"
        assert eligibility_label({"is_eligible": False}) == "Not Eligible"
        assert eligibility_label({"is_eligible": True}) == "Eligible"


def test_score_breakdown_rows_keep_missing_scores(sample_application):
    sections = build_sections(ApplicationData.from_dict(sample_application), "APP123")

    scores = _rows(sections[4])
    assert scores["University Score"] == 20
    assert scores["Total Score"] == 72.0
    assert scores["Income Score"] is None

    recommendation = _rows(sections[5])
    assert recommendation["Zone"] == "West"
    assert recommendation["Course Level"] == "PG"
