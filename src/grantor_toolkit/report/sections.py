"""
Module: report.sections

Purpose:
    Explicit input schema for an application record and the single
    normalization step that turns it into summary sections.
    All missing-field handling lives here; the renderer only draws.

Key Functions:
    - build_sections(): ApplicationData -> ordered SectionSpecs
    - parse_verification_results(): Lenient decode of the eligibility blob

Key Classes:
    - ApplicationData: Optional-everything application record
    - SectionSpec: Title plus label/value rows
    - TableRow: One label/value pair

Dependencies:
    - json (std)
    - dataclasses (std)

Used By:
    - report.controller: Summary pages
    - report.layout.tables: Row drawing
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

ELIGIBLE = "Eligible"
NOT_ELIGIBLE = "Not Eligible"

# (verification key, row label), in display order
VERIFICATION_ROWS: Tuple[Tuple[str, str], ...] = (
    ("form16", "Form 16"),
    ("caste_certificate", "Caste Certificate"),
    ("marksheet_10th", "10th Marksheet"),
    ("marksheet_12th", "12th Marksheet"),
    ("marksheet_graduation", "Graduation"),
)

SCORE_ROWS: Tuple[Tuple[str, str], ...] = (
    ("universityScore", "University Score"),
    ("academicScore", "Academic Score"),
    ("courseScore", "Course Score"),
    ("incomeScore", "Income Score"),
    ("beneficiaryScore", "Beneficiary Score"),
    ("ageScore", "Age Score"),
    ("totalScore", "Total Score"),
)

RECOMMENDATION_ROWS: Tuple[Tuple[str, str], ...] = (
    ("courseLevelPriority", "Course Level"),
    ("universityRanking", "University Ranking"),
    ("daysUntilCourseStart", "Days Until Course Start"),
    ("zone", "Zone"),
)


@dataclass(frozen=True)
class TableRow:
    """
    One label/value row.

    Attributes:
        label: Row label (drawn bold)
        value: Raw value, None when absent
    """
    label: str
    value: Any = None


@dataclass(frozen=True)
class SectionSpec:
    """
    A titled block of label/value rows.

    Example:
        >>> spec = SectionSpec("Zone", (TableRow("Zone", "North"),))
        >>> spec.row_count
        1
    """
    title: str
    rows: Tuple[TableRow, ...] = ()

    @property
    def row_count(self) -> int:
        """Number of rows in the section."""
        return len(self.rows)


@dataclass(frozen=True)
class ApplicationData:
    """
    Application record as sent by the dashboard (immutable).

    Every field is optional. Unknown keys in the incoming mapping are
    ignored; alternative spellings used by older records are folded in
    by from_dict().
    """

    full_name: Optional[str] = None
    gender: Optional[str] = None
    dob_day: Any = None
    dob_month: Any = None
    dob_year: Any = None
    category: Optional[str] = None
    father_name: Optional[str] = None
    mother_name: Optional[str] = None

    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Any = None
    phone: Any = None
    email: Optional[str] = None

    application_id: Optional[str] = None
    application_status: Optional[str] = None
    submitted_at: Optional[str] = None
    final_rank: Any = None

    validation_result: Any = None
    recommendation_details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ApplicationData:
        """
        Build from the raw JSON record.

        Args:
            data: Application record mapping

        Returns:
            ApplicationData instance
        """
        recommendation = data.get("recommendation_details")
        if not isinstance(recommendation, Mapping):
            recommendation = {}

        final_rank = data.get("finalRank")
        if final_rank is None:
            final_rank = data.get("final_rank")
        if final_rank is None:
            final_rank = recommendation.get("finalRank")

        return cls(
            full_name=_first(data, "full_name", "name"),
            gender=data.get("gender"),
            dob_day=data.get("dob_day"),
            dob_month=data.get("dob_month"),
            dob_year=data.get("dob_year"),
            category=data.get("category"),
            father_name=data.get("father_name"),
            mother_name=data.get("mother_name"),
            address=data.get("address"),
            city=data.get("city"),
            state=data.get("state"),
            pincode=data.get("pincode"),
            phone=data.get("phone"),
            email=data.get("email"),
            application_id=_first(data, "application_id", "applicationId"),
            application_status=data.get("application_status"),
            submitted_at=data.get("submitted_at"),
            final_rank=final_rank,
            validation_result=data.get("validation_result"),
            recommendation_details=dict(recommendation),
        )

    @property
    def date_of_birth(self) -> Optional[str]:
        """DD-MM-YYYY style date, or None when any part is missing."""
        parts = (self.dob_day, self.dob_month, self.dob_year)
        if any(p is None or str(p).strip() == "" for p in parts):
            return None
        return "-".join(str(p).strip() for p in parts)

    @property
    def score_breakdown(self) -> Dict[str, Any]:
        """Score breakdown mapping (empty when absent)."""
        score = self.recommendation_details.get("scoreBreakdown")
        return dict(score) if isinstance(score, Mapping) else {}


def parse_verification_results(raw: Any) -> Dict[str, Any]:
    """
    Decode the nested verification blob leniently.

    The record carries validation_result as a JSON string whose
    "verification_results" key maps document keys to result objects.
    Anything that cannot be read yields an empty mapping.

    Args:
        raw: JSON string, already-decoded mapping, or None

    Returns:
        Mapping of document key -> result mapping
    """
    if raw is None or raw == "":
        return {}

    decoded = raw
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            decoded = json.loads(raw)
        except (ValueError, TypeError) as e:
            logger.warning(f"Unreadable validation_result, rendering empty verification summary: {e}")
            return {}

    if not isinstance(decoded, Mapping):
        logger.warning(f"validation_result is {type(decoded).__name__}, expected an object")
        return {}

    results = decoded.get("verification_results")
    if not isinstance(results, Mapping):
        return {}
    return dict(results)


def eligibility_label(result: Any) -> str:
    """Eligible/Not Eligible label for one verification result."""
    if isinstance(result, Mapping) and result.get("is_eligible"):
        return ELIGIBLE
    return NOT_ELIGIBLE


def build_sections(data: ApplicationData, application_id: str) -> List[SectionSpec]:
    """
    Normalize an application record into the fixed summary sections.

    Sections, in order: applicant identity, address/contact, status,
    document verification summary, score breakdown, recommendation.
    Rows are never dropped; absent values stay None for the renderer.

    Args:
        data: Application record
        application_id: Request application ID (fallback for the record's)

    Returns:
        Six SectionSpecs

    Example:
        >>> sections = build_sections(ApplicationData(full_name="Asha Rao"), "APP123")
        >>> [s.title for s in sections][:2]
        ['Applicant Details', 'Address & Contact']
    """
    verification = parse_verification_results(data.validation_result)
    score = data.score_breakdown
    recommendation = data.recommendation_details

    return [
        SectionSpec("Applicant Details", (
            TableRow("Full Name", data.full_name),
            TableRow("Gender", data.gender),
            TableRow("Date of Birth", data.date_of_birth),
            TableRow("Category", data.category),
            TableRow("Father Name", data.father_name),
            TableRow("Mother Name", data.mother_name),
        )),
        SectionSpec("Address & Contact", (
            TableRow("Address", data.address),
            TableRow("City", data.city),
            TableRow("State", data.state),
            TableRow("Pincode", data.pincode),
            TableRow("Phone", data.phone),
            TableRow("Email", data.email),
        )),
        SectionSpec("Application Status", (
            TableRow("Application ID", data.application_id or application_id),
            TableRow("Status", data.application_status),
            TableRow("Submitted At", data.submitted_at),
            TableRow("Final Rank", data.final_rank),
        )),
        SectionSpec("Document Verification Summary", tuple(
            TableRow(label, eligibility_label(verification.get(key)))
            for key, label in VERIFICATION_ROWS
        )),
        SectionSpec("Score Breakdown", tuple(
            TableRow(label, score.get(key)) for key, label in SCORE_ROWS
        )),
        SectionSpec("Recommendation Details", tuple(
            TableRow(label, recommendation.get(key)) for key, label in RECOMMENDATION_ROWS
        )),
    ]


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    """First non-empty value among keys."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None
