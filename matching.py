from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any

from logic import (
    SPFSCAssessmentResult,
    as_dict,
    get_field,
    to_float,
    average_grade_metrics,
)

logger = logging.getLogger(__name__)


CANDIDATE_LEVELS = {"Tertiary", "Undergraduate", "All Levels"}
SPFSC_MINIMUM_REASON = "Does not meet SPFSC minimum criteria (3 Merits including English)"
ELIGIBLE_REASON = "Meets all criteria"


@dataclass
class ScholarshipMatch:
    scholarship_id: Any
    eligible: bool
    reason: str

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["scholarship_id"] = str(self.scholarship_id) if self.scholarship_id is not None else None
        return payload


@dataclass
class ScholarshipEligibility:
    scholarship_id: Any
    eligible: bool
    reasons: list[str] = field(default_factory=list)


def _fmt(value: float) -> str:
    return f"{value:g}"


def _academic_criteria(scholarship: Any) -> dict[str, Any]:
    return as_dict(get_field(scholarship, "academic_criteria"))


def _scholarship_id(scholarship: Any) -> Any:
    return get_field(scholarship, "id", get_field(scholarship, "scholarship_id"))


def is_candidate_scholarship(scholarship: Any) -> bool:
    return bool(get_field(scholarship, "is_active", True)) and get_field(scholarship, "level") in CANDIDATE_LEVELS


def _verdict_numbers(verdict: SPFSCAssessmentResult | dict[str, Any]) -> tuple[bool, float, float]:
    if isinstance(verdict, SPFSCAssessmentResult):
        return (
            verdict.summary.meets_minimum_criteria,
            verdict.performance.grade_point_average,
            verdict.performance.average_percentage,
        )
    summary = as_dict(verdict.get("assessment_summary"))
    performance = as_dict(verdict.get("overall_performance"))
    return (
        bool(summary.get("meets_minimum_criteria", False)),
        to_float(performance.get("grade_point_average")),
        to_float(performance.get("average_percentage")),
    )


def match_scholarship(verdict: SPFSCAssessmentResult | dict[str, Any], scholarship: Any) -> ScholarshipMatch:
    meets_minimum, gpa, average_percentage = _verdict_numbers(verdict)
    criteria = _academic_criteria(scholarship)
    scholarship_id = _scholarship_id(scholarship)

    if not meets_minimum:
        return ScholarshipMatch(scholarship_id, False, SPFSC_MINIMUM_REASON)

    minimum_gpa = to_float(criteria.get("minimum_gpa"))
    if minimum_gpa and gpa < minimum_gpa:
        return ScholarshipMatch(scholarship_id, False, f"GPA {_fmt(gpa)} below required {_fmt(minimum_gpa)}")

    minimum_percentage = to_float(criteria.get("minimum_percentage"))
    if minimum_percentage and average_percentage < minimum_percentage:
        return ScholarshipMatch(
            scholarship_id,
            False,
            f"Average {_fmt(average_percentage)}% below required {_fmt(minimum_percentage)}%",
        )

    return ScholarshipMatch(scholarship_id, True, ELIGIBLE_REASON)


def match_scholarships(verdict: SPFSCAssessmentResult | dict[str, Any], scholarships: list[Any]) -> list[ScholarshipMatch]:
    """One match entry per scholarship, in the order the catalog was given."""
    matches = [match_scholarship(verdict, scholarship) for scholarship in scholarships]
    logger.debug(
        "Matched %s scholarships, %s eligible",
        len(matches),
        sum(1 for m in matches if m.eligible),
    )
    return matches


def eligible_scholarship_ids(matches: list[ScholarshipMatch]) -> list[Any]:
    return [m.scholarship_id for m in matches if m.eligible]


def check_scholarship_eligibility(scholarship: Any, grade_records: list[Any]) -> ScholarshipEligibility:
    """Per-student check of a scholarship's academic minimums from graded records.

    Unlike the SPFSC matcher every failing condition is reported.
    """
    criteria = _academic_criteria(scholarship)
    minimum_gpa = to_float(criteria.get("minimum_gpa"))
    minimum_percentage = to_float(criteria.get("minimum_percentage"))
    average_gpa, average_percentage = average_grade_metrics(grade_records)

    reasons: list[str] = []
    if minimum_gpa and average_gpa < minimum_gpa:
        reasons.append(f"Minimum GPA required: {_fmt(minimum_gpa)}, Student GPA: {average_gpa:.2f}")
    if minimum_percentage and average_percentage < minimum_percentage:
        reasons.append(
            f"Minimum percentage required: {_fmt(minimum_percentage)}%, Student average: {average_percentage:.2f}%"
        )

    return ScholarshipEligibility(_scholarship_id(scholarship), not reasons, reasons)
