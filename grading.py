from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


# (lower bound, letter, grade point, status), checked top-down
GRADE_BANDS = [
    (90.0, "A+", 4.0, "Pass"),
    (85.0, "A", 4.0, "Pass"),
    (80.0, "A-", 3.7, "Pass"),
    (75.0, "B+", 3.3, "Pass"),
    (70.0, "B", 3.0, "Pass"),
    (65.0, "B-", 2.7, "Pass"),
    (60.0, "C+", 2.3, "Pass"),
    (55.0, "C", 2.0, "Pass"),
    (50.0, "C-", 1.7, "Pass"),
    (40.0, "D", 1.0, "Fail"),
]
FAIL_BAND = ("F", 0.0, "Fail")

SPFSC_GRADE_POINTS = {
    "Distinction": 4.0,
    "Merit": 3.0,
    "Pass": 2.0,
    "Fail": 0.0,
}

FOUNDATION_GRADE_POINTS = {
    "A+": 4.5,
    "A": 4.0,
    "A-": 3.7,
    "B+": 3.3,
    "B": 3.0,
    "B-": 2.7,
    "C+": 2.3,
    "C": 2.0,
    "C-": 1.7,
    "D": 1.0,
    "F": 0.0,
}

LETTER_GRADE_ORDER = ["F", "E", "D", "C-", "C", "C+", "B-", "B", "B+", "A-", "A", "A+"]
LETTER_GRADE_RANK = {grade: rank for rank, grade in enumerate(LETTER_GRADE_ORDER)}


@dataclass
class AssessmentEntry:
    obtained_marks: float | None = None
    max_marks: float | None = None
    weight: float | None = None
    assessment_name: str | None = None
    assessment_type: str | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "AssessmentEntry":
        return cls(
            obtained_marks=payload.get("obtained_marks"),
            max_marks=payload.get("max_marks"),
            weight=payload.get("weight"),
            assessment_name=payload.get("assessment_name"),
            assessment_type=payload.get("assessment_type"),
        )


@dataclass
class FinalGrade:
    percentage: float
    grade: str
    grade_point: float
    status: str

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> "FinalGrade | None":
        if not payload:
            return None
        return cls(
            percentage=float(payload.get("percentage") or 0.0),
            grade=str(payload.get("grade") or "F"),
            grade_point=float(payload.get("grade_point") or 0.0),
            status=str(payload.get("status") or "Fail"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def band_for_percentage(percentage: float) -> FinalGrade:
    for lower, grade, grade_point, status in GRADE_BANDS:
        if percentage >= lower:
            return FinalGrade(percentage, grade, grade_point, status)
    grade, grade_point, status = FAIL_BAND
    return FinalGrade(percentage, grade, grade_point, status)


def weighted_percentage(assessments: list[AssessmentEntry]) -> float:
    # Weights are summed but never used to rescale: weights adding up to
    # less than 100 give a proportionally lower percentage.
    weighted_sum = 0.0
    total_weight = 0.0
    for entry in assessments:
        if not (entry.obtained_marks and entry.max_marks and entry.weight):
            continue
        entry_percentage = float(entry.obtained_marks) / float(entry.max_marks) * 100
        weighted_sum += entry_percentage * (float(entry.weight) / 100)
        total_weight += float(entry.weight)
    return weighted_sum if total_weight > 0 else 0.0


def calculate_final_grade(
    assessments: list[AssessmentEntry | dict[str, Any]],
    previous: FinalGrade | None = None,
) -> FinalGrade | None:
    """Weighted final grade for one student, subject and term.

    An empty assessment list leaves the previous final grade in place.
    """
    if not assessments:
        return previous
    entries = [item if isinstance(item, AssessmentEntry) else AssessmentEntry.from_dict(item) for item in assessments]
    return band_for_percentage(weighted_percentage(entries))


def spfsc_grade_points(grade: str | None) -> float:
    return SPFSC_GRADE_POINTS.get(grade or "", 0.0)


def foundation_grade_points(grade: str | None) -> float:
    return FOUNDATION_GRADE_POINTS.get((grade or "").strip().upper(), 0.0)


def letter_grade_rank(grade: str | None) -> int:
    return LETTER_GRADE_RANK.get((grade or "").strip().upper(), -1)


def grade_meets_minimum(student_grade: str | None, minimum_grade: str | None) -> bool:
    return letter_grade_rank(student_grade) >= LETTER_GRADE_RANK.get((minimum_grade or "").strip().upper(), 99)
