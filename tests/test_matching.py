from logic import assess_spfsc
from matching import (
    SPFSC_MINIMUM_REASON,
    check_scholarship_eligibility,
    eligible_scholarship_ids,
    is_candidate_scholarship,
    match_scholarship,
    match_scholarships,
)


def scholarship(scholarship_id: str, minimum_gpa=None, minimum_percentage=None, level: str = "Tertiary", is_active: bool = True) -> dict:
    criteria = {}
    if minimum_gpa is not None:
        criteria["minimum_gpa"] = minimum_gpa
    if minimum_percentage is not None:
        criteria["minimum_percentage"] = minimum_percentage
    return {"id": scholarship_id, "level": level, "is_active": is_active, "academic_criteria": criteria}


def stored_verdict(meets: bool, gpa: float, average: float) -> dict:
    return {
        "assessment_summary": {"meets_minimum_criteria": meets},
        "overall_performance": {"grade_point_average": gpa, "average_percentage": average},
    }


def passing_verdict():
    return assess_spfsc(
        [
            {"subject_name": "English", "grade": "Distinction", "percentage": 90},
            {"subject_name": "Mathematics", "grade": "Merit", "percentage": 75},
            {"subject_name": "Physics", "grade": "Merit", "percentage": 70},
            {"subject_name": "Chemistry", "grade": "Pass", "percentage": 55},
        ]
    )


def test_minimum_criteria_checked_before_thresholds() -> None:
    match = match_scholarship(stored_verdict(False, 4.0, 99.0), scholarship("S1", minimum_gpa=3.5))

    assert match.eligible is False
    assert match.reason == SPFSC_MINIMUM_REASON


def test_gpa_checked_before_percentage() -> None:
    match = match_scholarship(
        stored_verdict(True, 3.25, 60.0),
        scholarship("S1", minimum_gpa=3.5, minimum_percentage=80),
    )

    assert match.reason == "GPA 3.25 below required 3.5"


def test_percentage_below_minimum() -> None:
    verdict = passing_verdict()

    match = match_scholarship(verdict, scholarship("S1", minimum_gpa=3.0, minimum_percentage=80))

    assert verdict.performance.grade_point_average == 3.0
    assert match.eligible is False
    assert match.reason == "Average 72.5% below required 80%"


def test_unset_thresholds_are_ignored() -> None:
    match = match_scholarship(passing_verdict(), scholarship("S1", minimum_gpa=0))

    assert match.eligible is True
    assert match.reason == "Meets all criteria"


def test_matches_follow_catalog_order() -> None:
    catalog = [
        scholarship("top", minimum_gpa=3.8),
        scholarship("open"),
        scholarship("merit", minimum_percentage=70),
    ]

    matches = match_scholarships(passing_verdict(), catalog)

    assert [m.scholarship_id for m in matches] == ["top", "open", "merit"]
    assert eligible_scholarship_ids(matches) == ["open", "merit"]
    assert matches[0].to_dict() == {"scholarship_id": "top", "eligible": False, "reason": "GPA 3 below required 3.8"}


def test_candidate_filter_by_level_and_active_flag() -> None:
    assert is_candidate_scholarship(scholarship("a", level="All Levels"))
    assert is_candidate_scholarship(scholarship("b", level="Undergraduate"))
    assert not is_candidate_scholarship(scholarship("c", level="Postgraduate"))
    assert not is_candidate_scholarship(scholarship("d", is_active=False))


def test_grade_record_check_reports_every_failure() -> None:
    grades = [
        {"subject_name": "Mathematics", "final_grade": {"grade": "B", "grade_point": 3.0, "percentage": 60}},
        {"subject_name": "English", "final_grade": {"grade": "C", "grade_point": 2.0, "percentage": 50}},
    ]

    result = check_scholarship_eligibility(scholarship("S1", minimum_gpa=3.0, minimum_percentage=70), grades)

    assert result.eligible is False
    assert result.reasons == [
        "Minimum GPA required: 3, Student GPA: 2.50",
        "Minimum percentage required: 70%, Student average: 55.00%",
    ]


def test_grade_record_check_passes() -> None:
    grades = [{"subject_name": "Mathematics", "final_grade": {"grade": "A", "grade_point": 4.0, "percentage": 88}}]

    result = check_scholarship_eligibility(scholarship("S1", minimum_gpa=3.0, minimum_percentage=70), grades)

    assert result.eligible is True
    assert result.reasons == []


def test_blank_catalog_thresholds_are_ignored() -> None:
    blank = scholarship("S1", minimum_gpa="", minimum_percentage="")
    grades = [{"subject_name": "Mathematics", "final_grade": {"grade": "C", "grade_point": 2.0, "percentage": 50}}]

    match = match_scholarship(passing_verdict(), blank)
    result = check_scholarship_eligibility(scholarship("S2", minimum_gpa=" ", minimum_percentage="n/a"), grades)

    assert match.eligible is True
    assert match.reason == "Meets all criteria"
    assert result.eligible is True
    assert result.reasons == []
