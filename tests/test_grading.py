import pytest

from grading import (
    FinalGrade,
    band_for_percentage,
    calculate_final_grade,
    foundation_grade_points,
    grade_meets_minimum,
    letter_grade_rank,
)


def entry(obtained, max_marks, weight) -> dict:
    return {"obtained_marks": obtained, "max_marks": max_marks, "weight": weight, "assessment_type": "Test"}


def test_band_boundaries_are_inclusive() -> None:
    expected = [
        (90, "A+", 4.0, "Pass"),
        (89.99, "A", 4.0, "Pass"),
        (85, "A", 4.0, "Pass"),
        (80, "A-", 3.7, "Pass"),
        (75, "B+", 3.3, "Pass"),
        (70, "B", 3.0, "Pass"),
        (65, "B-", 2.7, "Pass"),
        (60, "C+", 2.3, "Pass"),
        (55, "C", 2.0, "Pass"),
        (50, "C-", 1.7, "Pass"),
        (49.99, "D", 1.0, "Fail"),
        (40, "D", 1.0, "Fail"),
        (39.99, "F", 0.0, "Fail"),
        (0, "F", 0.0, "Fail"),
    ]
    for percentage, grade, points, status in expected:
        band = band_for_percentage(percentage)
        assert (band.grade, band.grade_point, band.status) == (grade, points, status), percentage


def test_band_grade_points_never_decrease_as_percentage_rises() -> None:
    previous_points = -1.0
    previous_rank = -1
    for tenth in range(0, 1001):
        band = band_for_percentage(tenth / 10)
        assert band.grade_point >= previous_points
        assert letter_grade_rank(band.grade) >= previous_rank
        previous_points = band.grade_point
        previous_rank = letter_grade_rank(band.grade)


def test_final_grade_with_full_weights() -> None:
    final = calculate_final_grade([entry(80, 100, 50), entry(45, 50, 50)])

    assert final.percentage == pytest.approx(85.0)
    assert final.grade == "A"
    assert final.status == "Pass"


def test_final_grade_is_not_rescaled_when_weights_fall_short_of_100() -> None:
    final = calculate_final_grade([entry(80, 100, 60)])

    assert final.percentage == pytest.approx(48.0)
    assert final.grade == "D"
    assert final.status == "Fail"


def test_entries_with_zero_or_missing_fields_are_skipped() -> None:
    final = calculate_final_grade(
        [
            entry(0, 100, 50),
            entry(90, 100, 50),
            {"obtained_marks": 70, "max_marks": None, "weight": 20},
        ]
    )

    assert final.percentage == pytest.approx(45.0)
    assert final.grade == "D"


def test_only_invalid_entries_yield_zero_percent() -> None:
    final = calculate_final_grade([entry(50, 0, 100)])

    assert final.percentage == 0.0
    assert final.grade == "F"


def test_empty_assessment_list_keeps_previous_final_grade() -> None:
    previous = FinalGrade(percentage=72.0, grade="B", grade_point=3.0, status="Pass")

    assert calculate_final_grade([], previous) is previous
    assert calculate_final_grade([]) is None


def test_final_grade_round_trips_through_stored_json() -> None:
    stored = calculate_final_grade([entry(100, 100, 100)]).to_dict()

    assert stored == {"percentage": 100.0, "grade": "A+", "grade_point": 4.0, "status": "Pass"}
    assert FinalGrade.from_dict(stored).grade == "A+"
    assert FinalGrade.from_dict(None) is None


def test_letter_grade_comparison_uses_ordinal_scale() -> None:
    assert grade_meets_minimum("A-", "B+")
    assert grade_meets_minimum("B", "B")
    assert not grade_meets_minimum("C", "B-")
    assert not grade_meets_minimum(None, "D")
    assert not grade_meets_minimum("A", "unknown")


def test_foundation_grade_points_ignore_case_and_unknown_grades() -> None:
    assert foundation_grade_points("a+") == 4.5
    assert foundation_grade_points("B") == 3.0
    assert foundation_grade_points("Z") == 0.0
    assert foundation_grade_points(None) == 0.0
