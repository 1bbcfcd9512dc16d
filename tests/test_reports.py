import pytest

from logic import assess_spfsc, assess_usp_foundation
from reports import (
    performance_analytics,
    postgraduate_statistics,
    scholarship_type_summary,
    spfsc_statistics,
    subject_analysis,
    usp_foundation_statistics,
)


def spfsc_row(student_id: str, grades: list[tuple[str, str, float]], certificate_status: str = "Pending") -> dict:
    verdict = assess_spfsc([{"subject_name": n, "grade": g, "percentage": p} for n, g, p in grades])
    return {"student_id": student_id, "school": "Suva Grammar", "certificate_status": certificate_status, **verdict.to_dict()}


def usp_row(student_id: str, grade: str, count: int, course_type: str, english: str) -> dict:
    record = {
        "foundation_courses": [
            {"course_code": f"C{i}", "course_name": f"Course {i}", "course_type": course_type, "grade": grade}
            for i in range(count)
        ],
        "english_foundation_a": {"grade": english},
    }
    return {"student_id": student_id, "intended_pathway": "Medicine", **assess_usp_foundation(record).to_dict()}


def test_spfsc_statistics() -> None:
    rows = [
        spfsc_row(
            "s1",
            [("English", "Distinction", 92), ("Maths", "Distinction", 90), ("Physics", "Distinction", 88), ("Art", "Distinction", 86)],
            "Issued",
        ),
        spfsc_row("s2", [("English", "Merit", 70), ("Maths", "Merit", 68), ("Physics", "Pass", 55), ("Art", "Pass", 50)]),
    ]

    stats = spfsc_statistics(rows)

    assert stats["total"] == 2
    assert stats["meets_criteria"] == 1
    assert stats["not_meets_criteria"] == 1
    assert stats["grade_distribution"]["all_distinctions"] == 1
    assert stats["english_performance"]["distinction"] == 1
    assert stats["english_performance"]["merit"] == 1
    assert stats["eligibility"]["scholarship_eligible"] == 1
    assert stats["certificate_status"]["issued"] == 1
    assert stats["certificate_status"]["pending"] == 1
    assert stats["averages"]["merits_per_student"] == 3.0
    assert stats["top_performers"][0]["student_id"] == "s1"


def test_spfsc_statistics_on_empty_input() -> None:
    stats = spfsc_statistics([])

    assert stats["total"] == 0
    assert stats["averages"]["gpa"] == 0.0
    assert stats["top_performers"] == []


def test_usp_foundation_statistics() -> None:
    rows = [
        usp_row("u1", "A+", 10, "Science", "A"),
        usp_row("u2", "B", 8, "General", "B"),
        usp_row("u3", "C", 8, "General", "C"),
    ]

    stats = usp_foundation_statistics(rows, top_n=2)

    assert stats["overall_eligible"] == 2
    assert stats["pathway_breakdown"] == {"general_eligible": 2, "health_science_eligible": 1, "medicine_eligible": 1}
    assert stats["gpa_distribution"]["gpa_4_0_plus"] == 1
    assert stats["gpa_distribution"]["gpa_3_0_to_3_5"] == 1
    assert stats["gpa_distribution"]["gpa_below_2_5"] == 1
    assert stats["requirements"]["meets_english_b"] == 2
    assert stats["averages"]["gpa"] == pytest.approx(3.1666, rel=1e-3)
    assert [p["student_id"] for p in stats["top_performers"]] == ["u1", "u2"]


def test_postgraduate_statistics() -> None:
    rows = [
        {
            "applicant_type": "Current Workforce",
            "programme_level": "Postgraduate Diploma",
            "application_status": "Submitted",
            "eligibility_assessment": {"overall_eligible": True},
            "institution_requirements": {"applicant_gpa": 3.2},
            "research_details": {},
        },
        {
            "applicant_type": "Recently Completed Undergraduate",
            "programme_level": "PhD",
            "application_status": "Draft",
            "eligibility_assessment": {"overall_eligible": False},
            "institution_requirements": {"applicant_gpa": 3.8},
            "research_details": {"is_research_degree": True, "aligns_with_priority_framework": True},
        },
    ]

    stats = postgraduate_statistics(rows)

    assert stats["by_applicant_type"]["workforce"] == 1
    assert stats["by_applicant_type"]["recently_completed"] == 1
    assert stats["by_programme_level"]["diploma"] == 1
    assert stats["by_programme_level"]["phd"] == 1
    assert stats["by_status"]["submitted"] == 1
    assert stats["by_status"]["draft"] == 1
    assert stats["eligibility"] == {"eligible": 1, "not_eligible": 1}
    assert stats["research_degrees"] == {"total": 1, "aligns_priorities": 1}
    assert stats["average_gpa"] == pytest.approx(3.5)


def test_performance_analytics() -> None:
    results = [
        {"subject": "Maths", "percentage": 92, "letter_grade": "A+"},
        {"subject": "Maths", "percentage": 45, "letter_grade": "D"},
        {"subject": "English", "percentage": 70, "letter_grade": "B"},
        {"subject": "English", "percentage": 81, "letter_grade": "A-"},
    ]

    analytics = performance_analytics(results)

    assert analytics["scores"] == {"average": 72.0, "highest": 92.0, "lowest": 45.0}
    assert analytics["grade_distribution"]["A+"] == 1
    assert analytics["grade_distribution"]["D"] == 1
    assert analytics["pass_fail"] == {"passed": 3, "failed": 1, "pass_rate": 75.0}
    assert performance_analytics([]) is None


def test_subject_analysis_sorted_by_average() -> None:
    results = [
        {"subject": "Maths", "percentage": 92, "letter_grade": "A+"},
        {"subject": "Maths", "percentage": 45, "letter_grade": "D"},
        {"subject": "English", "percentage": 70, "letter_grade": "B"},
        {"subject": "English", "percentage": 81, "letter_grade": "A-"},
    ]

    analysis = subject_analysis(results)

    assert [a["subject"] for a in analysis] == ["English", "Maths"]
    assert analysis[0]["average_score"] == 75.5
    assert analysis[1]["pass_rate"] == 50.0


def test_scholarship_type_summary_skips_inactive() -> None:
    catalog = [
        {"scholarship_type": "Merit-Based", "value": {"amount": 20000}, "provider": {"name": "TSLS"}, "is_active": True},
        {"scholarship_type": "Merit-Based", "value": {"amount": 12000}, "provider": {"name": "TSLS"}, "is_active": True},
        {"scholarship_type": "STEM", "value": {"amount": 8000}, "provider": {"name": "USP"}, "is_active": True},
        {"scholarship_type": "Need-Based", "value": {"amount": 3000}, "provider": {"name": "NGO"}, "is_active": False},
    ]

    summary = scholarship_type_summary(catalog)

    assert summary[0] == {"scholarship_type": "Merit-Based", "count": 2, "total_value": 32000.0, "providers": ["TSLS"]}
    assert [s["scholarship_type"] for s in summary] == ["Merit-Based", "STEM"]
