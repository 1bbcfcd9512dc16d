from __future__ import annotations

from collections import Counter, defaultdict
from typing import Any

from grading import LETTER_GRADE_ORDER
from logic import (
    APPLICANT_ABOUT_TO_COMPLETE,
    APPLICANT_RECENTLY_COMPLETED,
    APPLICANT_WORKFORCE,
    as_dict,
    get_field,
    to_float,
)


SPFSC_CERTIFICATE_STATUSES = ["Pending", "Issued", "Verified", "Revoked"]
POSTGRADUATE_STATUSES = ["Draft", "Incomplete", "Complete", "Submitted", "Under Review", "Approved", "Rejected"]
DISTRIBUTION_GRADES = [g for g in reversed(LETTER_GRADE_ORDER) if g != "E"]
FAILING_GRADES = {"D", "F"}
PASS_PERCENTAGE = 50.0


def _mean(values: list[float]) -> float:
    return sum(values) / (len(values) or 1)


def _count(rows: list[Any], predicate) -> int:
    return sum(1 for row in rows if predicate(row))


def spfsc_statistics(rows: list[Any], top_n: int = 10) -> dict[str, Any]:
    def summary(row: Any) -> dict[str, Any]:
        return as_dict(get_field(row, "assessment_summary"))

    def performance(row: Any) -> dict[str, Any]:
        return as_dict(get_field(row, "overall_performance"))

    def meets(row: Any) -> bool:
        return bool(summary(row).get("meets_minimum_criteria"))

    def distinctions(row: Any) -> int:
        return int(summary(row).get("distinction_count") or 0)

    def merits(row: Any) -> int:
        return int(summary(row).get("merit_count") or 0)

    def criteria(row: Any) -> dict[str, Any]:
        return as_dict(summary(row).get("criteria_details"))

    english = Counter(summary(row).get("english_grade") for row in rows)
    statuses = Counter(get_field(row, "certificate_status") for row in rows)
    ranked = sorted(rows, key=lambda r: to_float(performance(r).get("average_percentage")), reverse=True)

    return {
        "total": len(rows),
        "meets_criteria": _count(rows, meets),
        "not_meets_criteria": _count(rows, lambda r: not meets(r)),
        "grade_distribution": {
            "all_distinctions": _count(rows, lambda r: distinctions(r) == 4),
            "three_distinctions": _count(rows, lambda r: distinctions(r) == 3),
            "two_distinctions": _count(rows, lambda r: distinctions(r) == 2),
            "four_merits": _count(rows, lambda r: merits(r) == 4),
            "three_merits": _count(rows, lambda r: merits(r) == 3),
        },
        "english_performance": {
            "distinction": english["Distinction"],
            "merit": english["Merit"],
            "pass": english["Pass"],
            "fail": english["Fail"],
            "not_taken": _count(rows, lambda r: not summary(r).get("has_english")),
        },
        "averages": {
            "gpa": _mean([to_float(performance(r).get("grade_point_average")) for r in rows]),
            "percentage": _mean([to_float(performance(r).get("average_percentage")) for r in rows]),
            "merits_per_student": _mean([float(merits(r)) for r in rows]),
            "distinctions_per_student": _mean([float(distinctions(r)) for r in rows]),
        },
        "eligibility": {
            "tertiary_eligible": _count(rows, lambda r: bool(criteria(r).get("eligible_for_tertiary"))),
            "scholarship_eligible": _count(rows, lambda r: bool(criteria(r).get("eligible_for_scholarship"))),
        },
        "certificate_status": {status.lower(): statuses[status] for status in SPFSC_CERTIFICATE_STATUSES},
        "top_performers": [
            {
                "student_id": str(get_field(r, "student_id")) if get_field(r, "student_id") else None,
                "school": get_field(r, "school"),
                "average_percentage": performance(r).get("average_percentage"),
                "grade_point_average": performance(r).get("grade_point_average"),
                "meets_minimum_criteria": meets(r),
            }
            for r in ranked[:top_n]
        ],
    }


def usp_foundation_statistics(rows: list[Any], top_n: int = 10) -> dict[str, Any]:
    def perf(row: Any) -> dict[str, Any]:
        return as_dict(get_field(row, "overall_performance"))

    def results(row: Any) -> dict[str, Any]:
        return as_dict(get_field(row, "assessment_results"))

    def gpa(row: Any) -> float:
        return to_float(perf(row).get("gpa"))

    def pathway(row: Any, name: str) -> bool:
        return bool(as_dict(results(row).get(name)).get("eligible"))

    def overall(row: Any) -> bool:
        return bool(results(row).get("overall_eligible"))

    ranked = sorted(rows, key=gpa, reverse=True)
    return {
        "total": len(rows),
        "overall_eligible": _count(rows, overall),
        "not_eligible": _count(rows, lambda r: not overall(r)),
        "pathway_breakdown": {
            "general_eligible": _count(rows, lambda r: pathway(r, "general_pathway")),
            "health_science_eligible": _count(rows, lambda r: pathway(r, "health_science_pathway")),
            "medicine_eligible": _count(rows, lambda r: pathway(r, "medicine_pathway")),
        },
        "requirements": {
            "meets_minimum_8_courses": _count(rows, lambda r: int(perf(r).get("total_courses") or 0) >= 8),
            "meets_minimum_10_science_courses": _count(rows, lambda r: int(perf(r).get("total_science_courses") or 0) >= 10),
            "meets_gpa_2_5": _count(rows, lambda r: gpa(r) >= 2.5),
            "meets_gpa_4_0": _count(rows, lambda r: gpa(r) >= 4.0),
            "meets_english_b": _count(
                rows, lambda r: bool(as_dict(get_field(r, "english_foundation_a")).get("meets_b_requirement"))
            ),
        },
        "gpa_distribution": {
            "gpa_4_0_plus": _count(rows, lambda r: gpa(r) >= 4.0),
            "gpa_3_5_to_4_0": _count(rows, lambda r: 3.5 <= gpa(r) < 4.0),
            "gpa_3_0_to_3_5": _count(rows, lambda r: 3.0 <= gpa(r) < 3.5),
            "gpa_2_5_to_3_0": _count(rows, lambda r: 2.5 <= gpa(r) < 3.0),
            "gpa_below_2_5": _count(rows, lambda r: gpa(r) < 2.5),
        },
        "averages": {
            "gpa": _mean([gpa(r) for r in rows]),
            "total_courses": _mean([float(perf(r).get("total_courses") or 0) for r in rows]),
            "science_courses": _mean([float(perf(r).get("total_science_courses") or 0) for r in rows]),
        },
        "top_performers": [
            {
                "student_id": str(get_field(r, "student_id")) if get_field(r, "student_id") else None,
                "gpa": gpa(r),
                "intended_pathway": get_field(r, "intended_pathway"),
                "recommended_pathway": results(r).get("recommended_pathway"),
            }
            for r in ranked[:top_n]
        ],
    }


def postgraduate_statistics(rows: list[Any]) -> dict[str, Any]:
    def level(row: Any) -> str:
        return str(get_field(row, "programme_level") or "")

    def status(row: Any) -> str:
        return str(get_field(row, "application_status") or "Draft")

    def eligible(row: Any) -> bool:
        return bool(as_dict(get_field(row, "eligibility_assessment")).get("overall_eligible"))

    def research(row: Any) -> dict[str, Any]:
        return as_dict(get_field(row, "research_details"))

    types = Counter(get_field(row, "applicant_type") for row in rows)
    statuses = Counter(status(row) for row in rows)
    return {
        "total": len(rows),
        "by_applicant_type": {
            "workforce": types[APPLICANT_WORKFORCE],
            "about_to_complete": types[APPLICANT_ABOUT_TO_COMPLETE],
            "recently_completed": types[APPLICANT_RECENTLY_COMPLETED],
        },
        "by_programme_level": {
            "certificate": _count(rows, lambda r: "Certificate" in level(r)),
            "diploma": _count(rows, lambda r: "Diploma" in level(r)),
            "masters": _count(rows, lambda r: level(r) == "Masters"),
            "phd": _count(rows, lambda r: level(r) == "PhD"),
        },
        "by_status": {name.lower().replace(" ", "_"): statuses[name] for name in POSTGRADUATE_STATUSES},
        "eligibility": {
            "eligible": _count(rows, eligible),
            "not_eligible": _count(rows, lambda r: not eligible(r)),
        },
        "research_degrees": {
            "total": _count(rows, lambda r: bool(research(r).get("is_research_degree"))),
            "aligns_priorities": _count(rows, lambda r: bool(research(r).get("aligns_with_priority_framework"))),
        },
        "average_gpa": _mean(
            [to_float(as_dict(get_field(r, "institution_requirements")).get("applicant_gpa")) for r in rows]
        ),
    }


def performance_analytics(results: list[Any]) -> dict[str, Any] | None:
    """Score spread, letter-grade distribution and pass rate over published results."""
    if not results:
        return None

    scores = [to_float(get_field(r, "percentage")) for r in results]
    distribution = {grade: 0 for grade in DISTRIBUTION_GRADES}
    for r in results:
        letter = get_field(r, "letter_grade")
        if letter in distribution:
            distribution[letter] += 1

    passed = sum(1 for score in scores if score >= PASS_PERCENTAGE)
    return {
        "total_results": len(results),
        "scores": {
            "average": round(_mean(scores), 2),
            "highest": round(max(scores), 2),
            "lowest": round(min(scores), 2),
        },
        "grade_distribution": distribution,
        "pass_fail": {
            "passed": passed,
            "failed": len(results) - passed,
            "pass_rate": round(passed / len(results) * 100, 2),
        },
    }


def subject_analysis(results: list[Any]) -> list[dict[str, Any]]:
    grouped: dict[str, list[Any]] = defaultdict(list)
    for r in results:
        grouped[str(get_field(r, "subject") or "Unknown")].append(r)

    analysis = []
    for subject, items in grouped.items():
        passing = sum(1 for r in items if get_field(r, "letter_grade") not in FAILING_GRADES)
        analysis.append(
            {
                "subject": subject,
                "students_count": len(items),
                "average_score": round(_mean([to_float(get_field(r, "percentage")) for r in items]), 2),
                "pass_rate": round(passing / len(items) * 100, 2),
            }
        )
    analysis.sort(key=lambda item: item["average_score"], reverse=True)
    return analysis


def scholarship_type_summary(catalog: list[Any]) -> list[dict[str, Any]]:
    grouped: dict[str, dict[str, Any]] = {}
    for scholarship in catalog:
        if not get_field(scholarship, "is_active", True):
            continue
        kind = str(get_field(scholarship, "scholarship_type") or "Other")
        entry = grouped.setdefault(kind, {"scholarship_type": kind, "count": 0, "total_value": 0.0, "providers": []})
        entry["count"] += 1
        entry["total_value"] += to_float(as_dict(get_field(scholarship, "value")).get("amount"))
        provider = as_dict(get_field(scholarship, "provider")).get("name")
        if provider and provider not in entry["providers"]:
            entry["providers"].append(provider)
    return sorted(grouped.values(), key=lambda item: item["count"], reverse=True)
