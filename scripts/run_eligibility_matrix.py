from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from db import configure_logging, db_session
from logic import assess_postgraduate_eligibility, assess_spfsc, assess_usp_foundation
from matching import match_scholarships
from services import active_candidate_scholarships


def fetch_catalog() -> list[Any]:
    with db_session() as db:
        return active_candidate_scholarships(db)


def spfsc_scenarios() -> list[dict[str, Any]]:
    return [
        {
            "name": "SPFSC strong all-rounder",
            "subjects": [
                {"subject_name": "English", "grade": "Distinction", "percentage": 91},
                {"subject_name": "Mathematics", "grade": "Distinction", "percentage": 89},
                {"subject_name": "Physics", "grade": "Merit", "percentage": 78},
                {"subject_name": "Chemistry", "grade": "Merit", "percentage": 76},
                {"subject_name": "Geography", "grade": "Pass", "percentage": 58},
            ],
        },
        {
            "name": "SPFSC English outside top four",
            "subjects": [
                {"subject_name": "Mathematics", "grade": "Distinction", "percentage": 95},
                {"subject_name": "Physics", "grade": "Distinction", "percentage": 90},
                {"subject_name": "Chemistry", "grade": "Merit", "percentage": 80},
                {"subject_name": "Biology", "grade": "Merit", "percentage": 77},
                {"subject_name": "English", "grade": "Merit", "percentage": 70},
            ],
        },
        {
            "name": "SPFSC borderline merits",
            "subjects": [
                {"subject_name": "English", "grade": "Merit", "percentage": 68},
                {"subject_name": "Accounting", "grade": "Merit", "percentage": 66},
                {"subject_name": "Economics", "grade": "Pass", "percentage": 60},
                {"subject_name": "History", "grade": "Pass", "percentage": 55},
            ],
        },
    ]


def foundation_scenarios() -> list[dict[str, Any]]:
    science = [
        {"course_code": f"SCI{i:02d}", "course_name": f"Science {i}", "course_type": "Science", "grade": "A+"}
        for i in range(10)
    ]
    general = [
        {"course_code": f"GEN{i:02d}", "course_name": f"General {i}", "course_type": "General", "grade": "B"}
        for i in range(8)
    ]
    return [
        {"name": "Foundation all science A+", "foundation_courses": science, "english_foundation_a": {"grade": "A"}},
        {"name": "Foundation general B average", "foundation_courses": general, "english_foundation_a": {"grade": "B"}},
        {"name": "Foundation weak English", "foundation_courses": general, "english_foundation_a": {"grade": "C+"}},
    ]


def postgraduate_scenarios() -> list[dict[str, Any]]:
    institution = {"meets_gpa_requirement": True, "meets_all_requirements": True, "minimum_gpa": 3.0, "applicant_gpa": 3.4}
    return [
        {
            "name": "Workforce masters, no commission approval needed",
            "applicant_type": "Current Workforce",
            "programme_level": "Masters",
            "institution_requirements": institution,
            "workforce_details": {"commission_approval": {"required": False}},
        },
        {
            "name": "Recent graduate PhD not started, missing supervisor",
            "applicant_type": "Recently Completed Undergraduate",
            "programme_level": "PhD",
            "institution_requirements": institution,
            "research_details": {
                "is_research_degree": True,
                "research_outline": {"submitted": True},
                "aligns_with_priority_framework": True,
                "phd_specific": {"status": "Not Started", "research_proposal": {"submitted": True}},
            },
            "undergraduate_details": {
                "completed_within_term": True,
                "has_undertaken_attachments": True,
                "attachments": [{"organization": "Ministry of Health"}],
                "recommendation_letter": {"received": True},
            },
        },
    ]


def main() -> None:
    configure_logging()
    catalog = fetch_catalog()
    names = {s.id: s.scholarship_name for s in catalog}

    for scenario in spfsc_scenarios():
        verdict = assess_spfsc(scenario["subjects"])
        print(f"\n=== {scenario['name']} ===")
        print(
            f"Meets minimum: {verdict.summary.meets_minimum_criteria} "
            f"(merits={verdict.summary.merit_count}, distinctions={verdict.summary.distinction_count}, "
            f"english={verdict.summary.english_grade})"
        )
        for reason in verdict.summary.missing_requirements:
            print(f"  - {reason}")
        for match in match_scholarships(verdict, catalog):
            print(f"  {'ELIGIBLE' if match.eligible else 'no'}: {names.get(match.scholarship_id)} -> {match.reason}")

    for scenario in foundation_scenarios():
        result = assess_usp_foundation(scenario)
        print(f"\n=== {scenario['name']} ===")
        print(f"GPA {result.performance.gpa:.2f}, eligible: {', '.join(result.eligible_pathways) or 'none'}")
        print(f"Recommended: {result.recommended_pathway}")

    for scenario in postgraduate_scenarios():
        eligibility = assess_postgraduate_eligibility(scenario)
        print(f"\n=== {scenario['name']} ===")
        print(f"Overall eligible: {eligibility.overall_eligible}")
        for reason in eligibility.missing_requirements:
            print(f"  - {reason}")


if __name__ == "__main__":
    main()
