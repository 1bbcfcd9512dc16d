from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any

from grading import (
    foundation_grade_points,
    grade_meets_minimum,
    spfsc_grade_points,
)

logger = logging.getLogger(__name__)


SPFSC_MIN_MERITS = 3
SPFSC_SCHOLARSHIP_MIN_DISTINCTIONS = 2
SPFSC_TOP_SUBJECTS = 4
SPFSC_MERIT_GRADES = {"Merit", "Distinction"}
SPFSC_RANK_BANDS = [
    (85.0, "Top 5%"),
    (75.0, "Top 10%"),
    (65.0, "Top 25%"),
    (50.0, "Top 50%"),
]

PATHWAY_GENERAL = "General Programmes"
PATHWAY_HEALTH_SCIENCE = "Health Science (Non-Medicine)"
PATHWAY_MEDICINE = "Bachelor of Medicine and Surgery"
PATHWAY_NONE = "Not Eligible - Requirements Not Met"
GENERAL_MIN_COURSES = 8
SCIENCE_MIN_COURSES = 10
GENERAL_MIN_GPA = 2.5
HEALTH_SCIENCE_MIN_GPA = 2.5
MEDICINE_MIN_GPA = 4.0
ENGLISH_B_GRADE_POINTS = 3.0

APPLICANT_WORKFORCE = "Current Workforce"
APPLICANT_ABOUT_TO_COMPLETE = "About to Complete Undergraduate"
APPLICANT_RECENTLY_COMPLETED = "Recently Completed Undergraduate"
UNDERGRADUATE_APPLICANTS = {APPLICANT_ABOUT_TO_COMPLETE, APPLICANT_RECENTLY_COMPLETED}
PHD_NOT_STARTED = "Not Started"
PHD_IN_PROGRESS = "In Progress"
OPEN_APPLICATION_STATUSES = {"Draft", "Incomplete"}


def get_field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def to_float(value: Any, default: float = 0.0) -> float:
    """Numeric coercion for stored JSON and form input. Blank or unparseable values give `default`."""
    if is_blank(value):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def as_dict(value: Any) -> dict[str, Any]:
    if isinstance(value, dict):
        return value
    return {}


def as_list(value: Any) -> list[Any]:
    if not value:
        return []
    if isinstance(value, list):
        return value
    return [value]


# --------------------------------------------------------------------------
# SPFSC
# --------------------------------------------------------------------------


@dataclass
class SubjectResult:
    subject_name: str
    grade: str
    marks: float | None = None
    percentage: float | None = None
    subject_code: str | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "SubjectResult":
        return cls(
            subject_name=str(payload.get("subject_name") or ""),
            grade=str(payload.get("grade") or ""),
            marks=payload.get("marks"),
            percentage=payload.get("percentage"),
            subject_code=payload.get("subject_code"),
        )

    @property
    def sort_score(self) -> float:
        if not is_blank(self.percentage):
            return to_float(self.percentage)
        if not is_blank(self.marks):
            return to_float(self.marks)
        return 0.0


@dataclass
class SPFSCCriteriaDetails:
    has_three_merits: bool
    includes_english_merit: bool
    eligible_for_tertiary: bool
    eligible_for_scholarship: bool


@dataclass
class SPFSCSummary:
    highest_four_subjects: list[dict[str, Any]]
    meets_minimum_criteria: bool
    has_english: bool
    english_grade: str
    merit_count: int
    distinction_count: int
    criteria_details: SPFSCCriteriaDetails
    missing_requirements: list[str] = field(default_factory=list)


@dataclass
class OverallPerformance:
    total_subjects: int
    average_percentage: float
    grade_point_average: float
    rank: str


@dataclass
class SPFSCAssessmentResult:
    summary: SPFSCSummary
    performance: OverallPerformance

    def to_dict(self) -> dict[str, Any]:
        return {"assessment_summary": asdict(self.summary), "overall_performance": asdict(self.performance)}


def _coerce_subjects(subjects: list[Any]) -> list[SubjectResult]:
    return [item if isinstance(item, SubjectResult) else SubjectResult.from_dict(as_dict(item)) for item in subjects or []]


def determine_spfsc_rank(average_percentage: float) -> str:
    for lower, label in SPFSC_RANK_BANDS:
        if average_percentage >= lower:
            return label
    return "Below 50%"


def calculate_spfsc_gpa(subjects: list[Any]) -> float:
    rows = _coerce_subjects(subjects)
    if not rows:
        return 0.0
    total_points = sum(spfsc_grade_points(s.grade) for s in rows)
    return round(total_points / len(rows), 2)


def select_highest_four(subjects: list[Any]) -> list[SubjectResult]:
    rows = _coerce_subjects(subjects)
    return sorted(rows, key=lambda s: s.sort_score, reverse=True)[:SPFSC_TOP_SUBJECTS]


def assess_spfsc(subjects: list[Any]) -> SPFSCAssessmentResult:
    """Top-four-subject SPFSC criteria plus overall performance.

    Minimum criteria: at least three Merits (a Distinction counts as a Merit)
    among the four best subjects, one of which is English at Merit or better.
    """
    rows = _coerce_subjects(subjects)
    highest_four = select_highest_four(rows)

    merit_count = 0
    distinction_count = 0
    for subject in highest_four:
        if subject.grade == "Merit":
            merit_count += 1
        if subject.grade == "Distinction":
            distinction_count += 1
            merit_count += 1

    english = next((s for s in highest_four if "english" in s.subject_name.lower()), None)
    has_english = english is not None
    includes_english_merit = has_english and english.grade in SPFSC_MERIT_GRADES
    has_three_merits = merit_count >= SPFSC_MIN_MERITS
    meets_minimum = has_three_merits and includes_english_merit

    missing: list[str] = []
    if not has_three_merits:
        missing.append(f"At least {SPFSC_MIN_MERITS} Merits required in highest four subjects ({merit_count} found)")
    if not has_english:
        missing.append("English not among highest four subjects")
    elif not includes_english_merit:
        missing.append(f"English at Merit or better required ({english.grade} found)")

    summary = SPFSCSummary(
        highest_four_subjects=[
            {"subject_name": s.subject_name, "grade": s.grade, "marks": s.marks, "percentage": s.percentage}
            for s in highest_four
        ],
        meets_minimum_criteria=meets_minimum,
        has_english=has_english,
        english_grade=english.grade if english else "Not Found",
        merit_count=merit_count,
        distinction_count=distinction_count,
        criteria_details=SPFSCCriteriaDetails(
            has_three_merits=has_three_merits,
            includes_english_merit=includes_english_merit,
            eligible_for_tertiary=meets_minimum,
            eligible_for_scholarship=meets_minimum and distinction_count >= SPFSC_SCHOLARSHIP_MIN_DISTINCTIONS,
        ),
        missing_requirements=missing,
    )

    total_subjects = len(rows)
    total_percentage = sum(to_float(s.percentage) for s in rows)
    average_percentage = total_percentage / total_subjects if total_subjects else 0.0
    performance = OverallPerformance(
        total_subjects=total_subjects,
        average_percentage=round(average_percentage, 1),
        grade_point_average=calculate_spfsc_gpa(rows),
        rank=determine_spfsc_rank(average_percentage),
    )

    logger.debug(
        "SPFSC assessed: merits=%s distinctions=%s english=%s meets=%s",
        merit_count,
        distinction_count,
        summary.english_grade,
        meets_minimum,
    )
    return SPFSCAssessmentResult(summary=summary, performance=performance)


# --------------------------------------------------------------------------
# USP Foundation
# --------------------------------------------------------------------------


@dataclass
class FoundationCourse:
    course_code: str
    course_name: str
    course_type: str
    grade: str
    credits: float = 1
    semester: str | None = None
    year_completed: str | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "FoundationCourse":
        credits = payload.get("credits")
        return cls(
            course_code=str(payload.get("course_code") or ""),
            course_name=str(payload.get("course_name") or ""),
            course_type=str(payload.get("course_type") or "Other"),
            grade=str(payload.get("grade") or ""),
            credits=1 if is_blank(credits) else credits,
            semester=payload.get("semester"),
            year_completed=payload.get("year_completed"),
        )


@dataclass
class ProgrammeRequirements:
    has_programme_specific_gpa: bool = False
    required_gpa: float | None = None
    required_courses: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> "ProgrammeRequirements":
        payload = as_dict(payload)
        return cls(
            has_programme_specific_gpa=bool(payload.get("has_programme_specific_gpa", False)),
            required_gpa=payload.get("required_gpa"),
            required_courses=list(as_list(payload.get("required_courses"))),
        )


@dataclass
class FoundationRecord:
    foundation_courses: list[FoundationCourse] = field(default_factory=list)
    english_grade: str | None = None
    programme_requirements: ProgrammeRequirements = field(default_factory=ProgrammeRequirements)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "FoundationRecord":
        english = as_dict(payload.get("english_foundation_a"))
        return cls(
            foundation_courses=[FoundationCourse.from_dict(as_dict(c)) for c in as_list(payload.get("foundation_courses"))],
            english_grade=english.get("grade") or payload.get("english_grade"),
            programme_requirements=ProgrammeRequirements.from_dict(payload.get("programme_specific_requirements")),
        )


@dataclass
class FoundationPerformance:
    total_courses: int
    total_science_courses: int
    total_credits: float
    total_grade_points: float
    gpa: float


@dataclass
class PathwayCheck:
    meets_minimum_courses: bool
    meets_gpa_requirement: bool
    meets_english_requirement: bool
    meets_programme_requirements: bool = True
    programme_specific_gpa: float | None = None

    @property
    def eligible(self) -> bool:
        return (
            self.meets_minimum_courses
            and self.meets_gpa_requirement
            and self.meets_english_requirement
            and self.meets_programme_requirements
        )

    def to_dict(self) -> dict[str, Any]:
        return {**asdict(self), "eligible": self.eligible}


@dataclass
class FoundationAssessmentResult:
    performance: FoundationPerformance
    english_grade: str | None
    english_grade_points: float
    english_meets_b: bool
    general: PathwayCheck
    health_science: PathwayCheck
    medicine: PathwayCheck
    eligible_pathways: list[str]
    recommended_pathway: str
    missing_requirements: list[str] = field(default_factory=list)

    @property
    def overall_eligible(self) -> bool:
        return len(self.eligible_pathways) > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_performance": asdict(self.performance),
            "english_foundation_a": {
                "grade": self.english_grade,
                "grade_points": self.english_grade_points,
                "meets_b_requirement": self.english_meets_b,
            },
            "assessment_results": {
                "general_pathway": self.general.to_dict(),
                "health_science_pathway": self.health_science.to_dict(),
                "medicine_pathway": self.medicine.to_dict(),
                "overall_eligible": self.overall_eligible,
                "eligible_pathways": list(self.eligible_pathways),
                "recommended_pathway": self.recommended_pathway,
                "missing_requirements": list(self.missing_requirements),
            },
        }


def calculate_foundation_performance(courses: list[FoundationCourse]) -> FoundationPerformance:
    total_grade_points = 0.0
    total_credits = 0.0
    for course in courses:
        credits = to_float(course.credits, 1.0)
        total_grade_points += foundation_grade_points(course.grade) * credits
        total_credits += credits
    return FoundationPerformance(
        total_courses=len(courses),
        total_science_courses=sum(1 for c in courses if c.course_type == "Science"),
        total_credits=total_credits,
        total_grade_points=total_grade_points,
        gpa=total_grade_points / total_credits if total_credits > 0 else 0.0,
    )


def assess_usp_foundation(record: FoundationRecord | dict[str, Any]) -> FoundationAssessmentResult:
    """Evaluate the General, Health Science and Medicine pathways.

    The three pathways are independent; a student can qualify for several.
    The recommendation picks the most demanding one that is met.
    """
    if isinstance(record, dict):
        record = FoundationRecord.from_dict(record)

    performance = calculate_foundation_performance(record.foundation_courses)
    gpa = performance.gpa
    english_points = foundation_grade_points(record.english_grade) if record.english_grade else 0.0
    english_meets_b = bool(record.english_grade) and english_points >= ENGLISH_B_GRADE_POINTS

    general = PathwayCheck(
        meets_minimum_courses=performance.total_courses >= GENERAL_MIN_COURSES,
        meets_gpa_requirement=gpa >= GENERAL_MIN_GPA,
        meets_english_requirement=english_meets_b,
    )

    programme = record.programme_requirements
    programme_gpa = to_float(programme.required_gpa) or None
    if programme.has_programme_specific_gpa:
        meets_programme = gpa >= (programme_gpa or HEALTH_SCIENCE_MIN_GPA)
    else:
        meets_programme = True
    health_science = PathwayCheck(
        meets_minimum_courses=performance.total_science_courses >= SCIENCE_MIN_COURSES,
        meets_gpa_requirement=gpa >= HEALTH_SCIENCE_MIN_GPA,
        meets_english_requirement=english_meets_b,
        meets_programme_requirements=meets_programme,
        programme_specific_gpa=programme_gpa,
    )

    medicine = PathwayCheck(
        meets_minimum_courses=performance.total_science_courses >= SCIENCE_MIN_COURSES,
        meets_gpa_requirement=gpa >= MEDICINE_MIN_GPA,
        meets_english_requirement=english_meets_b,
    )

    eligible_pathways = [
        name
        for name, check in [
            (PATHWAY_GENERAL, general),
            (PATHWAY_HEALTH_SCIENCE, health_science),
            (PATHWAY_MEDICINE, medicine),
        ]
        if check.eligible
    ]

    if medicine.eligible:
        recommended = PATHWAY_MEDICINE
    elif health_science.eligible:
        recommended = PATHWAY_HEALTH_SCIENCE
    elif general.eligible:
        recommended = PATHWAY_GENERAL
    else:
        recommended = PATHWAY_NONE

    missing: list[str] = []
    if not eligible_pathways:
        if not general.meets_minimum_courses:
            missing.append(f"Minimum {GENERAL_MIN_COURSES} foundation courses required ({performance.total_courses} completed)")
        if not general.meets_gpa_requirement:
            missing.append(f"GPA {gpa:.2f} below required {GENERAL_MIN_GPA}")
        if not english_meets_b:
            missing.append("English Foundation A at grade B or higher required")

    return FoundationAssessmentResult(
        performance=performance,
        english_grade=record.english_grade,
        english_grade_points=english_points,
        english_meets_b=english_meets_b,
        general=general,
        health_science=health_science,
        medicine=medicine,
        eligible_pathways=eligible_pathways,
        recommended_pathway=recommended,
        missing_requirements=missing,
    )


def check_pathway_eligibility(result: FoundationAssessmentResult, pathway: str) -> dict[str, Any]:
    perf = result.performance
    if pathway == PATHWAY_GENERAL:
        return {
            "eligible": result.general.eligible,
            "requirements": {
                "minimum_courses": GENERAL_MIN_COURSES,
                "current_courses": perf.total_courses,
                "meets_minimum_courses": result.general.meets_minimum_courses,
                "required_gpa": GENERAL_MIN_GPA,
                "current_gpa": perf.gpa,
                "meets_gpa": result.general.meets_gpa_requirement,
                "english_grade": result.english_grade,
                "meets_english": result.general.meets_english_requirement,
            },
        }
    if pathway == PATHWAY_HEALTH_SCIENCE:
        return {
            "eligible": result.health_science.eligible,
            "requirements": {
                "minimum_science_courses": SCIENCE_MIN_COURSES,
                "current_science_courses": perf.total_science_courses,
                "meets_science_courses": result.health_science.meets_minimum_courses,
                "required_gpa": result.health_science.programme_specific_gpa or HEALTH_SCIENCE_MIN_GPA,
                "current_gpa": perf.gpa,
                "meets_gpa": result.health_science.meets_gpa_requirement,
                "english_grade": result.english_grade,
                "meets_english": result.health_science.meets_english_requirement,
                "programme_specific": result.health_science.meets_programme_requirements,
            },
        }
    if pathway == PATHWAY_MEDICINE:
        return {
            "eligible": result.medicine.eligible,
            "requirements": {
                "minimum_science_courses": SCIENCE_MIN_COURSES,
                "current_science_courses": perf.total_science_courses,
                "meets_science_courses": result.medicine.meets_minimum_courses,
                "required_gpa": MEDICINE_MIN_GPA,
                "current_gpa": perf.gpa,
                "meets_gpa": result.medicine.meets_gpa_requirement,
                "english_grade": result.english_grade,
                "meets_english": result.medicine.meets_english_requirement,
            },
        }
    return {"eligible": False, "reason": "Invalid pathway specified"}


# --------------------------------------------------------------------------
# Postgraduate application
# --------------------------------------------------------------------------


@dataclass
class InstitutionRequirements:
    minimum_gpa: float | None = None
    applicant_gpa: float | None = None
    meets_gpa_requirement: bool = False
    meets_all_requirements: bool = False
    offer_received: bool = False

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> "InstitutionRequirements":
        payload = as_dict(payload)
        return cls(
            minimum_gpa=payload.get("minimum_gpa"),
            applicant_gpa=payload.get("applicant_gpa"),
            meets_gpa_requirement=bool(payload.get("meets_gpa_requirement", False)),
            meets_all_requirements=bool(payload.get("meets_all_requirements", False)),
            offer_received=bool(payload.get("offer_received", False)),
        )


@dataclass
class PhdDetails:
    status: str = "N/A"
    research_proposal_submitted: bool = False
    supervisor_support_received: bool = False
    progress_report_submitted: bool = False
    progress_report_supervisor_agreed: bool = False

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> "PhdDetails":
        payload = as_dict(payload)
        progress = as_dict(payload.get("progress_report"))
        return cls(
            status=str(payload.get("status") or "N/A"),
            research_proposal_submitted=bool(as_dict(payload.get("research_proposal")).get("submitted", False)),
            supervisor_support_received=bool(as_dict(payload.get("supervisor_support")).get("received", False)),
            progress_report_submitted=bool(progress.get("submitted", False)),
            progress_report_supervisor_agreed=bool(progress.get("supervisor_agreed", False)),
        )


@dataclass
class ResearchDetails:
    is_research_degree: bool = False
    outline_submitted: bool = False
    aligns_with_priority_framework: bool = False
    priority_area: str | None = None
    phd: PhdDetails = field(default_factory=PhdDetails)

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> "ResearchDetails":
        payload = as_dict(payload)
        return cls(
            is_research_degree=bool(payload.get("is_research_degree", False)),
            outline_submitted=bool(as_dict(payload.get("research_outline")).get("submitted", False)),
            aligns_with_priority_framework=bool(payload.get("aligns_with_priority_framework", False)),
            priority_area=payload.get("priority_area"),
            phd=PhdDetails.from_dict(payload.get("phd_specific")),
        )


@dataclass
class CommissionApproval:
    required: bool = False
    commission_type: str | None = None
    approval_received: bool = False
    meets_commission_requirements: bool = False

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> "CommissionApproval":
        payload = as_dict(payload)
        return cls(
            required=bool(payload.get("required", False)),
            commission_type=payload.get("commission_type"),
            approval_received=bool(payload.get("approval_received", False)),
            meets_commission_requirements=bool(payload.get("meets_commission_requirements", False)),
        )


@dataclass
class UndergraduateDetails:
    completed_within_term: bool = False
    has_undertaken_attachments: bool = False
    attachments: list[dict[str, Any]] = field(default_factory=list)
    recommendation_letter_received: bool = False

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> "UndergraduateDetails":
        payload = as_dict(payload)
        return cls(
            completed_within_term=bool(payload.get("completed_within_term", False)),
            has_undertaken_attachments=bool(payload.get("has_undertaken_attachments", False)),
            attachments=[as_dict(a) for a in as_list(payload.get("attachments"))],
            recommendation_letter_received=bool(as_dict(payload.get("recommendation_letter")).get("received", False)),
        )


@dataclass
class PostgraduateApplicationInput:
    applicant_type: str
    programme_level: str
    institution_name: str | None = None
    programme_name: str | None = None
    institution_requirements: InstitutionRequirements = field(default_factory=InstitutionRequirements)
    research_details: ResearchDetails = field(default_factory=ResearchDetails)
    commission_approval: CommissionApproval = field(default_factory=CommissionApproval)
    undergraduate_details: UndergraduateDetails = field(default_factory=UndergraduateDetails)
    document_types: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "PostgraduateApplicationInput":
        proposed = as_dict(payload.get("proposed_study"))
        workforce = as_dict(payload.get("workforce_details"))
        return cls(
            applicant_type=str(payload.get("applicant_type") or ""),
            programme_level=str(payload.get("programme_level") or ""),
            institution_name=proposed.get("institution_name") or payload.get("institution_name"),
            programme_name=proposed.get("programme_name") or payload.get("programme_name"),
            institution_requirements=InstitutionRequirements.from_dict(payload.get("institution_requirements")),
            research_details=ResearchDetails.from_dict(payload.get("research_details")),
            commission_approval=CommissionApproval.from_dict(workforce.get("commission_approval")),
            undergraduate_details=UndergraduateDetails.from_dict(payload.get("undergraduate_details")),
            document_types=[
                str(get_field(doc, "document_type")) for doc in as_list(payload.get("documents")) if get_field(doc, "document_type")
            ],
        )


@dataclass
class PostgraduateEligibility:
    meets_institution_requirements: bool = False
    has_research_outline: bool = False
    research_aligns_priorities: bool = False
    meets_phd_requirements: bool = False
    has_research_proposal: bool = False
    has_supervisor_support: bool = False
    has_progress_report: bool = False
    meets_workforce_requirements: bool = False
    has_commission_approval: bool = False
    completed_within_term: bool = False
    undertook_attachments: bool = False
    has_recommendation_letter: bool = False
    overall_eligible: bool = False
    missing_requirements: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class CompletenessResult:
    is_complete: bool
    issues: list[str]


@dataclass
class SubmissionCheck:
    can_submit: bool
    reason: str | None = None
    issues: list[str] = field(default_factory=list)


def _coerce_application(application: PostgraduateApplicationInput | dict[str, Any]) -> PostgraduateApplicationInput:
    if isinstance(application, PostgraduateApplicationInput):
        return application
    return PostgraduateApplicationInput.from_dict(application)


def assess_postgraduate_eligibility(application: PostgraduateApplicationInput | dict[str, Any]) -> PostgraduateEligibility:
    """Gate-by-gate eligibility for a postgraduate scholarship application.

    Gates that do not apply to the applicant type or programme level are
    skipped rather than counted as failures.
    """
    app = _coerce_application(application)
    result = PostgraduateEligibility()
    missing = result.missing_requirements

    inst = app.institution_requirements
    result.meets_institution_requirements = inst.meets_gpa_requirement and inst.meets_all_requirements
    if not result.meets_institution_requirements:
        missing.append("Institution minimum requirements not met")
    eligible = result.meets_institution_requirements

    research = app.research_details
    if research.is_research_degree:
        result.has_research_outline = research.outline_submitted
        result.research_aligns_priorities = research.aligns_with_priority_framework
        if not result.has_research_outline:
            missing.append("Research outline (1 page) required")
        if not result.research_aligns_priorities:
            missing.append("Research must align with Scholarship Priority Framework")
        eligible = eligible and result.has_research_outline and result.research_aligns_priorities

    if app.programme_level == "PhD":
        phd = research.phd
        if phd.status == PHD_NOT_STARTED:
            result.has_research_proposal = phd.research_proposal_submitted
            result.has_supervisor_support = phd.supervisor_support_received
            if not result.has_research_proposal:
                missing.append("PhD research proposal required")
            if not result.has_supervisor_support:
                missing.append("Supervisor support letter required")
            result.meets_phd_requirements = result.has_research_proposal and result.has_supervisor_support
        elif phd.status == PHD_IN_PROGRESS:
            result.has_progress_report = phd.progress_report_submitted and phd.progress_report_supervisor_agreed
            result.has_supervisor_support = phd.supervisor_support_received
            if not result.has_progress_report:
                missing.append("PhD progress report (supervisor-agreed) required")
            if not result.has_supervisor_support:
                missing.append("Supervisor support letter required")
            result.meets_phd_requirements = result.has_progress_report and result.has_supervisor_support
        if not result.meets_phd_requirements:
            missing.append("PhD-specific requirements not met")
        eligible = eligible and result.meets_phd_requirements

    if app.applicant_type == APPLICANT_WORKFORCE:
        commission = app.commission_approval
        if commission.required:
            result.has_commission_approval = commission.approval_received and commission.meets_commission_requirements
            if not result.has_commission_approval:
                missing.append(f"{commission.commission_type or 'Commission'} approval required")
        result.meets_workforce_requirements = not commission.required or result.has_commission_approval
        eligible = eligible and result.meets_workforce_requirements

    if app.applicant_type in UNDERGRADUATE_APPLICANTS:
        undergrad = app.undergraduate_details
        result.completed_within_term = undergrad.completed_within_term
        if not result.completed_within_term:
            missing.append("Must have completed degree within original award term")
        result.undertook_attachments = undergrad.has_undertaken_attachments and len(undergrad.attachments) > 0
        if not result.undertook_attachments:
            missing.append("Regular attachments with relevant organizations required")
        result.has_recommendation_letter = undergrad.recommendation_letter_received
        if not result.has_recommendation_letter:
            missing.append("Recommendation letter from university lecturer required")
        eligible = (
            eligible
            and result.completed_within_term
            and result.has_recommendation_letter
            and result.undertook_attachments
        )

    result.overall_eligible = eligible
    return result


def next_application_status(current_status: str | None, eligible: bool) -> str:
    status = current_status or "Draft"
    if status in OPEN_APPLICATION_STATUSES:
        return "Complete" if eligible else "Incomplete"
    return status


def check_completeness(application: PostgraduateApplicationInput | dict[str, Any]) -> CompletenessResult:
    app = _coerce_application(application)
    issues: list[str] = []

    if not app.institution_name:
        issues.append("Institution name required")
    if not app.programme_name:
        issues.append("Programme name required")
    if not app.institution_requirements.minimum_gpa:
        issues.append("Institution minimum GPA required")
    if not app.institution_requirements.applicant_gpa:
        issues.append("Your GPA required")
    if "Academic Transcript" not in app.document_types:
        issues.append("Academic transcript required")
    if app.research_details.is_research_degree and "Research Outline" not in app.document_types:
        issues.append("Research outline required")

    return CompletenessResult(is_complete=not issues, issues=issues)


def check_submission(
    application: PostgraduateApplicationInput | dict[str, Any],
    eligibility: PostgraduateEligibility | None = None,
) -> SubmissionCheck:
    app = _coerce_application(application)
    completeness = check_completeness(app)
    if not completeness.is_complete:
        return SubmissionCheck(False, "Application is incomplete", completeness.issues)

    verdict = eligibility or assess_postgraduate_eligibility(app)
    if not verdict.overall_eligible:
        return SubmissionCheck(
            False,
            "Application does not meet eligibility requirements",
            list(verdict.missing_requirements),
        )
    return SubmissionCheck(True)


# --------------------------------------------------------------------------
# Awards
# --------------------------------------------------------------------------


@dataclass
class GradeRecord:
    subject_name: str
    grade: str | None = None
    grade_point: float = 0.0
    percentage: float = 0.0

    @classmethod
    def from_row(cls, row: Any) -> "GradeRecord":
        final = as_dict(get_field(row, "final_grade"))
        return cls(
            subject_name=str(get_field(row, "subject_name") or ""),
            grade=final.get("grade", get_field(row, "grade")),
            grade_point=to_float(final.get("grade_point", get_field(row, "grade_point"))),
            percentage=to_float(final.get("percentage", get_field(row, "percentage"))),
        )


@dataclass
class AwardCriteriaResult:
    meets_all_criteria: bool
    qualification_details: dict[str, Any]
    reasons: list[str] = field(default_factory=list)


def _coerce_grades(grade_records: list[Any]) -> list[GradeRecord]:
    return [item if isinstance(item, GradeRecord) else GradeRecord.from_row(item) for item in grade_records or []]


def average_grade_metrics(grade_records: list[Any]) -> tuple[float, float]:
    rows = _coerce_grades(grade_records)
    if not rows:
        return 0.0, 0.0
    average_gpa = sum(r.grade_point for r in rows) / len(rows)
    average_percentage = sum(r.percentage for r in rows) / len(rows)
    return average_gpa, average_percentage


def evaluate_award_criteria(criteria: dict[str, Any] | None, grade_records: list[Any]) -> AwardCriteriaResult:
    criteria = as_dict(criteria)
    rows = _coerce_grades(grade_records)
    average_gpa, average_percentage = average_grade_metrics(rows)
    reasons: list[str] = []

    minimum_gpa = to_float(criteria.get("minimum_gpa"))
    if minimum_gpa and average_gpa < minimum_gpa:
        reasons.append(f"Average GPA {average_gpa:.2f} below required {minimum_gpa:g}")

    minimum_percentage = to_float(criteria.get("minimum_percentage"))
    if minimum_percentage and average_percentage < minimum_percentage:
        reasons.append(f"Average percentage {average_percentage:.2f}% below required {minimum_percentage:g}%")

    by_subject: dict[str, GradeRecord] = {}
    for r in rows:
        by_subject.setdefault(r.subject_name, r)
    for requirement in as_list(criteria.get("required_grades")):
        subject = get_field(requirement, "subject")
        minimum_grade = get_field(requirement, "minimum_grade")
        record = by_subject.get(subject)
        if record is None:
            reasons.append(f"No grade recorded for {subject}")
            break
        if not grade_meets_minimum(record.grade, minimum_grade):
            reasons.append(f"{subject} grade {record.grade} below required {minimum_grade}")
            break

    return AwardCriteriaResult(
        meets_all_criteria=not reasons,
        qualification_details={
            "gpa": round(average_gpa, 2),
            "overall_percentage": round(average_percentage, 2),
            "subject_grades": [
                {"subject": r.subject_name, "grade": r.grade, "percentage": r.percentage} for r in rows
            ],
        },
        reasons=reasons,
    )
