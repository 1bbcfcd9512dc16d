from __future__ import annotations

import logging
import secrets
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from grading import FinalGrade, calculate_final_grade
from logic import (
    FoundationRecord,
    PostgraduateApplicationInput,
    assess_postgraduate_eligibility,
    assess_spfsc,
    assess_usp_foundation,
    check_submission,
    evaluate_award_criteria,
    next_application_status,
)
from matching import CANDIDATE_LEVELS, eligible_scholarship_ids, match_scholarships
from models import (
    AuditLog,
    Award,
    Certificate,
    Grade,
    PostGraduateApplication,
    ScholarshipCriteria,
    SequenceCounter,
    SPFSCAssessment,
    USPFoundationAssessment,
)

logger = logging.getLogger(__name__)

CERTIFICATE_PREFIX = "VU-CERT"


class RecordNotFound(LookupError):
    pass


class DuplicateAssessmentError(ValueError):
    pass


class SubmissionRejected(ValueError):
    def __init__(self, reason: str, issues: list[str]):
        super().__init__(reason)
        self.reason = reason
        self.issues = issues


def _uuid(value: Any) -> uuid.UUID | None:
    if value is None or value == "":
        return None
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _get_or_raise(db: Session, model: type, record_id: Any) -> Any:
    row = db.get(model, _uuid(record_id))
    if row is None:
        raise RecordNotFound(f"{model.__name__} {record_id} not found")
    return row


def log_action(
    db: Session,
    action: str,
    entity_id: uuid.UUID | None,
    details: dict[str, Any],
    actor_user_id: str | uuid.UUID | None = None,
) -> None:
    db.add(AuditLog(user_id=_uuid(actor_user_id), action=action, entity_id=entity_id, details_json=details))


def active_candidate_scholarships(db: Session) -> list[ScholarshipCriteria]:
    return db.scalars(
        select(ScholarshipCriteria)
        .where(ScholarshipCriteria.is_active.is_(True), ScholarshipCriteria.level.in_(sorted(CANDIDATE_LEVELS)))
        .order_by(ScholarshipCriteria.scholarship_name)
    ).all()


def _apply(row: Any, payload: dict[str, Any], fields: tuple[str, ...]) -> None:
    for name in fields:
        if name in payload:
            setattr(row, name, payload[name])


def _violated_constraint(exc: IntegrityError) -> str | None:
    diag = getattr(exc.orig, "diag", None)
    return getattr(diag, "constraint_name", None)


def _flush_unique(db: Session, constraint: str, message: str) -> None:
    # Only the named unique constraint means a duplicate; other integrity errors propagate.
    try:
        db.flush()
    except IntegrityError as exc:
        if _violated_constraint(exc) != constraint:
            raise
        raise DuplicateAssessmentError(message) from exc


# --------------------------------------------------------------------------
# SPFSC
# --------------------------------------------------------------------------

SPFSC_FIELDS = ("academic_year", "school", "subjects", "certificate_number", "certificate_status", "notes")
SPFSC_UNIQUE_CONSTRAINT = "uq_spfsc_assessments_student_year"


def save_spfsc_assessment(
    db: Session,
    payload: dict[str, Any],
    assessment_id: str | uuid.UUID | None = None,
    actor_user_id: str | uuid.UUID | None = None,
) -> SPFSCAssessment:
    """Create or update an SPFSC record, re-deriving its verdict and scholarship matches."""
    if assessment_id:
        row = _get_or_raise(db, SPFSCAssessment, assessment_id)
    else:
        student_id = _uuid(payload.get("student_id"))
        existing = db.scalar(
            select(SPFSCAssessment).where(
                SPFSCAssessment.student_id == student_id,
                SPFSCAssessment.academic_year == payload.get("academic_year"),
            )
        )
        if existing is not None:
            raise DuplicateAssessmentError(
                f"SPFSC assessment already exists for student {student_id} in {payload.get('academic_year')}"
            )
        row = SPFSCAssessment(student_id=student_id)
        db.add(row)
    _apply(row, payload, SPFSC_FIELDS)

    verdict = assess_spfsc(row.subjects or [])
    matches = match_scholarships(verdict, active_candidate_scholarships(db))
    verdict_dict = verdict.to_dict()
    row.assessment_summary = verdict_dict["assessment_summary"]
    row.overall_performance = verdict_dict["overall_performance"]
    row.meets_minimum_criteria = verdict.summary.meets_minimum_criteria
    row.scholarship_matches = [m.to_dict() for m in matches]

    _flush_unique(
        db,
        SPFSC_UNIQUE_CONSTRAINT,
        f"SPFSC assessment already exists for student {row.student_id} in {row.academic_year}",
    )
    log_action(
        db,
        "spfsc_assessed",
        row.id,
        {**verdict_dict, "eligible_scholarships": [str(i) for i in eligible_scholarship_ids(matches)]},
        actor_user_id,
    )
    logger.info(
        "SPFSC assessment %s saved: meets_minimum=%s eligible_scholarships=%s",
        row.id,
        row.meets_minimum_criteria,
        len(eligible_scholarship_ids(matches)),
    )
    return row


# --------------------------------------------------------------------------
# USP Foundation
# --------------------------------------------------------------------------

USP_FIELDS = (
    "academic_year",
    "programme_type",
    "intended_pathway",
    "foundation_courses",
    "english_foundation_a",
    "programme_specific_requirements",
)


def save_usp_foundation_assessment(
    db: Session,
    payload: dict[str, Any],
    assessment_id: str | uuid.UUID | None = None,
    actor_user_id: str | uuid.UUID | None = None,
) -> USPFoundationAssessment:
    if assessment_id:
        row = _get_or_raise(db, USPFoundationAssessment, assessment_id)
    else:
        row = USPFoundationAssessment(student_id=_uuid(payload.get("student_id")))
        db.add(row)
    _apply(row, payload, USP_FIELDS)

    result = assess_usp_foundation(
        FoundationRecord.from_dict(
            {
                "foundation_courses": row.foundation_courses or [],
                "english_foundation_a": row.english_foundation_a or {},
                "programme_specific_requirements": row.programme_specific_requirements or {},
            }
        )
    )
    result_dict = result.to_dict()
    row.overall_performance = result_dict["overall_performance"]
    row.english_foundation_a = {**(row.english_foundation_a or {}), **result_dict["english_foundation_a"]}
    row.assessment_results = result_dict["assessment_results"]
    row.overall_eligible = result.overall_eligible
    row.gpa = round(result.performance.gpa, 2)

    db.flush()
    log_action(db, "usp_foundation_assessed", row.id, result_dict, actor_user_id)
    logger.info(
        "USP foundation assessment %s saved: recommended=%s",
        row.id,
        result.recommended_pathway,
    )
    return row


# --------------------------------------------------------------------------
# Postgraduate applications
# --------------------------------------------------------------------------

POSTGRADUATE_FIELDS = (
    "academic_year",
    "applicant_type",
    "programme_level",
    "proposed_study",
    "institution_requirements",
    "research_details",
    "workforce_details",
    "undergraduate_details",
    "documents",
)


def _application_input(row: PostGraduateApplication) -> PostgraduateApplicationInput:
    return PostgraduateApplicationInput.from_dict({name: getattr(row, name) for name in POSTGRADUATE_FIELDS})


def save_postgraduate_application(
    db: Session,
    payload: dict[str, Any],
    application_id: str | uuid.UUID | None = None,
    actor_user_id: str | uuid.UUID | None = None,
) -> PostGraduateApplication:
    if application_id:
        row = _get_or_raise(db, PostGraduateApplication, application_id)
    else:
        row = PostGraduateApplication(student_id=_uuid(payload.get("student_id")), application_status="Draft")
        db.add(row)
    _apply(row, payload, POSTGRADUATE_FIELDS)

    eligibility = assess_postgraduate_eligibility(_application_input(row))
    row.eligibility_assessment = eligibility.to_dict()
    row.application_status = next_application_status(row.application_status, eligibility.overall_eligible)

    db.flush()
    log_action(
        db,
        "postgraduate_assessed",
        row.id,
        {"application_status": row.application_status, **eligibility.to_dict()},
        actor_user_id,
    )
    logger.info("Postgraduate application %s saved with status %s", row.id, row.application_status)
    return row


def submit_postgraduate_application(
    db: Session,
    application_id: str | uuid.UUID,
    actor_user_id: str | uuid.UUID | None = None,
) -> PostGraduateApplication:
    row = _get_or_raise(db, PostGraduateApplication, application_id)
    application = _application_input(row)
    eligibility = assess_postgraduate_eligibility(application)
    row.eligibility_assessment = eligibility.to_dict()

    check = check_submission(application, eligibility)
    if not check.can_submit:
        logger.info("Postgraduate application %s rejected at submission: %s", row.id, check.reason)
        raise SubmissionRejected(check.reason or "Application cannot be submitted", check.issues)

    row.application_status = "Submitted"
    row.submitted_at = _utcnow()
    log_action(db, "postgraduate_submitted", row.id, {"submitted_at": row.submitted_at.isoformat()}, actor_user_id)
    return row


# --------------------------------------------------------------------------
# Grades and awards
# --------------------------------------------------------------------------

GRADE_FIELDS = ("subject_code", "subject_name", "academic_year", "term", "assessments")


def record_grade(
    db: Session,
    payload: dict[str, Any],
    grade_id: str | uuid.UUID | None = None,
    actor_user_id: str | uuid.UUID | None = None,
) -> Grade:
    if grade_id:
        row = _get_or_raise(db, Grade, grade_id)
    else:
        row = Grade(student_id=_uuid(payload.get("student_id")))
        db.add(row)
    _apply(row, payload, GRADE_FIELDS)

    final = calculate_final_grade(row.assessments or [], FinalGrade.from_dict(row.final_grade))
    row.final_grade = final.to_dict() if final else None

    db.flush()
    log_action(db, "grade_recorded", row.id, {"final_grade": row.final_grade}, actor_user_id)
    return row


def check_award_criteria(
    db: Session,
    award_id: str | uuid.UUID,
    actor_user_id: str | uuid.UUID | None = None,
) -> Award:
    award = _get_or_raise(db, Award, award_id)
    grades = db.scalars(
        select(Grade).where(Grade.student_id == award.student_id, Grade.academic_year == award.academic_year)
    ).all()

    result = evaluate_award_criteria(award.criteria, grades)
    award.meets_all_criteria = result.meets_all_criteria
    award.qualification_details = {**result.qualification_details, "reasons": result.reasons}
    log_action(
        db,
        "award_criteria_checked",
        award.id,
        {"meets_all_criteria": result.meets_all_criteria, "reasons": result.reasons},
        actor_user_id,
    )
    return award


# --------------------------------------------------------------------------
# Certificates
# --------------------------------------------------------------------------


def next_sequence_value(db: Session, name: str) -> int:
    """Atomically increment the named counter and return the new value."""
    stmt = (
        pg_insert(SequenceCounter)
        .values(name=name, value=1)
        .on_conflict_do_update(
            index_elements=[SequenceCounter.name],
            set_={"value": SequenceCounter.value + 1},
        )
        .returning(SequenceCounter.value)
    )
    return int(db.execute(stmt).scalar_one())


def format_certificate_number(year: int, sequence: int) -> str:
    return f"{CERTIFICATE_PREFIX}-{year}-{sequence:06d}"


def generate_verification_code() -> str:
    return secrets.token_hex(16).upper()


def issue_certificate(
    db: Session,
    student_id: str | uuid.UUID,
    certificate_type: str,
    title: str,
    academic_year: str,
    gpa: float | None = None,
    actor_user_id: str | uuid.UUID | None = None,
) -> Certificate:
    year = _utcnow().year
    sequence = next_sequence_value(db, f"certificate:{year}")
    certificate = Certificate(
        student_id=_uuid(student_id),
        certificate_type=certificate_type,
        certificate_number=format_certificate_number(year, sequence),
        verification_code=generate_verification_code(),
        title=title,
        academic_year=academic_year,
        gpa=gpa,
        status="active",
    )
    db.add(certificate)
    db.flush()
    log_action(
        db,
        "certificate_issued",
        certificate.id,
        {"certificate_number": certificate.certificate_number, "certificate_type": certificate_type},
        actor_user_id,
    )
    logger.info("Issued certificate %s", certificate.certificate_number)
    return certificate
