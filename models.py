from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    role: Mapped[str] = mapped_column(String(20), nullable=False)  # student | teacher | examiner | administrator
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    student_number: Mapped[Optional[str]] = mapped_column(String(40), nullable=True, unique=True)
    school: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("role in ('student', 'teacher', 'examiner', 'administrator')", name="ck_users_role"),
    )


class ScholarshipCriteria(Base):
    __tablename__ = "scholarship_criteria"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    scholarship_name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    provider: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)  # {name, type, country}
    scholarship_type: Mapped[str] = mapped_column(String(40), nullable=False)
    level: Mapped[str] = mapped_column(String(40), nullable=False)
    value: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)  # {amount, currency, coverage, duration}
    academic_criteria: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    target_fields: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=list)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "level in ('Secondary', 'Tertiary', 'Undergraduate', 'Postgraduate', 'Vocational', 'All Levels')",
            name="ck_scholarship_criteria_level",
        ),
        Index("ix_scholarship_criteria_is_active", "is_active"),
        Index("ix_scholarship_criteria_level", "level"),
    )


class SPFSCAssessment(Base):
    __tablename__ = "spfsc_assessments"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    school: Mapped[str] = mapped_column(String(255), nullable=False)
    certificate_number: Mapped[Optional[str]] = mapped_column(String(60), nullable=True, unique=True)
    subjects: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    assessment_summary: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    overall_performance: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    scholarship_matches: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    meets_minimum_criteria: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    certificate_status: Mapped[str] = mapped_column(String(20), nullable=False, default="Pending")
    verified_by: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    verified_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("student_id", "academic_year", name="uq_spfsc_assessments_student_year"),
        CheckConstraint(
            "certificate_status in ('Pending', 'Issued', 'Verified', 'Revoked')",
            name="ck_spfsc_assessments_certificate_status",
        ),
        Index("ix_spfsc_assessments_meets_minimum", "meets_minimum_criteria"),
        Index("ix_spfsc_assessments_school_year", "school", "academic_year"),
    )

    student = relationship("User", foreign_keys=[student_id])


class USPFoundationAssessment(Base):
    __tablename__ = "usp_foundation_assessments"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    programme_type: Mapped[str] = mapped_column(String(60), nullable=False)
    intended_pathway: Mapped[str] = mapped_column(String(60), nullable=False)
    foundation_courses: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    english_foundation_a: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    programme_specific_requirements: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    overall_performance: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    assessment_results: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    overall_eligible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    gpa: Mapped[Optional[float]] = mapped_column(Numeric(4, 2), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "programme_type in ('General Foundation', 'Health Science Foundation', 'Medicine Foundation')",
            name="ck_usp_foundation_programme_type",
        ),
        Index("ix_usp_foundation_student_year", "student_id", "academic_year"),
        Index("ix_usp_foundation_overall_eligible", "overall_eligible"),
    )


class PostGraduateApplication(Base):
    __tablename__ = "postgraduate_applications"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    applicant_type: Mapped[str] = mapped_column(String(60), nullable=False)
    programme_level: Mapped[str] = mapped_column(String(40), nullable=False)
    proposed_study: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    institution_requirements: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    research_details: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    workforce_details: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    undergraduate_details: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    documents: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    eligibility_assessment: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    application_status: Mapped[str] = mapped_column(String(40), nullable=False, default="Draft")
    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    decision_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "applicant_type in ('Current Workforce', 'About to Complete Undergraduate', 'Recently Completed Undergraduate')",
            name="ck_postgraduate_applications_applicant_type",
        ),
        CheckConstraint(
            "application_status in ('Draft', 'Incomplete', 'Complete', 'Submitted', 'Under Review', "
            "'Additional Information Required', 'Approved', 'Conditionally Approved', 'Rejected', 'Withdrawn')",
            name="ck_postgraduate_applications_status",
        ),
        Index("ix_postgraduate_applications_student_id", "student_id"),
        Index("ix_postgraduate_applications_status", "application_status"),
    )


class Grade(Base):
    __tablename__ = "grades"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    subject_code: Mapped[str] = mapped_column(String(40), nullable=False)
    subject_name: Mapped[str] = mapped_column(String(255), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    term: Mapped[str] = mapped_column(String(20), nullable=False)
    assessments: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    final_grade: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("term in ('Term 1', 'Term 2', 'Term 3', 'Term 4', 'Annual')", name="ck_grades_term"),
        Index("ix_grades_student_year", "student_id", "academic_year"),
        Index("ix_grades_subject_code", "subject_code"),
    )


class Award(Base):
    __tablename__ = "awards"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    award_type: Mapped[str] = mapped_column(String(40), nullable=False)
    award_name: Mapped[str] = mapped_column(String(255), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    criteria: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    meets_all_criteria: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    qualification_details: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Pending")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "status in ('Pending', 'Approved', 'Awarded', 'Declined', 'Revoked')",
            name="ck_awards_status",
        ),
        Index("ix_awards_student_year", "student_id", "academic_year"),
    )


class Result(Base):
    __tablename__ = "results"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    term: Mapped[str] = mapped_column(String(20), nullable=False)
    obtained: Mapped[float] = mapped_column(Numeric(7, 2), nullable=False)
    total: Mapped[float] = mapped_column(Numeric(7, 2), nullable=False)
    percentage: Mapped[float] = mapped_column(Numeric(5, 2), nullable=False)
    letter_grade: Mapped[str] = mapped_column(String(4), nullable=False)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_results_student_year_term", "student_id", "academic_year", "term"),
        Index("ix_results_is_published", "is_published"),
    )


class Certificate(Base):
    __tablename__ = "certificates"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    certificate_type: Mapped[str] = mapped_column(String(30), nullable=False)
    certificate_number: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    verification_code: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    gpa: Mapped[Optional[float]] = mapped_column(Numeric(4, 2), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "certificate_type in ('completion', 'achievement', 'merit', 'distinction', 'participation', 'transcript')",
            name="ck_certificates_type",
        ),
        Index("ix_certificates_student_year", "student_id", "academic_year"),
    )


class SequenceCounter(Base):
    __tablename__ = "sequence_counters"

    name: Mapped[str] = mapped_column(String(80), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    action: Mapped[str] = mapped_column(String(120), nullable=False)
    entity_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True)
    details_json: Mapped[dict] = mapped_column(JSONB, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (Index("ix_audit_logs_entity_id", "entity_id"),)
