"""initial schema

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-18 00:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=120), nullable=True),
        sa.Column("last_name", sa.String(length=120), nullable=True),
        sa.Column("student_number", sa.String(length=40), nullable=True),
        sa.Column("school", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("role in ('student', 'teacher', 'examiner', 'administrator')", name="ck_users_role"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("student_number"),
    )

    op.create_table(
        "scholarship_criteria",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("scholarship_name", sa.String(length=255), nullable=False),
        sa.Column("provider", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("scholarship_type", sa.String(length=40), nullable=False),
        sa.Column("level", sa.String(length=40), nullable=False),
        sa.Column("value", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("academic_criteria", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("target_fields", postgresql.ARRAY(sa.Text()), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint(
            "level in ('Secondary', 'Tertiary', 'Undergraduate', 'Postgraduate', 'Vocational', 'All Levels')",
            name="ck_scholarship_criteria_level",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("scholarship_name"),
    )
    op.create_index("ix_scholarship_criteria_is_active", "scholarship_criteria", ["is_active"], unique=False)
    op.create_index("ix_scholarship_criteria_level", "scholarship_criteria", ["level"], unique=False)

    op.create_table(
        "spfsc_assessments",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("academic_year", sa.String(length=20), nullable=False),
        sa.Column("school", sa.String(length=255), nullable=False),
        sa.Column("certificate_number", sa.String(length=60), nullable=True),
        sa.Column("subjects", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("assessment_summary", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("overall_performance", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("scholarship_matches", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("meets_minimum_criteria", sa.Boolean(), nullable=False),
        sa.Column("certificate_status", sa.String(length=20), nullable=False),
        sa.Column("verified_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "certificate_status in ('Pending', 'Issued', 'Verified', 'Revoked')",
            name="ck_spfsc_assessments_certificate_status",
        ),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["verified_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("certificate_number"),
        sa.UniqueConstraint("student_id", "academic_year", name="uq_spfsc_assessments_student_year"),
    )
    op.create_index("ix_spfsc_assessments_meets_minimum", "spfsc_assessments", ["meets_minimum_criteria"], unique=False)
    op.create_index("ix_spfsc_assessments_school_year", "spfsc_assessments", ["school", "academic_year"], unique=False)

    op.create_table(
        "usp_foundation_assessments",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("academic_year", sa.String(length=20), nullable=False),
        sa.Column("programme_type", sa.String(length=60), nullable=False),
        sa.Column("intended_pathway", sa.String(length=60), nullable=False),
        sa.Column("foundation_courses", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("english_foundation_a", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("programme_specific_requirements", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("overall_performance", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("assessment_results", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("overall_eligible", sa.Boolean(), nullable=False),
        sa.Column("gpa", sa.Numeric(4, 2), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "programme_type in ('General Foundation', 'Health Science Foundation', 'Medicine Foundation')",
            name="ck_usp_foundation_programme_type",
        ),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_usp_foundation_student_year", "usp_foundation_assessments", ["student_id", "academic_year"], unique=False)
    op.create_index("ix_usp_foundation_overall_eligible", "usp_foundation_assessments", ["overall_eligible"], unique=False)

    op.create_table(
        "postgraduate_applications",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("academic_year", sa.String(length=20), nullable=False),
        sa.Column("applicant_type", sa.String(length=60), nullable=False),
        sa.Column("programme_level", sa.String(length=40), nullable=False),
        sa.Column("proposed_study", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("institution_requirements", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("research_details", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("workforce_details", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("undergraduate_details", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("documents", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("eligibility_assessment", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("application_status", sa.String(length=40), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("decision_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "applicant_type in ('Current Workforce', 'About to Complete Undergraduate', 'Recently Completed Undergraduate')",
            name="ck_postgraduate_applications_applicant_type",
        ),
        sa.CheckConstraint(
            "application_status in ('Draft', 'Incomplete', 'Complete', 'Submitted', 'Under Review', "
            "'Additional Information Required', 'Approved', 'Conditionally Approved', 'Rejected', 'Withdrawn')",
            name="ck_postgraduate_applications_status",
        ),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_postgraduate_applications_student_id", "postgraduate_applications", ["student_id"], unique=False)
    op.create_index("ix_postgraduate_applications_status", "postgraduate_applications", ["application_status"], unique=False)

    op.create_table(
        "grades",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("subject_code", sa.String(length=40), nullable=False),
        sa.Column("subject_name", sa.String(length=255), nullable=False),
        sa.Column("academic_year", sa.String(length=20), nullable=False),
        sa.Column("term", sa.String(length=20), nullable=False),
        sa.Column("assessments", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("final_grade", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("term in ('Term 1', 'Term 2', 'Term 3', 'Term 4', 'Annual')", name="ck_grades_term"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_grades_student_year", "grades", ["student_id", "academic_year"], unique=False)
    op.create_index("ix_grades_subject_code", "grades", ["subject_code"], unique=False)

    op.create_table(
        "awards",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("award_type", sa.String(length=40), nullable=False),
        sa.Column("award_name", sa.String(length=255), nullable=False),
        sa.Column("academic_year", sa.String(length=20), nullable=False),
        sa.Column("criteria", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("meets_all_criteria", sa.Boolean(), nullable=False),
        sa.Column("qualification_details", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("status in ('Pending', 'Approved', 'Awarded', 'Declined', 'Revoked')", name="ck_awards_status"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_awards_student_year", "awards", ["student_id", "academic_year"], unique=False)

    op.create_table(
        "results",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("academic_year", sa.String(length=20), nullable=False),
        sa.Column("term", sa.String(length=20), nullable=False),
        sa.Column("obtained", sa.Numeric(7, 2), nullable=False),
        sa.Column("total", sa.Numeric(7, 2), nullable=False),
        sa.Column("percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("letter_grade", sa.String(length=4), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_results_student_year_term", "results", ["student_id", "academic_year", "term"], unique=False)
    op.create_index("ix_results_is_published", "results", ["is_published"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("action", sa.String(length=120), nullable=False),
        sa.Column("entity_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("details_json", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_logs_entity_id", "audit_logs", ["entity_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_audit_logs_entity_id", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_results_is_published", table_name="results")
    op.drop_index("ix_results_student_year_term", table_name="results")
    op.drop_table("results")
    op.drop_index("ix_awards_student_year", table_name="awards")
    op.drop_table("awards")
    op.drop_index("ix_grades_subject_code", table_name="grades")
    op.drop_index("ix_grades_student_year", table_name="grades")
    op.drop_table("grades")
    op.drop_index("ix_postgraduate_applications_status", table_name="postgraduate_applications")
    op.drop_index("ix_postgraduate_applications_student_id", table_name="postgraduate_applications")
    op.drop_table("postgraduate_applications")
    op.drop_index("ix_usp_foundation_overall_eligible", table_name="usp_foundation_assessments")
    op.drop_index("ix_usp_foundation_student_year", table_name="usp_foundation_assessments")
    op.drop_table("usp_foundation_assessments")
    op.drop_index("ix_spfsc_assessments_school_year", table_name="spfsc_assessments")
    op.drop_index("ix_spfsc_assessments_meets_minimum", table_name="spfsc_assessments")
    op.drop_table("spfsc_assessments")
    op.drop_index("ix_scholarship_criteria_level", table_name="scholarship_criteria")
    op.drop_index("ix_scholarship_criteria_is_active", table_name="scholarship_criteria")
    op.drop_table("scholarship_criteria")
    op.drop_table("users")
