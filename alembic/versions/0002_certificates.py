"""certificates and sequence counters

Revision ID: 0002_certificates
Revises: 0001_initial
Create Date: 2026-10-18 00:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0002_certificates"
down_revision: Union[str, Sequence[str], None] = "0001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sequence_counters",
        sa.Column("name", sa.String(length=80), nullable=False),
        sa.Column("value", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("name"),
    )

    op.create_table(
        "certificates",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("certificate_type", sa.String(length=30), nullable=False),
        sa.Column("certificate_number", sa.String(length=40), nullable=False),
        sa.Column("verification_code", sa.String(length=40), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("academic_year", sa.String(length=20), nullable=False),
        sa.Column("gpa", sa.Numeric(4, 2), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("issued_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint(
            "certificate_type in ('completion', 'achievement', 'merit', 'distinction', 'participation', 'transcript')",
            name="ck_certificates_type",
        ),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("certificate_number"),
        sa.UniqueConstraint("verification_code"),
    )
    op.create_index("ix_certificates_student_year", "certificates", ["student_id", "academic_year"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_certificates_student_year", table_name="certificates")
    op.drop_table("certificates")
    op.drop_table("sequence_counters")
