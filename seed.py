from __future__ import annotations

import ast
import csv
import json
import os
import uuid
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from auth import hash_password
from models import AuditLog, ScholarshipCriteria, User


REQUIRED_SCHOLARSHIP_COLUMNS = {
    "scholarship_name",
    "provider_name",
    "provider_type",
    "scholarship_type",
    "level",
    "amount",
    "currency",
    "coverage",
    "minimum_gpa",
    "minimum_percentage",
    "required_grades_json",
    "target_fields",
    "description",
    "is_active",
}


def _parse_json_or_empty(value: str) -> Any:
    raw = (value or "").strip()
    if not raw:
        return {}

    # CSV exports sometimes escape quotes (\"k\") or use single quotes.
    for candidate in (
        raw,
        raw.replace('\\"', '"'),
        raw.replace("'", '"'),
    ):
        try:
            parsed = json.loads(candidate)
            return parsed if isinstance(parsed, (dict, list)) else {}
        except json.JSONDecodeError:
            continue

    try:
        parsed = ast.literal_eval(raw)
        return parsed if isinstance(parsed, (dict, list)) else {}
    except (SyntaxError, ValueError):
        raise ValueError(f"Invalid JSON field: {raw}")


def _parse_list(value: str) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split("|") if item.strip()]


def _parse_float(value: str) -> float | None:
    value = (value or "").strip()
    return float(value) if value else None


def _parse_bool(value: str) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "y"}


def validate_csv_columns(columns: list[str]) -> tuple[bool, list[str]]:
    missing = sorted(REQUIRED_SCHOLARSHIP_COLUMNS - set(columns))
    return len(missing) == 0, missing


def load_scholarships_from_csv(csv_text: str) -> list[dict[str, Any]]:
    reader = csv.DictReader(csv_text.splitlines())
    valid, missing = validate_csv_columns(reader.fieldnames or [])
    if not valid:
        raise ValueError(f"Missing required columns: {missing}")

    rows: list[dict[str, Any]] = []
    for row in reader:
        academic_criteria: dict[str, Any] = {}
        minimum_gpa = _parse_float(row["minimum_gpa"])
        if minimum_gpa is not None:
            academic_criteria["minimum_gpa"] = minimum_gpa
        minimum_percentage = _parse_float(row["minimum_percentage"])
        if minimum_percentage is not None:
            academic_criteria["minimum_percentage"] = minimum_percentage
        required_grades = _parse_json_or_empty(row["required_grades_json"])
        if required_grades:
            academic_criteria["required_grades"] = required_grades

        rows.append(
            {
                "scholarship_name": row["scholarship_name"].strip(),
                "provider": {
                    "name": row["provider_name"],
                    "type": row["provider_type"] or "Other",
                    "country": row.get("provider_country") or None,
                },
                "scholarship_type": row["scholarship_type"],
                "level": row["level"],
                "value": {
                    "amount": _parse_float(row["amount"]) or 0.0,
                    "currency": row["currency"] or "FJD",
                    "coverage": _parse_list(row["coverage"]),
                },
                "academic_criteria": academic_criteria,
                "target_fields": _parse_list(row["target_fields"]),
                "description": row["description"] or None,
                "is_active": _parse_bool(row["is_active"]),
            }
        )
    return rows


def preview_diff(db: Session, rows: list[dict[str, Any]]) -> dict[str, int]:
    names = [row["scholarship_name"] for row in rows]
    existing = set(
        db.scalars(select(ScholarshipCriteria.scholarship_name).where(ScholarshipCriteria.scholarship_name.in_(names))).all()
    )
    to_update = sum(1 for name in names if name in existing)
    return {"insert": len(names) - to_update, "update": to_update}


def upsert_scholarships(
    db: Session,
    rows: list[dict[str, Any]],
    actor_user_id: str | None = None,
    source: str = "csv",
) -> dict[str, int]:
    existing_map = {
        s.scholarship_name: s
        for s in db.scalars(
            select(ScholarshipCriteria).where(
                ScholarshipCriteria.scholarship_name.in_([row["scholarship_name"] for row in rows])
            )
        ).all()
    }

    inserted = 0
    updated = 0
    for row in rows:
        existing = existing_map.get(row["scholarship_name"])
        if existing:
            for key, value in row.items():
                setattr(existing, key, value)
            updated += 1
        else:
            db.add(ScholarshipCriteria(**row))
            inserted += 1

    db.add(
        AuditLog(
            user_id=uuid.UUID(actor_user_id) if actor_user_id else None,
            action="scholarships_upsert",
            details_json={
                "source": source,
                "inserted": inserted,
                "updated": updated,
                "scholarship_names": [r["scholarship_name"] for r in rows],
            },
        )
    )
    return {"inserted": inserted, "updated": updated}


def seed_default_users(db: Session) -> None:
    defaults = [
        ("administrator", "EXAMPORTAL_ADMIN_EMAIL", "admin@examportal.local", "EXAMPORTAL_ADMIN_PASSWORD", "Admin123!"),
        ("examiner", "EXAMPORTAL_EXAMINER_EMAIL", "examiner@examportal.local", "EXAMPORTAL_EXAMINER_PASSWORD", "Examiner123!"),
        ("teacher", "EXAMPORTAL_TEACHER_EMAIL", "teacher@examportal.local", "EXAMPORTAL_TEACHER_PASSWORD", "Teacher123!"),
    ]
    for role, email_var, email_default, pass_var, pass_default in defaults:
        email = os.getenv(email_var, email_default).strip().lower()
        if db.scalar(select(User).where(User.email == email)):
            continue
        db.add(User(role=role, email=email, password_hash=hash_password(os.getenv(pass_var, pass_default))))


def seed_scholarships_if_empty(db: Session) -> dict[str, int]:
    total = db.scalar(select(func.count()).select_from(ScholarshipCriteria))
    if total and total > 0:
        return {"inserted": 0, "updated": 0}
    return upsert_scholarships(db, load_scholarships_from_csv(DEFAULT_SCHOLARSHIPS_CSV), source="seed")


def reset_and_seed(db: Session) -> None:
    db.execute(delete(ScholarshipCriteria))
    upsert_scholarships(db, load_scholarships_from_csv(DEFAULT_SCHOLARSHIPS_CSV), source="reset")


DEFAULT_SCHOLARSHIPS_CSV = """scholarship_name,provider_name,provider_type,provider_country,scholarship_type,level,amount,currency,coverage,minimum_gpa,minimum_percentage,required_grades_json,target_fields,description,is_active
National Toppers Scholarship,Tertiary Scholarship and Loans Service,Government,Fiji,Merit-Based,Tertiary,20000,FJD,Full Tuition|Living Expenses Only,3.5,80,,Any,Full award for the strongest SPFSC results,true
National Merit Scholarship,Tertiary Scholarship and Loans Service,Government,Fiji,Merit-Based,Undergraduate,12000,FJD,Full Tuition,3.0,70,,Any,Tuition award for students meeting the SPFSC minimum with strong averages,true
STEM Futures Award,University of the South Pacific,University,Fiji,STEM,Undergraduate,8000,FJD,Partial Tuition,3.0,65,"[{""subject"":""Mathematics"",""minimum_grade"":""B""}]",Engineering|Science|Mathematics,Partial tuition for science and engineering entrants,true
Pacific Access Grant,Pacific Development Trust,NGO,Fiji,Need-Based,All Levels,3000,FJD,Books & Supplies,,,,Any,Support for students who meet the SPFSC minimum,true
Postgraduate Research Scholarship,Ministry of Education,Government,Fiji,Mixed,Postgraduate,25000,FJD,Tuition + Living,3.5,,,Research,Research degree scholarship aligned with national priorities,true
Secondary Excellence Bursary,Ministry of Education,Government,Fiji,Merit-Based,Secondary,1500,FJD,Books & Supplies,,75,,Any,Bursary for secondary school high achievers,false
"""
