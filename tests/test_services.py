import re
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError

from auth import hash_password, require_role, verify_password
from models import User
from services import (
    DuplicateAssessmentError,
    RecordNotFound,
    SPFSC_UNIQUE_CONSTRAINT,
    SubmissionRejected,
    _flush_unique,
    format_certificate_number,
    generate_verification_code,
)


def test_certificate_number_is_zero_padded() -> None:
    assert format_certificate_number(2026, 42) == "VU-CERT-2026-000042"
    assert format_certificate_number(2026, 1234567) == "VU-CERT-2026-1234567"


def test_verification_code_is_32_upper_hex_characters() -> None:
    code = generate_verification_code()

    assert re.fullmatch(r"[0-9A-F]{32}", code)
    assert code != generate_verification_code()


def test_service_errors_subclass_builtin_categories() -> None:
    rejected = SubmissionRejected("Application is incomplete", ["Academic transcript required"])

    assert isinstance(rejected, ValueError)
    assert rejected.issues == ["Academic transcript required"]
    assert str(rejected) == "Application is incomplete"
    assert issubclass(DuplicateAssessmentError, ValueError)
    assert issubclass(RecordNotFound, LookupError)


def test_require_role_gates_staff_actions() -> None:
    examiner = User(role="examiner", email="examiner@examportal.local")

    assert require_role(examiner) is examiner
    assert require_role(examiner, "examiner", "administrator") is examiner
    with pytest.raises(PermissionError):
        require_role(examiner, "administrator")
    with pytest.raises(PermissionError):
        require_role(User(role="student"))
    with pytest.raises(PermissionError):
        require_role(None)


def test_password_hash_round_trip() -> None:
    hashed = hash_password("Examiner123!")

    assert verify_password("Examiner123!", hashed)
    assert not verify_password("wrong", hashed)


class FailingFlushSession:
    def __init__(self, constraint_name):
        self.error = IntegrityError(
            "INSERT INTO spfsc_assessments ...",
            {},
            SimpleNamespace(diag=SimpleNamespace(constraint_name=constraint_name)),
        )

    def flush(self) -> None:
        raise self.error


def test_duplicate_student_year_becomes_duplicate_error() -> None:
    db = FailingFlushSession(SPFSC_UNIQUE_CONSTRAINT)

    with pytest.raises(DuplicateAssessmentError, match="already exists"):
        _flush_unique(db, SPFSC_UNIQUE_CONSTRAINT, "SPFSC assessment already exists")


def test_other_integrity_errors_propagate_unchanged() -> None:
    db = FailingFlushSession("spfsc_assessments_student_id_fkey")

    with pytest.raises(IntegrityError) as excinfo:
        _flush_unique(db, SPFSC_UNIQUE_CONSTRAINT, "SPFSC assessment already exists")

    assert excinfo.value is db.error
    assert not isinstance(excinfo.value, DuplicateAssessmentError)
