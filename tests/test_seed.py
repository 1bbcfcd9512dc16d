import pytest

from seed import DEFAULT_SCHOLARSHIPS_CSV, _parse_json_or_empty, load_scholarships_from_csv, validate_csv_columns


def test_default_catalog_parses() -> None:
    rows = load_scholarships_from_csv(DEFAULT_SCHOLARSHIPS_CSV)

    by_name = {row["scholarship_name"]: row for row in rows}
    assert len(rows) == 6
    toppers = by_name["National Toppers Scholarship"]
    assert toppers["academic_criteria"] == {"minimum_gpa": 3.5, "minimum_percentage": 80.0}
    assert toppers["value"]["coverage"] == ["Full Tuition", "Living Expenses Only"]
    assert by_name["STEM Futures Award"]["academic_criteria"]["required_grades"] == [
        {"subject": "Mathematics", "minimum_grade": "B"}
    ]
    assert by_name["Pacific Access Grant"]["academic_criteria"] == {}
    assert by_name["Secondary Excellence Bursary"]["is_active"] is False


def test_missing_columns_rejected() -> None:
    valid, missing = validate_csv_columns(["scholarship_name", "level"])

    assert valid is False
    assert "academic_criteria" not in missing
    assert "minimum_gpa" in missing
    with pytest.raises(ValueError, match="Missing required columns"):
        load_scholarships_from_csv("scholarship_name,level\nX,Tertiary\n")


def test_json_field_accepts_escaped_and_single_quoted_payloads() -> None:
    assert _parse_json_or_empty('[{\\"subject\\":\\"Maths\\"}]') == [{"subject": "Maths"}]
    assert _parse_json_or_empty("{'minimum_grade': 'B'}") == {"minimum_grade": "B"}
    assert _parse_json_or_empty("") == {}
    with pytest.raises(ValueError):
        _parse_json_or_empty("{not json")
