from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from models.records import ViolationKind
from services.errors import RecordValidationError
from services.validation import RECORD_FIELDS, validate


def _candidate(**overrides) -> dict:
    candidate = {
        "soil_moisture": 42,
        "light_level": 10,
        "relative_humidity": 55,
        "temperature": 21,
        "date": "2024-01-01",
        "organization_id": "org-1",
    }
    candidate.update(overrides)
    return candidate


def _kinds(exc: RecordValidationError) -> dict:
    return {violation.field: violation.kind for violation in exc.violations}


def test_valid_candidate_is_cleaned() -> None:
    record = validate(_candidate())

    assert record.soil_moisture == 42
    assert record.light_level == 10
    assert record.relative_humidity == 55
    assert record.temperature == 21
    assert record.date == date(2024, 1, 1)
    assert record.organization_id == "org-1"


@pytest.mark.parametrize("field", RECORD_FIELDS)
def test_missing_field_is_reported(field: str) -> None:
    candidate = _candidate()
    del candidate[field]

    with pytest.raises(RecordValidationError) as excinfo:
        validate(candidate)

    assert excinfo.value.fields == [field]
    assert _kinds(excinfo.value)[field] is ViolationKind.missing


@pytest.mark.parametrize("value", [None, "", "   "])
def test_null_and_blank_values_count_as_missing(value) -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        validate(_candidate(temperature=value, organization_id=value))

    assert _kinds(excinfo.value) == {
        "temperature": ViolationKind.missing,
        "organization_id": ViolationKind.missing,
    }


@pytest.mark.parametrize("value", [1.5, "1.5", "abc", True, [1]])
def test_non_integer_numeric_field_is_rejected(value) -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        validate(_candidate(soil_moisture=value))

    assert _kinds(excinfo.value) == {"soil_moisture": ViolationKind.wrong_type}


def test_integral_float_and_numeric_strings_are_accepted() -> None:
    record = validate(_candidate(soil_moisture=42.0, light_level=" 7 ", temperature="-3"))

    assert record.soil_moisture == 42
    assert record.light_level == 7
    assert record.temperature == -3


def test_every_field_is_checked() -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        validate({"soil_moisture": 1.5, "date": "01/02/2024"})

    kinds = _kinds(excinfo.value)
    assert kinds == {
        "soil_moisture": ViolationKind.wrong_type,
        "light_level": ViolationKind.missing,
        "relative_humidity": ViolationKind.missing,
        "temperature": ViolationKind.missing,
        "date": ViolationKind.wrong_format,
        "organization_id": ViolationKind.missing,
    }
    assert "soil_moisture" in str(excinfo.value)


@pytest.mark.parametrize(
    "value",
    [
        date(2024, 3, 5),
        datetime(2024, 3, 5, 13, 30, tzinfo=timezone.utc),
        "2024-03-05",
        "2024-03-05T13:30:00Z",
    ],
)
def test_date_accepts_dates_and_iso_strings(value) -> None:
    assert validate(_candidate(date=value)).date == date(2024, 3, 5)


def test_date_of_wrong_type_is_rejected() -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        validate(_candidate(date=20240101))

    assert _kinds(excinfo.value) == {"date": ViolationKind.wrong_type}


def test_organization_id_must_be_a_string() -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        validate(_candidate(organization_id=12))

    assert _kinds(excinfo.value) == {"organization_id": ViolationKind.wrong_type}


def test_server_assigned_fields_are_ignored() -> None:
    record = validate(
        _candidate(id="client-id", created_at="yesterday", updated_at="tomorrow")
    )

    assert not hasattr(record, "id")
    assert "created_at" not in record.as_fields()


@pytest.mark.parametrize("value", ["1_000", "١٢", "+", "0x10"])
def test_integer_strings_must_be_plain_ascii_digits(value: str) -> None:
    with pytest.raises(RecordValidationError) as excinfo:
        validate(_candidate(temperature=value))

    assert _kinds(excinfo.value) == {"temperature": ViolationKind.wrong_type}
