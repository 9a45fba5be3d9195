"""Tests for the explicit validation predicates."""
import pytest

from barangay.errors import ConflictError, ValidationError
from barangay.models import Resident
from barangay.validation import (
    ValidationResult,
    check_choice,
    check_date,
    check_min_length,
    check_required,
    check_string,
    check_unique,
    trim_fields,
    validate_announcement,
    validate_document_request,
    validate_event,
    validate_registration,
    validate_resident,
)


def test_empty_result_is_valid():
    result = ValidationResult()
    assert result.valid
    result.raise_for_violations()


def test_required_treats_blank_strings_as_missing():
    result = ValidationResult()
    check_required(result, {"name": "  ", "title": "ok"}, ["name", "title", "body"])
    assert not result.valid
    assert set(result.to_fields()) == {"name", "body"}


def test_choice_skips_missing_values():
    result = ValidationResult()
    check_choice(result, {}, "gender", ("Male", "Female"))
    check_choice(result, {"status": "lost"}, "status", ("pending", "approved"))
    assert list(result.to_fields()) == ["status"]


def test_min_length_and_date():
    result = ValidationResult()
    check_min_length(result, {"password": "12345"}, "password", 6)
    check_date(result, {"birth_date": "1990-13-40"}, "birth_date")
    check_date(result, {"event_date": "2024-07-20"}, "event_date")
    assert set(result.to_fields()) == {"password", "birth_date"}


def test_validation_error_carries_fields():
    result = validate_registration({"username": "maria", "password": "123"})
    with pytest.raises(ValidationError) as excinfo:
        result.raise_for_violations()
    assert set(excinfo.value.fields) == {"password", "name", "resident_id"}


def test_unique_conflict_raises_conflict(app, make_resident):
    make_resident("RES-0001")
    result = ValidationResult()
    check_unique(result, Resident, "resident_id", "RES-0001")
    with pytest.raises(ConflictError):
        result.raise_for_violations()


def test_unique_ignores_the_record_itself(app, make_resident):
    resident = make_resident("RES-0001")
    result = ValidationResult()
    check_unique(result, Resident, "resident_id", "RES-0001", exclude_id=resident.id)
    assert result.valid


def test_resident_partial_update_allows_omitted_fields(app):
    assert validate_resident({"address": "Purok 2"}, partial=True).valid
    assert not validate_resident({"gender": "Unknown"}, partial=True).valid


def test_document_request_choices():
    result = validate_document_request({
        "resident_id": "RES-0001",
        "document_type": "indigency",
        "purpose": "Scholarship",
        "delivery_option": "email",
    })
    assert result.valid


def test_string_check_flags_other_types_only():
    result = ValidationResult()
    data = {"username": 123, "name": "Maria", "notes": None, "tags": ["a"]}
    check_string(result, data, ["username", "name", "notes", "tags", "absent"])
    assert set(result.to_fields()) == {"username", "tags"}


def test_trim_fields_copies_and_strips_strings():
    data = {"resident_id": "  RES-0001 ", "head_id": 7, "name": " Maria "}
    trimmed = trim_fields(data, ["resident_id", "head_id", "missing"])
    assert trimmed == {"resident_id": "RES-0001", "head_id": 7, "name": " Maria "}
    assert data["resident_id"] == "  RES-0001 "


@pytest.mark.parametrize("validate", [validate_announcement, validate_event])
def test_partial_updates_cannot_blank_required_fields(validate):
    assert validate({}, partial=True).valid
    result = validate({"title": None}, partial=True)
    assert list(result.to_fields()) == ["title"]
    assert not validate({"category": ""}, partial=True).valid


def test_partial_event_rejects_blank_date():
    assert not validate_event({"event_date": ""}, partial=True).valid
    assert validate_event({"event_date": "2024-08-01"}, partial=True).valid
