"""Explicit input validation.

Each ``check_*`` predicate appends violations to a ``ValidationResult``
instead of raising, so one pass reports every problem with a payload.
The ``validate_*`` functions compose the predicates for each kind of
record; handlers finish with ``result.raise_for_violations()``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from dateutil.parser import isoparse

from .db import db
from .errors import ConflictError, ValidationError
from .models import (
    ANNOUNCEMENT_TYPES,
    DELIVERY_OPTIONS,
    DOCUMENT_STATUSES,
    DOCUMENT_TYPES,
    GENDERS,
    FamilyHead,
    Resident,
)


@dataclass(frozen=True)
class Violation:
    field: str
    message: str
    conflict: bool = False


@dataclass
class ValidationResult:
    violations: list[Violation] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations

    def add(self, field_name: str, message: str, conflict: bool = False) -> None:
        self.violations.append(Violation(field_name, message, conflict))

    def to_fields(self) -> dict[str, str]:
        fields: dict[str, str] = {}
        for violation in self.violations:
            fields.setdefault(violation.field, violation.message)
        return fields

    def raise_for_violations(self) -> None:
        """Raise ``ConflictError`` for uniqueness clashes, else ``ValidationError``."""
        if self.valid:
            return
        conflicts = [v for v in self.violations if v.conflict]
        if conflicts and len(conflicts) == len(self.violations):
            raise ConflictError(conflicts[0].message)
        raise ValidationError("Invalid input.", self.to_fields())


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def trim_fields(data: Mapping[str, Any], fields: Iterable[str]) -> dict:
    """Return a copy of ``data`` with the string values of ``fields`` stripped."""
    trimmed = dict(data)
    for name in fields:
        if isinstance(trimmed.get(name), str):
            trimmed[name] = trimmed[name].strip()
    return trimmed


def check_string(result: ValidationResult, data: Mapping[str, Any], fields: Iterable[str]) -> None:
    """Flag fields that are present but hold something other than text."""
    for name in fields:
        value = data.get(name)
        if value is not None and not isinstance(value, str):
            result.add(name, f"{name} must be a string.")


def check_required(result: ValidationResult, data: Mapping[str, Any], fields: Iterable[str]) -> None:
    for name in fields:
        if _blank(data.get(name)):
            result.add(name, f"{name} is required.")


def check_choice(result: ValidationResult, data: Mapping[str, Any], name: str, choices: Iterable[str]) -> None:
    value = data.get(name)
    if _blank(value):
        return
    choices = tuple(choices)
    if value not in choices:
        result.add(name, f"{name} must be one of: {', '.join(choices)}.")


def check_min_length(result: ValidationResult, data: Mapping[str, Any], name: str, minimum: int) -> None:
    value = data.get(name)
    if value is None:
        return
    if len(str(value)) < minimum:
        result.add(name, f"{name} must be at least {minimum} characters long.")


def check_date(result: ValidationResult, data: Mapping[str, Any], name: str) -> None:
    value = data.get(name)
    if _blank(value):
        return
    try:
        isoparse(str(value))
    except ValueError:
        result.add(name, f"{name} must be an ISO 8601 date (YYYY-MM-DD).")


def check_unique(
    result: ValidationResult,
    model,
    column: str,
    value: Any,
    exclude_id: Optional[int] = None,
) -> None:
    """Flag ``value`` if another ``model`` row already uses it in ``column``."""
    if _blank(value):
        return
    query = db.session.query(model).filter(getattr(model, column) == value)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    if query.first() is not None:
        result.add(column, f"{column} {value!r} already exists.", conflict=True)


PERSON_FIELDS = ("first_name", "last_name", "gender", "birth_date", "address")
PERSON_OPTIONAL_FIELDS = ("contact_number", "qr_code")
ANNOUNCEMENT_FIELDS = ("title", "category", "type", "content")
EVENT_FIELDS = ("title", "description", "category", "event_date", "time", "location")


def _required(data: Mapping[str, Any], fields: Iterable[str], partial: bool) -> list[str]:
    # updates may omit fields but must not blank them out
    return [name for name in fields if name in data] if partial else list(fields)


def _validate_person(data: Mapping[str, Any], partial: bool, text_fields: Iterable[str]) -> ValidationResult:
    result = ValidationResult()
    check_string(result, data, PERSON_FIELDS + PERSON_OPTIONAL_FIELDS + tuple(text_fields))
    check_required(result, data, _required(data, PERSON_FIELDS, partial))
    check_choice(result, data, "gender", GENDERS)
    check_date(result, data, "birth_date")
    return result


def validate_resident(data: Mapping[str, Any], partial: bool = False) -> ValidationResult:
    """Validate resident fields; pass ``data`` through ``trim_fields`` first."""
    result = _validate_person(data, partial, ("resident_id", "family_head_id"))
    if not partial:
        check_required(result, data, ["resident_id"])
        if result.valid:
            check_unique(result, Resident, "resident_id", data.get("resident_id"))
    return result


def validate_family_head(data: Mapping[str, Any], partial: bool = False) -> ValidationResult:
    result = _validate_person(data, partial, ("head_id",))
    if not partial:
        check_required(result, data, ["head_id"])
        if result.valid:
            check_unique(result, FamilyHead, "head_id", data.get("head_id"))
    return result


def validate_announcement(data: Mapping[str, Any], partial: bool = False) -> ValidationResult:
    result = ValidationResult()
    check_string(result, data, ANNOUNCEMENT_FIELDS)
    check_required(result, data, _required(data, ANNOUNCEMENT_FIELDS, partial))
    check_choice(result, data, "type", ANNOUNCEMENT_TYPES)
    return result


def validate_event(data: Mapping[str, Any], partial: bool = False) -> ValidationResult:
    result = ValidationResult()
    check_string(result, data, EVENT_FIELDS + ("qr_code",))
    check_required(result, data, _required(data, EVENT_FIELDS, partial))
    check_date(result, data, "event_date")
    return result


def validate_attendee(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    check_string(result, data, ["name", "contact_number"])
    check_required(result, data, ["id", "name"])
    return result


def validate_document_request(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    check_string(result, data, ["resident_id", "document_type", "purpose", "delivery_option", "additional_details"])
    check_required(result, data, ["resident_id", "document_type", "purpose", "delivery_option"])
    check_choice(result, data, "document_type", DOCUMENT_TYPES)
    check_choice(result, data, "delivery_option", DELIVERY_OPTIONS)
    return result


def validate_status_update(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    check_string(result, data, ["status", "processing_notes"])
    check_required(result, data, ["status"])
    check_choice(result, data, "status", DOCUMENT_STATUSES)
    return result


def validate_login(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    check_string(result, data, ["username", "password"])
    check_required(result, data, ["username", "password"])
    return result


def validate_registration(data: Mapping[str, Any]) -> ValidationResult:
    fields = ["username", "password", "name", "resident_id"]
    result = ValidationResult()
    check_string(result, data, fields)
    check_required(result, data, fields)
    check_min_length(result, data, "password", 6)
    return result


def validate_password_change(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    check_string(result, data, ["current_password", "new_password"])
    check_required(result, data, ["current_password", "new_password"])
    check_min_length(result, data, "new_password", 6)
    return result
