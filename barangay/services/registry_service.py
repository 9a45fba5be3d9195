"""Helpers shared by the registry handlers.

Residents and family heads share most of their fields, so copying
request data onto either model happens here. Document request
identifiers are generated here as well.
"""
from __future__ import annotations

import secrets
from datetime import date
from typing import Any, Mapping, Optional

from dateutil.parser import isoparse

from ..util.sanitization import strip_tags

PERSON_TEXT_FIELDS = ("first_name", "last_name", "gender", "address", "contact_number")


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO 8601 string into a ``date``; ``None`` passes through."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return isoparse(str(value)).date()


def apply_person_fields(record, data: Mapping[str, Any], extra_fields: tuple[str, ...] = ()) -> None:
    """Copy the person fields present in ``data`` onto ``record``.

    Text is trimmed and stripped of HTML. Fields missing from ``data``
    are left untouched so the same helper serves create and update.
    """
    for name in PERSON_TEXT_FIELDS + extra_fields:
        if name in data:
            value = data[name]
            setattr(record, name, strip_tags(value) if isinstance(value, str) else value)
    if "birth_date" in data:
        record.birth_date = parse_date(data["birth_date"])
    if "qr_code" in data:
        record.qr_code = data["qr_code"]


def generate_request_id(today: Optional[date] = None) -> str:
    """Return an identifier such as ``REQ-20240601-1A2B3C``."""
    stamp = (today or date.today()).strftime("%Y%m%d")
    return f"REQ-{stamp}-{secrets.token_hex(3).upper()}"
