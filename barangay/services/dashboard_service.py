"""Dashboard statistics and backup export.

These functions turn snapshots of resident and family-head records into
the chart data shown on the dashboard. They perform no I/O: route
handlers fetch the records from the store and pass them in, which keeps
every calculation easy to unit test.

Records are plain mappings as dumped by the marshmallow schemas. Date
fields may be ``date``/``datetime`` objects or ISO-8601 strings. A
record with a missing or unparseable field is left out of the buckets
that need that field and still counted everywhere else.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from dateutil.parser import isoparse

from ..models import Role
from ..security import require_role

logger = logging.getLogger(__name__)

GENDER_COLORS = {"Male": "#0088FE", "Female": "#FF8042"}
DEFAULT_GENDER_COLOR = "#FFBB28"
UNKNOWN_GENDER = "Unknown"

# (label, inclusive upper bound); the last range is open-ended
AGE_RANGES: Sequence[tuple[str, Optional[int]]] = (
    ("0-10", 10),
    ("11-20", 20),
    ("21-30", 30),
    ("31-40", 40),
    ("41-50", 50),
    ("51-60", 60),
    ("61+", None),
)

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

RECENT_LIMIT = 5

BACKUP_COLLECTIONS = (
    "residents",
    "family_heads",
    "announcements",
    "events",
    "document_requests",
    "users",
)
STRIPPED_FIELDS = ("qr_code",)
STRIPPED_USER_FIELDS = ("password_hash", "password")


def _as_datetime(value: Any) -> Optional[datetime]:
    """Return ``value`` as a naive datetime, or ``None`` when unusable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        try:
            parsed = isoparse(str(value))
        except (ValueError, OverflowError):
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _person_kind(person: Mapping[str, Any]) -> str:
    return person.get("type") or ("Resident" if person.get("resident_id") else "Family Head")


def gender_distribution(people: Iterable[Mapping[str, Any]]) -> list[dict]:
    """Count people per gender, in the order each gender is first seen.

    Missing or empty genders are grouped under ``"Unknown"``. An empty
    population produces an empty list.
    """
    counts: OrderedDict[str, int] = OrderedDict()
    for person in people:
        label = person.get("gender") or UNKNOWN_GENDER
        counts[label] = counts.get(label, 0) + 1
    return [
        {"name": label, "value": count, "color": GENDER_COLORS.get(label, DEFAULT_GENDER_COLOR)}
        for label, count in counts.items()
    ]


def _age_bucket(age: int) -> str:
    for label, upper in AGE_RANGES:
        if upper is None or age <= upper:
            return label
    return AGE_RANGES[-1][0]


def age_distribution(people: Iterable[Mapping[str, Any]], as_of_year: Optional[int] = None) -> list[dict]:
    """Count people per fixed age range.

    Age is ``as_of_year`` minus the birth year, without adjusting for
    the month or day. People without a usable birth date are skipped.

    Parameters
    ----------
    people: Iterable[Mapping]
        Resident and family-head records.
    as_of_year: int, optional
        Year the ages are computed against. Defaults to the current year.

    Returns
    -------
    list[dict]
        Seven ``{"name", "count"}`` entries from ``0-10`` to ``61+``.
    """
    year = as_of_year if as_of_year is not None else date.today().year
    counts = OrderedDict((label, 0) for label, _ in AGE_RANGES)
    for person in people:
        born = _as_datetime(person.get("birth_date"))
        if born is None:
            continue
        counts[_age_bucket(year - born.year)] += 1
    return [{"name": label, "count": count} for label, count in counts.items()]


def monthly_trend(people: Iterable[Mapping[str, Any]], reference_year: Optional[int] = None) -> list[dict]:
    """Count registrations per calendar month.

    Without ``reference_year`` every registration counts toward its
    month regardless of year, so January 2023 and January 2024 land in
    the same bucket. Passing a year restricts the count to that year.
    """
    counts = OrderedDict((month, 0) for month in MONTHS)
    for person in people:
        registered = _as_datetime(person.get("registration_date"))
        if registered is None:
            continue
        if reference_year is not None and registered.year != reference_year:
            continue
        counts[MONTHS[registered.month - 1]] += 1
    return [{"name": month, "new_residents": count} for month, count in counts.items()]


def recent_registrations(people: Iterable[Mapping[str, Any]], limit: int = RECENT_LIMIT) -> list[dict]:
    """Return the latest ``limit`` registrations, newest first.

    Ties keep their input order. Records without a registration date
    are skipped.
    """
    dated = []
    for person in people:
        registered = _as_datetime(person.get("registration_date"))
        if registered is None:
            continue
        dated.append((registered, person))
    # sorted() is stable even with reverse=True
    dated = sorted(dated, key=lambda item: item[0], reverse=True)[: max(limit, 0)]
    return [
        {
            "id": person.get("resident_id") or person.get("head_id"),
            "name": f"{person.get('first_name', '')} {person.get('last_name', '')}".strip(),
            "type": _person_kind(person),
            "date": registered.isoformat(),
        }
        for registered, person in dated
    ]


def build_dashboard_report(
    residents: Sequence[Mapping[str, Any]],
    family_heads: Sequence[Mapping[str, Any]],
    as_of_year: Optional[int] = None,
) -> dict:
    """Compose every dashboard statistic over residents and family heads."""
    people = [*residents, *family_heads]
    return {
        "total_residents": len(residents),
        "total_family_heads": len(family_heads),
        "gender_data": gender_distribution(people),
        "age_data": age_distribution(people, as_of_year),
        "monthly_registrations": monthly_trend(people),
        "recent_registrations": recent_registrations(people),
    }


def _strip(record: Mapping[str, Any], fields: Sequence[str]) -> dict:
    return {key: value for key, value in record.items() if key not in fields}


def build_backup_export(
    identity,
    fetch: Callable[[str], list],
    timestamp: Optional[datetime] = None,
) -> dict:
    """Export every collection for an admin.

    ``fetch`` is called once per collection name and only after the role
    check passes, so a refused request reads nothing. QR payloads are
    removed from every record and password fields from user records.

    Raises
    ------
    Forbidden
        If ``identity`` is not an admin.
    """
    require_role(identity, Role.ADMIN)

    data = {}
    for collection in BACKUP_COLLECTIONS:
        stripped = STRIPPED_FIELDS + STRIPPED_USER_FIELDS if collection == "users" else STRIPPED_FIELDS
        data[collection] = [_strip(record, stripped) for record in fetch(collection)]

    stamp = timestamp or datetime.now(timezone.utc)
    logger.info(
        "Backup exported by %s (%s)",
        identity.username,
        ", ".join(f"{name}={len(rows)}" for name, rows in data.items()),
    )
    return {"timestamp": stamp.isoformat(), "data": data}
