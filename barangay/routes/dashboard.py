"""Routes for dashboard statistics.

Each endpoint loads the records it needs from the record store and
hands them to the matching function in
``barangay.services.dashboard_service``. Every endpoint requires a
signed-in user; the backup export additionally requires an admin.
"""
from __future__ import annotations

from flask import Blueprint, request

from ..errors import ValidationError
from ..security import current_identity, login_required
from ..services import (
    age_distribution,
    build_backup_export,
    build_dashboard_report,
    gender_distribution,
    monthly_trend,
    recent_registrations,
)
from ..store import get_store

dashboard_bp = Blueprint("dashboard", __name__)

NO_QR = ("qr_code",)


def _int_arg(name: str, default=None):
    value = request.args.get(name)
    if value in (None, ""):
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Invalid '{name}' parameter.", {name: "Must be an integer."}) from None


def _people() -> tuple[list[dict], list[dict]]:
    store = get_store()
    return store.find_all("residents", exclude=NO_QR), store.find_all("family_heads", exclude=NO_QR)


@dashboard_bp.route("/dashboard/stats", methods=["GET"])
@login_required
def stats() -> tuple[dict, int]:
    """Return totals plus every chart series in one response."""
    residents, family_heads = _people()
    return build_dashboard_report(residents, family_heads), 200


@dashboard_bp.route("/dashboard/recent-registrations", methods=["GET"])
@login_required
def recent() -> tuple[list[dict], int]:
    limit = _int_arg("limit", 5)
    residents, family_heads = _people()
    return recent_registrations([*residents, *family_heads], limit=limit), 200


@dashboard_bp.route("/dashboard/gender-distribution", methods=["GET"])
@login_required
def genders() -> tuple[list[dict], int]:
    residents, family_heads = _people()
    return gender_distribution([*residents, *family_heads]), 200


@dashboard_bp.route("/dashboard/age-distribution", methods=["GET"])
@login_required
def ages() -> tuple[list[dict], int]:
    as_of_year = _int_arg("as_of_year")
    residents, family_heads = _people()
    return age_distribution([*residents, *family_heads], as_of_year), 200


@dashboard_bp.route("/dashboard/monthly-trends", methods=["GET"])
@login_required
def monthly() -> tuple[list[dict], int]:
    """Registrations per month; ``?year=`` limits the count to one year."""
    year = _int_arg("year")
    residents, family_heads = _people()
    return monthly_trend([*residents, *family_heads], reference_year=year), 200


@dashboard_bp.route("/dashboard/backup", methods=["GET"])
@login_required
def backup() -> tuple[dict, int]:
    """Export every collection for an admin, without QR payloads or passwords."""
    store = get_store()
    return build_backup_export(current_identity(), store.find_all), 200
