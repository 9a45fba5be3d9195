"""Service layer for the Barangay Records API.

Business logic that sits between the Flask route handlers and the
record store. Nothing in this package performs HTTP handling: services
return plain Python data structures and raise exceptions from
``barangay.errors`` when something goes wrong.
"""

from .dashboard_service import (
    age_distribution,
    build_backup_export,
    build_dashboard_report,
    gender_distribution,
    monthly_trend,
    recent_registrations,
)
from .registry_service import apply_person_fields, generate_request_id, parse_date

__all__ = [
    "age_distribution",
    "build_backup_export",
    "build_dashboard_report",
    "gender_distribution",
    "monthly_trend",
    "recent_registrations",
    "apply_person_fields",
    "generate_request_id",
    "parse_date",
]
