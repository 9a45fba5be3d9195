"""
Routes for the resident registry.

Admins list, create, update and delete residents. A resident account may
read its own record through ``GET /residents/<resident_id>``; the
ownership check compares the path parameter with the token's resident
link.
"""

from __future__ import annotations

import logging

from flask import Blueprint, request
from sqlalchemy import or_

from .. import db
from ..errors import NotFoundError
from ..models import Resident
from ..schemas import ResidentSchema
from ..security import admin_required, resident_owner
from ..services import apply_person_fields
from ..validation import trim_fields, validate_resident

logger = logging.getLogger(__name__)

residents_bp = Blueprint("residents", __name__)


def _get_resident(resident_id: str) -> Resident:
    resident = Resident.query.filter_by(resident_id=resident_id).first()
    if not resident:
        raise NotFoundError("Resident not found")
    return resident


@residents_bp.route("/residents", methods=["GET"])
@admin_required
def list_residents() -> tuple[list[dict], int]:
    """List residents, newest registrations first.

    ``?search=`` matches the first or last name, case-insensitively.
    """
    query = Resident.query
    search = (request.args.get("search") or "").strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Resident.first_name.ilike(pattern), Resident.last_name.ilike(pattern)))
    residents = query.order_by(Resident.registration_date.desc()).all()
    return ResidentSchema(many=True).dump(residents), 200


@residents_bp.route("/residents/<resident_id>", methods=["GET"])
@resident_owner("resident_id")
def get_resident(resident_id: str) -> tuple[dict, int]:
    """Return one resident. Residents may only read their own record."""
    return ResidentSchema().dump(_get_resident(resident_id)), 200


@residents_bp.route("/residents", methods=["POST"])
@admin_required
def create_resident() -> tuple[dict, int]:
    """Register a new resident.

    Requires ``resident_id``, ``first_name``, ``last_name``, ``gender``
    (Male, Female or Other), ``birth_date`` and ``address``. Optional:
    ``contact_number``, ``family_head_id`` and ``qr_code``.
    """
    data = trim_fields(request.get_json(silent=True) or {}, ("resident_id", "family_head_id"))
    validate_resident(data).raise_for_violations()
    resident = Resident(resident_id=data["resident_id"])
    apply_person_fields(resident, data, extra_fields=("family_head_id",))
    db.session.add(resident)
    db.session.commit()
    logger.info("Registered resident %s", resident.resident_id)
    return ResidentSchema().dump(resident), 201


@residents_bp.route("/residents/<resident_id>", methods=["PUT"])
@admin_required
def update_resident(resident_id: str) -> tuple[dict, int]:
    """Update any subset of a resident's fields. The ID itself is fixed."""
    resident = _get_resident(resident_id)
    data = request.get_json(silent=True) or {}
    validate_resident(data, partial=True).raise_for_violations()
    apply_person_fields(resident, data, extra_fields=("family_head_id",))
    db.session.commit()
    return ResidentSchema().dump(resident), 200


@residents_bp.route("/residents/<resident_id>", methods=["DELETE"])
@admin_required
def delete_resident(resident_id: str) -> tuple[dict, int]:
    resident = _get_resident(resident_id)
    db.session.delete(resident)
    db.session.commit()
    logger.info("Deleted resident %s", resident_id)
    return {"message": "Resident deleted."}, 200
