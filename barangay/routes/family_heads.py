"""
Routes for the family-head registry.

Any signed-in user may browse household heads; only admins may change
them. ``/family-heads/<head_id>/members`` lists the residents linked to
a household through ``family_head_id``.
"""

from __future__ import annotations

import logging

from flask import Blueprint, request

from .. import db
from ..errors import NotFoundError
from ..models import FamilyHead, Resident
from ..schemas import FamilyHeadSchema, ResidentSchema
from ..security import admin_required, login_required
from ..services import apply_person_fields
from ..validation import trim_fields, validate_family_head

logger = logging.getLogger(__name__)

family_heads_bp = Blueprint("family_heads", __name__)


def _get_head(head_id: str) -> FamilyHead:
    head = FamilyHead.query.filter_by(head_id=head_id).first()
    if not head:
        raise NotFoundError("Family head not found")
    return head


@family_heads_bp.route("/family-heads", methods=["GET"])
@login_required
def list_family_heads() -> tuple[list[dict], int]:
    heads = FamilyHead.query.order_by(FamilyHead.last_name.asc(), FamilyHead.first_name.asc()).all()
    return FamilyHeadSchema(many=True).dump(heads), 200


@family_heads_bp.route("/family-heads/<head_id>", methods=["GET"])
@login_required
def get_family_head(head_id: str) -> tuple[dict, int]:
    return FamilyHeadSchema().dump(_get_head(head_id)), 200


@family_heads_bp.route("/family-heads/<head_id>/members", methods=["GET"])
@admin_required
def list_members(head_id: str) -> tuple[list[dict], int]:
    """List the residents belonging to a household."""
    _get_head(head_id)
    members = (
        Resident.query.filter_by(family_head_id=head_id)
        .order_by(Resident.last_name.asc(), Resident.first_name.asc())
        .all()
    )
    return ResidentSchema(many=True).dump(members), 200


@family_heads_bp.route("/family-heads", methods=["POST"])
@admin_required
def create_family_head() -> tuple[dict, int]:
    """Register a household head.

    Requires ``head_id``, ``first_name``, ``last_name``, ``gender``,
    ``birth_date`` and ``address``.
    """
    data = trim_fields(request.get_json(silent=True) or {}, ("head_id",))
    validate_family_head(data).raise_for_violations()
    head = FamilyHead(head_id=data["head_id"])
    apply_person_fields(head, data)
    db.session.add(head)
    db.session.commit()
    logger.info("Registered family head %s", head.head_id)
    return FamilyHeadSchema().dump(head), 201


@family_heads_bp.route("/family-heads/<head_id>", methods=["PUT"])
@admin_required
def update_family_head(head_id: str) -> tuple[dict, int]:
    head = _get_head(head_id)
    data = request.get_json(silent=True) or {}
    validate_family_head(data, partial=True).raise_for_violations()
    apply_person_fields(head, data)
    db.session.commit()
    return FamilyHeadSchema().dump(head), 200


@family_heads_bp.route("/family-heads/<head_id>", methods=["DELETE"])
@admin_required
def delete_family_head(head_id: str) -> tuple[dict, int]:
    """Delete a household head. Linked residents keep their records."""
    head = _get_head(head_id)
    db.session.delete(head)
    db.session.commit()
    logger.info("Deleted family head %s", head_id)
    return {"message": "Family head deleted."}, 200
