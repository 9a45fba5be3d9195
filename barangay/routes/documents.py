"""
Routes for document requests (clearances, certificates and permits).

Residents file requests for themselves and follow their status; admins
see every request and move it through ``pending``, ``approved``,
``completed`` or ``rejected``. A resident may only read requests filed
under their own resident ID.
"""

from __future__ import annotations

import logging

from flask import Blueprint, request

from .. import db
from ..errors import NotFoundError, ValidationError
from ..models import DocumentRequest, Resident, utcnow
from ..schemas import DocumentRequestSchema
from ..security import (
    admin_required,
    current_identity,
    login_required,
    require_ownership_or_admin,
    resident_owner,
)
from ..services import generate_request_id
from ..util.sanitization import clean_optional, strip_tags
from ..validation import trim_fields, validate_document_request, validate_status_update

logger = logging.getLogger(__name__)

documents_bp = Blueprint("documents", __name__)


def _get_request(request_id: str) -> DocumentRequest:
    document = DocumentRequest.query.filter_by(request_id=request_id).first()
    if not document:
        raise NotFoundError("Document request not found")
    return document


@documents_bp.route("/documents", methods=["GET"])
@admin_required
def list_requests() -> tuple[list[dict], int]:
    """List every request, newest first. ``?status=`` filters by status."""
    query = DocumentRequest.query
    status = request.args.get("status")
    if status:
        query = query.filter_by(status=status)
    documents = query.order_by(DocumentRequest.request_date.desc()).all()
    return DocumentRequestSchema(many=True).dump(documents), 200


@documents_bp.route("/documents/resident/<resident_id>", methods=["GET"])
@resident_owner("resident_id")
def list_resident_requests(resident_id: str) -> tuple[list[dict], int]:
    documents = (
        DocumentRequest.query.filter_by(resident_id=resident_id)
        .order_by(DocumentRequest.request_date.desc())
        .all()
    )
    return DocumentRequestSchema(many=True).dump(documents), 200


@documents_bp.route("/documents/<request_id>", methods=["GET"])
@login_required
def get_request(request_id: str) -> tuple[dict, int]:
    document = _get_request(request_id)
    require_ownership_or_admin(current_identity(), document.resident_id)
    return DocumentRequestSchema().dump(document), 200


@documents_bp.route("/documents", methods=["POST"])
@login_required
def create_request() -> tuple[dict, int]:
    """File a document request.

    Expects ``document_type``, ``purpose``, ``delivery_option`` and
    optional ``additional_details``. Residents always file for their
    own resident ID; admins must pass ``resident_id``.
    """
    identity = current_identity()
    data = trim_fields(request.get_json(silent=True) or {}, ("resident_id",))
    if not identity.is_admin:
        data["resident_id"] = identity.resident_id
    validate_document_request(data).raise_for_violations()

    resident = Resident.query.filter_by(resident_id=data["resident_id"]).first()
    if not resident:
        raise ValidationError("Resident ID not found", {"resident_id": "No resident with this ID."})

    document = DocumentRequest(
        request_id=generate_request_id(),
        resident_id=resident.resident_id,
        resident_name=f"{resident.first_name} {resident.last_name}",
        document_type=data["document_type"],
        purpose=strip_tags(data["purpose"]),
        additional_details=clean_optional(data.get("additional_details")),
        delivery_option=data["delivery_option"],
        status="pending",
    )
    db.session.add(document)
    db.session.commit()
    logger.info("Document request %s filed for %s", document.request_id, resident.resident_id)
    return DocumentRequestSchema().dump(document), 201


@documents_bp.route("/documents/<request_id>/status", methods=["PUT"])
@admin_required
def update_status(request_id: str) -> tuple[dict, int]:
    """Change a request's status.

    Expects ``status`` and optional ``processing_notes``. The acting
    admin and the time of processing are recorded on the request.
    """
    document = _get_request(request_id)
    data = request.get_json(silent=True) or {}
    validate_status_update(data).raise_for_violations()
    document.status = data["status"]
    if "processing_notes" in data:
        document.processing_notes = clean_optional(data["processing_notes"])
    document.processed_by = current_identity().username
    document.processing_date = utcnow()
    db.session.commit()
    logger.info("Document request %s marked %s", request_id, document.status)
    return DocumentRequestSchema().dump(document), 200


@documents_bp.route("/documents/<request_id>", methods=["DELETE"])
@admin_required
def delete_request(request_id: str) -> tuple[dict, int]:
    document = _get_request(request_id)
    db.session.delete(document)
    db.session.commit()
    return {"message": "Document request deleted."}, 200
