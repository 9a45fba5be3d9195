"""
Routes for barangay announcements.

Every signed-in user can read announcements, newest first. Only admins
may publish, edit or remove them. Titles and bodies are stripped of
HTML before they are stored.
"""

from __future__ import annotations

import logging

from flask import Blueprint, request

from .. import db
from ..errors import NotFoundError
from ..models import Announcement
from ..schemas import AnnouncementSchema
from ..security import admin_required, login_required
from ..util.sanitization import strip_tags
from ..validation import validate_announcement

logger = logging.getLogger(__name__)

announcements_bp = Blueprint("announcements", __name__)

EDITABLE_FIELDS = ("title", "category", "type", "content")


def _get_announcement(announcement_id: int) -> Announcement:
    announcement = db.session.get(Announcement, announcement_id)
    if not announcement:
        raise NotFoundError("Announcement not found")
    return announcement


def _apply(announcement: Announcement, data: dict) -> None:
    for name in EDITABLE_FIELDS:
        if name in data:
            setattr(announcement, name, strip_tags(data[name]))


@announcements_bp.route("/announcements", methods=["GET"])
@login_required
def list_announcements() -> tuple[list[dict], int]:
    """List announcements, newest first. ``?type=`` filters by type."""
    query = Announcement.query
    kind = request.args.get("type")
    if kind:
        query = query.filter_by(type=kind)
    announcements = query.order_by(Announcement.date.desc()).all()
    return AnnouncementSchema(many=True).dump(announcements), 200


@announcements_bp.route("/announcements", methods=["POST"])
@admin_required
def create_announcement() -> tuple[dict, int]:
    """Publish an announcement.

    Requires ``title``, ``category``, ``type`` (important, warning or
    info) and ``content``.
    """
    data = request.get_json(silent=True) or {}
    validate_announcement(data).raise_for_violations()
    announcement = Announcement()
    _apply(announcement, data)
    db.session.add(announcement)
    db.session.commit()
    logger.info("Published announcement %d", announcement.id)
    return AnnouncementSchema().dump(announcement), 201


@announcements_bp.route("/announcements/<int:announcement_id>", methods=["PUT"])
@admin_required
def update_announcement(announcement_id: int) -> tuple[dict, int]:
    announcement = _get_announcement(announcement_id)
    data = request.get_json(silent=True) or {}
    validate_announcement(data, partial=True).raise_for_violations()
    _apply(announcement, data)
    db.session.commit()
    return AnnouncementSchema().dump(announcement), 200


@announcements_bp.route("/announcements/<int:announcement_id>", methods=["DELETE"])
@admin_required
def delete_announcement(announcement_id: int) -> tuple[dict, int]:
    announcement = _get_announcement(announcement_id)
    db.session.delete(announcement)
    db.session.commit()
    return {"message": "Announcement deleted."}, 200
