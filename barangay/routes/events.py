"""
Routes for community events and their attendee lists.

Admins manage events. Any signed-in user may browse them, and residents
may sign themselves up through ``POST /events/<event_id>/attendees``.
An admin may register any attendee, for example after scanning a
resident's QR payload at the door.
"""

from __future__ import annotations

import logging

from flask import Blueprint, request

from .. import db
from ..errors import ConflictError, NotFoundError
from ..models import Event
from ..schemas import EventSchema
from ..security import admin_required, current_identity, login_required, require_ownership_or_admin
from ..services import parse_date
from ..util.sanitization import clean_optional, strip_tags
from ..validation import validate_attendee, validate_event

logger = logging.getLogger(__name__)

events_bp = Blueprint("events", __name__)

TEXT_FIELDS = ("title", "description", "category", "time", "location")


def _get_event(event_id: int) -> Event:
    event = db.session.get(Event, event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event


def _apply(event: Event, data: dict) -> None:
    for name in TEXT_FIELDS:
        if name in data:
            setattr(event, name, strip_tags(data[name]))
    if "event_date" in data:
        event.event_date = parse_date(data["event_date"])
    if "qr_code" in data:
        event.qr_code = data["qr_code"]


@events_bp.route("/events", methods=["GET"])
@login_required
def list_events() -> tuple[list[dict], int]:
    """List events by date, soonest first."""
    events = Event.query.order_by(Event.event_date.asc(), Event.id.asc()).all()
    return EventSchema(many=True).dump(events), 200


@events_bp.route("/events/<int:event_id>", methods=["GET"])
@login_required
def get_event(event_id: int) -> tuple[dict, int]:
    return EventSchema().dump(_get_event(event_id)), 200


@events_bp.route("/events", methods=["POST"])
@admin_required
def create_event() -> tuple[dict, int]:
    """Create an event.

    Requires ``title``, ``description``, ``category``, ``event_date``,
    ``time`` and ``location``.
    """
    data = request.get_json(silent=True) or {}
    validate_event(data).raise_for_violations()
    event = Event(attendees=[])
    _apply(event, data)
    db.session.add(event)
    db.session.commit()
    logger.info("Created event %d", event.id)
    return EventSchema().dump(event), 201


@events_bp.route("/events/<int:event_id>", methods=["PUT"])
@admin_required
def update_event(event_id: int) -> tuple[dict, int]:
    event = _get_event(event_id)
    data = request.get_json(silent=True) or {}
    validate_event(data, partial=True).raise_for_violations()
    _apply(event, data)
    db.session.commit()
    return EventSchema().dump(event), 200


@events_bp.route("/events/<int:event_id>", methods=["DELETE"])
@admin_required
def delete_event(event_id: int) -> tuple[dict, int]:
    event = _get_event(event_id)
    db.session.delete(event)
    db.session.commit()
    return {"message": "Event deleted."}, 200


@events_bp.route("/events/<int:event_id>/attendees", methods=["POST"])
@login_required
def register_attendee(event_id: int) -> tuple[dict, int]:
    """Add an attendee to an event.

    Expects ``id`` (a resident or family-head ID), ``name`` and an
    optional ``contact_number``. Residents may only register themselves.
    Registering the same ID twice returns 409.
    """
    event = _get_event(event_id)
    data = request.get_json(silent=True) or {}
    validate_attendee(data).raise_for_violations()

    attendee_id = str(data["id"]).strip()
    require_ownership_or_admin(current_identity(), attendee_id)
    if any(attendee.get("id") == attendee_id for attendee in event.attendees or []):
        raise ConflictError("Attendee is already registered for this event.")

    attendee = {
        "id": attendee_id,
        "name": strip_tags(data["name"]),
        "contact_number": clean_optional(data.get("contact_number")),
    }
    # reassign so SQLAlchemy notices the change to the JSON column
    event.attendees = [*(event.attendees or []), attendee]
    db.session.commit()
    logger.info("Registered %s for event %d", attendee_id, event_id)
    return EventSchema().dump(event), 201
