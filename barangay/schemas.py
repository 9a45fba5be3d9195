"""
Serialization schemas using Marshmallow for the Barangay Records API.

These schemas convert SQLAlchemy models into JSON-friendly mappings.
The record store dumps every record through them, so the rest of the
application (including the dashboard engine) only ever sees plain
dictionaries. Password hashes never leave the store.
"""

from __future__ import annotations

from marshmallow import fields
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from .models import Announcement, DocumentRequest, Event, FamilyHead, Resident, User


class UserSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``User`` objects."""

    role = fields.Function(lambda user: user.role.value)

    class Meta:
        model = User
        load_instance = True
        # Exclude password_hash from the serialised output
        exclude = ("password_hash",)


class ResidentSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = Resident
        load_instance = True


class FamilyHeadSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = FamilyHead
        load_instance = True


class AnnouncementSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = Announcement
        load_instance = True


class EventSchema(SQLAlchemyAutoSchema):
    """Schema for ``Event`` objects; attendees are dumped as-is."""

    attendees = fields.List(fields.Dict())

    class Meta:
        model = Event
        load_instance = True


class DocumentRequestSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = DocumentRequest
        load_instance = True
