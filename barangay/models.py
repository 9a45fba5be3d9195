"""
Database models for the Barangay Records API.

Six collections back the application: user accounts, the resident and
family-head registries, announcements, events and document requests.
Each registry record carries a human-facing identifier (``resident_id``,
``head_id``, ``request_id``) in addition to the integer primary key;
the API addresses records by those identifiers.

Passwords are never hashed implicitly here. Callers hash them with
``barangay.security.hash_password`` before assigning ``password_hash``.
"""

from __future__ import annotations

import enum
from datetime import date, datetime, timezone
from typing import Optional

from . import db


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(enum.Enum):
    """Enumeration of user roles."""
    ADMIN = "admin"
    RESIDENT = "resident"


GENDERS = ("Male", "Female", "Other")
ANNOUNCEMENT_TYPES = ("important", "warning", "info")
DOCUMENT_TYPES = (
    "barangay-clearance",
    "residency",
    "indigency",
    "good-conduct",
    "business-permit",
)
DOCUMENT_STATUSES = ("pending", "approved", "completed", "rejected")
DELIVERY_OPTIONS = ("pickup", "email", "delivery")


class User(db.Model):
    """An account that can log in.

    Admins manage every registry. Resident accounts are linked to a
    resident record through ``resident_id`` and may only see their own
    data.
    """
    __allow_unmapped__ = True
    __tablename__ = "users"

    id: int = db.Column(db.Integer, primary_key=True)
    username: str = db.Column(db.String(80), unique=True, nullable=False)
    password_hash: str = db.Column(db.String(256), nullable=False)
    name: str = db.Column(db.String(120), nullable=False)
    role: Role = db.Column(db.Enum(Role), default=Role.RESIDENT, nullable=False)
    resident_id: Optional[str] = db.Column(db.String(40))
    created_at: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.role.value})>"


class Resident(db.Model):
    """A registered resident of the barangay."""
    __allow_unmapped__ = True
    __tablename__ = "residents"

    id: int = db.Column(db.Integer, primary_key=True)
    resident_id: str = db.Column(db.String(40), unique=True, nullable=False)
    first_name: str = db.Column(db.String(80), nullable=False)
    last_name: str = db.Column(db.String(80), nullable=False)
    gender: str = db.Column(db.String(10), nullable=False)
    birth_date: date = db.Column(db.Date, nullable=False)
    address: str = db.Column(db.String(255), nullable=False)
    contact_number: Optional[str] = db.Column(db.String(40))
    family_head_id: Optional[str] = db.Column(db.String(40))
    registration_date: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)
    type: str = db.Column(db.String(20), nullable=False, default="Resident")
    qr_code: Optional[str] = db.Column(db.Text)

    def __repr__(self) -> str:
        return f"<Resident {self.resident_id} {self.first_name} {self.last_name}>"


class FamilyHead(db.Model):
    """The registered head of a household."""
    __allow_unmapped__ = True
    __tablename__ = "family_heads"

    id: int = db.Column(db.Integer, primary_key=True)
    head_id: str = db.Column(db.String(40), unique=True, nullable=False)
    first_name: str = db.Column(db.String(80), nullable=False)
    last_name: str = db.Column(db.String(80), nullable=False)
    gender: str = db.Column(db.String(10), nullable=False)
    birth_date: date = db.Column(db.Date, nullable=False)
    address: str = db.Column(db.String(255), nullable=False)
    contact_number: Optional[str] = db.Column(db.String(40))
    registration_date: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)
    type: str = db.Column(db.String(20), nullable=False, default="Family Head")
    qr_code: Optional[str] = db.Column(db.Text)

    def __repr__(self) -> str:
        return f"<FamilyHead {self.head_id} {self.first_name} {self.last_name}>"


class Announcement(db.Model):
    """A notice published to every signed-in user."""
    __allow_unmapped__ = True
    __tablename__ = "announcements"

    id: int = db.Column(db.Integer, primary_key=True)
    title: str = db.Column(db.String(200), nullable=False)
    category: str = db.Column(db.String(80), nullable=False)
    type: str = db.Column(db.String(20), nullable=False)
    content: str = db.Column(db.Text, nullable=False)
    date: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Announcement {self.title!r} ({self.type})>"


class Event(db.Model):
    """A community event. Attendees are stored inline as a JSON list."""
    __allow_unmapped__ = True
    __tablename__ = "events"

    id: int = db.Column(db.Integer, primary_key=True)
    title: str = db.Column(db.String(200), nullable=False)
    description: str = db.Column(db.Text, nullable=False)
    category: str = db.Column(db.String(80), nullable=False)
    event_date: date = db.Column(db.Date, nullable=False)
    time: str = db.Column(db.String(40), nullable=False)
    location: str = db.Column(db.String(255), nullable=False)
    created_date: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)
    # [{"id": ..., "name": ..., "contact_number": ...}]
    attendees: list = db.Column(db.JSON, nullable=False, default=list)
    qr_code: Optional[str] = db.Column(db.Text)

    def __repr__(self) -> str:
        return f"<Event {self.title!r} {self.event_date}>"


class DocumentRequest(db.Model):
    """A resident's request for a barangay-issued document."""
    __allow_unmapped__ = True
    __tablename__ = "document_requests"

    id: int = db.Column(db.Integer, primary_key=True)
    request_id: str = db.Column(db.String(40), unique=True, nullable=False)
    resident_id: str = db.Column(db.String(40), nullable=False)
    resident_name: str = db.Column(db.String(160), nullable=False)
    document_type: str = db.Column(db.String(40), nullable=False)
    purpose: str = db.Column(db.String(255), nullable=False)
    additional_details: Optional[str] = db.Column(db.Text)
    status: str = db.Column(db.String(20), nullable=False, default="pending")
    request_date: datetime = db.Column(db.DateTime, nullable=False, default=utcnow)
    delivery_option: str = db.Column(db.String(20), nullable=False)
    processing_date: Optional[datetime] = db.Column(db.DateTime)
    processing_notes: Optional[str] = db.Column(db.Text)
    processed_by: Optional[str] = db.Column(db.String(80))
    qr_code: Optional[str] = db.Column(db.Text)

    def __repr__(self) -> str:
        return f"<DocumentRequest {self.request_id} {self.document_type} ({self.status})>"
