"""Record store query surface.

The auth gate and the dashboard engine never touch SQLAlchemy directly.
They go through ``RecordStore``, which exposes three reads over the six
named collections and returns plain dictionaries dumped by the
marshmallow schemas. Database failures are re-raised as
``StoreError`` so callers see a single failure type.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from .db import db
from .errors import StoreError
from .models import Announcement, DocumentRequest, Event, FamilyHead, Resident, User
from .schemas import (
    AnnouncementSchema,
    DocumentRequestSchema,
    EventSchema,
    FamilyHeadSchema,
    ResidentSchema,
    UserSchema,
)

logger = logging.getLogger(__name__)

COLLECTIONS = {
    "users": (User, UserSchema),
    "residents": (Resident, ResidentSchema),
    "family_heads": (FamilyHead, FamilyHeadSchema),
    "announcements": (Announcement, AnnouncementSchema),
    "events": (Event, EventSchema),
    "document_requests": (DocumentRequest, DocumentRequestSchema),
}


class RecordStore:
    """Read-only access to the application's collections."""

    def __init__(self, session=None) -> None:
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    @staticmethod
    def _resolve(collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection!r}") from None

    def find_all(self, collection: str, exclude: Iterable[str] = ()) -> list[dict]:
        """Return every record of ``collection``, dropping ``exclude`` fields."""
        model, schema_cls = self._resolve(collection)
        try:
            rows = self.session.query(model).order_by(model.id.asc()).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not load {collection}.") from exc
        return schema_cls(many=True, exclude=tuple(exclude)).dump(rows)

    def count_all(self, collection: str) -> int:
        """Return the number of records in ``collection``.

        Part of the store's query surface for callers that need a total
        without loading rows. The dashboard report counts the snapshots
        it already holds, so it does not use this.
        """
        model, _ = self._resolve(collection)
        try:
            return self.session.query(model).count()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not count {collection}.") from exc

    def find_one(self, collection: str, **filters) -> Optional[dict]:
        """Return the first record matching ``filters`` or ``None``."""
        model, schema_cls = self._resolve(collection)
        try:
            row = self.session.query(model).filter_by(**filters).first()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not query {collection}.") from exc
        if row is None:
            return None
        return schema_cls().dump(row)


def get_store() -> RecordStore:
    """Return a store bound to the current request's session."""
    return RecordStore()
