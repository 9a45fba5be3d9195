"""Centralised error handling and custom exceptions.

The service layer and the auth gate raise these exceptions without
knowing anything about HTTP. The Flask error handlers registered in
``register_error_handlers`` turn them into JSON responses of the form
``{"error": {"code": ..., "message": ...}}``.
"""
from __future__ import annotations

import logging

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    code = "SERVER_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def payload(self) -> dict:
        return {"code": self.code, "message": self.message}

    def to_response(self, status_code: int | None = None):
        return jsonify({"error": self.payload()}), status_code or self.status_code


class ValidationError(ApiError):
    """Raised when input validation fails."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, fields: dict | None = None) -> None:
        super().__init__(message)
        self.fields = fields or {}

    def payload(self) -> dict:
        return {**super().payload(), "fields": self.fields}


class MissingToken(ApiError):
    """Raised when a protected endpoint is called without a bearer token."""

    status_code = 401
    code = "MISSING_TOKEN"


class InvalidToken(ApiError):
    """Raised when a token fails verification or names an unknown user."""

    status_code = 403
    code = "INVALID_TOKEN"


class Forbidden(ApiError):
    """Raised when an authenticated caller lacks the role or ownership required."""

    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(ApiError):
    """Raised when a requested resource cannot be found."""

    status_code = 404
    code = "NOT_FOUND"


class ConflictError(ApiError):
    """Raised when a uniqueness or resource conflict occurs."""

    status_code = 409
    code = "CONFLICT"


class StoreError(ApiError):
    """Raised when the record store fails to answer a query."""

    status_code = 500
    code = "STORE_ERROR"


def register_error_handlers(app) -> None:
    """Register custom error handlers on the given Flask app."""
    from .db import db

    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if isinstance(err, StoreError):
            db.session.rollback()
            logger.error("Record store failure: %s", err.message, exc_info=err.__cause__)
        return err.to_response()

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(err: SQLAlchemyError):
        db.session.rollback()
        logger.exception("Unhandled database error")
        return StoreError("Server error").to_response()
