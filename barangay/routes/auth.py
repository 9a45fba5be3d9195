"""
Authentication routes for the Barangay Records API.

Provides endpoints for logging in, registering a resident account,
changing a password and inspecting the current user. Tokens issued here
carry the user's name, role and resident link and are required for
every protected endpoint.
"""

from __future__ import annotations

import logging

from flask import Blueprint, request

from .. import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import Resident, Role, User
from ..schemas import UserSchema
from ..security import current_identity, hash_password, issue_token, login_required, verify_password
from ..validation import (
    check_unique,
    trim_fields,
    validate_login,
    validate_password_change,
    validate_registration,
)

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def _session_payload(user: User) -> dict:
    return {
        "token": issue_token(user),
        "user": {
            "username": user.username,
            "name": user.name,
            "role": user.role.value,
            "resident_id": user.resident_id,
        },
    }


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple[dict, int]:
    """Authenticate a user and return a token.

    Expects JSON with ``username`` and ``password``. Unknown users and
    wrong passwords get the same 400 response.
    """
    data = trim_fields(request.get_json(silent=True) or {}, ("username",))
    validate_login(data).raise_for_violations()
    username = data["username"]
    password = data["password"]

    user = User.query.filter_by(username=username).first()
    if not user or not verify_password(user.password_hash, password):
        logger.info("Failed login for %r", username)
        return {"error": {"code": "INVALID_CREDENTIALS", "message": "Invalid username or password"}}, 400

    logger.info("User %s logged in", username)
    return _session_payload(user), 200


@auth_bp.route("/me", methods=["GET"])
@login_required
def me() -> tuple[dict, int]:
    """Return the current user's account without the password hash."""
    user = User.query.filter_by(username=current_identity().username).first()
    if not user:
        raise NotFoundError("User not found")
    return UserSchema().dump(user), 200


@auth_bp.route("/change-password", methods=["POST"])
@login_required
def change_password() -> tuple[dict, int]:
    """Change the current user's password.

    Expects ``current_password`` and ``new_password`` (at least six
    characters). The new password is hashed before it is stored.
    """
    data = request.get_json(silent=True) or {}
    validate_password_change(data).raise_for_violations()

    user = User.query.filter_by(username=current_identity().username).first()
    if not user:
        raise NotFoundError("User not found")
    if not verify_password(user.password_hash, data["current_password"]):
        raise ValidationError("Current password is incorrect", {"current_password": "Incorrect password."})

    user.password_hash = hash_password(data["new_password"])
    db.session.commit()
    logger.info("User %s changed their password", user.username)
    return {"message": "Password updated successfully"}, 200


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple[dict, int]:
    """Create a resident account linked to an existing resident record.

    Expects ``username``, ``password``, ``name`` and ``resident_id``.
    The resident must exist and must not already have an account.
    """
    data = trim_fields(request.get_json(silent=True) or {}, ("username", "name", "resident_id"))
    result = validate_registration(data)
    if result.valid:
        check_unique(result, User, "username", data["username"])
    result.raise_for_violations()

    resident_id = data["resident_id"]
    if not Resident.query.filter_by(resident_id=resident_id).first():
        raise ValidationError("Resident ID not found", {"resident_id": "No resident with this ID."})
    if User.query.filter_by(resident_id=resident_id).first():
        raise ConflictError("Resident already has an account")

    user = User(
        username=data["username"],
        password_hash=hash_password(data["password"]),
        name=data["name"],
        role=Role.RESIDENT,
        resident_id=resident_id,
    )
    db.session.add(user)
    db.session.commit()
    logger.info("Registered resident account %s for %s", user.username, resident_id)
    return _session_payload(user), 201


@auth_bp.route("/check-resident/<resident_id>", methods=["GET"])
def check_resident(resident_id: str) -> tuple[dict, int]:
    """Report whether a resident already has a login account."""
    if not Resident.query.filter_by(resident_id=resident_id).first():
        raise NotFoundError("Resident not found")
    has_account = User.query.filter_by(resident_id=resident_id).first() is not None
    return {"has_account": has_account}, 200
