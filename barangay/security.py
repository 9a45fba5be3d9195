"""Authentication and authorisation gate.

Bearer tokens are verified by flask-jwt-extended. The loaders registered
in ``register_jwt_callbacks`` turn its failures into ``MissingToken`` and
``InvalidToken`` responses, and its user lookup calls ``authenticate``,
which checks the claimed username is still in the record store and
returns an ``Identity`` built from the token's claims. Handlers then
compose the two predicates ``require_role`` and
``require_ownership_or_admin``, usually through the view decorators at
the bottom of this module.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Optional, Union

from flask_jwt_extended import create_access_token, get_current_user, verify_jwt_in_request
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import Forbidden, InvalidToken, MissingToken
from .models import Role
from .store import RecordStore, get_store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The caller of the current request, as pinned in the token at login."""

    username: str
    name: Optional[str]
    role: Role
    resident_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @classmethod
    def from_claims(cls, claims: dict) -> "Identity":
        try:
            role = Role(claims["role"])
        except (KeyError, ValueError) as exc:
            raise InvalidToken("Invalid token.") from exc
        return cls(
            username=claims["sub"],
            name=claims.get("name"),
            role=role,
            resident_id=claims.get("resident_id"),
        )


def hash_password(plain: str) -> str:
    return generate_password_hash(plain)


def verify_password(password_hash: str, plain: str) -> bool:
    return check_password_hash(password_hash, plain)


def issue_token(user) -> str:
    """Sign a token carrying the user's name, role and resident link."""
    additional_claims = {
        "name": user.name,
        "role": user.role.value,
        "resident_id": user.resident_id,
    }
    return create_access_token(identity=user.username, additional_claims=additional_claims)


def authenticate(claims: dict, store: Optional[RecordStore] = None) -> Identity:
    """Return the identity carried by a verified token's ``claims``.

    Raises ``InvalidToken`` when the claimed username no longer exists or
    the role claim is unknown. Store failures propagate unchanged.
    """
    store = store or get_store()
    username = claims.get("sub")
    if not username or store.find_one("users", username=username) is None:
        logger.info("Rejected token for unknown user %r", username)
        raise InvalidToken("Invalid token.")
    return Identity.from_claims(claims)


def register_jwt_callbacks(manager) -> None:
    """Map flask-jwt-extended failures onto the API's error responses."""

    @manager.unauthorized_loader
    def missing_token(reason: str):
        logger.info("Rejected request without token: %s", reason)
        return MissingToken("Access denied. No token provided.").to_response()

    @manager.invalid_token_loader
    def invalid_token(reason: str):
        logger.info("Rejected token: %s", reason)
        return InvalidToken("Invalid token.").to_response()

    @manager.expired_token_loader
    def expired_token(jwt_header: dict, jwt_payload: dict):
        logger.info("Rejected expired token for %r", jwt_payload.get("sub"))
        return InvalidToken("Invalid token.").to_response()

    @manager.user_lookup_loader
    def load_identity(jwt_header: dict, jwt_payload: dict) -> Identity:
        return authenticate(jwt_payload)


def require_role(identity: Identity, role: Union[Role, str]) -> None:
    expected = Role(role)
    if identity.role is not expected:
        logger.warning("User %s denied: %s role required", identity.username, expected.value)
        raise Forbidden(f"Access denied. {expected.value.capitalize()} rights required.")


def require_ownership_or_admin(identity: Identity, resident_id: Optional[str]) -> None:
    if identity.is_admin:
        return
    if identity.resident_id != resident_id:
        logger.warning("User %s denied access to resident %s", identity.username, resident_id)
        raise Forbidden("Access denied. You can only access your own information.")


def current_identity() -> Identity:
    return get_current_user()


def login_required(view):
    """Require a valid bearer token; the caller is then ``current_identity()``."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        return view(*args, **kwargs)
    return wrapper


def admin_required(view):
    @wraps(view)
    @login_required
    def wrapper(*args, **kwargs):
        require_role(current_identity(), Role.ADMIN)
        return view(*args, **kwargs)
    return wrapper


def resident_owner(param: str = "id"):
    """Restrict residents to their own record when ``param`` is in the route.

    Routes without that path parameter let any authenticated caller
    through; admins always pass.
    """
    def decorator(view):
        @wraps(view)
        @login_required
        def wrapper(*args, **kwargs):
            if param in kwargs:
                require_ownership_or_admin(current_identity(), kwargs[param])
            return view(*args, **kwargs)
        return wrapper
    return decorator
