"""Tests for the authentication and authorisation gate."""
import pytest

from barangay import db
from barangay.errors import Forbidden, InvalidToken, StoreError
from barangay.models import Role, User
from barangay.security import (
    Identity,
    authenticate,
    hash_password,
    issue_token,
    require_ownership_or_admin,
    require_role,
    verify_password,
)


def claims_for(username, role="resident", name=None, resident_id=None):
    return {"sub": username, "role": role, "name": name, "resident_id": resident_id}


class TestAuthenticate:
    def test_identity_comes_from_token_claims(self, app, make_user):
        user = make_user("maria", Role.RESIDENT, resident_id="RES-0001", name="Maria Santos")
        user.name = "Maria Santos-Cruz"
        db.session.commit()

        identity = authenticate(claims_for("maria", name="Maria Santos", resident_id="RES-0001"))
        assert identity == Identity(
            username="maria", name="Maria Santos", role=Role.RESIDENT, resident_id="RES-0001"
        )
        assert not identity.is_admin

    def test_deleted_user_is_rejected(self, app, make_user):
        user = make_user("maria", Role.RESIDENT, resident_id="RES-0001")
        db.session.delete(user)
        db.session.commit()
        with pytest.raises(InvalidToken):
            authenticate(claims_for("maria", resident_id="RES-0001"))

    def test_missing_subject_is_rejected(self, app):
        with pytest.raises(InvalidToken):
            authenticate({"role": "admin"})

    def test_unknown_role_claim_is_rejected(self, app, make_user):
        make_user("admin")
        with pytest.raises(InvalidToken):
            authenticate(claims_for("admin", role="superuser"))

    def test_store_failure_propagates(self, app):
        class BrokenStore:
            def find_one(self, collection, **filters):
                raise StoreError("Could not query users.")

        with pytest.raises(StoreError):
            authenticate(claims_for("admin", role="admin"), store=BrokenStore())

    def test_store_lookup_uses_username(self, app):
        seen = []

        class RecordingStore:
            def find_one(self, collection, **filters):
                seen.append((collection, filters))
                return None

        with pytest.raises(InvalidToken):
            authenticate(claims_for("admin", role="admin"), store=RecordingStore())
        assert seen == [("users", {"username": "admin"})]


ADMIN = Identity(username="admin", name="Admin", role=Role.ADMIN)


def resident(resident_id="RES-0001"):
    return Identity(username="maria", name="Maria", role=Role.RESIDENT, resident_id=resident_id)


class TestRequireRole:
    def test_matching_role_passes(self):
        require_role(ADMIN, Role.ADMIN)
        require_role(resident(), "resident")

    def test_other_role_is_forbidden(self):
        with pytest.raises(Forbidden):
            require_role(resident(), Role.ADMIN)
        with pytest.raises(Forbidden):
            require_role(ADMIN, Role.RESIDENT)


class TestRequireOwnershipOrAdmin:
    @pytest.mark.parametrize("resource_id", ["RES-0001", "RES-0002", "", None])
    def test_admin_always_passes(self, resource_id):
        require_ownership_or_admin(ADMIN, resource_id)

    @pytest.mark.parametrize(
        "own_id, resource_id, allowed",
        [
            ("RES-0001", "RES-0001", True),
            ("RES-0001", "RES-0002", False),
            ("RES-0001", None, False),
            (None, "RES-0001", False),
        ],
    )
    def test_resident_passes_only_for_own_id(self, own_id, resource_id, allowed):
        if allowed:
            require_ownership_or_admin(resident(own_id), resource_id)
        else:
            with pytest.raises(Forbidden):
                require_ownership_or_admin(resident(own_id), resource_id)


def test_password_hashing_round_trip():
    hashed = hash_password("s3cret!")
    assert hashed != "s3cret!"
    assert verify_password(hashed, "s3cret!")
    assert not verify_password(hashed, "wrong")


def test_issued_token_carries_claims(app, make_user):
    from flask_jwt_extended import decode_token

    user = make_user("maria", Role.RESIDENT, resident_id="RES-0001", name="Maria Santos")
    claims = decode_token(issue_token(user))
    assert claims["sub"] == "maria"
    assert claims["name"] == "Maria Santos"
    assert claims["role"] == "resident"
    assert claims["resident_id"] == "RES-0001"
    assert "exp" in claims


def test_user_model_has_no_implicit_hashing(app):
    user = User(username="x", password_hash="plain", name="X", role=Role.ADMIN)
    db.session.add(user)
    db.session.commit()
    assert user.password_hash == "plain"
