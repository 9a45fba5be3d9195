"""Shared pytest fixtures.

Each test gets a fresh application bound to an in-memory SQLite
database. Users are created directly through the models and tokens are
issued with the same helper the login endpoint uses.
"""
from datetime import date, datetime

import pytest

from barangay import create_app, db
from barangay.models import FamilyHead, Resident, Role, User
from barangay.security import hash_password, issue_token

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(username="admin", role=Role.ADMIN, resident_id=None, password="secret123", name=None):
        user = User(
            username=username,
            password_hash=hash_password(password),
            name=name or username.title(),
            role=role,
            resident_id=resident_id,
        )
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def make_resident(app):
    def _make_resident(resident_id="RES-0001", first_name="Maria", last_name="Santos", gender="Female",
                       birth_date=date(1990, 5, 1), registered=None, **extra):
        resident = Resident(
            resident_id=resident_id,
            first_name=first_name,
            last_name=last_name,
            gender=gender,
            birth_date=birth_date,
            address="Purok 1",
            registration_date=registered or datetime(2024, 1, 15, 9, 0),
            **extra,
        )
        db.session.add(resident)
        db.session.commit()
        return resident
    return _make_resident


@pytest.fixture
def make_family_head(app):
    def _make_family_head(head_id="FH-0001", first_name="Jose", last_name="Santos", gender="Male",
                          birth_date=date(1970, 2, 3), registered=None):
        head = FamilyHead(
            head_id=head_id,
            first_name=first_name,
            last_name=last_name,
            gender=gender,
            birth_date=birth_date,
            address="Purok 1",
            registration_date=registered or datetime(2023, 6, 1, 8, 0),
        )
        db.session.add(head)
        db.session.commit()
        return head
    return _make_family_head


def bearer(user) -> dict:
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture
def admin_headers(make_user):
    return bearer(make_user("admin", Role.ADMIN))


@pytest.fixture
def resident_headers(make_user, make_resident):
    make_resident("RES-0001")
    return bearer(make_user("maria", Role.RESIDENT, resident_id="RES-0001"))


@pytest.fixture
def headers_for(app):
    """Return a function building an Authorization header for a user."""
    return bearer
