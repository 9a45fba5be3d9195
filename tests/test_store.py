"""Tests for the record store query surface."""
import pytest

from barangay.models import Role
from barangay.store import RecordStore


def test_find_all_returns_plain_mappings(app, make_resident):
    make_resident("RES-0001", qr_code="payload")
    make_resident("RES-0002", first_name="Paolo")
    store = RecordStore()

    rows = store.find_all("residents")
    assert [row["resident_id"] for row in rows] == ["RES-0001", "RES-0002"]
    assert rows[0]["qr_code"] == "payload"

    trimmed = store.find_all("residents", exclude=("qr_code",))
    assert all("qr_code" not in row for row in trimmed)


def test_count_all(app, make_family_head):
    store = RecordStore()
    assert store.count_all("family_heads") == 0
    make_family_head("FH-0001")
    make_family_head("FH-0002", first_name="Ramon")
    assert store.count_all("family_heads") == 2


def test_find_one(app, make_user):
    make_user("maria", Role.RESIDENT, resident_id="RES-0001")
    store = RecordStore()
    user = store.find_one("users", username="maria")
    assert user["role"] == "resident"
    assert user["resident_id"] == "RES-0001"
    assert "password_hash" not in user
    assert store.find_one("users", username="nobody") is None


def test_unknown_collection(app):
    with pytest.raises(ValueError):
        RecordStore().find_all("payments")
