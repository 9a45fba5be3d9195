"""Seed script for initial data.

Running this script creates the tables and inserts an admin account, a
demo household with two residents, and a resident login linked to one
of them. Run it with ``python -m seed.seed`` from the repository root.
"""
from __future__ import annotations

from datetime import date

from barangay import create_app, db
from barangay.models import FamilyHead, Resident, Role, User
from barangay.security import hash_password


def run_seeds() -> None:
    """Insert the demo admin, household and resident account."""
    app = create_app()
    with app.app_context():
        db.create_all()
        head = FamilyHead(
            head_id="FH-0001",
            first_name="Jose",
            last_name="Santos",
            gender="Male",
            birth_date=date(1975, 3, 14),
            address="Purok 1, Barangay San Isidro",
        )
        residents = [
            Resident(
                resident_id="RES-0001",
                first_name="Maria",
                last_name="Santos",
                gender="Female",
                birth_date=date(1978, 8, 2),
                address="Purok 1, Barangay San Isidro",
                family_head_id="FH-0001",
            ),
            Resident(
                resident_id="RES-0002",
                first_name="Paolo",
                last_name="Santos",
                gender="Male",
                birth_date=date(2006, 1, 20),
                address="Purok 1, Barangay San Isidro",
                family_head_id="FH-0001",
            ),
        ]
        admin = User(
            username="admin",
            password_hash=hash_password("admin123"),
            name="Barangay Administrator",
            role=Role.ADMIN,
        )
        resident_user = User(
            username="maria",
            password_hash=hash_password("password"),
            name="Maria Santos",
            role=Role.RESIDENT,
            resident_id="RES-0001",
        )
        db.session.add_all([head, *residents, admin, resident_user])
        db.session.commit()
        print("Seed data inserted successfully.")


if __name__ == "__main__":
    run_seeds()
