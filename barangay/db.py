"""Database setup utilities.

This module exposes the ``db`` object used by the models and by the
record store. The application factory binds it to the Flask app, so
import ``db`` from ``barangay`` rather than from this module directly.
"""
from __future__ import annotations

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
