"""
Application factory for the Barangay Records API.

This module provides a function to create and configure the Flask
application. All extensions (SQLAlchemy, Migrate, JWT) are initialised
here and every blueprint is registered under ``/api``.

Environment variables control the database connection, the token
secret and its lifetime; see ``barangay.config``. In production set
``DATABASE_URL`` and ``JWT_SECRET_KEY``. Development falls back to a
local SQLite file.
"""

from __future__ import annotations

from flask import Flask
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate

# instantiate extensions without binding them to an app yet.  They will
# be bound in create_app().
from .db import db  # use shared db object from db.py
migrate = Migrate()
jwt = JWTManager()


def create_app(test_config: dict | None = None) -> Flask:
    """Create and configure a Flask application.

    Parameters
    ----------
    test_config: dict | None, optional
        Optional configuration overrides used when running tests.

    Returns
    -------
    Flask
        A configured Flask application instance.
    """
    from .config import load_config
    from .log import configure_logging

    app = Flask(__name__)
    app.config.update(load_config())
    if test_config:
        app.config.update(test_config)

    configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    from .security import register_jwt_callbacks
    register_jwt_callbacks(jwt)

    from .errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints. Importing here avoids circular imports.
    from .routes.auth import auth_bp
    from .routes.residents import residents_bp
    from .routes.family_heads import family_heads_bp
    from .routes.announcements import announcements_bp
    from .routes.events import events_bp
    from .routes.documents import documents_bp
    from .routes.dashboard import dashboard_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(residents_bp, url_prefix="/api")
    app.register_blueprint(family_heads_bp, url_prefix="/api")
    app.register_blueprint(announcements_bp, url_prefix="/api")
    app.register_blueprint(events_bp, url_prefix="/api")
    app.register_blueprint(documents_bp, url_prefix="/api")
    app.register_blueprint(dashboard_bp, url_prefix="/api")

    @app.route("/api/health")
    def health_check() -> dict[str, str]:
        """Return a simple health check response."""
        return {"status": "ok"}

    return app
