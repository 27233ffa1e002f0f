"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

import logging

from flask import Flask
from flask.logging import default_handler

from ..extensions import db, login_manager
from .error_handlers import error_response, register_error_handlers
from .logging_config import build_formatter, setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Configure the application logger: console always, rotating file on demand."""

    app.logger.removeHandler(default_handler)
    if not app.logger.handlers:
        level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
        app.logger.setLevel(level)
        handler = logging.StreamHandler()
        handler.setFormatter(build_formatter(app.config.get("LOG_JSON", False)))
        app.logger.addHandler(handler)
        app.logger.propagate = False

        if app.config.get("LOG_TO_FILE"):
            setup_logging(
                app.logger,
                log_level=app.config.get("LOG_LEVEL", "INFO"),
                log_dir=app.config.get("LOG_DIR"),
                json_format=app.config.get("LOG_JSON", False),
            )

    app.logger.info("Flask app logger configured successfully.")


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    db.init_app(app)
    login_manager.init_app(app)


def register_user_loader(app: Flask) -> None:
    """Resolve the session identity for Flask-Login."""

    @login_manager.user_loader
    def load_user(user_id: str):
        from ..models import User

        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return error_response("Authentication required", "UNAUTHORIZED", 401)


def register_error_handling(app: Flask) -> None:
    """Map the typed failure taxonomy onto JSON responses."""

    register_error_handlers(app)


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    register_default_modules(app)


def initialize_database(app: Flask) -> None:
    """Create database tables for every registered model."""

    from .. import models  # noqa: F401  (registers the mappers)

    db.create_all()
    app.logger.info("Database schema ready (%s).", db.engine.url.render_as_string(hide_password=True))
