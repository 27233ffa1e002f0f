"""TriviaStack: answer grading, disputes and player statistics."""

from __future__ import annotations

from flask import Flask

from .config import Config
from .core import bootstrap
from .extensions import db

__all__ = ["create_app", "db"]

# Order matters: logging first so later steps can report, blueprints last.
_SETUP_STEPS = (
    bootstrap.configure_logging,
    bootstrap.register_extensions,
    bootstrap.register_user_loader,
    bootstrap.register_error_handling,
    bootstrap.register_blueprints,
)


def create_app(config_class: type[Config] = Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)
    config_class.init_app(app)

    for step in _SETUP_STEPS:
        step(app)

    with app.app_context():
        bootstrap.initialize_database(app)

    return app
