"""Extension singletons shared by the app factory, models and blueprints."""

from flask_login import LoginManager

from .db_instance import db

login_manager = LoginManager()

__all__ = ["db", "login_manager"]
