# File: triviastack_app/modules/stats/__init__.py
from flask import Blueprint

stats_api_bp = Blueprint('stats_api', __name__)

from .routes import api  # noqa: E402,F401
