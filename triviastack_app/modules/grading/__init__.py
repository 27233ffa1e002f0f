# File: triviastack_app/modules/grading/__init__.py
from flask import Blueprint

grading_api_bp = Blueprint('grading_api', __name__)

from .routes import api  # noqa: E402,F401
