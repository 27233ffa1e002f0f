# File: triviastack_app/modules/disputes/__init__.py
from flask import Blueprint

disputes_api_bp = Blueprint('disputes_api', __name__)
disputes_admin_api_bp = Blueprint('disputes_admin_api', __name__)

from .routes import api, admin_api  # noqa: E402,F401
