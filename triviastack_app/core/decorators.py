"""Route decorators shared by the API blueprints."""

from functools import wraps

from flask_login import current_user

from .error_handlers import AuthorizationError


def admin_required(f):
    """Decorator to require admin role. Use below ``login_required``."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_admin:
            raise AuthorizationError('Admin access required')
        return f(*args, **kwargs)
    return decorated_function
