"""
Failure taxonomy and JSON error responses.

Services raise the typed errors below; the handlers registered here turn them
into ``{"success": false, "message", "code", "details"}`` payloads.
"""

from typing import Any, Dict, Optional

from flask import current_app, jsonify, request


class TriviaStackError(Exception):
    """Base class: subclasses pin ``code`` and ``status_code``."""

    code = 'UNKNOWN_ERROR'
    status_code = 500
    default_message = 'Unexpected error'

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            'success': False,
            'message': self.message,
            'code': self.code,
            'details': self.details,
        }


class NotFoundError(TriviaStackError):
    """Referenced question, game, dispute or verdict does not exist."""

    code = 'NOT_FOUND'
    status_code = 404
    default_message = 'Resource not found'

    def __init__(self, message: Optional[str] = None, resource: Optional[str] = None):
        super().__init__(message, {'resource': resource} if resource else None)


class ConflictError(TriviaStackError):
    """The target's state forbids the operation, e.g. a dispute already resolved."""

    code = 'CONFLICT'
    status_code = 409
    default_message = 'Conflict'


class ValidationError(TriviaStackError):
    code = 'VALIDATION_ERROR'
    status_code = 400
    default_message = 'Validation failed'

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict] = None):
        super().__init__(message, {'errors': errors} if errors else None)


class AuthorizationError(TriviaStackError):
    code = 'FORBIDDEN'
    status_code = 403
    default_message = 'Access denied'


class ConsistencyFailure(TriviaStackError):
    """Stored aggregates disagree with the verdicts they are derived from."""

    code = 'CONSISTENCY_FAILURE'
    status_code = 500
    default_message = 'Aggregate invariant violated'


def error_response(message: str, code: str = 'ERROR', status_code: int = 400,
                   details: Optional[Dict] = None) -> tuple:
    payload = {'success': False, 'message': message, 'code': code}
    if details:
        payload['details'] = details
    return jsonify(payload), status_code


def success_response(data: Any = None, message: Optional[str] = None) -> dict:
    payload = {'success': True}
    if data is not None:
        payload['data'] = data
    if message:
        payload['message'] = message
    return payload


def _is_api_request() -> bool:
    return request.path.startswith('/api/')


def register_error_handlers(app):
    @app.errorhandler(TriviaStackError)
    def handle_domain_error(error):
        log = current_app.logger.critical if isinstance(error, ConsistencyFailure) else current_app.logger.warning
        log(f"{error.code} on {request.method} {request.path}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def handle_unknown_route(error):
        if not _is_api_request():
            return error
        return error_response('Endpoint not found', 'NOT_FOUND', 404)

    @app.errorhandler(500)
    def handle_server_error(error):
        current_app.logger.exception(f"Unhandled error on {request.method} {request.path}")
        if not _is_api_request():
            return error
        return error_response('Internal server error', 'SERVER_ERROR', 500)
