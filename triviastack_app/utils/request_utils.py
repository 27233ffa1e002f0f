"""Request body parsing through marshmallow schemas."""

from flask import request
from marshmallow import ValidationError as SchemaValidationError

from ..core.error_handlers import ValidationError


def load_json(schema_class, data=None) -> dict:
    """Validate the JSON body (or ``data``) and return the loaded dict."""
    if data is None:
        data = request.get_json(silent=True)
    if data is None:
        data = {}
    try:
        return schema_class().load(data)
    except SchemaValidationError as e:
        raise ValidationError('Invalid request body', errors=e.messages)


def load_args(schema_class) -> dict:
    """Validate query string arguments."""
    return load_json(schema_class, data=request.args.to_dict())
