from functools import wraps
from flask import request
from pydantic import ValidationError
from bazaarbuddy.exceptions import InvalidInput


def _describe(errors):
    first = errors[0]
    where = ".".join(str(p) for p in first.get("loc", ()))
    return f"{where}: {first.get('msg')}" if where else first.get("msg", "Invalid request")


def parse_model(schema, data):
    """Build ``schema`` from ``data`` or raise InvalidInput."""
    try:
        return schema.model_validate(data if data is not None else {})
    except ValidationError as ve:
        errors = ve.errors(include_url=False, include_context=False, include_input=False)
        raise InvalidInput(_describe(errors), details={"errors": errors})


def validate_schema(schema):
    """Decorator to validate request JSON against a Pydantic schema."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            request.validated_data = parse_model(schema, request.get_json(silent=True))
            return fn(*args, **kwargs)
        return wrapper

    return decorator
