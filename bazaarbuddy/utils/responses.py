from decimal import Decimal

from flask import jsonify


def ok(message="success", status=200, **payload):
    body = {"status": "success", "success": True, "message": message}
    body.update(payload)
    return jsonify(body), status


def error(message, status=400, kind=None, details=None):
    body = {
        "status": "error",
        "success": False,
        "kind": kind or "error",
        "message": message,
        "code": status,
    }
    if details is not None:
        body["details"] = details
    return jsonify(body), status


def jsonable(value):
    """Turn Decimals nested in dicts/lists into floats for JSON output."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {k: jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(v) for v in value]
    return value
