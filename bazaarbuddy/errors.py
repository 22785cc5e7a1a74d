import logging
from flask import Blueprint
from werkzeug.exceptions import HTTPException
from bazaarbuddy.exceptions import ApiError
from bazaarbuddy.utils.responses import error


HTTP_KINDS = {
    400: "invalid_input",
    401: "unauthenticated",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    429: "rate_limited",
}

errors_bp = Blueprint("errors_bp", __name__)


@errors_bp.app_errorhandler(ApiError)
def handle_api_error(e):
    if e.status >= 500:
        logging.exception("Internal error")
    return error(e.message, status=e.status, kind=e.kind, details=e.details)


@errors_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    msg = e.description or getattr(e, "name", "HTTP Error")
    return error(msg, status=e.code, kind=HTTP_KINDS.get(e.code, "http_error"))


@errors_bp.app_errorhandler(Exception)
def handle_unexpected_exception(e):
    logging.exception("Unhandled exception")
    return error(
        "An unexpected error occurred. Please try again later.",
        status=500,
        kind="internal",
    )
