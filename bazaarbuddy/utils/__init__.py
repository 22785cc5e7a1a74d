from .responses import ok, error, jsonable
from .auth import auth_required, role_required
from .validation import parse_model, validate_schema
from .db import transactional
from .jwt import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_token,
    TokenError,
)

__all__ = [
    'ok',
    'error',
    'jsonable',
    'auth_required',
    'role_required',
    'create_access_token',
    'create_refresh_token',
    'decode_token',
    'verify_token',
    'TokenError',
    'parse_model',
    'validate_schema',
    'transactional',
]
