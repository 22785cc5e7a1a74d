from functools import wraps
from flask import request, g
from bazaarbuddy.auth.permissions import role_has_scope
from bazaarbuddy.exceptions import Unauthenticated, Forbidden
from bazaarbuddy.models import db, User
from .jwt import decode_token, TokenError


def auth_required(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        auth = request.headers.get("Authorization", "")
        if not auth:
            raise Unauthenticated("No token provided")
        token = auth.split(" ", 1)[1] if auth.startswith("Bearer ") else auth
        try:
            payload = decode_token(token, expected_type="access")
            user_id = int(payload["sub"])
        except TokenError as e:
            raise Unauthenticated(str(e))
        except (KeyError, ValueError):
            raise Unauthenticated("invalid token")

        user = db.session.get(User, user_id)
        if not user:
            raise Unauthenticated("User not found")
        g.user_id = user.id
        g.role = user.role
        request.user = user
        return func(*args, **kwargs)

    return wrapper


def _to_set(obj):
    return set(obj) if isinstance(obj, (list, tuple, set)) else {obj}


def role_required(required):
    """Authorize based on user role or scoped action."""
    required_set = _to_set(required)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            role = getattr(g, "role", None)
            if not role:
                raise Forbidden("Role missing")
            for entry in required_set:
                if ":" in entry:
                    r, action = entry.split(":", 1)
                    if role == r and role_has_scope(role, action):
                        break
                else:
                    if role == entry:
                        break
            else:
                raise Forbidden("Access denied")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
