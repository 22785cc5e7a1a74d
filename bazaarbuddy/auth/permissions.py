"""
Central registry of allowed actions per role.
"""
ROLE_SCOPES = {
    "vendor":   {"place_order", "cancel_order", "view_orders", "view_analytics"},
    "supplier": {"manage_items", "advance_order", "cancel_order", "view_orders"},
    "admin":    {"*"},
}


def role_has_scope(role: str, action: str) -> bool:
    scopes = ROLE_SCOPES.get(role, set())
    return "*" in scopes or action in scopes


def get_user_role(user_id):
    """Role of a user id, or None when the user does not exist."""
    from bazaarbuddy.models import db, User

    user = db.session.get(User, user_id)
    return user.role if user else None
