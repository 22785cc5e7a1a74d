import datetime as dt

import jwt

from bazaarbuddy.auth.permissions import role_has_scope, get_user_role
from bazaarbuddy.utils import create_access_token, create_refresh_token, decode_token, verify_token


def _login(client, email="auth1@example.test", role="vendor"):
    r = client.post("/__auth/login_stub", json={"email": email, "role": role})
    assert r.status_code == 200
    return r.get_json()["data"]


def test_access_token_allows_request(client):
    toks = _login(client)
    r = client.get("/__whoami", headers={"Authorization": f"Bearer {toks['access']}"})
    assert r.status_code == 200
    assert r.get_json()["user"] == {"id": toks["user_id"], "role": "vendor"}


def test_expired_access_token_blocked(app, client):
    toks = _login(client)
    past = dt.datetime.now(dt.timezone.utc) - dt.timedelta(seconds=1)
    expired = jwt.encode(
        {"sub": str(toks["user_id"]), "role": "vendor", "type": "access", "exp": past},
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )
    r = client.get("/__whoami", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.get_json()["message"] == "token expired"


def test_refresh_token_is_not_an_access_token(client):
    toks = _login(client)
    r = client.get("/__whoami", headers={"Authorization": f"Bearer {toks['refresh']}"})
    assert r.status_code == 401
    assert decode_token(toks["refresh"], expected_type="refresh")["sub"] == str(toks["user_id"])


def test_token_for_unknown_user_blocked(client):
    r = client.get("/__whoami", headers={"Authorization": f"Bearer {create_access_token(424242, 'vendor')}"})
    assert r.status_code == 401
    assert r.get_json()["message"] == "User not found"


def test_garbage_token_blocked(client):
    r = client.get("/__whoami", headers={"Authorization": "Bearer not.a.token"})
    assert r.status_code == 401
    assert r.get_json()["kind"] == "unauthenticated"


def test_verify_token(app):
    assert verify_token(create_access_token(7, "vendor")) == {"user_id": 7}
    assert verify_token(create_refresh_token(7)) is None
    assert verify_token("junk") is None


def test_role_scopes(app, make_user):
    assert role_has_scope("vendor", "place_order")
    assert not role_has_scope("vendor", "advance_order")
    assert role_has_scope("supplier", "advance_order")
    assert role_has_scope("admin", "anything")
    assert not role_has_scope("stranger", "view_orders")

    supplier = make_user("supplier")
    assert get_user_role(supplier.id) == "supplier"
    assert get_user_role(999) is None
