import json
import logging

from flask import g

from bazaarbuddy.logging import ContextFilter, JsonFormatter, MaskingFilter, mask


def _record(msg, level=logging.INFO, name="bazaarbuddy.test"):
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


def test_request_id_header_and_propagation(client):
    resp = client.get("/__ok", headers={"X-Request-ID": "my-fixed-id-123"})
    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == "my-fixed-id-123"


def test_json_line_carries_request_id(app):
    with app.test_request_context("/"):
        g.request_id = "rid-abc"
        record = _record({"event": "order_placed", "total_amount": "55"})
        ContextFilter().filter(record)
        line = json.loads(JsonFormatter(service="bazaarbuddy-test").format(record))
    assert line["request_id"] == "rid-abc"
    assert line["service"] == "bazaarbuddy-test"
    assert line["event"] == "order_placed"
    assert line["level"] == "INFO"


def test_plain_message_outside_request(app):
    record = _record("plain %s")
    record.args = ("text",)
    ContextFilter().filter(record)
    line = json.loads(JsonFormatter().format(record))
    assert line["message"] == "plain text"
    assert line["request_id"] == "n/a"


def test_sensitive_fields_masked_in_info(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    record = _record({"email": "user@example.com", "delivery_address": "Stall 5", "order": {"access": "tok"}})
    MaskingFilter().filter(record)
    assert record.msg["email"] == "[REDACTED]"
    assert record.msg["delivery_address"] == "[REDACTED]"
    assert record.msg["order"]["access"] == "[REDACTED]"


def test_sensitive_fields_visible_in_debug(monkeypatch):
    monkeypatch.setenv("APP_ENV", "development")
    record = _record({"password": "secret"}, level=logging.DEBUG)
    MaskingFilter().filter(record)
    assert record.msg["password"] == "secret"


def test_debug_is_masked_in_production(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    record = _record({"password": "secret"}, level=logging.DEBUG)
    MaskingFilter().filter(record)
    assert record.msg["password"] == "[REDACTED]"


def test_mask_walks_lists():
    assert mask([{"token": "x", "name": "y"}]) == [{"token": "[REDACTED]", "name": "y"}]
