def test_security_headers_and_expose_request_id(client):
    resp = client.get("/__ok", headers={"Origin": "http://any.test", "X-Request-ID": "abc-123"})
    assert resp.status_code == 200
    assert resp.headers.get("X-Content-Type-Options") == "nosniff"
    assert resp.headers.get("X-Frame-Options") == "DENY"
    assert resp.headers.get("Referrer-Policy") == "no-referrer"
    assert resp.headers.get("X-Request-ID") == "abc-123"
    expose = resp.headers.get("Access-Control-Expose-Headers", "")
    assert "X-Request-ID" in expose
    assert "traceparent" in expose


def test_request_id_generated_when_missing(client):
    resp = client.get("/__ok")
    assert len(resp.headers.get("X-Request-ID", "")) == 32


def test_traceparent_header(client):
    resp = client.get("/__ok")
    assert resp.status_code == 200
    assert "traceparent" in resp.headers


def test_cors_preflight(client):
    resp = client.open(
        "/__ok",
        method="OPTIONS",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
    )
    assert resp.status_code in (200, 204)
    assert resp.headers.get("Access-Control-Allow-Origin") in ("*", "http://localhost:3000")
