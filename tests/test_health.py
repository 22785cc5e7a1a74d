def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json().get("status") == "ok"


def test_url_map_contains_api_v1_rules(app):
    rules = {str(r.rule) for r in app.url_map.iter_rules()}
    assert "/api/v1/orders" in rules
    assert "/api/v1/orders/<int:order_id>/status" in rules
    assert "/api/v1/analytics/price-trends" in rules
    assert "/api/v1/items/bulk" in rules


def test_apispec_lists_documented_routes(client):
    resp = client.get("/apispec.json")
    assert resp.status_code == 200
    paths = resp.get_json()["paths"]
    assert "/api/v1/orders" in paths
    assert "/api/v1/analytics/price-trends" in paths
    assert not any(p.startswith("/__") for p in paths)


def test_metrics_endpoint(client):
    resp = client.get("/metrics")
    assert resp.status_code == 200
