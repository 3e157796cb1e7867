"""Tests for normalized error responses."""


def test_missing_user_header_is_unauthorized(client):
    resp = client.get("/v1/domains")
    assert resp.status_code == 401
    body = resp.json()
    assert body["error"]["code"] == "unauthorized"
    assert body["error"]["request_id"] == resp.headers.get("x-request-id")
    assert body["detail"] == body["error"]["message"]


def test_domain_rule_is_conflict(client, user_headers):
    resp = client.post("/v1/domains/health/archive", headers=user_headers)
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "conflict"


def test_request_validation_has_standard_shape(client, user_headers):
    resp = client.put("/v1/grounding/duration", headers=user_headers, json={"minutes": "ten"})
    assert resp.status_code == 422
    body = resp.json()
    assert body["error"]["code"] == "validation_error"
    assert body["error"]["request_id"] == resp.headers.get("x-request-id")
    assert body["errors"]


def test_unknown_route_is_not_found(client):
    resp = client.get("/v1/nothing-here")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"


def test_admin_without_key_is_forbidden(client):
    resp = client.get("/api/admin/config")
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "forbidden"
