"""Domain management endpoints."""

import pytest

from backend.features.admin.service import config_service
from backend.models.system_config import FeatureFlags, SystemConfig


def add(client, headers, name="Art", **extra):
    body = {"name": name, "icon": "🎨", **extra}
    return client.post("/v1/domains", headers=headers, json=body)


def test_defaults(client, user_headers):
    data = client.get("/v1/domains", headers=user_headers).json()["data"]
    assert [d["id"] for d in data["active"]] == ["health", "faith", "career"]
    assert data["archived"] == []
    assert data["activeCount"] == 3
    assert data["maxActive"] == 5
    assert data["canAdd"] is True


def test_add_custom_domain(client, user_headers):
    resp = add(client, user_headers, items=[{"id": "sketch", "label": "Sketch once"}])
    assert resp.status_code == 201
    domain = resp.json()["data"]
    assert domain["id"] == "custom_1"
    assert domain["xpEnabled"] is False
    assert domain["isCore"] is False


def test_cap_is_enforced(client, user_headers):
    assert add(client, user_headers, "A").status_code == 201
    assert add(client, user_headers, "B").status_code == 201
    resp = add(client, user_headers, "C")
    assert resp.status_code == 409
    assert client.get("/v1/domains", headers=user_headers).json()["data"]["canAdd"] is False


def test_users_are_isolated(client, user_headers):
    add(client, user_headers)
    other = client.get("/v1/domains", headers={"X-User-Id": "someone_else"}).json()["data"]
    assert other["activeCount"] == 3


def test_lifecycle(client, user_headers):
    domain_id = add(client, user_headers).json()["data"]["id"]

    delete_active = client.delete(f"/v1/domains/{domain_id}", headers=user_headers)
    assert delete_active.status_code == 409

    archived = client.post(f"/v1/domains/{domain_id}/archive", headers=user_headers).json()["data"]
    assert [d["id"] for d in archived["archived"]] == [domain_id]
    assert archived["activeCount"] == 3

    restored = client.post(f"/v1/domains/{domain_id}/restore", headers=user_headers).json()["data"]
    assert restored["activeCount"] == 4

    client.post(f"/v1/domains/{domain_id}/archive", headers=user_headers)
    deleted = client.delete(f"/v1/domains/{domain_id}", headers=user_headers)
    assert deleted.status_code == 200
    assert deleted.json()["data"]["archived"] == []


def test_restore_blocked_at_cap(client, user_headers):
    first = add(client, user_headers, "A").json()["data"]["id"]
    client.post(f"/v1/domains/{first}/archive", headers=user_headers)
    add(client, user_headers, "B")
    add(client, user_headers, "C")
    resp = client.post(f"/v1/domains/{first}/restore", headers=user_headers)
    assert resp.status_code == 409


@pytest.mark.parametrize("action", ["archive", "restore"])
def test_core_domain_rules(client, user_headers, action):
    resp = client.post(f"/v1/domains/health/{action}", headers=user_headers)
    assert resp.status_code == 409


def test_core_domain_cannot_be_deleted(client, user_headers):
    assert client.delete("/v1/domains/faith", headers=user_headers).status_code == 409


def test_update_and_items(client, user_headers):
    resp = client.patch("/v1/domains/career", headers=user_headers, json={"name": "Craft"})
    assert resp.json()["data"]["name"] == "Craft"

    items = [{"id": "ship", "label": "Ship one thing"}]
    resp = client.put("/v1/domains/career/items", headers=user_headers, json={"items": items})
    assert resp.json()["data"]["items"] == items

    empty = client.put("/v1/domains/career/items", headers=user_headers, json={"items": []})
    assert empty.status_code == 422


def test_toggle_xp(client, user_headers):
    domain_id = add(client, user_headers).json()["data"]["id"]
    resp = client.post(f"/v1/domains/{domain_id}/xp", headers=user_headers)
    assert resp.json()["data"] == {"id": domain_id, "xpEnabled": True}


def test_unknown_domain(client, user_headers):
    resp = client.patch("/v1/domains/custom_99", headers=user_headers, json={"name": "X"})
    assert resp.status_code == 404


def test_custom_domains_can_be_disabled(client, user_headers):
    config_service.replace_config(SystemConfig(features=FeatureFlags(dynamic_domains=False)).model_dump())
    resp = add(client, user_headers)
    assert resp.status_code == 403
