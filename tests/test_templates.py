"""Template endpoints."""
from datetime import datetime


def _ts(value):
    return datetime.fromisoformat(value)


def _create(client, **overrides):
    body = {"name": "Pricing Request", "category": "pricing", "content": "Thanks for reaching out."}
    body.update(overrides)
    return client.post("/api/templates", json=body)


def test_list_templates_requires_demo_owner(client):
    response = client.get("/api/templates")
    assert response.status_code == 404
    data = response.json()
    assert data["detail"] == "User not found"
    assert "correlation_id" in data


def test_create_template_applies_defaults(client, owner):
    response = _create(client)
    assert response.status_code == 201
    data = response.json()
    assert data["userId"] == owner.id
    assert data["variables"] == []
    assert data["isActive"] is True
    assert data["successRate"] == 0
    assert data["timesUsed"] == 0
    assert data["subject"] is None
    assert data["createdAt"] == data["updatedAt"]

    listed = client.get("/api/templates").json()
    assert [t["id"] for t in listed] == [data["id"]]


def test_create_template_rejects_missing_name(client, owner):
    response = client.post("/api/templates", json={"category": "pricing", "content": "x"})
    assert response.status_code == 400
    data = response.json()
    assert "name" in data["detail"]
    assert data["errors"]


def test_update_template_partial(client, owner):
    created = _create(client, variables=["budget"]).json()
    response = client.put(f"/api/templates/{created['id']}", json={"isActive": False})
    assert response.status_code == 200
    data = response.json()
    assert data["isActive"] is False
    assert data["variables"] == ["budget"]
    assert data["content"] == created["content"]
    assert _ts(data["updatedAt"]) > _ts(created["updatedAt"])


def test_update_template_empty_body_advances_updated_at(client, owner):
    created = _create(client).json()
    data = client.put(f"/api/templates/{created['id']}", json={}).json()
    assert _ts(data["updatedAt"]) > _ts(created["updatedAt"])
    assert data["id"] == created["id"]


def test_update_template_null_required_field_rejected(client, owner):
    created = _create(client).json()
    response = client.put(f"/api/templates/{created['id']}", json={"content": None})
    assert response.status_code == 400
    assert client.get("/api/templates").json()[0]["content"] == created["content"]


def test_update_missing_template(client, owner):
    response = client.put("/api/templates/nope", json={"name": "x"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Template not found"


def test_delete_template_twice(client, owner):
    created = _create(client).json()
    first = client.delete(f"/api/templates/{created['id']}")
    assert first.status_code == 204
    second = client.delete(f"/api/templates/{created['id']}")
    assert second.status_code == 404
