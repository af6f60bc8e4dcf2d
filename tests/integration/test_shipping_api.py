"""Integration tests for shipping method endpoints."""

COURIER = {"name": "Courier", "name_localized": "Kurier", "cost": 200.0, "estimated_days": "1-2"}


def _create(client, admin, **overrides):
    response = client.post("/api/shipping-methods", json={**COURIER, **overrides}, headers=admin)
    assert response.status_code == 201
    return response.json()


def test_create_and_list(client, admin):
    created = _create(client, admin)
    _create(client, admin, name="Pickup", cost=0.0, active=False)

    assert created["name_localized"] == "Kurier"
    assert len(client.get("/api/shipping-methods").json()) == 2
    active = client.get("/api/shipping-methods", params={"active_only": True}).json()
    assert [m["name"] for m in active] == ["Courier"]


def test_update(client, admin):
    created = _create(client, admin)
    response = client.patch(f"/api/shipping-methods/{created['id']}", json={"cost": 250.0}, headers=admin)
    assert response.json()["cost"] == 250.0
    assert response.json()["name"] == "Courier"


def test_delete(client, admin):
    created = _create(client, admin)
    assert client.delete(f"/api/shipping-methods/{created['id']}", headers=admin).status_code == 200
    assert client.get(f"/api/shipping-methods/{created['id']}").status_code == 404


def test_delete_in_use_conflicts(client, admin, place_order):
    created = _create(client, admin)
    place_order(shipping_method_id=created["id"])

    response = client.delete(f"/api/shipping-methods/{created['id']}", headers=admin)
    assert response.status_code == 409
    assert response.json()["order_count"] == 1


def test_negative_cost_rejected(client, admin):
    response = client.post("/api/shipping-methods", json={**COURIER, "cost": -1}, headers=admin)
    assert response.status_code == 400
