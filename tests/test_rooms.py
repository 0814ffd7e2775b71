import pytest


@pytest.fixture
def rooms(client, db):
    for body in (
        {"name": "Small", "type": "Standard", "pricePerHour": 20, "capacity": 4},
        {"name": "Party", "type": "Family", "pricePerHour": 45, "capacity": 15},
        {"name": "Gold", "type": "VIP", "pricePerHour": 90, "capacity": 10},
    ):
        client.post("/rooms", json=body)
    db["rooms"].update_one({"roomId": "R002"}, {"$set": {"available": False}})


def ids(resp):
    return [r["roomId"] for r in resp.json()["data"]]


def test_create_room_defaults(client):
    resp = client.post("/rooms", json={"name": "Solo", "type": "Standard", "pricePerHour": 15, "capacity": 2})

    data = resp.json()["data"]
    assert data["roomId"] == "R001"
    assert data["available"] is True
    assert data["equipment"] == []


def test_create_room_requires_fields(client):
    resp = client.post("/rooms", json={"name": "Nameless"})

    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing required fields: type, pricePerHour, capacity"


def test_create_room_rejects_unknown_type(client):
    resp = client.post("/rooms", json={"name": "X", "type": "Penthouse", "pricePerHour": 1, "capacity": 1})

    assert resp.status_code == 400


def test_list_filters(client, rooms):
    assert ids(client.get("/rooms")) == ["R001", "R002", "R003"]
    assert ids(client.get("/rooms", params={"available": "true"})) == ["R001", "R003"]
    assert ids(client.get("/rooms", params={"available": "false"})) == ["R002"]
    assert ids(client.get("/rooms", params={"type": "VIP"})) == ["R003"]
    assert ids(client.get("/rooms", params={"minCapacity": 10})) == ["R002", "R003"]


def test_put_updates_by_body_id(client, rooms):
    resp = client.put("/rooms", json={"roomId": "R001", "pricePerHour": 25})

    assert resp.status_code == 200
    assert client.get("/rooms/R001").json()["data"]["pricePerHour"] == 25


def test_put_without_id_is_400(client, rooms):
    resp = client.put("/rooms", json={"pricePerHour": 25})

    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing required fields: roomId"


def test_edits_cannot_flip_availability(client, rooms):
    client.patch("/rooms/R002", json={"available": True, "name": "Party+"})

    room = client.get("/rooms/R002").json()["data"]
    assert room["name"] == "Party+"
    assert room["available"] is False


def test_patch_missing_room_is_404(client):
    assert client.patch("/rooms/R404", json={"name": "x"}).status_code == 404


def test_delete_room(client, rooms):
    assert client.delete("/rooms").status_code == 400
    assert client.delete("/rooms", params={"roomId": "R404"}).status_code == 404

    resp = client.delete("/rooms", params={"roomId": "R001"})

    assert resp.json() == {"success": True, "message": "Room deleted successfully"}
    assert ids(client.get("/rooms")) == ["R002", "R003"]


def test_null_price_rejected_and_bookings_still_priced(client, rooms, customer):
    resp = client.patch("/rooms/R001", json={"pricePerHour": None, "type": None})

    assert resp.status_code == 400
    assert "cannot be null" in resp.json()["error"]
    room = client.get("/rooms/R001").json()["data"]
    assert room["pricePerHour"] == 20
    assert room["type"] == "Standard"

    booking = client.post("/bookings", json={
        "customerId": customer["customerId"], "roomId": "R001",
        "timeSlot": {"startAt": "2026-03-01T18:00:00", "endAt": "2026-03-01T20:00:00"},
    })
    assert booking.status_code == 200
    assert booking.json()["data"]["totalPrice"] == 40


def test_put_with_null_field_is_400(client, rooms):
    assert client.put("/rooms", json={"roomId": "R001", "capacity": None}).status_code == 400
