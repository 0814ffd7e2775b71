import pytest

SLOT = {"startAt": "2026-03-01T18:00:00", "endAt": "2026-03-01T21:00:00"}


def book(client, customer, room, **overrides):
    body = {"customerId": customer["customerId"], "roomId": room["roomId"], "timeSlot": SLOT}
    body.update(overrides)
    return client.post("/bookings", json=body)


def room_available(client, room_id):
    return client.get(f"/rooms/{room_id}").json()["data"]["available"]


class TestCreateBooking:
    def test_first_booking_is_b001(self, client, customer, room):
        resp = book(client, customer, room)

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["bookingId"] == "B001"
        assert body["data"]["status"] == "Pending"

    def test_id_follows_last_booking(self, client, db, customer, room):
        db["bookings"].insert_one({"bookingId": "B021", "roomId": room["roomId"], "status": "Completed"})

        resp = book(client, customer, room)

        assert resp.json()["data"]["bookingId"] == "B022"

    def test_duration_and_price_computed_on_create(self, client, customer, room):
        data = book(client, customer, room).json()["data"]

        assert data["duration"] == 3
        assert data["totalPrice"] == 150
        assert data["bookingAt"].startswith("2026-03-01T18:00:00")

    def test_occupying_status_takes_room(self, client, customer, room):
        book(client, customer, room, status="Confirmed")

        assert room_available(client, room["roomId"]) is False

    def test_pending_leaves_room_free(self, client, customer, room):
        book(client, customer, room)

        assert room_available(client, room["roomId"]) is True

    def test_unknown_room_is_404(self, client, customer, room):
        resp = book(client, customer, {"roomId": "R999"})

        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Room not found"}

    def test_inverted_time_slot_is_400(self, client, customer, room):
        resp = book(client, customer, room, timeSlot={"startAt": SLOT["endAt"], "endAt": SLOT["startAt"]})

        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_malformed_time_slot_is_400(self, client, customer, room):
        resp = book(client, customer, room, timeSlot={"startAt": "tonight", "endAt": SLOT["endAt"]})

        assert resp.status_code == 400
        assert "timeSlot" in resp.json()["error"]

    def test_missing_fields_are_listed(self, client):
        resp = client.post("/bookings", json={"timeSlot": SLOT})

        assert resp.status_code == 400
        assert resp.json()["error"] == "Missing required fields: customerId, roomId"


class TestUpdateBooking:
    def test_pending_to_active_takes_room(self, client, customer, room):
        booking_id = book(client, customer, room).json()["data"]["bookingId"]

        resp = client.put(f"/bookings/{booking_id}", json={"status": "Active"})

        assert resp.status_code == 200
        assert resp.json()["data"]["status"] == "Active"
        assert room_available(client, room["roomId"]) is False

    def test_cancelling_active_booking_frees_room(self, client, customer, room):
        booking_id = book(client, customer, room, status="Active").json()["data"]["bookingId"]
        assert room_available(client, room["roomId"]) is False

        client.put(f"/bookings/{booking_id}", json={"status": "Cancelled"})

        assert room_available(client, room["roomId"]) is True

    def test_status_change_moves_room(self, client, customer, room):
        other = client.post(
            "/rooms", json={"name": "Room B", "type": "Family", "pricePerHour": 80, "capacity": 12}
        ).json()["data"]
        booking_id = book(client, customer, room, status="Confirmed").json()["data"]["bookingId"]

        client.put(f"/bookings/{booking_id}", json={"status": "Active", "roomId": other["roomId"]})

        assert room_available(client, room["roomId"]) is True
        assert room_available(client, other["roomId"]) is False

    def test_same_status_does_not_touch_rooms(self, client, db, customer, room):
        booking_id = book(client, customer, room, status="Active").json()["data"]["bookingId"]
        db["rooms"].update_one({"roomId": room["roomId"]}, {"$set": {"available": True}})

        client.put(f"/bookings/{booking_id}", json={"status": "Active"})

        assert room_available(client, room["roomId"]) is True

    def test_new_time_slot_recomputes_price(self, client, db, customer, room):
        booking_id = book(client, customer, room).json()["data"]["bookingId"]
        db["rooms"].update_one({"roomId": room["roomId"]}, {"$set": {"pricePerHour": 60}})

        resp = client.put(
            f"/bookings/{booking_id}",
            json={"timeSlot": {"startAt": "2026-03-02T20:00:00", "endAt": "2026-03-02T21:30:00"}},
        )

        data = resp.json()["data"]
        assert data["duration"] == 1.5
        assert data["totalPrice"] == 90
        assert data["bookingAt"].startswith("2026-03-02T20:00:00")

    def test_status_only_keeps_price(self, client, customer, room):
        booking_id = book(client, customer, room).json()["data"]["bookingId"]

        data = client.put(f"/bookings/{booking_id}", json={"status": "Confirmed"}).json()["data"]

        assert data["totalPrice"] == 150
        assert data["customerId"] == customer["customerId"]

    def test_unknown_booking_is_404(self, client):
        resp = client.put("/bookings/B404", json={"status": "Active"})

        assert resp.status_code == 404
        assert resp.json()["error"] == "Booking not found"

    def test_invalid_status_is_400(self, client, customer, room):
        booking_id = book(client, customer, room).json()["data"]["bookingId"]

        resp = client.put(f"/bookings/{booking_id}", json={"status": "Sleeping"})

        assert resp.status_code == 400


class TestDeleteBooking:
    def test_deleting_active_booking_frees_room(self, client, customer, room):
        booking_id = book(client, customer, room, status="Active").json()["data"]["bookingId"]

        resp = client.delete(f"/bookings/{booking_id}")

        assert resp.status_code == 200
        assert resp.json()["message"] == f"Booking {booking_id} deleted successfully"
        assert room_available(client, room["roomId"]) is True
        assert client.get(f"/bookings/{booking_id}").status_code == 404

    def test_deleting_missing_booking_leaves_rooms_alone(self, client, db, room):
        db["rooms"].update_one({"roomId": room["roomId"]}, {"$set": {"available": False}})
        before = db["rooms"].find_one({"roomId": room["roomId"]})

        resp = client.delete("/bookings/B404")

        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Booking not found"}
        after = db["rooms"].find_one({"roomId": room["roomId"]})
        assert after == before


class TestListBookings:
    @pytest.fixture
    def bookings(self, client, customer, room):
        book(client, customer, room)
        book(client, customer, room, status="Active",
             timeSlot={"startAt": "2026-03-05T18:00:00", "endAt": "2026-03-05T19:00:00"})

    def test_lists_all_sorted_by_id(self, client, bookings):
        body = client.get("/bookings").json()

        assert body["count"] == 2
        assert [b["bookingId"] for b in body["data"]] == ["B001", "B002"]

    def test_filters_by_status(self, client, bookings):
        body = client.get("/bookings", params={"status": "Active"}).json()

        assert [b["bookingId"] for b in body["data"]] == ["B002"]

    def test_filters_by_date(self, client, bookings):
        body = client.get("/bookings", params={"date": "2026-03-01"}).json()

        assert [b["bookingId"] for b in body["data"]] == ["B001"]

    def test_bad_date_is_400(self, client, bookings):
        assert client.get("/bookings", params={"date": "03/01/2026"}).status_code == 400

    def test_get_returns_envelope(self, client, bookings):
        body = client.get("/bookings/B002").json()

        assert body["success"] is True
        assert body["data"]["status"] == "Active"
        assert isinstance(body["data"]["_id"], str)
