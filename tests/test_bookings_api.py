from datetime import date, timedelta

from sqlalchemy import select

from staybook.models import Room

START = date.today() + timedelta(days=30)


def day(offset):
    return (START + timedelta(days=offset)).isoformat()


def create(client, check_in, check_out, room_id=5, property_id=1, traveller_id="user_2abc"):
    return client.post("/api/bookings", json={
        "traveller_id": traveller_id,
        "property_id": property_id,
        "room_id": room_id,
        "check_in": check_in,
        "check_out": check_out,
    })


def room_available(client, room_id):
    db = client.app.state.session_factory()
    try:
        return db.execute(select(Room.available).where(Room.id == room_id)).scalar_one()
    finally:
        db.close()


def test_create_booking(client):
    r = create(client, day(0), day(3))
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    booking = body["booking"]
    assert booking["status"] == "pending"
    assert booking["checkin_status"] == "not_checked_in"
    assert booking["nights"] == 3
    assert float(booking["total_price"]) == 3000.0
    assert booking["check_in"] == day(0)


def test_numeric_traveller_id_is_stored_as_text(client):
    r = create(client, day(0), day(1), traveller_id=42)
    assert r.status_code == 201
    assert r.json()["booking"]["traveller_id"] == "42"


def test_overlap_returns_400(client):
    assert create(client, day(0), day(3)).status_code == 201
    r = create(client, day(2), day(4))
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Room is already booked for the selected dates"}
    assert create(client, day(3), day(5)).status_code == 201


def test_create_validation_errors(client):
    r = create(client, "June 1st", day(3))
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid date format"

    r = create(client, day(3), day(3))
    assert r.status_code == 400
    assert r.json()["message"] == "Check-out date must be after check-in date"

    yesterday = (date.today() - timedelta(days=1)).isoformat()
    r = create(client, yesterday, day(1))
    assert r.status_code == 400
    assert r.json()["message"] == "Check-in date cannot be in the past"

    r = create(client, day(0), day(1), room_id=99)
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Room not found"}


def test_non_string_dates_are_invalid_format(client):
    for bad in (20250601, None):
        r = create(client, bad, day(3))
        assert r.status_code == 400
        assert r.json() == {"success": False, "message": "Invalid date format"}
        r = create(client, day(0), bad)
        assert r.json()["message"] == "Invalid date format"


def test_missing_fields_use_the_error_envelope(client):
    r = client.post("/api/bookings", json={"traveller_id": "u1", "room_id": 5})
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert "property_id" in body["message"]


def test_list_get_and_property_bookings(client):
    first = create(client, day(0), day(2), traveller_id="alice").json()["booking"]
    second = create(client, day(0), day(2), room_id=6, traveller_id="bob").json()["booking"]

    r = client.get("/api/bookings")
    assert r.status_code == 200
    assert [b["id"] for b in r.json()["bookings"]] == [second["id"], first["id"]]

    r = client.get("/api/bookings", params={"traveller_id": "alice"})
    assert [b["id"] for b in r.json()["bookings"]] == [first["id"]]

    r = client.get(f"/api/bookings/{second['id']}")
    assert r.status_code == 200
    detail = r.json()["booking"]
    assert detail["room_name"] == "Room 6"
    assert float(detail["price_per_night"]) == 1500.0
    assert float(detail["total_price"]) == 3000.0
    assert r.json() == client.get(f"/api/bookings/{second['id']}").json()

    r = client.get("/api/bookings/property/1")
    assert len(r.json()["bookings"]) == 2
    r = client.get("/api/bookings/property/2")
    assert r.json() == {"success": True, "bookings": []}


def test_get_missing_booking(client):
    r = client.get("/api/bookings/777")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Booking not found"}


def test_check_availability(client):
    create(client, day(0), day(3))
    r = client.get("/api/bookings/check-availability", params={
        "property_id": 1, "check_in": day(1), "check_out": day(2),
    })
    assert r.status_code == 200
    assert r.json() == {"success": True, "unavailableRoomIds": [5]}

    r = client.get("/api/bookings/check-availability", params={"property_id": 1, "check_in": day(1)})
    assert r.status_code == 400
    assert r.json()["success"] is False

    r = client.get("/api/bookings/check-availability", params={
        "property_id": 2, "check_in": day(1), "check_out": day(2),
    })
    assert r.status_code == 404


def test_status_flow_updates_room_availability(client):
    booking_id = create(client, day(0), day(3)).json()["booking"]["id"]

    r = client.patch(f"/api/bookings/{booking_id}/status", json={"status": "confirmed"})
    assert r.status_code == 200
    assert r.json()["booking"]["status"] == "confirmed"
    assert room_available(client, 5) is False

    r = client.patch(f"/api/bookings/{booking_id}/status", json={"status": "cancelled"})
    assert r.json()["booking"]["status"] == "cancelled"
    assert room_available(client, 5) is True


def test_status_errors(client):
    booking_id = create(client, day(0), day(3)).json()["booking"]["id"]

    r = client.patch(f"/api/bookings/{booking_id}/status", json={"status": "archived"})
    assert r.status_code == 400
    assert r.json()["message"].startswith("Invalid status")

    client.patch(f"/api/bookings/{booking_id}/status", json={"status": "declined"})
    r = client.patch(f"/api/bookings/{booking_id}/status", json={"status": "confirmed"})
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot change booking status from declined to confirmed"

    r = client.patch("/api/bookings/9999/status", json={"status": "confirmed"})
    assert r.status_code == 404


def test_check_in_and_check_out(client):
    booking_id = create(client, day(0), day(3)).json()["booking"]["id"]

    r = client.patch(f"/api/bookings/{booking_id}/check-in")
    assert r.status_code == 400
    assert r.json()["message"] == "Booking must be confirmed before check-in"

    r = client.patch(f"/api/bookings/{booking_id}/check-out")
    assert r.status_code == 400
    assert r.json()["message"] == "Guest has not checked in"

    client.patch(f"/api/bookings/{booking_id}/status", json={"status": "confirmed"})
    r = client.patch(f"/api/bookings/{booking_id}/check-in")
    assert r.status_code == 200
    assert r.json()["booking"]["checkin_status"] == "checked_in"

    r = client.patch(f"/api/bookings/{booking_id}/check-in")
    assert r.status_code == 400
    assert r.json()["message"] == "Guest has already checked in"

    r = client.patch(f"/api/bookings/{booking_id}/check-out")
    assert r.status_code == 200
    assert r.json()["booking"]["checkin_status"] == "checked_out"
    assert room_available(client, 5) is True

    assert client.patch("/api/bookings/404/check-in").status_code == 404


def test_traveller_cancellation(client):
    booking_id = create(client, day(0), day(3)).json()["booking"]["id"]
    client.patch(f"/api/bookings/{booking_id}/status", json={"status": "confirmed"})

    r = client.post("/api/guesthouse-cancellations/cancel", json={"id": booking_id})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Booking cancelled successfully"
    assert body["booking"]["status"] == "cancelled"
    assert room_available(client, 5) is True

    r = client.post("/api/guesthouse-cancellations/cancel", json={})
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Booking ID is required"}

    r = client.post("/api/guesthouse-cancellations/cancel", json={"id": 4040})
    assert r.status_code == 404


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}
