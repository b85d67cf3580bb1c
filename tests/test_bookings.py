from gameplane.models import Booking, User

BOOKING = {
    "user": "alice@example.com",
    "courtId": 1,
    "courtName": "Court A",
    "courtType": "tennis",
    "slots": [{"startTime": "09:00", "endTime": "10:00"}],
    "price": 20,
    "date": "2026-11-02",
}


def test_create_booking_is_pending(client, seed, reload, alice_headers):
    court_id = seed.court()

    response = client.post("/bookings", json={**BOOKING, "courtId": court_id}, headers=alice_headers)

    booking = reload(Booking, response.json()["insertedId"])
    assert booking.status == "pending"
    assert booking.slots == [{"startTime": "09:00", "endTime": "10:00"}]
    assert booking.date == "2026-11-02"


def test_create_booking_requires_token(client, session_factory):
    response = client.post("/bookings", json=BOOKING)

    assert response.status_code == 401
    with session_factory() as db:
        assert db.query(Booking).count() == 0


def test_list_own_bookings_filters_by_status(client, seed, alice_headers):
    court_id = seed.court()
    seed.booking(court_id, status="pending")
    approved_id = seed.booking(court_id, status="approved")
    seed.booking(court_id, user="bob@example.com", status="approved")

    response = client.get(
        "/bookings", params={"email": "alice@example.com", "status": "approved"}, headers=alice_headers
    )

    assert [b["id"] for b in response.json()] == [approved_id]


def test_cannot_list_someone_elses_bookings(client, alice_headers):
    response = client.get("/bookings", params={"email": "bob@example.com"}, headers=alice_headers)

    assert response.status_code == 403


def test_withdraw_pending_booking(client, seed, reload, alice_headers):
    booking_id = seed.booking(seed.court())

    response = client.delete(
        f"/bookings/{booking_id}", params={"email": "alice@example.com"}, headers=alice_headers
    )

    assert response.json() == {"deletedCount": 1}
    assert reload(Booking, booking_id) is None


def test_confirmed_booking_cannot_be_withdrawn(client, seed, reload, alice_headers):
    booking_id = seed.booking(seed.court(), status="confirmed")

    response = client.delete(
        f"/bookings/{booking_id}", params={"email": "alice@example.com"}, headers=alice_headers
    )

    assert response.json() == {"deletedCount": 0}
    assert reload(Booking, booking_id) is not None


def test_cannot_withdraw_someone_elses_booking(client, seed, reload, bob_headers):
    booking_id = seed.booking(seed.court(), user="alice@example.com")

    response = client.delete(
        f"/bookings/{booking_id}", params={"email": "bob@example.com"}, headers=bob_headers
    )

    assert response.json() == {"deletedCount": 0}
    assert reload(Booking, booking_id) is not None


def test_approval_promotes_user_to_member(client, seed, reload, admin_headers):
    user_id = seed.user("alice@example.com")
    booking_id = seed.booking(seed.court())

    response = client.patch(f"/bookings/{booking_id}", json={"status": "approved"}, headers=admin_headers)

    assert response.json() == {"modifiedCount": 1, "promoted": True}
    assert reload(Booking, booking_id).status == "approved"
    user = reload(User, user_id)
    assert user.role == "member"
    assert user.member_since is not None


def test_approval_does_not_demote_admin(client, seed, reload, admin_headers):
    booking_id = seed.booking(seed.court(), user="admin@example.com")

    response = client.patch(f"/bookings/{booking_id}", json={"status": "approved"}, headers=admin_headers)

    assert response.json()["promoted"] is False
    with_admin = client.get("/allUsers", params={"search": "admin"}, headers=admin_headers).json()
    assert with_admin[0]["role"] == "admin"


def test_rejection_keeps_role(client, seed, reload, admin_headers):
    user_id = seed.user("alice@example.com")
    booking_id = seed.booking(seed.court())

    response = client.patch(f"/bookings/{booking_id}", json={"status": "rejected"}, headers=admin_headers)

    assert response.json() == {"modifiedCount": 1, "promoted": False}
    assert reload(User, user_id).role == "user"


def test_invalid_review_status(client, seed, reload, admin_headers):
    booking_id = seed.booking(seed.court())

    response = client.patch(f"/bookings/{booking_id}", json={"status": "confirmed"}, headers=admin_headers)

    assert response.status_code == 400
    assert reload(Booking, booking_id).status == "pending"


def test_only_pending_bookings_can_be_reviewed(client, seed, admin_headers):
    booking_id = seed.booking(seed.court(), status="confirmed")

    response = client.patch(f"/bookings/{booking_id}", json={"status": "rejected"}, headers=admin_headers)

    assert response.status_code == 400


def test_reviewing_missing_booking(client, admin_headers):
    response = client.patch("/bookings/999", json={"status": "approved"}, headers=admin_headers)

    assert response.json() == {"modifiedCount": 0}


def test_admin_search_by_court_name(client, seed, admin_headers):
    court_id = seed.court()
    seed.booking(court_id, court_name="Court A")
    other = seed.booking(court_id, court_name="Center Court", user="bob@example.com")

    response = client.get("/manage/bookings", params={"search": "center"}, headers=admin_headers)

    assert [b["id"] for b in response.json()] == [other]


def test_booking_with_blank_user_is_bad_request(client, seed, session_factory, alice_headers):
    court_id = seed.court()

    response = client.post("/bookings", json={**BOOKING, "user": "", "courtId": court_id}, headers=alice_headers)

    assert response.status_code == 400
    with session_factory() as db:
        assert db.query(Booking).count() == 0
