from models import db
from models.audit_log import AuditLog
from models.blocked_slot import BlockedSlot
from models.court import Court
from models.user import User
from tests.conftest import future_day


def _booking_body(court, day, start="10:00", end="11:00"):
    return {"court_id": court.id, "date": day, "start_time": start, "end_time": end, "total_amount": 40}


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}
    assert resp.headers["X-Frame-Options"] == "DENY"


def test_booking_requires_session(client, court):
    resp = client.post("/bookings", json=_booking_body(court, future_day()))
    assert resp.status_code == 401


def test_session_cookie_is_accepted(app, client, court, player):
    from security.session import create_session

    client.set_cookie(app.config["AUTH_COOKIE_NAME"], create_session(player.id))
    resp = client.post("/bookings", json=_booking_body(court, future_day()))
    assert resp.status_code == 201


def test_booking_flow(client, court, owner, player, other_player, auth_headers, sent_emails):
    day = future_day()

    resp = client.post("/bookings", json=_booking_body(court, day), headers=auth_headers(player))
    assert resp.status_code == 201
    booking = resp.get_json()
    assert booking["status"] == "PENDING"
    assert booking["start_time"] == "10:00"
    assert booking["venue_name"] == "Center Courts"

    # same slot again: distinct conflict response
    resp = client.post("/bookings", json=_booking_body(court, day), headers=auth_headers(other_player))
    assert resp.status_code == 409
    assert resp.get_json()["reason"] == "already_booked"

    # a different owner may not confirm
    resp = client.patch(f"/bookings/{booking['id']}", json={"action": "CONFIRMED"},
                        headers=auth_headers(other_player))
    assert resp.status_code == 403

    resp = client.patch(f"/bookings/{booking['id']}", json={"action": "CONFIRMED"}, headers=auth_headers(owner))
    assert resp.status_code == 200
    assert resp.get_json()["booking"]["status"] == "CONFIRMED"
    assert BlockedSlot.query.filter_by(booking_id=booking["id"]).count() == 1

    resp = client.patch(f"/bookings/{booking['id']}", json={"action": "CANCELLED"}, headers=auth_headers(owner))
    assert resp.status_code == 400
    assert resp.get_json()["reason"] == "already_processed"

    resp = client.get("/bookings?status=upcoming", headers=auth_headers(player))
    assert [b["id"] for b in resp.get_json()] == [booking["id"]]

    actions = {row.action for row in AuditLog.query.all()}
    assert {"BOOKING_CREATE", "BOOKING_FAIL_UNAVAILABLE", "BOOKING_CONFIRMED"} <= actions
    assert len(sent_emails) == 2


def test_invalid_booking_payload(client, court, player, auth_headers):
    body = _booking_body(court, "tomorrow")
    resp = client.post("/bookings", json=body, headers=auth_headers(player))
    assert resp.status_code == 400
    assert resp.get_json()["reason"] == "invalid_input"


def test_banned_user_gets_forbidden(client, court, make_user, auth_headers):
    banned = make_user("banned@example.com", "USER", banned=True)
    resp = client.post("/bookings", json=_booking_body(court, future_day()), headers=auth_headers(banned))
    assert resp.status_code == 403
    assert resp.get_json()["reason"] == "account_suspended"

    # reads on their own data are refused too
    for path in ("/bookings", "/user/stats", "/user/join-requests"):
        resp = client.get(path, headers=auth_headers(banned))
        assert resp.status_code == 403
        assert resp.get_json()["reason"] == "account_suspended"


def test_slots_endpoint(client, court, player, auth_headers):
    day = future_day()
    client.post("/bookings", json=_booking_body(court, day), headers=auth_headers(player))

    resp = client.get(f"/courts/{court.id}/slots?date={day}")
    assert resp.status_code == 200
    slots = {s["start_time"]: s["available"] for s in resp.get_json()["slots"]}
    assert slots["10:00"] is False
    assert slots["11:00"] is True

    resp = client.get(f"/courts/{court.id}/availability",
                      query_string={"date": day, "start_time": "10:30", "end_time": "11:30"})
    assert resp.get_json()["available"] is False


def test_owner_creates_venue_and_manages_court(client, owner, player, auth_headers):
    body = {
        "name": "Lakeside Club",
        "location": "North Shore",
        "courts": [{"name": "Court A", "sport": "pickleball", "price_per_hour": 30}],
    }
    resp = client.post("/venues", json=body, headers=auth_headers(player))
    assert resp.status_code == 403

    resp = client.post("/venues", json=body, headers=auth_headers(owner))
    assert resp.status_code == 201
    venue = resp.get_json()
    court_id = venue["courts"][0]["id"]
    assert venue["courts"][0]["sport"] == "Pickleball"

    windows = {"windows": [{"day_of_week": d, "start_time": "06:00", "end_time": "12:00"} for d in range(7)]}
    resp = client.put(f"/owner/courts/{court_id}/availability", json=windows, headers=auth_headers(owner))
    assert resp.status_code == 200
    assert len(resp.get_json()["availability"]) == 7

    resp = client.post(f"/owner/courts/{court_id}/blocked-slots",
                       json={"date": future_day(), "start_time": "06:00", "end_time": "08:00", "reason": "Repairs"},
                       headers=auth_headers(owner))
    assert resp.status_code == 201

    resp = client.get(f"/venues/{venue['id']}")
    assert resp.get_json()["courts"][0]["availability"][0]["start_time"] == "06:00"

    resp = client.post(f"/owner/courts/{court_id}/deactivate", headers=auth_headers(owner))
    assert resp.status_code == 200
    assert db.session.get(Court, court_id).is_active is False


def test_owner_dashboard(client, court, owner, player, auth_headers):
    day = future_day()
    first = client.post("/bookings", json=_booking_body(court, day), headers=auth_headers(player)).get_json()
    client.post("/bookings", json=_booking_body(court, day, "12:00", "13:00"), headers=auth_headers(player))
    client.patch(f"/bookings/{first['id']}", json={"action": "CONFIRMED"}, headers=auth_headers(owner))

    resp = client.get("/owner/bookings", headers=auth_headers(owner))
    data = resp.get_json()
    assert len(data["pending"]) == 1
    assert [b["id"] for b in data["recent"]] == [first["id"]]

    resp = client.get("/owner/venues", headers=auth_headers(owner))
    venue = resp.get_json()[0]
    assert venue["total_bookings"] == 2
    assert venue["total_revenue"] == 80

    assert client.get("/owner/bookings", headers=auth_headers(player)).status_code == 403


def test_play_together_flow(client, player, other_player, auth_headers):
    resp = client.post("/invites", json={
        "venue": "City Sports Hall",
        "sport": "basketball",
        "date": future_day(),
        "time": "19:00",
        "players_required": 3,
        "contact_details": "pat@example.com",
    }, headers=auth_headers(player))
    assert resp.status_code == 201
    invite = resp.get_json()
    assert invite["players_left"] == 3

    # anonymous join
    resp = client.post(f"/invites/{invite['id']}/join",
                       json={"joiner_name": "Walk-in", "contact_details": "555-0101", "players_count": 2})
    assert resp.status_code == 201
    anon_request = resp.get_json()["request"]

    resp = client.post(f"/invites/{invite['id']}/join",
                       json={"joiner_name": "Olly", "contact_details": "olly@example.com", "players_count": 4},
                       headers=auth_headers(other_player))
    assert resp.status_code == 400
    assert resp.get_json()["reason"] == "capacity_exceeded"

    resp = client.get(f"/invites/{invite['id']}/requests", headers=auth_headers(other_player))
    assert resp.status_code == 403

    resp = client.patch(f"/requests/{anon_request['id']}/accept", headers=auth_headers(player))
    assert resp.status_code == 200
    assert resp.get_json()["invite"]["players_joined"] == 2
    assert resp.get_json()["invite"]["players_left"] == 1

    resp = client.patch(f"/requests/{anon_request['id']}/decline", headers=auth_headers(player))
    assert resp.status_code == 400

    resp = client.get("/user/my-invites", headers=auth_headers(player))
    mine = resp.get_json()
    assert mine[0]["players_joined"] == 2
    assert [r["status"] for r in mine[0]["requests"]] == ["ACCEPTED"]


def test_admin_ban(client, admin, player, auth_headers):
    resp = client.post(f"/admin/users/{player.id}/ban", json={"is_banned": True}, headers=auth_headers(admin))
    assert resp.status_code == 200
    assert db.session.get(User, player.id).is_banned is True

    resp = client.post(f"/admin/users/{player.id}/ban", json={"is_banned": "yes"}, headers=auth_headers(admin))
    assert resp.status_code == 400

    resp = client.post(f"/admin/users/{admin.id}/ban", json={"is_banned": True}, headers=auth_headers(player))
    assert resp.status_code == 403
    assert resp.get_json()["reason"] == "account_suspended"


def test_stats_endpoints(client, court, owner, player, auth_headers):
    day = future_day()
    first = client.post("/bookings", json=_booking_body(court, day), headers=auth_headers(player)).get_json()
    client.post("/bookings", json=_booking_body(court, day, "12:00", "13:00"), headers=auth_headers(player))
    client.patch(f"/bookings/{first['id']}", json={"action": "CONFIRMED"}, headers=auth_headers(owner))

    resp = client.get("/user/stats", headers=auth_headers(player))
    assert resp.status_code == 200
    assert resp.get_json() == {
        "total_bookings": 2,
        "total_spent": 80,
        "upcoming_bookings": 1,
        "completed_bookings": 0,
    }

    resp = client.get("/owner/stats", headers=auth_headers(owner))
    assert resp.status_code == 200
    assert resp.get_json() == {
        "total_bookings": 2,
        "total_revenue": 80,
        "active_venues": 1,
        "active_courts": 1,
    }

    assert client.get("/user/stats").status_code == 401
    assert client.get("/owner/stats", headers=auth_headers(player)).status_code == 403


def test_venue_description_must_be_text(client, owner, auth_headers):
    resp = client.post("/venues", json={"name": "Lakeside Club", "location": "North Shore", "description": 42},
                       headers=auth_headers(owner))
    assert resp.status_code == 400
    assert resp.get_json()["reason"] == "invalid_input"


def test_invite_cancel(client, player, other_player, auth_headers):
    invite = client.post("/invites", json={
        "venue": "City Sports Hall",
        "date": future_day(),
        "time": "19:00",
        "players_required": 2,
        "contact_details": "pat@example.com",
    }, headers=auth_headers(player)).get_json()

    resp = client.post(f"/invites/{invite['id']}/cancel", headers=auth_headers(other_player))
    assert resp.status_code == 403

    resp = client.post(f"/invites/{invite['id']}/cancel", headers=auth_headers(player))
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "CANCELLED"
    assert client.get("/invites").get_json() == []

    resp = client.post(f"/invites/{invite['id']}/join",
                       json={"joiner_name": "Sam", "contact_details": "sam@example.com", "players_count": 1})
    assert resp.status_code == 400
    assert resp.get_json()["reason"] == "invite_closed"
