from flask import Blueprint, request, jsonify, g

from services.availability import is_slot_available, list_slots
from services.booking import create_booking, list_user_bookings, transition_booking, user_booking_stats
from services.errors import ConflictError
from utils.auth_context import login_required
from utils.audit import log_event
from routes.serializers import booking_json

booking_bp = Blueprint("booking", __name__)


# ---------- PUBLIC: view a court's day grid ----------
@booking_bp.get("/courts/<int:court_id>/slots")
def court_slots(court_id: int):
    date_str = request.args.get("date")
    slots = list_slots(court_id, date_str)
    return jsonify(court_id=court_id, date=date_str, slots=slots), 200


@booking_bp.get("/courts/<int:court_id>/availability")
def court_availability(court_id: int):
    available = is_slot_available(
        court_id,
        request.args.get("date"),
        request.args.get("start_time"),
        request.args.get("end_time"),
    )
    return jsonify(court_id=court_id, available=available), 200


# ---------- PLAYERS: request a booking ----------
@booking_bp.post("/bookings")
@login_required
def create_booking_route():
    data = request.get_json(silent=True) or {}
    try:
        booking = create_booking(
            g.user,
            data.get("court_id"),
            data.get("date"),
            data.get("start_time"),
            data.get("end_time"),
            data.get("total_amount"),
            notes=data.get("notes"),
        )
    except ConflictError as exc:
        log_event(
            "BOOKING_FAIL_UNAVAILABLE",
            user_id=g.user.id,
            entity="court",
            entity_id=data.get("court_id"),
            metadata={"reason": exc.reason, "date": data.get("date"), "start_time": data.get("start_time")},
        )
        raise

    log_event("BOOKING_CREATE", user_id=g.user.id, entity="booking", entity_id=booking.id,
              metadata={"court_id": booking.court_id})
    return jsonify(booking_json(booking)), 201


# ---------- PLAYERS: view my bookings ----------
@booking_bp.get("/bookings")
@login_required
def my_bookings():
    # optional: status filter (PENDING/CONFIRMED/CANCELLED/upcoming/completed)
    rows = list_user_bookings(g.user, request.args.get("status"))
    return jsonify([booking_json(b) for b in rows]), 200


@booking_bp.get("/user/stats")
@login_required
def my_stats():
    return jsonify(user_booking_stats(g.user)), 200


# ---------- OWNERS: confirm or cancel a pending booking ----------
@booking_bp.patch("/bookings/<int:booking_id>")
@login_required
def update_booking(booking_id: int):
    data = request.get_json(silent=True) or {}
    booking = transition_booking(booking_id, g.user, data.get("action"))

    log_event(f"BOOKING_{booking.status}", user_id=g.user.id, entity="booking", entity_id=booking.id)
    return jsonify(
        message=f"Booking {booking.status.lower()} successfully",
        booking=booking_json(booking),
    ), 200
