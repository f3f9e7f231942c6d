from flask import Blueprint, jsonify, g, request

from models import db
from models.booking import Booking
from models.court import Court
from models.venue import Venue
from security.rbac import require_roles
from services.access import require_venue_owner
from services.availability import set_weekly_windows
from services.booking import block_slot, list_owner_bookings, owner_stats
from services.errors import NotFoundError
from utils.audit import log_event
from routes.serializers import blocked_slot_json, booking_json, court_json

owner_bp = Blueprint("owner", __name__, url_prefix="/owner")


def _get_owned_court(court_id: int) -> Court:
    court = db.session.get(Court, court_id)
    if court is None:
        raise NotFoundError("Court not found")
    require_venue_owner(g.user, court.venue)
    return court


@owner_bp.get("/venues")
@require_roles("OWNER")
def my_venues():
    venues = (
        Venue.query
        .filter_by(owner_id=g.user.id)
        .order_by(Venue.created_at.desc())
        .all()
    )
    court_ids = [c.id for v in venues for c in v.courts]
    live = (
        Booking.query
        .filter(Booking.court_id.in_(court_ids), Booking.status != "CANCELLED")
        .all()
    ) if court_ids else []

    out = []
    for v in venues:
        ids = {c.id for c in v.courts}
        rows = [b for b in live if b.court_id in ids]
        out.append({
            "id": v.id,
            "name": v.name,
            "location": v.location,
            "description": v.description,
            "is_active": v.is_active,
            "created_at": v.created_at.isoformat(),
            "courts": [court_json(c, with_availability=True) for c in v.courts],
            "active_courts": sum(1 for c in v.courts if c.is_active),
            "total_bookings": len(rows),
            "total_revenue": sum(b.total_amount for b in rows),
        })
    return jsonify(out), 200


@owner_bp.get("/stats")
@require_roles("OWNER")
def stats():
    return jsonify(owner_stats(g.user)), 200


@owner_bp.get("/bookings")
@require_roles("OWNER")
def owner_bookings():
    pending, recent = list_owner_bookings(g.user)
    log_event("OWNER_BOOKINGS_VIEW", user_id=g.user.id)
    return jsonify(
        pending=[booking_json(b) for b in pending],
        recent=[booking_json(b) for b in recent],
    ), 200


@owner_bp.put("/courts/<int:court_id>/availability")
@require_roles("OWNER")
def update_availability(court_id: int):
    data = request.get_json(silent=True) or {}
    court = set_weekly_windows(g.user, court_id, data.get("windows"))

    log_event("COURT_AVAILABILITY_UPDATE", user_id=g.user.id, entity="court", entity_id=court.id,
              metadata={"windows": len(court.availability)})
    return jsonify(court_json(court, with_availability=True)), 200


@owner_bp.post("/courts/<int:court_id>/blocked-slots")
@require_roles("OWNER")
def create_blocked_slot(court_id: int):
    data = request.get_json(silent=True) or {}
    blocked = block_slot(
        g.user,
        court_id,
        data.get("date"),
        data.get("start_time"),
        data.get("end_time"),
        reason=data.get("reason"),
    )

    log_event("SLOT_BLOCK", user_id=g.user.id, entity="blocked_slot", entity_id=blocked.id)
    return jsonify(blocked_slot_json(blocked)), 201


@owner_bp.post("/courts/<int:court_id>/deactivate")
@require_roles("OWNER")
def deactivate_court(court_id: int):
    court = _get_owned_court(court_id)
    court.is_active = False
    db.session.commit()

    log_event("COURT_DEACTIVATE", user_id=g.user.id, entity="court", entity_id=court.id)
    return jsonify(message="Court deactivated"), 200
