from flask import Blueprint, request, jsonify, g

from models import db
from models.court import Court
from models.venue import Venue
from security.rbac import require_roles
from services.errors import NotFoundError, ValidationError
from services.invites import normalize_sport
from services.validation import require_int, require_text
from utils.audit import log_event
from routes.serializers import court_json

venue_bp = Blueprint("venue", __name__, url_prefix="/venues")


def _venue_json(v, courts):
    return {
        "id": v.id,
        "owner_id": v.owner_id,
        "name": v.name,
        "location": v.location,
        "description": v.description,
        "created_at": v.created_at.isoformat(),
        "courts": courts,
    }


def _build_courts(raw_courts):
    if raw_courts is None:
        return []
    if not isinstance(raw_courts, list):
        raise ValidationError("courts must be a list")

    courts = []
    for item in raw_courts:
        if not isinstance(item, dict):
            raise ValidationError("each court needs a name, sport and price_per_hour")
        description = item.get("description")
        courts.append(Court(
            name=require_text(item.get("name"), "court name", max_length=120),
            sport=normalize_sport(item.get("sport")),
            description=(description.strip() or None) if isinstance(description, str) else None,
            price_per_hour=require_int(item.get("price_per_hour"), "price_per_hour"),
            slot_duration=require_int(item.get("slot_duration", 60), "slot_duration", minimum=15),
            is_active=True,
        ))
    return courts


@venue_bp.post("")
@require_roles("OWNER")
def create_venue():
    data = request.get_json(silent=True) or {}
    name = require_text(data.get("name"), "name", max_length=120)
    location = require_text(data.get("location"), "location", max_length=160)
    description = data.get("description")
    if description is not None and not isinstance(description, str):
        raise ValidationError("description must be text")
    description = (description or "").strip() or None
    courts = _build_courts(data.get("courts"))

    venue = Venue(owner_id=g.user.id, name=name, location=location, description=description)
    venue.courts = courts
    db.session.add(venue)
    db.session.commit()

    log_event("VENUE_CREATE", user_id=g.user.id, entity="venue", entity_id=venue.id,
              metadata={"courts": len(courts)})
    return jsonify(_venue_json(venue, [court_json(c) for c in venue.courts])), 201


@venue_bp.get("")
def list_venues():
    sport = (request.args.get("sport") or "").strip()
    query = (request.args.get("q") or "").strip()

    q = Venue.query.filter(Venue.is_active.is_(True))
    if query:
        like = f"%{query}%"
        q = q.filter(db.or_(Venue.name.ilike(like), Venue.location.ilike(like)))
    if sport:
        q = q.filter(Venue.courts.any(db.and_(Court.sport.ilike(sport), Court.is_active.is_(True))))

    rows = q.order_by(Venue.created_at.desc()).limit(200).all()
    return jsonify([
        _venue_json(v, [court_json(c) for c in v.courts if c.is_active])
        for v in rows
    ]), 200


@venue_bp.get("/<int:venue_id>")
def get_venue(venue_id: int):
    venue = db.session.get(Venue, venue_id)
    if venue is None or not venue.is_active:
        raise NotFoundError("Venue not found")
    return jsonify(_venue_json(
        venue,
        [court_json(c, with_availability=True) for c in venue.courts if c.is_active],
    )), 200
