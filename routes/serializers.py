def _hhmm(value):
    return value.strftime("%H:%M") if value else None


def booking_json(b):
    court = b.court
    return {
        "id": b.id,
        "court_id": b.court_id,
        "court_name": court.name if court else None,
        "venue_id": court.venue_id if court else None,
        "venue_name": court.venue.name if court and court.venue else None,
        "user_id": b.user_id,
        "date": b.date.isoformat(),
        "start_time": _hhmm(b.start_time),
        "end_time": _hhmm(b.end_time),
        "total_amount": b.total_amount,
        "notes": b.notes,
        "status": b.display_status,
        "payment_status": b.payment_status,
        "created_at": b.created_at.isoformat(),
        "updated_at": b.updated_at.isoformat() if b.updated_at else None,
    }


def blocked_slot_json(s):
    return {
        "id": s.id,
        "court_id": s.court_id,
        "date": s.date.isoformat(),
        "start_time": _hhmm(s.start_time),
        "end_time": _hhmm(s.end_time),
        "reason": s.reason,
        "booking_id": s.booking_id,
    }


def court_json(c, with_availability=False):
    out = {
        "id": c.id,
        "venue_id": c.venue_id,
        "name": c.name,
        "sport": c.sport,
        "description": c.description,
        "price_per_hour": c.price_per_hour,
        "slot_duration": c.slot_duration,
        "is_active": c.is_active,
    }
    if with_availability:
        out["availability"] = [
            {
                "day_of_week": w.day_of_week,
                "start_time": _hhmm(w.start_time),
                "end_time": _hhmm(w.end_time),
            }
            for w in c.availability
        ]
    return out


def invite_json(i):
    return {
        "id": i.id,
        "title": i.title,
        "venue": i.venue,
        "sport": i.sport,
        "date": i.date.isoformat(),
        "time": i.time,
        "players_required": i.players_required,
        "players_joined": i.players_joined,
        "players_left": i.players_left,
        "contact_details": i.contact_details,
        "status": i.status,
        "creator": {
            "id": i.creator.id,
            "name": i.creator.display_name,
        } if i.creator else None,
        "created_at": i.created_at.isoformat(),
    }


def join_request_json(r, with_invite=False):
    out = {
        "id": r.id,
        "invite_id": r.invite_id,
        "user_id": r.user_id,
        "joiner_name": r.joiner_name,
        "contact_details": r.contact_details,
        "players_count": r.players_count,
        "status": r.status,
        "created_at": r.created_at.isoformat(),
    }
    if with_invite and r.invite is not None:
        out["invite"] = {
            "id": r.invite.id,
            "title": r.invite.title,
            "venue": r.invite.venue,
            "sport": r.invite.sport,
            "date": r.invite.date.isoformat(),
            "time": r.invite.time,
            "players_required": r.invite.players_required,
        }
    return out
