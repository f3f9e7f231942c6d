"""
Booking lifecycle.

    PENDING --confirm--> CONFIRMED   (writes a guarding BlockedSlot)
    PENDING --cancel---> CANCELLED

Every mutation runs as one transaction: the court's write lock is taken
first (see _lock_court), checks run, rows are written and committed
together. The partial unique index on bookings backs up the overlap check
at the store level.
Notifications go out only after the commit.
"""
from datetime import datetime

import sqlalchemy as sa
from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from models import db
from models.blocked_slot import BlockedSlot
from models.booking import Booking, BOOKING_STATUSES
from models.court import Court
from models.venue import Venue
from services.access import require_active_actor, require_venue_owner
from services.availability import find_conflict, overlapping_booking
from services.errors import (
    AlreadyProcessedError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from services.validation import parse_date, parse_time_range, require_id, require_int
from utils.notifications import (
    notify_venue_owner,
    send_booking_confirmation,
    send_booking_status_update,
)

TRANSITIONS = ("CONFIRMED", "CANCELLED")

CONFLICT_MESSAGES = {
    "court_unavailable": "Court or venue is not available",
    "outside_operating_hours": "Requested time is outside the court's operating hours",
    "already_booked": "Time slot is already booked",
    "blocked": "Time slot is not available",
}


def _lock_court(court_id: int):
    """
    Take the court's write lock before anything is read.

    The counter UPDATE is the first write of the transaction, so concurrent
    writers for the same court queue on it: a row lock on PostgreSQL, the
    database write lock on SQLite (where FOR UPDATE is a no-op). Everything
    read afterwards sees the previous writer's commit.
    """
    db.session.execute(
        sa.update(Court)
        .where(Court.id == court_id)
        .values(booking_version=Court.booking_version + 1)
        .execution_options(synchronize_session=False)
    )
    return Court.query.filter_by(id=court_id).with_for_update().populate_existing().first()


def create_booking(actor, court_id, date, start_time, end_time, total_amount, notes=None):
    require_active_actor(actor)
    court_id = require_id(court_id, "court_id")
    day = parse_date(date)
    start, end = parse_time_range(start_time, end_time)
    amount = require_int(total_amount, "total_amount")
    if notes is not None and not isinstance(notes, str):
        raise ValidationError("notes must be text")

    try:
        court = _lock_court(court_id)
        if court is None:
            raise NotFoundError("Court not found")

        conflict = find_conflict(court, day, start, end)
        if conflict:
            raise ConflictError(CONFLICT_MESSAGES[conflict], reason=conflict)

        booking = Booking(
            user_id=actor.id,
            court_id=court.id,
            date=day,
            start_time=start,
            end_time=end,
            total_amount=amount,
            notes=(notes or "").strip() or None,
            status="PENDING",
            payment_status="PENDING",
        )
        db.session.add(booking)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        # uq_booking_active_slot: a concurrent request won the same slot
        raise ConflictError(CONFLICT_MESSAGES["already_booked"], reason="already_booked") from None
    except Exception:
        db.session.rollback()
        raise

    send_booking_confirmation(booking)
    notify_venue_owner(booking)
    return booking


def transition_booking(booking_id, actor, action):
    action = action.strip().upper() if isinstance(action, str) else ""
    if action not in TRANSITIONS:
        raise ValidationError("Invalid action", reason="invalid_action")
    booking_id = require_id(booking_id, "booking_id")
    require_active_actor(actor)

    try:
        booking = db.session.get(Booking, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")

        # status is re-read under the court lock; the first load may be stale
        _lock_court(booking.court_id)
        booking = Booking.query.filter_by(id=booking_id).with_for_update().populate_existing().first()

        require_venue_owner(actor, booking.court.venue)

        if booking.status != "PENDING":
            raise AlreadyProcessedError("Booking has already been processed")

        booking.status = action
        booking.updated_at = datetime.utcnow()

        if action == "CONFIRMED":
            # status write first, guard second, same commit
            db.session.flush()
            db.session.add(BlockedSlot(
                court_id=booking.court_id,
                date=booking.date,
                start_time=booking.start_time,
                end_time=booking.end_time,
                reason=f"Booking #{booking.id} confirmed - {booking.user.display_name}",
                booking_id=booking.id,
                created_by=actor.id,
            ))
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    send_booking_status_update(booking)
    return booking


def block_slot(actor, court_id, date, start_time, end_time, reason=None):
    """Owner-side manual block, e.g. maintenance."""
    court_id = require_id(court_id, "court_id")
    day = parse_date(date)
    start, end = parse_time_range(start_time, end_time)
    if reason is not None and not isinstance(reason, str):
        raise ValidationError("reason must be text")

    try:
        court = _lock_court(court_id)
        if court is None:
            raise NotFoundError("Court not found")
        require_venue_owner(actor, court.venue)

        if overlapping_booking(court.id, day, start, end) is not None:
            raise ConflictError("A booking already holds this time", reason="already_booked")

        blocked = BlockedSlot(
            court_id=court.id,
            date=day,
            start_time=start,
            end_time=end,
            reason=(reason or "").strip()[:255] or "Blocked by owner",
            created_by=actor.id,
        )
        db.session.add(blocked)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return blocked


def list_user_bookings(actor, status=None):
    require_active_actor(actor)
    status = (status or "").strip().lower()
    today = datetime.now().date()
    limit = current_app.config.get("BOOKING_LIST_LIMIT", 50)

    q = Booking.query.filter_by(user_id=actor.id)
    if status == "upcoming":
        q = q.filter(Booking.status == "CONFIRMED", Booking.date >= today)
        q = q.order_by(Booking.date.asc(), Booking.start_time.asc())
    elif status == "completed":
        q = q.filter(Booking.status == "CONFIRMED", Booking.date < today)
        q = q.order_by(Booking.date.desc(), Booking.start_time.desc())
    else:
        if status:
            if status.upper() not in BOOKING_STATUSES:
                raise ValidationError("Invalid status filter")
            q = q.filter(Booking.status == status.upper())
        q = q.order_by(Booking.date.desc(), Booking.start_time.desc())

    return q.limit(limit).all()


def list_owner_bookings(actor):
    """Bookings across all courts of the actor's venues, split into pending and recent."""
    require_active_actor(actor)
    rows = (
        Booking.query
        .join(Court, Booking.court_id == Court.id)
        .join(Venue, Court.venue_id == Venue.id)
        .filter(Venue.owner_id == actor.id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )
    pending = [b for b in rows if b.status == "PENDING"]
    recent = [b for b in rows if b.status != "PENDING"][:10]
    return pending, recent


def user_booking_stats(actor):
    require_active_actor(actor)
    today = datetime.now().date()
    rows = Booking.query.filter_by(user_id=actor.id).all()
    return {
        "total_bookings": len(rows),
        # cancelled bookings were never paid for
        "total_spent": sum(b.total_amount for b in rows if b.status != "CANCELLED"),
        "upcoming_bookings": sum(1 for b in rows if b.status == "CONFIRMED" and b.date >= today),
        "completed_bookings": sum(1 for b in rows if b.display_status == "COMPLETED"),
    }


def owner_stats(actor):
    """Totals over every venue the actor owns; cancelled bookings are left out."""
    require_active_actor(actor)
    venues = Venue.query.filter_by(owner_id=actor.id).all()
    courts = [c for v in venues for c in v.courts]

    total_bookings, total_revenue = (
        db.session.query(func.count(Booking.id), func.coalesce(func.sum(Booking.total_amount), 0))
        .join(Court, Booking.court_id == Court.id)
        .join(Venue, Court.venue_id == Venue.id)
        .filter(Venue.owner_id == actor.id, Booking.status != "CANCELLED")
        .one()
    )
    return {
        "total_bookings": int(total_bookings),
        "total_revenue": int(total_revenue),
        "active_venues": sum(1 for v in venues if v.is_active),
        "active_courts": sum(1 for c in courts if c.is_active),
    }
