"""
Court availability: operating windows, booking/blocked-slot overlap and the
per-day slot grid. Everything here is read-only except set_weekly_windows.
"""
from datetime import datetime, timedelta

from flask import current_app

from models import db
from models.booking import Booking
from models.blocked_slot import BlockedSlot
from models.court import Court, CourtAvailability
from services.access import require_venue_owner
from services.errors import NotFoundError, ValidationError
from services.validation import (
    overlaps,
    parse_date,
    parse_time,
    parse_time_range,
    require_id,
    require_int,
)


def _default_window():
    opens, closes = current_app.config.get("DEFAULT_OPERATING_HOURS", ("09:00", "22:00"))
    return parse_time(opens, "opening time"), parse_time(closes, "closing time")


def effective_windows(court: Court, day):
    """
    Windows that apply to `day`. A court without any configured windows
    falls back to the default operating hours on every day.
    """
    if court.availability:
        return [
            (w.start_time, w.end_time)
            for w in court.availability
            if w.day_of_week == day.weekday()
        ]
    return [_default_window()]


def within_operating_hours(court: Court, day, start, end) -> bool:
    return any(ws <= start and end <= we for ws, we in effective_windows(court, day))


def overlapping_booking(court_id: int, day, start, end):
    return (
        Booking.query
        .filter(
            Booking.court_id == court_id,
            Booking.date == day,
            Booking.status != "CANCELLED",
            Booking.start_time < end,
            Booking.end_time > start,
        )
        .first()
    )


def overlapping_block(court_id: int, day, start, end):
    return (
        BlockedSlot.query
        .filter(
            BlockedSlot.court_id == court_id,
            BlockedSlot.date == day,
            BlockedSlot.start_time < end,
            BlockedSlot.end_time > start,
        )
        .first()
    )


def find_conflict(court, day, start, end):
    """Returns the reason the range cannot be booked, or None when it is free."""
    if court is None or not court.is_bookable:
        return "court_unavailable"
    if not within_operating_hours(court, day, start, end):
        return "outside_operating_hours"
    if overlapping_booking(court.id, day, start, end) is not None:
        return "already_booked"
    if overlapping_block(court.id, day, start, end) is not None:
        return "blocked"
    return None


def is_slot_available(court_id, day, start_time, end_time) -> bool:
    court_id = require_id(court_id, "court_id")
    day = parse_date(day)
    start, end = parse_time_range(start_time, end_time)
    court = db.session.get(Court, court_id)
    return find_conflict(court, day, start, end) is None


def list_slots(court_id, day):
    court_id = require_id(court_id, "court_id")
    day = parse_date(day)

    court = db.session.get(Court, court_id)
    if court is None or not court.is_bookable:
        raise NotFoundError("Court not found")

    bookings = (
        Booking.query
        .filter(Booking.court_id == court.id, Booking.date == day, Booking.status != "CANCELLED")
        .all()
    )
    blocks = BlockedSlot.query.filter_by(court_id=court.id, date=day).all()
    taken = [(b.start_time, b.end_time) for b in bookings] + [(b.start_time, b.end_time) for b in blocks]

    step = timedelta(minutes=court.slot_duration or current_app.config.get("DEFAULT_SLOT_MINUTES", 60))
    slots = []
    for window_start, window_end in sorted(effective_windows(court, day)):
        current = datetime.combine(day, window_start)
        close = datetime.combine(day, window_end)
        while current + step <= close:
            start, end = current.time(), (current + step).time()
            slots.append({
                "start_time": start.strftime("%H:%M"),
                "end_time": end.strftime("%H:%M"),
                "price": court.price_per_hour * court.slot_duration // 60,
                "available": not any(overlaps(start, end, ts, te) for ts, te in taken),
            })
            current += step
    return slots


def _parse_windows(windows):
    if not isinstance(windows, list):
        raise ValidationError("windows must be a list")

    parsed = []
    for item in windows:
        if not isinstance(item, dict):
            raise ValidationError("each window needs day_of_week, start_time and end_time")
        day_of_week = require_int(item.get("day_of_week"), "day_of_week")
        if day_of_week > 6:
            raise ValidationError("day_of_week must be between 0 (Monday) and 6 (Sunday)")
        start, end = parse_time_range(item.get("start_time"), item.get("end_time"))
        parsed.append((day_of_week, start, end))

    # windows on the same day must not overlap
    parsed.sort()
    for (day_a, _, end_a), (day_b, start_b, _) in zip(parsed, parsed[1:]):
        if day_a == day_b and start_b < end_a:
            raise ValidationError("Availability windows overlap on the same day", reason="overlapping_windows")
    return parsed


def set_weekly_windows(actor, court_id, windows):
    court_id = require_id(court_id, "court_id")
    court = db.session.get(Court, court_id)
    if court is None:
        raise NotFoundError("Court not found")
    require_venue_owner(actor, court.venue)

    parsed = _parse_windows(windows)
    try:
        court.availability = [
            CourtAvailability(day_of_week=day_of_week, start_time=start, end_time=end)
            for day_of_week, start, end in parsed
        ]
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return court
