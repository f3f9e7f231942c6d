from datetime import date, time

import pytest

from models import db
from models.blocked_slot import BlockedSlot
from models.booking import Booking
from services.availability import (
    find_conflict,
    is_slot_available,
    list_slots,
    set_weekly_windows,
)
from services.errors import ForbiddenError, NotFoundError, ValidationError
from tests.conftest import DAY


def _book(court, user, start, end, status="PENDING", day=DAY):
    b = Booking(
        court_id=court.id,
        user_id=user.id,
        date=date.fromisoformat(day),
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        total_amount=40,
        status=status,
    )
    db.session.add(b)
    db.session.commit()
    return b


def test_free_slot_is_available(court):
    assert is_slot_available(court.id, DAY, "10:00", "11:00") is True


def test_exact_match_booking_blocks_slot(court, player):
    _book(court, player, "10:00", "11:00")
    assert is_slot_available(court.id, DAY, "10:00", "11:00") is False


def test_partial_overlap_is_rejected(court, player):
    _book(court, player, "10:00", "11:00")
    assert is_slot_available(court.id, DAY, "10:30", "11:30") is False
    assert is_slot_available(court.id, DAY, "09:30", "10:15") is False
    assert is_slot_available(court.id, DAY, "09:00", "12:00") is False


def test_touching_ranges_do_not_overlap(court, player):
    _book(court, player, "10:00", "11:00")
    assert is_slot_available(court.id, DAY, "11:00", "12:00") is True
    assert is_slot_available(court.id, DAY, "09:00", "10:00") is True


def test_cancelled_booking_frees_slot(court, player):
    _book(court, player, "10:00", "11:00", status="CANCELLED")
    assert is_slot_available(court.id, DAY, "10:00", "11:00") is True


def test_other_day_and_court_are_independent(court, venue, player):
    _book(court, player, "10:00", "11:00")
    assert is_slot_available(court.id, "2025-03-02", "10:00", "11:00") is True


def test_blocked_slot_overlap_rejects(court, owner):
    db.session.add(BlockedSlot(
        court_id=court.id,
        date=date.fromisoformat(DAY),
        start_time=time(14, 0),
        end_time=time(16, 0),
        reason="Maintenance",
    ))
    db.session.commit()

    assert find_conflict(court, date.fromisoformat(DAY), time(15, 0), time(17, 0)) == "blocked"
    assert is_slot_available(court.id, DAY, "16:00", "17:00") is True


def test_default_operating_hours(court):
    # no windows configured: 09:00-22:00 every day
    assert is_slot_available(court.id, DAY, "08:00", "09:00") is False
    assert is_slot_available(court.id, DAY, "21:00", "22:00") is True
    assert is_slot_available(court.id, DAY, "21:30", "22:30") is False


def test_configured_windows_replace_default(court, owner):
    # 2025-03-01 is a Saturday (5)
    set_weekly_windows(owner, court.id, [
        {"day_of_week": 5, "start_time": "07:00", "end_time": "12:00"},
        {"day_of_week": 5, "start_time": "14:00", "end_time": "18:00"},
        {"day_of_week": 0, "start_time": "09:00", "end_time": "21:00"},
    ])

    assert is_slot_available(court.id, DAY, "07:00", "08:00") is True
    assert is_slot_available(court.id, DAY, "12:00", "13:00") is False
    assert is_slot_available(court.id, DAY, "11:00", "15:00") is False
    # Sunday has no window configured
    assert is_slot_available(court.id, "2025-03-02", "10:00", "11:00") is False


def test_inactive_court_is_unavailable(court, venue):
    court.is_active = False
    db.session.commit()
    assert is_slot_available(court.id, DAY, "10:00", "11:00") is False


def test_inactive_venue_makes_court_unavailable(court, venue):
    venue.is_active = False
    db.session.commit()
    assert is_slot_available(court.id, DAY, "10:00", "11:00") is False


def test_unknown_court_is_unavailable(app):
    assert is_slot_available(9999, DAY, "10:00", "11:00") is False


@pytest.mark.parametrize("day,start,end", [
    ("01/03/2025", "10:00", "11:00"),
    (DAY, "10am", "11:00"),
    (DAY, "11:00", "10:00"),
    (DAY, "10:00", "10:00"),
])
def test_malformed_input_is_rejected(court, day, start, end):
    with pytest.raises(ValidationError):
        is_slot_available(court.id, day, start, end)


def test_list_slots_marks_taken_ranges(court, player):
    _book(court, player, "10:00", "11:00")
    db.session.add(BlockedSlot(
        court_id=court.id,
        date=date.fromisoformat(DAY),
        start_time=time(12, 30),
        end_time=time(13, 0),
    ))
    db.session.commit()

    slots = list_slots(court.id, DAY)

    assert len(slots) == 13
    assert slots[0] == {"start_time": "09:00", "end_time": "10:00", "price": 40, "available": True}
    by_start = {s["start_time"]: s["available"] for s in slots}
    assert by_start["10:00"] is False
    assert by_start["12:00"] is False
    assert by_start["13:00"] is True


def test_list_slots_uses_slot_duration(court):
    court.slot_duration = 90
    db.session.commit()

    slots = list_slots(court.id, DAY)

    assert slots[0]["end_time"] == "10:30"
    assert slots[0]["price"] == 60
    # last full 90 minute slot before 22:00 starts at 19:30
    assert slots[-1]["start_time"] == "19:30"


def test_list_slots_unknown_court(app):
    with pytest.raises(NotFoundError):
        list_slots(42, DAY)


def test_overlapping_windows_rejected(court, owner):
    with pytest.raises(ValidationError) as exc:
        set_weekly_windows(owner, court.id, [
            {"day_of_week": 2, "start_time": "09:00", "end_time": "12:00"},
            {"day_of_week": 2, "start_time": "11:00", "end_time": "13:00"},
        ])
    assert exc.value.reason == "overlapping_windows"
    assert court.availability == []


def test_same_hours_on_different_days_are_fine(court, owner):
    set_weekly_windows(owner, court.id, [
        {"day_of_week": 1, "start_time": "09:00", "end_time": "12:00"},
        {"day_of_week": 2, "start_time": "09:00", "end_time": "12:00"},
    ])
    assert [w.day_of_week for w in court.availability] == [1, 2]


def test_invalid_day_of_week_rejected(court, owner):
    with pytest.raises(ValidationError):
        set_weekly_windows(owner, court.id, [{"day_of_week": 7, "start_time": "09:00", "end_time": "12:00"}])


def test_only_owner_sets_windows(court, other_owner):
    with pytest.raises(ForbiddenError):
        set_weekly_windows(other_owner, court.id, [])
