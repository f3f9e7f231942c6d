"""
Booking notifications. Best-effort: called after the booking transaction has
committed, failures are logged and never reach the caller.
"""
from flask import current_app

from utils.emailer import send_email

APP_NAME = "QuickCourt"


def _booking_lines(booking):
    court = booking.court
    venue = court.venue if court else None
    return "\n".join([
        f"Venue: {venue.name if venue else '-'}",
        f"Court: {court.name if court else '-'}",
        f"Date: {booking.date.isoformat()}",
        f"Time: {booking.start_time.strftime('%H:%M')} - {booking.end_time.strftime('%H:%M')}",
        f"Total: {booking.total_amount}",
    ])


def _dispatch(kind: str, to_email: str, subject: str, body: str) -> bool:
    if not current_app.config.get("NOTIFICATIONS_ENABLED", True):
        return False
    ok, error = send_email(to_email, subject, body)
    if not ok:
        current_app.logger.warning("%s notification to %s not sent: %s", kind, to_email, error)
    return ok


def send_booking_confirmation(booking) -> bool:
    body = (
        "We received your booking request. The venue owner will confirm it shortly.\n\n"
        f"{_booking_lines(booking)}\n\n"
        "See you on the court!"
    )
    return _dispatch("booking-created", booking.user.email, f"Booking Request - {APP_NAME}", body)


def send_booking_status_update(booking) -> bool:
    status = booking.status.lower()
    body = (
        f"Your booking #{booking.id} has been {status}.\n\n"
        f"{_booking_lines(booking)}"
    )
    return _dispatch("booking-status", booking.user.email, f"Booking {status.title()} - {APP_NAME}", body)


def notify_venue_owner(booking) -> None:
    # no push channel yet; owners see new requests in GET /owner/bookings
    current_app.logger.info(
        "New booking #%s for court %s awaiting owner %s",
        booking.id, booking.court_id, booking.court.venue.owner_id,
    )
