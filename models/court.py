from datetime import datetime
from models.db import db

class Court(db.Model):
    __tablename__ = "courts"

    id = db.Column(db.Integer, primary_key=True)
    venue_id = db.Column(db.Integer, db.ForeignKey("venues.id"), nullable=False, index=True)

    name = db.Column(db.String(120), nullable=False)
    sport = db.Column(db.String(40), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price_per_hour = db.Column(db.Integer, nullable=False, default=0)  # smallest currency unit
    slot_duration = db.Column(db.Integer, nullable=False, default=60)  # minutes

    # soft delete: courts with bookings are never removed
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    # bumped at the start of every booking write; the UPDATE serializes writers per court
    booking_version = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    venue = db.relationship("Venue", back_populates="courts")
    availability = db.relationship(
        "CourtAvailability",
        back_populates="court",
        cascade="all, delete-orphan",
        order_by=lambda: [CourtAvailability.day_of_week, CourtAvailability.start_time],
    )

    @property
    def is_bookable(self) -> bool:
        return self.is_active and self.venue is not None and self.venue.is_active


class CourtAvailability(db.Model):
    """One weekly operating window of a court (day_of_week: Monday=0 .. Sunday=6)."""

    __tablename__ = "court_availability"

    id = db.Column(db.Integer, primary_key=True)
    court_id = db.Column(db.Integer, db.ForeignKey("courts.id"), nullable=False, index=True)
    day_of_week = db.Column(db.Integer, nullable=False)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)

    court = db.relationship("Court", back_populates="availability")

    __table_args__ = (
        db.CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_court_availability_day"),
        db.CheckConstraint("start_time < end_time", name="ck_court_availability_range"),
    )
