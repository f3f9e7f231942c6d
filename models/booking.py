from datetime import datetime
from models.db import db

BOOKING_STATUSES = ("PENDING", "CONFIRMED", "CANCELLED")

class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    court_id = db.Column(db.Integer, db.ForeignKey("courts.id"), nullable=False, index=True)

    # naive wall-clock values, compared as stored
    date = db.Column(db.Date, nullable=False, index=True)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)

    total_amount = db.Column(db.Integer, nullable=False, default=0)  # smallest unit
    notes = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(20), nullable=False, default="PENDING")
    # status values: PENDING, CONFIRMED, CANCELLED
    payment_status = db.Column(db.String(20), nullable=False, default="PENDING")  # PENDING, PAID, FAILED, REFUNDED

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User")
    court = db.relationship("Court")

    __table_args__ = (
        # Hard business-rule: one active booking per exact court/date/time tuple
        db.Index(
            "uq_booking_active_slot",
            "court_id", "date", "start_time", "end_time",
            unique=True,
            sqlite_where=db.text("status != 'CANCELLED'"),
            postgresql_where=db.text("status != 'CANCELLED'"),
        ),
    )

    @property
    def display_status(self) -> str:
        # COMPLETED is never stored
        if self.status == "CONFIRMED" and self.date < datetime.now().date():
            return "COMPLETED"
        return self.status
