from datetime import datetime
from models.db import db

class Invite(db.Model):
    __tablename__ = "invites"

    id = db.Column(db.Integer, primary_key=True)
    creator_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    title = db.Column(db.String(120), nullable=True)
    venue = db.Column(db.String(160), nullable=False)  # free text, not a Venue reference
    sport = db.Column(db.String(40), nullable=False)
    date = db.Column(db.Date, nullable=False)
    time = db.Column(db.String(20), nullable=False)
    contact_details = db.Column(db.String(255), nullable=False)

    players_required = db.Column(db.Integer, nullable=False)
    # derived from accepted join requests, see services.invites.recompute_counts
    players_joined = db.Column(db.Integer, nullable=False, default=0)
    players_left = db.Column(db.Integer, nullable=False, default=0)

    status = db.Column(db.String(20), nullable=False, default="OPEN")  # OPEN, COMPLETED, CANCELLED
    # bumped at the start of every join-request write, see services.invites._lock_invite
    request_version = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    creator = db.relationship("User")
    requests = db.relationship(
        "JoinRequest",
        back_populates="invite",
        order_by="JoinRequest.created_at.desc()",
    )


class JoinRequest(db.Model):
    __tablename__ = "join_requests"

    id = db.Column(db.Integer, primary_key=True)
    invite_id = db.Column(db.Integer, db.ForeignKey("invites.id"), nullable=False, index=True)
    # null for anonymous joiners
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)

    joiner_name = db.Column(db.String(120), nullable=False)
    contact_details = db.Column(db.String(255), nullable=False)
    players_count = db.Column(db.Integer, nullable=False, default=1)

    status = db.Column(db.String(20), nullable=False, default="PENDING")  # PENDING, ACCEPTED, DECLINED
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    invite = db.relationship("Invite", back_populates="requests")

    __table_args__ = (
        db.CheckConstraint("players_count > 0", name="ck_join_request_players_count"),
    )
