"""
Play-together invites and their join requests.

players_joined / players_left are never incremented in place: they are
re-derived from the ACCEPTED join requests every time a request is accepted.
Acceptance is hard-capped at players_required.
"""
import sqlalchemy as sa
from sqlalchemy import func

from models import db
from models.invite import Invite, JoinRequest
from services.access import require_active_actor
from services.errors import (
    AlreadyProcessedError,
    CapacityExceededError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from services.validation import parse_date, require_id, require_int, require_text

SPORTS = (
    "Swimming",
    "Tennis",
    "Cricket",
    "Football",
    "Volleyball",
    "Basketball",
    "Pickleball",
    "Badminton",
    "Table Tennis",
)
DEFAULT_SPORT = "Tennis"

DECISIONS = ("ACCEPTED", "DECLINED")


def normalize_sport(value) -> str:
    wanted = (value or "").strip().lower() if isinstance(value, str) else ""
    for sport in SPORTS:
        if sport.lower() == wanted:
            return sport
    return DEFAULT_SPORT


def accepted_players(invite_id: int) -> int:
    total = (
        db.session.query(func.coalesce(func.sum(JoinRequest.players_count), 0))
        .filter(JoinRequest.invite_id == invite_id, JoinRequest.status == "ACCEPTED")
        .scalar()
    )
    return int(total or 0)


def recompute_counts(invite: Invite) -> Invite:
    invite.players_joined = accepted_players(invite.id)
    invite.players_left = max(0, invite.players_required - invite.players_joined)
    if invite.status != "CANCELLED":
        invite.status = "COMPLETED" if invite.players_left == 0 else "OPEN"
    return invite


def _lock_invite(invite_id: int):
    """Same counter-bump write lock as the court lock in services.booking."""
    db.session.execute(
        sa.update(Invite)
        .where(Invite.id == invite_id)
        .values(request_version=Invite.request_version + 1)
        .execution_options(synchronize_session=False)
    )
    return Invite.query.filter_by(id=invite_id).with_for_update().populate_existing().first()


def create_invite(actor, venue, sport, date, time, players_required, contact_details, title=None):
    require_active_actor(actor)
    venue = require_text(venue, "venue", max_length=160)
    day = parse_date(date)
    time = require_text(time, "time", max_length=20)
    players_required = require_int(players_required, "players_required", minimum=1)
    contact_details = require_text(contact_details, "contact_details")
    if title is not None and not isinstance(title, str):
        raise ValidationError("title must be text")

    invite = Invite(
        creator_id=actor.id,
        title=(title or "").strip()[:120] or None,
        venue=venue,
        sport=normalize_sport(sport),
        date=day,
        time=time,
        players_required=players_required,
        players_joined=0,
        players_left=players_required,
        contact_details=contact_details,
        status="OPEN",
    )
    db.session.add(invite)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return invite


def submit_join_request(invite_id, actor, joiner_name, contact_details, players_count):
    """
    `actor` is None for anonymous joiners. Capacity is checked against the
    currently accepted players only; pending requests may over-subscribe and
    are settled when the creator accepts.
    """
    invite_id = require_id(invite_id, "invite_id")
    if actor is not None:
        require_active_actor(actor)
    joiner_name = require_text(joiner_name, "joiner_name", max_length=120)
    contact_details = require_text(contact_details, "contact_details")
    players_count = require_int(players_count, "players_count", minimum=1)

    try:
        invite = _lock_invite(invite_id)
        if invite is None:
            raise NotFoundError("Invite not found")
        if invite.status != "OPEN":
            raise ValidationError("This invite is no longer active", reason="invite_closed")

        available = invite.players_required - accepted_players(invite.id)
        if players_count > available:
            raise CapacityExceededError(f"Only {max(available, 0)} spots available")

        join_request = JoinRequest(
            invite_id=invite.id,
            user_id=actor.id if actor is not None else None,
            joiner_name=joiner_name,
            contact_details=contact_details,
            players_count=players_count,
            status="PENDING",
        )
        db.session.add(join_request)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return join_request


def resolve_join_request(request_id, actor, decision):
    decision = decision.strip().upper() if isinstance(decision, str) else ""
    if decision not in DECISIONS:
        raise ValidationError("Invalid decision", reason="invalid_decision")
    request_id = require_id(request_id, "request_id")
    require_active_actor(actor)

    try:
        join_request = db.session.get(JoinRequest, request_id)
        if join_request is None:
            raise NotFoundError("Request not found")

        invite = _lock_invite(join_request.invite_id)
        join_request = (
            JoinRequest.query.filter_by(id=request_id).with_for_update().populate_existing().first()
        )
        if invite.creator_id != actor.id:
            raise ForbiddenError("Only the invite creator can do this", reason="not_invite_creator")
        if join_request.status != "PENDING":
            raise AlreadyProcessedError("Request already processed")
        if decision == "ACCEPTED" and invite.status == "CANCELLED":
            raise ValidationError("This invite has been cancelled", reason="invite_closed")

        if decision == "ACCEPTED":
            available = invite.players_required - accepted_players(invite.id)
            if join_request.players_count > available:
                raise CapacityExceededError(
                    f"Not enough spots available. Only {max(available, 0)} spots left."
                )

        join_request.status = decision
        if decision == "ACCEPTED":
            db.session.flush()
            recompute_counts(invite)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return join_request


def cancel_invite(invite_id, actor):
    """Creator calls the game off. Requests stay as they are; the invite stops taking joins."""
    invite_id = require_id(invite_id, "invite_id")
    require_active_actor(actor)

    try:
        invite = _lock_invite(invite_id)
        if invite is None:
            raise NotFoundError("Invite not found")
        if invite.creator_id != actor.id:
            raise ForbiddenError("Only the invite creator can do this", reason="not_invite_creator")
        if invite.status == "CANCELLED":
            raise AlreadyProcessedError("Invite already cancelled")

        invite.status = "CANCELLED"
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return invite


def list_open_invites():
    return Invite.query.filter_by(status="OPEN").order_by(Invite.created_at.desc(), Invite.id.desc()).all()


def list_invite_requests(invite_id, actor):
    invite_id = require_id(invite_id, "invite_id")
    require_active_actor(actor)
    invite = db.session.get(Invite, invite_id)
    if invite is None:
        raise NotFoundError("Invite not found")
    if invite.creator_id != actor.id:
        raise ForbiddenError("Only the invite creator can do this", reason="not_invite_creator")
    return (
        JoinRequest.query
        .filter_by(invite_id=invite.id)
        .order_by(JoinRequest.created_at.desc(), JoinRequest.id.desc())
        .all()
    )


def list_my_invites(actor):
    require_active_actor(actor)
    return (
        Invite.query
        .filter_by(creator_id=actor.id)
        .order_by(Invite.created_at.desc(), Invite.id.desc())
        .all()
    )


def list_my_join_requests(actor):
    require_active_actor(actor)
    return (
        JoinRequest.query
        .filter_by(user_id=actor.id)
        .order_by(JoinRequest.created_at.desc(), JoinRequest.id.desc())
        .all()
    )
