from flask import Blueprint, jsonify, g, request

from models import db
from models.booking import Booking
from models.invite import Invite
from models.user import User, Role
from models.venue import Venue
from security.rbac import require_roles
from security.session import revoke_all_sessions
from services.errors import NotFoundError, ValidationError
from utils.audit import log_event

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


@admin_bp.get("/stats")
@require_roles("ADMIN")
def stats():
    log_event("ADMIN_STATS_VIEW", user_id=g.user.id)
    return jsonify(
        users=User.query.count(),
        owners=User.query.join(User.roles).filter(Role.name == "OWNER").count(),
        venues=Venue.query.filter_by(is_active=True).count(),
        bookings=Booking.query.count(),
        pending_bookings=Booking.query.filter_by(status="PENDING").count(),
        open_invites=Invite.query.filter_by(status="OPEN").count(),
    ), 200


@admin_bp.post("/users/<int:user_id>/ban")
@require_roles("ADMIN")
def ban_user(user_id: int):
    data = request.get_json(silent=True) or {}
    is_banned = data.get("is_banned")
    if not isinstance(is_banned, bool):
        raise ValidationError("is_banned must be true or false")

    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    if user.id == g.user.id:
        raise ValidationError("You cannot ban yourself")

    user.is_banned = is_banned
    db.session.commit()
    revoked = revoke_all_sessions(user.id) if is_banned else 0

    log_event("ADMIN_USER_BAN" if is_banned else "ADMIN_USER_UNBAN", user_id=g.user.id,
              entity="user", entity_id=user.id, metadata={"sessions_revoked": revoked})
    return jsonify(
        message=f"User {'banned' if is_banned else 'unbanned'} successfully",
        user={"id": user.id, "email": user.email, "is_banned": user.is_banned},
    ), 200
