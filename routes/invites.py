from flask import Blueprint, request, jsonify, g

from services.invites import (
    cancel_invite,
    create_invite,
    list_invite_requests,
    list_my_invites,
    list_my_join_requests,
    list_open_invites,
    resolve_join_request,
    submit_join_request,
)
from utils.auth_context import current_user, login_required
from utils.audit import log_event
from routes.serializers import invite_json, join_request_json

invite_bp = Blueprint("invite", __name__)


@invite_bp.post("/invites")
@login_required
def create_invite_route():
    data = request.get_json(silent=True) or {}
    invite = create_invite(
        g.user,
        data.get("venue"),
        data.get("sport"),
        data.get("date"),
        data.get("time"),
        data.get("players_required"),
        data.get("contact_details"),
        title=data.get("title"),
    )

    log_event("INVITE_CREATE", user_id=g.user.id, entity="invite", entity_id=invite.id)
    return jsonify(invite_json(invite)), 201


@invite_bp.get("/invites")
def list_invites():
    return jsonify([invite_json(i) for i in list_open_invites()]), 200


# Anonymous joiners are allowed: the caller is attached only when signed in.
@invite_bp.post("/invites/<int:invite_id>/join")
def join_invite(invite_id: int):
    data = request.get_json(silent=True) or {}
    actor = current_user()
    join_request = submit_join_request(
        invite_id,
        actor,
        data.get("joiner_name"),
        data.get("contact_details"),
        data.get("players_count"),
    )

    log_event("JOIN_REQUEST_CREATE", user_id=actor.id if actor else None,
              entity="join_request", entity_id=join_request.id,
              metadata={"invite_id": invite_id, "players_count": join_request.players_count})
    return jsonify(
        success=True,
        message="Join request sent successfully",
        request=join_request_json(join_request),
    ), 201


@invite_bp.post("/invites/<int:invite_id>/cancel")
@login_required
def cancel_invite_route(invite_id: int):
    invite = cancel_invite(invite_id, g.user)

    log_event("INVITE_CANCEL", user_id=g.user.id, entity="invite", entity_id=invite.id)
    return jsonify(invite_json(invite)), 200


@invite_bp.get("/invites/<int:invite_id>/requests")
@login_required
def invite_requests(invite_id: int):
    rows = list_invite_requests(invite_id, g.user)
    return jsonify(requests=[join_request_json(r) for r in rows]), 200


def _resolve(request_id: int, decision: str):
    join_request = resolve_join_request(request_id, g.user, decision)
    invite = join_request.invite

    log_event(f"JOIN_REQUEST_{decision}", user_id=g.user.id, entity="join_request", entity_id=join_request.id,
              metadata={"invite_id": invite.id, "players_joined": invite.players_joined})
    return jsonify(
        success=True,
        message=f"Request {decision.lower()} successfully",
        request=join_request_json(join_request),
        invite=invite_json(invite),
    ), 200


@invite_bp.patch("/requests/<int:request_id>/accept")
@login_required
def accept_request(request_id: int):
    return _resolve(request_id, "ACCEPTED")


@invite_bp.patch("/requests/<int:request_id>/decline")
@login_required
def decline_request(request_id: int):
    return _resolve(request_id, "DECLINED")


@invite_bp.get("/user/my-invites")
@login_required
def my_invites():
    out = []
    for invite in list_my_invites(g.user):
        row = invite_json(invite)
        row["requests"] = [join_request_json(r) for r in invite.requests]
        out.append(row)
    return jsonify(out), 200


@invite_bp.get("/user/join-requests")
@login_required
def my_join_requests():
    rows = list_my_join_requests(g.user)
    return jsonify(join_requests=[join_request_json(r, with_invite=True) for r in rows]), 200
