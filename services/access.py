from services.errors import ForbiddenError


def require_active_actor(actor):
    """The caller must be authenticated and not banned."""
    if actor is None:
        raise ForbiddenError("Authentication required", reason="unauthenticated")
    if actor.is_banned:
        raise ForbiddenError("Account suspended", reason="account_suspended")
    return actor


def require_venue_owner(actor, venue):
    require_active_actor(actor)
    if venue is None or venue.owner_id != actor.id:
        raise ForbiddenError("Only the venue owner can do this", reason="not_venue_owner")
    return actor
