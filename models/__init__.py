from .db import db
from .user import User, Role, user_roles
from .audit_log import AuditLog
from .session import Session
from .venue import Venue
from .court import Court, CourtAvailability
from .booking import Booking
from .blocked_slot import BlockedSlot
from .invite import Invite, JoinRequest
