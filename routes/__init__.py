from .health import health_bp
from .venues import venue_bp
from .owner import owner_bp
from .booking import booking_bp
from .invites import invite_bp
from .admin import admin_bp
