import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as quickcourt.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "quickcourt.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Create tables on startup instead of running migrations (local/dev only)
    AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "false").lower() == "true"

    # Session token: cookie name, also accepted as "Authorization: Bearer <token>"
    AUTH_COOKIE_NAME = "quickcourt_session"

    # 8 hours session lifetime
    SESSION_LIFETIME_SECONDS = 8 * 60 * 60

    # Idle timeout: 20 minutes
    IDLE_TIMEOUT_SECONDS = int(os.getenv("IDLE_TIMEOUT_SECONDS", str(20 * 60)))

    # Courts without configured weekly windows are open these hours every day
    DEFAULT_OPERATING_HOURS = (
        os.getenv("DEFAULT_OPENING_TIME", "09:00"),
        os.getenv("DEFAULT_CLOSING_TIME", "22:00"),
    )
    DEFAULT_SLOT_MINUTES = 60

    # Max rows returned by GET /bookings
    BOOKING_LIST_LIMIT = int(os.getenv("BOOKING_LIST_LIMIT", "50"))

    # Email (SMTP)
    NOTIFICATIONS_ENABLED = os.getenv("NOTIFICATIONS_ENABLED", "true").lower() == "true"
    SMTP_HOST = os.getenv("SMTP_HOST")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_FROM_EMAIL = os.getenv("SMTP_FROM_EMAIL")
    SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"

    # Basic app settings
    DEBUG = False


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    AUTO_CREATE_TABLES = True
    DEFAULT_OPERATING_HOURS = ("09:00", "22:00")
    SMTP_HOST = None
    SMTP_FROM_EMAIL = None
