from datetime import date, timedelta

import pytest

from app import create_app
from config import TestConfig
from models import db
from models.court import Court
from models.user import Role, User
from models.venue import Venue
from security.session import create_session

# A Saturday in the past; stored statuses are asserted, not display_status
DAY = "2025-03-01"


def future_day(days=7):
    return (date.today() + timedelta(days=days)).isoformat()


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make(email, *roles, name=None, banned=False):
        user = User(email=email, full_name=name, is_banned=banned)
        user.roles = [Role.query.filter_by(name=r).one() for r in (roles or ("USER",))]
        db.session.add(user)
        db.session.commit()
        return user
    return _make


@pytest.fixture
def player(make_user):
    return make_user("player@example.com", "USER", name="Pat Player")


@pytest.fixture
def other_player(make_user):
    return make_user("other@example.com", "USER", name="Olly Other")


@pytest.fixture
def owner(make_user):
    return make_user("owner@example.com", "OWNER", name="Olivia Owner")


@pytest.fixture
def other_owner(make_user):
    return make_user("rival@example.com", "OWNER", name="Rex Rival")


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", "ADMIN")


@pytest.fixture
def venue(owner):
    v = Venue(owner_id=owner.id, name="Center Courts", location="Riverside")
    db.session.add(v)
    db.session.commit()
    return v


@pytest.fixture
def court(venue):
    c = Court(venue_id=venue.id, name="Court 1", sport="Tennis", price_per_hour=40, slot_duration=60)
    db.session.add(c)
    db.session.commit()
    return c


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        return {"Authorization": f"Bearer {create_session(user.id)}"}
    return _headers


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture outgoing notification mail instead of talking to SMTP."""
    sent = []

    def fake_send_email(to_email, subject, body):
        sent.append({"to": to_email, "subject": subject, "body": body})
        return True, None

    monkeypatch.setattr("utils.notifications.send_email", fake_send_email)
    return sent
