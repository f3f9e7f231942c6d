from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError

from config import Config
from routes import health_bp, venue_bp, owner_bp, booking_bp, invite_bp, admin_bp

from models import db
from flask_migrate import Migrate
from services.errors import ServiceError
from utils.seed import seed_roles
from utils.auth_context import load_current_user


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(venue_bp)
    app.register_blueprint(owner_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(invite_bp)
    app.register_blueprint(admin_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    with app.app_context():
        if app.config.get("AUTO_CREATE_TABLES"):
            db.create_all()
        # Seed default roles at startup (safe & idempotent)
        seed_roles()

    @app.before_request
    def _load_user():
        load_current_user()

    @app.errorhandler(ServiceError)
    def _service_error(exc):
        db.session.rollback()
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def _store_error(exc):
        db.session.rollback()
        app.logger.exception("Store failure: %s", exc)
        return jsonify(error="Internal server error"), 500

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

#-------------------------
import click
from models.user import User, Role
from security.session import create_session


def _get_role(name):
    role = Role.query.filter_by(name=name).first()
    if not role:
        role = Role(name=name)
        db.session.add(role)
        db.session.commit()
    return role


def register_cli(app):
    @app.cli.command("create-user")
    @click.argument("email")
    @click.option("--name", default=None, help="Full name shown to venue owners.")
    @click.option("--role", "roles", multiple=True, default=("USER",),
                  type=click.Choice(["USER", "OWNER", "ADMIN"]), help="Role(s) to grant.")
    def create_user(email, name, roles):
        """Create a user with the given role(s)."""
        email = email.strip().lower()
        if User.query.filter_by(email=email).first():
            click.echo("User already exists")
            return

        user = User(email=email, full_name=name)
        user.roles = [_get_role(r) for r in roles]
        db.session.add(user)
        db.session.commit()
        click.echo(f"{user.email} created ({', '.join(roles)})")

    @app.cli.command("make-admin")
    @click.argument("email")
    def make_admin(email):
        """Promote a user to ADMIN by email (bootstrap)."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return

        admin_role = _get_role("ADMIN")
        if admin_role not in user.roles:
            user.roles.append(admin_role)
            db.session.commit()

        click.echo(f"{user.email} promoted to ADMIN")

    @app.cli.command("issue-session")
    @click.argument("email")
    def issue_session(email):
        """Print a session token for a user (sent as cookie or Bearer token)."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return
        click.echo(create_session(user.id))

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
