import os
import logging

import click
from flask import Flask, jsonify

from app.config import IntegrationSettings, config_by_name
from app.decorators import add_cors_headers
from app.extensions import db, migrate, limiter


def create_app(config_name=None):
    """Application factory."""

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # --- Validate required env vars (skip in testing) ---
    if config_name != "testing":
        try:
            config_by_name[config_name].validate()
        except RuntimeError as e:
            app.logger.warning(f"Config validation: {e}")
        log_disabled_integrations(app)

    # --- Init extensions ---
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # --- Import models so Alembic can discover them ---
    with app.app_context():
        from app import models  # noqa: F401

    # --- Register blueprints ---
    from app.blueprints.leads import leads_bp
    from app.blueprints.booking import booking_bp

    app.register_blueprint(leads_bp)
    app.register_blueprint(booking_bp)

    # --- Error handlers ---
    # JSON everywhere: both callers (browser fetch, voice agent) parse bodies.
    @app.errorhandler(404)
    def not_found(e):
        return add_cors_headers(jsonify(error="Not found")), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return add_cors_headers(jsonify(error="Method not allowed")), 405

    @app.errorhandler(429)
    def rate_limited(e):
        return add_cors_headers(
            jsonify(success=False, error="Too many submissions. Please try again later.")
        ), 429

    @app.errorhandler(500)
    def server_error(e):
        return add_cors_headers(jsonify(error="Internal server error")), 500

    # --- CLI commands ---
    register_cli(app)

    # --- Security headers ---
    @app.after_request
    def add_security_headers(response):
        """Add security headers to every response."""
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Control referrer information
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    # --- Logging ---
    if not app.debug:
        logging.basicConfig(level=logging.INFO)

    return app


def log_disabled_integrations(app):
    """Warn about integrations that will be skipped for lack of credentials."""
    settings = IntegrationSettings.from_config(app.config)
    if not settings.crm_enabled:
        app.logger.warning("CRM integration disabled: GHL_API_KEY / GHL_LOCATION_ID not set")
    elif not settings.pipeline_enabled:
        app.logger.warning("CRM opportunities disabled: GHL_PIPELINE_ID not set")
    if settings.crm_enabled and not settings.calendar_enabled:
        app.logger.warning("CRM appointments disabled: GHL_CALENDAR_ID not set")
    if not settings.payments_enabled:
        app.logger.warning(
            "Payment links disabled: AIRWALLEX_CLIENT_ID / AIRWALLEX_API_KEY not set"
        )


def register_cli(app):
    """Register custom CLI commands with the Flask app."""

    @app.cli.command("setup-db")
    def setup_db():
        """Create the leads table if it doesn't exist and confirm it.

        Usage:
            flask setup-db
        """
        from app.services.schema_service import bootstrap_leads_table

        try:
            exists = bootstrap_leads_table()
        except Exception as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1)

        if exists:
            click.echo("Leads table created successfully!")
        click.echo(f"Table exists: {exists}")
