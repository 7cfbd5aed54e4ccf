import os
import logging

import click
from flask import Flask, jsonify, render_template, request

from app.config import MailSettings, config_by_name
from app.extensions import csrf, limiter


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

    # --- Init extensions ---
    csrf.init_app(app)
    limiter.init_app(app)

    # --- Email settings (read once, immutable for the app's lifetime) ---
    app.extensions["mail_settings"] = MailSettings.from_config(app.config)

    # --- Register blueprints ---
    from app.blueprints.main import main_bp
    from app.blueprints.contact import contact_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(contact_bp)

    # --- Error handlers ---
    @app.errorhandler(404)
    def not_found(e):
        return render_template("errors/404.html"), 404

    @app.errorhandler(429)
    def rate_limited(e):
        if request.path.startswith("/contact/"):
            return jsonify(
                success=False,
                error="Too many messages. Please try again later.",
            ), 429
        return render_template("errors/429.html"), 429

    @app.errorhandler(500)
    def server_error(e):
        return render_template("errors/500.html"), 500

    # --- CLI commands ---
    register_cli(app)

    # --- Security headers ---
    @app.after_request
    def add_security_headers(response):
        """Add security headers to every response."""
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Control referrer information
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Permissions Policy (restrict browser features)
        response.headers["Permissions-Policy"] = (
            "camera=(), microphone=(), geolocation=(), payment=()"
        )
        # Content Security Policy
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self'; "
            "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com; "
            "img-src 'self' data:; "
            "font-src 'self' https://fonts.gstatic.com; "
            "connect-src 'self'; "
            "base-uri 'self'; "
            "form-action 'self'; "
            "frame-ancestors 'none';"
        )
        # Strict Transport Security (only in production)
        if not app.debug:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        return response

    # --- Logging ---
    if not app.debug:
        logging.basicConfig(level=logging.INFO)

    return app


def register_cli(app):
    """Register custom CLI commands with the Flask app."""

    @app.cli.command("mail-config")
    def mail_config():
        """Show the Mailtrap settings the contact form will use.

        The token is never printed in full — only its length and a
        masked preview.

        Usage:
            flask mail-config
        """
        settings = app.extensions["mail_settings"]

        click.echo("")
        click.echo("=" * 60)
        click.echo("Contact form email settings")
        click.echo("=" * 60)
        if settings.token:
            click.echo(f"  Token:      {settings.token_preview} ({len(settings.token)} chars)")
        else:
            click.echo("  Token:      (not set) — contact form submissions will fail")
        click.echo(f"  API URL:    {settings.api_url}")
        click.echo(f"  Sender:     {settings.sender_name} <{settings.sender_email}>")
        click.echo(f"  Recipient:  {settings.recipient_email}")
        click.echo(f"  BCC:        {settings.bcc_email or '(none)'}")
        click.echo(f"  Timeout:    {settings.timeout}s")
        click.echo("=" * 60)
