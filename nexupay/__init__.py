"""
NexuPay Operations Service Package

FLOW OVERVIEW
- create_app(test_config=None)
  • Build Flask app, apply config (test or env-based), init extensions (DB, Mail).
  • Register blueprints: main (/), webhooks (/webhooks), email (/email), api (/api).
  • Register global error handlers, request metrics and CLI commands.
  • Warn when DATABASE_URL is missing outside testing (maintenance mode).
"""

import time
from flask import Flask, request
from flask_mail import Mail
from .models import db
from .routes import main_bp, webhooks_bp, email_bp, api_bp
from .config import Config, is_database_configured


def create_app(test_config=None):
    """Application factory pattern for production deployment"""
    app = Flask(__name__)

    # Configuration
    if test_config:
        # Use test configuration if provided
        app.config.update(test_config)
    else:
        # Use environment-based configuration
        app.config.from_object(Config())

    # Initialize extensions
    db.init_app(app)
    Mail(app)

    # Register blueprints
    app.register_blueprint(main_bp)
    app.register_blueprint(webhooks_bp, url_prefix='/webhooks')
    app.register_blueprint(email_bp, url_prefix='/email')
    app.register_blueprint(api_bp, url_prefix='/api')

    # Register error handlers
    from .utils.error_handlers import register_error_handlers
    register_error_handlers(app)

    _register_request_metrics(app)

    if not is_database_configured(app.config):
        app.logger.warning("⚠️  DATABASE_URL is not configured; serving maintenance mode")

    from .cli import migrate_cli, checks_cli
    app.cli.add_command(migrate_cli)
    app.cli.add_command(checks_cli)

    return app


def _register_request_metrics(app):
    from .utils.prom_metrics import observe_request

    @app.before_request
    def _start_timer():
        request.environ['nexupay.start'] = time.time()

    @app.after_request
    def _observe(response):
        started = request.environ.get('nexupay.start')
        if started is not None and request.endpoint != 'main.metrics':
            observe_request(request.endpoint or 'unknown', response.status_code, time.time() - started)
        return response
