"""
Main Routes

FLOW OVERVIEW
- / [GET]
  • Service information, or the maintenance screen (503) when the hosted
    backend or DATABASE_URL is not configured, or MAINTENANCE_MODE is set.
- /health [GET]
  • JSON health check; reports maintenance with 503.
- /metrics [GET]
  • Prometheus text exposition.
"""

from datetime import datetime
from flask import Blueprint, render_template, jsonify, current_app, Response
from ..config import is_backend_configured, is_database_configured
from ..utils.prom_metrics import metrics_latest, CONTENT_TYPE_LATEST

main_bp = Blueprint('main', __name__)


def in_maintenance():
    config = current_app.config
    return (
        bool(config.get('MAINTENANCE_MODE'))
        or not is_backend_configured(config)
        or not is_database_configured(config)
    )


@main_bp.route('/')
def home():
    """Home route"""
    if in_maintenance():
        return render_template('maintenance.html'), 503
    return jsonify({
        'service': 'nexupay',
        'status': 'operational',
        'app_url': current_app.config.get('APP_BASE_URL')
    })


@main_bp.route('/health')
def health():
    """Health check endpoint"""
    if in_maintenance():
        return jsonify({'status': 'maintenance', 'timestamp': datetime.utcnow().isoformat()}), 503
    return jsonify({'status': 'healthy', 'timestamp': datetime.utcnow().isoformat()})


@main_bp.route('/metrics')
def metrics():
    return Response(metrics_latest(), mimetype=CONTENT_TYPE_LATEST)
