"""
Webhook Routes

FLOW OVERVIEW
- /webhooks/mercadopago [POST, OPTIONS]
  • OPTIONS → CORS preflight.
  • Validate JSON body → WebhookProcessor → JSON envelope (200/400/500).
  • Other methods get the global 405 JSON answer.
"""

from datetime import datetime
from flask import Blueprint, jsonify, request, current_app
from ..models import db
from ..utils.api_utils import (
    request_validator, client_address, apply_cors_headers, preflight_response, requires_database
)
from ..utils.payment_provider import provider_from_config
from ..utils.webhook_service import WebhookProcessor

webhooks_bp = Blueprint('webhooks', __name__)


def get_processor():
    """Processor for the current app; tests may install one under extensions."""
    processor = current_app.extensions.get('nexupay_webhook_processor')
    if processor is None:
        processor = WebhookProcessor(provider_from_config(current_app.config))
    return processor


@webhooks_bp.route('/mercadopago', methods=['POST', 'OPTIONS'])
@requires_database
def mercadopago_webhook():
    """Receive payment provider notifications"""
    if request.method == 'OPTIONS':
        return preflight_response()

    client_ip = client_address()
    is_valid, payload, error = request_validator.validate_json_request(client_ip)
    if not is_valid:
        return apply_cors_headers(jsonify(error)), 400

    try:
        result = get_processor().process(payload)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"❌ Error processing webhook: {str(e)}")
        response = jsonify({'error': 'Internal server error', 'message': str(e)})
        return apply_cors_headers(response), 500

    if not result.success:
        return apply_cors_headers(jsonify({'error': result.error})), result.status_code

    response = jsonify({
        'success': True,
        'message': 'Webhook processed successfully',
        'received': {
            'type': payload.get('type'),
            'action': payload.get('action'),
            'timestamp': datetime.utcnow().isoformat()
        }
    })
    return apply_cors_headers(response), 200
