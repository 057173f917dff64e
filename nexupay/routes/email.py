"""
Email Routes

FLOW OVERVIEW
- /email/send [POST, OPTIONS]
  • Body: { to, subject, template, data, from }.
  • 400 on missing fields, 404 on unknown template, 500 on delivery failure,
    200 with the message id on success.
"""

from flask import Blueprint, jsonify, request, current_app
from ..models import db
from ..utils.api_utils import (
    request_validator, client_address, apply_cors_headers, preflight_response, requires_database
)
from ..utils.email_service import EmailService
from ..utils.errors import TemplateNotFoundError, EmailDeliveryError

email_bp = Blueprint('email', __name__)


def get_email_service():
    return EmailService(
        current_app.extensions['mail'],
        default_sender=current_app.config.get('MAIL_DEFAULT_SENDER') or 'noreply@nexupay.cl'
    )


@email_bp.route('/send', methods=['POST', 'OPTIONS'])
@requires_database
def send_email():
    """Send a transactional email from a stored template"""
    if request.method == 'OPTIONS':
        return preflight_response()

    client_ip = client_address()
    is_valid, data, error = request_validator.validate_json_request(client_ip)
    if not is_valid:
        return apply_cors_headers(jsonify(error)), 400

    is_valid, error = request_validator.validate_required_fields(data, ('to', 'subject', 'template'), client_ip)
    if not is_valid:
        return apply_cors_headers(jsonify(error)), 400

    try:
        message_id = get_email_service().send_templated(
            data['to'],
            data['subject'],
            data['template'],
            data.get('data') or {},
            sender=data.get('from')
        )
    except TemplateNotFoundError:
        return apply_cors_headers(jsonify({'error': 'Email template not found'})), 404
    except EmailDeliveryError as e:
        return apply_cors_headers(jsonify({'error': 'Internal server error', 'message': str(e)})), 500
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"❌ Error sending email: {str(e)}")
        return apply_cors_headers(jsonify({'error': 'Internal server error', 'message': str(e)})), 500

    return apply_cors_headers(jsonify({
        'success': True,
        'message': 'Email sent successfully',
        'messageId': message_id
    })), 200
