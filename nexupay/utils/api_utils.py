"""
API Utilities Module

FLOW OVERVIEW
- APIRequestValidator
  • validate_json_request → parse/validate JSON object body and return (ok, data, error).
  • validate_required_fields → ensure the named fields are present and non-empty.
- CORS_HEADERS / apply_cors_headers → headers the serverless handlers returned, applied
  to webhook and email responses so browser and provider callers behave the same.
- preflight_response → empty 200 answer for OPTIONS requests.
- requires_database → 503 for endpoints that write when DATABASE_URL is not configured.

Used by the webhook, email and report endpoints to avoid code duplication.
"""

import logging
from functools import wraps
from typing import Dict, Any, Tuple, Optional, Iterable
from flask import request, make_response, jsonify, current_app
from ..config import is_database_configured


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type, Authorization',
    'Access-Control-Allow-Methods': 'GET, POST, OPTIONS'
}


class APIRequestValidator:
    """Handles common request validation logic."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def validate_json_request(self, client_ip: str = None) -> Tuple[bool, Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """
        Validate and parse a JSON object request body.

        Args:
            client_ip: Client IP for logging

        Returns:
            Tuple of (is_valid, data, error_response)
        """
        data = request.get_json(force=True, silent=True)

        if data is None:
            self.logger.warning(f"Invalid JSON from {client_ip}")
            return False, None, {'error': 'Invalid JSON payload'}

        if not isinstance(data, dict):
            self.logger.warning(f"Invalid data type from {client_ip}: {type(data)}")
            return False, None, {'error': 'Request body must be a JSON object'}

        return True, data, None

    def validate_required_fields(self, data: Dict[str, Any], fields: Iterable[str],
                                 client_ip: str = None) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """
        Check that every field in `fields` is present and truthy.

        Returns:
            Tuple of (is_valid, error_response)
        """
        fields = list(fields)
        missing = [field for field in fields if not data.get(field)]
        if missing:
            self.logger.warning(f"Missing fields {missing} from {client_ip}")
            return False, {'error': f"Missing required fields: {', '.join(fields)}"}
        return True, None


def client_address() -> str:
    """Best-effort client address for logging."""
    return request.environ.get('HTTP_X_FORWARDED_FOR',
                               request.environ.get('REMOTE_ADDR', 'unknown'))


def apply_cors_headers(response):
    """Attach CORS headers to a response."""
    for header, value in CORS_HEADERS.items():
        response.headers[header] = value
    return response


def preflight_response():
    """Answer an OPTIONS preflight with CORS headers and an empty body."""
    return apply_cors_headers(make_response('', 200))


def requires_database(f):
    """Decorator answering 503 instead of writing to an unconfigured (in-memory) database"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if request.method != 'OPTIONS' and not is_database_configured(current_app.config):
            current_app.logger.error(f"❌ DATABASE_URL not configured; refusing {request.method} {request.path}")
            response = jsonify({'error': 'Service unavailable', 'message': 'Database not configured'})
            return apply_cors_headers(response), 503
        return f(*args, **kwargs)
    return decorated_function


# Global instances
request_validator = APIRequestValidator()
