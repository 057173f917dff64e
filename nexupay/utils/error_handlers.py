"""
Error Handlers

Registers JSON error envelopes for the HTTP surface. Every handler answers
with `{"error": ..., "message": ...}` so webhook and email callers always
receive JSON.
"""

from flask import jsonify


def json_error(error, message, status_code):
    """Build a JSON error response tuple."""
    payload = {'error': error}
    if message:
        payload['message'] = message
    return jsonify(payload), status_code


def register_error_handlers(app):
    """Register error handlers with the Flask app"""

    @app.errorhandler(400)
    def bad_request(error):
        return json_error('Bad request', getattr(error, 'description', None), 400)

    @app.errorhandler(404)
    def not_found(error):
        return json_error('Not found',
            'The requested resource does not exist.', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return json_error('Method not allowed', None, 405)

    @app.errorhandler(500)
    def internal_error(error):
        from ..models import db
        db.session.rollback()
        return json_error('Internal server error',
            'Something went wrong on our end. Please try again later.', 500)
