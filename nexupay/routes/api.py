"""
API Routes

FLOW OVERVIEW
- /api/status [GET]
  • Version and environment.
- /api/reports [POST, OPTIONS]
  • { reportType, filters, format } → JSON report or CSV attachment; logged in report_logs.
- /api/export/<resource> [GET]
  • payments | debts exported as csv/json/excel (?format=).
- /api/navigation [GET]
  • ?path= → previous/next dashboard routes for swipe navigation.
"""

import os
from datetime import datetime
from flask import Blueprint, jsonify, request, current_app, Response
from ..models import Payment, Debt, db
from ..utils.api_utils import (
    request_validator, client_address, apply_cors_headers, preflight_response, requires_database
)
from ..utils.errors import ExportError
from ..utils.export_utils import export_data, to_csv
from ..utils.navigation import adjacent_route
from ..utils.reports import generate_report, log_report, UnsupportedReportError, InvalidReportFilterError

api_bp = Blueprint('api', __name__)

EXPORTS = {
    'payments': (Payment, {'date_fields': ['created_at', 'updated_at'], 'currency_fields': ['amount']}),
    'debts': (Debt, {'date_fields': ['created_at', 'paid_at'], 'currency_fields': ['amount']}),
}


@api_bp.route('/status')
def api_status():
    """API status endpoint"""
    return jsonify({
        'status': 'operational',
        'version': '1.0.0',
        'environment': os.getenv('FLASK_ENV', 'development')
    })


@api_bp.route('/reports', methods=['POST', 'OPTIONS'])
@requires_database
def reports():
    """Generate a report"""
    if request.method == 'OPTIONS':
        return preflight_response()

    is_valid, data, error = request_validator.validate_json_request(client_address())
    if not is_valid:
        return apply_cors_headers(jsonify(error)), 400

    report_type = data.get('reportType')
    if not report_type:
        return apply_cors_headers(jsonify({'error': 'Missing required field: reportType'})), 400

    fmt = str(data.get('format') or 'json').lower()
    filters = data.get('filters')
    if filters is None:
        filters = {}
    if not isinstance(filters, dict):
        return apply_cors_headers(jsonify({'error': 'filters must be an object'})), 400

    try:
        report = generate_report(report_type, filters)
    except (UnsupportedReportError, InvalidReportFilterError) as e:
        return apply_cors_headers(jsonify({'error': str(e)})), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"❌ Error generating report: {str(e)}")
        return apply_cors_headers(jsonify({'error': 'Internal server error', 'message': str(e)})), 500

    details = report['details']
    log_report(report_type, fmt, len(details), filters)
    current_app.logger.info(f"📊 Report {report_type} generated ({len(details)} rows, {fmt})")

    if fmt == 'csv':
        content = to_csv(details) if details else ''
        stamp = datetime.utcnow().strftime('%Y%m%d%H%M%S')
        response = Response(content, mimetype='text/csv')
        response.headers['Content-Disposition'] = f'attachment; filename="{report_type}-{stamp}.csv"'
        return apply_cors_headers(response), 200

    return apply_cors_headers(jsonify(report)), 200


@api_bp.route('/export/<resource>')
@requires_database
def export_resource(resource):
    """Export a table as a downloadable file"""
    if resource not in EXPORTS:
        return jsonify({'error': f'Unknown resource: {resource}'}), 404

    model, format_config = EXPORTS[resource]
    rows = [row.to_dict() for row in model.query.order_by(model.created_at, model.id).all()]
    fmt = request.args.get('format', 'csv')

    try:
        exported = export_data(rows, resource, fmt, **format_config)
    except ExportError as e:
        return jsonify({'error': str(e)}), 400

    response = Response(exported.content, mimetype=exported.mimetype)
    response.headers['Content-Disposition'] = exported.content_disposition
    return response


@api_bp.route('/navigation')
def navigation():
    """Previous/next routes for swipe navigation"""
    path = request.args.get('path', '')
    return jsonify({
        'path': path,
        'previous': adjacent_route(path, 'previous'),
        'next': adjacent_route(path, 'next')
    })
