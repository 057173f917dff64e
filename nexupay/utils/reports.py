"""
Report Generation

FLOW OVERVIEW
- generate_report(report_type, filters)
  • payment_summary → payments filtered by status/companyId/dateRange, totals by status.
  • debt_portfolio → debts filtered by status/companyId/ageRange, totals by status
    plus paid/outstanding amounts and recovery rate.
  • Unknown types raise UnsupportedReportError; malformed filters raise
    InvalidReportFilterError.
- log_report(...) → persist a ReportLog row for auditing.

Filters:
- dateRange: {"start": ISO date/datetime, "end": ISO date/datetime} on created_at.
  A date-only `end` covers that whole day.
- ageRange: {"min": days, "max": days} on the debt's age (now - created_at).
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from ..models import Payment, Debt, ReportLog, db
from .errors import NexuPayError


class UnsupportedReportError(NexuPayError):
    """The requested report type does not exist."""


class InvalidReportFilterError(NexuPayError):
    """A report filter has the wrong shape or value."""


def _parse_timestamp(value, field: str) -> datetime:
    if not isinstance(value, str):
        raise InvalidReportFilterError(f'{field} must be an ISO date string')
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError as e:
        raise InvalidReportFilterError(f'{field} is not a valid date: {value}') from e
    if parsed.tzinfo is not None:
        # created_at is stored as naive UTC
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _range(filters: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = filters.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidReportFilterError(f'{name} must be an object')
    return value


def _apply_date_range(query, column, filters):
    date_range = _range(filters, 'dateRange')
    start, end = date_range.get('start'), date_range.get('end')
    if start:
        query = query.filter(column >= _parse_timestamp(start, 'dateRange.start'))
    if end:
        end_at = _parse_timestamp(end, 'dateRange.end')
        if len(end) == 10:
            query = query.filter(column < end_at + timedelta(days=1))
        else:
            query = query.filter(column <= end_at)
    return query


def _days(value, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise InvalidReportFilterError(f'{field} must be a non-negative number of days')
    return value


def _apply_age_range(query, column, filters, now: datetime):
    age_range = _range(filters, 'ageRange')
    if age_range.get('min') is not None:
        query = query.filter(column <= now - timedelta(days=_days(age_range['min'], 'ageRange.min')))
    if age_range.get('max') is not None:
        query = query.filter(column >= now - timedelta(days=_days(age_range['max'], 'ageRange.max')))
    return query


def _summarize(rows, amount_field='amount'):
    by_status = {}
    total = 0.0
    for row in rows:
        amount = row.get(amount_field) or 0
        total += amount
        bucket = by_status.setdefault(row.get('status'), {'count': 0, 'amount': 0.0})
        bucket['count'] += 1
        bucket['amount'] += amount
    return {
        'total_records': len(rows),
        'total_amount': round(total, 2),
        'by_status': by_status
    }


def payment_summary(filters: Dict[str, Any]) -> Dict[str, Any]:
    query = Payment.query
    if filters.get('status'):
        query = query.filter_by(status=filters['status'])
    if filters.get('companyId'):
        query = query.filter_by(company_id=str(filters['companyId']))
    query = _apply_date_range(query, Payment.created_at, filters)
    rows = [payment.to_dict() for payment in query.order_by(Payment.created_at.desc()).all()]
    return {'summary': _summarize(rows), 'details': rows}


def debt_portfolio(filters: Dict[str, Any]) -> Dict[str, Any]:
    query = Debt.query
    if filters.get('status'):
        query = query.filter_by(status=filters['status'])
    if filters.get('companyId'):
        query = query.filter_by(company_id=str(filters['companyId']))
    query = _apply_age_range(query, Debt.created_at, filters, datetime.utcnow())
    rows = [debt.to_dict() for debt in query.order_by(Debt.created_at.desc()).all()]

    summary = _summarize(rows)
    paid = sum(row['amount'] or 0 for row in rows if row['status'] == 'paid')
    summary['paid_amount'] = round(paid, 2)
    summary['outstanding_amount'] = round(summary['total_amount'] - paid, 2)
    summary['recovery_rate'] = round(100.0 * paid / summary['total_amount'], 2) if summary['total_amount'] else 0
    return {'summary': summary, 'details': rows}


REPORTS = {
    'payment_summary': payment_summary,
    'debt_portfolio': debt_portfolio,
}


def generate_report(report_type: str, filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    generator = REPORTS.get(report_type)
    if generator is None:
        raise UnsupportedReportError(f'Report type not supported: {report_type}')
    if filters is not None and not isinstance(filters, dict):
        raise InvalidReportFilterError('filters must be an object')
    report = generator(filters or {})
    report['generated_at'] = datetime.utcnow().isoformat()
    return report


def log_report(report_type: str, fmt: str, record_count: int, filters=None, status: str = 'success') -> ReportLog:
    entry = ReportLog(
        report_type=report_type,
        format=fmt,
        status=status,
        record_count=record_count,
        filters=filters or {}
    )
    db.session.add(entry)
    db.session.commit()
    return entry
