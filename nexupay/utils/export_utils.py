"""
Export Utilities

FLOW OVERVIEW
- to_csv(rows, headers) → comma separated text, quoting values that need it.
- to_json(data) → indented JSON; dates become ISO strings.
- to_excel(rows) → UTF-8 BOM + tab separated text that spreadsheet tools open directly.
- format_data_for_export(rows, ...) → copies of rows with dates, currency,
  booleans and custom fields formatted for people (es-CL conventions).
- export_data(rows, filename, fmt, ...) → ExportFile(content, filename, mimetype)
  ready to be sent as an attachment.
"""

import csv
import io
import json
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional
from .errors import ExportError


BOM = '\ufeff'


class ExportFile:
    """Exported content with its download name and MIME type."""

    def __init__(self, content: str, filename: str, mimetype: str):
        self.content = content
        self.filename = filename
        self.mimetype = mimetype

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


def to_csv(rows: List[Dict[str, Any]], headers: Optional[List[str]] = None) -> str:
    """
    Serialize rows to CSV.

    Args:
        rows: List of row dictionaries
        headers: Column order; defaults to the first row's keys

    Raises:
        ExportError: if there are no rows
    """
    if not rows:
        raise ExportError('No data to export')

    headers = headers or list(rows[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(headers)
    for row in rows:
        writer.writerow(['' if row.get(header) is None else row.get(header) for header in headers])
    return buffer.getvalue().rstrip('\n')


def _json_default(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def to_json(data: Any) -> str:
    if data is None:
        raise ExportError('No data to export')
    return json.dumps(data, indent=2, ensure_ascii=False, default=_json_default)


def to_excel(rows: List[Dict[str, Any]]) -> str:
    """Tab separated text with a BOM so spreadsheet tools pick UTF-8."""
    if not rows:
        raise ExportError('No data to export')

    headers = list(rows[0].keys())
    lines = ['\t'.join(headers)]
    for row in rows:
        lines.append('\t'.join('' if row.get(header) is None else str(row.get(header))
                               for header in headers))
    return BOM + '\n'.join(lines)


def _parse_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00')).date()
        except ValueError:
            return None
    return None


def format_date(value) -> Any:
    parsed = _parse_date(value)
    return parsed.strftime('%d/%m/%Y') if parsed else value


def format_currency(value) -> str:
    """es-CL currency: `$` and `.` as thousands separator, `,` for decimals."""
    amount = float(value)
    if amount == int(amount):
        text = f'{int(amount):,}'.replace(',', '.')
    else:
        text = f'{amount:,.2f}'.replace(',', '_').replace('.', ',').replace('_', '.')
    return f'${text}'


def format_data_for_export(rows: Iterable[Dict[str, Any]], date_fields: Iterable[str] = (),
                           currency_fields: Iterable[str] = (), boolean_fields: Iterable[str] = (),
                           custom_formatters: Optional[Dict[str, Callable[[Any], Any]]] = None) -> List[Dict[str, Any]]:
    """Return formatted copies of `rows`; the input rows are not modified."""
    custom_formatters = custom_formatters or {}
    formatted_rows = []

    for row in rows:
        item = dict(row)

        for field in date_fields:
            if item.get(field):
                item[field] = format_date(item[field])

        for field in currency_fields:
            if item.get(field) is not None:
                item[field] = format_currency(item[field])

        for field in boolean_fields:
            if item.get(field) is not None:
                item[field] = 'Sí' if item[field] else 'No'

        for field, formatter in custom_formatters.items():
            if item.get(field) is not None and callable(formatter):
                item[field] = formatter(item[field])

        formatted_rows.append(item)

    return formatted_rows


def export_data(rows: List[Dict[str, Any]], filename: str, fmt: str = 'csv', **format_config) -> ExportFile:
    """
    Format and serialize rows in the requested format.

    Args:
        rows: Row dictionaries
        filename: Base filename without extension
        fmt: 'csv', 'json', 'excel' or 'xls'
        **format_config: Passed to format_data_for_export

    Raises:
        ExportError: on empty data or an unsupported format
    """
    formatted = format_data_for_export(rows or [], **format_config)
    fmt = (fmt or '').lower()

    if fmt == 'csv':
        return ExportFile(to_csv(formatted), f'{filename}.csv', 'text/csv')
    if fmt == 'json':
        return ExportFile(to_json(formatted), f'{filename}.json', 'application/json')
    if fmt in ('excel', 'xls'):
        return ExportFile(to_excel(formatted), f'{filename}.xls', 'application/vnd.ms-excel')
    raise ExportError(f'Unsupported format: {fmt}')
