#!/usr/bin/env python3
"""
Unit tests for the export utilities module
"""

import json
import pytest
from datetime import date, datetime
from nexupay.utils.errors import ExportError
from nexupay.utils.export_utils import (
    BOM, to_csv, to_json, to_excel, format_date, format_currency,
    format_data_for_export, export_data
)

ROWS = [
    {'name': 'Ana', 'amount': 150000, 'due': '2024-03-05', 'active': True},
    {'name': 'Pérez, Juan', 'amount': 1234.5, 'due': None, 'active': False},
]


class TestToCsv:

    def test_header_and_rows(self):
        content = to_csv([{'a': 1, 'b': 'x'}, {'a': 2, 'b': 'y'}])
        assert content == 'a,b\n1,x\n2,y'

    def test_quotes_values_with_commas_and_quotes(self):
        content = to_csv([{'name': 'Pérez, Juan', 'note': 'say "hi"'}])
        assert content.split('\n')[1] == '"Pérez, Juan","say ""hi"""'

    def test_multiline_values_are_quoted(self):
        content = to_csv([{'note': 'linea 1\nlinea 2', 'n': 1}])
        assert content == 'note,n\n"linea 1\nlinea 2",1'

    def test_explicit_headers_and_missing_values(self):
        content = to_csv([{'a': 1}], headers=['a', 'b'])
        assert content == 'a,b\n1,'

    def test_empty_rows(self):
        with pytest.raises(ExportError, match='No data to export'):
            to_csv([])


class TestToJsonAndExcel:

    def test_json_serializes_dates(self):
        data = json.loads(to_json([{'when': date(2024, 3, 5)}]))
        assert data == [{'when': '2024-03-05'}]

    def test_json_keeps_unicode(self):
        assert 'Pérez' in to_json({'name': 'Pérez'})

    def test_json_none(self):
        with pytest.raises(ExportError):
            to_json(None)

    def test_excel_is_tab_separated_with_bom(self):
        content = to_excel([{'a': 1, 'b': None}])
        assert content.startswith(BOM)
        assert content[len(BOM):] == 'a\tb\n1\t'

    def test_excel_empty(self):
        with pytest.raises(ExportError):
            to_excel([])


class TestFormatting:

    def test_format_date(self):
        assert format_date('2024-03-05') == '05/03/2024'
        assert format_date('2024-03-05T10:30:00Z') == '05/03/2024'
        assert format_date(datetime(2024, 12, 31, 23, 59)) == '31/12/2024'
        assert format_date('not a date') == 'not a date'

    def test_format_currency(self):
        assert format_currency(150000) == '$150.000'
        assert format_currency(0) == '$0'
        assert format_currency(1234.5) == '$1.234,50'
        assert format_currency('2500') == '$2.500'

    def test_format_data_for_export(self):
        formatted = format_data_for_export(
            ROWS,
            date_fields=['due'],
            currency_fields=['amount'],
            boolean_fields=['active'],
            custom_formatters={'name': str.upper}
        )

        assert formatted[0] == {'name': 'ANA', 'amount': '$150.000', 'due': '05/03/2024', 'active': 'Sí'}
        assert formatted[1]['due'] is None
        assert formatted[1]['active'] == 'No'

    def test_input_rows_unchanged(self):
        format_data_for_export(ROWS, currency_fields=['amount'])
        assert ROWS[0]['amount'] == 150000


class TestExportData:

    def test_csv(self):
        exported = export_data(ROWS, 'deudores', currency_fields=['amount'])

        assert exported.filename == 'deudores.csv'
        assert exported.mimetype == 'text/csv'
        assert exported.content_disposition == 'attachment; filename="deudores.csv"'
        assert '$150.000' in exported.content

    def test_json(self):
        exported = export_data(ROWS, 'deudores', 'JSON')

        assert exported.filename == 'deudores.json'
        assert json.loads(exported.content)[1]['name'] == 'Pérez, Juan'

    @pytest.mark.parametrize('fmt', ['excel', 'xls'])
    def test_excel(self, fmt):
        exported = export_data(ROWS, 'deudores', fmt)

        assert exported.filename == 'deudores.xls'
        assert exported.mimetype == 'application/vnd.ms-excel'

    def test_unsupported_format(self):
        with pytest.raises(ExportError, match='Unsupported format: pdf'):
            export_data(ROWS, 'deudores', 'pdf')

    def test_empty_data(self):
        with pytest.raises(ExportError):
            export_data([], 'deudores')
