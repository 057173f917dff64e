"""
Hosted Backend Client

FLOW OVERVIEW
- BackendClient(url, key)
  • rpc(function, params) → POST /rest/v1/rpc/<function>.
  • select(table, columns, filters, limit) → GET /rest/v1/<table>.
  • Non-2xx answers and transport failures raise BackendError with the
    backend's message/code so callers can classify them.
- EngineBackend(database_url)
  • Same role when a direct database URL is available: execute_sql(sql) and
    table_columns(table) through a SQLAlchemy engine.
- client_from_config(config) → BackendClient built from app config, preferring
  the service role key over the anon key.
"""

import logging
from typing import Dict, Any, Optional, List
import requests
from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import SQLAlchemyError
from .errors import BackendError


class BackendClient:
    """Thin REST/RPC client for the hosted backend."""

    def __init__(self, url: str, key: str, timeout: float = 30, session: requests.Session = None):
        if not url or not key:
            raise BackendError('Backend URL and key are required')
        self.url = url.rstrip('/')
        self.key = key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logging.getLogger(__name__)

    @property
    def headers(self) -> Dict[str, str]:
        return {
            'apikey': self.key,
            'Authorization': f'Bearer {self.key}',
            'Content-Type': 'application/json'
        }

    def rpc(self, function: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Call a database function exposed by the REST API."""
        return self._request('POST', f'/rest/v1/rpc/{function}', json=params or {})

    def select(self, table: str, columns: str = '*', filters: Optional[Dict[str, Any]] = None,
               limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Select rows from a table.

        Args:
            table: Table name
            columns: Comma separated column list
            filters: Equality filters, column → value
            limit: Maximum number of rows

        Returns:
            List of row dictionaries
        """
        params = {'select': columns}
        for column, value in (filters or {}).items():
            params[column] = f'eq.{value}'
        if limit is not None:
            params['limit'] = str(limit)
        return self._request('GET', f'/rest/v1/{table}', params=params) or []

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f'{self.url}{path}'
        try:
            response = self.session.request(method, url, headers=self.headers,
                                            timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            self.logger.error(f"Backend request {method} {path} failed: {str(e)}")
            raise BackendError(f'Backend unreachable: {str(e)}') from e

        if response.status_code >= 400:
            raise self._error_from_response(response)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _error_from_response(response) -> BackendError:
        code = None
        details = None
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            message = body.get('message') or body.get('error') or response.text
            code = body.get('code')
            details = body.get('details') or body.get('hint')
        else:
            message = response.text or response.reason or 'Backend error'

        return BackendError(message, status_code=response.status_code, code=code, details=details)


class EngineBackend:
    """Direct database access through SQLAlchemy, used instead of the REST API."""

    def __init__(self, database_url: str, engine=None):
        self.engine = engine or create_engine(database_url)
        self.logger = logging.getLogger(__name__)

    def execute_sql(self, sql: str) -> None:
        """Execute one statement in its own transaction."""
        try:
            with self.engine.begin() as connection:
                connection.exec_driver_sql(sql)
        except SQLAlchemyError as e:
            orig = getattr(e, 'orig', None)
            message = str(orig) if orig is not None else str(e)
            code = getattr(orig, 'pgcode', None)
            raise BackendError(message, code=code) from e

    def table_columns(self, table: str) -> List[str]:
        """Column names of `table`; raises BackendError when it does not exist."""
        inspector = inspect(self.engine)
        if not inspector.has_table(table):
            raise BackendError(f'relation "{table}" does not exist', code='42P01')
        return [column['name'] for column in inspector.get_columns(table)]


def client_from_config(config, session: requests.Session = None) -> BackendClient:
    """Build a BackendClient from a Flask config mapping."""
    key = config.get('SUPABASE_SERVICE_ROLE_KEY') or config.get('SUPABASE_ANON_KEY')
    return BackendClient(
        config.get('SUPABASE_URL'),
        key,
        timeout=config.get('BACKEND_TIMEOUT', 30),
        session=session
    )
