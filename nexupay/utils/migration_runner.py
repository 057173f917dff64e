"""
Migration Runner

FLOW OVERVIEW
- MigrationRunner.run_file(path)
  • Read the SQL file, split it into statements, replay them one by one.
- MigrationRunner.run_statements(statements, source)
  • Each statement goes through the executor and is classified:
    APPLIED, SKIPPED (object already exists) or FAILED.
  • A missing RPC function aborts the run: no later statement can succeed.
  • Other failures abort unless continue_on_error is set.
  • Pauses `delay` seconds between statements to stay under API rate limits.
- RpcExecutor → runs SQL through the backend's exec_sql RPC, trying the
  parameter names different deployments of that function use.
- EngineExecutor → runs SQL through a direct SQLAlchemy connection.
- verify_columns / verify_tables → optimistic post-migration checks that
  select the expected columns with limit 1.
- manual_instructions(path, sql) → operator instructions printed when the
  migration has to be applied by hand.
"""

import time
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence
from .errors import BackendError, MigrationError
from .prom_metrics import observe_migration_statement
from .sql_splitter import split_sql_statements, statement_summary


class StatementStatus(str, Enum):
    APPLIED = 'applied'
    SKIPPED = 'skipped'
    FAILED = 'failed'


class StatementResult:
    """Outcome of one migration statement."""

    def __init__(self, index: int, statement: str, status: StatementStatus,
                 error: Optional[BackendError] = None):
        self.index = index
        self.statement = statement
        self.status = status
        self.error = error

    def to_dict(self):
        return {
            'index': self.index,
            'statement': statement_summary(self.statement),
            'status': self.status.value,
            'error': str(self.error) if self.error else None
        }


class MigrationReport:
    """Aggregated outcome of a migration run."""

    def __init__(self, source: str, total: int):
        self.source = source
        self.total = total
        self.results: List[StatementResult] = []
        self.aborted = False
        self.rpc_unavailable = False

    def _count(self, status: StatementStatus) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def applied(self) -> int:
        return self._count(StatementStatus.APPLIED)

    @property
    def skipped(self) -> int:
        return self._count(StatementStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(StatementStatus.FAILED)

    @property
    def succeeded(self) -> bool:
        return not self.aborted and self.failed == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1

    def to_dict(self):
        return {
            'source': self.source,
            'total': self.total,
            'applied': self.applied,
            'skipped': self.skipped,
            'failed': self.failed,
            'aborted': self.aborted,
            'rpc_unavailable': self.rpc_unavailable,
            'results': [result.to_dict() for result in self.results]
        }


class RpcExecutor:
    """Executes SQL through the backend's raw-SQL RPC function."""

    DEFAULT_PARAM_NAMES = ('sql', 'sql_query', 'sql_statement')

    def __init__(self, client, function: str = 'exec_sql',
                 param_names: Sequence[str] = DEFAULT_PARAM_NAMES):
        self.client = client
        self.function = function
        self.param_names = list(param_names)
        self.logger = logging.getLogger(__name__)

    def __call__(self, sql: str) -> None:
        last_error = None
        for name in list(self.param_names):
            try:
                self.client.rpc(self.function, {name: sql})
            except BackendError as e:
                if not e.is_missing_function:
                    raise
                self.logger.debug(f"{self.function}({name}) not found, trying next signature")
                last_error = e
                continue
            # Remember the signature that worked
            if self.param_names[0] != name:
                self.param_names.remove(name)
                self.param_names.insert(0, name)
            return
        raise last_error


class EngineExecutor:
    """Executes SQL through a direct database connection."""

    def __init__(self, backend):
        self.backend = backend

    def __call__(self, sql: str) -> None:
        self.backend.execute_sql(sql)


class MigrationRunner:
    """Replays SQL statements against the backend with error classification."""

    def __init__(self, executor: Callable[[str], None], delay: float = 0.1,
                 continue_on_error: bool = False, sleep: Callable[[float], None] = time.sleep):
        self.executor = executor
        self.delay = delay
        self.continue_on_error = continue_on_error
        self.sleep = sleep
        self.logger = logging.getLogger(__name__)

    def run_file(self, path) -> MigrationReport:
        """
        Apply the migration stored in `path`.

        Raises:
            MigrationError: if the file is missing or unreadable
        """
        path = Path(path)
        if not path.is_file():
            raise MigrationError(f'Migration file not found: {path}')
        try:
            sql = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise MigrationError(f'Could not read {path}: {str(e)}') from e

        self.logger.info(f"🔄 Running migration: {path} ({len(sql)} characters)")
        return self.run_statements(split_sql_statements(sql), source=str(path))

    def run_statements(self, statements: Iterable[str], source: str = '<sql>') -> MigrationReport:
        statements = list(statements)
        report = MigrationReport(source, len(statements))
        self.logger.info(f"📋 Found {len(statements)} SQL statements")

        for index, statement in enumerate(statements, start=1):
            if index > 1 and self.delay:
                self.sleep(self.delay)

            result = self._run_one(index, len(statements), statement)
            report.results.append(result)
            observe_migration_statement(result.status.value)

            if result.status != StatementStatus.FAILED:
                continue
            if result.error is not None and result.error.is_missing_function:
                self.logger.error("❌ Raw SQL RPC is not available on this backend; stopping")
                report.rpc_unavailable = True
                report.aborted = True
                break
            if not self.continue_on_error:
                report.aborted = True
                break

        self.logger.info(
            f"Migration {source}: {report.applied} applied, {report.skipped} skipped, "
            f"{report.failed} failed of {report.total}"
        )
        return report

    def _run_one(self, index: int, total: int, statement: str) -> StatementResult:
        summary = statement_summary(statement)
        self.logger.info(f"⚡ Statement {index}/{total}: {summary}")
        try:
            self.executor(statement + ';')
        except BackendError as e:
            if e.is_already_exists:
                self.logger.warning(f"⚠️  Statement {index} already applied: {e.message}")
                return StatementResult(index, statement, StatementStatus.SKIPPED, e)
            self.logger.error(f"❌ Statement {index} failed: {e}")
            return StatementResult(index, statement, StatementStatus.FAILED, e)

        self.logger.info(f"✅ Statement {index} applied")
        return StatementResult(index, statement, StatementStatus.APPLIED)


class VerificationResult:
    """Outcome of a post-migration verification query."""

    def __init__(self, table: str, columns: List[str], ok: bool, error: Optional[str] = None):
        self.table = table
        self.columns = columns
        self.ok = ok
        self.error = error

    def to_dict(self):
        return {'table': self.table, 'columns': self.columns, 'ok': self.ok, 'error': self.error}


def verify_columns(client, table: str, columns: Sequence[str]) -> VerificationResult:
    """Check that `table` exposes `columns` by selecting them with limit 1."""
    columns = list(columns)
    try:
        client.select(table, columns=','.join(columns), limit=1)
    except BackendError as e:
        return VerificationResult(table, columns, False, e.message)
    return VerificationResult(table, columns, True)


def verify_engine_columns(backend, table: str, columns: Sequence[str]) -> VerificationResult:
    """verify_columns for a direct database connection."""
    columns = list(columns)
    try:
        existing = set(backend.table_columns(table))
    except BackendError as e:
        return VerificationResult(table, columns, False, e.message)
    missing = [column for column in columns if column not in existing]
    if missing:
        return VerificationResult(table, columns, False, f"Missing columns: {', '.join(missing)}")
    return VerificationResult(table, columns, True)


def verify_tables(client, tables: Iterable[str]) -> List[VerificationResult]:
    return [verify_columns(client, table, ['id']) for table in tables]


def manual_instructions(path, sql: Optional[str] = None) -> str:
    """Instructions for applying a migration by hand in the backend's SQL editor."""
    lines = [
        '🔧 MANUAL INSTRUCTIONS',
        '======================',
        '1. Open the backend dashboard and select the project',
        '2. Go to the SQL Editor',
        f'3. Paste the contents of {path}',
        '4. Click "Run"',
    ]
    if sql:
        lines.extend(['', sql.strip()])
    return '\n'.join(lines)
