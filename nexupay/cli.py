"""
Command Line Interface

FLOW OVERVIEW
- migrate apply PATH
  • Replay a SQL file through the backend's exec_sql RPC (or a direct
    --database-url), print a summary and manual instructions on failure.
- migrate split PATH
  • Dry run: print the statements the runner would send.
- migrate verify TABLE --column C ...
  • Optimistic check that the columns are selectable.
- checks run MANIFEST
  • Static source checks from a JSON manifest.

Commands are registered on the Flask CLI (`flask --app nexupay migrate ...`)
and exposed as the `nexupay` console script.
"""

import sys
from pathlib import Path
import click
from flask import current_app
from flask.cli import AppGroup, FlaskGroup
from .config import is_backend_configured
from .utils.backend_client import client_from_config, EngineBackend
from .utils.errors import MigrationError
from .utils.migration_runner import (
    MigrationRunner, RpcExecutor, EngineExecutor, StatementStatus,
    manual_instructions, verify_columns, verify_engine_columns
)
from .utils.source_checks import load_manifest, run_source_checks
from .utils.sql_splitter import split_sql_statements

migrate_cli = AppGroup('migrate', help='Apply and verify SQL migrations.')
checks_cli = AppGroup('checks', help='Static source checks.')

STATUS_ICONS = {
    StatementStatus.APPLIED: '✅',
    StatementStatus.SKIPPED: '⚠️ ',
    StatementStatus.FAILED: '❌',
}


def _require_backend():
    if not is_backend_configured(current_app.config):
        click.echo('❌ Backend configuration not found', err=True)
        click.echo('Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_ANON_KEY)', err=True)
        sys.exit(1)
    return client_from_config(current_app.config)


@migrate_cli.command('apply')
@click.argument('path', type=click.Path(dir_okay=False))
@click.option('--continue-on-error', is_flag=True, help='Keep going after a failed statement.')
@click.option('--delay', type=float, default=None, help='Seconds to wait between statements.')
@click.option('--database-url', default=None, help='Run through a direct database connection instead of the REST API.')
@click.option('--function', 'function', default=None, help='Name of the raw SQL RPC function.')
def apply_migration(path, continue_on_error, delay, database_url, function):
    """Apply the SQL migration in PATH."""
    if database_url:
        executor = EngineExecutor(EngineBackend(database_url))
    else:
        client = _require_backend()
        executor = RpcExecutor(client, function or current_app.config.get('MIGRATION_RPC_FUNCTION', 'exec_sql'))

    if delay is None:
        delay = current_app.config.get('MIGRATION_STATEMENT_DELAY', 0.1)

    runner = MigrationRunner(executor, delay=delay, continue_on_error=continue_on_error)
    try:
        report = runner.run_file(path)
    except MigrationError as e:
        click.echo(f'❌ {e}', err=True)
        sys.exit(1)

    for result in report.results:
        line = f"{STATUS_ICONS[result.status]} [{result.index}/{report.total}] {result.to_dict()['statement']}"
        if result.error is not None:
            line += f'  ({result.error})'
        click.echo(line)

    click.echo(
        f'\n📊 {report.applied} applied, {report.skipped} skipped, '
        f'{report.failed} failed, {report.total} total'
    )

    if report.succeeded:
        click.echo('✅ Migration completed successfully')
    else:
        if report.rpc_unavailable:
            click.echo('❌ The backend does not expose a raw SQL function; apply the migration by hand.')
        sql = Path(path).read_text(encoding='utf-8') if report.rpc_unavailable else None
        click.echo('\n' + manual_instructions(path, sql))
    sys.exit(report.exit_code)


@migrate_cli.command('split')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
def split_migration(path):
    """Print the statements found in PATH without running them."""
    try:
        sql = Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f'❌ Could not read {path}: {e}', err=True)
        sys.exit(1)
    statements = split_sql_statements(sql)
    click.echo(f'📋 {len(statements)} statements')
    for index, statement in enumerate(statements, start=1):
        click.echo(f'\n-- [{index}]\n{statement};')


@migrate_cli.command('verify')
@click.argument('table')
@click.option('--column', 'columns', multiple=True, required=True, help='Column expected on TABLE.')
@click.option('--database-url', default=None, help='Verify through a direct database connection.')
def verify_migration(table, columns, database_url):
    """Verify that TABLE exposes the given columns."""
    if database_url:
        result = verify_engine_columns(EngineBackend(database_url), table, columns)
    else:
        result = verify_columns(_require_backend(), table, columns)

    if result.ok:
        click.echo(f"✅ {table}: {', '.join(result.columns)}")
        sys.exit(0)
    click.echo(f'❌ {table}: {result.error}', err=True)
    sys.exit(1)


@checks_cli.command('run')
@click.argument('manifest', type=click.Path(exists=True, dir_okay=False))
@click.option('--root', type=click.Path(file_okay=False), default='.', help='Directory the manifest paths are relative to.')
def run_checks(manifest, root):
    """Check that expected identifiers appear in source files."""
    try:
        expectations = load_manifest(manifest)
    except (ValueError, KeyError) as e:
        click.echo(f'❌ Invalid manifest: {e}', err=True)
        sys.exit(1)

    report = run_source_checks(expectations, root)
    current = None
    for item in report.items:
        if item.entry != current:
            current = item.entry
            click.echo(f'🔍 {current}')
        icon = '✅' if item.passed else '❌'
        click.echo(f'  {icon} {item.category}: {item.identifier}')

    for path in report.missing_files:
        click.echo(f'❌ File not found: {path}', err=True)

    click.echo(f'\n📊 {report.passed}/{report.total} passed ({report.success_rate}%)')
    sys.exit(0 if report.ok else 1)


def _create_app():
    from . import create_app
    return create_app()


@click.group(cls=FlaskGroup, create_app=_create_app)
def main():
    """NexuPay operations commands."""
