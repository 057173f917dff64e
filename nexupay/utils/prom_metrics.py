"""
Prometheus metrics registration and helpers.

Exports:
- observe_request(...): record HTTP request metrics
- observe_webhook_event(...): record processed webhook notifications
- observe_email(...): record email send outcomes
- observe_migration_statement(...): record migration statement outcomes
- metrics_latest(): return text exposition from correct registry (handles multiprocess)
- CONTENT_TYPE_LATEST: correct Prometheus content type
"""

import os
from prometheus_client import Counter, Histogram, CollectorRegistry, generate_latest, CONTENT_TYPE_LATEST
from prometheus_client import multiprocess


REQUEST_COUNTER = Counter(
    'np_http_requests_total', 'Total HTTP requests', ['endpoint', 'status']
)

REQUEST_LATENCY = Histogram(
    'np_http_request_latency_seconds', 'HTTP request latency seconds', ['endpoint']
)

WEBHOOK_EVENTS = Counter(
    'np_webhook_events_total', 'Payment webhook notifications', ['type', 'outcome']
)

EMAILS = Counter(
    'np_emails_total', 'Transactional emails by outcome', ['status']
)

MIGRATION_STATEMENTS = Counter(
    'np_migration_statements_total', 'Migration statements by outcome', ['status']
)


def observe_request(endpoint: str, status: int, latency_seconds: float) -> None:
    REQUEST_COUNTER.labels(endpoint=endpoint, status=str(status)).inc()
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(latency_seconds)


def observe_webhook_event(event_type: str, outcome: str) -> None:
    WEBHOOK_EVENTS.labels(type=event_type or 'unknown', outcome=outcome).inc()


def observe_email(status: str) -> None:
    EMAILS.labels(status=status).inc()


def observe_migration_statement(status: str) -> None:
    MIGRATION_STATEMENTS.labels(status=status).inc()


def metrics_latest() -> bytes:
    """Return the Prometheus text exposition, multiprocess-aware if configured."""
    prom_mp_dir = os.getenv('PROMETHEUS_MULTIPROC_DIR')
    if prom_mp_dir:
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        return generate_latest(registry)
    # Default registry
    return generate_latest()
