"""
Exception types shared across the service.

BackendError carries enough of the backend's answer to let callers classify
it (already exists / missing function / missing relation) instead of each
caller matching message strings on its own.
"""

from typing import Any, Optional


class NexuPayError(Exception):
    """Base class for service errors."""


class BackendError(NexuPayError):
    """The hosted backend rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 code: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details

    @property
    def is_already_exists(self) -> bool:
        return 'already exists' in (self.message or '').lower() or self.code in ('42P07', '42710')

    @property
    def is_missing_function(self) -> bool:
        # Only PostgREST's schema-cache miss; "function ... does not exist"
        # can come from the SQL being executed.
        message = (self.message or '').lower()
        return self.code == 'PGRST202' or 'could not find the function' in message

    @property
    def is_missing_relation(self) -> bool:
        message = (self.message or '').lower()
        return (
            self.code in ('42P01', 'PGRST205')
            or 'could not find the table' in message
            or ('relation' in message and 'does not exist' in message)
        )

    def __str__(self):
        if self.status_code:
            return f'{self.message} (HTTP {self.status_code})'
        return self.message


class MigrationError(NexuPayError):
    """A migration could not be started (missing file, unreadable SQL)."""


class ExportError(NexuPayError):
    """Data could not be exported in the requested format."""


class TemplateNotFoundError(NexuPayError):
    """No active email template with the requested name."""


class EmailDeliveryError(NexuPayError):
    """The mail transport failed to deliver a message."""
