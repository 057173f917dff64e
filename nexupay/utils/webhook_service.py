"""
Payment Webhook Processing

FLOW OVERVIEW
- WebhookProcessor.process(payload)
  • type == 'payment' → require data.id, fetch provider details, update the
    matching payments rows; approved payments mark their referenced debt paid.
  • Any other type is acknowledged without side effects.
- Returns a WebhookResult telling the route which status/body to send.
"""

import logging
from datetime import datetime
from typing import Dict, Any, Optional
from ..models import Payment, Debt, db
from .prom_metrics import observe_webhook_event


class WebhookResult:
    """Result of processing a webhook notification."""

    def __init__(self, success: bool, status_code: int = 200, error: Optional[str] = None,
                 payments_updated: int = 0):
        self.success = success
        self.status_code = status_code
        self.error = error
        self.payments_updated = payments_updated


class WebhookProcessor:
    """Applies payment provider notifications to the payments table."""

    def __init__(self, provider):
        self.provider = provider
        self.logger = logging.getLogger(__name__)

    def process(self, payload: Dict[str, Any]) -> WebhookResult:
        event_type = payload.get('type')
        data = payload.get('data') if isinstance(payload.get('data'), dict) else {}

        self.logger.info(
            f"🔔 Webhook received: type={event_type} action={payload.get('action')} data_id={data.get('id')}"
        )

        if event_type != 'payment':
            observe_webhook_event(event_type, 'ignored')
            return WebhookResult(True)

        payment_id = data.get('id')
        if not payment_id:
            observe_webhook_event(event_type, 'invalid')
            return WebhookResult(False, 400, 'Payment ID missing')

        details = self.provider.get_payment(payment_id)
        if not details:
            observe_webhook_event(event_type, 'provider_unavailable')
            return WebhookResult(True)

        updated = self.update_payment_status(details)
        observe_webhook_event(event_type, 'processed')
        self.logger.info(f"✅ Payment processed: {payment_id}")
        return WebhookResult(True, payments_updated=updated)

    def update_payment_status(self, details: Dict[str, Any]) -> int:
        """Persist provider status on matching payments; returns the number of rows updated."""
        payments = Payment.update_from_provider(
            details['id'], details.get('status'), details.get('metadata')
        )
        self.logger.info(f"Payment {details['id']} → {details.get('status')} ({len(payments)} rows)")

        if details.get('status') == 'approved':
            self.handle_approved_payment(details)
        return len(payments)

    def handle_approved_payment(self, details: Dict[str, Any]) -> None:
        """Mark the debt referenced by an approved payment as paid. Failures are logged only."""
        metadata = details.get('metadata') if isinstance(details.get('metadata'), dict) else {}
        reference = details.get('external_reference') or metadata.get('debt_id')
        if not reference:
            return
        try:
            debt = db.session.get(Debt, str(reference))
            if debt is None:
                self.logger.warning(f"Approved payment references unknown debt {reference}")
                return
            debt.mark_paid(datetime.utcnow())
            db.session.commit()
            self.logger.info(f"🎉 Debt {reference} marked as paid")
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Error updating debt {reference}: {str(e)}")
