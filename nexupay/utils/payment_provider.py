"""
Payment Provider Client

FLOW OVERVIEW
- PaymentProviderClient.get_payment(payment_id)
  • With an access token: GET {api_url}/v1/payments/<id> and normalize the
    fields the webhook needs (id, status, external_reference, metadata).
  • Without a token: return simulated approved details and warn, so local
    environments can exercise the webhook end to end.
  • Provider failures are logged and reported as None.
"""

import logging
from typing import Dict, Any, Optional
import requests


class PaymentProviderClient:
    """Reads payment details from the payment provider API."""

    def __init__(self, access_token: Optional[str] = None,
                 api_url: str = 'https://api.mercadopago.com',
                 timeout: float = 15, session: requests.Session = None):
        self.access_token = access_token
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logging.getLogger(__name__)

    def get_payment(self, payment_id) -> Optional[Dict[str, Any]]:
        """
        Fetch payment details.

        Args:
            payment_id: Provider payment id from the webhook notification

        Returns:
            Normalized details, or None when the provider could not answer
        """
        if not self.access_token:
            self.logger.warning(
                f"MERCADOPAGO_ACCESS_TOKEN not set; simulating approved payment {payment_id}"
            )
            return {
                'id': str(payment_id),
                'status': 'approved',
                'external_reference': None,
                'metadata': {}
            }

        try:
            response = self.session.get(
                f'{self.api_url}/v1/payments/{payment_id}',
                headers={'Authorization': f'Bearer {self.access_token}'},
                timeout=self.timeout
            )
            response.raise_for_status()
            payment = response.json()
        except (requests.RequestException, ValueError) as e:
            self.logger.error(f"Error fetching payment {payment_id} from provider: {str(e)}")
            return None

        return {
            'id': str(payment.get('id', payment_id)),
            'status': payment.get('status'),
            'external_reference': payment.get('external_reference'),
            'metadata': payment.get('metadata') or {}
        }


def provider_from_config(config) -> PaymentProviderClient:
    return PaymentProviderClient(
        access_token=config.get('MERCADOPAGO_ACCESS_TOKEN'),
        api_url=config.get('MERCADOPAGO_API_URL') or 'https://api.mercadopago.com'
    )
