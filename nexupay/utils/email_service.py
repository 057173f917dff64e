"""
Email Relay Service

FLOW OVERVIEW
- render_template_vars(template, data) → literal {{key}} substitution.
- EmailService.send_templated(to, subject, template_name, data, sender)
  • Look up the active template (TemplateNotFoundError when absent).
  • Render html/text bodies, send through Flask-Mail, log the attempt in
    email_logs with status sent/failed.
  • Returns the generated message id; raises EmailDeliveryError on failure.
"""

import logging
from typing import Dict, Any, Optional
from flask_mail import Message
from ..models import EmailTemplate, EmailLog
from .errors import TemplateNotFoundError, EmailDeliveryError
from .prom_metrics import observe_email


def render_template_vars(template: Optional[str], data: Optional[Dict[str, Any]]) -> Optional[str]:
    """Replace each {{key}} in `template` with str(data[key]); unknown placeholders stay."""
    if not template or not data:
        return template

    rendered = template
    for key, value in data.items():
        rendered = rendered.replace('{{' + str(key) + '}}', '' if value is None else str(value))
    return rendered


class EmailService:
    """Sends transactional emails from stored templates."""

    def __init__(self, mail, default_sender: str = 'noreply@nexupay.cl'):
        self.mail = mail
        self.default_sender = default_sender
        self.logger = logging.getLogger(__name__)

    def send_templated(self, to: str, subject: str, template_name: str,
                       data: Optional[Dict[str, Any]] = None, sender: Optional[str] = None) -> str:
        """
        Render and send a templated email.

        Returns:
            The message id of the sent email

        Raises:
            TemplateNotFoundError: no active template with that name
            EmailDeliveryError: the mail transport failed
        """
        template = EmailTemplate.get_active(template_name)
        if template is None:
            raise TemplateNotFoundError(template_name)

        html = render_template_vars(template.html_content, data)
        body = render_template_vars(template.text_content, data)
        msg = Message(
            subject=subject,
            sender=sender or self.default_sender,
            recipients=[to],
            html=html,
            body=body
        )
        message_id = msg.msgId

        self.logger.info(f"📧 Sending email '{template_name}' to {to}")
        try:
            self.mail.send(msg)
        except Exception as e:
            self.logger.error(f"Error sending email to {to}: {str(e)}")
            EmailLog.record(to, subject, template_name, 'failed', error=str(e))
            observe_email('failed')
            raise EmailDeliveryError(str(e)) from e

        EmailLog.record(to, subject, template_name, 'sent', message_id=message_id)
        observe_email('sent')
        return message_id
