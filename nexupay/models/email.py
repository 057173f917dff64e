"""
Email Models

FLOW OVERVIEW
- EmailTemplate: named transactional templates with {{var}} placeholders.
  • get_active(name) → the active template by name, or None.
- EmailLog: one row per send attempt with its outcome.
  • record(...) → persist an attempt.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from .database import db


class EmailTemplate(db.Model):
    """Transactional email template."""

    __tablename__ = 'email_templates'

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    subject = Column(String(255), nullable=True)
    html_content = Column(Text, nullable=True)
    text_content = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<EmailTemplate {self.name}>'

    @classmethod
    def get_active(cls, name):
        return cls.query.filter_by(name=name, is_active=True).first()


class EmailLog(db.Model):
    """Record of a transactional email send attempt."""

    __tablename__ = 'email_logs'

    id = Column(Integer, primary_key=True)
    to = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=True)
    template = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False)  # 'sent' or 'failed'
    error = Column(Text, nullable=True)
    message_id = Column(String(100), nullable=True)
    sent_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<EmailLog {self.id}: {self.to} {self.status}>'

    @classmethod
    def record(cls, to, subject, template, status, error=None, message_id=None):
        """Persist a send attempt and return the new row."""
        entry = cls(
            to=to,
            subject=subject,
            template=template,
            status=status,
            error=error,
            message_id=message_id
        )
        db.session.add(entry)
        db.session.commit()
        return entry
