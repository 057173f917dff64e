"""
Payment Model

FLOW OVERVIEW
- Maps the hosted `payments` table; rows are created by the web application
  and their status is advanced by the payment provider's webhook.
- update_from_provider: apply provider details (status, metadata) to every
  row bound to a provider payment id.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Numeric, DateTime, JSON, Index
from .database import db


class Payment(db.Model):
    """A payment against a debt, tracked by the provider's payment id."""

    __tablename__ = 'payments'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    debt_id = Column(String(36), nullable=True, index=True)
    user_id = Column(String(36), nullable=True)
    company_id = Column(String(36), nullable=True)

    amount = Column(Numeric(15, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default='pending')
    payment_method = Column(String(50), nullable=True)

    # Provider reference, used to correlate webhook notifications
    mercadopago_payment_id = Column(String(64), nullable=True, unique=True)
    # `metadata` is reserved on declarative models
    payment_metadata = Column('metadata', JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_payments_status', 'status'),
    )

    def __repr__(self):
        return f'<Payment {self.id}: {self.status}>'

    def to_dict(self):
        """Convert payment to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'debt_id': self.debt_id,
            'user_id': self.user_id,
            'company_id': self.company_id,
            'amount': float(self.amount) if self.amount is not None else None,
            'status': self.status,
            'payment_method': self.payment_method,
            'mercadopago_payment_id': self.mercadopago_payment_id,
            'metadata': self.payment_metadata,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    @classmethod
    def update_from_provider(cls, provider_payment_id, status, metadata=None):
        """Set status/metadata on rows bound to `provider_payment_id`; returns the rows touched."""
        payments = cls.query.filter_by(mercadopago_payment_id=str(provider_payment_id)).all()
        now = datetime.utcnow()
        for payment in payments:
            payment.status = status
            payment.payment_metadata = metadata or {}
            payment.updated_at = now
        db.session.commit()
        return payments
