"""
Debt Model

Maps the hosted `debts` table. The service only reads debts for reports and
marks them paid when an approved payment references them.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Numeric, DateTime, Index
from .database import db


class Debt(db.Model):
    """A debt owed by a debtor to a company."""

    __tablename__ = 'debts'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id = Column(String(36), nullable=True, index=True)
    debtor_id = Column(String(36), nullable=True)

    amount = Column(Numeric(15, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default='active')
    paid_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_debts_status', 'status'),
    )

    def __repr__(self):
        return f'<Debt {self.id}: {self.status}>'

    def mark_paid(self, when=None):
        """Mark the debt as paid."""
        when = when or datetime.utcnow()
        self.status = 'paid'
        self.paid_at = when
        self.updated_at = when

    def to_dict(self):
        """Convert debt to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'company_id': self.company_id,
            'debtor_id': self.debtor_id,
            'amount': float(self.amount) if self.amount is not None else None,
            'status': self.status,
            'paid_at': self.paid_at.isoformat() if self.paid_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
