"""
Database Models Package

FLOW OVERVIEW
- Centralizes SQLAlchemy DB instance and model imports for convenient usage.
- Exposes: db, Payment, Debt, EmailTemplate, EmailLog, ReportLog.
"""

from .database import db
from .payment import Payment
from .debt import Debt
from .email import EmailTemplate, EmailLog
from .report_log import ReportLog

__all__ = [
    'db',
    'Payment',
    'Debt',
    'EmailTemplate',
    'EmailLog',
    'ReportLog'
]
