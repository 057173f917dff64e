"""
Report Log Model

Keeps one row per generated report for auditing.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, JSON
from .database import db


class ReportLog(db.Model):
    """Record of a generated report."""

    __tablename__ = 'report_logs'

    id = Column(Integer, primary_key=True)
    report_type = Column(String(50), nullable=False)
    format = Column(String(10), nullable=False, default='json')
    status = Column(String(20), nullable=False, default='success')
    record_count = Column(Integer, nullable=False, default=0)
    filters = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<ReportLog {self.report_type} ({self.record_count} rows)>'
