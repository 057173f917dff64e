"""
Routes Package

This package contains all Flask route blueprints.
"""

from .main import main_bp
from .webhooks import webhooks_bp
from .email import email_bp
from .api import api_bp

__all__ = [
    'main_bp',
    'webhooks_bp',
    'email_bp',
    'api_bp'
]
