"""
Utilities Package

This package contains utility functions and helper modules.
"""

from . import api_utils
from . import error_handlers
from . import errors

__all__ = [
    'api_utils',
    'error_handlers',
    'errors'
]
