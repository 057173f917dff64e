from .config import Config, is_backend_configured, is_database_configured

__all__ = ['Config', 'is_backend_configured', 'is_database_configured']
