"""
Application Configuration

FLOW OVERVIEW
- Config.__init__
  • Reads FLASK_ENV to select which .env file to load (dev/prod). Testing bypasses file load.
- Properties expose configuration values, defaulting to sensible development-safe defaults.
- Backend keys are also accepted with the VITE_ prefix used by the web frontend's .env.
- is_backend_configured(config) → whether the hosted backend URL and a key are present.
- is_database_configured(config) → whether DATABASE_URL points at a real database
  (the in-memory SQLite default is only acceptable under TESTING).
"""

import os
from dotenv import load_dotenv


def _env(name, default=None):
    """Read `name`, falling back to its VITE_-prefixed variant."""
    value = os.getenv(name)
    if value:
        return value
    return os.getenv(f'VITE_{name}', default)


class Config:
    """Base configuration class"""

    def __init__(self):
        # Load environment variables based on FLASK_ENV
        env_file = os.getenv('FLASK_ENV', 'development')
        if env_file == 'testing':
            # For testing, don't load config files, use environment variables directly
            pass
        elif env_file == 'production':
            load_dotenv('config.prod.env')
        else:
            load_dotenv('config.env')  # Default to development

    @property
    def SECRET_KEY(self):
        """Application secret key"""
        return os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        """Database connection URI; the in-memory default is for development and tests only"""
        return os.getenv('DATABASE_URL', 'sqlite:///:memory:')

    @property
    def SQLALCHEMY_TRACK_MODIFICATIONS(self):
        """SQLAlchemy track modifications setting"""
        return False

    @property
    def SUPABASE_URL(self):
        """Hosted backend base URL"""
        return _env('SUPABASE_URL')

    @property
    def SUPABASE_ANON_KEY(self):
        """Public (anon) key for the hosted backend"""
        return _env('SUPABASE_ANON_KEY')

    @property
    def SUPABASE_SERVICE_ROLE_KEY(self):
        """Service role key; preferred over the anon key for migrations"""
        return _env('SUPABASE_SERVICE_ROLE_KEY')

    @property
    def BACKEND_TIMEOUT(self):
        """Timeout in seconds for backend REST calls"""
        return float(os.getenv('BACKEND_TIMEOUT', 30))

    @property
    def MAIL_SERVER(self):
        """Mail server hostname"""
        return os.getenv('MAIL_SERVER', 'smtp.gmail.com')

    @property
    def MAIL_PORT(self):
        """Mail server port"""
        return int(os.getenv('MAIL_PORT', 587))

    @property
    def MAIL_USE_TLS(self):
        """Whether to use TLS for mail"""
        return os.getenv('MAIL_USE_TLS', 'True').lower() == 'true'

    @property
    def MAIL_USE_SSL(self):
        """Whether to use SSL for mail"""
        return os.getenv('MAIL_USE_SSL', 'False').lower() == 'true'

    @property
    def MAIL_USERNAME(self):
        """Mail server username"""
        return os.getenv('MAIL_USERNAME')

    @property
    def MAIL_PASSWORD(self):
        """Mail server password"""
        return os.getenv('MAIL_PASSWORD')

    @property
    def MAIL_DEFAULT_SENDER(self):
        """Default sender email address"""
        return os.getenv('MAIL_DEFAULT_SENDER', 'noreply@nexupay.cl')

    @property
    def MERCADOPAGO_ACCESS_TOKEN(self):
        """Access token for the payment provider API"""
        return os.getenv('MERCADOPAGO_ACCESS_TOKEN')

    @property
    def MERCADOPAGO_API_URL(self):
        """Payment provider API base URL"""
        return os.getenv('MERCADOPAGO_API_URL', 'https://api.mercadopago.com')

    @property
    def APP_BASE_URL(self):
        """Public URL of the web application"""
        return _env('APP_BASE_URL', 'http://localhost:5173')

    @property
    def MIGRATION_STATEMENT_DELAY(self):
        """Pause between migration statements, in seconds"""
        return float(os.getenv('MIGRATION_STATEMENT_DELAY', 0.1))

    @property
    def MIGRATION_RPC_FUNCTION(self):
        """Database function used to execute raw SQL through the REST API"""
        return os.getenv('MIGRATION_RPC_FUNCTION', 'exec_sql')

    @property
    def MAINTENANCE_MODE(self):
        """Force the maintenance screen regardless of configuration"""
        return os.getenv('MAINTENANCE_MODE', 'False').lower() == 'true'


def is_backend_configured(config):
    """Return True when the backend URL and at least one key are configured."""
    url = config.get('SUPABASE_URL')
    key = config.get('SUPABASE_SERVICE_ROLE_KEY') or config.get('SUPABASE_ANON_KEY')
    return bool(url and key)


IN_MEMORY_DATABASE_URIS = ('sqlite://', 'sqlite:///:memory:')


def is_database_configured(config):
    """Return True when writes go to a real database; in-memory SQLite only counts under TESTING."""
    uri = config.get('SQLALCHEMY_DATABASE_URI')
    if not uri:
        return False
    if config.get('TESTING'):
        return True
    return uri not in IN_MEMORY_DATABASE_URIS
