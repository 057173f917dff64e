#!/usr/bin/env python3
"""
NexuPay operations service entry point.

Creates the Flask application from environment configuration via
`create_app`. When executed directly, it runs the development server; in
production a WSGI server should import `app` from this module.

Environment variables of interest:
- DATABASE_URL: database the service writes payments, email logs and report
  logs to. Without it the service stays in maintenance mode.
- SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, MERCADOPAGO_ACCESS_TOKEN, mail
  settings: consumed by `create_app`.
"""

from nexupay import create_app
from nexupay.config import is_database_configured

app = create_app()

print("🚀 Starting NexuPay operations service...")
if is_database_configured(app.config):
    print("📊 Using database schema managed by SQL migrations")
else:
    print("🔧 DATABASE_URL not set: maintenance mode, writes are refused")

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
