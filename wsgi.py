"""
WSGI entry point for production deployment.

Set environment variables before starting the server:
    SECRET_KEY, DATABASE_URL, AUTOMATION_ENABLED

Run only one process with AUTOMATION_ENABLED=1; every other worker should
set it to 0 so timer expiry is driven from a single place. Redundant
drivers are harmless (finalize is idempotent) but wasteful.
"""

import os

os.environ.setdefault('FLASK_CONFIG', 'production')

from draftroom import create_app

application = create_app(os.environ.get('FLASK_CONFIG', 'production'))
