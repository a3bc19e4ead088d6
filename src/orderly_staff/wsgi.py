"""
WSGI entry point, e.g. ``gunicorn orderly_staff.wsgi:app``.
"""

from orderly_staff.app import create_app

app = create_app()
