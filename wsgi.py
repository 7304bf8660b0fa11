"""
WSGI entrypoint for Gunicorn with threaded workers.

Usage:
    gunicorn -c gunicorn.conf.py wsgi:app

Missing TWITCH_* variables abort the import, so Gunicorn exits before
any worker serves a request.
"""

from app import create_app, load_config

app = create_app(load_config())

__all__ = ['app']
