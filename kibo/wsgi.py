"""
WSGI entry point.

Serves the enveloped demo app from WSGI servers (gunicorn, waitress)
by bridging it with a2wsgi.
"""

from typing import Optional

from a2wsgi import ASGIMiddleware

from kibo.core.config import EnvelopeSettings
from kibo.main import app, create_app


def create_wsgi_app(config: Optional[EnvelopeSettings] = None) -> ASGIMiddleware:
    """Build a WSGI callable around a freshly configured app."""
    return ASGIMiddleware(create_app(config))


application = ASGIMiddleware(app)
