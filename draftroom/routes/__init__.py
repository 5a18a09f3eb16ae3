"""
Routes package for the draft room application.

This module creates the API blueprint and imports the handlers that
register themselves on it.
"""

from flask import Blueprint

api_bp = Blueprint('api', __name__)

# These imports must come after blueprint creation to avoid circular imports
from draftroom.routes.api import auctions, formations  # noqa: E402,F401

__all__ = ['api_bp']
