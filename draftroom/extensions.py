"""
Flask extensions shared across the application.

The limiter is created unbound and attached in ``create_app``.
"""

from flask import request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from draftroom.constants import CLIENT_ID_HEADER


def client_or_remote_address() -> str:
    """Rate-limit key: the caller's client id, else its address.

    Several participants on one network share an address, so the client
    id keeps one fast bidder from using up the budget of the whole room.
    """
    client_id = (request.headers.get(CLIENT_ID_HEADER) or '').strip()
    return f"client:{client_id}" if client_id else get_remote_address()


limiter = Limiter(
    key_func=client_or_remote_address,
    default_limits=["200 per minute"],
    storage_uri="memory://",
)
