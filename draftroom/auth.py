"""
Auction password handling.

Lobby passwords are shared secrets that keep strangers out of a private
draft; they are not an account system. They are still stored hashed with
bcrypt so a database dump does not leak them.
"""

from typing import Optional

import bcrypt


def hash_password(password: str) -> Optional[str]:
    """Hash a lobby password using bcrypt.

    Args:
        password: The plaintext password; empty means "no password".

    Returns:
        The hashed password, or None for an open lobby.

    Example:
        >>> hashed = hash_password('letmein')
        >>> verify_password('letmein', hashed)
        True
    """
    if not password:
        return None
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """Verify a lobby password against its stored hash.

    An auction created without a password only accepts an empty one.

    Args:
        password: The plaintext password to verify.
        hashed: The bcrypt hash to check against, or None.

    Returns:
        True if the password matches, False otherwise.
    """
    if not hashed:
        return not password
    if not password:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
    except (ValueError, TypeError):
        return False
