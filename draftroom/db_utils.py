"""
Database utility functions for SQLite-compatible concurrency handling.

SQLite does not support row-level locking (SELECT FOR UPDATE).
This module provides alternative strategies:
1. Application-level locking, one lock per auction
2. Database-agnostic query helpers

Both sit on top of the optimistic ``version`` columns on the models, which
catch conflicting writers across processes; the locks only cut down how
often that happens inside one process.
"""

import threading
import weakref
from typing import Any, Type, TypeVar

from sqlalchemy import select

from draftroom import db

T = TypeVar('T')

# Entries vanish once no AuctionLock holds the lock
_auction_locks: "weakref.WeakValueDictionary[str, threading.RLock]" = weakref.WeakValueDictionary()
_registry_lock = threading.Lock()


def is_sqlite() -> bool:
    """Check if the current database is SQLite."""
    return 'sqlite' in str(db.engine.url)


def get_for_update(model: Type[T], id_value: Any) -> T | None:
    """
    Get a model instance with optional row-level locking.

    For SQLite: Returns regular query (relies on application-level locks)
    For PostgreSQL/MySQL: Uses with_for_update() for row-level locking

    Args:
        model: The SQLAlchemy model class
        id_value: The primary key value

    Returns:
        The model instance or None if not found
    """
    query = select(model).where(model.id == id_value)

    if not is_sqlite():
        query = query.with_for_update()

    return db.session.execute(query).scalar_one_or_none()


def _lock_for(auction_id: str) -> threading.RLock:
    with _registry_lock:
        lock = _auction_locks.get(auction_id)
        if lock is None:
            lock = threading.RLock()
            _auction_locks[auction_id] = lock
        return lock


class AuctionLock:
    """
    Context manager serialising read-modify-write units on one auction.

    For SQLite, uses an application-level lock keyed by auction id.
    Reentrant, so a finalize triggered from inside a locked section of
    the same thread does not deadlock.
    """

    def __init__(self, auction_id: str):
        self.auction_id = auction_id
        self._lock = None

    def __enter__(self) -> 'AuctionLock':
        if is_sqlite():
            self._lock = _lock_for(self.auction_id)
            self._lock.acquire()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: Any
    ) -> None:
        if self._lock is not None:
            self._lock.release()
            self._lock = None
