"""
Base repository shared by the auction and participant repositories.

Repositories only read and stage rows; committing is the calling
service's transaction.
"""

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy import select

from draftroom import db
from draftroom.db_utils import get_for_update

T = TypeVar('T')


class BaseRepository(Generic[T]):
    """Primary-key access and row creation for one model.

    Attributes:
        model: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[T]):
        self.model = model

    def get(self, id: Any) -> Optional[T]:
        """Plain read, served from the session's identity map when possible."""
        return db.session.get(self.model, id)

    def get_for_update(self, id: Any) -> Optional[T]:
        """Read a row that is about to be modified in this transaction.

        Locks the row where the engine supports it; on SQLite the caller
        holds an AuctionLock instead.
        """
        return get_for_update(self.model, id)

    def first_by(self, **kwargs) -> Optional[T]:
        """First row whose columns equal the given values, or None."""
        return db.session.execute(
            select(self.model).filter_by(**kwargs)
        ).scalars().first()

    def create(self, **kwargs) -> T:
        """Stage a new row in the session; flushed on commit."""
        instance = self.model(**kwargs)
        db.session.add(instance)
        return instance
