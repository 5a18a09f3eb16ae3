"""
Participant repository for participant data access.

Provides specialized queries for participant entities.
"""

from typing import List, Optional

from sqlalchemy import select

from draftroom import db
from draftroom.db_utils import is_sqlite
from draftroom.models import Participant
from draftroom.repositories.base import BaseRepository


class ParticipantRepository(BaseRepository[Participant]):
    """Repository for participant data access operations."""

    def __init__(self):
        super().__init__(Participant)

    def get_by_client(
        self,
        auction_id: str,
        client_id: str,
        for_update: bool = False
    ) -> Optional[Participant]:
        """Get a participant by auction and client identity.

        Args:
            auction_id: ID of the auction.
            client_id: Opaque client identity.
            for_update: Lock the row on engines that support it.

        Returns:
            Participant instance or None.
        """
        query = select(Participant).where(
            Participant.auction_id == auction_id,
            Participant.client_id == client_id,
        )
        if for_update and not is_sqlite():
            query = query.with_for_update()
        return db.session.execute(query).scalar_one_or_none()

    def get_for_auction(self, auction_id: str) -> List[Participant]:
        """Get all participants of an auction in join order.

        Args:
            auction_id: ID of the auction.

        Returns:
            List of Participant instances, earliest joiner first.
        """
        return db.session.execute(
            select(Participant)
            .where(Participant.auction_id == auction_id)
            .order_by(Participant.joined_at, Participant.id)
        ).scalars().all()

    def get_client_ids(self, auction_id: str) -> List[str]:
        """Get the client ids of everyone in an auction."""
        return db.session.execute(
            select(Participant.client_id).where(Participant.auction_id == auction_id)
        ).scalars().all()
