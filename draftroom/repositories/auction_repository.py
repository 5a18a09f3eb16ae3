"""
Auction repository for auction data access.

Provides specialized queries for auction entities.
"""

from typing import List, Optional

from sqlalchemy import select

from draftroom import db
from draftroom.enums import AuctionStatus, Visibility
from draftroom.models import Auction
from draftroom.repositories.base import BaseRepository


class AuctionRepository(BaseRepository[Auction]):
    """Repository for auction data access operations."""

    def __init__(self):
        super().__init__(Auction)

    def find_by_name(self, name: str) -> Optional[Auction]:
        """Find an auction by name, ignoring case and surrounding spaces.

        Args:
            name: Auction name as typed by the user.

        Returns:
            Auction instance or None.
        """
        normalized = (name or '').strip().lower()
        if not normalized:
            return None
        return self.first_by(name_lower=normalized)

    def get_public_lobbies(self) -> List[Auction]:
        """Get public auctions still accepting players, newest first."""
        return db.session.execute(
            select(Auction)
            .where(
                Auction.visibility == Visibility.PUBLIC.value,
                Auction.status == AuctionStatus.LOBBY.value,
            )
            .order_by(Auction.created_at.desc())
        ).scalars().all()

    def get_needing_automation(self) -> List[Auction]:
        """Get auctions the automation driver may have to advance.

        Returns:
            Auctions in live, ended or ranking status.
        """
        return db.session.execute(
            select(Auction).where(
                Auction.status.in_([
                    AuctionStatus.LIVE.value,
                    AuctionStatus.ENDED.value,
                    AuctionStatus.RANKING.value,
                ])
            )
        ).scalars().all()
