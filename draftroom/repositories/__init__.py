"""
Repository layer for data access.

This module provides repository classes that abstract database operations,
providing a clean interface for data access separate from business logic.
"""

from draftroom.repositories.base import BaseRepository
from draftroom.repositories.auction_repository import AuctionRepository
from draftroom.repositories.participant_repository import ParticipantRepository

__all__ = [
    'BaseRepository',
    'AuctionRepository',
    'ParticipantRepository',
]
