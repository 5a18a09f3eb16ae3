"""
Enums for the draft room application.

Provides type-safe constants for auction lifecycle, visibility, roles
and ledger outcomes.
"""

from enum import Enum


class AuctionStatus(str, Enum):
    """Auction lifecycle phases, strictly forward-moving."""
    LOBBY = "lobby"
    LIVE = "live"
    ENDED = "ended"
    RANKING = "ranking"
    RESULTS = "results"


class Visibility(str, Enum):
    """Lobby visibility."""
    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def from_string(cls, value: str) -> "Visibility":
        """Convert string to Visibility, defaulting to PRIVATE."""
        if value and value.lower().strip() == "public":
            return cls.PUBLIC
        return cls.PRIVATE


class ParticipantRole(str, Enum):
    """Role of a participant within one auction."""
    ADMIN = "admin"
    PLAYER = "player"


class SlotResult(str, Enum):
    """Outcome recorded in the completed-players ledger."""
    SOLD = "sold"
    UNSOLD = "unsold"


class Sport(str, Enum):
    """Sports with a known formation catalog."""
    SOCCER = "soccer"
    OTHER = "other"
