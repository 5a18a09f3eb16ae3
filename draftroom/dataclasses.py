"""
Data classes for structured data in the draft room.

The auction row stores these as plain JSON; the classes give the state
machine typed access and a single place for (de)serialization.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from draftroom.enums import SlotResult


@dataclass
class CategoryConfig:
    """One priced category of players, as configured at creation."""
    id: str
    label: str
    base_price: int
    players: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "base_price": self.base_price,
            "players": list(self.players),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CategoryConfig":
        return cls(
            id=str(data.get("id") or data.get("label", "")),
            label=data.get("label", ""),
            base_price=int(data.get("base_price", 0)),
            players=list(data.get("players") or []),
        )


@dataclass(frozen=True)
class PlayerSlot:
    """One biddable position, derived from categories and never persisted."""
    key: str
    name: str
    category_label: str
    base_price: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "category_label": self.category_label,
            "base_price": self.base_price,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerSlot":
        return cls(
            key=data["key"],
            name=data["name"],
            category_label=data["category_label"],
            base_price=int(data["base_price"]),
        )


@dataclass
class ActiveBid:
    """Leading bid for the slot on the block."""
    amount: int
    bidder_id: str
    bidder_name: str
    placed_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "bidder_id": self.bidder_id,
            "bidder_name": self.bidder_name,
            "placed_at": self.placed_at,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ActiveBid"]:
        if not data:
            return None
        return cls(
            amount=int(data["amount"]),
            bidder_id=data["bidder_id"],
            bidder_name=data.get("bidder_name", ""),
            placed_at=data.get("placed_at"),
        )


@dataclass
class CompletedPlayerEntry:
    """Ledger row for a resolved slot.

    Entries are appended once per queue slot. Re-auctioning a relisted
    slot rewrites the existing entry with the same ``id``.
    """
    id: str
    player_name: str
    category_label: str
    base_price: int
    result: SlotResult
    winner_id: Optional[str] = None
    winner_name: Optional[str] = None
    final_bid: Optional[int] = None
    resolved_at: Optional[int] = None

    @property
    def is_sold(self) -> bool:
        return self.result == SlotResult.SOLD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "player_name": self.player_name,
            "category_label": self.category_label,
            "base_price": self.base_price,
            "result": self.result.value,
            "winner_id": self.winner_id,
            "winner_name": self.winner_name,
            "final_bid": self.final_bid,
            "resolved_at": self.resolved_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompletedPlayerEntry":
        return cls(
            id=data["id"],
            player_name=data["player_name"],
            category_label=data["category_label"],
            base_price=int(data["base_price"]),
            result=SlotResult(data["result"]),
            winner_id=data.get("winner_id"),
            winner_name=data.get("winner_name"),
            final_bid=data.get("final_bid"),
            resolved_at=data.get("resolved_at"),
        )


@dataclass
class RosterEntry:
    """A player won by a participant, at the price paid."""
    player_name: str
    category_label: str
    price: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_name": self.player_name,
            "category_label": self.category_label,
            "price": self.price,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RosterEntry":
        return cls(
            player_name=data["player_name"],
            category_label=data["category_label"],
            price=int(data["price"]),
        )


@dataclass
class SkipDecision:
    """Outcome of recording a skip/pass vote."""
    resolve: bool = False
    force_unsold: bool = False
    votes: int = 0
    required: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resolve": self.resolve,
            "force_unsold": self.force_unsold,
            "votes": self.votes,
            "required": self.required,
        }


@dataclass
class ResultEntry:
    """One row of the final leaderboard."""
    participant_id: str
    name: str
    points: int
    rank: int = 0
    roster_count: int = 0
    budget_remaining: int = 0
    roster_value: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "participant_id": self.participant_id,
            "name": self.name,
            "points": self.points,
            "rank": self.rank,
            "roster_count": self.roster_count,
            "budget_remaining": self.budget_remaining,
            "roster_value": self.roster_value,
        }
