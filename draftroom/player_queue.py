"""
Player queue construction.

The queue is never stored. It is rebuilt from the auction's immutable
category configuration whenever the state machine needs to know which
slot is on the block, so the same ``categories`` value must always yield
the same ordered, stably keyed sequence.
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from draftroom.constants import CATEGORY_ORDER
from draftroom.dataclasses import ActiveBid, CategoryConfig, PlayerSlot

CategoryLike = Union[CategoryConfig, Dict[str, Any]]


def _as_category(category: CategoryLike) -> CategoryConfig:
    if isinstance(category, CategoryConfig):
        return category
    return CategoryConfig.from_dict(category)


def build_player_queue(categories: Optional[Iterable[CategoryLike]]) -> List[PlayerSlot]:
    """Flatten categories into the draft order.

    Categories are ordered A..E; players keep their configured order
    within a category. Slot keys are ``<category id>-<index>``.

    Raises:
        ValueError: If a category carries a label outside A..E.
    """
    if not categories:
        return []

    parsed = [_as_category(category) for category in categories]
    for category in parsed:
        if category.label not in CATEGORY_ORDER:
            raise ValueError(f"Unknown category label: {category.label!r}")

    # sorted() is stable, so duplicate labels keep configuration order
    ordered = sorted(parsed, key=lambda c: CATEGORY_ORDER.index(c.label))

    return [
        PlayerSlot(
            key=f"{category.id}-{idx}",
            name=player_name,
            category_label=category.label,
            base_price=category.base_price,
        )
        for category in ordered
        for idx, player_name in enumerate(category.players)
    ]


def queue_slot_at(categories: Optional[Iterable[CategoryLike]], index: int) -> Optional[PlayerSlot]:
    """Return the queue slot at ``index`` or None when out of range."""
    queue = build_player_queue(categories)
    if 0 <= index < len(queue):
        return queue[index]
    return None


def resolve_active_slot(auction) -> Optional[PlayerSlot]:
    """Return the slot currently on the block.

    A relisted (manual) slot takes precedence over the queue position.
    """
    if auction.manual_player:
        return PlayerSlot.from_dict(auction.manual_player)
    return queue_slot_at(auction.categories, auction.current_player_index)


def minimum_bid(slot: PlayerSlot, active_bid: Optional[ActiveBid]) -> int:
    """Smallest acceptable bid for ``slot`` given the current leader."""
    if active_bid is None:
        return slot.base_price
    return max(slot.base_price, active_bid.amount + 1)
