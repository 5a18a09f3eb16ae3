"""
Lock-resolution sweep.

After a bid or a skip vote the outcome of a slot may already be certain:
if nobody but the leader can afford the next minimum bid, waiting for
the countdown changes nothing. The sweep detects that and resolves the
slot at once.

It reads without locking and may act on a stale view, so it always passes
the slot key it evaluated; finalize ignores the request if that slot has
since been resolved. A skipped or redundant sweep only costs time, the
countdown reaches the same result.
"""

from typing import TYPE_CHECKING

from draftroom.dataclasses import ActiveBid
from draftroom.enums import AuctionStatus
from draftroom.logger import get_logger
from draftroom.player_queue import minimum_bid, resolve_active_slot
from draftroom.services.base import ServiceError

if TYPE_CHECKING:
    from draftroom.services.auction_service import AuctionService

logger = get_logger(__name__)


class LockResolutionSweep:
    """Auto-resolves a slot once no challenger can outbid the leader."""

    def __init__(self, auction_service: 'AuctionService'):
        self.auction_service = auction_service

    def is_locked(self, auction, participants) -> bool:
        """True when the leader can no longer be outbid.

        Args:
            auction: Auction row as last read.
            participants: All participants of the auction.
        """
        if auction.status != AuctionStatus.LIVE.value or auction.is_paused:
            return False
        active_bid = ActiveBid.from_dict(auction.active_bid)
        if active_bid is None:
            return False
        slot = resolve_active_slot(auction)
        if slot is None:
            return False

        required = minimum_bid(slot, active_bid)
        return not any(
            p.budget_remaining >= required
            for p in participants
            if p.client_id != active_bid.bidder_id
        )

    def run(self, auction_id: str) -> bool:
        """Resolve the current slot if its outcome is already decided.

        Returns:
            True if a finalize was issued and did resolve the slot.
        """
        service = self.auction_service
        auction = service.auction_repo.get(auction_id)
        if auction is None:
            return False
        participants = service.participant_repo.get_for_auction(auction_id)
        if not self.is_locked(auction, participants):
            return False

        slot_key = resolve_active_slot(auction).key
        logger.info(f"Auction {auction_id}: no challenger can outbid, resolving {slot_key}")
        try:
            outcome = service.finalize_current_player(
                auction_id, force_unsold=False, expected_slot_key=slot_key
            )
        except ServiceError as e:
            # The bid or vote that triggered the sweep has already committed
            logger.warning(f"Lock-resolution finalize failed for {auction_id}: {e.message}")
            return False
        return outcome is not None
