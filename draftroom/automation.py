"""
Automation driver: advances auctions nobody is actively pushing.

On a fixed tick it
- finalizes the slot on the block once its countdown has expired,
- moves an ended auction into ranking once every participant submitted
  a team,
- writes the results once every participant submitted a ranking.

Every command it issues is idempotent, so overlapping ticks or several
driver processes are harmless. Errors for one auction are logged and the
loop carries on; the next tick simply tries again.
"""

import atexit
from typing import List, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from draftroom import db
from draftroom.enums import AuctionStatus
from draftroom.logger import get_automation_logger
from draftroom.models import Auction
from draftroom.player_queue import resolve_active_slot
from draftroom.services.auction_service import AuctionService, auction_service
from draftroom.services.finalization_service import FinalizationService, finalization_service

logger = get_automation_logger()

_scheduler: Optional[BackgroundScheduler] = None


class AutomationDriver:
    """Issues timer-expiry and phase-advance commands for all auctions."""

    def __init__(
        self,
        auctions: Optional[AuctionService] = None,
        finalization: Optional[FinalizationService] = None
    ):
        self.auctions = auctions or auction_service
        self.finalization = finalization or finalization_service

    def tick(self) -> List[str]:
        """Run one pass over every auction that may need advancing.

        Returns:
            Descriptions of the commands issued, for logging and tests.
        """
        actions: List[str] = []
        auction_ids = [a.id for a in self.auctions.auction_repo.get_needing_automation()]

        for auction_id in auction_ids:
            try:
                action = self._advance(auction_id)
            except Exception as e:
                db.session.rollback()
                logger.error(f"Automation failed for auction {auction_id}: {e}", exc_info=True)
                continue
            if action:
                actions.append(f"{action}:{auction_id}")
        return actions

    def _advance(self, auction_id: str) -> Optional[str]:
        auction = self.auctions.auction_repo.get(auction_id)
        if auction is None:
            return None

        if auction.status == AuctionStatus.LIVE.value:
            return self._check_timer(auction)
        if auction.status == AuctionStatus.ENDED.value:
            return self._check_teams(auction)
        if auction.status == AuctionStatus.RANKING.value:
            return self._check_rankings(auction)
        return None

    def _check_timer(self, auction: Auction) -> Optional[str]:
        if auction.is_paused or auction.countdown_ends_at is None:
            return None
        if auction.countdown_ends_at > self.auctions.clock():
            return None

        slot = resolve_active_slot(auction)
        outcome = self.auctions.finalize_current_player(
            auction.id,
            force_unsold=not auction.active_bid,
            expected_slot_key=slot.key if slot else None,
        )
        return 'finalize_player' if outcome is not None else None

    def _check_teams(self, auction: Auction) -> Optional[str]:
        if not auction.finalization_open:
            return None
        participants = self.auctions.participant_repo.get_for_auction(auction.id)
        if participants and all(p.has_submitted_team for p in participants):
            if self.finalization.mark_auction_as_ranking(auction.id):
                return 'mark_ranking'
        return None

    def _check_rankings(self, auction: Auction) -> Optional[str]:
        participants = self.auctions.participant_repo.get_for_auction(auction.id)
        if participants and all(p.ranking_submitted for p in participants):
            if self.finalization.finalize_results(auction.id) is not None:
                return 'finalize_results'
        return None


def _run_tick(app, driver: AutomationDriver) -> None:
    with app.app_context():
        try:
            actions = driver.tick()
            if actions:
                logger.info(f"Automation tick: {', '.join(actions)}")
        finally:
            db.session.remove()


def start_automation(app) -> BackgroundScheduler:
    """Start the background scheduler that drives automation ticks."""
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        return _scheduler

    driver = AutomationDriver()
    _scheduler = BackgroundScheduler()
    _scheduler.add_job(
        _run_tick,
        trigger=IntervalTrigger(seconds=app.config.get('AUTOMATION_TICK_SECONDS', 1)),
        args=[app, driver],
        id="auction_automation",
        name="Auction timer and phase automation",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    _scheduler.start()
    atexit.register(shutdown_automation)
    logger.info(
        f"Automation scheduler started (tick {app.config.get('AUTOMATION_TICK_SECONDS', 1)}s)"
    )
    return _scheduler


def shutdown_automation() -> None:
    """Gracefully shut down the scheduler."""
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
        logger.info("Automation scheduler stopped")
    _scheduler = None
