"""
Tests for the automation driver.

Tests timer expiry and the team/ranking phase advances, driven by single
ticks against the fake clock.
"""

import pytest
from draftroom.automation import AutomationDriver
from draftroom.constants import ACTIVE_BID_TIMER_MS, START_TIMER_MS


@pytest.fixture
def driver(auctions, finalization):
    return AutomationDriver(auctions=auctions, finalization=finalization)


class TestTimerExpiry:
    """Tests for finalizing slots whose countdown ran out."""

    def test_nothing_before_expiry(self, driver, live_auction, clock):
        clock.advance(START_TIMER_MS - 1)
        assert driver.tick() == []

    def test_expired_without_bid_goes_unsold(self, driver, live_auction, clock, fetch_auction):
        clock.advance(START_TIMER_MS)
        assert driver.tick() == [f'finalize_player:{live_auction}']

        auction = fetch_auction(live_auction)
        assert auction.current_player_index == 1
        assert auction.completed_players[0]['result'] == 'unsold'

    def test_expired_with_bid_sells(self, driver, auctions, live_auction, clock, fetch_participant):
        auctions.place_bid(live_auction, 'p2', 'P2', 25)
        clock.advance(ACTIVE_BID_TIMER_MS)

        assert driver.tick() == [f'finalize_player:{live_auction}']
        assert fetch_participant(live_auction, 'p2').budget_remaining == 75

    def test_bid_extends_deadline(self, driver, auctions, live_auction, clock):
        clock.advance(START_TIMER_MS - 1_000)
        auctions.place_bid(live_auction, 'p1', 'P1', 15)
        clock.advance(1_000)
        assert driver.tick() == []

    def test_paused_timer_never_expires(self, driver, auctions, live_auction, clock):
        auctions.pause_auction(live_auction)
        clock.advance(10 * START_TIMER_MS)
        assert driver.tick() == []

    def test_repeated_ticks_resolve_once(self, driver, live_auction, clock, fetch_auction):
        clock.advance(START_TIMER_MS)
        driver.tick()
        driver.tick()
        assert len(fetch_auction(live_auction).completed_players) == 1

    def test_error_in_one_auction_does_not_stop_others(
        self, driver, auctions, make_auction, clock, monkeypatch, fetch_auction
    ):
        broken = make_auction(name='Broken')
        healthy = make_auction(name='Healthy')
        auctions.start_auction(broken)
        auctions.start_auction(healthy)
        clock.advance(START_TIMER_MS)

        advance = driver._advance

        def flaky(auction_id):
            if auction_id == broken:
                raise RuntimeError('boom')
            return advance(auction_id)

        monkeypatch.setattr(driver, '_advance', flaky)

        assert driver.tick() == [f'finalize_player:{healthy}']
        assert fetch_auction(broken).current_player_index == 0


class TestPhaseAdvance:
    """Tests for moving to ranking and writing results."""

    @pytest.fixture
    def open_auction(self, auctions, live_auction):
        auctions.force_end(live_auction)
        auctions.open_finalization_phase(live_auction)
        return live_auction

    def test_waits_for_every_team(self, driver, finalization, open_auction):
        finalization.submit_team(open_auction, 'admin')
        finalization.submit_team(open_auction, 'p1')
        assert driver.tick() == []

    def test_all_teams_move_to_ranking(self, driver, finalization, open_auction, fetch_auction):
        for client_id in ('admin', 'p1', 'p2'):
            finalization.submit_team(open_auction, client_id)

        assert driver.tick() == [f'mark_ranking:{open_auction}']
        assert fetch_auction(open_auction).status == 'ranking'

    def test_ended_without_open_phase_waits(self, driver, auctions, live_auction):
        auctions.force_end(live_auction)
        assert driver.tick() == []

    def test_all_rankings_write_results(self, driver, finalization, open_auction, fetch_auction):
        for client_id in ('admin', 'p1', 'p2'):
            finalization.submit_team(open_auction, client_id)
        finalization.mark_auction_as_ranking(open_auction)
        finalization.submit_ranking(open_auction, 'admin', ['p1', 'p2'])
        finalization.submit_ranking(open_auction, 'p1', ['admin', 'p2'])
        assert driver.tick() == []

        finalization.submit_ranking(open_auction, 'p2', ['p1', 'admin'])
        assert driver.tick() == [f'finalize_results:{open_auction}']

        auction = fetch_auction(open_auction)
        assert auction.status == 'results'
        assert auction.results[0]['participant_id'] == 'p1'
        assert driver.tick() == []
