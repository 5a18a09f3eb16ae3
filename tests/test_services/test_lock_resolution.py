"""
Tests for the lock-resolution sweep.
"""

from types import SimpleNamespace

import pytest
from draftroom.services.lock_resolution import LockResolutionSweep

CATEGORIES = [{'id': 'cat-a', 'label': 'A', 'base_price': 10, 'players': ['Messi', 'Mbappe']}]


def _auction(active_bid=None, status='live', is_paused=False):
    return SimpleNamespace(
        status=status,
        is_paused=is_paused,
        active_bid=active_bid,
        manual_player=None,
        categories=CATEGORIES,
        current_player_index=0,
    )


def _participant(client_id, budget):
    return SimpleNamespace(client_id=client_id, budget_remaining=budget)


class TestIsLocked:
    """Tests for the lock predicate."""

    @pytest.fixture
    def sweep(self):
        return LockResolutionSweep(auction_service=None)

    def test_locked_when_no_challenger_can_afford(self, sweep):
        auction = _auction({'amount': 30, 'bidder_id': 'p1', 'bidder_name': 'P1'})
        participants = [_participant('p1', 70), _participant('p2', 30), _participant('p3', 12)]
        assert sweep.is_locked(auction, participants)

    def test_open_while_someone_can_raise(self, sweep):
        auction = _auction({'amount': 30, 'bidder_id': 'p1', 'bidder_name': 'P1'})
        participants = [_participant('p1', 70), _participant('p2', 31)]
        assert not sweep.is_locked(auction, participants)

    def test_leader_budget_is_ignored(self, sweep):
        auction = _auction({'amount': 30, 'bidder_id': 'p1', 'bidder_name': 'P1'})
        assert sweep.is_locked(auction, [_participant('p1', 500)])

    def test_never_locked_without_bid(self, sweep):
        assert not sweep.is_locked(_auction(), [_participant('p1', 0)])

    def test_never_locked_when_paused_or_not_live(self, sweep):
        bid = {'amount': 30, 'bidder_id': 'p1', 'bidder_name': 'P1'}
        participants = [_participant('p1', 70), _participant('p2', 0)]
        assert not sweep.is_locked(_auction(bid, is_paused=True), participants)
        assert not sweep.is_locked(_auction(bid, status='ended'), participants)


class TestSweepRun:
    """Tests for automatic resolution after bids."""

    def test_unbeatable_bid_sells_immediately(self, auctions, make_auction, fetch_auction, fetch_participant):
        auction_id = make_auction(budget=20, players_per_team=1)
        auctions.start_auction(auction_id)

        result = auctions.place_bid(auction_id, 'p1', 'P1', 20)
        assert result['player'] == 'Messi'

        auction = fetch_auction(auction_id)
        assert auction.current_player_index == 1
        assert auction.active_bid is None
        assert auction.completed_players[0]['winner_id'] == 'p1'
        assert fetch_participant(auction_id, 'p1').budget_remaining == 0

    def test_beatable_bid_waits(self, auctions, make_auction, fetch_auction):
        auction_id = make_auction(budget=20, players_per_team=1)
        auctions.start_auction(auction_id)

        auctions.place_bid(auction_id, 'p1', 'P1', 19)

        auction = fetch_auction(auction_id)
        assert auction.current_player_index == 0
        assert auction.active_bid['amount'] == 19

    def test_run_on_settled_auction_does_nothing(self, auctions, live_auction):
        assert auctions.sweep.run(live_auction) is False
        assert auctions.sweep.run('missing') is False
