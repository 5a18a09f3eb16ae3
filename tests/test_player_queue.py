"""
Tests for player queue construction and the derived bidding helpers.
"""

from types import SimpleNamespace

import pytest
from draftroom.dataclasses import ActiveBid, CategoryConfig, PlayerSlot
from draftroom.player_queue import (
    build_player_queue,
    minimum_bid,
    queue_slot_at,
    resolve_active_slot,
)


class TestBuildPlayerQueue:
    """Tests for flattening categories into draft order."""

    def test_orders_categories_by_label(self, sample_categories):
        queue = build_player_queue(sample_categories)

        assert [slot.name for slot in queue] == ['Messi', 'Mbappe', 'Pedri', 'Gavi']
        assert [slot.key for slot in queue] == ['cat-a-0', 'cat-a-1', 'cat-b-0', 'cat-b-1']
        assert queue[2].base_price == 5

    def test_same_label_keeps_configured_order(self):
        categories = [
            {'id': 'late', 'label': 'C', 'base_price': 1, 'players': ['X']},
            {'id': 'first', 'label': 'C', 'base_price': 2, 'players': ['Y']},
        ]
        assert [slot.key for slot in build_player_queue(categories)] == ['late-0', 'first-0']

    def test_accepts_category_objects(self):
        queue = build_player_queue([CategoryConfig(id='e', label='E', base_price=1, players=['Z'])])
        assert queue == [PlayerSlot(key='e-0', name='Z', category_label='E', base_price=1)]

    def test_is_deterministic(self, sample_categories):
        assert build_player_queue(sample_categories) == build_player_queue(sample_categories)

    def test_empty(self):
        assert build_player_queue([]) == []
        assert build_player_queue(None) == []

    def test_unknown_label(self):
        with pytest.raises(ValueError):
            build_player_queue([{'id': 'x', 'label': 'F', 'base_price': 1, 'players': ['Q']}])


class TestQueueLookups:
    """Tests for resolving the slot on the block."""

    def test_queue_slot_at_bounds(self, sample_categories):
        assert queue_slot_at(sample_categories, 0).name == 'Messi'
        assert queue_slot_at(sample_categories, 3).name == 'Gavi'
        assert queue_slot_at(sample_categories, 4) is None
        assert queue_slot_at(sample_categories, -1) is None

    def test_manual_player_takes_precedence(self, sample_categories):
        manual = PlayerSlot(key='cat-b-0-relist-ab12cd34', name='Pedri', category_label='B', base_price=5)
        auction = SimpleNamespace(
            manual_player=manual.to_dict(),
            categories=sample_categories,
            current_player_index=0,
        )
        assert resolve_active_slot(auction) == manual

    def test_queue_position_without_manual(self, sample_categories):
        auction = SimpleNamespace(manual_player=None, categories=sample_categories, current_player_index=1)
        assert resolve_active_slot(auction).name == 'Mbappe'


class TestMinimumBid:
    """Tests for the minimum acceptable bid."""

    SLOT = PlayerSlot(key='a-0', name='Messi', category_label='A', base_price=10)

    def test_base_price_without_leader(self):
        assert minimum_bid(self.SLOT, None) == 10

    def test_one_above_leader(self):
        bid = ActiveBid(amount=15, bidder_id='p1', bidder_name='P1')
        assert minimum_bid(self.SLOT, bid) == 16
