"""
Pytest fixtures for draft room tests.

Provides fixtures for app, client, database, a controllable clock, and
services wired to that clock with a recording publisher.
"""

import pytest
from draftroom import create_app, db
from draftroom.models import Auction
from draftroom.repositories.participant_repository import ParticipantRepository
from draftroom.services.auction_service import AuctionService
from draftroom.services.finalization_service import FinalizationService


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def app():
    """Create application for testing with fresh database."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Test client for making requests."""
    return app.test_client()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def published():
    """Auction ids pushed to subscribers, in order."""
    return []


@pytest.fixture
def auctions(app, clock, published):
    """Auction service on the fake clock."""
    return AuctionService(clock=clock, publisher=published.append)


@pytest.fixture
def finalization(app, published):
    return FinalizationService(publisher=published.append)


@pytest.fixture
def sample_categories():
    """Two categories, deliberately configured out of draft order."""
    return [
        {'id': 'cat-b', 'label': 'B', 'base_price': 5, 'players': ['Pedri', 'Gavi']},
        {'id': 'cat-a', 'label': 'A', 'base_price': 10, 'players': ['Messi', 'Mbappe']},
    ]


@pytest.fixture
def make_auction(auctions, sample_categories):
    """Factory creating an auction with 'admin' seated and extra joiners."""
    def _make(
        joiners=('p1', 'p2'),
        name='Sunday Draft',
        budget=100,
        players_per_team=3,
        max_participants=4,
        categories=None,
        password='',
        visibility='private'
    ):
        auction_id = auctions.create_auction(
            auction_name=name,
            admin_name='Boss',
            client_id='admin',
            max_participants=max_participants,
            players_per_team=players_per_team,
            budget_per_player=budget,
            visibility=visibility,
            password=password,
            categories=categories if categories is not None else sample_categories,
        )
        for client_id in joiners:
            auctions.join_auction(auction_id, password, client_id, client_id.upper())
        return auction_id
    return _make


@pytest.fixture
def live_auction(auctions, make_auction):
    """A started auction with admin, p1 and p2 seated."""
    auction_id = make_auction()
    auctions.start_auction(auction_id)
    return auction_id


@pytest.fixture
def fetch_auction(app):
    """Fresh read of an auction row."""
    def _fetch(auction_id):
        db.session.expire_all()
        return db.session.get(Auction, auction_id)
    return _fetch


@pytest.fixture
def fetch_participant(app):
    def _fetch(auction_id, client_id):
        db.session.expire_all()
        return ParticipantRepository().get_by_client(auction_id, client_id)
    return _fetch
