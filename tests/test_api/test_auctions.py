"""
Tests for auction API endpoints.

Tests cover:
- Lobby creation, lookup and joining
- Admin-only endpoints
- Error payloads for rejected bids
- A full draft through to results
"""

import pytest

CATEGORIES = [
    {'id': 'fw', 'label': 'A', 'base_price': 10, 'players': ['Messi']},
    {'id': 'mf', 'label': 'B', 'base_price': 5, 'players': ['Pedri']},
]


def _headers(client_id):
    return {'X-Client-Id': client_id}


@pytest.fixture
def api_auction(client):
    """Auction created over the API with admin, p1 and p2 seated."""
    response = client.post('/api/auctions', headers=_headers('admin'), json={
        'auction_name': 'API Draft',
        'admin_name': 'Boss',
        'max_participants': 3,
        'players_per_team': 2,
        'budget_per_player': 50,
        'visibility': 'public',
        'password': 'pw',
        'categories': CATEGORIES,
    })
    assert response.status_code == 200
    auction_id = response.get_json()['auction_id']

    for client_id in ('p1', 'p2'):
        response = client.post(
            f'/api/auctions/{auction_id}/join',
            headers=_headers(client_id),
            json={'password': 'pw', 'display_name': client_id.upper()},
        )
        assert response.status_code == 200
    return auction_id


class TestLobbyEndpoints:
    """Tests for creating, listing and joining auctions."""

    def test_create_requires_name(self, client):
        response = client.post('/api/auctions', headers=_headers('admin'), json={
            'auction_name': '',
            'max_participants': 3,
            'players_per_team': 2,
            'budget_per_player': 50,
            'categories': CATEGORIES,
        })
        assert response.status_code == 400
        assert response.get_json() == {'success': False, 'error': 'Auction name is required.'}

    def test_public_listing_and_lookup(self, client, api_auction):
        listed = client.get('/api/auctions').get_json()['auctions']
        assert [a['id'] for a in listed] == [api_auction]
        assert listed[0]['has_password'] is True

        found = client.get('/api/auctions/lookup?name=api%20draft').get_json()
        assert found['auction']['id'] == api_auction

        missing = client.get('/api/auctions/lookup?name=nothing')
        assert missing.status_code == 404

    def test_wrong_password(self, client, api_auction):
        response = client.post(
            f'/api/auctions/{api_auction}/join',
            headers=_headers('p3'),
            json={'password': 'nope', 'display_name': 'P3'},
        )
        assert response.status_code == 403
        assert response.get_json()['error'] == 'Incorrect password.'

    def test_full_auction(self, client, api_auction):
        response = client.post(
            f'/api/auctions/{api_auction}/join',
            headers=_headers('p3'),
            json={'password': 'pw', 'display_name': 'P3'},
        )
        assert response.status_code == 409
        assert response.get_json()['error'] == 'Auction is full.'

    def test_snapshot(self, client, api_auction):
        data = client.get(f'/api/auctions/{api_auction}').get_json()

        assert data['success'] is True
        assert data['auction']['status'] == 'lobby'
        assert data['auction']['queue_length'] == 2
        assert 'password_hash' not in data['auction']
        assert [p['id'] for p in data['participants']] == ['admin', 'p1', 'p2']

    def test_unknown_auction(self, client):
        response = client.get('/api/auctions/does-not-exist')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'Auction not found.'

    def test_formations(self, client):
        data = client.get('/api/formations').get_json()
        codes = [f['code'] for f in data['formations']]
        assert '442' in codes
        assert all(len(f['slots']) == 11 for f in data['formations'])


class TestAdminEndpoints:
    """Tests for admin-only controls."""

    def test_start_requires_admin(self, client, api_auction):
        response = client.post(f'/api/auctions/{api_auction}/start', headers=_headers('p1'))
        assert response.status_code == 403
        assert response.get_json()['error'] == 'Only the auction admin can do that.'

    def test_start_and_pause(self, client, api_auction):
        response = client.post(f'/api/auctions/{api_auction}/start', headers=_headers('admin'))
        assert response.get_json()['current_player'] == 'Messi'

        response = client.post(f'/api/auctions/{api_auction}/pause', headers=_headers('admin'))
        assert response.get_json()['changed'] is True
        response = client.post(f'/api/auctions/{api_auction}/pause', headers=_headers('admin'))
        assert response.get_json()['changed'] is False

    def test_finalize_player_with_stale_key(self, client, api_auction):
        client.post(f'/api/auctions/{api_auction}/start', headers=_headers('admin'))

        first = client.post(
            f'/api/auctions/{api_auction}/finalize-player',
            headers=_headers('admin'),
            json={'slot_key': 'fw-0'},
        ).get_json()
        second = client.post(
            f'/api/auctions/{api_auction}/finalize-player',
            headers=_headers('admin'),
            json={'slot_key': 'fw-0'},
        ).get_json()

        assert first['resolved'] is True
        assert first['outcome']['result'] == 'unsold'
        assert second['resolved'] is False

    def test_ranking_phase_before_teams_conflicts(self, client, api_auction):
        client.post(f'/api/auctions/{api_auction}/start', headers=_headers('admin'))
        client.post(f'/api/auctions/{api_auction}/end', headers=_headers('admin'))

        response = client.post(f'/api/auctions/{api_auction}/ranking-phase', headers=_headers('admin'))
        assert response.status_code == 409
        assert response.get_json()['success'] is False

        client.post(f'/api/auctions/{api_auction}/finalization', headers=_headers('admin'))
        response = client.post(f'/api/auctions/{api_auction}/ranking-phase', headers=_headers('admin'))
        assert response.status_code == 409
        assert response.get_json()['error'] == 'Every participant must submit a team first.'


class TestBidEndpoint:
    """Tests for bid error payloads."""

    @pytest.fixture
    def live(self, client, api_auction):
        client.post(f'/api/auctions/{api_auction}/start', headers=_headers('admin'))
        return api_auction

    def test_missing_amount(self, client, live):
        response = client.post(f'/api/auctions/{live}/bid', headers=_headers('p1'), json={})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Bid amount is required'

    def test_too_low_reports_minimum(self, client, live):
        client.post(f'/api/auctions/{live}/bid', headers=_headers('p1'), json={'amount': 12})
        response = client.post(f'/api/auctions/{live}/bid', headers=_headers('p2'), json={'amount': 12})

        assert response.status_code == 400
        assert response.get_json()['minimum_bid'] == 13

    def test_reserve_reports_max_bid(self, client, live):
        response = client.post(f'/api/auctions/{live}/bid', headers=_headers('p1'), json={'amount': 50})

        assert response.status_code == 400
        assert response.get_json()['max_bid'] == 49

    def test_outsider_cannot_bid(self, client, live):
        response = client.post(f'/api/auctions/{live}/bid', headers=_headers('ghost'), json={'amount': 20})
        assert response.status_code == 404


class TestFullDraft:
    """Walks one auction from lobby to results over the API."""

    def test_lobby_to_results(self, client, api_auction):
        auction_id = api_auction
        post = lambda path, who, body=None: client.post(  # noqa: E731
            f'/api/auctions/{auction_id}{path}', headers=_headers(who), json=body or {}
        )

        assert post('/start', 'admin').status_code == 200

        assert post('/bid', 'p1', {'amount': 20}).status_code == 200
        for voter in ('admin', 'p2'):
            assert post('/skip', voter).status_code == 200

        assert post('/bid', 'p2', {'amount': 6}).status_code == 200
        assert post('/finalize-player', 'admin').get_json()['outcome']['result'] == 'sold'

        snapshot = client.get(f'/api/auctions/{auction_id}').get_json()
        assert snapshot['auction']['status'] == 'ended'

        assert post('/team', 'p1').status_code == 409
        assert post('/finalization', 'admin').get_json()['changed'] is True
        for who in ('admin', 'p1', 'p2'):
            assert post('/team', who).status_code == 200

        assert post('/ranking-phase', 'admin').get_json()['changed'] is True
        assert post('/ranking', 'admin', {'ranking_order': ['p1', 'p2']}).status_code == 200
        assert post('/ranking', 'p1', {'ranking_order': ['p2', 'admin']}).status_code == 200
        response = post('/ranking', 'p2', {'ranking_order': ['p1', 'admin']})
        assert response.get_json()['rankings'] == {'p1': 2, 'admin': 1}

        results = post('/results', 'admin').get_json()
        assert results['finalized'] is True
        assert [r['participant_id'] for r in results['results']] == ['p1', 'p2', 'admin']

        final = client.get(f'/api/auctions/{auction_id}').get_json()
        assert final['auction']['status'] == 'results'
