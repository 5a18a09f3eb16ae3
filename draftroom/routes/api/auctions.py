"""
Auction API endpoints.

Thin JSON adapters over the auction and finalization services. The
caller's identity is the opaque client id sent in the X-Client-Id header;
admin-only endpoints check it against the auction's admin seat.
"""

from functools import wraps
from typing import Any, Callable, TypeVar

from flask import request

from draftroom.extensions import limiter
from draftroom.routes import api_bp
from draftroom.services.auction_service import auction_service
from draftroom.services.finalization_service import finalization_service
from draftroom.utils import error_response, get_client_id, get_json_body, success_response

F = TypeVar('F', bound=Callable[..., Any])


def auction_admin_required(f: F) -> F:
    """
    Decorator to check the caller holds the admin seat of the auction.

    Service errors (unknown auction, not admin) propagate to the
    registered error handlers.
    """
    @wraps(f)
    def decorated_function(auction_id: str, *args: Any, **kwargs: Any) -> Any:
        auction_service.require_admin(auction_id, get_client_id())
        return f(auction_id, *args, **kwargs)
    return decorated_function  # type: ignore


# ==================== LOBBY ====================

@api_bp.route('/auctions', methods=['GET', 'POST'])
def auctions():
    """List public lobbies or create a new auction."""
    if request.method == 'GET':
        return success_response(auctions=auction_service.list_public_auctions())

    data = get_json_body()
    auction_id = auction_service.create_auction(
        auction_name=data.get('auction_name', ''),
        admin_name=data.get('admin_name', ''),
        client_id=get_client_id(),
        max_participants=data.get('max_participants'),
        players_per_team=data.get('players_per_team'),
        budget_per_player=data.get('budget_per_player'),
        visibility=data.get('visibility', 'private'),
        password=data.get('password') or '',
        categories=data.get('categories') or [],
    )
    return success_response(auction_id=auction_id)


@api_bp.route('/auctions/lookup', methods=['GET'])
def lookup_auction():
    """Find an auction by its name."""
    auction = auction_service.find_auction_by_name(request.args.get('name', ''))
    if not auction:
        return error_response('Auction not found.', 404)
    return success_response(auction=auction)


@api_bp.route('/auctions/<auction_id>', methods=['GET'])
def get_auction(auction_id: str):
    """Current snapshot, the same payload pushed to subscribers."""
    return success_response(auction_service.get_snapshot(auction_id))


@api_bp.route('/auctions/<auction_id>/join', methods=['POST'])
def join_auction(auction_id: str):
    data = get_json_body()
    result = auction_service.join_auction(
        auction_id=auction_id,
        password=data.get('password') or '',
        client_id=get_client_id(),
        display_name=data.get('display_name', ''),
    )
    return success_response(result)


# ==================== LIVE DRAFT ====================

@api_bp.route('/auctions/<auction_id>/start', methods=['POST'])
@auction_admin_required
def start_auction(auction_id: str):
    return success_response(auction_service.start_auction(auction_id))


@api_bp.route('/auctions/<auction_id>/bid', methods=['POST'])
@limiter.limit("30 per second")
def place_bid(auction_id: str):
    """Place a bid on the player currently on the block."""
    data = get_json_body()
    if data.get('amount') is None:
        return error_response('Bid amount is required')

    result = auction_service.place_bid(
        auction_id=auction_id,
        client_id=get_client_id(),
        bidder_name=data.get('bidder_name', ''),
        amount=data.get('amount'),
    )
    return success_response(result)


@api_bp.route('/auctions/<auction_id>/skip', methods=['POST'])
def skip_player(auction_id: str):
    """Vote to skip (no bid) or pass (contested) the current player."""
    decision = auction_service.skip_player(auction_id, get_client_id())
    return success_response(decision.to_dict())


@api_bp.route('/auctions/<auction_id>/pause', methods=['POST'])
@auction_admin_required
def pause_auction(auction_id: str):
    return success_response(changed=auction_service.pause_auction(auction_id))


@api_bp.route('/auctions/<auction_id>/resume', methods=['POST'])
@auction_admin_required
def resume_auction(auction_id: str):
    return success_response(changed=auction_service.resume_auction(auction_id))


@api_bp.route('/auctions/<auction_id>/finalize-player', methods=['POST'])
@auction_admin_required
def finalize_player(auction_id: str):
    """Admin force-resolve of the current player.

    Sells to the leader if there is one unless ``force_unsold`` is set;
    pass ``slot_key`` to make a repeated click a no-op once the player
    has moved on.
    """
    data = get_json_body()
    outcome = auction_service.finalize_current_player(
        auction_id,
        force_unsold=bool(data.get('force_unsold', False)),
        expected_slot_key=data.get('slot_key'),
    )
    return success_response(resolved=outcome is not None, outcome=outcome)


@api_bp.route('/auctions/<auction_id>/relist/<entry_id>', methods=['POST'])
@auction_admin_required
def relist_player(auction_id: str, entry_id: str):
    return success_response(auction_service.relist_unsold_player(auction_id, entry_id))


@api_bp.route('/auctions/<auction_id>/end', methods=['POST'])
@auction_admin_required
def end_auction(auction_id: str):
    return success_response(auction_service.force_end(auction_id))


# ==================== POST-AUCTION ====================

@api_bp.route('/auctions/<auction_id>/finalization', methods=['POST'])
@auction_admin_required
def open_finalization(auction_id: str):
    return success_response(changed=auction_service.open_finalization_phase(auction_id))


@api_bp.route('/auctions/<auction_id>/team', methods=['POST'])
def submit_team(auction_id: str):
    """Submit a team, optionally as a lineup: {sport, formation, slots}."""
    data = get_json_body()
    result = finalization_service.submit_team(
        auction_id=auction_id,
        client_id=get_client_id(),
        sport=data.get('sport'),
        formation=data.get('formation'),
        slots=data.get('slots'),
    )
    return success_response(result)


@api_bp.route('/auctions/<auction_id>/ranking-phase', methods=['POST'])
@auction_admin_required
def open_ranking(auction_id: str):
    return success_response(changed=finalization_service.mark_auction_as_ranking(auction_id))


@api_bp.route('/auctions/<auction_id>/ranking', methods=['POST'])
def submit_ranking(auction_id: str):
    """Submit the caller's ranking of the other participants, best first."""
    data = get_json_body()
    points = finalization_service.submit_ranking(
        auction_id=auction_id,
        client_id=get_client_id(),
        ranking_order=data.get('ranking_order'),
    )
    return success_response(rankings=points)


@api_bp.route('/auctions/<auction_id>/results', methods=['POST'])
@auction_admin_required
def finalize_results(auction_id: str):
    results = finalization_service.finalize_results(auction_id)
    return success_response(finalized=results is not None, results=results or [])
