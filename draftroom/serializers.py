"""
Snapshot serialization for API responses and realtime pushes.

Every subscriber receives the same shape: the auction (without its
password hash) plus derived display hints, and the participants in join
order.
"""

from typing import Any, Dict, List

from draftroom.dataclasses import ActiveBid
from draftroom.models import Auction, Participant
from draftroom.player_queue import build_player_queue, minimum_bid, resolve_active_slot


def serialize_auction(auction: Auction, now: int) -> Dict[str, Any]:
    """Serialize an auction with its derived current slot and timer hints.

    ``ms_remaining`` and ``minimum_bid`` are advisory; the transactional
    operations remain the authority.
    """
    slot = resolve_active_slot(auction)
    active_bid = ActiveBid.from_dict(auction.active_bid)

    ms_remaining = None
    if auction.is_paused:
        ms_remaining = auction.paused_remaining_ms
    elif auction.countdown_ends_at is not None:
        ms_remaining = max(auction.countdown_ends_at - now, 0)

    return {
        'id': auction.id,
        'name': auction.name,
        'visibility': auction.visibility,
        'has_password': bool(auction.password_hash),
        'admin_id': auction.admin_id,
        'admin_name': auction.admin_name,
        'max_participants': auction.max_participants,
        'participant_count': auction.participant_count,
        'players_per_team': auction.players_per_team,
        'budget_per_player': auction.budget_per_player,
        'total_players': auction.total_players,
        'categories': auction.categories,
        'status': auction.status,
        'current_player_index': auction.current_player_index,
        'queue_length': len(build_player_queue(auction.categories)),
        'current_player': slot.to_dict() if slot else None,
        'minimum_bid': minimum_bid(slot, active_bid) if slot else None,
        'countdown_ends_at': auction.countdown_ends_at,
        'countdown_duration': auction.countdown_duration,
        'ms_remaining': ms_remaining,
        'active_bid': auction.active_bid,
        'skip_votes': list(auction.skip_votes or []),
        'is_paused': auction.is_paused,
        'paused_remaining_ms': auction.paused_remaining_ms,
        'manual_player': auction.manual_player,
        'manual_source_id': auction.manual_source_id,
        'bidding_closed': auction.bidding_closed,
        'completed_players': list(auction.completed_players or []),
        'finalization_open': auction.finalization_open,
        'results': list(auction.results or []),
    }


def serialize_participant(participant: Participant) -> Dict[str, Any]:
    return {
        'id': participant.client_id,
        'name': participant.name,
        'role': participant.role,
        'joined_at': participant.joined_at.isoformat() if participant.joined_at else None,
        'budget_remaining': participant.budget_remaining,
        'players_needed': participant.players_needed,
        'roster': list(participant.roster or []),
        'has_submitted_team': participant.has_submitted_team,
        'final_roster': participant.final_roster,
        'ranking_submitted': participant.ranking_submitted,
        'rankings': dict(participant.rankings or {}),
    }


def serialize_lobby(auction: Auction) -> Dict[str, Any]:
    """Short form for lobby listings."""
    return {
        'id': auction.id,
        'name': auction.name,
        'admin_name': auction.admin_name,
        'participant_count': auction.participant_count,
        'max_participants': auction.max_participants,
        'total_players': auction.total_players,
        'has_password': bool(auction.password_hash),
    }


def serialize_snapshot(
    auction: Auction,
    participants: List[Participant],
    now: int
) -> Dict[str, Any]:
    return {
        'auction': serialize_auction(auction, now),
        'participants': [serialize_participant(p) for p in participants],
    }
