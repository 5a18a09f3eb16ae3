"""
Realtime push of auction state over Socket.IO.

Clients emit ``subscribe`` with ``{"auction_id": ...}`` and receive the
current snapshot, then a fresh ``auction_state`` event after every
committed change to that auction.
"""

from typing import Any, Dict, Optional

from flask_socketio import emit, join_room, leave_room

from draftroom import socketio
from draftroom.constants import AUCTION_ROOM_PREFIX, AUCTION_STATE_EVENT
from draftroom.logger import get_logger
from draftroom.services.base import ServiceError

logger = get_logger(__name__)


def room_for(auction_id: str) -> str:
    return f"{AUCTION_ROOM_PREFIX}{auction_id}"


def publish_auction(auction_id: str) -> None:
    """Emit the latest snapshot of an auction to its room.

    Called after a transaction has committed; a failed push is logged and
    never undoes or fails the committed operation.
    """
    from draftroom.services.auction_service import auction_service

    try:
        snapshot = auction_service.get_snapshot(auction_id)
        socketio.emit(AUCTION_STATE_EVENT, snapshot, to=room_for(auction_id))
    except Exception as e:
        logger.warning(f"Failed to publish auction {auction_id}: {e}", exc_info=True)


def _auction_id_from(data: Optional[Dict[str, Any]]) -> str:
    return str((data or {}).get('auction_id') or '').strip()


@socketio.on('subscribe')
def handle_subscribe(data):
    """Join an auction's room and send its current state."""
    from draftroom.services.auction_service import auction_service

    auction_id = _auction_id_from(data)
    try:
        snapshot = auction_service.get_snapshot(auction_id)
    except ServiceError as e:
        emit('error', {'success': False, 'error': e.message})
        return

    join_room(room_for(auction_id))
    emit(AUCTION_STATE_EVENT, snapshot)


@socketio.on('unsubscribe')
def handle_unsubscribe(data):
    auction_id = _auction_id_from(data)
    if auction_id:
        leave_room(room_for(auction_id))
