"""
Auction service: the live-draft state machine.

Encapsulates every transition of an auction from lobby to the end of
bidding:
- Creating and joining lobbies
- Starting the draft
- Bidding, skip/pass voting and slot resolution
- Pause/resume of the countdown
- Relisting unsold players and forcing an early end
- Opening the team finalization phase

Each public mutation is one locked, versioned transaction against the
auction row (and the participant rows it touches), retried from a fresh
read when a concurrent writer wins.
"""

import uuid
from typing import Any, Callable, Dict, List, Optional

from draftroom import db
from draftroom.auth import hash_password, verify_password
from draftroom.constants import (
    ACTIVE_BID_TIMER_MS,
    CATEGORY_ORDER,
    DEFAULT_ADMIN_NAME,
    MAX_AUCTION_NAME_LENGTH,
    MAX_PARTICIPANTS,
    MIN_PARTICIPANTS,
    START_TIMER_MS,
)
from draftroom.dataclasses import (
    ActiveBid,
    CategoryConfig,
    CompletedPlayerEntry,
    PlayerSlot,
    RosterEntry,
    SkipDecision,
)
from draftroom.db_utils import AuctionLock
from draftroom.enums import AuctionStatus, ParticipantRole, SlotResult, Visibility
from draftroom.logger import get_logger, log_audit
from draftroom.models import Auction, Participant
from draftroom.player_queue import (
    build_player_queue,
    minimum_bid,
    queue_slot_at,
    resolve_active_slot,
)
from draftroom.repositories.auction_repository import AuctionRepository
from draftroom.repositories.participant_repository import ParticipantRepository
from draftroom.serializers import serialize_lobby, serialize_snapshot
from draftroom.services.base import (
    AuctionFullError,
    AuthorizationError,
    BaseService,
    BidTooLowError,
    DuplicateNameError,
    EmptyQueueError,
    InsufficientBudgetError,
    InvalidStateError,
    NoActivePlayerError,
    NotFoundError,
    NotRelistableError,
    RosterReserveError,
    ValidationError,
    WrongPasswordError,
    retry_on_conflict,
)
from draftroom.services.lock_resolution import LockResolutionSweep
from draftroom.utils import clean_display_name, now_ms, validate_positive_int

logger = get_logger(__name__)


class AuctionService(BaseService):
    """Service for the auction state machine.

    Handles the lobby, live bidding and slot resolution with per-auction
    locking, optimistic versioning and retry on conflict.
    """

    def __init__(
        self,
        auction_repo: Optional[AuctionRepository] = None,
        participant_repo: Optional[ParticipantRepository] = None,
        clock: Optional[Callable[[], int]] = None,
        publisher: Optional[Callable[[str], None]] = None
    ):
        """Initialize service with optional collaborator injection.

        Args:
            auction_repo: AuctionRepository instance (defaults to new instance).
            participant_repo: ParticipantRepository instance (defaults to new instance).
            clock: Callable returning epoch milliseconds (defaults to wall clock).
            publisher: Callable pushing an auction's fresh state to subscribers
                (defaults to the Socket.IO publisher).
        """
        self.auction_repo = auction_repo or AuctionRepository()
        self.participant_repo = participant_repo or ParticipantRepository()
        self.clock = clock or now_ms
        self._publisher = publisher
        self.sweep = LockResolutionSweep(self)

    # ==================== HELPERS ====================

    def publish(self, auction_id: str) -> None:
        """Push the committed state of an auction to its subscribers."""
        publisher = self._publisher
        if publisher is None:
            from draftroom.realtime import publish_auction
            publisher = publish_auction
        publisher(auction_id)

    def _load_auction(self, auction_id: str) -> Auction:
        auction = self.auction_repo.get_for_update(auction_id)
        if not auction:
            raise NotFoundError("Auction not found.")
        return auction

    def _open_window(self, auction: Auction, duration_ms: int) -> None:
        auction.countdown_ends_at = self.clock() + duration_ms
        auction.countdown_duration = duration_ms

    @staticmethod
    def _clear_slot_state(auction: Auction) -> None:
        auction.active_bid = None
        auction.skip_votes = []
        auction.is_paused = False
        auction.paused_remaining_ms = None

    def _end_bidding(self, auction: Auction) -> None:
        auction.status = AuctionStatus.ENDED.value
        auction.bidding_closed = True
        auction.countdown_ends_at = None
        auction.countdown_duration = None
        auction.manual_player = None
        auction.manual_source_id = None
        self._clear_slot_state(auction)

    def _normalize_categories(self, categories: Any) -> List[Dict[str, Any]]:
        """Trim player names, drop blank players and empty categories.

        Raises:
            ValidationError: On malformed categories or when no player remains.
        """
        if not isinstance(categories, list):
            raise ValidationError("Categories must be a list.")

        normalized: List[CategoryConfig] = []
        seen_ids = set()
        for raw in categories:
            if not isinstance(raw, dict):
                raise ValidationError("Each category must be an object.")
            label = str(raw.get('label') or '').strip().upper()
            if label not in CATEGORY_ORDER:
                raise ValidationError(
                    f"Category label must be one of {', '.join(CATEGORY_ORDER)}."
                )
            base_price, error = validate_positive_int(
                raw.get('base_price', 0), 'Base price', allow_zero=True
            )
            if error:
                raise ValidationError(error)

            players = [
                str(player).strip()
                for player in (raw.get('players') or [])
                if player is not None and str(player).strip()
            ]
            if not players:
                continue

            category_id = str(raw.get('id') or label).strip()
            if category_id in seen_ids:
                raise ValidationError("Category ids must be unique.")
            seen_ids.add(category_id)

            normalized.append(CategoryConfig(
                id=category_id,
                label=label,
                base_price=base_price,
                players=players,
            ))

        if not normalized:
            raise ValidationError("Add at least one player to create an auction.")
        return [category.to_dict() for category in normalized]

    # ==================== LOBBY ====================

    @retry_on_conflict
    def create_auction(
        self,
        auction_name: str,
        admin_name: str,
        client_id: str,
        max_participants: int,
        players_per_team: int,
        budget_per_player: int,
        visibility: str = 'private',
        password: str = '',
        categories: Optional[List[Dict[str, Any]]] = None
    ) -> str:
        """Create an auction in lobby status and seat its creator as admin.

        Args:
            auction_name: Display name, unique ignoring case.
            admin_name: Creator's display name.
            client_id: Creator's client identity.
            max_participants: Seat limit including the admin.
            players_per_team: Roster size each participant must fill.
            budget_per_player: Starting budget of every participant.
            visibility: 'public' or 'private'.
            password: Lobby password; empty for an open lobby.
            categories: List of {id, label, base_price, players}.

        Returns:
            The new auction id.

        Raises:
            ValidationError: On invalid input or a duplicate name.
        """
        trimmed_name = (auction_name or '').strip()
        if not trimmed_name:
            raise ValidationError("Auction name is required.")
        if len(trimmed_name) > MAX_AUCTION_NAME_LENGTH:
            raise ValidationError(
                f"Auction name must be {MAX_AUCTION_NAME_LENGTH} characters or less."
            )
        if not client_id:
            raise ValidationError("Client id is required.")

        max_participants, error = validate_positive_int(max_participants, 'Max participants')
        if error:
            raise ValidationError(error)
        if not MIN_PARTICIPANTS <= max_participants <= MAX_PARTICIPANTS:
            raise ValidationError(
                f"Max participants must be between {MIN_PARTICIPANTS} and {MAX_PARTICIPANTS}."
            )
        players_per_team, error = validate_positive_int(players_per_team, 'Players per team')
        if error:
            raise ValidationError(error)
        budget_per_player, error = validate_positive_int(budget_per_player, 'Budget per player')
        if error:
            raise ValidationError(error)

        normalized_categories = self._normalize_categories(categories or [])
        total_players = sum(len(c['players']) for c in normalized_categories)

        if self.auction_repo.find_by_name(trimmed_name):
            raise DuplicateNameError()

        safe_admin_name = clean_display_name(admin_name) or DEFAULT_ADMIN_NAME

        with self.transaction():
            auction = self.auction_repo.create(
                name=trimmed_name,
                name_lower=trimmed_name.lower(),
                password_hash=hash_password(password),
                visibility=Visibility.from_string(visibility).value,
                admin_id=client_id,
                admin_name=safe_admin_name,
                max_participants=max_participants,
                participant_count=1,
                players_per_team=players_per_team,
                budget_per_player=budget_per_player,
                total_players=total_players,
                categories=normalized_categories,
                status=AuctionStatus.LOBBY.value,
                current_player_index=-1,
                countdown_ends_at=None,
                countdown_duration=START_TIMER_MS,
                active_bid=None,
                skip_votes=[],
                is_paused=False,
                paused_remaining_ms=None,
                completed_players=[],
                bidding_closed=False,
                finalization_open=False,
                results=[],
            )
            self.flush()

            self.participant_repo.create(
                auction_id=auction.id,
                client_id=client_id,
                name=safe_admin_name,
                role=ParticipantRole.ADMIN.value,
                budget_remaining=budget_per_player,
                players_needed=players_per_team,
                roster=[],
                has_submitted_team=False,
                final_roster=None,
                ranking_submitted=False,
                rankings={},
            )
            auction_id = auction.id

        log_audit('auction_created', 'auction', auction_id, {
            'name': trimmed_name,
            'admin_id': client_id,
            'total_players': total_players,
        })
        return auction_id

    def find_auction_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """Look up an auction by name, case-insensitively.

        Returns:
            Lobby summary dict or None when no auction matches.
        """
        auction = self.auction_repo.find_by_name(name)
        return serialize_lobby(auction) if auction else None

    def list_public_auctions(self) -> List[Dict[str, Any]]:
        return [serialize_lobby(a) for a in self.auction_repo.get_public_lobbies()]

    @retry_on_conflict
    def join_auction(
        self,
        auction_id: str,
        password: str,
        client_id: str,
        display_name: str
    ) -> Dict[str, Any]:
        """Join an auction, or re-join it with the same client id.

        A re-join only refreshes the display name; budget, roster and
        submission progress are kept.

        Raises:
            NotFoundError: If the auction does not exist.
            WrongPasswordError: If the password does not match.
            AuctionFullError: If a new participant would exceed the seat limit.
        """
        if not client_id:
            raise ValidationError("Client id is required.")
        safe_name = clean_display_name(display_name)

        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if not verify_password(password, auction.password_hash):
                    raise WrongPasswordError()

                existing = self.participant_repo.get_by_client(
                    auction_id, client_id, for_update=True
                )
                if existing:
                    if safe_name:
                        existing.name = safe_name
                    rejoined = True
                else:
                    if auction.participant_count >= auction.max_participants:
                        raise AuctionFullError()
                    if not safe_name:
                        raise ValidationError("Display name is required.")

                    auction.participant_count = auction.participant_count + 1
                    self.participant_repo.create(
                        auction_id=auction_id,
                        client_id=client_id,
                        name=safe_name,
                        role=ParticipantRole.PLAYER.value,
                        budget_remaining=auction.budget_per_player,
                        players_needed=auction.players_per_team,
                        roster=[],
                        has_submitted_team=False,
                        final_roster=None,
                        ranking_submitted=False,
                        rankings={},
                    )
                    rejoined = False

        if not rejoined:
            log_audit('participant_joined', 'auction', auction_id, {'client_id': client_id})
        self.publish(auction_id)
        return {'success': True, 'rejoined': rejoined}

    def require_admin(self, auction_id: str, client_id: str) -> None:
        """Ensure the caller holds the admin seat of an auction.

        Raises:
            NotFoundError: If the auction does not exist.
            AuthorizationError: If the caller is not the admin.
        """
        if not self.auction_repo.get(auction_id):
            raise NotFoundError("Auction not found.")
        participant = self.participant_repo.get_by_client(auction_id, client_id or '')
        if not participant or participant.role != ParticipantRole.ADMIN.value:
            raise AuthorizationError("Only the auction admin can do that.")

    def get_snapshot(self, auction_id: str) -> Dict[str, Any]:
        """Current auction state plus participants in join order.

        Raises:
            NotFoundError: If the auction does not exist.
        """
        auction = self.auction_repo.get(auction_id)
        if not auction:
            raise NotFoundError("Auction not found.")
        participants = self.participant_repo.get_for_auction(auction_id)
        return serialize_snapshot(auction, participants, self.clock())

    # ==================== LIVE DRAFT ====================

    @retry_on_conflict
    def start_auction(self, auction_id: str) -> Dict[str, Any]:
        """Move a lobby to live and put the first queue slot on the block.

        Raises:
            InvalidStateError: If the auction is not in the lobby.
            EmptyQueueError: If the categories yield no player.
        """
        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if auction.status != AuctionStatus.LOBBY.value:
                    raise InvalidStateError("Auction already started.")

                queue = build_player_queue(auction.categories)
                if not queue:
                    raise EmptyQueueError()

                auction.status = AuctionStatus.LIVE.value
                auction.current_player_index = 0
                self._open_window(auction, START_TIMER_MS)
                self._clear_slot_state(auction)
                first_player = queue[0].name

        log_audit('auction_started', 'auction', auction_id, {'first_player': first_player})
        self.publish(auction_id)
        return {'success': True, 'current_player': first_player}

    @retry_on_conflict
    def place_bid(
        self,
        auction_id: str,
        client_id: str,
        bidder_name: str,
        amount: int
    ) -> Dict[str, Any]:
        """Place a bid on the slot currently on the block.

        A bid must reach the minimum (base price, or one above the leader)
        and must leave one unit of budget for every other roster slot still
        to fill. A successful bid restarts the countdown at the bid window
        and clears skip votes.

        Raises:
            InvalidStateError: If the auction is not live or is paused.
            NoActivePlayerError: If no slot is on the block.
            BidTooLowError: If the amount is under the minimum.
            InsufficientBudgetError: If the amount exceeds the budget.
            RosterReserveError: If the amount would strand the roster.
        """
        amount, error = validate_positive_int(amount, 'Bid amount')
        if error:
            raise ValidationError(error)

        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if auction.status != AuctionStatus.LIVE.value:
                    raise InvalidStateError("Auction is not live.")
                if auction.is_paused:
                    raise InvalidStateError("Auction is paused.")

                slot = resolve_active_slot(auction)
                if not slot:
                    raise NoActivePlayerError()

                participant = self.participant_repo.get_by_client(
                    auction_id, client_id, for_update=True
                )
                if not participant:
                    raise NotFoundError("Join the auction before bidding.")

                current_bid = ActiveBid.from_dict(auction.active_bid)
                required = minimum_bid(slot, current_bid)
                if amount < required:
                    raise BidTooLowError(required)
                if amount > participant.budget_remaining:
                    raise InsufficientBudgetError()

                reserve = max(participant.players_needed - 1, 0)
                max_bid = participant.budget_remaining - reserve
                if amount > max_bid:
                    raise RosterReserveError(max_bid)

                auction.active_bid = ActiveBid(
                    amount=amount,
                    bidder_id=client_id,
                    bidder_name=clean_display_name(bidder_name) or participant.name,
                    placed_at=self.clock(),
                ).to_dict()
                self._open_window(auction, ACTIVE_BID_TIMER_MS)
                auction.skip_votes = []
                countdown_ends_at = auction.countdown_ends_at

        log_audit('bid_placed', 'auction', auction_id, {
            'bidder_id': client_id,
            'player': slot.name,
            'amount': amount,
        })
        self.publish(auction_id)
        self.sweep.run(auction_id)
        return {
            'success': True,
            'amount': amount,
            'player': slot.name,
            'countdown_ends_at': countdown_ends_at,
        }

    @retry_on_conflict
    def skip_player(self, auction_id: str, client_id: str) -> SkipDecision:
        """Record a skip/pass vote and resolve the slot once quorum is met.

        With a leading bid, everyone except the leader must pass
        (``max(participant_count - 1, 1)`` votes not counting the leader)
        and the slot is sold. Without a bid, every participant must skip
        and the slot goes unsold. Quorum resolution happens in the same
        transaction as the vote.

        Silently does nothing when the auction is not live or is paused.
        """
        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if auction.status != AuctionStatus.LIVE.value or auction.is_paused:
                    return SkipDecision()

                if not self.participant_repo.get_by_client(auction_id, client_id):
                    raise NotFoundError("Join the auction before voting.")

                votes = list(auction.skip_votes or [])
                if client_id not in votes:
                    votes.append(client_id)
                auction.skip_votes = votes

                active_bid = ActiveBid.from_dict(auction.active_bid)
                if active_bid:
                    passes = len([v for v in votes if v != active_bid.bidder_id])
                    required = max(auction.participant_count - 1, 1)
                    decision = SkipDecision(
                        resolve=passes >= required,
                        force_unsold=False,
                        votes=passes,
                        required=required,
                    )
                else:
                    required = auction.participant_count
                    decision = SkipDecision(
                        resolve=len(votes) >= required,
                        force_unsold=True,
                        votes=len(votes),
                        required=required,
                    )

                if decision.resolve:
                    self._resolve_slot(auction, decision.force_unsold)

        self.publish(auction_id)
        if not decision.resolve:
            self.sweep.run(auction_id)
        return decision

    @retry_on_conflict
    def pause_auction(self, auction_id: str) -> bool:
        """Freeze the countdown, keeping the time left.

        Returns:
            True if the auction was paused, False if it was not live or
            already paused.
        """
        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if auction.status != AuctionStatus.LIVE.value or auction.is_paused:
                    return False

                if auction.countdown_ends_at is not None:
                    remaining = max(auction.countdown_ends_at - self.clock(), 0)
                else:
                    remaining = auction.countdown_duration or START_TIMER_MS

                auction.is_paused = True
                auction.paused_remaining_ms = remaining
                auction.countdown_ends_at = None

        log_audit('auction_paused', 'auction', auction_id, {'remaining_ms': remaining})
        self.publish(auction_id)
        return True

    @retry_on_conflict
    def resume_auction(self, auction_id: str) -> bool:
        """Restart a paused countdown with the time that was left.

        Returns:
            True if the auction was resumed, False if it was not paused.
        """
        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if auction.status != AuctionStatus.LIVE.value or not auction.is_paused:
                    return False

                remaining = auction.paused_remaining_ms
                if remaining is None:
                    remaining = auction.countdown_duration or START_TIMER_MS
                self._open_window(auction, remaining)
                auction.is_paused = False
                auction.paused_remaining_ms = None

        log_audit('auction_resumed', 'auction', auction_id, {'remaining_ms': remaining})
        self.publish(auction_id)
        return True

    @retry_on_conflict
    def finalize_current_player(
        self,
        auction_id: str,
        force_unsold: bool = False,
        expected_slot_key: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Resolve the slot on the block and move on.

        Safe to call redundantly: does nothing unless the auction is live,
        and when ``expected_slot_key`` is given, does nothing if a different
        slot is on the block (the expected one was already resolved).

        Args:
            auction_id: ID of the auction.
            force_unsold: Record the slot unsold even if it has a bid.
            expected_slot_key: Key of the slot the caller means to resolve.

        Returns:
            Dict describing the outcome, or None when nothing was done.
        """
        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if auction.status != AuctionStatus.LIVE.value:
                    return None

                if expected_slot_key is not None:
                    slot = resolve_active_slot(auction)
                    if slot is None or slot.key != expected_slot_key:
                        return None

                outcome = self._resolve_slot(auction, force_unsold)

        self.publish(auction_id)
        return outcome

    def _resolve_slot(self, auction: Auction, force_unsold: bool) -> Dict[str, Any]:
        """Resolve the active slot inside the caller's transaction.

        Credits the winner, writes the ledger, then advances the queue
        pointer or closes a relisted overlay.
        """
        slot = resolve_active_slot(auction)
        if slot is None:
            self._end_bidding(auction)
            log_audit('auction_ended', 'auction', auction.id, {'reason': 'queue_exhausted'})
            return {'result': None, 'status': auction.status}

        is_manual = bool(auction.manual_player)
        entry = CompletedPlayerEntry(
            id=auction.manual_source_id if is_manual else slot.key,
            player_name=slot.name,
            category_label=slot.category_label,
            base_price=slot.base_price,
            result=SlotResult.UNSOLD,
            resolved_at=self.clock(),
        )

        active_bid = ActiveBid.from_dict(auction.active_bid)
        if active_bid and not force_unsold:
            winner = self.participant_repo.get_by_client(
                auction.id, active_bid.bidder_id, for_update=True
            )
            if winner is None:
                logger.warning(
                    f"Winning bidder {active_bid.bidder_id} missing from auction "
                    f"{auction.id}; recording {slot.name} as unsold"
                )
            else:
                self._credit_winner(winner, slot, active_bid.amount)
                entry.result = SlotResult.SOLD
                entry.winner_id = active_bid.bidder_id
                entry.winner_name = active_bid.bidder_name
                entry.final_bid = active_bid.amount

        ledger = list(auction.completed_players or [])
        if is_manual:
            for index, existing in enumerate(ledger):
                if existing.get('id') == entry.id:
                    ledger[index] = entry.to_dict()
                    break
            else:
                ledger.append(entry.to_dict())
        else:
            ledger.append(entry.to_dict())
        auction.completed_players = ledger

        if is_manual:
            auction.manual_player = None
            auction.manual_source_id = None
            self._clear_slot_state(auction)
            queue_open = not auction.bidding_closed and queue_slot_at(
                auction.categories, auction.current_player_index
            )
            if queue_open:
                auction.status = AuctionStatus.LIVE.value
                self._open_window(auction, START_TIMER_MS)
            else:
                self._end_bidding(auction)
        else:
            next_index = auction.current_player_index + 1
            auction.current_player_index = next_index
            if queue_slot_at(auction.categories, next_index):
                self._clear_slot_state(auction)
                self._open_window(auction, START_TIMER_MS)
            else:
                self._end_bidding(auction)

        log_audit(f'player_{entry.result.value}', 'auction', auction.id, {
            'player': entry.player_name,
            'winner_id': entry.winner_id,
            'final_bid': entry.final_bid,
            'relisted': is_manual,
        })
        if auction.status == AuctionStatus.ENDED.value:
            log_audit('auction_ended', 'auction', auction.id, {'reason': 'queue_exhausted'})

        return {
            'result': entry.result.value,
            'player': entry.player_name,
            'winner_id': entry.winner_id,
            'final_bid': entry.final_bid,
            'status': auction.status,
        }

    @staticmethod
    def _credit_winner(winner: Participant, slot: PlayerSlot, price: int) -> None:
        roster = list(winner.roster or [])
        roster.append(RosterEntry(
            player_name=slot.name,
            category_label=slot.category_label,
            price=price,
        ).to_dict())
        winner.roster = roster
        winner.budget_remaining = winner.budget_remaining - price
        winner.players_needed = max(winner.players_needed - 1, 0)

    @retry_on_conflict
    def relist_unsold_player(self, auction_id: str, completed_player_id: str) -> Dict[str, Any]:
        """Put an unsold player back on the block outside queue order.

        The queue pointer is left where it is; the relisted slot overlays it
        until resolved, at which point its ledger entry is rewritten in place.
        If bidding had already closed (queue done or ended early), resolving
        the relisted slot ends the auction again.

        Raises:
            InvalidStateError: If the auction is past bidding, team
                submission has opened, or another relisted player is up.
            NotRelistableError: If the entry is missing or was sold.
        """
        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if auction.status not in (AuctionStatus.LIVE.value, AuctionStatus.ENDED.value):
                    raise InvalidStateError("Players can only be relisted during or right after bidding.")
                if auction.finalization_open:
                    raise InvalidStateError("Team submission has already started.")
                if auction.manual_player:
                    raise InvalidStateError("Resolve the relisted player first.")

                entry_data = next(
                    (e for e in auction.completed_players or [] if e.get('id') == completed_player_id),
                    None,
                )
                if entry_data is None:
                    raise NotRelistableError()
                entry = CompletedPlayerEntry.from_dict(entry_data)
                if entry.is_sold:
                    raise NotRelistableError()

                slot = PlayerSlot(
                    key=f"{entry.id}-relist-{uuid.uuid4().hex[:8]}",
                    name=entry.player_name,
                    category_label=entry.category_label,
                    base_price=entry.base_price,
                )
                auction.manual_player = slot.to_dict()
                auction.manual_source_id = entry.id
                auction.status = AuctionStatus.LIVE.value
                self._clear_slot_state(auction)
                self._open_window(auction, START_TIMER_MS)

        log_audit('player_relisted', 'auction', auction_id, {
            'entry_id': completed_player_id,
            'player': slot.name,
        })
        self.publish(auction_id)
        return {'success': True, 'slot': slot.to_dict()}

    @retry_on_conflict
    def force_end(self, auction_id: str) -> Dict[str, Any]:
        """End bidding now, leaving the rest of the queue undrafted.

        Raises:
            InvalidStateError: If the auction is not live.
        """
        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if auction.status != AuctionStatus.LIVE.value:
                    raise InvalidStateError("Auction is not live.")
                self._end_bidding(auction)

        log_audit('auction_ended', 'auction', auction_id, {'reason': 'forced'})
        self.publish(auction_id)
        return {'success': True}

    @retry_on_conflict
    def open_finalization_phase(self, auction_id: str) -> bool:
        """Open team submission for every participant.

        Returns:
            True if the phase was opened, False if it already was.

        Raises:
            InvalidStateError: If bidding has not ended.
        """
        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if auction.status != AuctionStatus.ENDED.value:
                    raise InvalidStateError("The auction has not ended yet.")
                if auction.finalization_open:
                    return False
                auction.finalization_open = True

        log_audit('finalization_opened', 'auction', auction_id)
        self.publish(auction_id)
        return True


# Singleton instance for use in routes
auction_service = AuctionService()
