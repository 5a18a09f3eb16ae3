"""
Finalization service for the post-auction phases.

Encapsulates all business logic related to:
- Team submission (optional curated final roster)
- Moving the auction into peer ranking
- Recording each participant's ranking of the others
- Writing the final leaderboard
"""

from collections import Counter
from typing import Any, Callable, Dict, List, Optional

from draftroom.dataclasses import RosterEntry
from draftroom.db_utils import AuctionLock
from draftroom.enums import AuctionStatus, Sport
from draftroom.formations import get_formation_by_code
from draftroom.logger import get_logger, log_audit
from draftroom.models import Auction, Participant
from draftroom.repositories.auction_repository import AuctionRepository
from draftroom.repositories.participant_repository import ParticipantRepository
from draftroom.scoring import build_leaderboard, ranking_points
from draftroom.services.base import (
    BaseService,
    InvalidStateError,
    NotFoundError,
    ValidationError,
    retry_on_conflict,
)

logger = get_logger(__name__)


class FinalizationService(BaseService):
    """Service for team submission, ranking and results.

    Every operation the automation driver may fire (mark ranking,
    finalize results) is a no-op when the auction has already moved on.
    """

    def __init__(
        self,
        auction_repo: Optional[AuctionRepository] = None,
        participant_repo: Optional[ParticipantRepository] = None,
        publisher: Optional[Callable[[str], None]] = None
    ):
        self.auction_repo = auction_repo or AuctionRepository()
        self.participant_repo = participant_repo or ParticipantRepository()
        self._publisher = publisher

    def publish(self, auction_id: str) -> None:
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

    def _load_participant(self, auction_id: str, client_id: str) -> Participant:
        participant = self.participant_repo.get_by_client(auction_id, client_id, for_update=True)
        if not participant:
            raise NotFoundError("You are not part of this auction.")
        return participant

    # ==================== TEAM SUBMISSION ====================

    def _build_final_roster(
        self,
        participant: Participant,
        sport: Optional[str],
        formation_code: Optional[str],
        slots: Any
    ) -> Dict[str, Any]:
        """Validate a curated lineup against the participant's real roster.

        Raises:
            ValidationError: If the lineup names players not on the roster,
                repeats a position, or does not fit the formation.
        """
        if not isinstance(slots, list):
            raise ValidationError("Team slots must be a list.")

        sport_value = (sport or Sport.OTHER.value).strip().lower()
        formation = None
        if sport_value == Sport.SOCCER.value:
            formation = get_formation_by_code(formation_code)
            if formation is None:
                raise ValidationError("Pick a valid formation.")

        roster_by_name: Dict[str, RosterEntry] = {}
        available = Counter()
        for entry in (RosterEntry.from_dict(e) for e in participant.roster or []):
            roster_by_name.setdefault(entry.player_name, entry)
            available[entry.player_name] += 1

        placed = Counter()
        seen_slot_ids = set()
        final_slots: List[Dict[str, Any]] = []
        for index, item in enumerate(slots):
            if not isinstance(item, dict):
                raise ValidationError("Each team slot must be an object.")
            player_name = str(item.get('player_name') or '').strip()
            slot_id = str(item.get('slot_id') or '').strip() or None

            if player_name not in roster_by_name:
                raise ValidationError(f"{player_name or 'That player'} is not on your roster.")
            placed[player_name] += 1
            if placed[player_name] > available[player_name]:
                raise ValidationError(f"{player_name} is placed more than once.")

            if formation is not None:
                if slot_id not in formation.slot_ids:
                    raise ValidationError(f"Position {slot_id} is not part of {formation.label}.")
            if slot_id is not None:
                if slot_id in seen_slot_ids:
                    raise ValidationError(f"Position {slot_id} is used more than once.")
                seen_slot_ids.add(slot_id)

            roster_entry = roster_by_name[player_name]
            final_slots.append({
                'order': index,
                'slot_id': slot_id,
                'player_name': player_name,
                'category_label': roster_entry.category_label,
                'price': roster_entry.price,
            })

        return {
            'sport': sport_value,
            'formation': formation.code if formation else None,
            'slots': final_slots,
        }

    @retry_on_conflict
    def submit_team(
        self,
        auction_id: str,
        client_id: str,
        sport: Optional[str] = None,
        formation: Optional[str] = None,
        slots: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """Submit a participant's team, optionally with a curated lineup.

        Budgets are not re-checked; they were enforced at bid time.

        Raises:
            InvalidStateError: If submission is not open or already done.
            ValidationError: If the lineup is invalid.
        """
        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if auction.status != AuctionStatus.ENDED.value or not auction.finalization_open:
                    raise InvalidStateError("Team submission is not open yet.")

                participant = self._load_participant(auction_id, client_id)
                if participant.has_submitted_team:
                    raise InvalidStateError("You already submitted your team.")

                if slots is not None:
                    participant.final_roster = self._build_final_roster(
                        participant, sport, formation, slots
                    )
                participant.has_submitted_team = True

        log_audit('team_submitted', 'participant', client_id, {'auction_id': auction_id})
        self.publish(auction_id)
        return {'success': True}

    # ==================== RANKING ====================

    @retry_on_conflict
    def mark_auction_as_ranking(self, auction_id: str) -> bool:
        """Move an ended auction into peer ranking once every team is in.

        Returns:
            True if the status changed, False if already ranking.

        Raises:
            InvalidStateError: If the auction is in any other phase, team
                submission has not opened, or a team is still missing.
        """
        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if auction.status == AuctionStatus.RANKING.value:
                    return False
                if auction.status != AuctionStatus.ENDED.value:
                    raise InvalidStateError("Teams can only be ranked after the auction has ended.")
                if not auction.finalization_open:
                    raise InvalidStateError("Team submission has not opened yet.")

                participants = self.participant_repo.get_for_auction(auction_id)
                if not all(p.has_submitted_team for p in participants):
                    raise InvalidStateError("Every participant must submit a team first.")
                auction.status = AuctionStatus.RANKING.value

        log_audit('ranking_opened', 'auction', auction_id)
        self.publish(auction_id)
        return True

    @retry_on_conflict
    def submit_ranking(
        self,
        auction_id: str,
        client_id: str,
        ranking_order: List[str]
    ) -> Dict[str, int]:
        """Record a participant's ranking of every other participant.

        Args:
            auction_id: ID of the auction.
            client_id: The submitter.
            ranking_order: Client ids of the other participants, best first.

        Returns:
            The points map stored for the submitter.

        Raises:
            InvalidStateError: If ranking is not open or already submitted.
            ValidationError: If the order is not a full ranking of the others.
        """
        if not isinstance(ranking_order, list) or not all(
            isinstance(target, str) for target in ranking_order
        ):
            raise ValidationError("Ranking must be a list of participant ids.")

        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if auction.status != AuctionStatus.RANKING.value:
                    raise InvalidStateError("Ranking is not open.")

                participant = self._load_participant(auction_id, client_id)
                if participant.ranking_submitted:
                    raise InvalidStateError("You already submitted your ranking.")

                others = set(self.participant_repo.get_client_ids(auction_id)) - {client_id}
                if client_id in ranking_order:
                    raise ValidationError("You cannot rank yourself.")
                if len(set(ranking_order)) != len(ranking_order) or set(ranking_order) != others:
                    raise ValidationError("Rank every other participant exactly once.")

                points = ranking_points(ranking_order, auction.participant_count)
                participant.rankings = points
                participant.ranking_submitted = True

        log_audit('ranking_submitted', 'participant', client_id, {'auction_id': auction_id})
        self.publish(auction_id)
        return points

    @retry_on_conflict
    def finalize_results(self, auction_id: str) -> Optional[List[Dict[str, Any]]]:
        """Tally every ranking and write the final leaderboard once.

        Ties on points are ordered by join order.

        Returns:
            The results rows, or None if the auction was not in ranking.
        """
        with AuctionLock(auction_id):
            with self.transaction():
                auction = self._load_auction(auction_id)
                if auction.status != AuctionStatus.RANKING.value:
                    return None

                participants = self.participant_repo.get_for_auction(auction_id)
                results = [entry.to_dict() for entry in build_leaderboard(participants)]
                auction.results = results
                auction.status = AuctionStatus.RESULTS.value

        log_audit('results_finalized', 'auction', auction_id, {
            'winner': results[0]['participant_id'] if results else None,
        })
        self.publish(auction_id)
        return results


# Singleton instance for use in routes
finalization_service = FinalizationService()
