"""
Peer-ranking points and leaderboard aggregation.

Pure functions; the ranking service loads participants and persists the
outcome.
"""

from typing import Dict, Iterable, List, Sequence

from draftroom.dataclasses import ResultEntry


def ranking_points(ranking_order: Sequence[str], participant_count: int) -> Dict[str, int]:
    """Convert one submitter's ordered ranking into a points map.

    The i-th target (0-indexed) receives ``max(participant_count - 1 - i, 1)``
    points, so first place earns the most and nobody earns less than one.
    """
    max_points = max(participant_count - 1, 1)
    return {
        target_id: max(max_points - index, 1)
        for index, target_id in enumerate(ranking_order)
    }


def tally_points(participants: Iterable) -> Dict[str, int]:
    """Sum the points every participant received across all submitters."""
    score_board: Dict[str, int] = {}
    for participant in participants:
        for target_id, points in (participant.rankings or {}).items():
            score_board[target_id] = score_board.get(target_id, 0) + int(points)
    return score_board


def build_leaderboard(participants: Sequence) -> List[ResultEntry]:
    """Produce the final, ranked leaderboard.

    ``participants`` must be in join order: ties on points keep that order
    (the sort is stable), and ranks are 1-based positions.
    """
    score_board = tally_points(participants)

    entries = [
        ResultEntry(
            participant_id=participant.client_id,
            name=participant.name,
            points=score_board.get(participant.client_id, 0),
            roster_count=len(participant.roster or []),
            budget_remaining=participant.budget_remaining,
            roster_value=participant.roster_value,
        )
        for participant in participants
    ]
    entries.sort(key=lambda entry: entry.points, reverse=True)

    for index, entry in enumerate(entries):
        entry.rank = index + 1
    return entries
