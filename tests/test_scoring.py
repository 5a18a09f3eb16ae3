"""
Tests for ranking points and leaderboard aggregation.
"""

from types import SimpleNamespace

from draftroom.scoring import build_leaderboard, ranking_points, tally_points


def _participant(client_id, rankings=None, roster=None, budget=0):
    roster = roster or []
    return SimpleNamespace(
        client_id=client_id,
        name=client_id.upper(),
        rankings=rankings or {},
        roster=roster,
        budget_remaining=budget,
        roster_value=sum(entry['price'] for entry in roster),
    )


class TestRankingPoints:
    """Tests for converting a ranking into points."""

    def test_first_place_earns_most(self):
        assert ranking_points(['b', 'c', 'd'], 4) == {'b': 3, 'c': 2, 'd': 1}

    def test_floor_of_one_point(self):
        assert ranking_points(['b', 'c', 'd'], 2) == {'b': 1, 'c': 1, 'd': 1}

    def test_two_participants(self):
        assert ranking_points(['b'], 2) == {'b': 1}


class TestLeaderboard:
    """Tests for tallying and ranking participants."""

    def test_tally_sums_across_submitters(self):
        participants = [
            _participant('a', {'b': 2, 'c': 1}),
            _participant('b', {'a': 2, 'c': 1}),
            _participant('c'),
        ]
        assert tally_points(participants) == {'b': 2, 'c': 2, 'a': 2}

    def test_sorted_by_points_with_ranks(self):
        participants = [
            _participant('a', {'b': 2, 'c': 1}),
            _participant('b', {'c': 2, 'a': 1}),
            _participant('c', {'b': 2, 'a': 1}, roster=[{'player_name': 'X', 'category_label': 'A', 'price': 7}]),
        ]
        board = build_leaderboard(participants)

        assert [(e.participant_id, e.points, e.rank) for e in board] == [
            ('b', 4, 1),
            ('c', 3, 2),
            ('a', 2, 3),
        ]
        assert board[1].roster_value == 7
        assert board[1].roster_count == 1

    def test_ties_keep_input_order(self):
        participants = [_participant('a'), _participant('b'), _participant('c')]
        board = build_leaderboard(participants)
        assert [e.participant_id for e in board] == ['a', 'b', 'c']
        assert [e.rank for e in board] == [1, 2, 3]

    def test_unranked_participant_scores_zero(self):
        board = build_leaderboard([_participant('a', {'b': 1}), _participant('b')])
        assert board[1].participant_id == 'a'
        assert board[1].points == 0
