"""
Tests for the statistics engine.
"""

from datetime import datetime, timezone
from fractions import Fraction

import pytest

from wordle_bot.data_models.wordle import FAILED_GUESSES, AverageTimeStats, PodiumEntry
from wordle_bot.utils.statistics import (
    get_average_time, get_averages, get_day_leaderboard, get_day_leaderboards_multi,
    get_participants, get_scores, get_week_start_day, get_weekly_scores,
    get_weekly_scores_now, round_leaderboard, sort_leaderboard
)


@pytest.fixture
def results(make_result):
    return [
        make_result("alice", 1, 3),
        make_result("bob", 1, 3),
        make_result("carol", 1, 4),
        make_result("carol", 2, 2),
        make_result("alice", 2, FAILED_GUESSES),
        make_result("alice", 3, FAILED_GUESSES),
        make_result("bob", 3, FAILED_GUESSES),
    ]


class TestScores:

    def test_split_point_for_ties(self, results):
        scores = get_scores(results)
        assert scores["alice"] == Fraction(1, 2)
        assert scores["bob"] == Fraction(1, 2)
        assert scores["carol"] == 1

    def test_one_point_per_solved_puzzle(self, results):
        # Puzzle 3 had no solver so only two points exist
        assert sum(get_scores(results).values()) == 2

    def test_three_way_tie_is_exact(self, make_result):
        scores = get_scores([make_result(p, 5, 4) for p in ("a", "b", "c")])
        assert scores == {"a": Fraction(1, 3), "b": Fraction(1, 3), "c": Fraction(1, 3)}
        assert sum(scores.values()) == 1

    def test_empty_history(self):
        assert get_scores([]) == {}

    def test_failures_never_score(self, make_result):
        assert get_scores([make_result("alice", 1, FAILED_GUESSES)]) == {}


class TestWeeklyScores:

    def test_window_is_inclusive(self, make_result):
        results = [
            make_result("alice", 1596, 3),
            make_result("bob", 1597, 3),
            make_result("carol", 1603, 2),
            make_result("dave", 1604, 1),
        ]
        assert get_weekly_scores(results, 1597) == {"bob": 1, "carol": 1}

    def test_custom_window(self, make_result):
        results = [make_result("alice", 10, 3), make_result("bob", 11, 3)]
        assert get_weekly_scores(results, 10, window_size=1) == {"alice": 1}

    def test_week_starts_on_sunday(self):
        tuesday = datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)
        assert get_week_start_day(tuesday) == 1597

    def test_week_start_uses_local_calendar(self):
        # Still Saturday evening on the US west coast
        instant = datetime(2025, 11, 2, 3, 0, tzinfo=timezone.utc)
        assert get_week_start_day(instant, "UTC") == 1597
        assert get_week_start_day(instant, "America/Los_Angeles") == 1590

    def test_weekly_scores_now(self, make_result):
        results = [make_result("alice", 1596, 3), make_result("bob", 1599, 3)]
        tuesday = datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)
        assert get_weekly_scores_now(results, tuesday) == {"bob": 1}


class TestAverages:

    def test_failure_counts_as_six(self, make_result):
        results = [
            make_result("alice", 1, 3),
            make_result("alice", 2, 4),
            make_result("alice", 3, FAILED_GUESSES),
        ]
        assert get_averages(results) == {"alice": Fraction(13, 3)}

    def test_every_player_with_history_is_listed(self, results):
        averages = get_averages(results)
        assert set(averages) == {"alice", "bob", "carol"}
        assert averages["carol"] == 3

    def test_empty_history(self):
        assert get_averages([]) == {}


class TestDayLeaderboards:

    def test_day_leaderboard_skips_failures(self, results):
        assert get_day_leaderboard(results, 2) == {"carol": 2}

    def test_podium_groups_ties_best_first(self, results):
        podium = get_day_leaderboards_multi(results, 1)
        assert podium == [
            PodiumEntry(guesses=3, player_ids=frozenset({"alice", "bob"})),
            PodiumEntry(guesses=4, player_ids=frozenset({"carol"})),
        ]

    def test_podium_for_unsolved_puzzle_is_empty(self, results):
        assert get_day_leaderboards_multi(results, 3) == []

    def test_participants_keep_first_seen_order(self, results):
        assert get_participants(results) == ["alice", "bob", "carol"]


class TestAverageTime:

    def test_no_history(self, make_result):
        assert get_average_time([make_result("bob", 1, 3)], "alice") == AverageTimeStats(0, 0)

    def test_single_submission_has_no_spread(self, make_result):
        stats = get_average_time([make_result("alice", 1, 3, seconds=500)], "alice")
        assert stats.avg == 500
        assert stats.std == 0

    def test_population_standard_deviation(self, make_result):
        results = [
            make_result("alice", 1, 3, seconds=3600),
            make_result("alice", 2, 3, seconds=7200),
            make_result("bob", 2, 3, seconds=80000),
        ]
        stats = get_average_time(results, "alice")
        assert stats.avg == 5400
        assert stats.std == pytest.approx(1800)


class TestDisplayHelpers:

    def test_sort_highest_first_ties_by_id(self):
        board = {"bob": 1, "alice": 1, "carol": 2}
        assert sort_leaderboard(board) == [("carol", 2), ("alice", 1), ("bob", 1)]

    def test_sort_lowest_first(self):
        board = {"bob": Fraction(7, 2), "alice": 4, "carol": 3}
        assert [p for p, _ in sort_leaderboard(board, reverse=False)] == ["carol", "bob", "alice"]

    def test_round_leaderboard(self):
        assert round_leaderboard({"alice": Fraction(1, 3), "bob": 2}) == {"alice": 0.33, "bob": 2.0}
