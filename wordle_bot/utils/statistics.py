"""
Wordle statistics engine.

Pure functions over a list of WordleResult records. Nothing here touches the
database or keeps state between calls, so every view can be recomputed from
the submission log at any time.

Scores and averages are exact Fractions so ties compare exactly; convert to
float only for display.
"""

import math
from collections import defaultdict
from datetime import datetime, timezone
from fractions import Fraction
from typing import Dict, Iterable, List, Optional, Set, Tuple

from wordle_bot.config import Config
from wordle_bot.data_models.wordle import (
    AverageTimeStats, FAILED_GUESSES, Leaderboard, PodiumEntry, WordleResult
)
from wordle_bot.utils.wordle_parser import (
    SECONDS_IN_DAY, get_wordle_day, positive_guesses, start_of_week, to_local
)


def get_participants(results: Iterable[WordleResult]) -> List[str]:
    """Distinct player ids in first-seen order."""
    return list(dict.fromkeys(result.player_id for result in results))


def get_scores(results: Iterable[WordleResult]) -> Leaderboard:
    """
    Cumulative score: one point per puzzle, split evenly among the players
    with the fewest guesses. Failed attempts never win.
    """
    best_per_day: Dict[int, Tuple[int, Set[str]]] = {}

    for result in results:
        if result.guesses == FAILED_GUESSES:
            continue
        existing = best_per_day.get(result.wordle_day)
        if existing is None or result.guesses < existing[0]:
            best_per_day[result.wordle_day] = (result.guesses, {result.player_id})
        elif result.guesses == existing[0]:
            existing[1].add(result.player_id)

    leaderboard: Leaderboard = {}
    for _, winners in best_per_day.values():
        weight = Fraction(1, len(winners))
        for player_id in winners:
            leaderboard[player_id] = leaderboard.get(player_id, 0) + weight

    return leaderboard


def get_weekly_scores(results: Iterable[WordleResult], start_wordle_day: int,
                      window_size: int = None) -> Leaderboard:
    """Cumulative score restricted to puzzles in [start, start + window_size - 1]."""
    if window_size is None:
        window_size = Config.WEEKLY_WINDOW
    end_wordle_day = start_wordle_day + window_size - 1
    return get_scores(
        result for result in results
        if start_wordle_day <= result.wordle_day <= end_wordle_day
    )


def get_week_start_day(reference: Optional[datetime] = None, timezone_name: str = 'UTC') -> int:
    """Puzzle number of the most recent Sunday in the zone's local calendar."""
    if reference is None:
        reference = datetime.now(timezone.utc)
    local_week_start = start_of_week(to_local(reference, timezone_name))
    return get_wordle_day(local_week_start.date())


def get_weekly_scores_now(results: Iterable[WordleResult], reference: Optional[datetime] = None,
                          timezone_name: str = 'UTC') -> Leaderboard:
    """Weekly score for the calendar week (starting Sunday) containing the reference instant."""
    return get_weekly_scores(results, get_week_start_day(reference, timezone_name))


def get_averages(results: Iterable[WordleResult]) -> Leaderboard:
    """Mean guesses per player, with failed attempts counted as six."""
    totals: Dict[str, int] = defaultdict(int)
    counts: Dict[str, int] = defaultdict(int)

    for result in results:
        totals[result.player_id] += positive_guesses(result.guesses)
        counts[result.player_id] += 1

    return {player_id: Fraction(total, counts[player_id]) for player_id, total in totals.items()}


def get_day_leaderboard(results: Iterable[WordleResult], wordle_day: int) -> Leaderboard:
    """Guess count per player for one puzzle, solved attempts only."""
    return {
        result.player_id: result.guesses
        for result in results
        if result.wordle_day == wordle_day and result.guesses != FAILED_GUESSES
    }


def get_day_leaderboards_multi(results: Iterable[WordleResult], wordle_day: int) -> List[PodiumEntry]:
    """Podium for one puzzle: tied players grouped by guess count, best first."""
    groups: Dict[int, Set[str]] = defaultdict(set)
    for player_id, guesses in get_day_leaderboard(results, wordle_day).items():
        groups[guesses].add(player_id)

    return [
        PodiumEntry(guesses=guesses, player_ids=frozenset(player_ids))
        for guesses, player_ids in sorted(groups.items())
    ]


def get_average_time(results: Iterable[WordleResult], player_id: str) -> AverageTimeStats:
    """
    Mean and population standard deviation of a player's submission time of day.

    A player with no history gets AverageTimeStats(0, 0).
    """
    values = [
        min(result.seconds_since_midnight, SECONDS_IN_DAY - 1)
        for result in results
        if result.player_id == player_id
    ]
    if not values:
        return AverageTimeStats(avg=0, std=0)

    avg = sum(values) / len(values)
    variance = sum((value - avg) ** 2 for value in values) / len(values)
    return AverageTimeStats(avg=avg, std=math.sqrt(variance))


def sort_leaderboard(board: Leaderboard, reverse: bool = True) -> List[Tuple[str, float]]:
    """Leaderboard rows ordered by score (highest first by default), ties by player id."""
    sign = -1 if reverse else 1
    return sorted(board.items(), key=lambda item: (sign * item[1], item[0]))


def round_leaderboard(board: Leaderboard, digits: int = 2) -> Dict[str, float]:
    """Display copy of a leaderboard rounded to a fixed number of decimals."""
    return {player_id: round(float(value), digits) for player_id, value in board.items()}
