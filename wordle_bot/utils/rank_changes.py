"""
Rank-change detection between two leaderboard snapshots.

Works on any numeric leaderboard (cumulative, weekly, averages). Take the
"before" snapshot strictly before persisting a submission and the "after"
snapshot right after it.
"""

from typing import Dict, List

from wordle_bot.data_models.wordle import Leaderboard


def get_players_passed(before: Leaderboard, after: Leaderboard,
                       higher_is_better: bool = True) -> Dict[str, List[str]]:
    """
    For every player, the players they were tied with or behind in `before`
    but are strictly ahead of in `after`.

    Missing entries count as 0 when higher is better. For lower-is-better
    boards (average guesses) a missing entry has no meaning, so only players
    present in both snapshots are compared.
    """
    if higher_is_better:
        players = list(dict.fromkeys([*before, *after]))
        old = {player: before.get(player, 0) for player in players}
        new = {player: after.get(player, 0) for player in players}
    else:
        players = [player for player in before if player in after]
        old = {player: -before[player] for player in players}
        new = {player: -after[player] for player in players}

    passed: Dict[str, List[str]] = {}
    for player in players:
        for other in players:
            if player == other:
                continue
            if old[player] <= old[other] and new[player] > new[other]:
                passed.setdefault(player, []).append(other)

    return passed


def get_player_passes(before: Leaderboard, after: Leaderboard, player_id: str,
                      higher_is_better: bool = True) -> List[str]:
    """Players that one player has just overtaken."""
    return get_players_passed(before, after, higher_is_better).get(player_id, [])
