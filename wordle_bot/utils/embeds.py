"""
Shared embed utilities for the Wordle Discord bot.

Builds leaderboard, podium and digest embeds from the statistics engine's
views so every command and the scheduled digest format results the same way.
"""

import discord
from typing import Iterable, List

from wordle_bot.constants import LeaderboardLabels, UIConstants
from wordle_bot.data_models.wordle import DigestReport, Leaderboard, PodiumEntry, SubmissionOutcome
from wordle_bot.utils.statistics import sort_leaderboard


def format_mention(player_id: str) -> str:
    return f"<@{player_id}>"


def medal(index: int) -> str:
    return UIConstants.AWARDS[index] if index < len(UIConstants.AWARDS) else f"{index + 1}."


def format_clock(seconds: float) -> str:
    """Seconds since midnight as HH:MM."""
    total_minutes = int(seconds) // 60
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def build_leaderboard_lines(board: Leaderboard, unit: str = "pts.", higher_is_better: bool = True) -> List[str]:
    """One line per player, best first, values rounded to two decimals."""
    return [
        f"{medal(index)} {format_mention(player_id)} — {float(value):.2f} {unit}"
        for index, (player_id, value) in enumerate(sort_leaderboard(board, reverse=higher_is_better))
    ]


def build_podium_lines(podium: Iterable[PodiumEntry]) -> List[str]:
    return [
        f"{medal(index)} {', '.join(format_mention(p) for p in sorted(entry.player_ids))} — {entry.guesses}/6"
        for index, entry in enumerate(podium)
    ]


def _truncate(lines: List[str]) -> str:
    text = "\n".join(lines)
    if len(text) <= UIConstants.MAX_FIELD_LENGTH:
        return text
    return text[:UIConstants.MAX_FIELD_LENGTH - 1] + "…"


def build_leaderboard_embed(leaderboard_type: str, board: Leaderboard) -> discord.Embed:
    higher_is_better = leaderboard_type != 'averages'
    lines = build_leaderboard_lines(board, LeaderboardLabels.UNITS[leaderboard_type], higher_is_better)
    return discord.Embed(
        title=LeaderboardLabels.TITLES[leaderboard_type],
        description=_truncate(lines),
        color=UIConstants.WORDLE_GREEN
    )


def build_podium_embed(wordle_day: int, podium: List[PodiumEntry]) -> discord.Embed:
    return discord.Embed(
        title=f"Wordle {wordle_day} podium",
        description=_truncate(build_podium_lines(podium)),
        color=UIConstants.WORDLE_GREEN
    )


def build_digest_embed(report: DigestReport) -> discord.Embed:
    """Scheduled digest: podium plus the three leaderboards."""
    embed = build_podium_embed(report.wordle_day, report.podium)
    embed.title = f"📰 Wordle {report.wordle_day} digest"

    sections = (
        ('scores', report.scores),
        ('weekly', report.weekly_scores),
        ('averages', report.averages),
    )
    for leaderboard_type, board in sections:
        if not board:
            continue
        lines = build_leaderboard_lines(
            board, LeaderboardLabels.UNITS[leaderboard_type], leaderboard_type != 'averages'
        )
        embed.add_field(
            name=LeaderboardLabels.TITLES[leaderboard_type],
            value=_truncate(lines[:5]),
            inline=False
        )

    embed.timestamp = report.generated_at
    return embed


def build_submission_reply(outcome: SubmissionOutcome) -> str:
    """Plain-text reply to an accepted submission."""
    result = outcome.result
    lines = [f"Logged Wordle {result.wordle_day} ({result.guess_text}) for {format_mention(result.player_id)}."]

    for leaderboard_type, overtaken in outcome.passed.items():
        names = ", ".join(format_mention(p) for p in overtaken)
        lines.append(f"📈 You just passed {names} on the {LeaderboardLabels.TITLES[leaderboard_type]} board!")

    if outcome.timing:
        when = "earlier" if outcome.timing.deviation < 0 else "later"
        lines.append(
            f"⏰ That's {when} than usual. You normally play around {format_clock(outcome.timing.stats.avg)}."
        )

    return "\n".join(lines)
