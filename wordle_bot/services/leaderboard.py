"""
Leaderboard service for the Wordle bot.

Read-side views for chat commands. Every call recomputes from the channel's
submission log; there is no cached aggregate state to invalidate.
"""

from datetime import datetime, timezone
from typing import List, Optional
import logging

from wordle_bot.data_models.wordle import AverageTimeStats, Leaderboard, PodiumEntry
from wordle_bot.services.chat_settings import ChatSettingsService, default_settings
from wordle_bot.utils import statistics
from wordle_bot.utils.wordle_exceptions import StoreUnavailableError
from wordle_bot.utils.wordle_parser import get_local_wordle_day

logger = logging.getLogger(__name__)

LEADERBOARD_TYPES = ('scores', 'averages', 'weekly')


class LeaderboardService:
    """Leaderboard, podium and timing views for a channel."""

    def __init__(self, wordle_ops, settings_service: ChatSettingsService):
        self.wordle_ops = wordle_ops
        self.settings_service = settings_service

    async def get_leaderboard(self, channel_id: str, leaderboard_type: str = "scores",
                              now: Optional[datetime] = None) -> Leaderboard:
        """
        Compute one leaderboard for a channel.

        Args:
            channel_id: Channel to read
            leaderboard_type: 'scores', 'averages' or 'weekly'
            now: Reference instant for the weekly window (defaults to now)
        """
        if leaderboard_type not in LEADERBOARD_TYPES:
            raise ValueError(f"leaderboard_type must be one of {', '.join(LEADERBOARD_TYPES)}")

        results = await self.wordle_ops.get_channel_submissions(channel_id)
        if leaderboard_type == "scores":
            return statistics.get_scores(results)
        if leaderboard_type == "averages":
            return statistics.get_averages(results)

        settings = await self.settings_service.get(channel_id)
        return statistics.get_weekly_scores_now(results, now or datetime.now(timezone.utc), settings.timezone)

    async def get_today(self, channel_id: str, now: Optional[datetime] = None) -> int:
        """Today's puzzle number in the channel's timezone (the default zone when storage is off)."""
        try:
            settings = await self.settings_service.get(channel_id)
        except StoreUnavailableError:
            settings = default_settings(channel_id)
        return get_local_wordle_day(now or datetime.now(timezone.utc), settings.timezone)

    async def get_podium(self, channel_id: str, wordle_day: Optional[int] = None,
                         now: Optional[datetime] = None) -> List[PodiumEntry]:
        """Podium for a puzzle, today's puzzle when none is given."""
        if wordle_day is None:
            wordle_day = await self.get_today(channel_id, now)
        results = await self.wordle_ops.get_channel_submissions(channel_id)
        return statistics.get_day_leaderboards_multi(results, wordle_day)

    async def get_average_time(self, channel_id: str, player_id: str) -> AverageTimeStats:
        results = await self.wordle_ops.get_channel_submissions(channel_id)
        return statistics.get_average_time(results, player_id)
