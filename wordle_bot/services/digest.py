"""
Digest Service - scheduled podium and leaderboard summaries

Run periodically by the scheduler. For every known channel this service:
1. Works out today's and yesterday's puzzle in the channel's timezone
2. Treats yesterday's puzzle as due, and today's once the digest time has passed
3. Skips puzzles already sent or without any submissions
4. Claims the (channel, puzzle) pair in the digest log (insert-if-absent)
5. Builds the report and hands it to the sender

The claim lives in the database rather than in process memory, so a restart
or a second runner never sends the same digest twice. If delivery fails the
claim is released and the next run tries again.
"""

import logging
from datetime import datetime, time, timezone
from typing import Awaitable, Callable, List, Optional

from wordle_bot.data_models.wordle import ChatSettings, DigestReport
from wordle_bot.services.chat_settings import ChatSettingsService
from wordle_bot.utils import statistics
from wordle_bot.utils.wordle_parser import (
    date_for_wordle_day, get_wordle_day, parse_digest_time, to_local
)

logger = logging.getLogger(__name__)

DigestSender = Callable[[DigestReport], Awaitable[None]]


class DigestService:
    """Decides which digests are due and delivers each exactly once."""

    def __init__(self, wordle_ops, settings_service: ChatSettingsService, sender: DigestSender):
        self.wordle_ops = wordle_ops
        self.settings_service = settings_service
        self.sender = sender

    async def run_once(self, now: Optional[datetime] = None) -> List[DigestReport]:
        """
        Send every digest that is due.

        A failure in one channel is logged and does not stop the others.

        Returns:
            Reports delivered during this run
        """
        if now is None:
            now = datetime.now(timezone.utc)

        delivered = []
        for channel_id in await self.wordle_ops.get_channel_ids():
            try:
                delivered.extend(await self.process_channel(channel_id, now))
            except Exception as e:
                logger.error(f"Digest failed for channel {channel_id}: {e}", exc_info=True)
                continue

        if delivered:
            logger.info(f"Digest run delivered {len(delivered)} report(s)")
        return delivered

    async def process_channel(self, channel_id: str, now: datetime) -> List[DigestReport]:
        settings = await self.settings_service.get(channel_id)
        delivered = []
        for wordle_day in self.due_days(settings, now):
            if await self.wordle_ops.has_podium_been_sent(channel_id, wordle_day):
                continue
            if await self.wordle_ops.count_day_players(channel_id, wordle_day) == 0:
                continue
            if not await self.wordle_ops.mark_podium_sent(channel_id, wordle_day):
                # Another runner claimed it between the check and the insert
                continue

            try:
                report = await self.build_report(channel_id, wordle_day, now)
                await self.sender(report)
            except Exception:
                await self.wordle_ops.release_podium(channel_id, wordle_day)
                raise

            logger.info(f"Sent digest for channel {channel_id}, Wordle {wordle_day}")
            delivered.append(report)
        return delivered

    @staticmethod
    def due_days(settings: ChatSettings, now: datetime) -> List[int]:
        """Puzzles whose digest may go out at this instant, oldest first."""
        local_now = to_local(now, settings.timezone)
        today = get_wordle_day(local_now.date())
        due = [today - 1]
        if local_now.time() >= parse_digest_time(settings.digest_time):
            due.append(today)
        return due

    async def build_report(self, channel_id: str, wordle_day: int, now: datetime) -> DigestReport:
        results = await self.wordle_ops.get_channel_submissions(channel_id)
        # Weekly view covers the Sunday-started week that contains the digest's puzzle
        puzzle_noon = datetime.combine(date_for_wordle_day(wordle_day), time(12), tzinfo=timezone.utc)
        week_start = statistics.get_week_start_day(puzzle_noon, 'UTC')

        return DigestReport(
            channel_id=channel_id,
            wordle_day=wordle_day,
            podium=statistics.get_day_leaderboards_multi(results, wordle_day),
            scores=statistics.get_scores(results),
            weekly_scores=statistics.get_weekly_scores(results, week_start),
            averages=statistics.get_averages(results),
            generated_at=now,
        )
