"""
Submission Service

Accepts Wordle shares from chat and works out what to tell the channel:

1. Parse the share (non-shares are ignored without touching storage,
   invalid shares rejected)
2. Check the puzzle number against today's puzzle in the channel's timezone
3. Snapshot the leaderboards, append the submission, snapshot again
4. Report players overtaken, how the submission time compares with the
   player's history, and the early podium once enough players have submitted
   today's puzzle

Step 3 runs under a per (channel, player) lock so the before/after comparison
reflects exactly one change by that player. A lock is dropped once nobody
holds or waits on it. Races between different players can at worst cause a
missed or duplicated pass notice.
"""

import asyncio
import logging
from collections import defaultdict
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from wordle_bot.data_models.wordle import (
    ChatSettings, Leaderboard, SubmissionOutcome, TimingInsight, WordleResult
)
from wordle_bot.services.chat_settings import ChatSettingsService
from wordle_bot.utils import statistics
from wordle_bot.utils.rank_changes import get_player_passes
from wordle_bot.utils.wordle_exceptions import StalePuzzleError
from wordle_bot.utils.wordle_parser import (
    clamp_wordle_day, get_local_wordle_day, parse_wordle_result, seconds_since_midnight
)

logger = logging.getLogger(__name__)

# Leaderboards watched for passes: name -> (compute(results, now, timezone), higher_is_better)
LEADERBOARD_FLAVORS: Dict[str, Tuple[Callable[[List[WordleResult], datetime, str], Leaderboard], bool]] = {
    'scores': (lambda results, now, tz: statistics.get_scores(results), True),
    'weekly': (lambda results, now, tz: statistics.get_weekly_scores_now(results, now, tz), True),
    'averages': (lambda results, now, tz: statistics.get_averages(results), False),
}

# Submissions further than this many standard deviations from the usual time get a note
TIMING_DEVIATION_THRESHOLD = 1.0


class SubmissionService:
    """Orchestrates parsing, storage and notifications for shared results."""

    def __init__(self, wordle_ops, settings_service: ChatSettingsService):
        self.wordle_ops = wordle_ops
        self.settings_service = settings_service
        self._player_locks: Dict[Tuple[str, str], asyncio.Lock] = {}
        self._lock_users: Dict[Tuple[str, str], int] = defaultdict(int)

    async def handle_message(self, channel_id: str, player_id: str, message: str,
                             submitted_at: Optional[datetime] = None) -> Optional[SubmissionOutcome]:
        """
        Process a chat message.

        Returns:
            SubmissionOutcome for an accepted submission, None if the message is not a share

        Raises:
            InvalidSubmissionError: Share matched but failed validation
            StalePuzzleError: Puzzle number outside the accepted window
            DuplicateSubmissionError: Player already submitted this puzzle here
            StoreUnavailableError: Storage is not configured
        """
        if submitted_at is None:
            submitted_at = datetime.now(timezone.utc)

        # Settings are only read once the message is known to be a share
        result = parse_wordle_result(message, player_id, submitted_at, channel_id)
        if result is None:
            return None

        settings = await self.settings_service.get(channel_id)
        result = replace(result, seconds_since_midnight=seconds_since_midnight(submitted_at, settings.timezone))

        today = get_local_wordle_day(submitted_at, settings.timezone)
        if not clamp_wordle_day(result.wordle_day, today):
            logger.info(f"Rejected stale Wordle {result.wordle_day} from {player_id} (today is {today})")
            raise StalePuzzleError(result.wordle_day, today)

        return await self.submit(result, settings, today, submitted_at)

    async def submit(self, result: WordleResult, settings: ChatSettings, today: int,
                     now: datetime) -> SubmissionOutcome:
        """Store a parsed result and compute the notifications it triggers."""
        channel_id = result.channel_id
        key = (channel_id, result.player_id)
        lock = self._player_locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] += 1
        try:
            async with lock:
                before = await self.wordle_ops.get_channel_submissions(channel_id)
                await self.wordle_ops.save_submission(result)
                after = await self.wordle_ops.get_channel_submissions(channel_id)
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._player_locks[key]

        logger.info(f"Logged Wordle {result.wordle_day} ({result.guess_text}) for {result.player_id} in {channel_id}")

        passed = {}
        if settings.notify_leaderboard:
            passed = self.compute_passes(before, after, result.player_id, now, settings.timezone)

        timing = None
        if settings.notify_timing:
            timing = self.compute_timing(before, result)

        early_podium = None
        if settings.early_podium and result.wordle_day == today:
            early_podium = self.compute_early_podium(after, result.wordle_day, settings.early_podium_threshold)

        return SubmissionOutcome(
            result=result,
            today=today,
            passed=passed,
            timing=timing,
            early_podium=early_podium,
        )

    @staticmethod
    def compute_passes(before: List[WordleResult], after: List[WordleResult], player_id: str,
                       now: datetime, timezone_name: str) -> Dict[str, List[str]]:
        """Players overtaken by the submitter on each watched leaderboard."""
        passed = {}
        for name, (compute, higher_is_better) in LEADERBOARD_FLAVORS.items():
            overtaken = get_player_passes(
                compute(before, now, timezone_name),
                compute(after, now, timezone_name),
                player_id,
                higher_is_better,
            )
            if overtaken:
                passed[name] = sorted(overtaken)
        return passed

    @staticmethod
    def compute_timing(history: List[WordleResult], result: WordleResult) -> Optional[TimingInsight]:
        """
        Compare a submission's time of day with the player's earlier submissions.

        Returns None until the player has some spread in their history.
        """
        stats = statistics.get_average_time(history, result.player_id)
        if stats.std == 0:
            return None
        deviation = (result.seconds_since_midnight - stats.avg) / stats.std
        if abs(deviation) < TIMING_DEVIATION_THRESHOLD:
            return None
        return TimingInsight(
            seconds_since_midnight=result.seconds_since_midnight,
            stats=stats,
            deviation=deviation,
        )

    @staticmethod
    def compute_early_podium(results: List[WordleResult], wordle_day: int, threshold: int):
        """
        Podium for the puzzle when this submission brought the player count to the threshold.

        Callers only ask for today's puzzle; late results for yesterday never trigger it.

        The count rises by exactly one per accepted submission, so this fires once per puzzle.
        """
        players = statistics.get_participants(r for r in results if r.wordle_day == wordle_day)
        if len(players) != threshold:
            return None
        return statistics.get_day_leaderboards_multi(results, wordle_day)
