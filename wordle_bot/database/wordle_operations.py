"""
Wordle Operations Module

Data access for the submission log and the digest log.

- The submission log is append-only: rows are inserted once and never updated
  or deleted. The (channel, player, puzzle) unique index is the only guard
  against duplicates; a violation surfaces as DuplicateSubmissionError.
- The digest log is written through insert-if-absent so that a podium is
  claimed by exactly one caller, across restarts and concurrent runners.
"""

from datetime import datetime, timezone
from typing import List, Optional
from contextlib import asynccontextmanager

from sqlalchemy import select, delete, func, and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wordle_bot.data_models.wordle import WordleResult
from wordle_bot.database.models import WordleSubmission, DailyDigestLog, ChatSettingsRecord
from wordle_bot.utils.logger import setup_logger
from wordle_bot.utils.wordle_exceptions import DatabaseError, DuplicateSubmissionError

logger = setup_logger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class WordleOperations:
    """Submission store and digest log operations."""

    def __init__(self, database):
        self.db = database
        self.logger = logger

    @asynccontextmanager
    async def _get_session_context(self, session: Optional[AsyncSession] = None):
        """
        Provides a session context. Uses the provided session if available,
        otherwise creates and manages a new session.
        """
        if session:
            yield session
        else:
            async with self.db.get_session() as new_session:
                yield new_session

    # ============================================================================
    # Submission log
    # ============================================================================

    async def save_submission(self, result: WordleResult) -> None:
        """
        Append a submission to the log.

        Raises:
            DuplicateSubmissionError: If the player already submitted this puzzle in this channel
            StoreUnavailableError: If the database is not configured
        """
        async with self.db.transaction() as session:
            session.add(WordleSubmission(
                channel_id=result.channel_id,
                player_id=result.player_id,
                wordle_day=result.wordle_day,
                guesses=result.guesses,
                hard_mode=result.hard_mode,
                grid=result.grid,
                seconds_since_midnight=result.seconds_since_midnight,
                solved_at=result.submitted_at,
            ))
            try:
                await session.flush()
            except IntegrityError:
                self.logger.info(
                    f"Duplicate submission rejected: channel {result.channel_id}, "
                    f"player {result.player_id}, Wordle {result.wordle_day}"
                )
                raise DuplicateSubmissionError(result.channel_id, result.player_id, result.wordle_day)
            except SQLAlchemyError as e:
                self.logger.error(f"Failed to save submission: {e}", exc_info=True)
                raise DatabaseError("save submission", str(e))

        self.logger.debug(
            f"Saved Wordle {result.wordle_day} ({result.guess_text}) for {result.player_id} in {result.channel_id}"
        )

    async def get_channel_submissions(self, channel_id: str,
                                      session: Optional[AsyncSession] = None) -> List[WordleResult]:
        """All submissions for a channel, ordered by puzzle number."""
        async with self._get_session_context(session) as s:
            result = await s.execute(
                select(WordleSubmission)
                .where(WordleSubmission.channel_id == channel_id)
                .order_by(WordleSubmission.wordle_day, WordleSubmission.id)
            )
            rows = result.scalars().all()

        return [
            WordleResult(
                wordle_day=row.wordle_day,
                guesses=row.guesses,
                hard_mode=row.hard_mode,
                grid=row.grid,
                player_id=row.player_id,
                seconds_since_midnight=row.seconds_since_midnight,
                submitted_at=_as_utc(row.solved_at) or _as_utc(row.created_at),
                channel_id=row.channel_id,
            )
            for row in rows
        ]

    async def count_day_players(self, channel_id: str, wordle_day: int) -> int:
        """Number of distinct players who submitted a puzzle in a channel."""
        async with self.db.get_session() as session:
            count = await session.scalar(
                select(func.count(func.distinct(WordleSubmission.player_id)))
                .where(and_(
                    WordleSubmission.channel_id == channel_id,
                    WordleSubmission.wordle_day == wordle_day,
                ))
            )
            return count or 0

    async def get_channel_ids(self) -> List[str]:
        """Channels with either stored submissions or saved settings."""
        async with self.db.get_session() as session:
            submission_channels = await session.execute(select(WordleSubmission.channel_id).distinct())
            settings_channels = await session.execute(select(ChatSettingsRecord.channel_id))
            channel_ids = set(submission_channels.scalars().all()) | set(settings_channels.scalars().all())
        return sorted(channel_ids)

    # ============================================================================
    # Digest log
    # ============================================================================

    async def mark_podium_sent(self, channel_id: str, wordle_day: int) -> bool:
        """
        Insert-if-absent claim on a channel's podium for a puzzle.

        Returns:
            True if this call created the record, False if it already existed
        """
        async with self.db.transaction() as session:
            session.add(DailyDigestLog(
                channel_id=channel_id,
                wordle_day=wordle_day,
                sent_at=datetime.now(timezone.utc),
            ))
            try:
                await session.flush()
            except IntegrityError:
                await session.rollback()
                return False
        return True

    async def has_podium_been_sent(self, channel_id: str, wordle_day: int) -> bool:
        async with self.db.get_session() as session:
            row = await session.get(DailyDigestLog, (channel_id, wordle_day))
            return row is not None

    async def release_podium(self, channel_id: str, wordle_day: int) -> None:
        """Drop a claim so a failed delivery can be retried on the next run."""
        async with self.db.transaction() as session:
            await session.execute(
                delete(DailyDigestLog).where(and_(
                    DailyDigestLog.channel_id == channel_id,
                    DailyDigestLog.wordle_day == wordle_day,
                ))
            )
        self.logger.info(f"Released podium claim for channel {channel_id}, Wordle {wordle_day}")
