from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, Text, CheckConstraint, UniqueConstraint
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from wordle_bot.config import Config

Base = declarative_base()

class WordleSubmission(Base):
    """Append-only log of Wordle results, one per player per puzzle per channel."""
    __tablename__ = 'submissions'

    id = Column(Integer, primary_key=True)
    channel_id = Column(String(64), nullable=False, index=True)
    player_id = Column(String(64), nullable=False)
    wordle_day = Column(Integer, nullable=False)
    guesses = Column(Integer, nullable=False)  # -1 = failed
    hard_mode = Column(Boolean, nullable=False, default=False)
    grid = Column(Text, nullable=False)
    seconds_since_midnight = Column(Integer, nullable=False, default=0)

    # Metadata
    solved_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    __table_args__ = (
        UniqueConstraint('channel_id', 'player_id', 'wordle_day', name='submissions_channel_player_puzzle_idx'),
        CheckConstraint('guesses = -1 OR (guesses >= 1 AND guesses <= 6)', name='ck_submission_guesses'),
        CheckConstraint('seconds_since_midnight >= 0 AND seconds_since_midnight <= 86399', name='ck_submission_seconds'),
    )

    def __repr__(self):
        return f"<WordleSubmission(channel='{self.channel_id}', player='{self.player_id}', day={self.wordle_day}, guesses={self.guesses})>"

class ChatSettingsRecord(Base):
    """Per-channel notification settings."""
    __tablename__ = 'chat_settings'

    channel_id = Column(String(64), primary_key=True)
    early_podium = Column(Boolean, nullable=False, default=Config.DEFAULT_EARLY_PODIUM)
    early_podium_threshold = Column(Integer, nullable=False, default=Config.DEFAULT_EARLY_PODIUM_THRESHOLD)
    notify_leaderboard = Column(Boolean, nullable=False, default=Config.DEFAULT_NOTIFY_LEADERBOARD)
    notify_timing = Column(Boolean, nullable=False, default=Config.DEFAULT_NOTIFY_TIMING)
    digest_time = Column(String(5), nullable=False, default=Config.DEFAULT_DIGEST_TIME)
    timezone = Column(String(64), nullable=False, default=Config.DEFAULT_TIMEZONE)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<ChatSettingsRecord(channel='{self.channel_id}', digest_time='{self.digest_time}', timezone='{self.timezone}')>"

class DailyDigestLog(Base):
    """Durable record of podium digests already sent, keyed by channel and puzzle."""
    __tablename__ = 'daily_digest_log'

    channel_id = Column(String(64), primary_key=True)
    wordle_day = Column(Integer, primary_key=True)
    sent_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    def __repr__(self):
        return f"<DailyDigestLog(channel='{self.channel_id}', day={self.wordle_day})>"
