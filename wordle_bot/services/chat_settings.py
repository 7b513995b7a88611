"""
Chat settings service for the Wordle bot.

Per-channel notification settings with defaults applied for channels that
have never been configured. Settings are read fresh on every call; nothing is
cached between requests.
"""

import logging
from typing import Any, Dict

import pytz

from wordle_bot.config import Config
from wordle_bot.data_models.wordle import ChatSettings
from wordle_bot.database.models import ChatSettingsRecord
from wordle_bot.services.base import BaseService
from wordle_bot.utils.wordle_exceptions import SettingsValidationError
from wordle_bot.utils.wordle_parser import parse_digest_time

logger = logging.getLogger(__name__)

BOOLEAN_FIELDS = ('early_podium', 'notify_leaderboard', 'notify_timing')
EDITABLE_FIELDS = BOOLEAN_FIELDS + ('early_podium_threshold', 'digest_time', 'timezone')


def default_settings(channel_id: str) -> ChatSettings:
    return ChatSettings(
        channel_id=channel_id,
        early_podium=Config.DEFAULT_EARLY_PODIUM,
        early_podium_threshold=Config.DEFAULT_EARLY_PODIUM_THRESHOLD,
        notify_leaderboard=Config.DEFAULT_NOTIFY_LEADERBOARD,
        notify_timing=Config.DEFAULT_NOTIFY_TIMING,
        digest_time=Config.DEFAULT_DIGEST_TIME,
        timezone=Config.DEFAULT_TIMEZONE,
    )


class ChatSettingsService(BaseService):
    """Reads and updates per-channel settings."""

    async def get(self, channel_id: str) -> ChatSettings:
        """
        Get settings for a channel.

        Returns the defaults when the channel has no stored row. An unknown
        stored timezone falls back to UTC.
        """
        async def _load():
            async with self.get_session() as session:
                return await session.get(ChatSettingsRecord, channel_id)

        record = await self.execute_with_retry(_load)
        if record is None:
            return default_settings(channel_id)

        timezone_name = record.timezone
        if timezone_name not in pytz.all_timezones_set:
            logger.warning(f"Unknown timezone '{timezone_name}' stored for channel {channel_id}, using UTC")
            timezone_name = 'UTC'

        return ChatSettings(
            channel_id=record.channel_id,
            early_podium=record.early_podium,
            early_podium_threshold=record.early_podium_threshold,
            notify_leaderboard=record.notify_leaderboard,
            notify_timing=record.notify_timing,
            digest_time=record.digest_time,
            timezone=timezone_name,
        )

    async def ensure(self, channel_id: str) -> None:
        """Create the default row for a channel if none exists."""
        async with self.get_session() as session:
            if await session.get(ChatSettingsRecord, channel_id) is None:
                session.add(ChatSettingsRecord(channel_id=channel_id))
                logger.info(f"Created default chat settings for channel {channel_id}")

    async def update(self, channel_id: str, **changes: Any) -> ChatSettings:
        """
        Validate and persist changes to a channel's settings.

        Args:
            channel_id: Channel to update
            **changes: Field values keyed by ChatSettings field name

        Raises:
            SettingsValidationError: If a field is unknown or a value is invalid
        """
        cleaned = validate_changes(changes)

        async with self.get_session() as session:
            record = await session.get(ChatSettingsRecord, channel_id)
            if record is None:
                record = ChatSettingsRecord(channel_id=channel_id, **cleaned)
                session.add(record)
            else:
                for field_name, value in cleaned.items():
                    setattr(record, field_name, value)

        logger.info(f"Updated chat settings for channel {channel_id}: {cleaned}")
        return await self.get(channel_id)


def validate_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Check and normalize a settings update."""
    cleaned = {}
    for field_name, value in changes.items():
        if value is None:
            continue
        if field_name not in EDITABLE_FIELDS:
            raise SettingsValidationError(field_name, f"Unknown setting `{field_name}`.")

        if field_name in BOOLEAN_FIELDS:
            if not isinstance(value, bool):
                raise SettingsValidationError(field_name, f"`{field_name}` must be true or false.")
        elif field_name == 'early_podium_threshold':
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise SettingsValidationError(field_name, "Early podium threshold must be a whole number of at least 1.")
        elif field_name == 'digest_time':
            try:
                value = parse_digest_time(value).strftime('%H:%M')
            except ValueError:
                raise SettingsValidationError(field_name, "Digest time must look like HH:MM (24-hour).")
        elif field_name == 'timezone':
            if value not in pytz.all_timezones_set:
                raise SettingsValidationError(field_name, f"Unknown timezone `{value}`. Use an IANA name like Europe/London.")

        cleaned[field_name] = value
    return cleaned
