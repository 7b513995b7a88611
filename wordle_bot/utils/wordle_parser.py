"""
Wordle share parsing and puzzle clock utilities.

Turns free-form share text into a validated WordleResult and maps calendar
dates to puzzle numbers.
"""

import math
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

import pytz

from wordle_bot.config import Config
from wordle_bot.data_models.wordle import FAILED_GUESSES, MAX_GUESSES, WordleResult
from wordle_bot.utils.wordle_exceptions import InvalidSubmissionError

WORDLE_RE = re.compile(r'Wordle\s+(\d+)\s+([Xx\d])/6(\*?)(.*)', re.IGNORECASE | re.DOTALL)

SECONDS_IN_DAY = 24 * 60 * 60


def parse_wordle_result(
    message: str,
    player_id: str,
    submitted_at: Optional[datetime] = None,
    channel_id: str = "",
    timezone_name: Optional[str] = None,
) -> Optional[WordleResult]:
    """
    Parse a chat message into a WordleResult.

    Args:
        message: Raw message text
        player_id: Identity of the submitter
        submitted_at: When the message was posted (defaults to now, UTC)
        channel_id: Channel the message was posted in
        timezone_name: IANA zone used for the local time of day

    Returns:
        WordleResult, or None when the message is not a Wordle share

    Raises:
        InvalidSubmissionError: If the share matched but failed validation
    """
    if submitted_at is None:
        submitted_at = datetime.now(timezone.utc)

    sanitized = (message or '').replace(',', '')
    match = WORDLE_RE.search(sanitized)
    if not match:
        return None

    wordle_day = int(match.group(1))
    guesses_raw = match.group(2)
    guesses = FAILED_GUESSES if guesses_raw in ('X', 'x') else int(guesses_raw)

    result = WordleResult(
        wordle_day=wordle_day,
        guesses=guesses,
        hard_mode=match.group(3) == '*',
        grid=match.group(4).strip(),
        player_id=player_id,
        seconds_since_midnight=seconds_since_midnight(submitted_at, timezone_name),
        submitted_at=submitted_at,
        channel_id=channel_id,
    )

    reason = validation_error(result)
    if reason:
        raise InvalidSubmissionError(reason)
    return result


def validation_error(result: WordleResult) -> Optional[str]:
    """Return why a result is structurally invalid, or None if it is valid."""
    if result.guesses != FAILED_GUESSES and not 1 <= result.guesses <= MAX_GUESSES:
        return f"guess count {result.guesses} is outside 1-{MAX_GUESSES}"

    expected_rows = MAX_GUESSES if result.guesses == FAILED_GUESSES else result.guesses
    rows = [line for line in result.grid.split('\n') if line.strip()]
    if len(rows) != expected_rows:
        return f"grid has {len(rows)} rows, expected {expected_rows}"

    if not result.player_id:
        return "missing submitter identity"

    return None


def is_valid_result(result: WordleResult) -> bool:
    return validation_error(result) is None


def get_timezone(timezone_name: Optional[str]):
    """Resolve an IANA zone name, raising pytz.UnknownTimeZoneError for unknown names."""
    return pytz.timezone(timezone_name or 'UTC')


def to_local(reference: datetime, timezone_name: Optional[str]) -> datetime:
    """Convert an instant to wall-clock time in a zone. Naive instants are taken as UTC."""
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    return reference.astimezone(get_timezone(timezone_name))


def seconds_since_midnight(reference: datetime, timezone_name: Optional[str] = None) -> int:
    """Seconds since local midnight, clamped to the last second of the day."""
    if timezone_name:
        reference = to_local(reference, timezone_name)
    seconds = reference.hour * 3600 + reference.minute * 60 + reference.second
    return min(max(seconds, 0), SECONDS_IN_DAY - 1)


def get_wordle_day(reference: Union[date, datetime, None] = None) -> int:
    """
    Puzzle number for a reference date or instant.

    Whole days elapsed since the first puzzle's release date plus one.
    Datetimes are evaluated in UTC (naive ones are assumed to be UTC already).
    """
    if reference is None:
        reference = datetime.now(timezone.utc)
    if isinstance(reference, datetime):
        if reference.tzinfo is not None:
            reference = reference.astimezone(timezone.utc)
        reference = reference.date()
    return (reference - Config.WORDLE_EPOCH).days + 1


def get_local_wordle_day(reference: Optional[datetime] = None, timezone_name: Optional[str] = None) -> int:
    """Puzzle number for the calendar date the reference instant falls on in a zone."""
    if reference is None:
        reference = datetime.now(timezone.utc)
    return get_wordle_day(to_local(reference, timezone_name).date())


def date_for_wordle_day(wordle_day: int) -> date:
    return Config.WORDLE_EPOCH + timedelta(days=wordle_day - 1)


def clamp_wordle_day(wordle_day: int, today: int, tolerance: int = None) -> bool:
    """Freshness check: is the puzzle within tolerance days of today's puzzle?"""
    if tolerance is None:
        tolerance = Config.FRESHNESS_TOLERANCE
    return abs(wordle_day - today) <= tolerance


def normalize_wordle_day(wordle_day: float) -> int:
    if isinstance(wordle_day, bool) or not isinstance(wordle_day, (int, float)):
        raise ValueError(f"Invalid Wordle day value: {wordle_day!r}")
    if math.isnan(wordle_day) or math.isinf(wordle_day):
        raise ValueError("Invalid Wordle day value")
    return max(1, math.floor(wordle_day))


def positive_guesses(guesses: int) -> int:
    """Guess count with the failure sentinel counted as a six-guess penalty."""
    return MAX_GUESSES if guesses == FAILED_GUESSES else guesses


def is_successful(guesses: int) -> bool:
    return guesses != FAILED_GUESSES


def start_of_week(reference: datetime) -> datetime:
    """Midnight of the most recent Sunday, keeping the reference's tzinfo."""
    days_since_sunday = (reference.weekday() + 1) % 7
    sunday = reference.date() - timedelta(days=days_since_sunday)
    start = datetime.combine(sunday, time.min)
    tz = reference.tzinfo
    if tz is None:
        return start
    if hasattr(tz, 'localize'):
        return tz.localize(start)
    return start.replace(tzinfo=tz)


def parse_digest_time(value: str) -> time:
    """Parse an HH:MM time of day."""
    try:
        parsed = datetime.strptime(value.strip(), '%H:%M')
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid time of day: {value!r}. Use HH:MM") from e
    return parsed.time()
