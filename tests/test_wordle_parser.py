"""
Tests for share parsing and the puzzle clock.
"""

import math
from datetime import date, datetime, time, timezone

import pytest
import pytz

from wordle_bot.data_models.wordle import FAILED_GUESSES
from wordle_bot.utils.wordle_exceptions import InvalidSubmissionError
from wordle_bot.utils.wordle_parser import (
    clamp_wordle_day, date_for_wordle_day, get_local_wordle_day, get_wordle_day,
    is_successful, normalize_wordle_day, parse_digest_time, parse_wordle_result,
    positive_guesses, seconds_since_midnight, start_of_week
)

NOON_UTC = datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)


class TestParseWordleResult:

    def test_parses_basic_share(self, share):
        result = parse_wordle_result(share(1599, 4), "alice", NOON_UTC, "chan")
        assert result.wordle_day == 1599
        assert result.guesses == 4
        assert result.hard_mode is False
        assert result.player_id == "alice"
        assert result.channel_id == "chan"
        assert len(result.grid.split("\n")) == 4

    def test_hard_mode_star(self, share):
        result = parse_wordle_result(share(1599, 3, hard_mode=True), "alice", NOON_UTC)
        assert result.hard_mode is True

    def test_thousands_separator_is_ignored(self, share):
        result = parse_wordle_result(share("1,599", 5), "alice", NOON_UTC)
        assert result.wordle_day == 1599

    def test_failed_attempt_uses_sentinel(self, share):
        result = parse_wordle_result(share(1599, FAILED_GUESSES), "alice", NOON_UTC)
        assert result.guesses == FAILED_GUESSES
        assert result.solved is False
        assert result.guess_text == "X/6"

    def test_lowercase_x_is_a_failure(self, share):
        text = share(1599, FAILED_GUESSES).replace("X/6", "x/6")
        assert parse_wordle_result(text, "alice", NOON_UTC).guesses == FAILED_GUESSES

    def test_share_inside_longer_message(self, share):
        text = "morning all! " + share(1599, 2)
        assert parse_wordle_result(text, "alice", NOON_UTC).guesses == 2

    def test_non_share_returns_none(self):
        assert parse_wordle_result("anyone up for lunch?", "alice", NOON_UTC) is None
        assert parse_wordle_result("", "alice", NOON_UTC) is None

    def test_row_count_mismatch_is_rejected(self, share):
        text = share(1599, 4).replace("Wordle 1599 4/6", "Wordle 1599 3/6")
        with pytest.raises(InvalidSubmissionError):
            parse_wordle_result(text, "alice", NOON_UTC)

    def test_failure_needs_six_rows(self, share):
        text = share(1599, 5).replace("Wordle 1599 5/6", "Wordle 1599 X/6")
        with pytest.raises(InvalidSubmissionError):
            parse_wordle_result(text, "alice", NOON_UTC)

    @pytest.mark.parametrize("guesses", ["0", "7"])
    def test_out_of_range_guess_count(self, guesses):
        text = f"Wordle 1599 {guesses}/6\n\n🟩🟩🟩🟩🟩"
        with pytest.raises(InvalidSubmissionError):
            parse_wordle_result(text, "alice", NOON_UTC)

    def test_missing_player_is_rejected(self, share):
        with pytest.raises(InvalidSubmissionError):
            parse_wordle_result(share(1599, 4), "", NOON_UTC)

    def test_time_of_day_uses_channel_timezone(self, share):
        submitted = datetime(2025, 11, 4, 13, 30, 15, tzinfo=timezone.utc)
        result = parse_wordle_result(share(1599, 4), "alice", submitted, "chan", "America/New_York")
        assert result.seconds_since_midnight == 8 * 3600 + 30 * 60 + 15


class TestPuzzleClock:

    def test_epoch_is_puzzle_one(self):
        assert get_wordle_day(date(2021, 6, 20)) == 1
        assert get_wordle_day(date(2021, 6, 21)) == 2

    def test_known_puzzle_number(self):
        assert get_wordle_day(date(2025, 11, 4)) == 1599
        assert date_for_wordle_day(1599) == date(2025, 11, 4)

    def test_aware_datetime_is_read_in_utc(self):
        late_evening_east = pytz.timezone("Asia/Tokyo").localize(datetime(2025, 11, 5, 1, 0))
        assert get_wordle_day(late_evening_east) == 1599

    def test_local_day_follows_timezone(self):
        instant = datetime(2025, 11, 5, 2, 0, tzinfo=timezone.utc)
        assert get_local_wordle_day(instant, "UTC") == 1600
        assert get_local_wordle_day(instant, "America/New_York") == 1599

    @pytest.mark.parametrize("wordle_day,accepted", [
        (1597, False),
        (1598, True),
        (1599, True),
        (1600, True),
        (1601, False),
    ])
    def test_freshness_window(self, wordle_day, accepted):
        assert clamp_wordle_day(wordle_day, 1599) is accepted

    def test_seconds_since_midnight_naive_is_utc(self):
        assert seconds_since_midnight(datetime(2025, 11, 4, 0, 1, 5)) == 65
        assert seconds_since_midnight(datetime(2025, 11, 4, 23, 59, 59)) == 86399


class TestHelpers:

    def test_start_of_week_is_previous_sunday(self):
        assert start_of_week(datetime(2025, 11, 4, 15, 0)) == datetime(2025, 11, 2, 0, 0)

    def test_start_of_week_on_sunday(self):
        assert start_of_week(datetime(2025, 11, 2, 9, 45)) == datetime(2025, 11, 2, 0, 0)

    def test_start_of_week_keeps_pytz_zone(self):
        london = pytz.timezone("Europe/London")
        start = start_of_week(london.localize(datetime(2025, 11, 4, 10, 0)))
        assert start.date() == date(2025, 11, 2)
        assert start.hour == 0
        assert start.tzinfo.zone == "Europe/London"

    def test_normalize_wordle_day(self):
        assert normalize_wordle_day(3.7) == 3
        assert normalize_wordle_day(-5) == 1
        assert normalize_wordle_day(1599) == 1599

    @pytest.mark.parametrize("value", [math.nan, math.inf, "12", None])
    def test_normalize_rejects_non_numbers(self, value):
        with pytest.raises(ValueError):
            normalize_wordle_day(value)

    def test_guess_helpers(self):
        assert positive_guesses(FAILED_GUESSES) == 6
        assert positive_guesses(3) == 3
        assert is_successful(6) is True
        assert is_successful(FAILED_GUESSES) is False

    def test_parse_digest_time(self):
        assert parse_digest_time("07:30") == time(7, 30)
        assert parse_digest_time(" 19:00 ") == time(19, 0)

    @pytest.mark.parametrize("value", ["25:00", "7pm", "", None])
    def test_parse_digest_time_rejects_garbage(self, value):
        with pytest.raises(ValueError):
            parse_digest_time(value)
