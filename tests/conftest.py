"""
Shared fixtures for the Wordle bot tests.
"""

import asyncio
import os
import tempfile
from datetime import datetime, timezone

import pytest

# Keep test log files out of the working tree; must happen before Config is imported
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='wordle_bot_logs_'))

from wordle_bot.data_models.wordle import FAILED_GUESSES, MAX_GUESSES, WordleResult
from wordle_bot.database.database import Database
from wordle_bot.database.wordle_operations import WordleOperations
from wordle_bot.services.chat_settings import ChatSettingsService

GREEN_ROW = "🟩🟩🟩🟩🟩"
GREY_ROW = "⬛⬛⬛⬛⬛"


def grid_for(guesses: int) -> str:
    rows = MAX_GUESSES if guesses == FAILED_GUESSES else guesses
    if guesses == FAILED_GUESSES:
        return "\n".join([GREY_ROW] * rows)
    return "\n".join([GREY_ROW] * (rows - 1) + [GREEN_ROW])


def share_text(wordle_day, guesses, hard_mode: bool = False) -> str:
    guess_text = "X" if guesses == FAILED_GUESSES else str(guesses)
    star = "*" if hard_mode else ""
    return f"Wordle {wordle_day} {guess_text}/6{star}\n\n{grid_for(guesses)}"


@pytest.fixture
def make_result():
    """Factory for WordleResult records with sensible defaults."""
    def _make(player_id: str, wordle_day: int, guesses: int, seconds: int = 3600,
              channel_id: str = "chan"):
        return WordleResult(
            wordle_day=wordle_day,
            guesses=guesses,
            hard_mode=False,
            grid=grid_for(guesses),
            player_id=player_id,
            seconds_since_midnight=seconds,
            submitted_at=datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc),
            channel_id=channel_id,
        )
    return _make


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'wordle.db'}"


@pytest.fixture
def run_with_store(database_url):
    """
    Run a coroutine scenario against a fresh SQLite store.

    The engine is created and disposed inside the same event loop as the
    scenario, so every test gets its own loop and its own database file.
    """
    def _run(scenario):
        async def _main():
            db = Database(database_url)
            await db.initialize()
            try:
                ops = WordleOperations(db)
                settings = ChatSettingsService(db.session_factory)
                return await scenario(db, ops, settings)
            finally:
                await db.close()
        return asyncio.run(_main())
    return _run


@pytest.fixture
def share():
    """Factory for share text as pasted from the Wordle site."""
    return share_text
