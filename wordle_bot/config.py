import os
from datetime import date
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Bot configuration settings"""

    # Discord settings
    DISCORD_TOKEN = os.getenv('DISCORD_TOKEN')
    DISCORD_GUILD_ID = int(os.getenv('DISCORD_GUILD_ID', 0))
    DISCORD_GUILD_IDS = os.getenv('DISCORD_GUILD_IDS', '')  # Comma-separated for multi-guild support

    # Database settings (empty string disables storage)
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///wordle.db')

    # Bot settings
    COMMAND_PREFIX = os.getenv('COMMAND_PREFIX', '!')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    DIGEST_POLL_MINUTES = int(os.getenv('DIGEST_POLL_MINUTES', 5))

    # Puzzle clock
    WORDLE_EPOCH = date(2021, 6, 20)  # Puzzle 1, UTC midnight
    FRESHNESS_TOLERANCE = 1           # Days either side of today
    WEEKLY_WINDOW = 7

    # Chat settings defaults (applied when a channel has no row yet)
    DEFAULT_EARLY_PODIUM = True
    DEFAULT_EARLY_PODIUM_THRESHOLD = 5
    DEFAULT_NOTIFY_LEADERBOARD = True
    DEFAULT_NOTIFY_TIMING = True
    DEFAULT_DIGEST_TIME = '19:00'
    DEFAULT_TIMEZONE = 'UTC'

    @classmethod
    def get_guild_ids(cls):
        """Get list of guild IDs for command syncing"""
        if cls.DISCORD_GUILD_IDS:
            try:
                return [int(guild_id.strip()) for guild_id in cls.DISCORD_GUILD_IDS.split(',') if guild_id.strip()]
            except ValueError:
                raise ValueError("DISCORD_GUILD_IDS must be comma-separated integers")
        elif cls.DISCORD_GUILD_ID:
            return [cls.DISCORD_GUILD_ID]
        else:
            # Global sync
            return []

    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")
        if cls.DIGEST_POLL_MINUTES < 1:
            raise ValueError("DIGEST_POLL_MINUTES must be at least 1")
