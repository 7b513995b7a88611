"""
Bot-wide constants for the Wordle Discord Bot.
"""

class UIConstants:
    """Constants for Discord UI elements."""

    # Embed colors
    DEFAULT_EMBED_COLOR = 0x3498db  # Blue
    WORDLE_GREEN = 0x6aaa64
    ERROR_COLOR = 0xe74c3c
    SUCCESS_COLOR = 0x2ecc71

    # Placement medals, rank 4+ falls back to "4."
    AWARDS = ("🥇", "🥈", "🥉")

    # Discord embed field value limit
    MAX_FIELD_LENGTH = 1024

class LeaderboardLabels:
    """Titles and units per leaderboard type."""

    TITLES = {
        'scores': "🏆 Overall Scores",
        'averages': "📊 Average Guesses",
        'weekly': "📅 Weekly Scores",
    }
    UNITS = {
        'scores': "pts.",
        'averages': "avg guesses",
        'weekly': "pts.",
    }
