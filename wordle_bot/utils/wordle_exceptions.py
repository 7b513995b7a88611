"""
Custom exceptions for Wordle submissions with user-friendly error messages.
"""

class WordleException(Exception):
    """Base exception for Wordle-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class InvalidSubmissionError(WordleException):
    """Raised when a share matched the Wordle pattern but failed structural validation."""
    def __init__(self, reason: str):
        super().__init__(
            f"Invalid Wordle submission: {reason}",
            "❌ That Wordle result doesn't look right. Please paste the full share text."
        )
        self.reason = reason

class StalePuzzleError(WordleException):
    """Raised when a puzzle number is too far from today's puzzle."""
    def __init__(self, wordle_day: int, today: int):
        super().__init__(
            f"Wordle {wordle_day} is outside the accepted window around today's puzzle {today}",
            "❌ That Wordle result looks out of date. Please double-check the puzzle number."
        )
        self.wordle_day = wordle_day
        self.today = today

class DuplicateSubmissionError(WordleException):
    """Raised when a player already submitted a result for a puzzle in a channel."""
    def __init__(self, channel_id: str, player_id: str, wordle_day: int):
        super().__init__(
            f"Submission already exists for player {player_id}, puzzle {wordle_day} in channel {channel_id}",
            "❌ You already submitted a result for this Wordle."
        )
        self.channel_id = channel_id
        self.player_id = player_id
        self.wordle_day = wordle_day

class StoreUnavailableError(WordleException):
    """Raised when the submission store is not configured or not initialized."""
    def __init__(self, details: str = None):
        super().__init__(
            f"Wordle storage is unavailable: {details or 'DATABASE_URL is not configured'}",
            "❌ Leaderboard unavailable. Wordle storage is not configured."
        )

class SettingsValidationError(WordleException):
    """Raised when a chat settings update is rejected."""
    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Invalid value for {field}: {reason}",
            f"❌ {reason}"
        )
        self.field = field

class DatabaseError(WordleException):
    """Raised when database operations fail."""
    def __init__(self, operation: str, details: str = None):
        super().__init__(
            f"Database error during {operation}: {details}",
            "❌ Database error occurred. Please try again later."
        )
