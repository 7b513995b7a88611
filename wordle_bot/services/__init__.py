"""
Services package for the Wordle bot.
"""

from .base import BaseService
from .chat_settings import ChatSettingsService
from .digest import DigestService
from .leaderboard import LeaderboardService
from .submissions import SubmissionService

__all__ = ['BaseService', 'ChatSettingsService', 'DigestService', 'LeaderboardService', 'SubmissionService']
