"""
Wordle data models

Immutable data transfer objects shared by the parser, the statistics engine
and the services.
"""

from dataclasses import dataclass, field
from datetime import datetime
from fractions import Fraction
from typing import Dict, FrozenSet, List, Optional, Union

# Failure sentinel: puzzle not solved within six guesses
FAILED_GUESSES = -1
MAX_GUESSES = 6

Score = Union[int, float, Fraction]
Leaderboard = Dict[str, Score]


@dataclass(frozen=True)
class WordleResult:
    """One player's result for one puzzle in one channel."""
    wordle_day: int
    guesses: int
    hard_mode: bool
    grid: str
    player_id: str
    seconds_since_midnight: int
    submitted_at: datetime
    channel_id: str = ""

    @property
    def solved(self) -> bool:
        return self.guesses != FAILED_GUESSES

    @property
    def guess_text(self) -> str:
        return f"{self.guesses}/6" if self.solved else "X/6"


@dataclass(frozen=True)
class PodiumEntry:
    """Players tied on the same guess count for a puzzle."""
    guesses: int
    player_ids: FrozenSet[str]


@dataclass(frozen=True)
class AverageTimeStats:
    """Mean and population standard deviation of submission times, in seconds."""
    avg: float
    std: float


@dataclass(frozen=True)
class ChatSettings:
    """Per-channel notification settings."""
    channel_id: str
    early_podium: bool
    early_podium_threshold: int
    notify_leaderboard: bool
    notify_timing: bool
    digest_time: str
    timezone: str


@dataclass(frozen=True)
class TimingInsight:
    """How a submission's time of day compares with the player's history."""
    seconds_since_midnight: int
    stats: AverageTimeStats
    deviation: float  # Signed distance from the average in standard deviations


@dataclass(frozen=True)
class SubmissionOutcome:
    """Everything the chat layer needs to respond to an accepted submission."""
    result: WordleResult
    today: int
    passed: Dict[str, List[str]] = field(default_factory=dict)  # leaderboard name -> players passed
    timing: Optional[TimingInsight] = None
    early_podium: Optional[List[PodiumEntry]] = None


@dataclass(frozen=True)
class DigestReport:
    """Scheduled summary for one channel and puzzle."""
    channel_id: str
    wordle_day: int
    podium: List[PodiumEntry]
    scores: Leaderboard
    weekly_scores: Leaderboard
    averages: Leaderboard
    generated_at: datetime
