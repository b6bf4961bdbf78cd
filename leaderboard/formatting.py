"""Display strings for leaderboard scores."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .models import ScoringMode

NO_TIME = "--:--"


def format_duration(seconds: float) -> str:
    """``M:SS`` under an hour, ``H:MM:SS`` from one hour up."""
    total = int(seconds)
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_distance(km: float) -> str:
    """``X.XX km`` below 10 km, ``X.X km`` from 10 km up.

    Halves round up on the exact binary value of ``km``.
    """
    step = Decimal("0.1") if km >= 10 else Decimal("0.01")
    return f"{Decimal(km).quantize(step, rounding=ROUND_HALF_UP)} km"


def format_count(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def format_score(score: float, mode: ScoringMode) -> str:
    """Individual leaderboard formatting for ``mode``."""
    if mode is ScoringMode.MOST_DISTANCE:
        return format_distance(score)
    if mode is ScoringMode.PARTICIPATION:
        return format_count(int(score), "workout")
    return format_duration(score)


def format_placeholder(mode: ScoringMode) -> str:
    """Formatted score for a roster member with nothing recorded."""
    if mode is ScoringMode.FASTEST_TIME:
        return NO_TIME
    return format_score(0, mode)


def format_team_score(score: float, mode: ScoringMode) -> str:
    if mode is ScoringMode.FASTEST_TIME:
        return NO_TIME if score == 0 else format_duration(score)
    if mode is ScoringMode.PARTICIPATION:
        return format_count(int(score), "member")
    return format_distance(score)


__all__ = [
    "NO_TIME",
    "format_count",
    "format_distance",
    "format_duration",
    "format_placeholder",
    "format_score",
    "format_team_score",
]
