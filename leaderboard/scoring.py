"""Scoring utilities turning workouts into ranked leaderboards.

Three scoring modes share one input shape, a mapping of participant id to
that participant's :class:`~leaderboard.models.ActivityRecord` list:

``fastest_time``
    Best time at the target distance across qualifying workouts (lowest wins).
``most_distance``
    Total distance across every workout (highest wins).
``participation``
    Anyone with a workout; everybody shares rank 1.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .formatting import format_duration, format_placeholder, format_score
from .models import ActivityRecord, LeaderboardEntry, ScoringMode
from .splits import resolve_target_time

logger = logging.getLogger(__name__)

# Settings ship inside the package under ``data``.
DATA_DIR = Path(__file__).resolve().parent / "data"

_DEFAULTS = {"version": 1, "default_target_km": 5, "qualifying_ratio": 0.95}


def load_settings(path: Optional[Path] = None) -> Dict:
    """Read scoring settings, falling back to built-in defaults per key."""
    if path is None:
        override = os.environ.get("LEADERBOARD_SETTINGS")
        path = Path(override) if override else DATA_DIR / "settings.json"
    with Path(path).open() as f:
        data = json.load(f)
    return {**_DEFAULTS, **(data or {})}


# Load configuration from settings.json.
_SETTINGS = load_settings()
DEFAULT_TARGET_KM = _SETTINGS["default_target_km"]
QUALIFYING_RATIO = float(_SETTINGS["qualifying_ratio"])

_DESCRIPTIONS = {
    ScoringMode.FASTEST_TIME: "Fastest time to complete target distance",
    ScoringMode.MOST_DISTANCE: "Highest total distance accumulated",
    ScoringMode.PARTICIPATION: "Complete any qualifying workout to participate",
}

_LABELS = {
    ScoringMode.FASTEST_TIME: "Time",
    ScoringMode.MOST_DISTANCE: "Distance",
    ScoringMode.PARTICIPATION: "Workouts",
}


def describe_mode(mode) -> str:
    return _DESCRIPTIONS[ScoringMode.parse(mode)]


def score_label(mode) -> str:
    return _LABELS[ScoringMode.parse(mode)]


def target_km(target_distance_km: Optional[float]) -> float:
    """Return the effective target distance; unset or zero means the default."""
    if not target_distance_km:
        return DEFAULT_TARGET_KM
    if target_distance_km < 0:
        raise ValueError(f"target_distance_km must be positive, got {target_distance_km}.")
    return target_distance_km


def best_target_time(
    records: Iterable[ActivityRecord], target_distance_km: float
) -> Optional[Tuple[int, ActivityRecord]]:
    """Return ``(seconds, record)`` for the fastest time at the target.

    The first record wins when two resolve to the same time.
    """
    best: Optional[Tuple[int, ActivityRecord]] = None
    for record in records:
        seconds = resolve_target_time(record, target_distance_km)
        if best is None or seconds < best[0]:
            best = (seconds, record)
    return best


def total_distance_km(records: Iterable[ActivityRecord]) -> float:
    return sum(r.distance for r in records) / 1000


def fastest_time_scores(
    records: Mapping[str, Sequence[ActivityRecord]], target_distance_km: Optional[float] = None
) -> List[Dict]:
    """Score participants by their best time at ``target_distance_km``.

    Only workouts covering at least ``QUALIFYING_RATIO`` of the target count.
    Rows are sorted fastest first, ties by participant id.
    """
    target = target_km(target_distance_km)
    min_meters = target * 1000 * QUALIFYING_RATIO
    rows: List[Dict] = []
    for participant_id, workouts in records.items():
        qualifying = [w for w in workouts or [] if w.distance >= min_meters]
        if not qualifying:
            continue
        seconds, best = best_target_time(qualifying, target)
        if seconds < best.duration_seconds:
            logger.debug(
                "split_time_used participant=%s time=%s total=%s",
                participant_id,
                format_duration(seconds),
                format_duration(best.duration_seconds),
            )
        rows.append(
            {
                "participant_id": participant_id,
                "score": seconds,
                "workout_count": len(qualifying),
                "record_id": best.id,
            }
        )
    rows.sort(key=lambda r: (r["score"], r["participant_id"]))
    return rows


def most_distance_scores(records: Mapping[str, Sequence[ActivityRecord]]) -> List[Dict]:
    """Score participants by total kilometres over all their workouts."""
    rows: List[Dict] = []
    for participant_id, workouts in records.items():
        if not workouts:
            continue
        total_km = total_distance_km(workouts)
        if total_km <= 0:
            continue
        longest = workouts[0]
        for w in workouts[1:]:
            if w.distance > longest.distance:
                longest = w
        rows.append(
            {
                "participant_id": participant_id,
                "score": total_km,
                "workout_count": len(workouts),
                "record_id": longest.id,
            }
        )
    rows.sort(key=lambda r: (-r["score"], r["participant_id"]))
    return rows


def participation_scores(records: Mapping[str, Sequence[ActivityRecord]]) -> List[Dict]:
    """List everyone with at least one workout, ordered by participant id.

    The workout count is carried for display only.
    """
    rows: List[Dict] = []
    for participant_id, workouts in records.items():
        if not workouts:
            continue
        rows.append(
            {
                "participant_id": participant_id,
                "score": len(workouts),
                "workout_count": len(workouts),
                "record_id": workouts[0].id,
            }
        )
    rows.sort(key=lambda r: r["participant_id"])
    return rows


_STRATEGIES: Dict[ScoringMode, Callable[..., List[Dict]]] = {
    ScoringMode.FASTEST_TIME: fastest_time_scores,
    ScoringMode.MOST_DISTANCE: lambda records, _target=None: most_distance_scores(records),
    ScoringMode.PARTICIPATION: lambda records, _target=None: participation_scores(records),
}


def assign_ranks(rows: Iterable[Dict], mode: ScoringMode) -> List[LeaderboardEntry]:
    """Turn sorted score rows into entries with 1-based positional ranks.

    Participation rows all take rank 1.
    """
    entries: List[LeaderboardEntry] = []
    for idx, row in enumerate(rows, start=1):
        rank = 1 if mode is ScoringMode.PARTICIPATION else idx
        entries.append(
            LeaderboardEntry(
                rank=rank,
                participant_id=row["participant_id"],
                score=row["score"],
                formatted_score=format_score(row["score"], mode),
                qualifying_workout_count=row["workout_count"],
                reference_record_id=row["record_id"],
            )
        )
    return entries


def backfill_participants(
    entries: Sequence[LeaderboardEntry], roster: Iterable[str], mode: ScoringMode
) -> List[LeaderboardEntry]:
    """Append roster members missing from ``entries`` at a shared last rank."""
    scored = {e.participant_id for e in entries}
    trailing_rank = sum(1 for e in entries if e.qualifying_workout_count > 0) + 1
    placeholder = format_placeholder(mode)
    out = list(entries)
    for participant_id in roster:
        if participant_id in scored:
            continue
        scored.add(participant_id)
        out.append(
            LeaderboardEntry(
                rank=trailing_rank,
                participant_id=participant_id,
                score=0,
                formatted_score=placeholder,
                qualifying_workout_count=0,
                reference_record_id=None,
            )
        )
    return out


def build_leaderboard(
    records: Mapping[str, Sequence[ActivityRecord]],
    mode=ScoringMode.FASTEST_TIME,
    target_distance_km: Optional[float] = None,
    all_participants: Optional[Iterable[str]] = None,
) -> List[LeaderboardEntry]:
    """Build an individual leaderboard.

    Args:
        records: Participant id to that participant's workouts. Key order is
            kept for anything the sort does not decide.
        mode: A :class:`ScoringMode` or its string value.
        target_distance_km: Race distance for ``fastest_time``; defaults to
            ``DEFAULT_TARGET_KM``.
        all_participants: Full roster. Members without a scored entry are
            appended sharing the rank after the last scored entry.

    Returns:
        A fresh list of :class:`LeaderboardEntry`.
    """
    if records is None:
        raise ValueError("records is required; pass an empty mapping when nobody has recorded yet.")
    mode = ScoringMode.parse(mode)
    target = target_km(target_distance_km) if mode is ScoringMode.FASTEST_TIME else None

    rows = _STRATEGIES[mode](records, target)
    entries = assign_ranks(rows, mode)
    scored_count = len(entries)
    if all_participants:
        entries = backfill_participants(entries, all_participants, mode)

    logger.info(
        "build_leaderboard mode=%s scored=%d backfilled=%d target_km=%s",
        mode.value,
        scored_count,
        len(entries) - scored_count,
        target,
    )
    return entries


__all__ = [
    "DEFAULT_TARGET_KM",
    "QUALIFYING_RATIO",
    "assign_ranks",
    "backfill_participants",
    "best_target_time",
    "build_leaderboard",
    "describe_mode",
    "fastest_time_scores",
    "load_settings",
    "most_distance_scores",
    "participation_scores",
    "score_label",
    "target_km",
    "total_distance_km",
]
