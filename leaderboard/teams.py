"""Team leaderboards aggregated from members' individual workouts."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from .formatting import format_team_score
from .models import ActivityRecord, ScoringMode, TeamLeaderboardEntry
from .scoring import best_target_time, target_km, total_distance_km

logger = logging.getLogger(__name__)


def group_by_team(records: Iterable[ActivityRecord]) -> Dict[str, Dict[str, List[ActivityRecord]]]:
    """Return ``{team_id: {participant_id: [records]}}``; untagged records are dropped."""
    teams: Dict[str, Dict[str, List[ActivityRecord]]] = {}
    for record in records:
        if not record.team_id:
            continue
        members = teams.setdefault(record.team_id, {})
        members.setdefault(record.participant_id, []).append(record)
    return teams


def team_score(
    members: Mapping[str, List[ActivityRecord]], mode: ScoringMode, target: Optional[float] = None
) -> float:
    """Sum (or count) member contributions for one team."""
    if mode is ScoringMode.MOST_DISTANCE:
        return sum(total_distance_km(workouts) for workouts in members.values())
    if mode is ScoringMode.FASTEST_TIME:
        total = 0
        for workouts in members.values():
            best = best_target_time(workouts, target_km(target))
            if best is not None:
                total += best[0]
        return total
    return len(members)


def _sort_key(mode: ScoringMode):
    if mode is ScoringMode.FASTEST_TIME:
        # Teams without a time sink to the bottom.
        return lambda r: (r["score"] == 0, r["score"], r["team_id"])
    return lambda r: (-r["score"], r["team_id"])


def build_team_leaderboard(
    records: Iterable[ActivityRecord],
    mode=ScoringMode.MOST_DISTANCE,
    target_distance_km: Optional[float] = None,
    teams: Optional[Mapping[str, str]] = None,
) -> List[TeamLeaderboardEntry]:
    """Rank teams by their members' combined workouts.

    ``fastest_time`` sums each member's best target-distance time (lower wins),
    ``most_distance`` sums member kilometres and ``participation`` counts
    members with at least one workout. When ``teams`` maps team id to name,
    teams outside it are skipped.
    """
    if records is None:
        raise ValueError("records is required; pass an empty list when nobody has recorded yet.")
    mode = ScoringMode.parse(mode)
    target = target_km(target_distance_km) if mode is ScoringMode.FASTEST_TIME else None

    records = list(records)
    grouped = group_by_team(records)
    untagged = sum(1 for r in records if not r.team_id)

    rows: List[Dict] = []
    for team_id, members in grouped.items():
        if teams is not None and team_id not in teams:
            logger.debug("Skipping unknown team %s", team_id)
            continue
        rows.append(
            {
                "team_id": team_id,
                "score": team_score(members, mode, target),
                "member_count": len(members),
            }
        )

    rows.sort(key=_sort_key(mode))

    entries = [
        TeamLeaderboardEntry(
            rank=place,
            team_id=row["team_id"],
            team_score=row["score"],
            formatted_score=format_team_score(row["score"], mode),
            member_count=row["member_count"],
            team_name=teams.get(row["team_id"]) if teams is not None else None,
        )
        for place, row in enumerate(rows, start=1)
    ]
    logger.info(
        "build_team_leaderboard mode=%s teams=%d skipped_untagged=%d",
        mode.value,
        len(entries),
        untagged,
    )
    return entries


__all__ = ["build_team_leaderboard", "group_by_team", "team_score"]
