"""Record and leaderboard row types shared by the scoring modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple


class ScoringMode(str, Enum):
    FASTEST_TIME = "fastest_time"
    MOST_DISTANCE = "most_distance"
    PARTICIPATION = "participation"

    @classmethod
    def parse(cls, value: Any) -> "ScoringMode":
        """Return the mode for ``value`` or raise ``ValueError``.

        Accepts an existing member or its string value (case-insensitive).
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for mode in cls:
                if mode.value == key:
                    return mode
        allowed = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown scoring mode {value!r}. Expected one of: {allowed}.")


@dataclass(frozen=True)
class ActivityRecord:
    """One completed workout attributed to one participant.

    ``split_annotations`` holds raw ``(kilometer_mark, elapsed)`` pairs as
    received; they are validated by :func:`leaderboard.splits.extract_splits`.
    ``splits`` holds an already-parsed ``{km: seconds}`` mapping when the
    upstream store supplies one.
    """

    id: str
    participant_id: str
    duration_seconds: int = 0
    distance_meters: Optional[float] = None
    split_annotations: Tuple[Tuple[Any, Any], ...] = ()
    splits: Tuple[Tuple[int, int], ...] = ()
    team_id: Optional[str] = None

    @property
    def distance(self) -> float:
        return float(self.distance_meters or 0)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], participant_id: Optional[str] = None) -> "ActivityRecord":
        """Build a record from a JSON payload.

        Raises ``ValueError`` for structurally invalid payloads. Individual
        split tuples are kept verbatim and filtered later.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Record must be an object, got {type(data).__name__}.")
        pid = data.get("participant_id") or participant_id
        if not pid:
            raise ValueError("Record is missing participant_id.")
        rid = data.get("id")
        if rid in (None, ""):
            raise ValueError(f"Record for participant {pid} is missing id.")

        raw_duration = data.get("duration_seconds", 0)
        try:
            duration = int(raw_duration or 0)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid duration_seconds {raw_duration!r} for record {rid}.") from None
        if duration < 0:
            raise ValueError(f"duration_seconds must not be negative for record {rid}.")

        raw_distance = data.get("distance_meters")
        distance: Optional[float]
        if raw_distance is None:
            distance = None
        else:
            try:
                distance = float(raw_distance)
            except (TypeError, ValueError):
                raise ValueError(f"Invalid distance_meters {raw_distance!r} for record {rid}.") from None
            if distance < 0:
                raise ValueError(f"distance_meters must not be negative for record {rid}.")

        annotations: List[Tuple[Any, Any]] = []
        for item in data.get("split_annotations") or []:
            pair = _annotation_pair(item)
            if pair is not None:
                annotations.append(pair)

        team_id = data.get("team_id") or None
        for tag in data.get("tags") or []:
            if not isinstance(tag, (list, tuple)) or len(tag) < 2:
                continue
            if tag[0] == "split" and len(tag) >= 3:
                annotations.append((tag[1], tag[2]))
            elif tag[0] == "team" and team_id is None and tag[1]:
                team_id = tag[1]

        parsed: List[Tuple[int, int]] = []
        raw_splits = data.get("splits") or {}
        if isinstance(raw_splits, dict):
            for km, seconds in raw_splits.items():
                try:
                    parsed.append((int(km), int(seconds)))
                except (TypeError, ValueError):
                    continue

        return cls(
            id=str(rid),
            participant_id=str(pid),
            duration_seconds=duration,
            distance_meters=distance,
            split_annotations=tuple(annotations),
            splits=tuple(parsed),
            team_id=str(team_id) if team_id is not None else None,
        )


def _annotation_pair(item: Any) -> Optional[Tuple[Any, Any]]:
    # Accepts ["split", km, "HH:MM:SS"], [km, "HH:MM:SS"] or {"km": .., "elapsed": ..}
    if isinstance(item, dict):
        return item.get("km"), item.get("elapsed")
    if isinstance(item, (list, tuple)):
        if len(item) >= 3 and item[0] == "split":
            return item[1], item[2]
        if len(item) == 2:
            return item[0], item[1]
    return None


def records_from_payload(payload: Any) -> Dict[str, List[ActivityRecord]]:
    """Parse ``{participant_id: [record, ...]}`` preserving key order."""
    if not isinstance(payload, dict):
        raise ValueError("records must be an object keyed by participant id.")
    out: Dict[str, List[ActivityRecord]] = {}
    for pid, items in payload.items():
        if not isinstance(items, list):
            raise ValueError(f"records for participant {pid} must be a list.")
        out[str(pid)] = [ActivityRecord.from_dict(item, participant_id=str(pid)) for item in items]
    return out


def records_from_list(payload: Iterable[Any]) -> List[ActivityRecord]:
    if not isinstance(payload, list):
        raise ValueError("records must be a list.")
    return [ActivityRecord.from_dict(item) for item in payload]


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    participant_id: str
    score: float
    formatted_score: str
    qualifying_workout_count: int
    reference_record_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "participant_id": self.participant_id,
            "score": self.score,
            "formatted_score": self.formatted_score,
            "qualifying_workout_count": self.qualifying_workout_count,
            "reference_record_id": self.reference_record_id,
        }


@dataclass(frozen=True)
class TeamLeaderboardEntry:
    rank: int
    team_id: str
    team_score: float
    formatted_score: str
    member_count: int
    team_name: Optional[str] = field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "team_id": self.team_id,
            "team_name": self.team_name,
            "team_score": self.team_score,
            "formatted_score": self.formatted_score,
            "member_count": self.member_count,
        }


__all__ = [
    "ActivityRecord",
    "LeaderboardEntry",
    "ScoringMode",
    "TeamLeaderboardEntry",
    "records_from_list",
    "records_from_payload",
]
