"""Split parsing and target-distance time extraction.

A 20K training run submitted to a 5K competition still has a 5K inside it.
These helpers recover that time from per-kilometre split annotations,
falling back to the workout's average pace or its raw duration.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional, Union

from .models import ActivityRecord

SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60

SplitMap = Dict[int, int]
Number = Union[int, float]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_duration(text: Any, default: Optional[int] = 0) -> Optional[int]:
    """Return seconds for an ``H:MM:SS`` or ``M:SS`` string.

    Segments are not fixed width. Malformed input returns ``default``
    (``0`` unless the caller asks for ``None``).
    """
    if not isinstance(text, str) or not text.strip():
        return default
    parts = text.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.strip().isdecimal() for p in parts):
        return default
    values = [int(p) for p in parts]
    if len(values) == 3:
        hours, minutes, seconds = values
        return hours * SECONDS_PER_HOUR + minutes * SECONDS_PER_MINUTE + seconds
    minutes, seconds = values
    return minutes * SECONDS_PER_MINUTE + seconds


def _parse_mark(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value > 0 else None
    if isinstance(value, str) and value.strip().isdecimal():
        mark = int(value.strip())
        return mark if mark > 0 else None
    return None


def _monotonic(raw: SplitMap) -> SplitMap:
    """Order by mark and drop entries that do not advance the clock."""
    out: SplitMap = {}
    last = 0
    for km in sorted(raw):
        seconds = raw[km]
        if seconds > last:
            out[km] = seconds
            last = seconds
    return out


def extract_splits(record: ActivityRecord) -> SplitMap:
    """Return the record's ``{km: elapsed_seconds}`` mapping.

    Pre-parsed ``splits`` win when present. Otherwise annotations are read in
    their given order; entries with a non-positive mark or an unparsable or
    zero time are dropped, and a repeated mark keeps its last value.
    """
    raw: SplitMap = {}
    if record.splits:
        for km, seconds in record.splits:
            if km > 0 and seconds > 0:
                raw[int(km)] = int(seconds)
        return _monotonic(raw)

    for mark, elapsed in record.split_annotations:
        km = _parse_mark(mark)
        seconds = parse_duration(elapsed, default=None)
        if km is None or not seconds:
            continue
        raw[km] = seconds
    return _monotonic(raw)


def resolve_target_time(record: ActivityRecord, target_distance_km: Number) -> int:
    """Best estimate of the seconds taken to cover ``target_distance_km``.

    1. An exact split at the target.
    2. Interpolation from the largest split at or below the target using
       that split's average pace.
    3. With no splits at all, the whole workout's average pace.
    4. The raw duration.

    Split-derived values never exceed the record's total duration.
    """
    duration = int(record.duration_seconds or 0)
    splits = extract_splits(record)

    if not splits:
        distance_km = record.distance / 1000
        if distance_km > 0:
            pace = duration / distance_km
            return _round_half_up(pace * target_distance_km)
        return duration

    exact = splits.get(target_distance_km)  # type: ignore[call-overload]
    if exact is not None:
        return min(exact, duration)

    below = [km for km in splits if km <= target_distance_km]
    if below:
        km = max(below)
        elapsed = splits[km]
        pace = elapsed / km
        estimate = elapsed + pace * (target_distance_km - km)
        return min(_round_half_up(estimate), duration)

    return duration


__all__ = [
    "SplitMap",
    "extract_splits",
    "parse_duration",
    "resolve_target_time",
]
