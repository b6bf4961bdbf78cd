from leaderboard.models import ActivityRecord
from leaderboard.splits import resolve_target_time


def _record(duration, distance=None, annotations=()):
    return ActivityRecord(
        id="w1",
        participant_id="A",
        duration_seconds=duration,
        distance_meters=distance,
        split_annotations=tuple(annotations),
    )


def test_exact_split_wins():
    rec = _record(6000, 20000, [("1", "4:40"), ("5", "25:00"), ("6", "30:30")])
    assert resolve_target_time(rec, 5) == 1500


def test_exact_split_matches_integral_float_target():
    rec = _record(6000, 20000, [("5", "25:00")])
    assert resolve_target_time(rec, 5.0) == 1500


def test_interpolates_from_nearest_lower_split():
    # 3 km at 900s is 300 s/km; 2 more km adds 600s
    rec = _record(4000, 10000, [("1", "5:10"), ("3", "15:00")])
    assert resolve_target_time(rec, 5) == 1500


def test_interpolation_capped_at_total_duration():
    rec = _record(2000, 12000, [("3", "15:00")])
    assert resolve_target_time(rec, 10) == 2000


def test_interpolation_rounds_half_up():
    # 2 km at 601s -> 300.5 s/km; 601 + 0.5 * 300.5 = 751.25 -> 751
    rec = _record(5000, 10000, [("2", "10:01")])
    assert resolve_target_time(rec, 2.5) == 751
    # 1 km at 301s; 301 + 0.5 * 301 = 451.5 -> 452
    rec = _record(5000, 10000, [("1", "5:01")])
    assert resolve_target_time(rec, 1.5) == 452


def test_whole_workout_projection_without_splits():
    # 5.18 km in 31:15 -> 5 km in about 30:10
    rec = _record(1875, 5180)
    assert resolve_target_time(rec, 5) == 1810


def test_raw_duration_when_nothing_usable():
    assert resolve_target_time(_record(1234), 5) == 1234
    assert resolve_target_time(_record(1234, 0), 5) == 1234


def test_splits_all_above_target_fall_back_to_duration():
    rec = _record(3000, 10000, [("6", "30:00")])
    assert resolve_target_time(rec, 5) == 3000


def test_exact_split_clamped_to_total_duration():
    rec = _record(1400, 6000, [("5", "25:00")])
    assert resolve_target_time(rec, 5) == 1400
