from leaderboard.models import ActivityRecord
from leaderboard.splits import extract_splits


def _record(annotations=(), splits=()):
    return ActivityRecord(
        id="w1",
        participant_id="A",
        duration_seconds=4000,
        distance_meters=10000,
        split_annotations=tuple(annotations),
        splits=tuple(splits),
    )


def test_extracts_string_marks_and_times():
    rec = _record([("1", "5:00"), ("2", "10:10"), ("3", "00:15:30")])
    assert extract_splits(rec) == {1: 300, 2: 610, 3: 930}


def test_drops_bad_marks_and_unparsable_times():
    rec = _record([
        ("0", "4:00"),
        ("-1", "4:00"),
        ("x", "4:00"),
        ("1", "nonsense"),
        ("2", "0:00"),
        ("3", "15:00"),
    ])
    assert extract_splits(rec) == {3: 900}


def test_repeated_mark_keeps_last_value():
    rec = _record([("1", "5:00"), ("2", "10:00"), ("1", "4:50")])
    assert extract_splits(rec) == {1: 290, 2: 600}


def test_non_monotonic_entries_dropped():
    # km 3 is earlier than km 2; it cannot be right
    rec = _record([("1", "5:00"), ("2", "10:00"), ("3", "9:00"), ("4", "20:00")])
    result = extract_splits(rec)
    assert result == {1: 300, 2: 600, 4: 1200}
    assert list(result) == sorted(result)


def test_pre_parsed_splits_take_precedence():
    rec = _record(annotations=[("1", "9:00")], splits=[(1, 280), (2, 570)])
    assert extract_splits(rec) == {1: 280, 2: 570}


def test_no_annotations_gives_empty_map():
    assert extract_splits(_record()) == {}
