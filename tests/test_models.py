import dataclasses

import pytest

from leaderboard.models import (
    ActivityRecord,
    LeaderboardEntry,
    ScoringMode,
    records_from_list,
    records_from_payload,
)
from leaderboard.splits import extract_splits


def test_scoring_mode_parse():
    assert ScoringMode.parse("fastest_time") is ScoringMode.FASTEST_TIME
    assert ScoringMode.parse(" Most_Distance ") is ScoringMode.MOST_DISTANCE
    assert ScoringMode.parse(ScoringMode.PARTICIPATION) is ScoringMode.PARTICIPATION
    with pytest.raises(ValueError):
        ScoringMode.parse("fastest")
    with pytest.raises(ValueError):
        ScoringMode.parse(None)


def test_record_from_dict_reads_split_tags_and_team():
    rec = ActivityRecord.from_dict(
        {
            "id": "evt1",
            "participant_id": "npub1",
            "distance_meters": 10000,
            "duration_seconds": 3100,
            "tags": [
                ["exercise", "running"],
                ["split", "5", "00:25:30"],
                ["split", "10", "00:51:00"],
                ["team", "team-7"],
                ["team", "ignored"],
            ],
        }
    )
    assert rec.team_id == "team-7"
    assert extract_splits(rec) == {5: 1530, 10: 3060}


def test_record_from_dict_accepts_annotation_shapes():
    rec = ActivityRecord.from_dict(
        {
            "id": 1,
            "duration_seconds": "1800",
            "split_annotations": [["split", "1", "5:00"], [2, "10:00"], {"km": 3, "elapsed": "15:00"}, "junk"],
        },
        participant_id="A",
    )
    assert rec.id == "1"
    assert rec.participant_id == "A"
    assert rec.duration_seconds == 1800
    assert rec.distance == 0
    assert extract_splits(rec) == {1: 300, 2: 600, 3: 900}


def test_record_from_dict_pre_parsed_splits():
    rec = ActivityRecord.from_dict(
        {"id": "x", "participant_id": "A", "duration_seconds": 2000, "splits": {"1": 290, "2": 590}}
    )
    assert extract_splits(rec) == {1: 290, 2: 590}


@pytest.mark.parametrize(
    "payload",
    [
        {"id": "x"},
        {"participant_id": "A"},
        {"id": "x", "participant_id": "A", "duration_seconds": "soon"},
        {"id": "x", "participant_id": "A", "duration_seconds": -1},
        {"id": "x", "participant_id": "A", "distance_meters": "far"},
        "not a record",
    ],
)
def test_record_from_dict_rejects_invalid(payload):
    with pytest.raises(ValueError):
        ActivityRecord.from_dict(payload)


def test_payload_helpers_preserve_order_and_validate():
    records = records_from_payload({"b": [{"id": "1"}], "a": []})
    assert list(records) == ["b", "a"]
    assert records["b"][0].participant_id == "b"
    with pytest.raises(ValueError):
        records_from_payload([{"id": "1"}])
    with pytest.raises(ValueError):
        records_from_payload({"a": {"id": "1"}})
    assert records_from_list([{"id": "1", "participant_id": "A", "team_id": "t"}])[0].team_id == "t"
    with pytest.raises(ValueError):
        records_from_list({"id": "1"})


def test_entries_are_immutable():
    entry = LeaderboardEntry(1, "A", 1500, "25:00", 1, "w1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.rank = 2
