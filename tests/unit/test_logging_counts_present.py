from leaderboard.models import ScoringMode
from leaderboard.scoring import build_leaderboard
from leaderboard.teams import build_team_leaderboard


def test_build_leaderboard_logs_counts(caplog, make_record):
    caplog.set_level("DEBUG")
    records = {
        "A": [make_record("A", distance=10000, duration=3100, splits=[("5", "25:00")])],
    }
    build_leaderboard(records, ScoringMode.FASTEST_TIME, 5, ["A", "B"])
    messages = [r.getMessage() for r in caplog.records]
    assert "build_leaderboard mode=fastest_time scored=1 backfilled=1 target_km=5" in messages
    assert any(m.startswith("split_time_used participant=A time=25:00") for m in messages)


def test_build_team_leaderboard_logs_counts(caplog, make_record):
    caplog.set_level("INFO")
    records = [make_record("A", distance=1000, team="red"), make_record("B", distance=1000)]
    build_team_leaderboard(records, ScoringMode.MOST_DISTANCE)
    messages = [r.getMessage() for r in caplog.records]
    assert "build_team_leaderboard mode=most_distance teams=1 skipped_untagged=1" in messages
