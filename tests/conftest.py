import pathlib
import sys

import pytest

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from leaderboard.models import ActivityRecord


@pytest.fixture(autouse=True)
def scoring_settings(monkeypatch):
    # Keep constants deterministic regardless of the shipped settings file
    import leaderboard.scoring as _scoring
    monkeypatch.setattr(_scoring, "DEFAULT_TARGET_KM", 5)
    monkeypatch.setattr(_scoring, "QUALIFYING_RATIO", 0.95)
    yield _scoring


@pytest.fixture()
def make_record():
    counter = {"n": 0}

    def _make(participant_id="A", distance=None, duration=0, splits=(), team=None, record_id=None):
        counter["n"] += 1
        return ActivityRecord(
            id=record_id or f"w{counter['n']}",
            participant_id=participant_id,
            duration_seconds=duration,
            distance_meters=distance,
            split_annotations=tuple(splits),
            team_id=team,
        )

    return _make


@pytest.fixture()
def client():
    from leaderboard import create_app

    app = create_app()
    app.config.update({"TESTING": True})
    with app.test_client() as c:
        yield c
