"""Print a leaderboard for a JSON file shaped like the API request bodies.

    python scripts/score_file.py workouts.json --mode most_distance
    python scripts/score_file.py team_workouts.json --teams
"""
import argparse
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from leaderboard.models import records_from_list, records_from_payload  # noqa: E402
from leaderboard.scoring import build_leaderboard  # noqa: E402
from leaderboard.teams import build_team_leaderboard  # noqa: E402


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('path', type=Path)
    parser.add_argument('--mode', default=None, help='fastest_time, most_distance or participation')
    parser.add_argument('--target-km', type=float, default=None)
    parser.add_argument('--teams', action='store_true', help='score a flat list of team-tagged records')
    args = parser.parse_args(argv)

    payload = json.loads(args.path.read_text())
    mode = args.mode or payload.get('mode') or ('most_distance' if args.teams else 'fastest_time')
    target = args.target_km if args.target_km is not None else payload.get('target_distance_km')

    try:
        if args.teams:
            records = records_from_list(payload.get('records') or [])
            rows = [
                (e.rank, e.team_name or e.team_id, e.formatted_score)
                for e in build_team_leaderboard(records, mode, target, teams=payload.get('teams'))
            ]
        else:
            records = records_from_payload(payload.get('records') or {})
            rows = [
                (e.rank, e.participant_id, e.formatted_score)
                for e in build_leaderboard(records, mode, target, payload.get('participants'))
            ]
    except ValueError as exc:
        print(f'error: {exc}', file=sys.stderr)
        return 2

    for rank, name, formatted in rows:
        print(f'{rank:>4}  {name}  {formatted}')
    return 0


if __name__ == '__main__':
    sys.exit(main())
