from flask import Blueprint, abort, current_app, request

from . import scoring as scoring_module
from .models import ScoringMode, records_from_list, records_from_payload
from .scoring import build_leaderboard, describe_mode, score_label
from .teams import build_team_leaderboard


bp = Blueprint('main', __name__)


@bp.route('/health')
def health():
    return {'status': 'ok'}


@bp.route('/api/scoring-modes')
def scoring_modes():
    """List scoring modes with their column label and description."""
    return {
        'modes': [
            {'mode': mode.value, 'label': score_label(mode), 'description': describe_mode(mode)}
            for mode in ScoringMode
        ]
    }


@bp.route('/api/settings/scoring')
def scoring_settings():
    """Current scoring constants; ``?only=version`` returns just the version."""
    settings = scoring_module._SETTINGS
    if request.args.get('only') == 'version':
        return {'version': int(settings.get('version', 0))}
    return {
        'version': int(settings.get('version', 0)),
        'default_target_km': scoring_module.DEFAULT_TARGET_KM,
        'qualifying_ratio': scoring_module.QUALIFYING_RATIO,
    }


def _payload() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        abort(400, description='Expected a JSON object body.')
    return payload


def _mode(payload: dict) -> ScoringMode:
    try:
        return ScoringMode.parse(payload.get('mode', ScoringMode.FASTEST_TIME.value))
    except ValueError as exc:
        abort(400, description=str(exc))


def _target(payload: dict):
    raw = payload.get('target_distance_km')
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        abort(400, description=f"Invalid target_distance_km '{raw}'. Expected a number of kilometres.")
    if value < 0:
        abort(400, description=f"Invalid target_distance_km '{raw}'. Must not be negative.")
    return value


def _check_size(count: int) -> None:
    limit = current_app.config.get('MAX_RECORDS', 0)
    if limit and count > limit:
        abort(413, description=f'Too many records ({count}); limit is {limit}.')


@bp.route('/api/leaderboard', methods=['POST'])
def leaderboard():
    """Score ``records`` keyed by participant id into a ranked leaderboard."""
    payload = _payload()
    mode = _mode(payload)
    target = _target(payload)
    raw_records = payload.get('records') or {}
    if isinstance(raw_records, dict):
        _check_size(sum(len(v) for v in raw_records.values() if isinstance(v, list)))
    try:
        records = records_from_payload(raw_records)
    except ValueError as exc:
        abort(400, description=str(exc))

    participants = payload.get('participants')
    if participants is not None and not isinstance(participants, list):
        abort(400, description='participants must be a list of participant ids.')

    entries = build_leaderboard(
        records,
        mode,
        target_distance_km=target,
        all_participants=[str(p) for p in participants] if participants else None,
    )
    current_app.logger.info('leaderboard mode=%s records=%d entries=%d', mode.value,
                            sum(len(v) for v in records.values()), len(entries))
    return {
        'mode': mode.value,
        'label': score_label(mode),
        'entries': [e.to_dict() for e in entries],
    }


@bp.route('/api/leaderboard/teams', methods=['POST'])
def team_leaderboard():
    """Aggregate a flat list of team-tagged records into team standings."""
    payload = _payload()
    mode = _mode(payload)
    target = _target(payload)
    raw_records = payload.get('records') or []
    if isinstance(raw_records, list):
        _check_size(len(raw_records))
    try:
        records = records_from_list(raw_records)
    except ValueError as exc:
        abort(400, description=str(exc))

    teams = payload.get('teams')
    if teams is not None and not isinstance(teams, dict):
        abort(400, description='teams must be an object mapping team id to name.')

    entries = build_team_leaderboard(records, mode, target_distance_km=target, teams=teams)
    current_app.logger.info('team_leaderboard mode=%s records=%d teams=%d', mode.value,
                            len(records), len(entries))
    return {
        'mode': mode.value,
        'label': score_label(mode),
        'entries': [e.to_dict() for e in entries],
    }
