import os
from flask import Flask


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, str(default)))
    except ValueError:
        return default


def create_app():
    app = Flask(__name__)

    # Request guard: reject payloads with more records than this (0 disables)
    app.config['MAX_RECORDS'] = _env_int('MAX_RECORDS', 50000)

    from . import routes  # type: ignore
    app.register_blueprint(routes.bp)

    from . import scoring
    app.logger.info(
        "Scoring settings v%s loaded (default target %skm, qualifying ratio %s)",
        scoring._SETTINGS.get('version'),
        scoring.DEFAULT_TARGET_KM,
        scoring.QUALIFYING_RATIO,
    )

    return app
