"""Flask application factory for the simulator's JSON API.

The ``create_app`` function binds a drive geometry and returns a Flask
app with four endpoints:

- ``GET /`` — service name and the policy ids it accepts.
- ``GET /api/geometry`` — the geometry as JSON.
- ``POST /api/simulate`` — ``{"policy": "sstf", "requests": [[t, s], ...]}``.
- ``POST /api/experiment`` — ``{"min_requests": 50, "trials": 10, ...}``.

Bad input is answered with ``{"error": ...}`` and HTTP 400.
"""

from __future__ import annotations

from typing import Any

from flask import Flask, Response, jsonify, request

from hdd_sched.engine import simulate
from hdd_sched.experiment import ExperimentConfig, run_experiment
from hdd_sched.geometry import DEFAULT_GEOMETRY, DriveGeometry
from hdd_sched.policies import PolicyId, parse_policy_id
from hdd_sched.report import report_to_dict, result_to_dict
from hdd_sched.requests import Request

_HTTP_BAD_REQUEST = 400

# Sweeps run inside the request; keep them small.
_MAX_WEB_TRIALS = 200
_MAX_WEB_LOADS = 50
_MAX_WEB_LOAD = 10_000
_MAX_WEB_WORKERS = 8

_EXPERIMENT_FIELDS = ("min_requests", "max_requests", "step", "trials", "seed", "workers")


def _bad_request(message: str) -> tuple[Response, int]:
    return jsonify({"error": message}), _HTTP_BAD_REQUEST


def _parse_requests(raw: Any) -> list[Request]:
    """Turn ``[[track, sector], ...]`` into requests.

    Raises:
        ValueError: If the payload is not a list of integer pairs.

    """
    if not isinstance(raw, list):
        msg = "'requests' must be a list of [track, sector] pairs"
        raise ValueError(msg)  # noqa: TRY004
    requests: list[Request] = []
    for pair in raw:
        if not isinstance(pair, list | tuple) or len(pair) != 2:  # noqa: PLR2004
            msg = f"Invalid request {pair!r}; expected [track, sector]"
            raise ValueError(msg)
        track, sector = pair
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in pair):
            msg = f"Invalid request {pair!r}; track and sector must be integers"
            raise ValueError(msg)
        requests.append(Request(track=track, sector=sector))
    return requests


def _check_web_limits(config: ExperimentConfig) -> str | None:
    """Return why ``config`` is too large to run inside a request, if it is."""
    if config.trials > _MAX_WEB_TRIALS:
        return f"trials must not exceed {_MAX_WEB_TRIALS}"
    if config.max_requests > _MAX_WEB_LOAD:
        return f"max_requests must not exceed {_MAX_WEB_LOAD}"
    if config.load_count > _MAX_WEB_LOADS:
        return f"sweep must not exceed {_MAX_WEB_LOADS} load levels"
    if config.workers > _MAX_WEB_WORKERS:
        return f"workers must not exceed {_MAX_WEB_WORKERS}"
    return None


def create_app(geometry: DriveGeometry | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        geometry: Drive to simulate; defaults to ``DEFAULT_GEOMETRY``.

    Returns:
        A configured Flask application ready to serve.

    """
    drive = geometry if geometry is not None else DEFAULT_GEOMETRY
    app = Flask(__name__)

    @app.route("/")
    def index() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Describe the service."""
        return jsonify(
            {
                "service": "hdd-sched",
                "policies": [p.value for p in PolicyId],
            }
        )

    @app.route("/api/geometry")
    def geometry_info() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the simulated drive's parameters."""
        return jsonify(drive.to_dict())

    @app.route("/api/simulate", methods=["POST"])
    def simulate_batch() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Replay one batch under one policy.

        Expects JSON body: ``{"policy": "...", "requests": [[t, s], ...]}``

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "requests" not in data:
            return _bad_request("Missing 'requests' field")
        try:
            requests = _parse_requests(data["requests"])
            result = simulate(data.get("policy", PolicyId.FIFO.value), requests, geometry=drive)
        except ValueError as e:
            return _bad_request(str(e))
        return jsonify(result_to_dict(result))

    @app.route("/api/experiment", methods=["POST"])
    def experiment() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run a load sweep and return the averaged results."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _bad_request("Expected a JSON object")
        kwargs: dict[str, Any] = {k: data[k] for k in _EXPERIMENT_FIELDS if k in data}
        try:
            if "policies" in data:
                kwargs["policies"] = tuple(parse_policy_id(p) for p in data["policies"])
            config = ExperimentConfig(**kwargs)
        except (TypeError, ValueError) as e:
            return _bad_request(str(e))
        if (error := _check_web_limits(config)) is not None:
            return _bad_request(error)
        report = run_experiment(config, geometry=drive)
        return jsonify(report_to_dict(report))

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``hdd-sched-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
