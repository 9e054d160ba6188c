"""
main.py — AlgoReplay Flask App
================================
JSON API over the playback engine.

Routes:
  GET  /api/algorithms            – every algorithm's info card
  GET  /api/algorithms/<id>       – one card plus its pseudocode
  POST /api/array/generate        – random array      {size, seed}
  POST /api/array/parse           – parse user text   {text}
  POST /api/graph/generate        – random graph      {vertices, edges, max_weight, seed}
  POST /api/run                   – start a timed run {algorithm, array | vertices+edges+start+end, speed, paused}
  POST /api/pause                 – transport
  POST /api/resume
  POST /api/step
  POST /api/stop
  POST /api/speed                 – {speed}
  GET  /api/state?since=N         – transport state + snapshots from index N on
  POST /api/replay                – whole run synchronously, all snapshots + metrics

State management:
  Each browser session gets an id in the Flask cookie session; the id
  keys an in-memory PlaybackController + Recorder pair.  Runs are per
  process, so they do not survive a restart.
"""

import logging
import os
import secrets
import threading
from collections import OrderedDict
from dataclasses import asdict, dataclass, field
from typing import Any, Dict

from flask import Flask, jsonify, request, session

from algoreplay.config import get_config
from algoreplay.errors import InvalidInputError, InvalidTransitionError
from algoreplay.graph import Graph
from algoreplay.inputs import GraphInput, check_array, generate_random_array, parse_array
from algoreplay.algorithms import AlgorithmKind, get_algorithm, list_algorithms
from algoreplay.algorithms.base import validate_array
from algoreplay.engine import PlaybackController, Recorder, TransportState

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = os.environ.get("ALGOREPLAY_SECRET_KEY") or secrets.token_hex(32)


# ---------------------------------------------------------------------------
# Per-session runs
# ---------------------------------------------------------------------------
@dataclass
class _Session:
    recorder:   Recorder           = field(default_factory=Recorder)
    controller: PlaybackController = None

    def __post_init__(self):
        if self.controller is None:
            self.controller = PlaybackController(sink=self.recorder)


_sessions:      "OrderedDict[str, _Session]" = OrderedDict()
_sessions_lock: threading.Lock               = threading.Lock()


def _session_for(sid: str) -> _Session:
    """Look up (or create) the run pair for `sid`, evicting the least recently used."""
    limit = get_config().get("server", {}).get("max_sessions", 64)
    evicted = []
    with _sessions_lock:
        s = _sessions.get(sid)
        if s is None:
            s = _sessions[sid] = _Session()
            logger.debug("new playback session %s", sid)
        _sessions.move_to_end(sid)
        while len(_sessions) > max(1, limit):
            old_sid, old = _sessions.popitem(last=False)
            evicted.append(old)
            logger.info("evicted playback session %s", old_sid)
    # stopping joins the run's thread, so do it outside the map lock
    for old in evicted:
        old.controller.stop()
    return s


def current_session() -> _Session:
    sid = session.get("sid")
    if sid is None:
        sid = session["sid"] = secrets.token_hex(16)
    return _session_for(sid)


def _payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return data


def _int_field(data: Dict[str, Any], name: str, default: int = None) -> int:
    value = data.get(name, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"'{name}' must be an integer")
    return value


def _run_input(data: Dict[str, Any]):
    """Pick the algorithm and build its input from a /api/run or /api/replay body."""
    info = get_algorithm(data.get("algorithm"))
    if info.kind is AlgorithmKind.SORTING:
        if "array" in data:
            return info, check_array(validate_array(data["array"]))
        if "text" in data:
            return info, parse_array(str(data["text"]))
        raise InvalidInputError(f"{info.label} needs an 'array'")
    return info, GraphInput.from_dict(data)


def _transport(s: _Session) -> Dict[str, Any]:
    ctl = s.controller
    algo = ctl.algorithm_id
    return {
        "state":     ctl.state.value,
        "algorithm": algo.value if algo else None,
        "speed":     ctl.speed,
        "delivered": ctl.delivered,
    }


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------
@app.errorhandler(InvalidInputError)
def _bad_input(e):
    return jsonify({"error": str(e)}), 400


@app.errorhandler(InvalidTransitionError)
def _bad_transition(e):
    return jsonify({"error": str(e)}), 409


# ---------------------------------------------------------------------------
# API: Catalogue
# ---------------------------------------------------------------------------
@app.route("/api/algorithms")
def api_algorithms():
    return jsonify({"algorithms": [a.to_dict() for a in list_algorithms()]})


@app.route("/api/algorithms/<algorithm_id>")
def api_algorithm(algorithm_id):
    info = get_algorithm(algorithm_id)
    card = info.to_dict()
    card["pseudocode"] = list(info.pseudocode)
    return jsonify(card)


# ---------------------------------------------------------------------------
# API: Inputs
# ---------------------------------------------------------------------------
@app.route("/api/array/generate", methods=["POST"])
def api_array_generate():
    data = _payload()
    size = _int_field(data, "size", 20)
    return jsonify({"array": generate_random_array(size, seed=data.get("seed"))})


@app.route("/api/array/parse", methods=["POST"])
def api_array_parse():
    data = _payload()
    return jsonify({"array": parse_array(str(data.get("text", "")))})


@app.route("/api/graph/generate", methods=["POST"])
def api_graph_generate():
    data = _payload()
    max_weight = get_config().get("inputs", {}).get("max_edge_weight", 10)
    g = Graph.generate_random(
        vertices=_int_field(data, "vertices", 6),
        edges=_int_field(data, "edges", 8),
        max_weight=_int_field(data, "max_weight", max_weight),
        seed=data.get("seed"),
    )
    return jsonify(g.to_dict())


# ---------------------------------------------------------------------------
# API: Run & Transport
# ---------------------------------------------------------------------------
@app.route("/api/run", methods=["POST"])
def api_run():
    data = _payload()
    info, run_input = _run_input(data)
    s = current_session()

    speed = _int_field(data, "speed") if "speed" in data else None
    s.controller.start(info.id, run_input, paused=bool(data.get("paused", False)))
    if speed is not None:
        s.controller.set_speed(speed)
    s.recorder.attach(info.id, run_input)
    return jsonify(_transport(s))


@app.route("/api/pause", methods=["POST"])
def api_pause():
    s = current_session()
    s.controller.pause()
    return jsonify(_transport(s))


@app.route("/api/resume", methods=["POST"])
def api_resume():
    s = current_session()
    s.controller.resume()
    return jsonify(_transport(s))


@app.route("/api/step", methods=["POST"])
def api_step():
    s = current_session()
    snap = s.controller.step()
    out = _transport(s)
    out["snapshot"] = snap.to_dict() if snap is not None else None
    return jsonify(out)


@app.route("/api/stop", methods=["POST"])
def api_stop():
    s = current_session()
    s.controller.stop()
    return jsonify(_transport(s))


@app.route("/api/speed", methods=["POST"])
def api_speed():
    s = current_session()
    s.controller.set_speed(_int_field(_payload(), "speed"))
    return jsonify(_transport(s))


@app.route("/api/state")
def api_state():
    s = current_session()
    since = request.args.get("since", 0, type=int)
    snaps = s.recorder.since(since)
    out = _transport(s)
    out["snapshots"] = [snap.to_dict() for snap in snaps]
    out["next"] = max(0, since) + len(snaps)
    if s.controller.state is TransportState.FINISHED:
        out["metrics"] = asdict(s.recorder.get_metrics())
    return jsonify(out)


@app.route("/api/replay", methods=["POST"])
def api_replay():
    info, run_input = _run_input(_payload())
    rec = Recorder()
    rec.record(info.id, run_input)
    return jsonify(rec.export())


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------
def _configure_logging() -> None:
    level = str(get_config().get("logging", {}).get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    _configure_logging()
    server = get_config().get("server", {})
    host = server.get("host", "127.0.0.1")
    port = server.get("port", 5000)
    logger.info("AlgoReplay listening on http://%s:%s", host, port)
    app.run(debug=server.get("debug", False), host=host, port=port, threaded=True)


if __name__ == "__main__":
    main()
