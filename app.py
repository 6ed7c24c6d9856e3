# app.py: tour queries over HTTP; progress no-cache
from __future__ import annotations

import threading
import time
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from manual import ManualFreedom
from progress import log_attempt_detail, snapshot as progress_snapshot
from request_parser import parse_board, parse_path, parse_piece, parse_tour_request, parse_point
from solver.cache import SolutionCache
from solver.computation import Algorithm, Computation, ComputeInput, InvalidRequest, Successful
from solver.orchestrator import solve_tour_with_status, start_background_solve, take_background_result
from solver.summary import survey_starts

SOLUTION_CACHE = SolutionCache()

LAST_RESULT: Dict[str, Any] = {
    "ok": False,
    "status": "Idle",
    "message": "No tour computed yet.",
    "query": None,
    "result": None,
    "cache_hit": None,
    "elapsed_str": "0s",
}

# Handle on the most recent background worker; tests join it.
WORKER: Dict[str, Optional[threading.Thread]] = {"thread": None}

app = Flask(__name__)


@app.after_request
def _no_cache_progress(resp):
    try:
        if request.path == "/progress":
            resp.headers["Cache-Control"] = "no-store, max-age=0"
            resp.headers["Pragma"] = "no-cache"
            resp.headers["Expires"] = "0"
    except Exception:
        pass
    return resp


def _fmt_elapsed(seconds: float) -> str:
    if seconds < 1:
        return "0s"
    m, s = divmod(int(seconds), 60)
    if m == 0:
        return f"{s}s"
    h, m = divmod(m, 60)
    if h == 0:
        return f"{m}m {s}s"
    return f"{h}h {m}m {s}s"


def _merge_like_mapping() -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        merged.update(payload)

    try:
        form_dict = request.form.to_dict(flat=False)
    except Exception:
        form_dict = dict(request.form or {})
    for k, v in form_dict.items():
        merged.setdefault(k, v if isinstance(v, list) else [v])
    return merged


def _flag(val: Any) -> bool:
    if isinstance(val, list):
        val = val[0] if val else None
    if isinstance(val, str):
        return val.strip().lower() in ("1", "true", "yes", "on")
    return bool(val)


def _point_json(p) -> list:
    return [p.row, p.column]


def query_json(query: ComputeInput) -> Dict[str, Any]:
    return {
        "algorithm": query.algorithm.label,
        "piece": {"name": query.piece.name, "moves": [list(m) for m in query.piece.moves]},
        "start": _point_json(query.start),
        "safety_cap": query.safety_cap,
        "board": query.board.to_text().splitlines(),
        "board_description": query.board.description(),
    }


def computation_json(comp: Computation) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "outcome": type(comp).__name__,
        "explored_states": comp.states,
        "message": comp.describe(),
    }
    if isinstance(comp, Successful):
        out["solution_length"] = comp.solution_length
        out["path"] = [_point_json(p) for p in comp.solution.all_passed_through_points()]
        out["moves"] = [[_point_json(m.from_), _point_json(m.to)] for m in comp.solution]
    return out


def _record_result(comp: Computation, query: ComputeInput, hit: bool, elapsed: float) -> None:
    LAST_RESULT.update({
        "ok": isinstance(comp, Successful),
        "status": {"Successful": "Solved"}.get(type(comp).__name__, type(comp).__name__),
        "message": comp.describe(),
        "query": query_json(query),
        "result": computation_json(comp),
        "cache_hit": bool(hit),
        "elapsed_str": _fmt_elapsed(elapsed),
    })


def _bad_request(reason: str, like: Dict[str, Any]):
    seen_keys = ", ".join(list(like.keys())[:8]) or "none"
    log_attempt_detail("Bad request", path=request.path, reason=reason, keys=seen_keys)
    return jsonify({"ok": False, "error": reason}), 400


@app.route("/solve", methods=["POST"])
def solve():
    like = _merge_like_mapping()
    query, err = parse_tour_request(like)
    if err or query is None:
        return _bad_request(err or "nothing parsed from request", like)

    reason = query.validate()
    if reason:
        return _bad_request(reason, like)

    if _flag(like.get("wait")):
        t0 = time.time()
        try:
            comp, hit = solve_tour_with_status(query, SOLUTION_CACHE)
        except InvalidRequest as e:
            return _bad_request(str(e), like)
        _record_result(comp, query, hit, time.time() - t0)
        return jsonify({
            "ok": True,
            "cache_hit": hit,
            "query": query_json(query),
            "result": computation_json(comp),
        })

    WORKER["thread"] = start_background_solve(query, SOLUTION_CACHE)
    snap = progress_snapshot()
    return jsonify({"ok": True, "run_id": snap["run_id"], "status": snap["status"]}), 202


@app.route("/progress")
def progress():
    return jsonify(progress_snapshot())


@app.route("/result/latest")
def result_latest():
    finished = take_background_result()
    if finished is not None:
        comp, query = finished
        snap = progress_snapshot()
        _record_result(comp, query, bool(snap.get("cache_hit")), float(snap.get("elapsed") or 0.0))
    return jsonify(LAST_RESULT)


@app.route("/check-move", methods=["POST"])
def check_move():
    like = _merge_like_mapping()
    board, err = parse_board(like)
    if err:
        return _bad_request(err, like)
    piece, err = parse_piece(like.get("piece"))
    if err:
        return _bad_request(err, like)
    path, err = parse_path(like.get("path") or [], board)
    if err:
        return _bad_request(err, like)

    raw_freedom = like.get("freedom") or ManualFreedom.VALID_ONLY.name
    if isinstance(raw_freedom, list):
        raw_freedom = raw_freedom[0]
    try:
        freedom = ManualFreedom[str(raw_freedom).strip().upper().replace(" ", "_")]
    except KeyError:
        return _bad_request(f"unknown freedom {raw_freedom!r}", like)

    nxt = parse_point(like.get("next"))
    if nxt is None:
        return _bad_request(f"bad next cell {like.get('next')!r}", like)

    ok, warning = freedom.check_move(board, piece, path, nxt)
    return jsonify({
        "ok": ok,
        "warning": warning.name,
        "severity": warning.severity,
        "message": warning.message,
    })


@app.route("/survey", methods=["POST"])
def survey():
    like = _merge_like_mapping()
    like.setdefault("start", [1, 1])
    query, err = parse_tour_request(like)
    if err or query is None:
        return _bad_request(err or "nothing parsed from request", like)
    marks = survey_starts(query.board, query.piece, query.algorithm, query.safety_cap, SOLUTION_CACHE)
    return jsonify({
        "ok": True,
        "marks": [{"start": _point_json(p), "mark": mark.value} for p, mark in marks.items()],
    })


@app.route("/algorithms")
def algorithms():
    return jsonify([
        {"name": alg.name, "label": alg.label, "description": alg.description}
        for alg in Algorithm
    ])


@app.route("/cache/stats")
def cache_stats():
    return jsonify(SOLUTION_CACHE.stats())


if __name__ == "__main__":
    app.run(debug=False)
