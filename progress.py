from __future__ import annotations

import json
import logging
import os
import time
import threading
from pathlib import Path
from typing import Any, Dict, Optional

# ------------------------------
# Thread-safe global progress state
# ------------------------------

PROGRESS_LOCK = threading.Lock()


def _state_file_path() -> Path:
    configured = os.environ.get("PROGRESS_STATE_FILE")
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parent / "logs" / "progress_state.json"


STATE_FILE = _state_file_path()
STATE_FILE_TMP = STATE_FILE.with_name(STATE_FILE.name + ".tmp")
_LAST_STATE_MTIME: float = 0.0


def _init_logger() -> logging.Logger:
    logger = logging.getLogger("solver.attempt_log")
    if logger.handlers:
        return logger

    log_path = Path(__file__).resolve().parent / "logs" / "solver_attempts.log"
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    except Exception:
        # Without a log file the solver still runs; attempts just go unrecorded.
        logger.handlers.clear()
    return logger


ATTEMPT_LOGGER = _init_logger()


def _log_enabled() -> bool:
    return bool(ATTEMPT_LOGGER.handlers)


def _fmt_seconds(seconds: Optional[float]) -> Optional[str]:
    if seconds is None:
        return None
    try:
        return f"{float(seconds):.2f}s"
    except Exception:
        return None


def _emit_log(event: str, **fields: Any) -> None:
    if not _log_enabled():
        return
    extras = [
        f"{key}={value}"
        for key, value in fields.items()
        if value is not None and value != ""
    ]
    try:
        if extras:
            ATTEMPT_LOGGER.info("%s | %s", event, " ".join(extras))
        else:
            ATTEMPT_LOGGER.info("%s", event)
    except Exception:
        # Logging failures must never bubble back to callers.
        pass


def log_attempt_detail(event: str, **fields: Any) -> None:
    """Record one solver event in the attempt log."""
    _emit_log(event, **fields)


# Single source of truth for the status endpoint
PROGRESS: Dict[str, Any] = {
    "status": "Idle",          # Idle | Solving | Solved | Failed | GivenUp | Error
    "algorithm": "",           # e.g. Warnsdorf
    "start": "",               # e.g. "(2, 1)"
    "board": "",               # board description
    "safety_cap": 0,
    "explored_states": 0,
    "solution_length": None,
    "cache_hit": None,         # True when served from the solution cache
    "elapsed_start": None,     # t0 (float) when solving started
    "elapsed": 0.0,            # seconds snapshot
    "message": "",
    "done": False,
    "ok": None,
    "run_id": 0,               # monotonically increasing identifier
}

_RUN_START: Dict[str, Optional[float]] = {"t0": None}


def _persist_locked() -> None:
    global _LAST_STATE_MTIME
    try:
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        with STATE_FILE_TMP.open("w", encoding="utf-8") as fh:
            json.dump(PROGRESS, fh, ensure_ascii=False, separators=(",", ":"))
        STATE_FILE_TMP.replace(STATE_FILE)
        try:
            _LAST_STATE_MTIME = STATE_FILE.stat().st_mtime
        except OSError:
            _LAST_STATE_MTIME = time.time()
    except Exception:
        # Persistence must never break solver progress updates.
        pass


def _load_persisted_locked(force: bool = False) -> None:
    global _LAST_STATE_MTIME
    try:
        stat = STATE_FILE.stat()
    except OSError:
        return
    if not force and stat.st_mtime <= _LAST_STATE_MTIME:
        return
    try:
        with STATE_FILE.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except Exception:
        return
    if not isinstance(data, dict):
        return
    for key in PROGRESS.keys():
        if key in data:
            PROGRESS[key] = data[key]
    _LAST_STATE_MTIME = stat.st_mtime

# ------------------------------
# Helpers
# ------------------------------

def _now() -> float:
    return time.time()

def _fmt_elapsed(seconds: float) -> str:
    seconds = max(0.0, float(seconds))
    if seconds < 60:
        return f"{int(seconds)}s"
    m, s = divmod(int(seconds), 60)
    if m < 60:
        return f"{m}m {s}s"
    h, m = divmod(m, 60)
    return f"{h}h {m}m"

def _touch_elapsed_locked() -> None:
    t0 = PROGRESS.get("elapsed_start")
    if t0 is not None:
        PROGRESS["elapsed"] = _now() - float(t0)

def reset() -> None:
    with PROGRESS_LOCK:
        try:
            current_run_id = int(PROGRESS.get("run_id", 0))
        except Exception:
            current_run_id = 0
        PROGRESS.update({
            "status": "Idle",
            "algorithm": "",
            "start": "",
            "board": "",
            "safety_cap": 0,
            "explored_states": 0,
            "solution_length": None,
            "cache_hit": None,
            "elapsed_start": None,
            "elapsed": 0.0,
            "message": "",
            "done": False,
            "ok": None,
            "run_id": current_run_id + 1,
        })
        _RUN_START["t0"] = None
        _emit_log("Progress reset", run_id=PROGRESS["run_id"])
        _persist_locked()

def start_timer() -> None:
    with PROGRESS_LOCK:
        now = _now()
        PROGRESS["elapsed_start"] = now
        PROGRESS["elapsed"] = 0.0
        _RUN_START["t0"] = now
        _persist_locked()

# ------------------------------
# Setters
# ------------------------------

def set_status(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["status"] = str(v)
        _persist_locked()

def set_query(*, algorithm: Any, start: Any, board: Any, safety_cap: Any) -> None:
    try:
        cap = int(safety_cap)
    except Exception:
        cap = 0
    with PROGRESS_LOCK:
        PROGRESS["algorithm"] = "" if algorithm is None else str(algorithm)
        PROGRESS["start"] = "" if start is None else str(start)
        PROGRESS["board"] = "" if board is None else str(board)
        PROGRESS["safety_cap"] = max(0, cap)
        _emit_log(
            "Query started",
            run_id=PROGRESS["run_id"],
            algorithm=PROGRESS["algorithm"],
            start=PROGRESS["start"],
            cap=PROGRESS["safety_cap"],
        )
        _persist_locked()

def set_message(msg: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["message"] = "" if msg is None else str(msg)
        _persist_locked()

def set_done(
    status: str,
    *,
    explored_states: Any = None,
    solution_length: Any = None,
    cache_hit: Any = None,
    message: Any = None,
) -> None:
    """Mark the run complete with its final status ("Solved", "Failed", ...)."""

    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        now = _now()
        PROGRESS["status"] = str(status)
        PROGRESS["ok"] = status == "Solved"
        PROGRESS["done"] = True
        if explored_states is not None:
            try:
                PROGRESS["explored_states"] = max(0, int(explored_states))
            except Exception:
                pass
        if solution_length is not None:
            PROGRESS["solution_length"] = int(solution_length)
        if cache_hit is not None:
            PROGRESS["cache_hit"] = bool(cache_hit)
        if message is not None:
            PROGRESS["message"] = str(message)
        t0 = _RUN_START.get("t0")
        total = max(0.0, now - t0) if isinstance(t0, (int, float)) else None
        _RUN_START["t0"] = None
        _emit_log(
            "Run finished",
            run_id=PROGRESS["run_id"],
            status=PROGRESS["status"],
            states=PROGRESS["explored_states"],
            cache_hit=PROGRESS["cache_hit"],
            duration=_fmt_seconds(total),
            message=PROGRESS["message"],
        )
        _persist_locked()

# ------------------------------
# Snapshots for the API
# ------------------------------

def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _load_persisted_locked()
        _touch_elapsed_locked()
        snap = {k: v for k, v in PROGRESS.items() if k != "elapsed_start"}
        snap["elapsed_str"] = _fmt_elapsed(PROGRESS["elapsed"])
        return snap


with PROGRESS_LOCK:
    _load_persisted_locked(force=True)
