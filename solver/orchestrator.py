# Orchestrator: cached tour queries and the background worker
from __future__ import annotations

import threading
import time
import traceback
from typing import Optional, Tuple

from progress import (
    log_attempt_detail,
    reset as progress_reset,
    set_done,
    set_query,
    set_status,
    start_timer,
)
from solver.backtrack import brute_force_tour, warnsdorf_tour
from solver.cache import SolutionCache
from solver.computation import (
    Algorithm,
    Computation,
    ComputeInput,
    Failed,
    GivenUp,
    InvalidRequest,
    Successful,
)
from solver.hamiltonian import hamiltonian_tour


def compute_uncached(query: ComputeInput) -> Computation:
    """Run the selected search directly, bypassing the cache."""
    reason = query.validate()
    if reason:
        raise InvalidRequest(reason)

    alg = query.algorithm
    if alg is Algorithm.HEURISTIC_BACKTRACK:
        fn = warnsdorf_tour
    elif alg is Algorithm.EXHAUSTIVE_BACKTRACK:
        fn = brute_force_tour
    elif alg is Algorithm.HAMILTONIAN_CYCLE:
        fn = hamiltonian_tour
    else:  # pragma: no cover - closed enum
        raise InvalidRequest(f"Unknown algorithm: {alg!r}")
    return fn(query.board, query.piece, query.start, query.safety_cap)


def _is_fresh(cached: Computation, query: ComputeInput) -> bool:
    # Terminated searches do not depend on the cap; a give-up only holds
    # for the cap that produced it.
    if isinstance(cached, GivenUp):
        return cached.explored_states == query.safety_cap
    return True


def solve_tour_with_status(query: ComputeInput, cache: SolutionCache) -> Tuple[Computation, bool]:
    """Cached query returning ``(computation, served_from_cache)``."""
    reason = query.validate()
    if reason:
        log_attempt_detail("Query rejected", reason=reason)
        raise InvalidRequest(reason)

    key = query.cache_key()
    cached = cache.get(key)
    if cached is not None and _is_fresh(cached, query):
        log_attempt_detail(
            "Solution cache hit",
            algorithm=query.algorithm.label,
            start=query.start,
            outcome=type(cached).__name__,
        )
        return cached, True

    if cached is None:
        log_attempt_detail("Cache miss", algorithm=query.algorithm.label, start=query.start)
    else:
        log_attempt_detail(
            "Cached give-up is stale",
            algorithm=query.algorithm.label,
            start=query.start,
            cached_states=cached.explored_states,
            cap=query.safety_cap,
        )

    t0 = time.time()
    comp = compute_uncached(query)
    log_attempt_detail(
        "Search finished",
        algorithm=query.algorithm.label,
        start=query.start,
        outcome=type(comp).__name__,
        states=comp.states,
        duration=f"{time.time() - t0:.2f}s",
    )
    cache.put(key, comp)
    return comp, False


def solve_tour(query: ComputeInput, cache: SolutionCache) -> Computation:
    """Cached query: reuse a still-valid cached result or compute and store one."""
    comp, _ = solve_tour_with_status(query, cache)
    return comp


# ---------- background worker ----------

_RESULT_LOCK = threading.Lock()
_RESULT_SLOT: dict = {"result": None}


def _status_for(comp: Computation) -> str:
    if isinstance(comp, Successful):
        return "Solved"
    if isinstance(comp, Failed):
        return "Failed"
    return "GivenUp"


def _worker(query: ComputeInput, cache: SolutionCache) -> None:
    try:
        comp, hit = solve_tour_with_status(query, cache)
    except InvalidRequest as e:
        set_done("Error", message=str(e))
        return
    except AssertionError as e:
        set_done("Error", message=f"Internal invariant violated: {e}")
        raise
    except Exception as e:
        log_attempt_detail("Worker crashed", error=f"{type(e).__name__}: {e}", trace=traceback.format_exc())
        set_done("Error", message=f"{type(e).__name__}: {e}")
        return

    with _RESULT_LOCK:
        _RESULT_SLOT["result"] = (comp, query)
    set_done(
        _status_for(comp),
        explored_states=comp.states,
        solution_length=comp.solution_length if isinstance(comp, Successful) else None,
        cache_hit=hit,
        message=comp.describe(),
    )


def start_background_solve(query: ComputeInput, cache: SolutionCache) -> threading.Thread:
    """Dispatch a cached query onto a daemon thread.

    There is no cancellation: the search runs until it terminates or hits
    its safety cap.
    """
    progress_reset()
    start_timer()
    set_status("Solving")
    set_query(
        algorithm=query.algorithm.label,
        start=query.start,
        board=query.board.description(),
        safety_cap=query.safety_cap,
    )
    th = threading.Thread(target=_worker, args=(query, cache), daemon=True)
    th.start()
    return th


def take_background_result() -> Optional[Tuple[Computation, ComputeInput]]:
    """Return the last finished ``(computation, query)`` once, without blocking."""
    with _RESULT_LOCK:
        res = _RESULT_SLOT["result"]
        _RESULT_SLOT["result"] = None
        return res


__all__ = [
    "compute_uncached",
    "solve_tour",
    "solve_tour_with_status",
    "start_background_solve",
    "take_background_result",
]
