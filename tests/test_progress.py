import importlib
import json
import os
import time

from progress import reset, set_done, set_message, set_query, set_status, snapshot


def test_set_done_solved_marks_ok():
    reset()
    set_status("Solving")
    set_done("Solved", explored_states=42, solution_length=24, cache_hit=False, message="done")
    snap = snapshot()
    assert snap["status"] == "Solved"
    assert snap["done"] is True
    assert snap["ok"] is True
    assert snap["explored_states"] == 42
    assert snap["solution_length"] == 24
    assert snap["cache_hit"] is False
    assert snap["message"] == "done"
    assert "elapsed_start" not in snap
    assert snap["elapsed_str"].endswith("s")


def test_set_done_give_up_is_not_ok():
    reset()
    set_done("GivenUp", explored_states=6969)
    snap = snapshot()
    assert snap["status"] == "GivenUp"
    assert snap["ok"] is False
    assert snap["solution_length"] is None


def test_set_query_records_inputs():
    reset()
    set_query(algorithm="Warnsdorf", start="(2, 1)", board="5x5 board", safety_cap="-3")
    set_message("searching")
    snap = snapshot()
    assert snap["algorithm"] == "Warnsdorf"
    assert snap["start"] == "(2, 1)"
    assert snap["safety_cap"] == 0
    assert snap["message"] == "searching"
    assert snap["done"] is False


def test_reset_increments_run_identifier():
    reset()
    first = snapshot()["run_id"]
    reset()
    second = snapshot()["run_id"]
    assert isinstance(first, int)
    assert isinstance(second, int)
    assert second == first + 1


def test_snapshot_reads_state_written_by_other_process(tmp_path, monkeypatch):
    import progress as progress_module

    state_path = tmp_path / "state.json"
    monkeypatch.setenv("PROGRESS_STATE_FILE", str(state_path))
    progress = importlib.reload(progress_module)

    progress.reset()
    progress.set_status("Solving")
    first = progress.snapshot()
    assert first["status"] == "Solving"

    data = dict(first)
    data["status"] = "Solved"
    data["explored_states"] = 99
    state_path.write_text(json.dumps(data))
    os.utime(state_path, None)

    with progress.PROGRESS_LOCK:
        progress.PROGRESS["status"] = ""
        progress.PROGRESS["explored_states"] = 0
        progress._LAST_STATE_MTIME = 0.0

    time.sleep(0.01)
    updated = progress.snapshot()
    assert updated["status"] == "Solved"
    assert updated["explored_states"] == 99

    monkeypatch.delenv("PROGRESS_STATE_FILE", raising=False)
    importlib.reload(progress_module)
