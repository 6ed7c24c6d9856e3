import pytest

import app as app_module
import progress
from solver.cache import SolutionCache


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(progress, "STATE_FILE", tmp_path / "state.json")
    monkeypatch.setattr(progress, "STATE_FILE_TMP", tmp_path / "state.json.tmp")
    monkeypatch.setattr(app_module, "SOLUTION_CACHE", SolutionCache(32))
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as c:
        yield c


def test_solve_wait_returns_computation_and_caches(client):
    body = {"width": 5, "height": 5, "start": [1, 1], "algorithm": "brute force",
            "safety_cap": 1_000_000, "wait": True}
    first = client.post("/solve", json=body)
    assert first.status_code == 200
    data = first.get_json()
    assert data["cache_hit"] is False
    assert data["result"]["outcome"] == "Successful"
    assert data["result"]["solution_length"] == 24
    assert len(data["result"]["path"]) == 25
    assert data["result"]["path"][0] == [1, 1]
    assert data["query"]["algorithm"] == "Brute Force"

    second = client.post("/solve", json=body).get_json()
    assert second["cache_hit"] is True
    assert second["result"] == data["result"]

    stats = client.get("/cache/stats").get_json()
    assert stats["entries"] == 1
    assert stats["hits"] == 1

    latest = client.get("/result/latest").get_json()
    assert latest["ok"] is True
    assert latest["status"] == "Solved"


def test_solve_rejects_bad_payloads(client):
    resp = client.post("/solve", json={"width": 5, "height": 5})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "missing start"

    resp = client.post("/solve", json={"width": 5, "height": 5, "start": [1, 1], "safety_cap": 1})
    assert resp.status_code == 400

    resp = client.post("/solve", json={"width": 3, "height": 3, "disabled": [[1, 1]],
                                       "start": [1, 1], "wait": True})
    assert resp.status_code == 400
    assert "not an available cell" in resp.get_json()["error"]


def test_background_solve_then_latest_result(client):
    resp = client.post("/solve", json={"width": 3, "height": 3, "start": [1, 1], "algorithm": "exhaustive"})
    assert resp.status_code == 202
    run_id = resp.get_json()["run_id"]

    app_module.WORKER["thread"].join(10)

    prog = client.get("/progress")
    assert prog.headers["Cache-Control"] == "no-store, max-age=0"
    snap = prog.get_json()
    assert snap["run_id"] == run_id
    assert snap["status"] == "Failed"
    assert snap["done"] is True

    latest = client.get("/result/latest").get_json()
    assert latest["ok"] is False
    assert latest["status"] == "Failed"
    assert latest["result"]["outcome"] == "Failed"
    assert latest["query"]["start"] == [1, 1]


def test_form_posts_are_accepted(client):
    resp = client.post("/solve", data={"width": "3", "height": "3", "start": "2,2", "wait": "true"})
    assert resp.status_code == 200
    result = resp.get_json()["result"]
    assert result == {
        "outcome": "Failed",
        "explored_states": 1,
        "message": "Failed to find a solution after 1 states",
    }


def test_check_move(client):
    body = {"width": 5, "height": 5, "path": [[1, 1], [3, 2]], "next": [5, 3]}
    data = client.post("/check-move", json=body).get_json()
    assert data == {"ok": True, "warning": "OK", "severity": "ok", "message": "OK"}

    body["next"] = [1, 1]
    data = client.post("/check-move", json=body).get_json()
    assert data["ok"] is False
    assert data["warning"] == "ALREADY_DONE"

    body["freedom"] = "any possible"
    assert client.post("/check-move", json=body).get_json()["ok"] is True

    body["freedom"] = "sideways"
    assert client.post("/check-move", json=body).status_code == 400


def test_survey_endpoint(client):
    resp = client.post("/survey", json={"width": 3, "height": 3, "algorithm": "brute force"})
    marks = resp.get_json()["marks"]
    assert len(marks) == 9
    assert {m["mark"] for m in marks} == {"failed"}


def test_algorithms_listing(client):
    algs = client.get("/algorithms").get_json()
    assert [a["label"] for a in algs] == ["Warnsdorf", "Brute Force", "Hamiltonian Cycle"]
    assert all(a["description"] for a in algs)


def test_check_move_from_a_single_cell_path(client):
    body = {"width": 5, "height": 5, "path": [[1, 1]], "next": [2, 2]}
    data = client.post("/check-move", json=body).get_json()
    assert data["ok"] is False
    assert data["warning"] == "NOT_VALID"

    body["next"] = [3, 2]
    assert client.post("/check-move", json=body).get_json()["warning"] == "OK"

    body["next"] = [1, 1]
    assert client.post("/check-move", json=body).get_json()["warning"] == "REPEATED"
