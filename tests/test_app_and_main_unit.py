import io
import logging

import pytest
from fastapi.testclient import TestClient

import main as entry
from backend.app.main import app
from solver import logging_config

client = TestClient(app)


# ── HTTP backend ─────────────────────────────────────────────────────────

class TestSolveEndpoint:
    def test_unique(self):
        resp = client.post("/api/solve", json={"matrix": [["0", "2", "4"], ["1", "1", "3"]]})
        assert resp.status_code == 200
        body = resp.json()
        assert body["outcome"] == {"kind": "unique", "values": [1.0, 2.0]}
        assert body["final_answer"].endswith("x1 = 1\nx2 = 2")
        assert body["steps"][0]["matrix"] == [[0.0, 2.0, 4.0], [1.0, 1.0, 3.0]]
        assert body["given"]["inputs"]["number_of_unknowns"] == "2"

    def test_infinite(self):
        resp = client.post("/api/solve", json={"matrix": [["1", "2", "3"], ["2", "4", "6"]]})
        assert resp.status_code == 200
        assert resp.json()["outcome"] == {"kind": "infinite", "rank": 1, "unknowns": 2}

    def test_input_error_is_400_with_cell(self):
        resp = client.post("/api/solve", json={"matrix": [["1", "2"], ["-.", "3"]]})
        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert (detail["row"], detail["col"], detail["raw"]) == (2, 1, "-.")
        assert detail["message"] == "Input Error: Row 2, Col 1 invalid input: '-.'"

    def test_dimension_error_is_400(self):
        resp = client.post("/api/solve", json={"matrix": []})
        assert resp.status_code == 400

    def test_digits_out_of_range_is_422(self):
        resp = client.post("/api/solve", json={"matrix": [["2", "4"]], "digits": 40})
        assert resp.status_code == 422


class TestValidateEndpoint:
    def test_ready(self):
        resp = client.post("/api/validate", json={"matrix": [["1", "1/2"]]})
        assert resp.json() == {"ready": True, "errors": []}

    def test_not_ready_lists_cells(self):
        resp = client.post("/api/validate", json={"matrix": [["1", "-"], ["x", "2"]]})
        body = resp.json()
        assert body["ready"] is False
        assert [(e["row"], e["col"]) for e in body["errors"]] == [(1, 2), (2, 1)]


class TestRandomEndpoint:
    def test_seeded(self):
        payload = {"equations": 2, "unknowns": 3, "seed": 5}
        first = client.post("/api/random", json=payload).json()
        second = client.post("/api/random", json=payload).json()
        assert first == second
        assert len(first["matrix"]) == 2
        assert all(len(row) == 4 for row in first["matrix"])

    def test_out_of_range(self):
        resp = client.post("/api/random", json={"equations": 13, "unknowns": 2})
        assert resp.status_code == 400


# ── Command line ─────────────────────────────────────────────────────────

def test_read_grid_handles_commas_and_comments() -> None:
    text = "# system\n2, 1, 5\n\n4 3   11\n1/2 -1 0\n"
    assert entry.read_grid(text) == [["2", "1", "5"], ["4", "3", "11"], ["1/2", "-1", "0"]]


def test_main_unique_from_file(tmp_path, capsys) -> None:
    path = tmp_path / "system.txt"
    path.write_text("0 2 4\n1 1 3\n", encoding="utf-8")
    code = entry.main([str(path)])
    out = capsys.readouterr().out
    assert code == entry.EXIT_UNIQUE
    assert "Solution Trail" in out
    assert "x1 = 1" in out
    assert "Step 2 (Swap) - Swap R1 <-> R2" in out


def test_main_reads_stdin(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("1 2 3\n2 4 6\n"))
    code = entry.main([])
    assert code == entry.EXIT_NO_UNIQUE
    assert "Infinite solutions" in capsys.readouterr().out


def test_main_input_error(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("- 1\n"))
    code = entry.main(["-"])
    assert code == entry.EXIT_INPUT_ERROR
    assert "Input Error: Row 1, Col 1 invalid input: '-'" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys) -> None:
    code = entry.main([str(tmp_path / "nope.txt")])
    assert code == entry.EXIT_INPUT_ERROR
    assert "Error:" in capsys.readouterr().err


def test_main_random(capsys) -> None:
    code = entry.main(["--random", "3x3", "--seed", "7", "--digits", "2"])
    assert code in (entry.EXIT_UNIQUE, entry.EXIT_NO_UNIQUE)
    assert "Initial augmented matrix:" in capsys.readouterr().out


def test_main_bad_random_size() -> None:
    with pytest.raises(SystemExit):
        entry.main(["--random", "three"])


# ── Logging setup ────────────────────────────────────────────────────────

def test_setup_logging_is_idempotent(tmp_path) -> None:
    log_file = tmp_path / "solver.log"
    logging_config.setup_logging(logging.INFO)
    logger = logging_config.setup_logging(logging.DEBUG, log_file=str(log_file))
    assert logger.name == "solver"
    assert len(logger.handlers) == 2
    logger.info("hello")
    for handler in logger.handlers:
        handler.flush()
    assert "hello" in log_file.read_text(encoding="utf-8")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
