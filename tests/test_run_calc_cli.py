from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from tools.run_calc import EXIT_INPUT_ERROR, EXIT_NON_COMPLIANT, EXIT_OK, load_elements


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, str(ROOT / "tools" / "run_calc.py"), *args],
        capture_output=True,
        text=True,
        check=False,
    )


def _write(tmp_path: Path, name: str, data: object) -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_elements_accepts_list_and_project(tmp_path: Path) -> None:
    records = [{"id": "a", "type": "light", "power": 10}]
    assert [el.id for el in load_elements(_write(tmp_path, "list.json", records))] == ["a"]
    project = {"id": "p", "name": "demo", "elements": records}
    assert [el.id for el in load_elements(_write(tmp_path, "proj.json", project))] == ["a"]


def test_cli_compliant_installation(tmp_path: Path) -> None:
    path = _write(tmp_path, "ok.json", [{"id": f"l{i}", "type": "light", "power": 100} for i in range(9)])
    res = _run("--elements", str(path))
    assert res.returncode == EXIT_OK, res.stderr
    assert "circuits: 2" in res.stdout
    assert "recommendation: installation compliant with NF C 15-100" in res.stdout


def test_cli_non_compliant_json_output(tmp_path: Path) -> None:
    path = _write(tmp_path, "bad.json", [{"id": "o1", "type": "outlet", "power": 4000}])
    res = _run("--elements", str(path), "--json")
    assert res.returncode == EXIT_NON_COMPLIANT
    data = json.loads(res.stdout)
    assert data["compliance"]["isCompliant"] is False
    assert data["compliance"]["violations"][0]["code"] == "NFC15100-001"


def test_cli_config_override(tmp_path: Path) -> None:
    elements = _write(tmp_path, "el.json", [{"id": f"l{i}", "type": "light", "power": 10} for i in range(4)])
    config = _write(tmp_path, "cfg.json", {"limits": {"lighting": {"max_points": 2}}})
    res = _run("--elements", str(elements), "--config", str(config))
    assert res.returncode == EXIT_OK, res.stderr
    assert "circuits: 2" in res.stdout


def test_cli_input_errors(tmp_path: Path) -> None:
    missing = _run("--elements", str(tmp_path / "nope.json"))
    assert missing.returncode == EXIT_INPUT_ERROR
    bad = _write(tmp_path, "bad.json", {"elements": [{"type": "light"}]})
    res = _run("--elements", str(bad))
    assert res.returncode == EXIT_INPUT_ERROR
    assert "element id is required" in res.stderr
