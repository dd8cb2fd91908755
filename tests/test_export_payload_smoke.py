from __future__ import annotations

import csv
import json
import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from circuit_core import CalculationService
from circuit_core.export_circuits_csv import CIRCUITS_CSV_HEADER, build_circuit_rows
from circuit_core.export_payload import PAYLOAD_VERSION, build_payload
from circuit_core.models import ElectricalElement

SAMPLE_ELEMENTS = [
    {"id": "l1", "type": "light_ceiling", "position": {"x": 0, "y": 0}, "power": 100, "voltage": 230, "phase": 1},
    {"id": "p1", "type": "prise_2p_t", "position": {"x": 10, "y": 0}, "power": 4000, "voltage": 230, "phase": 1},
    {"id": "k1", "type": "prise_cuisine", "position": {"x": 20, "y": 0}, "power": 1000, "voltage": 230, "phase": 1},
]


def _calculations():
    svc = CalculationService()
    svc.initialize()
    return svc.run([ElectricalElement.from_dict(d) for d in SAMPLE_ELEMENTS])


def test_build_payload_shape() -> None:
    payload = build_payload(_calculations())
    assert payload["version"] == PAYLOAD_VERSION
    assert payload["summary"]["circuit_count"] == 3
    assert payload["summary"]["total_power_w"] == 5100.0
    assert [c["circuit_id"] for c in payload["circuits"]] == [
        "circuit-lighting-1",
        "circuit-outlet_16a-1",
        "circuit-outlet_20a-1",
    ]
    outlet = payload["circuits"][1]
    assert outlet["element_ids"] == ["p1"]
    assert outlet["protection"] == {"breaker_a": 16.0, "differential_ma": 30.0, "cable_section_mm2": 1.5}
    assert outlet["calc"]["is_compliant"] is False
    assert payload["compliance"]["is_compliant"] is False
    codes = [v["code"] for v in payload["compliance"]["violations"]]
    assert "NFC15100-001" in codes
    # JSON-serializable as is.
    json.dumps(payload)


def test_build_payload_rejects_other_input() -> None:
    with pytest.raises(TypeError):
        build_payload({"circuits": []})  # type: ignore[arg-type]


def test_circuit_rows_formatting() -> None:
    rows = build_circuit_rows(build_payload(_calculations()))
    assert len(rows) == 3
    assert all(len(r) == len(CIRCUITS_CSV_HEADER) for r in rows)
    lighting = dict(zip(CIRCUITS_CSV_HEADER, rows[0]))
    assert lighting["NAME"] == "Lighting 1"
    assert lighting["POINTS"] == "1"
    assert lighting["POWER_W"] == "100"
    assert lighting["CURRENT_A"] == "0.4"
    assert lighting["DU_PCT"] == "0.11"
    assert lighting["SECTION_MM2"] == "1.5"
    assert lighting["COMPLIANT"] == "true"


def test_circuit_rows_blank_for_missing_fields() -> None:
    rows = build_circuit_rows({"circuits": [{"circuit_id": "circuit-lighting-1", "points": 2}]})
    row = dict(zip(CIRCUITS_CSV_HEADER, rows[0]))
    assert row["CIRCUIT_ID"] == "circuit-lighting-1"
    assert row["POINTS"] == "2"
    assert row["DU_PCT"] == ""
    assert row["BREAKER_A"] == ""


def test_circuit_rows_require_ids() -> None:
    with pytest.raises(ValueError):
        build_circuit_rows({"circuits": [{"name": "x"}]})
    with pytest.raises(ValueError):
        build_circuit_rows({"circuits": "nope"})


def test_export_cli_writes_files(tmp_path: Path) -> None:
    elements_path = tmp_path / "elements.json"
    elements_path.write_text(json.dumps({"elements": SAMPLE_ELEMENTS}), encoding="utf-8")
    out_json = tmp_path / "out" / "payload.json"
    out_csv = tmp_path / "out" / "circuits.csv"

    res = subprocess.run(
        [sys.executable, str(ROOT / "tools" / "export_payload.py"), "--elements", str(elements_path), "--out", str(out_json)],
        capture_output=True,
        text=True,
        check=False,
    )
    assert res.returncode == 0, res.stderr
    payload = json.loads(out_json.read_text(encoding="utf-8"))
    assert len(payload["circuits"]) == 3

    res = subprocess.run(
        [sys.executable, str(ROOT / "tools" / "export_circuits_csv.py"), "--elements", str(elements_path), "--out", str(out_csv)],
        capture_output=True,
        text=True,
        check=False,
    )
    assert res.returncode == 0, res.stderr
    with out_csv.open(encoding="utf-8", newline="") as handle:
        rows = list(csv.reader(handle))
    assert rows[0] == CIRCUITS_CSV_HEADER
    assert len(rows) == 4
