from __future__ import annotations

import math

CIRCUITS_CSV_HEADER = [
    "CIRCUIT_ID",
    "NAME",
    "CATEGORY",
    "POINTS",
    "POWER_W",
    "CURRENT_A",
    "DU_PCT",
    "BREAKER_A",
    "DIFF_MA",
    "SECTION_MM2",
    "COMPLIANT",
]

# (header, dotted path inside payload.circuits[])
_COLUMNS = (
    ("CIRCUIT_ID", "circuit_id"),
    ("NAME", "name"),
    ("CATEGORY", "category"),
    ("POINTS", "points"),
    ("POWER_W", "calc.power_w"),
    ("CURRENT_A", "calc.current_a"),
    ("DU_PCT", "calc.du_pct"),
    ("BREAKER_A", "protection.breaker_a"),
    ("DIFF_MA", "protection.differential_ma"),
    ("SECTION_MM2", "protection.cable_section_mm2"),
    ("COMPLIANT", "calc.is_compliant"),
)


def build_circuit_rows(payload: dict) -> list[list[str]]:
    if not isinstance(payload, dict):
        raise ValueError("payload must be a dict")
    circuits = payload.get("circuits", [])
    if not isinstance(circuits, list):
        raise ValueError("payload.circuits must be a list")
    rows: list[list[str]] = []
    for circuit in circuits:
        if not isinstance(circuit, dict):
            raise ValueError("payload.circuits[] must be dicts")
        _require_id(circuit.get("circuit_id"), "circuits[].circuit_id")
        rows.append(
            [_format_value(path, _get_path_value(circuit, path)) for _, path in _COLUMNS]
        )
    return rows


def _require_id(value: object, ctx: str) -> str:
    if value is None:
        raise ValueError(f"Missing id at {ctx}")
    text = str(value).strip()
    if not text:
        raise ValueError(f"Empty id at {ctx}")
    return text


def _get_path_value(obj: object, path: str) -> object:
    current: object = obj
    for part in path.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return None
    return current


def _format_value(path: str, value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        num = float(value)
        if not math.isfinite(num):
            return ""
        decimals = _decimals_for_path(path)
        if decimals is None:
            return _format_default_number(num)
        return f"{num:.{decimals}f}"
    return str(value)


def _decimals_for_path(path: str) -> int | None:
    segment = path.split(".")[-1].lower()
    if segment == "du_pct":
        return 2
    if segment == "current_a":
        return 1
    return None


def _format_default_number(value: float) -> str:
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    if text in {"-0", "-0.0", ""}:
        return "0"
    return text
