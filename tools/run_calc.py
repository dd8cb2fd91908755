#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

# Allow running as "python tools/run_calc.py" (so repo root is importable)
sys.path.insert(0, str(ROOT))

from circuit_core import CalculationService, CircuitCoreError, load_config  # noqa: E402
from circuit_core.models import ElectricalCalculations, ElectricalElement  # noqa: E402

EXIT_OK = 0
EXIT_NON_COMPLIANT = 1
EXIT_INPUT_ERROR = 2


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def load_elements(path: Path) -> list[ElectricalElement]:
    """
    Read placed elements from JSON: either a list of element records or a
    project-like object with an "elements" list.
    """
    data = json.loads(_read_text(path))
    if isinstance(data, dict):
        data = data.get("elements")
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of elements or an object with 'elements'")
    return [ElectricalElement.from_dict(item) for item in data]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def add_common_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--elements", required=True, help="Path to elements JSON.")
    ap.add_argument("--config", default=None, help="Optional JSON with limit/constant overrides.")
    ap.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level (default: WARNING).",
    )


def calculate(elements_path: Path, config_path: str | None) -> ElectricalCalculations:
    config = load_config(config_path)
    elements = load_elements(elements_path)
    service = CalculationService(config)
    service.initialize()
    try:
        return service.run(elements)
    finally:
        service.cleanup()


def _print_report(calc: ElectricalCalculations) -> None:
    print("circuits:", len(calc.circuits))
    for c in calc.circuits:
        print(
            "circuit:",
            c.name,
            "points=",
            c.element_count,
            "P_w=",
            round(c.calculations.total_power, 6),
            "I_a=",
            round(c.calculations.current, 6),
            "du_pct=",
            round(c.calculations.voltage_drop, 6),
            "breaker_a=",
            c.protection.breaker,
            "section_mm2=",
            c.protection.cable_section,
            "compliant=",
            c.calculations.is_compliant,
        )
    print("total_power_w:", round(calc.total_power, 6))
    print("total_current_a:", round(calc.total_current, 6))
    for v in calc.compliance.violations:
        print(f"{v.severity}: {v.code} {v.message}")
    for rec in calc.compliance.recommendations:
        print("recommendation:", rec)
    print("compliant:", calc.compliance.is_compliant)


def main() -> int:
    ap = argparse.ArgumentParser(
        description="Group placed elements into NF C 15-100 circuits and check compliance."
    )
    add_common_args(ap)
    ap.add_argument("--json", action="store_true", help="Print the full result as JSON.")
    args = ap.parse_args()
    configure_logging(args.log_level)

    try:
        calc = calculate(Path(args.elements), args.config)
    except (OSError, ValueError, TypeError, CircuitCoreError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if args.json:
        print(json.dumps(calc.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_report(calc)
    return EXIT_OK if calc.compliance.is_compliant else EXIT_NON_COMPLIANT


if __name__ == "__main__":
    raise SystemExit(main())
