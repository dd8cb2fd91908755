#!/usr/bin/env python3

from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from circuit_core import CircuitCoreError  # noqa: E402
from circuit_core.export_circuits_csv import CIRCUITS_CSV_HEADER, build_circuit_rows  # noqa: E402
from circuit_core.export_payload import build_payload  # noqa: E402
from tools.run_calc import EXIT_INPUT_ERROR, add_common_args, calculate, configure_logging  # noqa: E402


def _write_csv(path: Path, header: list[str], rows: list[list[str]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(header)
        writer.writerows(rows)


def main() -> int:
    ap = argparse.ArgumentParser(description="Export the circuit schedule as CSV.")
    add_common_args(ap)
    ap.add_argument("--out", default="out/circuits.csv", help="Output CSV path (default: out/circuits.csv).")
    args = ap.parse_args()
    configure_logging(args.log_level)

    try:
        payload = build_payload(calculate(Path(args.elements), args.config))
    except (OSError, ValueError, TypeError, CircuitCoreError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    _write_csv(Path(args.out), CIRCUITS_CSV_HEADER, build_circuit_rows(payload))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
