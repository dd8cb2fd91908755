#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from circuit_core import CircuitCoreError  # noqa: E402
from circuit_core.export_payload import build_payload  # noqa: E402
from tools.run_calc import EXIT_INPUT_ERROR, add_common_args, calculate, configure_logging  # noqa: E402


def main() -> int:
    ap = argparse.ArgumentParser(
        description="Export circuits + compliance payload (v1.0) as JSON."
    )
    add_common_args(ap)
    ap.add_argument("--out", required=True, help="Output JSON path.")
    args = ap.parse_args()
    configure_logging(args.log_level)

    try:
        payload = build_payload(calculate(Path(args.elements), args.config))
    except (OSError, ValueError, TypeError, CircuitCoreError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
