from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from .limits import DEFAULT_CONFIG, EngineConfig
from .models import Circuit, ComplianceResult, Violation

logger = logging.getLogger(__name__)

Translator = Callable[..., str]

CODE_CIRCUIT_NON_COMPLIANT = "NFC15100-001"
CODE_VOLTAGE_DROP_HIGH = "NFC15100-002"

# Default English strings when no translator is provided.
_COMPLIANCE_EN = {
    "compliance.circuit_non_compliant": "Circuit {name} non-compliant",
    "compliance.voltage_drop_high": "High voltage drop: {drop}%",
    "compliance.installation_compliant": "installation compliant with NF C 15-100",
}


def _tr(translator: Translator | None, key: str, **kwargs: Any) -> str:
    if translator is None:
        raw = _COMPLIANCE_EN.get(key, key)
        return raw.format(**kwargs) if kwargs else raw
    return translator(key, **kwargs)


def circuit_violations(
    circuit: Circuit,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
    translator: Translator | None = None,
) -> list[Violation]:
    violations: list[Violation] = []
    calc = circuit.calculations
    if not calc.is_compliant:
        violations.append(
            Violation(
                code=CODE_CIRCUIT_NON_COMPLIANT,
                severity="error",
                message=_tr(translator, "compliance.circuit_non_compliant", name=circuit.name),
                circuit=circuit.id,
            )
        )
    if calc.voltage_drop > config.du_warning_pct:
        violations.append(
            Violation(
                code=CODE_VOLTAGE_DROP_HIGH,
                severity="warning",
                message=_tr(
                    translator,
                    "compliance.voltage_drop_high",
                    drop=f"{calc.voltage_drop:.1f}",
                ),
                circuit=circuit.id,
            )
        )
    return violations


def validate(
    circuits: Iterable[Circuit],
    *,
    config: EngineConfig = DEFAULT_CONFIG,
    translator: Translator | None = None,
) -> ComplianceResult:
    """
    Check every circuit in order and collect violations (no de-duplication).
    Warnings never block compliance; only `error` severity does.
    """
    violations: list[Violation] = []
    count = 0
    for circuit in circuits:
        count += 1
        violations.extend(circuit_violations(circuit, config=config, translator=translator))

    recommendations: list[str] = []
    if not violations:
        recommendations.append(_tr(translator, "compliance.installation_compliant"))

    is_compliant = not any(v.severity == "error" for v in violations)
    logger.info(
        "Compliance check: %d circuits, %d violations, compliant=%s",
        count,
        len(violations),
        is_compliant,
    )
    return ComplianceResult(
        is_compliant=is_compliant,
        violations=tuple(violations),
        recommendations=tuple(recommendations),
    )
