from __future__ import annotations

from typing import Any

from .models import Circuit, ComplianceResult, ElectricalCalculations

PAYLOAD_VERSION = "1.0"


def _circuit_payload(circuit: Circuit) -> dict[str, Any]:
    calc = circuit.calculations
    prot = circuit.protection
    return {
        "circuit_id": circuit.id,
        "name": circuit.name,
        "category": circuit.category.value,
        "type": circuit.type,
        "element_ids": [el.id for el in circuit.elements],
        "points": circuit.element_count,
        "protection": {
            "breaker_a": prot.breaker,
            "differential_ma": prot.differential,
            "cable_section_mm2": prot.cable_section,
        },
        "calc": {
            "power_w": calc.total_power,
            "current_a": calc.current,
            "du_pct": calc.voltage_drop,
            "is_compliant": calc.is_compliant,
        },
    }


def _compliance_payload(compliance: ComplianceResult) -> dict[str, Any]:
    return {
        "is_compliant": compliance.is_compliant,
        "violations": [v.to_dict() for v in compliance.violations],
        "recommendations": list(compliance.recommendations),
    }


def build_payload(calculations: ElectricalCalculations) -> dict[str, Any]:
    """JSON-ready document consumed by the schematic/report exporter."""
    if not isinstance(calculations, ElectricalCalculations):
        raise TypeError("calculations must be an ElectricalCalculations")
    return {
        "version": PAYLOAD_VERSION,
        "generated_at": calculations.generated_at,
        "summary": {
            "circuit_count": len(calculations.circuits),
            "total_power_w": calculations.total_power,
            "total_current_a": calculations.total_current,
            "power_factor": calculations.power_factor,
            "weighted_power_w": calculations.weighted_power,
            "simultaneous_power_w": calculations.simultaneous_power,
        },
        "circuits": [_circuit_payload(c) for c in calculations.circuits],
        "compliance": _compliance_payload(calculations.compliance),
    }
