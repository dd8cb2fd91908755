"""
Engine data model.

Elements come from the placement layer as plain dicts; circuits and compliance
results are immutable values built once grouping and calculation are done.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CircuitCategory(str, Enum):
    LIGHTING = "lighting"
    OUTLET_16A = "outlet_16a"
    OUTLET_20A = "outlet_20a"
    SPECIALIZED = "specialized"

    @property
    def kind(self) -> str:
        if self is CircuitCategory.LIGHTING:
            return "lighting"
        if self in (CircuitCategory.OUTLET_16A, CircuitCategory.OUTLET_20A):
            return "outlet"
        return "specialized"

    @property
    def label(self) -> str:
        return self.value[:1].upper() + self.value[1:]


# Fixed iteration order used when concatenating per-category circuits.
CATEGORY_ORDER: tuple[CircuitCategory, ...] = (
    CircuitCategory.LIGHTING,
    CircuitCategory.OUTLET_16A,
    CircuitCategory.OUTLET_20A,
    CircuitCategory.SPECIALIZED,
)

CIRCUIT_KINDS = ("lighting", "outlet", "specialized", "heating")
SEVERITIES = ("error", "warning", "info")


def _coerce_float(value: object, field_name: str, ctx: str) -> float:
    if value is None or isinstance(value, bool):
        raise ValueError(f"{field_name} is required for {ctx}")
    try:
        num = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} is not a number for {ctx}") from exc
    if not math.isfinite(num):
        raise ValueError(f"{field_name} must be finite for {ctx}")
    return num


@dataclass(frozen=True)
class Position:
    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class ElementMetadata:
    created_at: str
    updated_at: str
    version: str

    def to_dict(self) -> dict[str, str]:
        return {
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "version": self.version,
        }


@dataclass(frozen=True)
class ElectricalElement:
    id: str
    type: str
    position: Position = Position(0.0, 0.0)
    rotation: float = 0.0
    power: float = 0.0
    voltage: float = 230.0
    phase: int = 1
    properties: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    metadata: ElementMetadata | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ElectricalElement":
        """
        Build an element from the placement layer's record shape
        (camelCase keys as produced by the canvas, snake_case accepted too).
        """
        if not isinstance(data, dict):
            raise TypeError("element record must be a dict")
        element_id = str(data.get("id") or "").strip()
        if not element_id:
            raise ValueError("element id is required")
        ctx = f"element id={element_id}"

        pos_raw = data.get("position") or {}
        if not isinstance(pos_raw, dict):
            raise ValueError(f"position must be a mapping for {ctx}")
        position = Position(
            x=_coerce_float(pos_raw.get("x", 0.0), "position.x", ctx),
            y=_coerce_float(pos_raw.get("y", 0.0), "position.y", ctx),
        )

        phase_val = _coerce_float(data.get("phase", 1), "phase", ctx)
        if not phase_val.is_integer():
            raise ValueError(f"phase must be an integer for {ctx}")

        meta_raw = data.get("metadata")
        metadata = None
        if isinstance(meta_raw, dict):
            metadata = ElementMetadata(
                created_at=str(meta_raw.get("createdAt") or meta_raw.get("created_at") or ""),
                updated_at=str(meta_raw.get("updatedAt") or meta_raw.get("updated_at") or ""),
                version=str(meta_raw.get("version") or ""),
            )

        props = data.get("properties") or {}
        if not isinstance(props, dict):
            raise ValueError(f"properties must be a mapping for {ctx}")

        return cls(
            id=element_id,
            type=str(data.get("type") or ""),
            position=position,
            rotation=_coerce_float(data.get("rotation", 0.0), "rotation", ctx),
            power=_coerce_float(data.get("power", 0.0), "power", ctx),
            voltage=_coerce_float(data.get("voltage", 230.0), "voltage", ctx),
            phase=int(phase_val),
            properties=dict(props),
            metadata=metadata,
        )

    def copy(self) -> "ElectricalElement":
        return ElectricalElement(
            id=self.id,
            type=self.type,
            position=self.position,
            rotation=self.rotation,
            power=self.power,
            voltage=self.voltage,
            phase=self.phase,
            properties=dict(self.properties),
            metadata=self.metadata,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "position": self.position.to_dict(),
            "rotation": self.rotation,
            "power": self.power,
            "voltage": self.voltage,
            "phase": self.phase,
            "properties": dict(self.properties),
        }
        if self.metadata is not None:
            out["metadata"] = self.metadata.to_dict()
        return out


@dataclass(frozen=True)
class Protection:
    breaker: float
    differential: float
    cable_section: float

    def to_dict(self) -> dict[str, float]:
        return {
            "breaker": self.breaker,
            "differential": self.differential,
            "cableSection": self.cable_section,
        }


@dataclass(frozen=True)
class CircuitCalculations:
    total_power: float
    current: float
    voltage_drop: float
    is_compliant: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalPower": self.total_power,
            "current": self.current,
            "voltageDrop": self.voltage_drop,
            "isCompliant": self.is_compliant,
        }


@dataclass(frozen=True)
class Circuit:
    id: str
    name: str
    category: CircuitCategory
    elements: tuple[ElectricalElement, ...]
    protection: Protection
    calculations: CircuitCalculations

    @property
    def type(self) -> str:
        return self.category.kind

    @property
    def element_count(self) -> int:
        return len(self.elements)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "category": self.category.value,
            "elements": [el.to_dict() for el in self.elements],
            "protection": self.protection.to_dict(),
            "calculations": self.calculations.to_dict(),
        }


@dataclass(frozen=True)
class Violation:
    code: str
    severity: str
    message: str
    element: str | None = None
    circuit: str | None = None

    def __post_init__(self) -> None:
        if self.severity not in SEVERITIES:
            raise ValueError(f"severity must be one of {SEVERITIES}")

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "code": self.code,
            "severity": self.severity,
            "message": self.message,
        }
        if self.element is not None:
            out["element"] = self.element
        if self.circuit is not None:
            out["circuit"] = self.circuit
        return out


@dataclass(frozen=True)
class ComplianceResult:
    is_compliant: bool
    violations: tuple[Violation, ...] = ()
    recommendations: tuple[str, ...] = ()

    @property
    def errors(self) -> tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.severity == "error")

    @property
    def warnings(self) -> tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.severity == "warning")

    def to_dict(self) -> dict[str, Any]:
        return {
            "isCompliant": self.is_compliant,
            "violations": [v.to_dict() for v in self.violations],
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class ElectricalCalculations:
    circuits: tuple[Circuit, ...]
    total_power: float
    total_current: float
    power_factor: float
    weighted_power: float
    simultaneous_power: float
    compliance: ComplianceResult
    generated_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "circuits": [c.to_dict() for c in self.circuits],
            "totalPower": self.total_power,
            "totalCurrent": self.total_current,
            "powerFactor": self.power_factor,
            "weightedPower": self.weighted_power,
            "simultaneousPower": self.simultaneous_power,
            "compliance": self.compliance.to_dict(),
            "generatedAt": self.generated_at,
        }
