"""
circuit_core: NF C 15-100 circuit grouping and compliance engine.

- classification of placed elements into circuit categories
- first-fit grouping into circuits under per-category limits
- power / current / voltage drop per circuit
- compliance verdict with structured violations

Rendering, persistence and pricing live outside this package: it only
consumes ElectricalElement records and returns Circuit / ComplianceResult values.
"""

from .classifier import classify, classify_element
from .compliance import validate
from .electrical import compute_circuit_electrical, current_a, voltage_drop_pct
from .errors import CircuitCoreError, ConfigError, NotInitializedError, PipelineStageError
from .grouping import group, group_category
from .limits import DEFAULT_CATEGORY_LIMITS, DEFAULT_CONFIG, CategoryLimits, EngineConfig, load_config
from .models import (
    Circuit,
    CircuitCalculations,
    CircuitCategory,
    ComplianceResult,
    ElectricalCalculations,
    ElectricalElement,
    Position,
    Protection,
    Violation,
)
from .service import CalculationService

__all__ = [
    "CalculationService",
    "CategoryLimits",
    "Circuit",
    "CircuitCalculations",
    "CircuitCategory",
    "CircuitCoreError",
    "ComplianceResult",
    "ConfigError",
    "DEFAULT_CATEGORY_LIMITS",
    "DEFAULT_CONFIG",
    "ElectricalCalculations",
    "ElectricalElement",
    "EngineConfig",
    "NotInitializedError",
    "PipelineStageError",
    "Position",
    "Protection",
    "Violation",
    "classify",
    "classify_element",
    "compute_circuit_electrical",
    "current_a",
    "group",
    "group_category",
    "load_config",
    "validate",
    "voltage_drop_pct",
]
