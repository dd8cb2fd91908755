"""
Calculation service: public contract of the engine for the UI and exports.

Pipeline per call: classify -> group -> compute. The service holds no data
between calls; the only state is the initialized flag set by initialize().
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Sequence

from .classifier import classify_element
from .compliance import Translator, validate
from .errors import NotInitializedError, PipelineStageError
from .grouping import build_circuit, pack_partitioned, partition
from .limits import DEFAULT_CONFIG, EngineConfig
from .models import (
    Circuit,
    ComplianceResult,
    ElectricalCalculations,
    ElectricalElement,
)

logger = logging.getLogger(__name__)

STAGE_CLASSIFY = "classify"
STAGE_GROUP = "group"
STAGE_COMPUTE = "compute"

# Single-phase resistive load model.
POWER_FACTOR = 1.0


def _iso_utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class CalculationService:
    name = "CalculationService"

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        translator: Translator | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.translator = translator
        self.is_initialized = False

    def initialize(self) -> None:
        logger.info("Initializing %s", self.name)
        self.is_initialized = True

    def cleanup(self) -> None:
        logger.info("Cleaning up %s", self.name)
        self.is_initialized = False

    def _require_initialized(self) -> None:
        if not self.is_initialized:
            raise NotInitializedError(self.name)

    def calculate_circuits(self, elements: Sequence[ElectricalElement]) -> list[Circuit]:
        self._require_initialized()
        elements = list(elements)
        logger.info("Calculating circuits for %d elements", len(elements))

        stage = STAGE_CLASSIFY
        try:
            buckets = partition(elements, classifier=classify_element)

            stage = STAGE_GROUP
            packs = pack_partitioned(buckets, config=self.config)

            stage = STAGE_COMPUTE
            circuits = [
                build_circuit(category, pack, number, config=self.config)
                for category, number, pack in packs
            ]
        except Exception as exc:
            logger.error("Pipeline failed in %s stage: %s", stage, exc)
            raise PipelineStageError(stage, str(exc)) from exc

        logger.info("Generated %d circuits", len(circuits))
        return circuits

    def check_compliance(self, circuits: Iterable[Circuit]) -> ComplianceResult:
        return validate(circuits, config=self.config, translator=self.translator)

    def validate_compliance(self, circuits: Iterable[Circuit]) -> bool:
        return self.check_compliance(circuits).is_compliant

    def calculate_power(self, elements: Iterable[ElectricalElement]) -> float:
        return sum((el.power for el in elements), 0.0)

    def optimize_circuits(self, circuits: Sequence[Circuit]) -> list[Circuit]:
        # Extension point: no objective function is defined, circuits pass through unchanged.
        logger.info("Circuit optimization not implemented, returning input")
        return list(circuits)

    def weighted_power(self, circuits: Iterable[Circuit]) -> float:
        """Sum of circuit power weighted by each category's utilization coefficient Ku."""
        return sum(
            (
                c.calculations.total_power * self.config.limits_for(c.category).ku
                for c in circuits
            ),
            0.0,
        )

    def run(self, elements: Sequence[ElectricalElement]) -> ElectricalCalculations:
        circuits = self.calculate_circuits(elements)
        compliance = self.check_compliance(circuits)
        total = sum((c.calculations.total_power for c in circuits), 0.0)
        weighted = self.weighted_power(circuits)
        return ElectricalCalculations(
            circuits=tuple(circuits),
            total_power=total,
            total_current=total / self.config.nominal_voltage_v,
            power_factor=POWER_FACTOR,
            weighted_power=weighted,
            simultaneous_power=weighted * self.config.simultaneity,
            compliance=compliance,
            generated_at=_iso_utc_now(),
        )
