from __future__ import annotations

import math
from typing import Iterable

from .limits import DEFAULT_CONFIG, CategoryLimits, EngineConfig
from .models import Circuit, CircuitCalculations, ElectricalElement

# Factor 2: outgoing and return conductor.
ROUND_TRIP = 2.0


def _check_number(value: float, name: str) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{name} must be a number")
    num = float(value)
    if math.isnan(num) or math.isinf(num):
        raise ValueError(f"{name} must be finite")
    return num


def total_power(elements: Iterable[ElectricalElement]) -> float:
    return sum((el.power for el in elements), 0.0)


def current_a(power_w: float, *, config: EngineConfig = DEFAULT_CONFIG) -> float:
    power = _check_number(power_w, "power_w")
    return power / config.nominal_voltage_v


def voltage_drop_pct(
    i_calc_a: float,
    s_mm2: float,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    """
    Simplified single-conductor drop over the assumed run length:
    (rho / s * L * I * 2) / U * 100, evaluated in exactly this order.
    """
    i_val = _check_number(i_calc_a, "i_calc_a")
    s_val = _check_number(s_mm2, "s_mm2")
    if s_val <= 0:
        raise ValueError("s_mm2 must be > 0")
    resistance = config.resistivity / s_val
    return (resistance * config.length_m * i_val * ROUND_TRIP) / config.nominal_voltage_v * 100


def is_circuit_compliant(
    limits: CategoryLimits,
    element_count: int,
    power_w: float,
    i_calc_a: float,
) -> bool:
    return (
        element_count <= limits.max_points
        and power_w <= limits.max_power_w
        and i_calc_a <= limits.breaker_a
    )


def compute_electrical(
    limits: CategoryLimits,
    elements: tuple[ElectricalElement, ...],
    cable_section_mm2: float,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> CircuitCalculations:
    power = total_power(elements)
    current = current_a(power, config=config)
    return CircuitCalculations(
        total_power=power,
        current=current,
        voltage_drop=voltage_drop_pct(current, cable_section_mm2, config=config),
        is_compliant=is_circuit_compliant(limits, len(elements), power, current),
    )


def compute_circuit_electrical(
    circuit: Circuit,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> CircuitCalculations:
    return compute_electrical(
        config.limits_for(circuit.category),
        circuit.elements,
        circuit.protection.cable_section,
        config=config,
    )
