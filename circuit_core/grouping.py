"""
Circuit grouping.

Sequential first-fit packing of elements into circuits, one category at a
time, in input order. An element is appended to the open circuit of its
category until adding it would exceed either the category's max points or
max power; the open circuit is then emitted and a new one starts with that
element. Packing is greedy and order-dependent; circuit names and numbering
follow from it.

An element above the category's max power on its own still forms a
one-element circuit; the violation is reported by the compliance stage.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Sequence

from .classifier import classify_element
from .electrical import compute_electrical
from .limits import DEFAULT_CONFIG, EngineConfig
from .models import (
    CATEGORY_ORDER,
    Circuit,
    CircuitCategory,
    ElectricalElement,
    Protection,
)

logger = logging.getLogger(__name__)

Classifier = Callable[[ElectricalElement], CircuitCategory]


def circuit_id(category: CircuitCategory, number: int) -> str:
    return f"circuit-{category.value}-{number}"


def circuit_name(category: CircuitCategory, number: int) -> str:
    return f"{category.label} {number}"


def build_circuit(
    category: CircuitCategory,
    elements: Sequence[ElectricalElement],
    number: int,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Circuit:
    """Copy members into an immutable circuit with protection and calculations filled in."""
    limits = config.limits_for(category)
    members = tuple(el.copy() for el in elements)
    calculations = compute_electrical(limits, members, limits.cable_section_mm2, config=config)
    if calculations.total_power > limits.max_power_w:
        logger.warning(
            "%s exceeds %s max power: %.1f W > %.1f W",
            circuit_name(category, number),
            category.value,
            calculations.total_power,
            limits.max_power_w,
        )
    circuit = Circuit(
        id=circuit_id(category, number),
        name=circuit_name(category, number),
        category=category,
        elements=members,
        protection=Protection(
            breaker=limits.breaker_a,
            differential=config.differential_ma,
            cable_section=limits.cable_section_mm2,
        ),
        calculations=calculations,
    )
    logger.debug(
        "Emitted %s: %d points, %.1f W",
        circuit.name,
        circuit.element_count,
        calculations.total_power,
    )
    return circuit


def pack_category(
    category: CircuitCategory,
    elements: Iterable[ElectricalElement],
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[list[ElectricalElement]]:
    """First-fit packing of one category's elements; returns member lists in order."""
    limits = config.limits_for(category)
    packs: list[list[ElectricalElement]] = []
    current: list[ElectricalElement] = []
    current_power = 0.0

    for element in elements:
        overflow = (
            len(current) >= limits.max_points
            or current_power + element.power > limits.max_power_w
        )
        if overflow and current:
            packs.append(current)
            current = []
            current_power = 0.0
        current.append(element)
        current_power += element.power

    if current:
        packs.append(current)
    return packs


def group_category(
    category: CircuitCategory,
    elements: Iterable[ElectricalElement],
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[Circuit]:
    packs = pack_category(category, elements, config=config)
    return [
        build_circuit(category, members, number, config=config)
        for number, members in enumerate(packs, start=1)
    ]


def partition(
    elements: Iterable[ElectricalElement],
    *,
    classifier: Classifier = classify_element,
) -> dict[CircuitCategory, list[ElectricalElement]]:
    """Split elements by category, keeping input order within each bucket."""
    buckets: dict[CircuitCategory, list[ElectricalElement]] = {c: [] for c in CATEGORY_ORDER}
    for element in elements:
        buckets[classifier(element)].append(element)
    return buckets


Pack = tuple[CircuitCategory, int, list[ElectricalElement]]


def pack_partitioned(
    buckets: dict[CircuitCategory, list[ElectricalElement]],
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[Pack]:
    """(category, circuit number, members) for every circuit, in category order."""
    packs: list[Pack] = []
    for category in CATEGORY_ORDER:
        members = buckets.get(category) or []
        if not members:
            continue
        for number, pack in enumerate(pack_category(category, members, config=config), start=1):
            packs.append((category, number, pack))
    return packs


def group_partitioned(
    buckets: dict[CircuitCategory, list[ElectricalElement]],
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[Circuit]:
    return [
        build_circuit(category, pack, number, config=config)
        for category, number, pack in pack_partitioned(buckets, config=config)
    ]


def group(
    elements: Sequence[ElectricalElement],
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[Circuit]:
    return group_partitioned(partition(elements), config=config)
