from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from circuit_core.classifier import classify, classify_element, is_recognized_type
from circuit_core.models import CircuitCategory, ElectricalElement


@pytest.mark.parametrize(
    "element_type, expected",
    [
        ("light_ceiling", CircuitCategory.LIGHTING),
        ("DCL", CircuitCategory.LIGHTING),
        ("applique_dcl_mural", CircuitCategory.LIGHTING),
        ("outlet", CircuitCategory.OUTLET_16A),
        ("prise_2p_t", CircuitCategory.OUTLET_16A),
        ("outlet_20a", CircuitCategory.OUTLET_20A),
        ("prise_cuisine", CircuitCategory.OUTLET_20A),
        ("PRISE_20A", CircuitCategory.OUTLET_20A),
        ("chauffage_convecteur", CircuitCategory.SPECIALIZED),
        ("heating_panel", CircuitCategory.SPECIALIZED),
        ("four", CircuitCategory.SPECIALIZED),
        ("", CircuitCategory.SPECIALIZED),
    ],
)
def test_classify_priority_rules(element_type: str, expected: CircuitCategory) -> None:
    assert classify(element_type) is expected


def test_lighting_tokens_win_over_outlet_tokens() -> None:
    assert classify("light_outlet") is CircuitCategory.LIGHTING
    assert classify("prise_commandee_dcl") is CircuitCategory.LIGHTING


def test_classify_is_total_and_deterministic() -> None:
    samples = ["x", "Light", "prise", "outlet 20A cuisine", None, 42, "chauffage"]
    for sample in samples:
        first = classify(sample)
        assert isinstance(first, CircuitCategory)
        assert all(classify(sample) is first for _ in range(3))


def test_is_recognized_type() -> None:
    assert is_recognized_type("light")
    assert is_recognized_type("heating")
    assert not is_recognized_type("four")


def test_explicit_category_property_overrides_type() -> None:
    el = ElectricalElement(id="e1", type="light", properties={"circuit_category": "outlet_20a"})
    assert classify_element(el) is CircuitCategory.OUTLET_20A


def test_invalid_category_property_falls_back_to_type() -> None:
    el = ElectricalElement(id="e1", type="prise", properties={"circuit_category": "bogus"})
    assert classify_element(el) is CircuitCategory.OUTLET_16A
