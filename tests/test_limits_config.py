from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from circuit_core.errors import ConfigError
from circuit_core.limits import (
    DEFAULT_CATEGORY_LIMITS,
    DEFAULT_CONFIG,
    CategoryLimits,
    EngineConfig,
    config_from_mapping,
    load_config,
)
from circuit_core.models import CircuitCategory


def test_default_limit_table() -> None:
    lighting = DEFAULT_CATEGORY_LIMITS[CircuitCategory.LIGHTING]
    assert (lighting.max_points, lighting.max_power_w, lighting.breaker_a, lighting.cable_section_mm2) == (
        8,
        2300.0,
        10.0,
        1.5,
    )
    o16 = DEFAULT_CATEGORY_LIMITS[CircuitCategory.OUTLET_16A]
    assert (o16.max_points, o16.max_power_w, o16.breaker_a, o16.cable_section_mm2) == (8, 3680.0, 16.0, 1.5)
    o20 = DEFAULT_CATEGORY_LIMITS[CircuitCategory.OUTLET_20A]
    assert (o20.max_points, o20.max_power_w, o20.breaker_a, o20.cable_section_mm2) == (12, 4600.0, 20.0, 2.5)
    specialized = DEFAULT_CATEGORY_LIMITS[CircuitCategory.SPECIALIZED]
    assert (specialized.max_points, specialized.breaker_a, specialized.cable_section_mm2) == (1, 32.0, 6.0)


def test_default_constants() -> None:
    assert DEFAULT_CONFIG.nominal_voltage_v == 230.0
    assert DEFAULT_CONFIG.differential_ma == 30.0
    assert DEFAULT_CONFIG.resistivity == 0.0225
    assert DEFAULT_CONFIG.length_m == 20.0
    assert DEFAULT_CONFIG.du_warning_pct == 3.0


def test_load_config_none_returns_defaults() -> None:
    assert load_config(None) is DEFAULT_CONFIG


def test_load_config_overrides(tmp_path: Path) -> None:
    path = tmp_path / "limits.json"
    path.write_text(
        json.dumps({"length_m": 30, "limits": {"lighting": {"max_points": 6}}}),
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.length_m == 30.0
    assert cfg.limits_for(CircuitCategory.LIGHTING).max_points == 6
    assert cfg.limits_for(CircuitCategory.LIGHTING).breaker_a == 10.0
    assert cfg.limits_for(CircuitCategory.OUTLET_16A) == DEFAULT_CATEGORY_LIMITS[CircuitCategory.OUTLET_16A]
    # Defaults are untouched.
    assert DEFAULT_CONFIG.limits_for(CircuitCategory.LIGHTING).max_points == 8


@pytest.mark.parametrize(
    "data",
    [
        {"unknown": 1},
        {"length_m": "20"},
        {"length_m": 0},
        {"limits": {"garage": {}}},
        {"limits": {"lighting": {"max_points": 2.5}}},
        {"limits": {"lighting": {"colour": "red"}}},
        {"limits": {"lighting": {"breaker_a": -1}}},
        {"du_warning_pct": float("nan")},
        {"du_warning_pct": -1},
        {"differential_ma": -30},
        {"differential_ma": 0},
        {"simultaneity": 1.5},
        {"limits": {"lighting": {"ku": float("nan")}}},
        {"limits": {"lighting": {"ku": 1.2}}},
        {"limits": {"outlet_16a": {"max_power_w": float("inf")}}},
    ],
)
def test_invalid_config_is_rejected(data: dict) -> None:
    with pytest.raises(ConfigError):
        config_from_mapping(data)


def test_load_config_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_category_is_rejected() -> None:
    limits = dict(DEFAULT_CATEGORY_LIMITS)
    del limits[CircuitCategory.OUTLET_20A]
    with pytest.raises(ConfigError):
        EngineConfig(limits=limits)


def test_load_config_rejects_nan_literal(tmp_path: Path) -> None:
    # json.loads accepts the bare NaN token.
    path = tmp_path / "nan.json"
    path.write_text('{"du_warning_pct": NaN}', encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_boundary_values_are_accepted() -> None:
    cfg = config_from_mapping(
        {"du_warning_pct": 0, "simultaneity": 1, "limits": {"outlet_16a": {"ku": 0}}}
    )
    assert cfg.du_warning_pct == 0.0
    assert cfg.simultaneity == 1.0
    assert cfg.limits_for(CircuitCategory.OUTLET_16A).ku == 0.0


def test_limits_are_read_only() -> None:
    with pytest.raises(TypeError):
        DEFAULT_CONFIG.limits[CircuitCategory.LIGHTING] = CategoryLimits(1, 1.0, 1.0, 1.0)
    assert DEFAULT_CONFIG.limits_for(CircuitCategory.LIGHTING).max_points == 8


def test_config_does_not_share_caller_mapping() -> None:
    limits = dict(DEFAULT_CATEGORY_LIMITS)
    cfg = EngineConfig(limits=limits)
    limits[CircuitCategory.LIGHTING] = CategoryLimits(1, 1.0, 1.0, 1.0)
    assert cfg.limits_for(CircuitCategory.LIGHTING).max_points == 8


def test_config_is_hashable() -> None:
    assert hash(DEFAULT_CONFIG) == hash(EngineConfig())
    assert config_from_mapping({}) == DEFAULT_CONFIG
