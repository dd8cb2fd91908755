"""
NF C 15-100 category limits and engine constants.

One EngineConfig instance is shared by grouping, electrical calculation and
compliance validation so the limit table cannot diverge between stages.
Defaults may be overridden from a JSON file (see load_config).
"""
from __future__ import annotations

import json
import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .errors import ConfigError
from .models import CircuitCategory

NOMINAL_VOLTAGE_V = 230.0
DEFAULT_DIFFERENTIAL_MA = 30.0
RHO_CU = 0.0225
ASSUMED_LENGTH_M = 20.0
DU_WARNING_PCT = 3.0
SIMULTANEITY_RESIDENTIAL = 0.7


@dataclass(frozen=True)
class CategoryLimits:
    max_points: int
    max_power_w: float
    breaker_a: float
    cable_section_mm2: float
    # Utilization coefficient Ku
    ku: float = 1.0

    def to_dict(self) -> dict[str, float]:
        return {
            "max_points": self.max_points,
            "max_power_w": self.max_power_w,
            "breaker_a": self.breaker_a,
            "cable_section_mm2": self.cable_section_mm2,
            "ku": self.ku,
        }


DEFAULT_CATEGORY_LIMITS: dict[CircuitCategory, CategoryLimits] = {
    CircuitCategory.LIGHTING: CategoryLimits(8, 2300.0, 10.0, 1.5, ku=1.0),
    CircuitCategory.OUTLET_16A: CategoryLimits(8, 3680.0, 16.0, 1.5, ku=0.2),
    CircuitCategory.OUTLET_20A: CategoryLimits(12, 4600.0, 20.0, 2.5, ku=0.5),
    # 32 A x 230 V
    CircuitCategory.SPECIALIZED: CategoryLimits(1, 7360.0, 32.0, 6.0, ku=0.8),
}


@dataclass(frozen=True)
class EngineConfig:
    # Stored as a read-only view; not part of the hash.
    limits: Mapping[CircuitCategory, CategoryLimits] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_LIMITS),
        hash=False,
    )
    nominal_voltage_v: float = NOMINAL_VOLTAGE_V
    differential_ma: float = DEFAULT_DIFFERENTIAL_MA
    resistivity: float = RHO_CU
    length_m: float = ASSUMED_LENGTH_M
    du_warning_pct: float = DU_WARNING_PCT
    simultaneity: float = SIMULTANEITY_RESIDENTIAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "limits", MappingProxyType(dict(self.limits)))
        missing = [c.value for c in CircuitCategory if c not in self.limits]
        if missing:
            raise ConfigError(f"limits missing for categories: {', '.join(missing)}")
        for category, lim in self.limits.items():
            if lim.max_points < 1:
                raise ConfigError(f"{category.value}.max_points must be >= 1")
            for name in ("max_power_w", "breaker_a", "cable_section_mm2"):
                val = getattr(lim, name)
                if not math.isfinite(val) or val <= 0:
                    raise ConfigError(f"{category.value}.{name} must be > 0")
            if not math.isfinite(lim.ku) or not 0 <= lim.ku <= 1:
                raise ConfigError(f"{category.value}.ku must be within [0, 1]")
        for name in ("nominal_voltage_v", "differential_ma", "resistivity", "length_m"):
            val = getattr(self, name)
            if not math.isfinite(val) or val <= 0:
                raise ConfigError(f"{name} must be > 0")
        if not math.isfinite(self.du_warning_pct) or self.du_warning_pct < 0:
            raise ConfigError("du_warning_pct must be >= 0")
        if not math.isfinite(self.simultaneity) or not 0 <= self.simultaneity <= 1:
            raise ConfigError("simultaneity must be within [0, 1]")

    def limits_for(self, category: CircuitCategory) -> CategoryLimits:
        return self.limits[category]

    def to_dict(self) -> dict[str, Any]:
        return {
            "limits": {c.value: lim.to_dict() for c, lim in self.limits.items()},
            "nominal_voltage_v": self.nominal_voltage_v,
            "differential_ma": self.differential_ma,
            "resistivity": self.resistivity,
            "length_m": self.length_m,
            "du_warning_pct": self.du_warning_pct,
            "simultaneity": self.simultaneity,
        }


DEFAULT_CONFIG = EngineConfig()

_SCALAR_KEYS = (
    "nominal_voltage_v",
    "differential_ma",
    "resistivity",
    "length_m",
    "du_warning_pct",
    "simultaneity",
)
_LIMIT_KEYS = ("max_points", "max_power_w", "breaker_a", "cable_section_mm2", "ku")


def _number(value: object, ctx: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{ctx} must be a number")
    num = float(value)
    if not math.isfinite(num):
        raise ConfigError(f"{ctx} must be finite")
    return num


def config_from_mapping(data: dict[str, Any], base: EngineConfig = DEFAULT_CONFIG) -> EngineConfig:
    if not isinstance(data, dict):
        raise ConfigError("config root must be an object")
    unknown = set(data) - set(_SCALAR_KEYS) - {"limits"}
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")

    overrides: dict[str, Any] = {}
    for key in _SCALAR_KEYS:
        if key in data:
            overrides[key] = _number(data[key], key)

    limits_raw = data.get("limits")
    if limits_raw is not None:
        if not isinstance(limits_raw, dict):
            raise ConfigError("limits must be an object")
        limits = dict(base.limits)
        for cat_key, lim_raw in limits_raw.items():
            try:
                category = CircuitCategory(cat_key)
            except ValueError as exc:
                raise ConfigError(f"unknown category in limits: {cat_key}") from exc
            if not isinstance(lim_raw, dict):
                raise ConfigError(f"limits.{cat_key} must be an object")
            bad = set(lim_raw) - set(_LIMIT_KEYS)
            if bad:
                raise ConfigError(f"unknown keys in limits.{cat_key}: {', '.join(sorted(bad))}")
            lim_overrides: dict[str, Any] = {}
            for key, val in lim_raw.items():
                num = _number(val, f"limits.{cat_key}.{key}")
                if key == "max_points":
                    if not num.is_integer():
                        raise ConfigError(f"limits.{cat_key}.max_points must be an integer")
                    lim_overrides[key] = int(num)
                else:
                    lim_overrides[key] = num
            limits[category] = replace(limits[category], **lim_overrides)
        overrides["limits"] = limits

    return replace(base, **overrides)


def load_config(path: str | Path | None) -> EngineConfig:
    """Read JSON overrides on top of DEFAULT_CONFIG; None returns the defaults."""
    if path is None:
        return DEFAULT_CONFIG
    config_path = Path(path)
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in {config_path}: {exc}") from exc
    return config_from_mapping(data)
