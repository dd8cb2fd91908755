from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Callable

import pandas as pd

from circuit_core.classifier import classify, is_recognized_type
from circuit_core.limits import DEFAULT_CONFIG, EngineConfig
from circuit_core.models import ElectricalElement

Translator = Callable[..., str]

ELEMENT_COLUMNS = ["id", "type", "x", "y", "rotation", "power", "voltage", "phase"]

_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,50}$")

# Default English strings for backward compatibility when translator is not provided.
_VALIDATION_EN = {
    "validation.id_required": "id is required",
    "validation.id_format": "id must be 1-50 chars of letters, digits, '_' or '-'",
    "validation.id_duplicate": "id {id} is used by another row",
    "validation.type_required": "type is required",
    "validation.field_number": "{field} must be a number",
    "validation.power_gte_zero": "power must be >= 0",
    "validation.voltage_positive": "voltage must be > 0",
    "validation.phase_one_three": "phase must be 1 or 3",
    "validation.type_fallback": "type '{type}' is not recognized, classified as specialized",
    "validation.power_over_limit": "power {power} W exceeds {category} limit {limit} W",
}


def _tr(translator: Translator | None, key: str, **kwargs: Any) -> str:
    if translator is None:
        raw = _VALIDATION_EN.get(key, key)
        return raw.format(**kwargs) if kwargs else raw
    return translator(key, **kwargs)


@dataclass(frozen=True)
class ValidationResult:
    errors: list[str]
    warnings: list[str]
    row_status: dict[int, str]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def is_finite(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    try:
        num = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(num)


def _is_blank(value: Any) -> bool:
    if value is None or value == "":
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def validate_element(
    data: dict[str, Any],
    *,
    translator: Translator | None = None,
) -> list[str]:
    """
    Errors for one element record (flat row or nested placement record).
    """
    errors: list[str] = []

    element_id = "" if _is_blank(data.get("id")) else str(data.get("id")).strip()
    if not element_id:
        errors.append(_tr(translator, "validation.id_required"))
    elif not _ID_RE.match(element_id):
        errors.append(_tr(translator, "validation.id_format"))

    if _is_blank(data.get("type")) or not str(data.get("type")).strip():
        errors.append(_tr(translator, "validation.type_required"))

    position = data.get("position")
    coords = position if isinstance(position, dict) else data
    for field in ("x", "y"):
        val = coords.get(field)
        if not _is_blank(val) and not is_finite(val):
            errors.append(_tr(translator, "validation.field_number", field=field))

    rotation = data.get("rotation")
    if not _is_blank(rotation) and not is_finite(rotation):
        errors.append(_tr(translator, "validation.field_number", field="rotation"))

    power = data.get("power")
    if _is_blank(power) or not is_finite(power):
        errors.append(_tr(translator, "validation.field_number", field="power"))
    elif float(power) < 0:
        errors.append(_tr(translator, "validation.power_gte_zero"))

    voltage = data.get("voltage")
    if not _is_blank(voltage):
        if not is_finite(voltage):
            errors.append(_tr(translator, "validation.field_number", field="voltage"))
        elif float(voltage) <= 0:
            errors.append(_tr(translator, "validation.voltage_positive"))

    phase = data.get("phase")
    if not _is_blank(phase):
        if not is_finite(phase) or float(phase) not in (1.0, 3.0):
            errors.append(_tr(translator, "validation.phase_one_three"))

    return errors


def _element_warnings(
    data: dict[str, Any],
    config: EngineConfig,
    translator: Translator | None,
) -> list[str]:
    warnings: list[str] = []
    element_type = str(data.get("type") or "").strip()
    if element_type and not is_recognized_type(element_type):
        warnings.append(_tr(translator, "validation.type_fallback", type=element_type))
    power = data.get("power")
    if is_finite(power):
        category = classify(element_type)
        limit = config.limits_for(category).max_power_w
        if float(power) > limit:
            warnings.append(
                _tr(
                    translator,
                    "validation.power_over_limit",
                    power=f"{float(power):g}",
                    category=category.value,
                    limit=f"{limit:g}",
                )
            )
    return warnings


def validate_element_rows(
    df: pd.DataFrame,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
    translator: Translator | None = None,
) -> ValidationResult:
    """
    Validates element rows as edited in the Elements table.

    Expects DataFrame with columns:
    id, type, x, y, rotation, power, voltage, phase
    """
    errors: list[str] = []
    warnings: list[str] = []
    statuses: dict[int, str] = {}
    seen_ids: set[str] = set()

    for idx, row in df.iterrows():
        data = row.to_dict()
        row_errors = validate_element(data, translator=translator)
        element_id = "" if _is_blank(data.get("id")) else str(data.get("id")).strip()
        label = element_id or f"row#{idx}"

        if element_id:
            if element_id in seen_ids:
                row_errors.append(_tr(translator, "validation.id_duplicate", id=element_id))
            seen_ids.add(element_id)

        if row_errors:
            errors.append(f"{label}: " + "; ".join(row_errors))
            statuses[idx] = "INVALID"
        else:
            statuses[idx] = "OK"

        row_warnings = _element_warnings(data, config, translator)
        if row_warnings:
            warnings.append(f"{label}: " + "; ".join(row_warnings))

    return ValidationResult(errors=errors, warnings=warnings, row_status=statuses)


def _row_value(row: dict[str, Any], key: str, default: Any) -> Any:
    val = row.get(key)
    return default if _is_blank(val) else val


def elements_from_frame(df: pd.DataFrame) -> list[ElectricalElement]:
    """Convert table rows (in table order) to engine elements. Rows must be valid."""
    elements: list[ElectricalElement] = []
    for _, row in df.iterrows():
        data = row.to_dict()
        elements.append(
            ElectricalElement.from_dict(
                {
                    "id": data.get("id"),
                    "type": data.get("type"),
                    "position": {
                        "x": _row_value(data, "x", 0.0),
                        "y": _row_value(data, "y", 0.0),
                    },
                    "rotation": _row_value(data, "rotation", 0.0),
                    "power": _row_value(data, "power", 0.0),
                    "voltage": _row_value(data, "voltage", 230.0),
                    "phase": _row_value(data, "phase", 1),
                }
            )
        )
    return elements


def elements_to_frame(elements: list[ElectricalElement]) -> pd.DataFrame:
    rows = [
        {
            "id": el.id,
            "type": el.type,
            "x": el.position.x,
            "y": el.position.y,
            "rotation": el.rotation,
            "power": el.power,
            "voltage": el.voltage,
            "phase": el.phase,
        }
        for el in elements
    ]
    return pd.DataFrame(rows, columns=ELEMENT_COLUMNS)
