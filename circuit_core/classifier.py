from __future__ import annotations

import logging

from .models import CircuitCategory, ElectricalElement

logger = logging.getLogger(__name__)

LIGHTING_TOKENS = ("light", "dcl")
OUTLET_TOKENS = ("outlet", "prise")
OUTLET_20A_TOKENS = ("20a", "cuisine")
HEATING_TOKENS = ("chauffage", "heating")

CATEGORY_PROPERTY = "circuit_category"


def _has_any(text: str, tokens: tuple[str, ...]) -> bool:
    return any(tok in text for tok in tokens)


def classify(element_type: object) -> CircuitCategory:
    """
    Map a free-form element type tag to its circuit category.

    Lighting tokens are checked before outlet tokens so compound names
    (e.g. "light_outlet") stay lighting. Unknown types fall back to
    SPECIALIZED; this never raises.
    """
    text = "" if element_type is None else str(element_type).lower()
    if _has_any(text, LIGHTING_TOKENS):
        return CircuitCategory.LIGHTING
    if _has_any(text, OUTLET_TOKENS):
        if _has_any(text, OUTLET_20A_TOKENS):
            return CircuitCategory.OUTLET_20A
        return CircuitCategory.OUTLET_16A
    if _has_any(text, HEATING_TOKENS):
        return CircuitCategory.SPECIALIZED
    logger.debug("Unrecognized element type %r, using specialized", element_type)
    return CircuitCategory.SPECIALIZED


def is_recognized_type(element_type: object) -> bool:
    text = "" if element_type is None else str(element_type).lower()
    return _has_any(text, LIGHTING_TOKENS + OUTLET_TOKENS + HEATING_TOKENS)


def classify_element(element: ElectricalElement) -> CircuitCategory:
    # An explicit category decided by the placement layer wins over the tag heuristic.
    tagged = element.properties.get(CATEGORY_PROPERTY)
    if tagged is not None:
        try:
            return CircuitCategory(str(tagged).strip().lower())
        except ValueError:
            logger.warning(
                "Element %s has invalid %s=%r, classifying by type",
                element.id,
                CATEGORY_PROPERTY,
                tagged,
            )
    return classify(element.type)
