from __future__ import annotations

import logging
import sys
from pathlib import Path

import pandas as pd
import streamlit as st

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.i18n import LANGUAGES, t, translate  # noqa: E402
from app.validation import (  # noqa: E402
    ELEMENT_COLUMNS,
    elements_from_frame,
    validate_element_rows,
)
from app.views import circuits, elements, export  # noqa: E402
from circuit_core import CalculationService, CircuitCoreError  # noqa: E402

logger = logging.getLogger(__name__)


def _init_state() -> None:
    state = st.session_state
    state.setdefault("lang", "EN")
    state.setdefault("elements_df", pd.DataFrame(columns=ELEMENT_COLUMNS))
    state.setdefault("validation", None)
    state.setdefault("calculations", None)


def _recalculate(state) -> None:
    lang = state.get("lang", "EN")

    def tr(key: str, **kwargs) -> str:
        return translate(lang, key, **kwargs)

    df = state["elements_df"].dropna(how="all")
    validation = validate_element_rows(df, translator=tr)
    state["validation"] = validation
    state["calculations"] = None
    if validation.has_errors:
        return

    service = CalculationService(translator=tr)
    service.initialize()
    try:
        state["calculations"] = service.run(elements_from_frame(df))
    except CircuitCoreError as exc:
        logger.exception("Calculation failed")
        st.error(str(exc))
    finally:
        service.cleanup()


def _total_power(state) -> float:
    # Quick total without running the grouping pipeline.
    validation = state.get("validation")
    if validation is None or validation.has_errors:
        return 0.0
    df = state["elements_df"].dropna(how="all")
    return CalculationService().calculate_power(elements_from_frame(df))


def main() -> None:
    st.set_page_config(page_title="NF C 15-100", layout="wide")
    _init_state()
    state = st.session_state

    with st.sidebar:
        st.title(t("app.title"))
        st.radio(t("sidebar.language"), list(LANGUAGES), key="lang", horizontal=True)
        page = st.radio(
            t("nav.title"),
            ["elements", "circuits", "export"],
            format_func=lambda p: t(f"nav.{p}"),
        )

    if page == "elements":
        elements.render(state)
    _recalculate(state)

    if page == "elements":
        elements.render_validation(state)
        st.caption(t("elements.total_power", power=f"{_total_power(state):g}"))
    elif page == "circuits":
        circuits.render(state)
    elif page == "export":
        export.render(state)


if __name__ == "__main__":
    main()
