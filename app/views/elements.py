from __future__ import annotations

import json

import pandas as pd
import streamlit as st

from app.i18n import t
from app.validation import ELEMENT_COLUMNS, elements_to_frame
from circuit_core.models import ElectricalElement


def _load_uploaded(raw: bytes) -> pd.DataFrame:
    data = json.loads(raw.decode("utf-8"))
    if isinstance(data, dict):
        data = data.get("elements", [])
    if not isinstance(data, list):
        raise ValueError("expected a list of elements")
    return elements_to_frame([ElectricalElement.from_dict(item) for item in data])


def render(state: dict) -> None:
    st.header(t("elements.header"))
    st.caption(t("elements.caption"))

    uploaded = st.file_uploader(t("elements.load_json"), type=["json"])
    if uploaded is not None:
        try:
            state["elements_df"] = _load_uploaded(uploaded.getvalue())
        except (ValueError, TypeError) as exc:
            st.error(t("elements.load_failed", error=exc))

    edited = st.data_editor(
        state["elements_df"],
        num_rows="dynamic",
        use_container_width=True,
        column_order=ELEMENT_COLUMNS,
        key="elements_editor",
    )
    state["elements_df"] = edited


def render_validation(state: dict) -> None:
    validation = state.get("validation")
    if validation is not None:
        for msg in validation.errors:
            st.error(msg)
        for msg in validation.warnings:
            st.warning(msg)
