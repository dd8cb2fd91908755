from __future__ import annotations

from typing import Callable

import streamlit as st

from circuit_core.models import ComplianceResult

_STATUS_KEYS = {
    "COMPLIANT": "status.compliant",
    "WARNINGS": "status.warnings",
    "NON_COMPLIANT": "status.non_compliant",
}


def compliance_status(result: ComplianceResult) -> str:
    if not result.is_compliant:
        return "NON_COMPLIANT"
    if result.violations:
        return "WARNINGS"
    return "COMPLIANT"


def _status_style(status: str) -> tuple[str, str]:
    """
    Returns (bg_color, fg_color) for a status pill.
    Colors are chosen to be readable in both Streamlit light/dark themes.
    """
    s = (status or "").upper().strip()
    if s == "COMPLIANT":
        return "#1f7a3a", "white"
    if s == "WARNINGS":
        return "#b45309", "white"
    if s == "NON_COMPLIANT":
        return "#b91c1c", "white"
    return "#374151", "white"


def status_chip(
    label: str,
    result: ComplianceResult,
    *,
    show_details: bool = True,
    t: Callable[..., str] | None = None,
) -> None:
    """
    Compact compliance chip with optional details popover (raw result JSON).
    When t is provided, status is localized.
    """
    status = compliance_status(result)
    bg, fg = _status_style(status)
    status_label = t(_STATUS_KEYS[status]) if t else status

    cols = st.columns([0, 1], vertical_alignment="center")
    with cols[0]:
        st.markdown(
            f"""
            <span style="
              display:inline-block;
              padding:0.15rem 0.55rem;
              border-radius:999px;
              background:{bg};
              color:{fg};
              font-weight:600;
              font-size:0.85rem;
              line-height:1.4;
              white-space:nowrap;
            ">{label}: {status_label}</span>
            """,
            unsafe_allow_html=True,
        )
    with cols[1]:
        if show_details:
            with st.popover("Details"):
                st.json(result.to_dict())
