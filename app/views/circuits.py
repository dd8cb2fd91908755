from __future__ import annotations

import pandas as pd
import streamlit as st

from app.i18n import t
from app.ui_components import status_chip
from circuit_core.models import ElectricalCalculations


def circuits_frame(calculations: ElectricalCalculations) -> pd.DataFrame:
    rows = []
    for c in calculations.circuits:
        rows.append(
            {
                "name": c.name,
                "category": c.category.value,
                "points": c.element_count,
                "power_w": c.calculations.total_power,
                "current_a": round(c.calculations.current, 2),
                "du_pct": round(c.calculations.voltage_drop, 2),
                "breaker_a": c.protection.breaker,
                "diff_ma": c.protection.differential,
                "section_mm2": c.protection.cable_section,
                "compliant": c.calculations.is_compliant,
                "elements": ", ".join(el.id for el in c.elements),
            }
        )
    return pd.DataFrame(rows)


def render(state: dict) -> None:
    st.header(t("circuits.header"))

    calculations: ElectricalCalculations | None = state.get("calculations")
    if calculations is None:
        st.warning(t("circuits.blocked"))
        return

    status_chip(t("chips.installation"), calculations.compliance, t=t)
    st.write(
        t(
            "circuits.summary",
            count=len(calculations.circuits),
            power=f"{calculations.total_power:g}",
            current=f"{calculations.total_current:.1f}",
        )
    )

    if not calculations.circuits:
        st.info(t("circuits.empty"))
    else:
        st.dataframe(circuits_frame(calculations), use_container_width=True, hide_index=True)

    compliance = calculations.compliance
    if compliance.violations:
        st.subheader(t("circuits.violations"))
        for v in compliance.violations:
            line = f"`{v.code}` {v.message}"
            if v.severity == "error":
                st.error(line)
            else:
                st.warning(line)
    if compliance.recommendations:
        st.subheader(t("circuits.recommendations"))
        for rec in compliance.recommendations:
            st.success(rec)
