from __future__ import annotations

import csv
import io
import json

import streamlit as st

from app.i18n import t
from circuit_core.export_circuits_csv import CIRCUITS_CSV_HEADER, build_circuit_rows
from circuit_core.export_payload import build_payload
from circuit_core.models import ElectricalCalculations


def _csv_text(header: list[str], rows: list[list[str]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(header)
    writer.writerows(rows)
    return buf.getvalue()


def render(state: dict) -> None:
    st.header(t("export.header"))

    calculations: ElectricalCalculations | None = state.get("calculations")
    if calculations is None:
        st.warning(t("circuits.blocked"))
        return

    payload = build_payload(calculations)
    st.download_button(
        t("export.json"),
        data=json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
        file_name="circuits_payload.json",
        mime="application/json",
    )
    st.download_button(
        t("export.csv"),
        data=_csv_text(CIRCUITS_CSV_HEADER, build_circuit_rows(payload)),
        file_name="circuits.csv",
        mime="text/csv",
    )
    st.json(payload, expanded=False)
