"""
Renders the Data tab: JSON export/import of the application state and the
model disclosure.

Import is applied once per uploaded file (tracked by content digest) so a
file left in the uploader is not re-applied on every rerun.
"""
from __future__ import annotations

import hashlib
import logging

import streamlit as st

from app.session import set_state
from core.errors import ImportFailed
from core.state import AppState, export_state, import_state

logger = logging.getLogger(__name__)

EXPORT_FILE_NAME = "eco-credits-data.json"


def render(state: AppState) -> None:
    """Renders the data controls."""
    st.subheader("Advanced & data")

    with st.container(border=True):
        st.markdown("**Export**")
        st.download_button(
            "⬇ Export JSON",
            data=export_state(state),
            file_name=EXPORT_FILE_NAME,
            mime="application/json",
            use_container_width=True,
        )

    with st.container(border=True):
        st.markdown("**Import**")
        uploaded = st.file_uploader("Import JSON", type=["json"], label_visibility="collapsed")
        if uploaded is not None:
            payload = uploaded.getvalue()
            digest = hashlib.sha256(payload).hexdigest()
            if digest != st.session_state.get("last_import_digest"):
                st.session_state["last_import_digest"] = digest
                try:
                    new_state = import_state(state, payload)
                except ImportFailed as exc:
                    st.error(f"Import failed: {exc}")
                else:
                    logger.info("Imported state from %s", uploaded.name)
                    set_state(new_state)
                    st.rerun()

    with st.expander("Roadmap & model disclosure"):
        st.markdown(
            "- Connect to smart meter / utility APIs to replace tariff and grid factor with live values.\n"
            "- Pull live PV generation from inverter APIs.\n"
            "- Import EV trips to auto-calculate km/day.\n"
            "- Upload monthly CSVs to backfill historical savings."
        )
        st.caption(
            "Assumptions are editable. Figures are indicative only and not "
            "financial or regulatory advice."
        )
