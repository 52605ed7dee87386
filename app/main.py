# ═══════════════════════════════════════════════════════════════════════════════
# EcoCredits Platform — Streamlit Application Entry Point
# © 2026 Aparajita Parihar. All rights reserved.
#
# Presentation only: every figure shown here comes from the pure engine in
# core/. The engine state is recomputed from scratch on each rerun.
#
# Run:  streamlit run streamlit_app.py
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import dataclasses
import os
import sys

from dotenv import load_dotenv
# Load .env from project root (parent directory of app/)
_env_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env")
load_dotenv(_env_path)

import streamlit as st

# ─────────────────────────────────────────────────────────────────────────────
# PATH SETUP — Ensure core and config modules are accessible
# ─────────────────────────────────────────────────────────────────────────────
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from app.session import get_state, init_session, persist_state, set_state
from app.tabs import dashboard, data, devices, email_footprint, trading
from app.utils import keep_unless_edited, widget_value
from config.countries import COUNTRIES, supported_countries
from core.state import AppState, snapshot, state_parameters, switch_country

# ─────────────────────────────────────────────────────────────────────────────
# PAGE CONFIGURATION
# ─────────────────────────────────────────────────────────────────────────────
st.set_page_config(
    page_title   = "EcoCredits Visualiser",
    page_icon    = "🌿",
    layout       = "wide",
    initial_sidebar_state = "expanded"
)

# ─────────────────────────────────────────────────────────────────────────────
# CSS BLOCK
# ─────────────────────────────────────────────────────────────────────────────
st.markdown("""
<style>
[data-testid="stAppViewContainer"] > .main { background: #F0F7F4; }
.kpi-card { background: #ffffff; border-radius: 8px; padding: 18px 20px 14px; border: 1px solid #E0EBF4; border-top: 3px solid #1DB87A; box-shadow: 0 2px 8px rgba(7,26,47,.05); height: 100%; }
.kpi-card.accent-teal { border-top-color: #00C2A8; }
.kpi-card.accent-gold { border-top-color: #F0B429; }
.kpi-label { font-size: 0.78rem; font-weight: 700; letter-spacing: 1px; text-transform: uppercase; color: #3A576B; margin-bottom: 6px; }
.kpi-value { font-size: 1.6rem; font-weight: 700; color: #071A2F; line-height: 1.1; }
.kpi-sub { font-size: 0.78rem; color: #5A7A90; margin-top: 2px; }
</style>
""", unsafe_allow_html=True)


# ─────────────────────────────────────────────────────────────────────────────
# SIDEBAR — country, tariff and grid emission factor
# ─────────────────────────────────────────────────────────────────────────────
# Widget ranges. Imported values outside them are kept, only the display is clamped.
TARIFF_MAX = 100.0
EMISSION_FACTOR_MAX = 5.0


def _render_controls(state: AppState) -> AppState:
    with st.sidebar:
        st.markdown("## 🌿 EcoCredits")
        st.caption("Track daily energy savings and carbon credit impact.")
        st.markdown("---")

        codes = supported_countries()
        code = st.selectbox(
            "Country", codes, index=codes.index(state.country),
            format_func=lambda c: COUNTRIES[c].name,
        )
        if code != state.country:
            # Switching country resets tariff and emission factor.
            set_state(switch_country(state, code))
            st.rerun()

        shown_tariff = widget_value(state.tariff, 0.0, 0.0, TARIFF_MAX)
        tariff = st.number_input(
            f"Electricity tariff ({COUNTRIES[state.country].currency_symbol}/kWh)",
            min_value=0.0, max_value=TARIFF_MAX, value=shown_tariff, step=0.01,
        )
        tariff = keep_unless_edited(tariff, shown_tariff, state.tariff)

        shown_ef = widget_value(state.emission_factor, 0.0, 0.0, EMISSION_FACTOR_MAX)
        emission_factor = st.number_input(
            "Grid emission factor (kg CO₂e/kWh)",
            min_value=0.0, max_value=EMISSION_FACTOR_MAX, value=shown_ef, step=0.01,
        )
        emission_factor = keep_unless_edited(emission_factor, shown_ef, state.emission_factor)
        if tariff != state.tariff or emission_factor != state.emission_factor:
            state = dataclasses.replace(state, tariff=tariff, emission_factor=emission_factor)
            set_state(state)
    return state


def run() -> None:
    init_session()
    state = _render_controls(get_state())

    st.markdown("### Eco credits visualiser")
    tab_dash, tab_dev, tab_mail, tab_trade, tab_data = st.tabs(
        ["📊 Dashboard", "🔌 Devices", "✉️ Email", "🪙 Trading", "⚙️ Data"]
    )

    # Email edits feed the same rerun's snapshot, so render that tab's form
    # before computing figures for the others.
    with tab_mail:
        email_footprint.render(state)
    state = get_state()

    params = state_parameters(state)
    snap = snapshot(state)

    with tab_dash:
        dashboard.render(state, snap, params)
    with tab_dev:
        devices.render(state, snap, params)
    with tab_trade:
        trading.render(snap)
    with tab_data:
        data.render(state)

    st.markdown(
        "<div style='text-align:center;font-size:0.75rem;color:#5A7A90;margin-top:32px;'>"
        "Figures are indicative only · Make it yours and plug in real data later."
        "</div>",
        unsafe_allow_html=True,
    )

    # Keep the state in the page URL so a browser reload restores it.
    persist_state(get_state())


run()
