"""
Renders the Devices tab: the device table with per-row delete and the
add-device form.

Inputs come from bounded Streamlit widgets, so values handed to the engine
are always finite.
"""
from __future__ import annotations

from datetime import date

import pandas as pd
import streamlit as st

from app.session import set_state
from app.utils import device_label, format_currency, nice_number
from config.constants import (
    DEFAULT_EV_KWH_PER_KM,
    DEFAULT_GEYSER_KWH_PER_LITRE_PER_DAY,
    DEFAULT_ICE_KG_PER_KM,
    DEFAULT_ICE_L_PER_100KM,
    DEFAULT_PERFORMANCE_RATIO,
    DEFAULT_PV_SELF_CONSUMPTION,
    DEVICE_EV,
    DEVICE_LABELS,
    DEVICE_SOLAR,
    DEVICE_SOLAR_GEYSER,
)
from core.models import (
    CountryParameters,
    Device,
    EVConfig,
    PortfolioSnapshot,
    SolarConfig,
    SolarGeyserConfig,
)
from core.state import AppState, add_device, new_device_id, remove_device


def _device_table(state: AppState, snap: PortfolioSnapshot, params: CountryParameters) -> pd.DataFrame:
    installed = {d.id: d.install_date for d in state.devices}
    return pd.DataFrame([
        {
            "Type": device_label(x.device_type),
            "Name": x.name,
            "Installed": installed.get(x.device_id),
            "kWh/day": nice_number(x.daily.daily_energy_kwh),
            "kg CO₂e/day": nice_number(x.daily.daily_kg_avoided),
            "Saved/day": format_currency(x.daily.daily_money_saved, params),
        }
        for x in snap.per_device
    ])


def _config_inputs(device_type: str, params: CountryParameters):
    if device_type == DEVICE_SOLAR:
        c1, c2 = st.columns(2)
        capacity = c1.number_input("Capacity (kW)", 0.0, 1000.0, 5.0, step=0.1)
        insolation = c2.number_input(
            "Insolation (kWh/kW/day)", 0.0, 12.0,
            float(params.solar_yield_kwh_per_kw_per_day), step=0.1,
        )
        ratio = c1.number_input("Performance ratio", 0.0, 1.0, DEFAULT_PERFORMANCE_RATIO, step=0.01)
        share = c2.slider("Self-consumption (%)", 0, 100, int(round(DEFAULT_PV_SELF_CONSUMPTION * 100)))
        return SolarConfig(
            capacity_kw=capacity,
            insolation_kwh_per_kw_per_day=insolation,
            performance_ratio=ratio,
            self_consumption_fraction=share / 100.0,
        )
    if device_type == DEVICE_EV:
        c1, c2 = st.columns(2)
        km = c1.number_input("Km driven per day", 0.0, 2000.0, 30.0, step=1.0)
        kwh_per_km = c2.number_input("EV efficiency (kWh/km)", 0.0, 2.0, DEFAULT_EV_KWH_PER_KM, step=0.01)
        ice_kg = c1.number_input(
            "ICE emissions (kg/km)", 0.0, 2.0, DEFAULT_ICE_KG_PER_KM, step=0.001, format="%.3f"
        )
        ice_l = c2.number_input("ICE fuel economy (L/100km)", 0.0, 50.0, DEFAULT_ICE_L_PER_100KM, step=0.1)
        return EVConfig(
            km_per_day=km,
            ev_kwh_per_km=kwh_per_km,
            ice_kg_per_km=ice_kg,
            ice_litres_per_100km=ice_l,
        )
    c1, c2 = st.columns(2)
    tank = c1.number_input("Tank size (litres)", 0.0, 5000.0, 200.0, step=10.0)
    rate = c2.number_input(
        "kWh saved per litre per day", 0.0, 1.0,
        DEFAULT_GEYSER_KWH_PER_LITRE_PER_DAY, step=0.001, format="%.3f",
    )
    return SolarGeyserConfig(tank_litres=tank, kwh_saved_per_litre_per_day=rate)


def _render_add_form(state: AppState, params: CountryParameters) -> None:
    with st.expander("➕ Add device", expanded=not state.devices):
        device_type = st.selectbox(
            "Type",
            [DEVICE_SOLAR, DEVICE_EV, DEVICE_SOLAR_GEYSER],
            format_func=lambda t: DEVICE_LABELS[t],
            key="add_device_type",
        )
        with st.form("add_device_form", clear_on_submit=True):
            c1, c2 = st.columns(2)
            name = c1.text_input("Name", placeholder="My rooftop array / Model Y / 200L geyser")
            install_date = c2.date_input("Install date", value=date.today(), max_value=date.today())
            config = _config_inputs(device_type, params)
            if st.form_submit_button("🌿 Add", type="primary"):
                device = Device(
                    id=new_device_id(),
                    name=name.strip() or DEVICE_LABELS[device_type],
                    install_date=install_date,
                    config=config,
                )
                set_state(add_device(state, device))
                st.rerun()


def render(state: AppState, snap: PortfolioSnapshot, params: CountryParameters) -> None:
    """Renders the Devices tab content."""
    st.subheader("Devices")
    st.caption("Add solar, EV, or a solar geyser. We estimate daily kWh, CO₂e avoided, and money saved.")

    _render_add_form(state, params)

    if not state.devices:
        st.info("No devices yet. Open **Add device** to get started.")
        return

    st.dataframe(_device_table(state, snap, params), use_container_width=True, hide_index=True)

    with st.container(border=True):
        st.markdown("**Remove a device**")
        names = {d.id: f"{d.name} ({device_label(d.type)})" for d in state.devices}
        c1, c2 = st.columns([3, 1])
        target = c1.selectbox(
            "Device", list(names), format_func=names.get, label_visibility="collapsed",
        )
        if c2.button("🗑 Remove", use_container_width=True):
            set_state(remove_device(state, target))
            st.rerun()
