"""
Renders the Dashboard tab.

KPI cards (grid factor, daily net, daily savings, credit progress), the
12-month projection line chart, the per-source savings breakdown, the mix
pie chart, and since-install cumulative totals.
"""
from __future__ import annotations

from datetime import date

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from app.utils import format_currency, format_kg, nice_number
from core.impact import aggregate_cumulative
from core.models import CountryParameters, PortfolioSnapshot
from core.portfolio import breakdown, credit_progress, mix, unhandled_devices
from core.projection import project
from core.state import AppState

CHART_LAYOUT = dict(
    plot_bgcolor="rgba(0,0,0,0)",
    paper_bgcolor="rgba(0,0,0,0)",
    font=dict(family="Nunito Sans, sans-serif", size=11, color="#071A2F"),
    margin=dict(t=20, b=10, l=0, r=0),
    height=300,
    yaxis=dict(gridcolor="#E8EEF4", zerolinecolor="#D0DAE4", tickfont=dict(size=10)),
    xaxis=dict(tickfont=dict(size=10)),
)


def _card(label: str, value: str, subtext: str, accent_class: str = "") -> None:
    st.markdown(
        f'<div class="kpi-card {accent_class}">'
        f'<div class="kpi-label">{label}</div>'
        f'<div class="kpi-value">{value}</div>'
        f'<div class="kpi-sub">{subtext}</div>'
        f"</div>",
        unsafe_allow_html=True,
    )


def _render_kpis(state: AppState, snap: PortfolioSnapshot, params: CountryParameters) -> None:
    progress = credit_progress(snap)
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        _card("Grid EF", f"{nice_number(state.emission_factor)} kg/kWh", params.name)
    with k2:
        _card(
            "Daily Net",
            format_kg(snap.net_kg_per_day),
            f"{nice_number(snap.total_kg_avoided)} saved − "
            f"{nice_number(snap.email_kg_per_day)} email",
            "accent-teal",
        )
    with k3:
        _card("Daily Savings", format_currency(snap.total_money_saved, params),
              f"{nice_number(snap.total_energy_kwh)} kWh/day")
    with k4:
        _card("Credit Progress", f"{nice_number(progress.daily_tonnes)} t/day",
              f"{progress.progress_pct:.1f}% of 1 tCO₂e per day", "accent-gold")
        st.progress(int(round(progress.progress_pct)))


def _projection_chart(snap: PortfolioSnapshot) -> go.Figure:
    df = pd.DataFrame([p.as_row() for p in project(snap, date.today())])
    fig = go.Figure()
    for column, colour in (("Saved", "#1DB87A"), ("Email", "#E84C4C"), ("Net", "#00C2A8")):
        fig.add_trace(go.Scatter(
            x=df["Month"], y=df[column].round(2), name=column,
            mode="lines+markers", line=dict(width=2, color=colour),
        ))
    fig.update_layout(**CHART_LAYOUT, showlegend=True,
                      legend=dict(orientation="h", yanchor="bottom", y=1.02, x=0))
    fig.update_yaxes(title="kg CO₂e / month")
    return fig


def _breakdown_chart(snap: PortfolioSnapshot) -> go.Figure:
    entries = breakdown(snap)
    fig = go.Figure(go.Bar(
        x=[e.name for e in entries],
        y=[nice_number(e.kg_per_day) for e in entries],
        marker_color=["#1DB87A" if e.kg_per_day >= 0 else "#E84C4C" for e in entries],
    ))
    fig.update_layout(**CHART_LAYOUT, showlegend=False)
    fig.update_yaxes(title="kg CO₂e / day")
    return fig


def _mix_chart(snap: PortfolioSnapshot) -> go.Figure:
    entries = mix(snap)
    fig = go.Figure(go.Pie(
        labels=[e.name for e in entries],
        values=[e.kg_per_day for e in entries],
        hole=0.35,
    ))
    fig.update_layout(**{k: v for k, v in CHART_LAYOUT.items() if k not in ("xaxis", "yaxis")})
    return fig


def render(state: AppState, snap: PortfolioSnapshot, params: CountryParameters) -> None:
    """Renders the dashboard tab content."""
    _render_kpis(state, snap, params)

    skipped = unhandled_devices(snap)
    if skipped:
        st.warning(
            f"{len(skipped)} device(s) have an unrecognised type and are counted "
            "as zero impact. Re-add them to include their savings."
        )

    st.markdown("<div style='height:12px;'></div>", unsafe_allow_html=True)
    left, right = st.columns([2, 1])

    with left:
        with st.container(border=True):
            st.markdown("**Projections — next 12 months (monthly totals)**")
            st.caption("Assumes today's devices, tariff and grid factor stay unchanged.")
            st.plotly_chart(_projection_chart(snap), use_container_width=True)

        with st.container(border=True):
            st.markdown("**Since install**")
            cumulative = aggregate_cumulative(state.devices, params, date.today())
            c1, c2, c3 = st.columns(3)
            c1.metric("Energy", f"{nice_number(cumulative.energy_kwh):,.0f} kWh")
            c2.metric("CO₂e avoided", f"{nice_number(cumulative.kg_avoided):,.0f} kg")
            c3.metric("Money saved", format_currency(cumulative.money_saved, params))
            st.caption(
                f"Extrapolated from today's daily rates over up to "
                f"{cumulative.elapsed_days} days. Not a historical record."
            )

    with right:
        with st.container(border=True):
            st.markdown("**Savings breakdown**")
            st.caption("Daily CO₂e avoided by source (negative for email).")
            st.plotly_chart(_breakdown_chart(snap), use_container_width=True)

        with st.container(border=True):
            st.markdown("**Mix (today)**")
            st.caption("Share of savings vs email consumption.")
            st.plotly_chart(_mix_chart(snap), use_container_width=True)
