"""
Renders the Trading (preview) tab.

The order book is static demonstration data from config.constants; there
is no matching engine behind it. Only the credit-progress figures come from
the portfolio snapshot.
"""
from __future__ import annotations

import pandas as pd
import streamlit as st

from app.utils import nice_number
from config.constants import DEMO_ORDER_BOOK_ASKS, DEMO_ORDER_BOOK_BIDS
from core.models import PortfolioSnapshot
from core.portfolio import credit_progress


def _book(rows: list[tuple[float, float]]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"Price ($/t)": f"${price:.2f}", "Qty (t)": qty} for price, qty in rows]
    )


def render(snap: PortfolioSnapshot) -> None:
    """Renders the trading preview."""
    st.subheader("🪙 Trading (coming soon)")
    st.caption("Preview a simple market once you accrue ≥1.0 tCO₂e. Uses demo order book data.")

    progress = credit_progress(snap)
    m1, m2, m3 = st.columns(3)
    m1.metric("Best Bid", f"${DEMO_ORDER_BOOK_BIDS[0][0]:.2f}/t")
    m2.metric("Best Ask", f"${DEMO_ORDER_BOOK_ASKS[0][0]:.2f}/t")
    m3.metric("Daily Credits", f"{nice_number(max(0.0, progress.daily_tonnes))} t/day")

    if progress.days_to_one_credit is not None:
        st.markdown(
            f"At this pace you'll mint ~1 carbon credit in "
            f"**{progress.days_to_one_credit} days**."
        )
    else:
        st.markdown(
            "You're emitting more than you save — add devices or reduce your "
            "email footprint to reach net positive."
        )

    c1, c2 = st.columns(2)
    with c1:
        st.markdown("**Top bids**")
        st.dataframe(_book(DEMO_ORDER_BOOK_BIDS), use_container_width=True, hide_index=True)
    with c2:
        st.markdown("**Top asks**")
        st.dataframe(_book(DEMO_ORDER_BOOK_ASKS), use_container_width=True, hide_index=True)

    b1, b2 = st.columns(2)
    b1.button("List credits", disabled=True, use_container_width=True)
    b2.button("Buy offsets", disabled=True, use_container_width=True)
