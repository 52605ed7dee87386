"""Renders the Email tab: the email usage profile and its daily footprint."""
from __future__ import annotations

import dataclasses

import streamlit as st

from app.session import set_state
from app.utils import format_kg, keep_unless_edited, widget_value
from config.constants import DEFAULT_EMAIL_ATTACH_GRAMS, DEFAULT_EMAIL_BASE_GRAMS
from core.impact import compute_daily_email_kg
from core.models import EmailProfile
from core.state import AppState

EMAILS_PER_DAY_MAX = 10_000.0
GRAMS_PER_EMAIL_MAX = 1000.0


def render(state: AppState) -> None:
    """Renders the email carbon consumption form.

    Fields keep their stored value (which may be unset, rounded away by the
    slider, or outside a widget's range after an import) until the user
    actually changes the matching widget.
    """
    st.subheader("✉️ Email carbon consumption")
    st.caption("Estimate CO₂e for your daily email activity. Adjust factors if you have better data.")

    email = state.email
    with st.container(border=True):
        c1, c2 = st.columns(2)

        shown_emails = widget_value(email.emails_per_day, 0.0, 0.0, EMAILS_PER_DAY_MAX)
        emails = c1.number_input(
            "Emails per day", 0.0, EMAILS_PER_DAY_MAX, shown_emails, step=1.0,
        )

        shown_share = int(round(widget_value(email.fraction_with_attachments, 0.0, 0.0, 1.0) * 100))
        share = c2.slider("Share with attachments (%)", 0, 100, shown_share)
        fraction = (
            email.fraction_with_attachments if share == shown_share else share / 100.0
        )

        shown_base = widget_value(
            email.base_grams_per_email, DEFAULT_EMAIL_BASE_GRAMS, 0.0, GRAMS_PER_EMAIL_MAX
        )
        base = c1.number_input("Base (g/email)", 0.0, GRAMS_PER_EMAIL_MAX, shown_base, step=0.1)

        shown_attach = widget_value(
            email.attachment_grams_per_email, DEFAULT_EMAIL_ATTACH_GRAMS, 0.0, GRAMS_PER_EMAIL_MAX
        )
        attach = c2.number_input(
            "With attachment (g/email)", 0.0, GRAMS_PER_EMAIL_MAX, shown_attach, step=0.1,
        )

    edited = EmailProfile(
        emails_per_day=keep_unless_edited(emails, shown_emails, email.emails_per_day),
        fraction_with_attachments=fraction,
        base_grams_per_email=keep_unless_edited(base, shown_base, email.base_grams_per_email),
        attachment_grams_per_email=keep_unless_edited(
            attach, shown_attach, email.attachment_grams_per_email
        ),
    )
    if edited != email:
        set_state(dataclasses.replace(state, email=edited))

    st.markdown(f"Estimated: **{format_kg(compute_daily_email_kg(edited))}/day**")
