# ═══════════════════════════════════════════════════════════════════════════════
# EcoCredits Platform — Session State Management
# © 2026 Aparajita Parihar. All rights reserved.
#
# Single responsibility: own the complete st.session_state initialisation
# contract for the entire application.
#
# Rules:
#   • init_session() is idempotent — call it every run(), it never overwrites
#     existing values (uses setdefault exclusively).
#   • The engine state lives under one key as an immutable AppState; tabs
#     replace it through set_state(), never mutate it in place.
#   • _get_secret() is the sole secrets access point for the application.
#   • The state is mirrored into st.query_params["p"] (persist_state) and
#     restored from it on a fresh session, so a browser reload keeps it.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import logging
import os

import streamlit as st

from config.constants import DEFAULT_COUNTRY_CODE
from config.countries import supported_countries
from core.errors import ImportFailed
from core.state import AppState, default_state, pack_state, unpack_state

logger = logging.getLogger(__name__)

_STATE_KEY = "eco_state"
_QUERY_KEY = "p"


# ─────────────────────────────────────────────────────────────────────────────
# SECRETS ACCESS POINT
# ─────────────────────────────────────────────────────────────────────────────

def _get_secret(key: str, default: str = "") -> str:
    """Read a setting from Streamlit Secrets, falling back to environment variable.

    Priority: st.secrets[key]  →  os.getenv(key, default)

    Never raises; returns ``default`` if the key is absent from both sources.
    """
    try:
        return st.secrets[key]
    except (KeyError, AttributeError, FileNotFoundError):
        return os.getenv(key, default)


def _default_country() -> str:
    code = str(_get_secret("ECOCREDITS_DEFAULT_COUNTRY", DEFAULT_COUNTRY_CODE)).strip().upper()
    if code not in supported_countries():
        logger.warning(
            "ECOCREDITS_DEFAULT_COUNTRY=%r is not supported; using %s",
            code, DEFAULT_COUNTRY_CODE,
        )
        return DEFAULT_COUNTRY_CODE
    return code


# ─────────────────────────────────────────────────────────────────────────────
# URL PERSISTENCE (F5 survival)
# ─────────────────────────────────────────────────────────────────────────────

def _restore_state() -> AppState:
    state = default_state(_default_country())
    token = st.query_params.get(_QUERY_KEY)
    if not token:
        return state
    try:
        return unpack_state(state, token)
    except ImportFailed as exc:
        logger.warning("Ignoring saved state in the page URL: %s", exc)
        return state


def persist_state(state: AppState) -> None:
    """Write ``state`` into the page URL; a no-op when it is already there."""
    token = pack_state(state)
    if st.query_params.get(_QUERY_KEY) != token:
        st.query_params[_QUERY_KEY] = token


# ─────────────────────────────────────────────────────────────────────────────
# SESSION STATE INITIALISATION
# ─────────────────────────────────────────────────────────────────────────────

def init_session() -> None:
    """Idempotently initialise all application session state keys.

    Session key registry (authoritative):

    eco_state              AppState  Country, devices, email profile, tariff, EF
    last_import_digest     str       SHA-256 of the last imported file, so a
                                     file left in the uploader is applied once
    """
    ss = st.session_state
    if _STATE_KEY not in ss:
        ss[_STATE_KEY] = _restore_state()
    ss.setdefault("last_import_digest", "")


def get_state() -> AppState:
    return st.session_state[_STATE_KEY]


def set_state(state: AppState) -> None:
    st.session_state[_STATE_KEY] = state
