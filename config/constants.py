# ═══════════════════════════════════════════════════════════════════════════════
# EcoCredits Platform — Canonical Constants Registry
# © 2026 Aparajita Parihar. All rights reserved.
#
# Single source of truth for all physical, financial, and schema constants.
# All modules MUST import from here — never redefine constants locally.
#
# Sources:
#   PVGIS typical performance ratios for residential rooftop PV
#   UK DESNZ GHG Conversion Factors 2023 (average petrol car, per km)
#   Obringer et al. (2021) / Berners-Lee "How Bad Are Bananas?" (email)
#
# This file has ZERO Streamlit, ZERO network, and ZERO side-effect imports.
# It is safe to import in any context, including unit tests without a
# running Streamlit server.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

# ─────────────────────────────────────────────────────────────────────────────
# DEVICE TYPE TAGS
# Stable identifiers — they are written to exported JSON files.
# ─────────────────────────────────────────────────────────────────────────────

DEVICE_SOLAR: str = "solar"
DEVICE_EV: str = "ev"
DEVICE_SOLAR_GEYSER: str = "solar_geyser"

DEVICE_LABELS: dict[str, str] = {
    DEVICE_SOLAR:        "Solar PV",
    DEVICE_EV:           "Electric Vehicle",
    DEVICE_SOLAR_GEYSER: "Solar Geyser",
}


# ─────────────────────────────────────────────────────────────────────────────
# SOLAR PV DEFAULTS
# ─────────────────────────────────────────────────────────────────────────────

# System performance ratio (inverter, soiling, temperature and wiring losses)
DEFAULT_PERFORMANCE_RATIO: float = 0.85

# Share of generation used on-site rather than exported
DEFAULT_PV_SELF_CONSUMPTION: float = 0.8


# ─────────────────────────────────────────────────────────────────────────────
# ELECTRIC VEHICLE DEFAULTS
# ─────────────────────────────────────────────────────────────────────────────

DEFAULT_EV_KWH_PER_KM: float = 0.15       # kWh / km
DEFAULT_ICE_KG_PER_KM: float = 0.192      # kgCO₂e / km — average petrol car
DEFAULT_ICE_L_PER_100KM: float = 7.5      # L / 100 km


# ─────────────────────────────────────────────────────────────────────────────
# SOLAR GEYSER DEFAULTS
# ─────────────────────────────────────────────────────────────────────────────

DEFAULT_GEYSER_KWH_PER_LITRE_PER_DAY: float = 0.018  # kWh / L / day


# ─────────────────────────────────────────────────────────────────────────────
# EMAIL FOOTPRINT DEFAULTS
# ─────────────────────────────────────────────────────────────────────────────

DEFAULT_EMAIL_BASE_GRAMS: float = 4.0     # gCO₂e / plain email
DEFAULT_EMAIL_ATTACH_GRAMS: float = 19.0  # gCO₂e / email with attachment


# ─────────────────────────────────────────────────────────────────────────────
# CARBON CREDIT UNITS
# ─────────────────────────────────────────────────────────────────────────────

# One carbon credit = one tonne of CO₂e
TONNE_KG: float = 1000.0

# Minimum slice size for the mix view so zero-impact categories stay visible
MIX_FLOOR_KG: float = 0.001  # kgCO₂e / day

# Static demonstration order book for the trading preview (price $/t, qty t).
# No matching or pricing logic exists behind these figures.
DEMO_ORDER_BOOK_BIDS: list[tuple[float, float]] = [
    (7.8, 0.2),
    (7.5, 0.5),
    (7.1, 1.0),
]
DEMO_ORDER_BOOK_ASKS: list[tuple[float, float]] = [
    (8.2, 0.1),
    (8.6, 0.3),
    (9.0, 0.7),
]


# ─────────────────────────────────────────────────────────────────────────────
# PROJECTION & PERSISTENCE
# ─────────────────────────────────────────────────────────────────────────────

DEFAULT_PROJECTION_MONTHS: int = 12

# Version stamped into exported state files; imports with a different
# version are rejected.
STATE_SCHEMA_VERSION: int = 1

DEFAULT_COUNTRY_CODE: str = "ZA"
