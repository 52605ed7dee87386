# ═══════════════════════════════════════════════════════════════════════════════
# EcoCredits Platform — Country Parameter Registry
# © 2026 Aparajita Parihar. All rights reserved.
#
# Single source of truth for per-country economic and emissions constants:
#   • tariff             — residential electricity price (local currency / kWh)
#   • emission factor    — grid carbon intensity (kgCO₂e / kWh)
#   • fuel price         — petrol pump price (local currency / L)
#   • solar yield        — typical PV yield (kWh / kWp / day)
#
# Values are indicative demonstration defaults, not live market data.
# Entries are immutable; user-edited tariffs are applied as overrides by
# core.models.with_overrides(), never by mutating this table.
#
# This file has ZERO Streamlit and ZERO network imports.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import math
from types import MappingProxyType

from core.errors import UnknownCountry
from core.models import CountryParameters

# ─────────────────────────────────────────────────────────────────────────────
# SUPPORTED COUNTRIES
# Keys must match each entry's ``code`` — they are written to exported files.
# ─────────────────────────────────────────────────────────────────────────────

COUNTRIES: MappingProxyType = MappingProxyType({
    "UK": CountryParameters(
        code="UK",
        name="United Kingdom",
        currency_code="GBP",
        currency_symbol="£",
        tariff_per_kwh=0.30,
        emission_factor_kg_per_kwh=0.20,
        fuel_price_per_litre=1.70,
        solar_yield_kwh_per_kw_per_day=2.7,
    ),
    "US": CountryParameters(
        code="US",
        name="United States",
        currency_code="USD",
        currency_symbol="$",
        tariff_per_kwh=0.16,
        emission_factor_kg_per_kwh=0.40,
        fuel_price_per_litre=0.95,
        solar_yield_kwh_per_kw_per_day=4.0,
    ),
    "ZA": CountryParameters(
        code="ZA",
        name="South Africa",
        currency_code="ZAR",
        currency_symbol="R",
        tariff_per_kwh=3.0,
        emission_factor_kg_per_kwh=0.90,
        fuel_price_per_litre=25.0,
        solar_yield_kwh_per_kw_per_day=5.5,
    ),
})


def supported_countries() -> list[str]:
    """Return the supported country codes in display order."""
    return list(COUNTRIES.keys())


def lookup_country(code: str) -> CountryParameters:
    """Return the parameters for ``code``.

    Raises ``UnknownCountry`` for anything outside the supported set,
    including non-string codes arriving from untrusted imports.
    """
    if not isinstance(code, str) or code not in COUNTRIES:
        raise UnknownCountry(code)
    return COUNTRIES[code]


# ─────────────────────────────────────────────────────────────────────────────
# INTEGRITY ASSERTION (runs at import time — zero cost in production)
# ─────────────────────────────────────────────────────────────────────────────

def _assert_registry_integrity() -> None:
    for code, params in COUNTRIES.items():
        assert params.code == code, (
            f"config/countries.py integrity error: key '{code}' holds entry "
            f"for '{params.code}'"
        )
        for field in (
            "tariff_per_kwh",
            "emission_factor_kg_per_kwh",
            "fuel_price_per_litre",
            "solar_yield_kwh_per_kw_per_day",
        ):
            value = getattr(params, field)
            assert math.isfinite(value) and value > 0, (
                f"config/countries.py integrity error: {code}.{field}={value!r}"
            )


_assert_registry_integrity()
