# ═══════════════════════════════════════════════════════════════════════════════
# EcoCredits Platform — Device Impact Engine
# © 2026 Aparajita Parihar. All rights reserved.
#
# Per-device daily impact (energy, kgCO₂e avoided, money saved), the email
# footprint estimate, and the since-install cumulative extrapolation.
#
#   solar         used = kWp × yield × PR × self-consumption
#   ev            avoided = max(0, km × ICE kg/km − km × kWh/km × EF)
#   solar_geyser  kWh = litres × kWh/L/day
#   email         kg = n × (base × (1 − p) + attach × p) / 1000
#
# DISCLAIMER: Simplified steady-state model. Results are indicative only and
# are not regulatory-grade carbon accounting.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import logging
import math
from datetime import date, datetime, time
from typing import Any, Callable, Iterable, Union

from config.constants import (
    DEFAULT_EMAIL_ATTACH_GRAMS,
    DEFAULT_EMAIL_BASE_GRAMS,
    DEFAULT_EV_KWH_PER_KM,
    DEFAULT_GEYSER_KWH_PER_LITRE_PER_DAY,
    DEFAULT_ICE_KG_PER_KM,
    DEFAULT_ICE_L_PER_100KM,
    DEFAULT_PERFORMANCE_RATIO,
    DEFAULT_PV_SELF_CONSUMPTION,
)
from core.models import (
    CountryParameters,
    CumulativeImpact,
    DailyImpact,
    Device,
    EmailProfile,
    EVConfig,
    SolarConfig,
    SolarGeyserConfig,
)

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 86_400


# ─────────────────────────────────────────────────────────────────────────────
# NUMERIC SAFETY
# ─────────────────────────────────────────────────────────────────────────────

def safe_number(value: Any, default: float = 0.0) -> float:
    """Coerce a possibly missing, malformed or non-finite value to float.

    Returns ``default`` for ``None``. Non-numeric strings, booleans, NaN and
    infinities become ``0.0``. Never raises.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


# ─────────────────────────────────────────────────────────────────────────────
# PER-TYPE CALCULATORS
# ─────────────────────────────────────────────────────────────────────────────

def _calc_solar(cfg: SolarConfig, params: CountryParameters) -> DailyImpact:
    capacity = safe_number(cfg.capacity_kw)
    insolation = safe_number(
        cfg.insolation_kwh_per_kw_per_day, params.solar_yield_kwh_per_kw_per_day
    )
    performance_ratio = safe_number(cfg.performance_ratio, DEFAULT_PERFORMANCE_RATIO)
    self_consumption = safe_number(cfg.self_consumption_fraction, DEFAULT_PV_SELF_CONSUMPTION)

    daily_gen = capacity * insolation * performance_ratio
    used_on_site = daily_gen * self_consumption
    return DailyImpact(
        daily_energy_kwh=used_on_site,
        daily_kg_avoided=used_on_site * safe_number(params.emission_factor_kg_per_kwh),
        daily_money_saved=used_on_site * safe_number(params.tariff_per_kwh),
    )


def _calc_ev(cfg: EVConfig, params: CountryParameters) -> DailyImpact:
    km = safe_number(cfg.km_per_day)
    ev_kwh_per_km = safe_number(cfg.ev_kwh_per_km, DEFAULT_EV_KWH_PER_KM)
    ice_kg_per_km = safe_number(cfg.ice_kg_per_km, DEFAULT_ICE_KG_PER_KM)
    ice_l_per_100 = safe_number(cfg.ice_litres_per_100km, DEFAULT_ICE_L_PER_100KM)
    emission_factor = safe_number(params.emission_factor_kg_per_kwh)

    ev_kwh = km * ev_kwh_per_km
    ev_kg = ev_kwh * emission_factor
    ice_kg = km * ice_kg_per_km
    # An EV dirtier than its petrol baseline avoids nothing; it never counts
    # as negative. Money saved is deliberately left signed.
    kg_avoided = max(0.0, ice_kg - ev_kg)

    fuel_cost = km * (ice_l_per_100 / 100.0) * safe_number(params.fuel_price_per_litre)
    electricity_cost = ev_kwh * safe_number(params.tariff_per_kwh)
    return DailyImpact(
        daily_energy_kwh=ev_kwh,
        daily_kg_avoided=kg_avoided,
        daily_money_saved=fuel_cost - electricity_cost,
    )


def _calc_solar_geyser(cfg: SolarGeyserConfig, params: CountryParameters) -> DailyImpact:
    tank = safe_number(cfg.tank_litres)
    rate = safe_number(cfg.kwh_saved_per_litre_per_day, DEFAULT_GEYSER_KWH_PER_LITRE_PER_DAY)
    kwh_saved = tank * rate
    return DailyImpact(
        daily_energy_kwh=kwh_saved,
        daily_kg_avoided=kwh_saved * safe_number(params.emission_factor_kg_per_kwh),
        daily_money_saved=kwh_saved * safe_number(params.tariff_per_kwh),
    )


_CALCULATORS: dict[type, Callable[[Any, CountryParameters], DailyImpact]] = {
    SolarConfig:       _calc_solar,
    EVConfig:          _calc_ev,
    SolarGeyserConfig: _calc_solar_geyser,
}


def compute_daily(device: Device, params: CountryParameters) -> DailyImpact:
    """Daily impact of one device under one country's parameters.

    Unrecognised device types return the zero triple with ``unhandled_type``
    set, so aggregation stays total-preserving for partially-migrated
    records. Callers decide whether to surface that outcome.
    """
    calculator = _CALCULATORS.get(type(device.config))
    if calculator is None:
        logger.warning(
            "Device %r has unhandled type %r; counting zero impact",
            device.id, device.type,
        )
        return DailyImpact(unhandled_type=str(device.type))
    return calculator(device.config, params)


# ─────────────────────────────────────────────────────────────────────────────
# EMAIL FOOTPRINT
# ─────────────────────────────────────────────────────────────────────────────

def compute_daily_email_kg(profile: EmailProfile) -> float:
    """Daily kgCO₂e emitted by the email profile. Always a cost, never negative."""
    base = safe_number(profile.base_grams_per_email, DEFAULT_EMAIL_BASE_GRAMS)
    attach = safe_number(profile.attachment_grams_per_email, DEFAULT_EMAIL_ATTACH_GRAMS)
    emails = safe_number(profile.emails_per_day)
    share = safe_number(profile.fraction_with_attachments)

    grams_avg = base * (1.0 - share) + attach * share
    return max(0.0, emails * grams_avg / 1000.0)


# ─────────────────────────────────────────────────────────────────────────────
# CUMULATIVE SINCE INSTALL
# Simple extrapolation: today's configuration and today's country parameters
# are assumed to have applied unchanged on every day since install.
# ─────────────────────────────────────────────────────────────────────────────

def elapsed_days(install_date: date, as_of: Union[date, datetime]) -> int:
    """Whole days between ``install_date`` and ``as_of``, floored at zero."""
    if isinstance(as_of, datetime):
        installed_at = datetime.combine(install_date, time(), tzinfo=as_of.tzinfo)
        seconds = (as_of - installed_at).total_seconds()
        return max(0, math.floor(seconds / _SECONDS_PER_DAY))
    if isinstance(install_date, datetime):
        install_date = install_date.date()
    return max(0, (as_of - install_date).days)


def compute_cumulative(
    device: Device,
    params: CountryParameters,
    as_of: Union[date, datetime],
) -> CumulativeImpact:
    daily = compute_daily(device, params)
    days = elapsed_days(device.install_date, as_of)
    return CumulativeImpact(
        energy_kwh=daily.daily_energy_kwh * days,
        kg_avoided=daily.daily_kg_avoided * days,
        money_saved=daily.daily_money_saved * days,
        elapsed_days=days,
    )


def aggregate_cumulative(
    devices: Iterable[Device],
    params: CountryParameters,
    as_of: Union[date, datetime],
) -> CumulativeImpact:
    """Portfolio-wide cumulative totals.

    ``elapsed_days`` is that of the longest-running device.
    """
    results = [compute_cumulative(d, params, as_of) for d in devices]
    return CumulativeImpact(
        energy_kwh=math.fsum(r.energy_kwh for r in results),
        kg_avoided=math.fsum(r.kg_avoided for r in results),
        money_saved=math.fsum(r.money_saved for r in results),
        elapsed_days=max((r.elapsed_days for r in results), default=0),
    )
