# ═══════════════════════════════════════════════════════════════════════════════
# EcoCredits Platform — Domain Types
# © 2026 Aparajita Parihar. All rights reserved.
#
# Immutable records passed between the registry, the calculators and the
# host application. Device configuration is a tagged variant: the config
# class determines the device type, and calculators dispatch on it.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Union

from config.constants import (
    DEVICE_EV,
    DEVICE_SOLAR,
    DEVICE_SOLAR_GEYSER,
)


# ─────────────────────────────────────────────────────────────────────────────
# COUNTRY PARAMETERS
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CountryParameters:
    code: str
    name: str
    currency_code: str
    currency_symbol: str
    tariff_per_kwh: float
    emission_factor_kg_per_kwh: float
    fuel_price_per_litre: float
    solar_yield_kwh_per_kw_per_day: float


def with_overrides(
    params: CountryParameters,
    tariff: Optional[float] = None,
    emission_factor: Optional[float] = None,
) -> CountryParameters:
    """Return a copy of ``params`` with user-edited tariff / grid factor applied.

    ``None`` keeps the registry value. The registry entry itself is never
    touched.
    """
    changes: dict[str, float] = {}
    if tariff is not None:
        changes["tariff_per_kwh"] = tariff
    if emission_factor is not None:
        changes["emission_factor_kg_per_kwh"] = emission_factor
    return dataclasses.replace(params, **changes) if changes else params


# ─────────────────────────────────────────────────────────────────────────────
# DEVICE CONFIG VARIANTS
# ``None`` means "not set"; calculators substitute the documented default.
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SolarConfig:
    capacity_kw: Optional[float] = None
    insolation_kwh_per_kw_per_day: Optional[float] = None
    performance_ratio: Optional[float] = None
    self_consumption_fraction: Optional[float] = None

    @property
    def device_type(self) -> str:
        return DEVICE_SOLAR


@dataclass(frozen=True)
class EVConfig:
    km_per_day: Optional[float] = None
    ev_kwh_per_km: Optional[float] = None
    ice_kg_per_km: Optional[float] = None
    ice_litres_per_100km: Optional[float] = None

    @property
    def device_type(self) -> str:
        return DEVICE_EV


@dataclass(frozen=True)
class SolarGeyserConfig:
    tank_litres: Optional[float] = None
    kwh_saved_per_litre_per_day: Optional[float] = None

    @property
    def device_type(self) -> str:
        return DEVICE_SOLAR_GEYSER


@dataclass(frozen=True)
class UnknownDeviceConfig:
    """Config of a device whose type tag this engine does not recognise.

    Kept verbatim so partially-migrated records survive an export/import
    round trip instead of being dropped.
    """

    type_name: str
    raw: dict = field(default_factory=dict, compare=False)

    @property
    def device_type(self) -> str:
        return self.type_name


DeviceConfig = Union[SolarConfig, EVConfig, SolarGeyserConfig, UnknownDeviceConfig]


@dataclass(frozen=True)
class Device:
    id: str
    name: str
    install_date: date
    config: DeviceConfig

    @property
    def type(self) -> str:
        return self.config.device_type


@dataclass(frozen=True)
class EmailProfile:
    emails_per_day: Optional[float] = None
    fraction_with_attachments: Optional[float] = None
    base_grams_per_email: Optional[float] = None
    attachment_grams_per_email: Optional[float] = None


# ─────────────────────────────────────────────────────────────────────────────
# DERIVED RESULTS
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DailyImpact:
    daily_energy_kwh: float = 0.0
    daily_kg_avoided: float = 0.0
    daily_money_saved: float = 0.0
    # Raw type tag when the device type was not recognised; None otherwise.
    unhandled_type: Optional[str] = None

    @property
    def is_handled(self) -> bool:
        return self.unhandled_type is None


@dataclass(frozen=True)
class CumulativeImpact:
    energy_kwh: float
    kg_avoided: float
    money_saved: float
    elapsed_days: int


@dataclass(frozen=True)
class DeviceImpact:
    device_id: str
    device_type: str
    name: str
    daily: DailyImpact


@dataclass(frozen=True)
class PortfolioSnapshot:
    per_device: tuple[DeviceImpact, ...]
    total_money_saved: float
    total_kg_avoided: float
    total_energy_kwh: float
    email_kg_per_day: float
    net_kg_per_day: float


@dataclass(frozen=True)
class CategoryValue:
    name: str
    kg_per_day: float


@dataclass(frozen=True)
class CreditProgress:
    daily_tonnes: float
    progress_pct: float
    # None while the portfolio is not net positive.
    days_to_one_credit: Optional[int]


@dataclass(frozen=True)
class ProjectionPoint:
    month_label: str
    year: int
    month: int
    days: int
    kg_saved: float
    kg_email: float
    kg_net: float

    def as_row(self) -> dict[str, Any]:
        return {
            "Month": self.month_label,
            "Saved": self.kg_saved,
            "Email": self.kg_email,
            "Net": self.kg_net,
        }
