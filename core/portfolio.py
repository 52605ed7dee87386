# ═══════════════════════════════════════════════════════════════════════════════
# EcoCredits Platform — Portfolio Aggregator
# © 2026 Aparajita Parihar. All rights reserved.
#
# Sums per-device daily impacts, nets out the email footprint, and derives
# the breakdown, mix and carbon-credit progress views consumed by the
# dashboard.
#
# Totals use math.fsum, which is exactly rounded, so a snapshot does not
# depend on the order devices are listed in.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import math
from typing import Iterable

from config.constants import MIX_FLOOR_KG, TONNE_KG
from core.impact import compute_daily, compute_daily_email_kg
from core.models import (
    CategoryValue,
    CountryParameters,
    CreditProgress,
    Device,
    DeviceImpact,
    EmailProfile,
    PortfolioSnapshot,
)

EMAIL_CATEGORY_NAME = "Email consumption"


def aggregate(
    devices: Iterable[Device],
    email: EmailProfile,
    params: CountryParameters,
) -> PortfolioSnapshot:
    """Daily portfolio snapshot for ``devices`` under ``params``."""
    per_device = tuple(
        DeviceImpact(
            device_id=d.id,
            device_type=d.type,
            name=d.name,
            daily=compute_daily(d, params),
        )
        for d in devices
    )
    total_kg = math.fsum(x.daily.daily_kg_avoided for x in per_device)
    email_kg = compute_daily_email_kg(email)
    return PortfolioSnapshot(
        per_device=per_device,
        total_money_saved=math.fsum(x.daily.daily_money_saved for x in per_device),
        total_kg_avoided=total_kg,
        total_energy_kwh=math.fsum(x.daily.daily_energy_kwh for x in per_device),
        email_kg_per_day=email_kg,
        net_kg_per_day=total_kg - email_kg,
    )


def unhandled_devices(snapshot: PortfolioSnapshot) -> list[str]:
    """Ids of devices that were counted as zero because their type is unknown."""
    return [x.device_id for x in snapshot.per_device if not x.daily.is_handled]


# ─────────────────────────────────────────────────────────────────────────────
# DASHBOARD VIEWS
# ─────────────────────────────────────────────────────────────────────────────

def breakdown(snapshot: PortfolioSnapshot) -> list[CategoryValue]:
    """Signed daily kgCO₂e per source: devices positive, email negative."""
    entries = [CategoryValue(x.name, x.daily.daily_kg_avoided) for x in snapshot.per_device]
    entries.append(CategoryValue(EMAIL_CATEGORY_NAME, -snapshot.email_kg_per_day))
    return entries


def mix(snapshot: PortfolioSnapshot, floor: float = MIX_FLOOR_KG) -> list[CategoryValue]:
    """Magnitudes for a share chart.

    Each entry is floored at ``floor`` so zero-impact categories keep a
    visible slice instead of vanishing.
    """
    entries = [
        CategoryValue(x.name, max(floor, x.daily.daily_kg_avoided))
        for x in snapshot.per_device
    ]
    entries.append(CategoryValue(EMAIL_CATEGORY_NAME, max(floor, snapshot.email_kg_per_day)))
    return entries


def credit_progress(snapshot: PortfolioSnapshot) -> CreditProgress:
    """Progress toward one 1-tonne carbon credit at the current daily net rate."""
    net = snapshot.net_kg_per_day
    pct = max(0.0, min(100.0, net / TONNE_KG * 100.0))
    days = math.ceil(TONNE_KG / net) if net > 0 else None
    return CreditProgress(
        daily_tonnes=net / TONNE_KG,
        progress_pct=pct,
        days_to_one_credit=days,
    )
