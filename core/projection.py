# ═══════════════════════════════════════════════════════════════════════════════
# EcoCredits Platform — Monthly Projection Series
# © 2026 Aparajita Parihar. All rights reserved.
#
# "If nothing changes" projection: the snapshot's current daily rates are
# multiplied by the number of calendar days in each forward month. This is
# not a forecast model; behaviour and parameters are held constant.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import calendar
from datetime import date

from config.constants import DEFAULT_PROJECTION_MONTHS
from core.models import PortfolioSnapshot, ProjectionPoint


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def project(
    snapshot: PortfolioSnapshot,
    start_month: date,
    horizon_months: int = DEFAULT_PROJECTION_MONTHS,
) -> list[ProjectionPoint]:
    """Project monthly kgCO₂e totals starting with the month of ``start_month``.

    Point 0 is the month containing ``start_month``; the day component is
    ignored.
    """
    if horizon_months < 0:
        raise ValueError("horizon_months must be >= 0.")

    points: list[ProjectionPoint] = []
    for offset in range(horizon_months):
        year, month = shift_month(start_month.year, start_month.month, offset)
        days = calendar.monthrange(year, month)[1]
        kg_saved = snapshot.total_kg_avoided * days
        kg_email = snapshot.email_kg_per_day * days
        points.append(ProjectionPoint(
            month_label=f"{calendar.month_abbr[month]} {year}",
            year=year,
            month=month,
            days=days,
            kg_saved=kg_saved,
            kg_email=kg_email,
            kg_net=kg_saved - kg_email,
        ))
    return points
