"""Tests for the calendar-aware 12-month projection series."""
from __future__ import annotations

import calendar
import os
import sys
from datetime import date

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from core.models import PortfolioSnapshot
from core.projection import project, shift_month


def _snapshot(kg_saved: float, kg_email: float) -> PortfolioSnapshot:
    return PortfolioSnapshot(
        per_device=(),
        total_money_saved=0.0,
        total_kg_avoided=kg_saved,
        total_energy_kwh=0.0,
        email_kg_per_day=kg_email,
        net_kg_per_day=kg_saved - kg_email,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Month arithmetic
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("start, offset, expected", [
    ((2026, 10), 0, (2026, 10)),
    ((2026, 10), 3, (2027, 1)),
    ((2026, 12), 1, (2027, 1)),
    ((2026, 1), -1, (2025, 12)),
    ((2026, 5), -16, (2025, 1)),
])
def test_shift_month(start, offset, expected):
    assert shift_month(*start, offset) == expected


# ─────────────────────────────────────────────────────────────────────────────
# Series shape
# ─────────────────────────────────────────────────────────────────────────────

def test_twelve_points_starting_with_current_month():
    points = project(_snapshot(1.0, 0.0), date(2026, 10, 18))
    assert len(points) == 12
    assert (points[0].year, points[0].month) == (2026, 10)
    assert (points[-1].year, points[-1].month) == (2027, 9)
    assert points[0].month_label == "Oct 2026"
    assert points[3].month_label == "Jan 2027"


def test_each_point_uses_calendar_days_of_its_month():
    rate = 2.5
    for p in project(_snapshot(rate, 0.5), date(2027, 11, 30)):
        days = calendar.monthrange(p.year, p.month)[1]
        assert p.days == days
        assert p.kg_saved == pytest.approx(rate * days)
        assert p.kg_email == pytest.approx(0.5 * days)
        assert p.kg_net == pytest.approx((rate - 0.5) * days)


def test_non_leap_year_sums_to_365_days():
    points = project(_snapshot(3.0, 0.0), date(2026, 1, 1))
    assert sum(p.days for p in points) == 365
    assert sum(p.kg_saved for p in points) == pytest.approx(3.0 * 365)


def test_span_including_leap_february_sums_to_366_days():
    points = project(_snapshot(3.0, 1.0), date(2027, 6, 15))
    feb = next(p for p in points if p.month == 2)
    assert (feb.year, feb.days) == (2028, 29)
    assert sum(p.kg_saved for p in points) == pytest.approx(3.0 * 366)
    assert sum(p.kg_net for p in points) == pytest.approx(2.0 * 366)


def test_negative_net_is_projected_as_negative():
    points = project(_snapshot(0.0, 0.4), date(2026, 2, 1))
    assert points[0].kg_net == pytest.approx(-0.4 * 28)


def test_custom_and_zero_horizon():
    assert len(project(_snapshot(1.0, 0.0), date(2026, 1, 1), horizon_months=3)) == 3
    assert project(_snapshot(1.0, 0.0), date(2026, 1, 1), horizon_months=0) == []


def test_negative_horizon_rejected():
    with pytest.raises(ValueError):
        project(_snapshot(1.0, 0.0), date(2026, 1, 1), horizon_months=-1)


def test_as_row_keys_for_charting():
    row = project(_snapshot(1.0, 0.25), date(2026, 4, 1))[0].as_row()
    assert row == {"Month": "Apr 2026", "Saved": 30.0, "Email": 7.5, "Net": 22.5}
