"""Formatting helpers used across the EcoCredits application.

Keeping non-Streamlit logic in a separate module makes it easier to test
without spinning up a full Streamlit runtime.
"""

from __future__ import annotations

import math
from typing import Any

from config.constants import DEVICE_LABELS
from core.impact import safe_number
from core.models import CountryParameters


def nice_number(value: Any) -> float:
    """Round to two decimals for display; non-finite or non-numeric → 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return round(number, 2)


def format_currency(value: Any, params: CountryParameters) -> str:
    """``R56.10`` / ``-£1,234.50`` using the country's currency symbol."""
    number = nice_number(value)
    sign = "-" if number < 0 else ""
    return f"{sign}{params.currency_symbol}{abs(number):,.2f}"


def format_kg(value: Any) -> str:
    return f"{nice_number(value):,.2f} kg CO₂e"


def device_label(device_type: str) -> str:
    """Badge text for a device type; unknown tags are shown verbatim."""
    return DEVICE_LABELS.get(device_type, device_type)


def widget_value(current: Any, default: float, low: float, high: float) -> float:
    """Starting value for a bounded input widget.

    ``current`` (or ``default`` when unset) clamped into ``[low, high]`` so an
    imported value outside the widget's range never trips its bounds check.
    """
    return min(max(safe_number(current, default), low), high)


def keep_unless_edited(returned: Any, shown: Any, current: Any) -> Any:
    """``current`` while the widget still echoes ``shown``, else the new input.

    Widgets display a clamped or rounded copy of the stored value; writing that
    copy back would silently change imported data.
    """
    return current if returned == shown else returned
