"""Tests for config/countries.py — the country parameter registry."""
import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from config.countries import COUNTRIES, lookup_country, supported_countries
from core.errors import EcoCreditsError, UnknownCountry
from core.models import with_overrides


def test_supported_countries():
    assert supported_countries() == ["UK", "US", "ZA"]


@pytest.mark.parametrize("code, symbol, tariff, ef", [
    ("UK", "£", 0.30, 0.20),
    ("US", "$", 0.16, 0.40),
    ("ZA", "R", 3.0, 0.90),
])
def test_lookup_returns_registry_entry(code, symbol, tariff, ef):
    params = lookup_country(code)
    assert params.code == code
    assert params.currency_symbol == symbol
    assert params.tariff_per_kwh == tariff
    assert params.emission_factor_kg_per_kwh == ef


@pytest.mark.parametrize("code", ["FR", "za", "", None, 5])
def test_unknown_country_raises(code):
    with pytest.raises(UnknownCountry) as excinfo:
        lookup_country(code)
    assert excinfo.value.code == code
    assert isinstance(excinfo.value, EcoCreditsError)
    assert isinstance(excinfo.value, LookupError)


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        COUNTRIES["FR"] = COUNTRIES["UK"]


def test_overrides_do_not_mutate_registry():
    za = lookup_country("ZA")
    edited = with_overrides(za, tariff=4.0, emission_factor=0.5)
    assert edited.tariff_per_kwh == 4.0
    assert edited.emission_factor_kg_per_kwh == 0.5
    assert edited.fuel_price_per_litre == za.fuel_price_per_litre
    assert lookup_country("ZA").tariff_per_kwh == 3.0


def test_overrides_none_keeps_defaults():
    za = lookup_country("ZA")
    assert with_overrides(za) == za
