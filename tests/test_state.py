"""
Tests for core/state.py — state transitions and JSON import/export.

Covers:
- Switching country resets tariff and emission factor to registry defaults
- Tariff / EF edits flow into the calculation parameters without touching
  the registry
- export → import is a no-op on the portfolio snapshot
- Partial imports change only the keys they carry
- Malformed payloads raise ImportFailed and leave state untouched
"""
from __future__ import annotations

import json
import os
import sys
from datetime import date

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from config.constants import STATE_SCHEMA_VERSION
from config.countries import lookup_country
from core.errors import ImportFailed, UnknownCountry
from core.models import Device, EmailProfile, SolarConfig, UnknownDeviceConfig
from core.state import (
    add_device,
    default_state,
    device_from_dict,
    export_state,
    import_state,
    pack_state,
    remove_device,
    snapshot,
    state_parameters,
    switch_country,
    unpack_state,
)

TODAY = date(2026, 10, 18)


@pytest.fixture
def state():
    return default_state("ZA", today=TODAY)


# ─────────────────────────────────────────────────────────────────────────────
# Default state & transitions
# ─────────────────────────────────────────────────────────────────────────────

class TestTransitions:

    def test_default_state_has_demo_portfolio(self, state):
        assert [d.type for d in state.devices] == ["solar", "ev", "solar_geyser"]
        assert [d.install_date for d in state.devices] == [
            date(2026, 6, 18), date(2026, 8, 18), date(2026, 9, 18),
        ]
        assert state.tariff == 3.0
        assert state.emission_factor == 0.9
        assert len({d.id for d in state.devices}) == 3

    def test_demo_dates_clamp_to_month_end(self):
        s = default_state("UK", today=date(2026, 3, 31))
        assert s.devices[2].install_date == date(2026, 2, 28)

    def test_switch_country_resets_tariff_and_factor(self, state):
        edited = import_state(state, json.dumps({"tariff": 9.9, "emissionFactor": 0.1}))
        switched = switch_country(edited, "UK")
        assert switched.country == "UK"
        assert switched.tariff == 0.30
        assert switched.emission_factor == 0.20
        assert switched.devices == state.devices

    def test_switch_to_unknown_country_raises(self, state):
        with pytest.raises(UnknownCountry):
            switch_country(state, "FR")

    def test_add_prepends_and_remove_filters(self, state):
        device = Device("new", "Carport PV", TODAY, SolarConfig(capacity_kw=3))
        added = add_device(state, device)
        assert added.devices[0] is device
        assert len(added.devices) == 4
        removed = remove_device(added, "new")
        assert removed.devices == state.devices
        assert len(state.devices) == 3

    def test_tariff_override_feeds_parameters_without_mutating_registry(self, state):
        edited = import_state(state, json.dumps({"tariff": 4.0}))
        params = state_parameters(edited)
        assert params.tariff_per_kwh == 4.0
        assert lookup_country("ZA").tariff_per_kwh == 3.0
        assert snapshot(edited).total_money_saved > snapshot(state).total_money_saved


# ─────────────────────────────────────────────────────────────────────────────
# Export
# ─────────────────────────────────────────────────────────────────────────────

def test_export_is_complete_and_pretty(state):
    text = export_state(state)
    assert "\n  " in text
    payload = json.loads(text)
    assert set(payload) == {
        "schemaVersion", "country", "devices", "emailCfg", "tariff", "emissionFactor",
    }
    assert payload["schemaVersion"] == STATE_SCHEMA_VERSION
    solar = payload["devices"][0]
    assert solar["type"] == "solar"
    assert solar["installDate"] == "2026-06-18"
    assert solar["config"] == {
        "capacityKW": 5.0, "insolation": 5.5, "performanceRatio": 0.85, "selfConsumption": 0.8,
    }
    assert payload["emailCfg"] == {
        "emailsPerDay": 40.0, "pctWithAttachments": 0.35, "baseGrams": 4.0, "attachGrams": 19.0,
    }


# ─────────────────────────────────────────────────────────────────────────────
# Import
# ─────────────────────────────────────────────────────────────────────────────

class TestImport:

    def test_round_trip_reproduces_snapshot(self, state):
        edited = import_state(state, json.dumps({"tariff": 2.5, "emissionFactor": 1.1}))
        restored = import_state(default_state("US", today=TODAY), export_state(edited))
        assert restored == edited
        assert snapshot(restored) == snapshot(edited)

    def test_round_trip_keeps_unknown_device_types(self, state):
        legacy = Device("hp", "Heat pump", TODAY, UnknownDeviceConfig("heat_pump", {"cop": 3.1}))
        with_legacy = add_device(state, legacy)
        payload = json.loads(export_state(with_legacy))
        assert payload["devices"][0]["config"] == {"cop": 3.1}
        restored = import_state(state, export_state(with_legacy))
        assert restored.devices[0].type == "heat_pump"
        assert snapshot(restored) == snapshot(with_legacy)

    def test_tariff_only_changes_only_the_tariff(self, state):
        updated = import_state(state, '{"tariff": 4.0}')
        assert updated.tariff == 4.0
        assert updated.country == state.country
        assert updated.devices == state.devices
        assert updated.email == state.email
        assert updated.emission_factor == state.emission_factor

    def test_country_then_overrides_in_one_payload(self, state):
        updated = import_state(state, json.dumps({"country": "US", "tariff": 0.2}))
        assert updated.country == "US"
        assert updated.tariff == 0.2
        assert updated.emission_factor == 0.40

    @pytest.mark.parametrize("text", ["not a json", "{", "", b"\xff\xfe\x00"])
    def test_invalid_json_raises_import_failed(self, state, text):
        with pytest.raises(ImportFailed):
            import_state(state, text)

    @pytest.mark.parametrize("text", ["[]", "42", '"ZA"', "null"])
    def test_non_object_payload_raises_import_failed(self, state, text):
        with pytest.raises(ImportFailed):
            import_state(state, text)

    def test_wrong_schema_version_rejected(self, state):
        with pytest.raises(ImportFailed):
            import_state(state, json.dumps({"schemaVersion": 99, "tariff": 1.0}))

    def test_missing_schema_version_accepted(self, state):
        assert import_state(state, '{"emissionFactor": 0.5}').emission_factor == 0.5

    @pytest.mark.parametrize("payload", [
        {"country": "FR"},
        {"country": 7},
        {"devices": "solar"},
        {"devices": [{"type": "solar"}]},
        {"devices": [{"type": "ev", "installDate": "yesterday"}]},
        {"emailCfg": [1, 2, 3]},
        {"tariff": "cheap"},
        {"tariff": -1},
        {"tariff": True},
        {"emissionFactor": None},
    ])
    def test_invalid_field_is_ignored(self, state, payload):
        assert import_state(state, json.dumps(payload)) == state

    def test_tariff_too_large_for_float_is_ignored(self, state):
        text = '{"tariff": 1' + "0" * 400 + ', "emissionFactor": 0.5}'
        updated = import_state(state, text)
        assert updated.tariff == state.tariff
        assert updated.emission_factor == 0.5

    def test_capacity_too_large_for_float_becomes_zero(self, state):
        text = (
            '{"devices": [{"type": "solar", "installDate": "2026-02-01",'
            ' "config": {"capacityKW": 1' + "0" * 400 + "}}]}"
        )
        updated = import_state(state, text)
        assert updated.devices[0].config.capacity_kw == 0.0
        assert snapshot(updated).total_kg_avoided == 0.0

    def test_empty_object_is_a_no_op(self, state):
        assert import_state(state, "{}") == state

    def test_imports_original_field_names_and_bytes(self, state):
        text = json.dumps({
            "devices": [{
                "id": "abc",
                "type": "ev",
                "name": "Model Y",
                "installDate": "2026-01-05T00:00:00.000Z",
                "config": {"kmPerDay": 35, "evKWhPerKm": 0.15, "iceKgPerKm": 0.192, "iceLPer100km": 7.5},
            }],
            "emailCfg": {"emailsPerDay": 10},
        }).encode("utf-8")
        updated = import_state(state, text)
        ev = updated.devices[0]
        assert (ev.id, ev.name, ev.install_date) == ("abc", "Model Y", date(2026, 1, 5))
        assert ev.config.km_per_day == 35.0
        assert updated.email == EmailProfile(emails_per_day=10.0)
        assert snapshot(updated).per_device[0].daily.daily_kg_avoided == pytest.approx(1.995)


def test_device_from_dict_fills_missing_id_and_name():
    device = device_from_dict({"type": "solar_geyser", "installDate": "2026-02-01"})
    assert device.id
    assert device.name == "Solar Geyser"
    assert device.config.tank_litres is None


def test_device_from_dict_coerces_garbage_numbers_to_zero():
    device = device_from_dict({
        "type": "solar", "installDate": "2026-02-01", "config": {"capacityKW": "lots"},
    })
    assert device.config.capacity_kw == 0.0
    assert device.config.performance_ratio is None


# ─────────────────────────────────────────────────────────────────────────────
# Page URL token
# ─────────────────────────────────────────────────────────────────────────────

def test_url_token_round_trip(state):
    edited = import_state(state, json.dumps({"tariff": 2.5, "emailCfg": {"pctWithAttachments": 0.355}}))
    token = pack_state(edited)
    assert token.isascii() and "\n" not in token
    assert unpack_state(default_state("UK", today=TODAY), token) == edited


@pytest.mark.parametrize("token", ["not-a-state-token", "", "AAAA", "ünïcode"])
def test_corrupt_url_token_raises_import_failed(state, token):
    with pytest.raises(ImportFailed):
        unpack_state(state, token)
