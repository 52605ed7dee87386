# ═══════════════════════════════════════════════════════════════════════════════
# EcoCredits Platform — Application State & JSON Import/Export
# © 2026 Aparajita Parihar. All rights reserved.
#
# Owns the persisted state contract:
#   { "schemaVersion", "country", "devices", "emailCfg", "tariff",
#     "emissionFactor" }
#
# Rules:
#   • Switching country resets tariff and emission factor to that country's
#     registry defaults. This is the only transition that touches them
#     implicitly.
#   • Import of a syntactically invalid / non-object / wrong-version payload
#     raises ImportFailed and changes nothing.
#   • Import of a valid object applies each top-level key independently;
#     absent or invalid keys keep the current value.
#   • export → import is a no-op on the portfolio snapshot; so is
#     pack_state → unpack_state, used to keep state in the page URL.
#
# This file has ZERO Streamlit imports.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import base64
import binascii
import calendar
import dataclasses
import json
import logging
import math
import uuid
import zlib
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Union

from config.constants import (
    DEFAULT_COUNTRY_CODE,
    DEFAULT_EMAIL_ATTACH_GRAMS,
    DEFAULT_EMAIL_BASE_GRAMS,
    DEFAULT_EV_KWH_PER_KM,
    DEFAULT_GEYSER_KWH_PER_LITRE_PER_DAY,
    DEFAULT_ICE_KG_PER_KM,
    DEFAULT_ICE_L_PER_100KM,
    DEFAULT_PERFORMANCE_RATIO,
    DEFAULT_PV_SELF_CONSUMPTION,
    DEVICE_EV,
    DEVICE_LABELS,
    DEVICE_SOLAR,
    DEVICE_SOLAR_GEYSER,
    STATE_SCHEMA_VERSION,
)
from config.countries import lookup_country
from core.errors import ImportFailed, UnknownCountry
from core.impact import safe_number
from core.models import (
    CountryParameters,
    Device,
    EmailProfile,
    EVConfig,
    PortfolioSnapshot,
    SolarConfig,
    SolarGeyserConfig,
    UnknownDeviceConfig,
    with_overrides,
)
from core.portfolio import aggregate
from core.projection import shift_month

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppState:
    country: str
    devices: tuple[Device, ...]
    email: EmailProfile
    tariff: float
    emission_factor: float


# ─────────────────────────────────────────────────────────────────────────────
# WIRE FORMAT FIELD MAPS
# (attribute, export key, accepted aliases...) — the export key comes first.
# ─────────────────────────────────────────────────────────────────────────────

_CONFIG_TYPES: dict[str, type] = {
    DEVICE_SOLAR:        SolarConfig,
    DEVICE_EV:           EVConfig,
    DEVICE_SOLAR_GEYSER: SolarGeyserConfig,
}

_CONFIG_FIELDS: dict[type, tuple[tuple[str, ...], ...]] = {
    SolarConfig: (
        ("capacity_kw", "capacityKW"),
        ("insolation_kwh_per_kw_per_day", "insolation", "insolationKWhPerKWPerDay"),
        ("performance_ratio", "performanceRatio"),
        ("self_consumption_fraction", "selfConsumption", "selfConsumptionFraction"),
    ),
    EVConfig: (
        ("km_per_day", "kmPerDay"),
        ("ev_kwh_per_km", "evKWhPerKm"),
        ("ice_kg_per_km", "iceKgPerKm"),
        ("ice_litres_per_100km", "iceLPer100km", "iceLitresPer100km"),
    ),
    SolarGeyserConfig: (
        ("tank_litres", "tankLitres"),
        ("kwh_saved_per_litre_per_day", "kWhPerLitrePerDay", "kWhSavedPerLitrePerDay"),
    ),
}

_EMAIL_FIELDS: tuple[tuple[str, ...], ...] = (
    ("emails_per_day", "emailsPerDay"),
    ("fraction_with_attachments", "pctWithAttachments", "fractionWithAttachments"),
    ("base_grams_per_email", "baseGrams", "baseGramsPerEmail"),
    ("attachment_grams_per_email", "attachGrams", "attachmentGramsPerEmail"),
)


def _optional_number(value: Any) -> Optional[float]:
    """``None`` means "not set"; anything else is coerced, invalid → 0.0."""
    return None if value is None else safe_number(value)


def _export_number(value: Optional[float]) -> Optional[float]:
    return None if value is None else safe_number(value)


def _read_fields(raw: dict, fields: tuple[tuple[str, ...], ...]) -> dict[str, Optional[float]]:
    values: dict[str, Optional[float]] = {}
    for attr, *keys in fields:
        found = next((raw[k] for k in keys if k in raw), None)
        values[attr] = _optional_number(found)
    return values


def _write_fields(record: Any, fields: tuple[tuple[str, ...], ...]) -> dict[str, Optional[float]]:
    return {keys[0]: _export_number(getattr(record, attr)) for attr, *keys in fields}


# ─────────────────────────────────────────────────────────────────────────────
# DEVICE (DE)SERIALISATION
# ─────────────────────────────────────────────────────────────────────────────

def new_device_id() -> str:
    return str(uuid.uuid4())


def _parse_install_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) < 10:
        raise ValueError(f"installDate must be an ISO date string, got {value!r}")
    # Accept full ISO timestamps as well as plain YYYY-MM-DD.
    return date.fromisoformat(value[:10])


def device_from_dict(raw: Any) -> Device:
    """Build a Device from its exported JSON shape.

    Raises ``ValueError`` for a structurally invalid record. Unrecognised
    type tags are preserved as ``UnknownDeviceConfig``.
    """
    if not isinstance(raw, dict):
        raise ValueError("device entry must be an object")
    type_name = raw.get("type")
    if not isinstance(type_name, str) or not type_name:
        raise ValueError("device entry needs a string 'type'")
    install_date = _parse_install_date(raw.get("installDate"))

    config_raw = raw.get("config", {})
    if config_raw is None:
        config_raw = {}
    if not isinstance(config_raw, dict):
        raise ValueError("device 'config' must be an object")

    config_cls = _CONFIG_TYPES.get(type_name)
    if config_cls is None:
        config = UnknownDeviceConfig(type_name=type_name, raw=dict(config_raw))
    else:
        config = config_cls(**_read_fields(config_raw, _CONFIG_FIELDS[config_cls]))

    device_id = raw.get("id")
    if not isinstance(device_id, str) or not device_id:
        device_id = new_device_id()
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        name = DEVICE_LABELS.get(type_name, type_name)

    return Device(id=device_id, name=name, install_date=install_date, config=config)


def device_to_dict(device: Device) -> dict[str, Any]:
    config = device.config
    if isinstance(config, UnknownDeviceConfig):
        config_out: dict[str, Any] = dict(config.raw)
    else:
        config_out = _write_fields(config, _CONFIG_FIELDS[type(config)])
    return {
        "id": device.id,
        "type": device.type,
        "name": device.name,
        "installDate": device.install_date.isoformat(),
        "config": config_out,
    }


def email_from_dict(raw: Any) -> EmailProfile:
    if not isinstance(raw, dict):
        raise ValueError("emailCfg must be an object")
    return EmailProfile(**_read_fields(raw, _EMAIL_FIELDS))


def email_to_dict(profile: EmailProfile) -> dict[str, Optional[float]]:
    return _write_fields(profile, _EMAIL_FIELDS)


# ─────────────────────────────────────────────────────────────────────────────
# STATE TRANSITIONS
# ─────────────────────────────────────────────────────────────────────────────

def _months_ago(today: date, months: int) -> date:
    year, month = shift_month(today.year, today.month, -months)
    # 31 March minus one month clamps to the last day of February.
    return date(year, month, min(today.day, calendar.monthrange(year, month)[1]))


def demo_devices(country: str = DEFAULT_COUNTRY_CODE, today: Optional[date] = None) -> tuple[Device, ...]:
    """Starter portfolio shown on first load."""
    today = today or date.today()
    params = lookup_country(country)
    return (
        Device(
            id=new_device_id(),
            name="Rooftop PV",
            install_date=_months_ago(today, 4),
            config=SolarConfig(
                capacity_kw=5.0,
                insolation_kwh_per_kw_per_day=params.solar_yield_kwh_per_kw_per_day,
                performance_ratio=DEFAULT_PERFORMANCE_RATIO,
                self_consumption_fraction=DEFAULT_PV_SELF_CONSUMPTION,
            ),
        ),
        Device(
            id=new_device_id(),
            name="Daily Driver EV",
            install_date=_months_ago(today, 2),
            config=EVConfig(
                km_per_day=35.0,
                ev_kwh_per_km=DEFAULT_EV_KWH_PER_KM,
                ice_kg_per_km=DEFAULT_ICE_KG_PER_KM,
                ice_litres_per_100km=DEFAULT_ICE_L_PER_100KM,
            ),
        ),
        Device(
            id=new_device_id(),
            name="Solar Geyser 200L",
            install_date=_months_ago(today, 1),
            config=SolarGeyserConfig(
                tank_litres=200.0,
                kwh_saved_per_litre_per_day=DEFAULT_GEYSER_KWH_PER_LITRE_PER_DAY,
            ),
        ),
    )


DEMO_EMAIL = EmailProfile(
    emails_per_day=40.0,
    fraction_with_attachments=0.35,
    base_grams_per_email=DEFAULT_EMAIL_BASE_GRAMS,
    attachment_grams_per_email=DEFAULT_EMAIL_ATTACH_GRAMS,
)


def default_state(country: str = DEFAULT_COUNTRY_CODE, today: Optional[date] = None) -> AppState:
    params = lookup_country(country)
    return AppState(
        country=params.code,
        devices=demo_devices(params.code, today),
        email=DEMO_EMAIL,
        tariff=params.tariff_per_kwh,
        emission_factor=params.emission_factor_kg_per_kwh,
    )


def switch_country(state: AppState, code: str) -> AppState:
    """Select ``code``; tariff and emission factor reset to its defaults."""
    params = lookup_country(code)
    return dataclasses.replace(
        state,
        country=params.code,
        tariff=params.tariff_per_kwh,
        emission_factor=params.emission_factor_kg_per_kwh,
    )


def add_device(state: AppState, device: Device) -> AppState:
    """Newest devices are listed first."""
    return dataclasses.replace(state, devices=(device,) + tuple(state.devices))


def remove_device(state: AppState, device_id: str) -> AppState:
    return dataclasses.replace(
        state, devices=tuple(d for d in state.devices if d.id != device_id)
    )


def state_parameters(state: AppState) -> CountryParameters:
    """Registry parameters for the state's country with its tariff/EF edits applied."""
    return with_overrides(
        lookup_country(state.country),
        tariff=safe_number(state.tariff),
        emission_factor=safe_number(state.emission_factor),
    )


def snapshot(state: AppState) -> PortfolioSnapshot:
    return aggregate(state.devices, state.email, state_parameters(state))


# ─────────────────────────────────────────────────────────────────────────────
# EXPORT / IMPORT
# ─────────────────────────────────────────────────────────────────────────────

def _export_payload(state: AppState) -> dict[str, Any]:
    return {
        "schemaVersion": STATE_SCHEMA_VERSION,
        "country": state.country,
        "devices": [device_to_dict(d) for d in state.devices],
        "emailCfg": email_to_dict(state.email),
        "tariff": safe_number(state.tariff),
        "emissionFactor": safe_number(state.emission_factor),
    }


def export_state(state: AppState) -> str:
    """Complete, pretty-printed JSON document for ``state``."""
    return json.dumps(_export_payload(state), indent=2, ensure_ascii=False)


def _valid_rate(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except OverflowError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def import_state(state: AppState, text: Union[str, bytes]) -> AppState:
    """Apply an exported JSON document on top of ``state``.

    Returns the new state; ``state`` itself is never modified.
    """
    try:
        payload = json.loads(text)
    except (TypeError, ValueError) as exc:
        logger.warning("State import rejected: invalid JSON (%s)", exc)
        raise ImportFailed("Invalid JSON") from exc
    if not isinstance(payload, dict):
        logger.warning("State import rejected: top level is %s", type(payload).__name__)
        raise ImportFailed("Invalid JSON: expected an object at the top level")
    version = payload.get("schemaVersion", STATE_SCHEMA_VERSION)
    if version != STATE_SCHEMA_VERSION:
        logger.warning("State import rejected: schemaVersion %r", version)
        raise ImportFailed(
            f"Unsupported schemaVersion {version!r} (expected {STATE_SCHEMA_VERSION})"
        )

    updated = state

    # Country first: its reset rule must not clobber tariff/EF in the payload.
    if "country" in payload:
        code = payload["country"]
        if code != updated.country:
            try:
                updated = switch_country(updated, code)
            except UnknownCountry:
                logger.debug("Import: ignoring unsupported country %r", code)

    if "devices" in payload:
        raw_devices = payload["devices"]
        try:
            if not isinstance(raw_devices, list):
                raise ValueError("devices must be a list")
            devices = tuple(device_from_dict(item) for item in raw_devices)
        except (TypeError, ValueError) as exc:
            logger.debug("Import: keeping current devices (%s)", exc)
        else:
            updated = dataclasses.replace(updated, devices=devices)

    if "emailCfg" in payload:
        try:
            email = email_from_dict(payload["emailCfg"])
        except ValueError as exc:
            logger.debug("Import: keeping current email profile (%s)", exc)
        else:
            updated = dataclasses.replace(updated, email=email)

    for key, attr in (("tariff", "tariff"), ("emissionFactor", "emission_factor")):
        if key in payload:
            value = _valid_rate(payload[key])
            if value is None:
                logger.debug("Import: ignoring invalid %s %r", key, payload[key])
            else:
                updated = dataclasses.replace(updated, **{attr: value})

    return updated


# ─────────────────────────────────────────────────────────────────────────────
# URL TOKEN (survives a browser reload)
# Same document as export_state, zlib-compressed and URL-safe base64 encoded.
# ─────────────────────────────────────────────────────────────────────────────

def pack_state(state: AppState) -> str:
    raw = json.dumps(_export_payload(state), separators=(",", ":"), ensure_ascii=False)
    return base64.urlsafe_b64encode(zlib.compress(raw.encode("utf-8"))).decode("ascii")


def unpack_state(state: AppState, token: str) -> AppState:
    """Inverse of ``pack_state``, applied on top of ``state`` like ``import_state``.

    A corrupt token raises ``ImportFailed``.
    """
    try:
        text = zlib.decompress(base64.urlsafe_b64decode(token.encode("ascii")))
    except (AttributeError, UnicodeEncodeError, binascii.Error, zlib.error) as exc:
        logger.warning("State token rejected: %s", exc)
        raise ImportFailed("Corrupt state token") from exc
    return import_state(state, text)
