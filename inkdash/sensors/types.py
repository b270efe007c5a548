from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple, Union

log = logging.getLogger(__name__)

UNAVAILABLE_STATES = {"unavailable", "unknown", "none", ""}


@dataclass(frozen=True)
class TemperatureReading:
    entity_id: str
    location: str
    value: float
    unit: str = "°C"


@dataclass(frozen=True)
class HumidityReading:
    entity_id: str
    location: str
    value: float


@dataclass(frozen=True)
class BatteryReading:
    entity_id: str
    location: str
    value: float


@dataclass(frozen=True)
class WeatherReading:
    entity_id: str
    condition: str
    temperature: Optional[float] = None


@dataclass(frozen=True)
class SunEvent:
    entity_id: str
    next_rising: Optional[datetime] = None
    next_setting: Optional[datetime] = None


SensorReading = Union[TemperatureReading, HumidityReading, BatteryReading, WeatherReading, SunEvent]

_MEASUREMENTS = {
    "temperature": TemperatureReading,
    "humidity": HumidityReading,
    "battery": BatteryReading,
}


def split_entity_id(entity_id: str) -> Tuple[str, str]:
    """Return (location, kind) for ids shaped like ``sensor.<prefix>_<location>_<kind>``."""
    object_id = entity_id.split(".", 1)[-1]
    parts = object_id.split("_")
    if len(parts) < 2:
        return object_id, ""
    return parts[-2], parts[-1]


def parse_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in UNAVAILABLE_STATES:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_state(state: Mapping[str, Any]) -> Optional[SensorReading]:
    """Classify a hub state object, or return None if it carries no usable value."""
    entity_id = str(state.get("entity_id") or "")
    domain = entity_id.split(".", 1)[0]
    raw = state.get("state")
    attributes = state.get("attributes") or {}

    if domain == "weather":
        condition = str(raw or "unknown")
        if condition in UNAVAILABLE_STATES:
            condition = "unknown"
        return WeatherReading(entity_id, condition, parse_float(attributes.get("temperature")))
    if domain == "sun":
        return SunEvent(
            entity_id,
            next_rising=parse_timestamp(attributes.get("next_rising")),
            next_setting=parse_timestamp(attributes.get("next_setting")),
        )

    location, kind = split_entity_id(entity_id)
    reading_type = _MEASUREMENTS.get(attributes.get("device_class")) or _MEASUREMENTS.get(kind)
    if reading_type is None:
        log.debug("Ignoring %s: unsupported sensor kind '%s'", entity_id, kind)
        return None
    value = parse_float(raw)
    if value is None:
        log.debug("Ignoring %s: state '%s' is not numeric", entity_id, raw)
        return None
    if reading_type is TemperatureReading:
        unit = attributes.get("unit_of_measurement") or "°C"
        return TemperatureReading(entity_id, location, value, unit)
    return reading_type(entity_id, location, value)
