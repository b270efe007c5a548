from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .client import HistoryPoint
from .types import (
    BatteryReading,
    HumidityReading,
    SensorReading,
    SunEvent,
    TemperatureReading,
    WeatherReading,
)

MAGNUS_A = 17.625
MAGNUS_B = 243.04

ValueRange = Tuple[float, float]


@dataclass
class RoomSummary:
    location: str
    temperature: Optional[TemperatureReading] = None
    humidity: Optional[HumidityReading] = None
    battery: Optional[BatteryReading] = None
    temperature_range: Optional[ValueRange] = None
    humidity_range: Optional[ValueRange] = None

    @property
    def title(self) -> str:
        return self.location[:1].upper() + self.location[1:]

    @property
    def dew_point(self) -> Optional[float]:
        if self.temperature is None or self.humidity is None:
            return None
        if self.humidity.value <= 0:
            return None
        return dew_point(self.temperature.value, self.humidity.value)


@dataclass
class Dashboard:
    rooms: List[RoomSummary] = field(default_factory=list)
    weather: Optional[WeatherReading] = None
    sun: Optional[SunEvent] = None
    generated_at: Optional[datetime] = None


def select_relevant(states: Iterable[Mapping[str, Any]], entity_ids: Iterable[str]) -> List[Mapping[str, Any]]:
    wanted = set(entity_ids)
    return [state for state in states if state.get("entity_id") in wanted]


def dew_point(temperature: float, humidity: float) -> float:
    """Dew point in °C from temperature (°C) and relative humidity (%), Magnus formula."""
    if humidity <= 0:
        raise ValueError("Relative humidity must be greater than zero")
    alpha = (MAGNUS_A * temperature) / (MAGNUS_B + temperature) + math.log(humidity / 100)
    return (MAGNUS_B * alpha) / (MAGNUS_A - alpha)


def value_range(points: Sequence[HistoryPoint]) -> Optional[ValueRange]:
    if not points:
        return None
    values = [value for _, value in points]
    return min(values), max(values)


def summarize(
    readings: Iterable[SensorReading],
    history: Optional[Mapping[str, Sequence[HistoryPoint]]] = None,
    generated_at: Optional[datetime] = None,
) -> Dashboard:
    """Group readings by location, in the order locations first appear."""
    history = history or {}
    rooms: Dict[str, RoomSummary] = {}
    dashboard = Dashboard(generated_at=generated_at)
    for reading in readings:
        if isinstance(reading, WeatherReading):
            dashboard.weather = reading
            continue
        if isinstance(reading, SunEvent):
            dashboard.sun = reading
            continue
        room = rooms.setdefault(reading.location, RoomSummary(reading.location))
        points = history.get(reading.entity_id, ())
        if isinstance(reading, TemperatureReading):
            room.temperature = reading
            room.temperature_range = value_range(points)
        elif isinstance(reading, HumidityReading):
            room.humidity = reading
            room.humidity_range = value_range(points)
        elif isinstance(reading, BatteryReading):
            room.battery = reading
    dashboard.rooms = list(rooms.values())
    return dashboard
