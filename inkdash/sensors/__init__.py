from .client import HomeAssistantClient, parse_history
from .collect import collect_dashboard
from .summary import Dashboard, RoomSummary, dew_point, select_relevant, summarize, value_range
from .types import (
    BatteryReading,
    HumidityReading,
    SensorReading,
    SunEvent,
    TemperatureReading,
    WeatherReading,
    parse_state,
)

__all__ = [
    "BatteryReading",
    "Dashboard",
    "HomeAssistantClient",
    "HumidityReading",
    "RoomSummary",
    "SensorReading",
    "SunEvent",
    "TemperatureReading",
    "WeatherReading",
    "collect_dashboard",
    "dew_point",
    "parse_history",
    "parse_state",
    "select_relevant",
    "summarize",
    "value_range",
]
