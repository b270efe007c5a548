from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .errors import ConfigError

CANVAS_WIDTH = 480
CANVAS_HEIGHT = 800

DEFAULT_HA_URL = "http://homeassistant.local:8123"
DEFAULT_SENSORS = (
    "sensor.temperatur_wohnzimmer_temperature",
    "sensor.temperatur_wohnzimmer_humidity",
    "sensor.temperatur_bad_temperature",
    "sensor.temperatur_bad_humidity",
    "sensor.temperatur_balkon_temperature",
    "sensor.temperatur_balkon_humidity",
)
DEFAULT_WEATHER_ENTITY = "weather.forecast_home"
DEFAULT_SUN_ENTITY = "sun.sun"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
_WILDCARD_HOSTS = {"", "0.0.0.0", "::"}


@dataclass(frozen=True)
class Settings:
    ha_url: str = DEFAULT_HA_URL
    ha_token: str = ""
    ha_timeout: float = 10.0
    sensors: Tuple[str, ...] = DEFAULT_SENSORS
    weather_entity: str = DEFAULT_WEATHER_ENTITY
    sun_entity: str = DEFAULT_SUN_ENTITY
    history_hours: float = 24.0
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    public_url: Optional[str] = None
    capture_timeout: float = 30.0
    log_level: str = "INFO"

    @property
    def base_url(self) -> str:
        """URL the headless browser uses to resolve dashboard assets."""
        if self.public_url:
            return self.public_url.rstrip("/")
        host = "127.0.0.1" if self.host in _WILDCARD_HOSTS else self.host
        if ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{self.port}"

    @property
    def entity_ids(self) -> Tuple[str, ...]:
        extra = tuple(e for e in (self.weather_entity, self.sun_entity) if e)
        return self.sensors + extra

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        sensors = _split_list(env.get("INKDASH_SENSORS"))
        return cls(
            ha_url=env.get("HA_URL", DEFAULT_HA_URL).rstrip("/"),
            ha_token=env.get("HA_TOKEN", "").strip(),
            ha_timeout=_number(env, "HA_TIMEOUT", 10.0),
            sensors=sensors or DEFAULT_SENSORS,
            weather_entity=env.get("INKDASH_WEATHER_ENTITY", DEFAULT_WEATHER_ENTITY).strip(),
            sun_entity=env.get("INKDASH_SUN_ENTITY", DEFAULT_SUN_ENTITY).strip(),
            history_hours=_number(env, "INKDASH_HISTORY_HOURS", 24.0),
            host=env.get("INKDASH_HOST", DEFAULT_HOST),
            port=_port(env, "PORT", DEFAULT_PORT),
            public_url=env.get("INKDASH_PUBLIC_URL") or None,
            capture_timeout=_number(env, "INKDASH_CAPTURE_TIMEOUT", 30.0),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


def _split_list(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _port(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer port, got '{raw}'") from None
    if not 0 < value < 65536:
        raise ConfigError(f"{name} must be between 1 and 65535, got {value}")
    return value


def _number(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got '{raw}'") from None
    if value <= 0:
        raise ConfigError(f"{name} must be greater than zero")
    return value
