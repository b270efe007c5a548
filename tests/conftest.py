from __future__ import annotations

import io
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

import pytest
from PIL import Image

from inkdash.bitmap import RasterImage
from inkdash.config import Settings
from inkdash.errors import CaptureError, SensorFetchError
from inkdash.rendering import CaptureBackend

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


def raster_from_rows(rows: Sequence[Sequence[tuple]]) -> RasterImage:
    height = len(rows)
    width = len(rows[0]) if rows else 0
    pixels = [pixel for row in rows for pixel in row]
    return RasterImage(width, height, pixels)


def solid_raster(width: int, height: int, color: tuple) -> RasterImage:
    return RasterImage(width, height, [color] * (width * height))


def png_bytes(img: Image.Image) -> bytes:
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def split_image(width: int, height: int) -> Image.Image:
    """Left half white, right half black."""
    img = Image.new("RGB", (width, height), (0, 0, 0))
    img.paste((255, 255, 255), (0, 0, width // 2, height))
    return img


class FakeCapture(CaptureBackend):
    def __init__(self, draw: Optional[Callable[[int, int], Image.Image]] = None) -> None:
        self.draw = draw or split_image
        self.calls: List[tuple] = []

    def capture(self, html: str, width: int, height: int) -> bytes:
        self.calls.append((html, width, height))
        return png_bytes(self.draw(width, height))


class FailingCapture(CaptureBackend):
    @property
    def started(self) -> bool:
        return False

    def capture(self, html: str, width: int, height: int) -> bytes:
        raise CaptureError("capture backend not started")


HUB_STATES = [
    {
        "entity_id": "sensor.temperatur_wohnzimmer_temperature",
        "state": "21.5",
        "attributes": {"unit_of_measurement": "°C", "device_class": "temperature"},
    },
    {
        "entity_id": "sensor.temperatur_wohnzimmer_humidity",
        "state": "50",
        "attributes": {"unit_of_measurement": "%", "device_class": "humidity"},
    },
    {"entity_id": "sensor.temperatur_bad_temperature", "state": "23.0", "attributes": {}},
    {"entity_id": "sensor.temperatur_bad_humidity", "state": "unavailable", "attributes": {}},
    {"entity_id": "sensor.temperatur_balkon_temperature", "state": "8.25", "attributes": {}},
    {"entity_id": "sensor.temperatur_balkon_humidity", "state": "80", "attributes": {}},
    {"entity_id": "sensor.kitchen_power", "state": "120", "attributes": {}},
    {"entity_id": "weather.forecast_home", "state": "cloudy", "attributes": {"temperature": 9.0}},
    {
        "entity_id": "sun.sun",
        "state": "above_horizon",
        "attributes": {
            "next_rising": "2025-03-04T05:42:00+00:00",
            "next_setting": "2025-03-03T17:10:00+00:00",
        },
    },
]


class FakeHubClient:
    def __init__(self, states=None, history=None) -> None:
        self._states = HUB_STATES if states is None else states
        self._history = history or {}
        self.history_calls: List[tuple] = []
        self.closed = False

    def states(self):
        return list(self._states)

    def history(self, entity_ids, start, end=None):
        self.history_calls.append((tuple(entity_ids), start, end))
        return dict(self._history)

    def close(self):
        self.closed = True


class FailingHubClient(FakeHubClient):
    def states(self):
        raise SensorFetchError("Hub request /api/states failed: connection refused")


@pytest.fixture
def settings() -> Settings:
    return Settings(ha_url="http://hub.test:8123", ha_token="token", port=3100)


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 3, 3, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def hub_client() -> FakeHubClient:
    return FakeHubClient(
        history={
            "sensor.temperatur_wohnzimmer_temperature": [
                (datetime(2025, 3, 3, 1, 0, tzinfo=timezone.utc), 19.0),
                (datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc), 22.5),
            ],
        }
    )
