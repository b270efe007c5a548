from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests

from ..errors import SensorFetchError
from .types import parse_float, parse_timestamp

log = logging.getLogger(__name__)

HistoryPoint = Tuple[datetime, float]


class HomeAssistantClient:
    """Minimal client for the hub's REST API (states and history)."""

    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._url = url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            }
        )

    def states(self) -> List[Dict[str, Any]]:
        data = self._get("/api/states")
        if not isinstance(data, list):
            raise SensorFetchError("Unexpected /api/states response")
        return data

    def history(
        self, entity_ids: Iterable[str], start: datetime, end: Optional[datetime] = None
    ) -> Dict[str, List[HistoryPoint]]:
        """Return numeric history points per entity between start and end."""
        ids = [entity_id for entity_id in entity_ids if entity_id]
        if not ids:
            return {}
        params = {
            "filter_entity_id": ",".join(ids),
            "minimal_response": "",
            "no_attributes": "",
        }
        if end is not None:
            params["end_time"] = end.isoformat()
        data = self._get(f"/api/history/period/{start.isoformat()}", params=params)
        if not isinstance(data, list):
            raise SensorFetchError("Unexpected history response")
        return parse_history(data)

    def close(self) -> None:
        self._session.close()

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        url = self._url + path
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise SensorFetchError(f"Hub request {path} failed: {exc}") from exc
        except ValueError as exc:
            raise SensorFetchError(f"Hub returned invalid JSON for {path}") from exc


def parse_history(data: List[Any]) -> Dict[str, List[HistoryPoint]]:
    """Flatten the hub's list-per-entity history into numeric points.

    With ``minimal_response`` only the first entry of each list carries the
    entity id, so it is taken from there.
    """
    history: Dict[str, List[HistoryPoint]] = {}
    for series in data:
        if not series:
            continue
        entity_id = series[0].get("entity_id")
        if not entity_id:
            continue
        points = history.setdefault(entity_id, [])
        for entry in series:
            value = parse_float(entry.get("state"))
            when = parse_timestamp(entry.get("last_changed") or entry.get("last_updated"))
            if value is None or when is None:
                continue
            points.append((when, value))
        log.debug("History for %s: %d points", entity_id, len(points))
    return history
