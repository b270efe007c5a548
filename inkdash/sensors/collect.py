from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..config import Settings
from .client import HomeAssistantClient
from .summary import Dashboard, select_relevant, summarize
from .types import parse_state

log = logging.getLogger(__name__)


def collect_dashboard(
    client: HomeAssistantClient, settings: Settings, now: Optional[datetime] = None
) -> Dashboard:
    """Fetch current states and the history window, then build the dashboard model."""
    now = now or datetime.now(timezone.utc)
    states = select_relevant(client.states(), settings.entity_ids)
    readings = [reading for reading in (parse_state(state) for state in states) if reading is not None]
    start = now - timedelta(hours=settings.history_hours)
    history = client.history(settings.sensors, start, now)
    log.info("Collected %d readings from %d states", len(readings), len(states))
    return summarize(readings, history, generated_at=now)
