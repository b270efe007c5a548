from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from ..config import CANVAS_HEIGHT, CANVAS_WIDTH
from ..sensors import Dashboard

WEEKDAYS = ["Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag"]
MONTHS = [
    "Januar", "Februar", "März", "April", "Mai", "Juni",
    "Juli", "August", "September", "Oktober", "November", "Dezember",
]

# Hub weather conditions to Font Awesome icon classes
WEATHER_ICONS = {
    "clear-night": "fa-moon",
    "cloudy": "fa-cloud",
    "fog": "fa-smog",
    "hail": "fa-cloud-meatball",
    "lightning": "fa-bolt",
    "lightning-rainy": "fa-cloud-bolt",
    "partlycloudy": "fa-cloud-sun",
    "pouring": "fa-cloud-showers-heavy",
    "rainy": "fa-cloud-rain",
    "snowy": "fa-snowflake",
    "snowy-rainy": "fa-cloud-snow",
    "sunny": "fa-sun",
    "windy": "fa-wind",
    "windy-variant": "fa-wind",
    "exceptional": "fa-exclamation-triangle",
    "unknown": "fa-question",
}

STYLESHEET = Path(__file__).resolve().parent / "static" / "dashboard.css"

_environment: Optional[Environment] = None
_stylesheet: Optional[str] = None


def weather_icon(condition: Optional[str]) -> str:
    return WEATHER_ICONS.get(condition or "unknown", WEATHER_ICONS["unknown"])


def german_date(when: datetime) -> str:
    """Format as e.g. ``Montag, 3. März``."""
    return f"{WEEKDAYS[when.weekday()]}, {when.day}. {MONTHS[when.month - 1]}"


def clock_time(when: Optional[datetime]) -> str:
    if when is None:
        return "--:--"
    if when.tzinfo is not None:
        when = when.astimezone()
    return when.strftime("%H:%M")


def one_decimal(value: Optional[float]) -> str:
    if value is None:
        return "–"
    return f"{value:.1f}"


def environment() -> Environment:
    global _environment
    if _environment is None:
        env = Environment(
            loader=PackageLoader("inkdash.rendering", "templates"),
            autoescape=select_autoescape(["html"]),
        )
        env.filters["clock"] = clock_time
        env.filters["decimal"] = one_decimal
        env.filters["weather_icon"] = weather_icon
        _environment = env
    return _environment


def stylesheet() -> str:
    """Dashboard CSS, inlined so the page renders without the server."""
    global _stylesheet
    if _stylesheet is None:
        _stylesheet = STYLESHEET.read_text(encoding="utf-8")
    return _stylesheet


def render_dashboard_html(dashboard: Dashboard, now: Optional[datetime] = None) -> str:
    now = now or dashboard.generated_at or datetime.now()
    if now.tzinfo is not None:
        now = now.astimezone()
    template = environment().get_template("dashboard.html")
    return template.render(
        dashboard=dashboard,
        stylesheet=stylesheet(),
        date=german_date(now),
        width=CANVAS_WIDTH,
        height=CANVAS_HEIGHT,
    )
