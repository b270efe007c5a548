from .capture import BrowserCapture, CaptureBackend, inject_base_href
from .dashboard import german_date, render_dashboard_html, weather_icon
from .renderer import encode_png, grid_to_image, load_image, raster_from_image

__all__ = [
    "BrowserCapture",
    "CaptureBackend",
    "encode_png",
    "german_date",
    "grid_to_image",
    "inject_base_href",
    "load_image",
    "raster_from_image",
    "render_dashboard_html",
    "weather_icon",
]
