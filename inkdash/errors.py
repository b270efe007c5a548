from __future__ import annotations


class InkdashError(Exception):
    """Base class for errors raised by inkdash."""


class ConfigError(InkdashError, ValueError):
    pass


class RasterError(InkdashError, ValueError):
    """Raised when a raster does not describe a valid image."""


class CaptureError(InkdashError, RuntimeError):
    """Raised when the page could not be captured as an image."""


class SensorFetchError(InkdashError, RuntimeError):
    """Raised when the hub could not be queried."""
