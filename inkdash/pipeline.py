from __future__ import annotations

import logging
from dataclasses import dataclass

from .bitmap import OutputFormat, PixelGrid, RasterImage, classify, pack_bits, pack_pbm
from .config import CANVAS_HEIGHT, CANVAS_WIDTH
from .rendering import CaptureBackend, encode_png, load_image, raster_from_image

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedImage:
    data: bytes
    content_type: str


class DashboardPipeline:
    """Turns rendered dashboard HTML into panel-ready images.

    The capture backend is owned by the caller; the pipeline keeps no other
    state between calls.
    """

    def __init__(self, backend: CaptureBackend, width: int = CANVAS_WIDTH, height: int = CANVAS_HEIGHT) -> None:
        self.backend = backend
        self.width = width
        self.height = height

    def capture(self, html: str) -> RasterImage:
        png = self.backend.capture(html, self.width, self.height)
        raster = raster_from_image(load_image(png))
        raster.validate()
        return raster

    def render(self, html: str, fmt: OutputFormat) -> RenderedImage:
        grid = classify(self.capture(html))
        data = self.encode(grid, fmt)
        log.debug("Rendered %dx%d %s image (%d bytes)", grid.width, grid.height, fmt.value, len(data))
        return RenderedImage(data, fmt.content_type)

    @staticmethod
    def encode(grid: PixelGrid, fmt: OutputFormat) -> bytes:
        if fmt is OutputFormat.BITS:
            return pack_bits(grid)
        if fmt is OutputFormat.PBM:
            return pack_pbm(grid)
        if fmt is OutputFormat.PNG:
            return encode_png(grid)
        raise ValueError(f"Unsupported output format: {fmt}")
