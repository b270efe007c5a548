from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..errors import RasterError

RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class RasterImage:
    """Row-major RGBA pixels of a captured page."""

    width: int
    height: int
    pixels: Sequence[RGBA]

    def validate(self) -> None:
        """Validate dimensions against the pixel data."""
        if self.width <= 0 or self.height <= 0:
            raise RasterError(f"Raster must be at least 1x1, got {self.width}x{self.height}")
        if len(self.pixels) != self.width * self.height:
            raise RasterError(
                f"Raster has {len(self.pixels)} pixels, expected {self.width * self.height}"
            )

    def pixel(self, x: int, y: int) -> RGBA:
        """Return the (r, g, b, a) color at column x, row y."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise RasterError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} raster")
        return self.pixels[y * self.width + x]


@dataclass(frozen=True)
class PixelGrid:
    """Row-major black/white classification, True for white."""

    width: int
    height: int
    white: List[bool]

    def validate(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise RasterError(f"Grid must be at least 1x1, got {self.width}x{self.height}")
        if len(self.white) != self.width * self.height:
            raise RasterError("Grid length must equal width * height")

    def row(self, y: int) -> List[bool]:
        start = y * self.width
        return self.white[start : start + self.width]

    def is_white(self, x: int, y: int) -> bool:
        return self.white[y * self.width + x]
