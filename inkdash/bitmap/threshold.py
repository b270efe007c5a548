from __future__ import annotations

from typing import Sequence

from .types import PixelGrid, RasterImage

THRESHOLD = 128


def brightness(r: int, g: int, b: int) -> float:
    """Unweighted channel mean; alpha plays no part."""
    return (r + g + b) / 3


def is_white(pixel: Sequence[int]) -> bool:
    r, g, b = pixel[0], pixel[1], pixel[2]
    return brightness(r, g, b) > THRESHOLD


def classify(raster: RasterImage) -> PixelGrid:
    """Classify every pixel of the raster as white (True) or black (False)."""
    raster.validate()
    white = [is_white(pixel) for pixel in raster.pixels]
    return PixelGrid(raster.width, raster.height, white)
