from __future__ import annotations

import io

from PIL import Image

from ..bitmap import PixelGrid, RasterImage
from ..errors import RasterError


def load_image(data: bytes) -> Image.Image:
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.copy()
    except (OSError, Image.DecompressionBombError) as exc:
        raise RasterError(f"Could not decode captured image: {exc}") from exc


def raster_from_image(img: Image.Image) -> RasterImage:
    if img.width <= 0 or img.height <= 0:
        raise RasterError("Captured image is empty")
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    data = img.tobytes()
    pixels = [tuple(data[i : i + 4]) for i in range(0, len(data), 4)]
    return RasterImage(img.width, img.height, pixels)


def grid_to_image(grid: PixelGrid) -> Image.Image:
    grid.validate()
    img = Image.new("L", (grid.width, grid.height))
    img.putdata([255 if pix else 0 for pix in grid.white])
    return img


def encode_png(grid: PixelGrid) -> bytes:
    buffer = io.BytesIO()
    grid_to_image(grid).save(buffer, format="PNG", optimize=True)
    return buffer.getvalue()
