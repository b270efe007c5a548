from .encoding import (
    bytes_per_row,
    pack_bits,
    pack_line,
    pack_pbm,
    parse_pbm_header,
    pbm_header,
    unpack_pbm,
)
from .formats import OutputFormat
from .threshold import THRESHOLD, brightness, classify, is_white
from .types import PixelGrid, RasterImage

__all__ = [
    "OutputFormat",
    "PixelGrid",
    "RasterImage",
    "THRESHOLD",
    "brightness",
    "bytes_per_row",
    "classify",
    "is_white",
    "pack_bits",
    "pack_line",
    "pack_pbm",
    "parse_pbm_header",
    "pbm_header",
    "unpack_pbm",
]
