from __future__ import annotations

from typing import Sequence, Tuple

from ..errors import RasterError
from .types import PixelGrid

PBM_MAGIC = b"P4"
_WHITESPACE = b" \t\r\n"


def bytes_per_row(width: int) -> int:
    return (width + 7) // 8


def pack_line(line: Sequence[bool]) -> bytes:
    """Pack booleans MSB-first; a short final byte is padded with zero bits."""
    out = bytearray()
    for i in range(0, len(line), 8):
        chunk = line[i : i + 8]
        value = 0
        for bit, pix in enumerate(chunk):
            if pix:
                value |= 1 << (7 - bit)
        out.append(value)
    return bytes(out)


def pack_bits(grid: PixelGrid) -> bytes:
    """Pack the whole grid as one bit field, white pixels set.

    Bit ``y * width + x`` lives in byte ``index // 8``. Rows are not
    byte-aligned: a row may end mid-byte and the next row continues in it.
    """
    grid.validate()
    return pack_line(grid.white)


def pbm_header(width: int, height: int) -> bytes:
    return b"%s\n%d %d\n" % (PBM_MAGIC, width, height)


def pack_pbm(grid: PixelGrid) -> bytes:
    """Encode the grid as a binary PBM (P4) file, black pixels set.

    Every row starts on a fresh byte and is ``ceil(width / 8)`` bytes long.
    """
    grid.validate()
    out = bytearray(pbm_header(grid.width, grid.height))
    for y in range(grid.height):
        out += pack_line([not pix for pix in grid.row(y)])
    return bytes(out)


def parse_pbm_header(data: bytes) -> Tuple[int, int, int]:
    """Return (width, height, payload_offset) of a binary PBM file."""
    if not data.startswith(PBM_MAGIC):
        raise RasterError("Not a binary PBM (P4) file")
    tokens = []
    i = len(PBM_MAGIC)
    n = len(data)
    while len(tokens) < 2:
        while i < n and data[i] in _WHITESPACE:
            i += 1
        if i < n and data[i] == ord("#"):
            while i < n and data[i] != ord("\n"):
                i += 1
            continue
        start = i
        while i < n and data[i] not in _WHITESPACE:
            i += 1
        if start == i:
            raise RasterError("Truncated PBM header")
        tokens.append(data[start:i])
    # Exactly one whitespace byte separates the header from the payload.
    if i >= n:
        raise RasterError("Truncated PBM header")
    try:
        width, height = (int(token) for token in tokens)
    except ValueError as exc:
        raise RasterError(f"Invalid PBM dimensions: {exc}") from exc
    if width <= 0 or height <= 0:
        raise RasterError(f"Invalid PBM dimensions {width}x{height}")
    return width, height, i + 1


def unpack_pbm(data: bytes) -> PixelGrid:
    """Decode a P4 file back into a grid, checking the payload size."""
    width, height, offset = parse_pbm_header(data)
    row_bytes = bytes_per_row(width)
    payload = data[offset:]
    if len(payload) != row_bytes * height:
        raise RasterError(
            f"PBM payload is {len(payload)} bytes, expected {row_bytes * height}"
        )
    white = []
    for y in range(height):
        base = y * row_bytes
        for x in range(width):
            bit = (payload[base + x // 8] >> (7 - x % 8)) & 1
            white.append(not bit)
    return PixelGrid(width, height, white)
