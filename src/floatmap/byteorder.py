"""Byte-order helpers and explicit indexing for interleaved float payloads."""

from __future__ import annotations

import sys

import numpy as np

from .errors import TruncatedData

__all__ = [
    "FLOAT32_BYTES",
    "flipped_row",
    "float32_dtype",
    "is_host_little_endian",
    "read_float32",
    "sample_index",
    "swap_byte_order",
]

FLOAT32_BYTES = 4


def is_host_little_endian() -> bool:
    return sys.byteorder == "little"


def float32_dtype(little_endian: bool) -> np.dtype:
    return np.dtype("<f4" if little_endian else ">f4")


def swap_byte_order(value: float) -> float:
    """Reverse the four bytes of a 32-bit float and reinterpret them."""
    return float(np.array([value], dtype=np.float32).byteswap()[0])


def read_float32(buffer: bytes | bytearray | memoryview, offset: int, little_endian: bool) -> float:
    """Read one 32-bit float at ``offset`` in the given byte order.

    Unaligned offsets are fine. Raises :class:`TruncatedData` when fewer than
    four bytes remain.
    """

    if offset < 0:
        raise IndexError(f"Negative offset {offset}")
    available = len(buffer) - offset
    if available < FLOAT32_BYTES:
        raise TruncatedData(offset + FLOAT32_BYTES, len(buffer))
    return float(np.frombuffer(buffer, dtype=float32_dtype(little_endian), count=1, offset=offset)[0])


def sample_index(x: int, y: int, c: int, width: int, channels: int) -> int:
    """Flat index of channel ``c`` of pixel ``(x, y)`` in file order."""
    assert 0 <= x < width, f"x={x} outside width {width}"
    assert 0 <= c < channels, f"c={c} outside channel count {channels}"
    assert y >= 0, f"negative row {y}"
    return (y * width + x) * channels + c


def flipped_row(y: int, height: int) -> int:
    """Map a bottom-up file row to its top-down on-screen row."""
    assert 0 <= y < height, f"row {y} outside height {height}"
    return height - 1 - y
