"""Pytest configuration and shared PFM fixtures for the floatmap test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest

_MAGIC_BY_CHANNELS = {1: "Pf", 3: "PF", 4: "PF4"}


def encode_pfm(
    rows: np.ndarray,
    scale: float = -1.0,
    *,
    magic: str | None = None,
    terminator: bytes = b"\n",
) -> bytes:
    """Encode ``rows`` (file order, bottom row first) as PFM bytes.

    ``rows`` has shape ``(height, width)`` or ``(height, width, channels)``.
    The payload byte order follows the sign of ``scale``.
    """

    data = np.asarray(rows, dtype=np.float32)
    if data.ndim == 2:
        data = data[..., np.newaxis]
    height, width, channels = data.shape
    if magic is None:
        magic = _MAGIC_BY_CHANNELS[channels]
    dtype = "<f4" if scale < 0 else ">f4"
    header = f"{magic}\n{width} {height}\n{scale!r}".encode("ascii") + terminator
    return header + data.astype(dtype).tobytes()


@pytest.fixture
def make_pfm() -> Callable[..., bytes]:
    return encode_pfm


@pytest.fixture
def rgb_rows() -> np.ndarray:
    """A 4x3 RGB image in file order with distinct values per sample."""
    return np.arange(3 * 4 * 3, dtype=np.float32).reshape(3, 4, 3) / 8.0


@pytest.fixture
def write_pfm(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str, payload: bytes) -> Path:
        path = tmp_path / name
        path.write_bytes(payload)
        return path

    return _write
