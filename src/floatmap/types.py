from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

__all__ = [
    "Channel",
    "DEFAULT_CHANNEL_NAMES",
    "ImageData",
    "ImageSize",
    "make_channels",
]

DEFAULT_CHANNEL_NAMES = ("R", "G", "B", "A")
"""Names assigned, in order, to the channels of multi-channel images."""

LUMINANCE_CHANNEL_NAME = "L"


@dataclass(frozen=True, slots=True)
class ImageSize:
    """Integer pixel dimensions of an image."""

    width: int
    height: int

    @property
    def num_pixels(self) -> int:
        return self.width * self.height


class Channel:
    """A named 2-D grid of ``float32`` samples addressed by ``(x, y)``.

    The backing array is stored row-major with shape ``(height, width)`` and is
    zero-initialised on construction. Its dimensions never change.
    """

    __slots__ = ("name", "_data")

    def __init__(self, name: str, size: ImageSize) -> None:
        if size.width < 0 or size.height < 0:
            raise ValueError(f"Channel dimensions must be non-negative, got {size}")
        self.name = name
        self._data: NDArray[np.float32] = np.zeros((size.height, size.width), dtype=np.float32)

    def __repr__(self) -> str:
        return f"Channel(name={self.name!r}, size={self.size.width}x{self.size.height})"

    @property
    def size(self) -> ImageSize:
        height, width = self._data.shape
        return ImageSize(width, height)

    @property
    def data(self) -> NDArray[np.float32]:
        return self._data

    def _check(self, x: int, y: int) -> None:
        height, width = self._data.shape
        if not (0 <= x < width and 0 <= y < height):
            raise IndexError(f"Coordinate ({x}, {y}) outside {width}x{height} channel {self.name!r}")

    def at(self, x: int, y: int) -> float:
        self._check(x, y)
        return float(self._data[y, x])

    def set(self, x: int, y: int, value: float) -> None:
        self._check(x, y)
        self._data[y, x] = value

    def row(self, y: int) -> NDArray[np.float32]:
        """Return a writable view of on-screen row ``y``."""
        if not 0 <= y < self._data.shape[0]:
            raise IndexError(f"Row {y} outside channel {self.name!r} of height {self._data.shape[0]}")
        return self._data[y]


def make_channels(count: int, size: ImageSize) -> list[Channel]:
    """Allocate ``count`` zeroed channels with deterministic default names.

    A single channel is treated as luminance (``"L"``). Otherwise channels are
    named ``R``, ``G``, ``B``, ``A`` and then by their decimal index.
    """

    if count < 1:
        raise ValueError(f"Channel count must be positive, got {count}")
    if count == 1:
        return [Channel(LUMINANCE_CHANNEL_NAME, size)]
    names = [
        DEFAULT_CHANNEL_NAMES[idx] if idx < len(DEFAULT_CHANNEL_NAMES) else str(idx)
        for idx in range(count)
    ]
    return [Channel(name, size) for name in names]


@dataclass(slots=True)
class ImageData:
    """Decoded image: ordered channels plus the layers they belong to."""

    channels: list[Channel] = field(default_factory=list)
    layers: list[str] = field(default_factory=list)

    @property
    def channel_names(self) -> list[str]:
        return [channel.name for channel in self.channels]

    @property
    def size(self) -> ImageSize | None:
        return self.channels[0].size if self.channels else None

    def channel(self, name: str) -> Channel:
        for candidate in self.channels:
            if candidate.name == name:
                return candidate
        raise KeyError(f"Unknown channel: {name!r}")
