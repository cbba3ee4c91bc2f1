"""Portable Float Map (PFM) decoder.

A PFM file is a short ASCII header followed by raw IEEE-754 ``float32``
samples::

    PF            magic: ``Pf`` (1 channel), ``PF`` (3) or ``PF4`` (4)
    640 480       width and height
    -1.0          scale; a negative sign marks a little-endian payload
    <binary>      width * height * channels floats, bottom row first

Rows are stored bottom-to-top, so decoding flips them into the usual
top-to-bottom order. Samples are multiplied by ``abs(scale)``.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import BinaryIO

import numpy as np

from floatmap.byteorder import FLOAT32_BYTES, flipped_row, is_host_little_endian, sample_index
from floatmap.errors import InvalidFormat, TruncatedData
from floatmap.parallel import TaskPool
from floatmap.selection import select_channels
from floatmap.types import Channel, ImageData, ImageSize, make_channels

from .base import ImageLoader

__all__ = [
    "PFM_CHANNEL_COUNTS",
    "PfmHeader",
    "PfmImageLoader",
    "decode_pfm_payload",
    "read_pfm_header",
]

logger = logging.getLogger(__name__)

PFM_CHANNEL_COUNTS = {"Pf": 1, "PF": 3, "PF4": 4}

_WHITESPACE = b" \t\n\r\v\f"
_LINE_TERMINATORS = b"\r\n"
_MAX_TOKEN_BYTES = 64
_READ_CHUNK_BYTES = 1 << 20
_INT_TOKEN = re.compile(r"[+-]?\d+")
_FLOAT_PREFIX = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class PfmHeader:
    """Validated PFM header. ``scale`` is always positive."""

    magic: str
    size: ImageSize
    channel_count: int
    scale: float
    little_endian: bool

    @property
    def num_floats(self) -> int:
        return self.size.num_pixels * self.channel_count

    @property
    def num_bytes(self) -> int:
        return self.num_floats * FLOAT32_BYTES

    @property
    def byte_order(self) -> str:
        return "little" if self.little_endian else "big"


def _read_token(stream: BinaryIO) -> tuple[bytes, bytes]:
    """Read one whitespace-delimited token; also return the byte that ended it."""

    char = stream.read(1)
    while char and char in _WHITESPACE:
        char = stream.read(1)

    token = bytearray()
    while char and char not in _WHITESPACE:
        token += char
        if len(token) > _MAX_TOKEN_BYTES:
            raise InvalidFormat("PFM header token too long", bytes(token))
        char = stream.read(1)

    if not token:
        raise InvalidFormat("Unexpected end of PFM header")
    return bytes(token), char


def _parse_dimension(token: bytes, label: str) -> int:
    text = token.decode("ascii", errors="replace")
    if not _INT_TOKEN.fullmatch(text):
        raise InvalidFormat(f"Invalid PFM {label} {text!r}", text)
    return int(text)


def _parse_scale(token: bytes) -> float:
    text = token.decode("ascii", errors="replace")
    # Trailing characters after the numeric prefix are left for the
    # terminator scan, mirroring stream extraction.
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise InvalidFormat(f"Invalid PFM scale {text!r}", text)
    return float(match.group(0))


def _skip_to_payload(stream: BinaryIO) -> None:
    char = stream.read(1)
    while char and char not in _LINE_TERMINATORS:
        char = stream.read(1)


def read_pfm_header(stream: BinaryIO) -> PfmHeader:
    """Parse and validate the textual header, leaving ``stream`` at the payload."""

    magic_token, _ = _read_token(stream)
    magic = magic_token.decode("ascii", errors="replace")
    channel_count = PFM_CHANNEL_COUNTS.get(magic)
    if channel_count is None:
        raise InvalidFormat(f"Invalid magic PFM string {magic}", magic)

    width = _parse_dimension(_read_token(stream)[0], "width")
    height = _parse_dimension(_read_token(stream)[0], "height")
    scale_token, terminator = _read_token(stream)
    scale = _parse_scale(scale_token)

    if not math.isfinite(scale) or scale == 0:
        raise InvalidFormat(f"Invalid PFM scale {scale}", scale)
    if width < 0 or height < 0:
        raise InvalidFormat(f"Invalid PFM dimensions {width}x{height}", (width, height))

    size = ImageSize(width, height)
    if size.num_pixels == 0:
        raise InvalidFormat("Image has zero pixels.", (width, height))

    if terminator not in (b"\r", b"\n"):
        _skip_to_payload(stream)

    header = PfmHeader(
        magic=magic,
        size=size,
        channel_count=channel_count,
        scale=abs(scale),
        little_endian=scale < 0,
    )
    logger.debug(
        "PFM header: %s %dx%d, %d channels, %s-endian, scale %g",
        magic,
        width,
        height,
        channel_count,
        header.byte_order,
        header.scale,
    )
    return header


def _read_exact(stream: BinaryIO, num_bytes: int) -> bytes:
    chunks: list[bytes] = []
    remaining = num_bytes
    while remaining > 0:
        # Header sizes are unverified; never ask the stream for more than one chunk.
        chunk = stream.read(min(remaining, _READ_CHUNK_BYTES))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def decode_pfm_payload(stream: BinaryIO, header: PfmHeader, pool: TaskPool) -> list[Channel]:
    """Read the binary payload and scatter it into per-channel grids.

    Rows are decoded independently on ``pool``. Each row reads its own slice of
    the payload and writes a single on-screen row of every channel, so no
    locking is needed.
    """

    payload = _read_exact(stream, header.num_bytes)
    if len(payload) < header.num_bytes:
        raise TruncatedData(header.num_bytes, len(payload))

    width, height = header.size.width, header.size.height
    num_channels = header.channel_count
    row_floats = width * num_channels
    should_swap = is_host_little_endian() != header.little_endian
    scale = np.float32(header.scale)
    channels = make_channels(num_channels, header.size)

    def decode_row(y: int) -> None:
        offset = sample_index(0, y, 0, width, num_channels) * FLOAT32_BYTES
        samples = np.frombuffer(payload, dtype=np.float32, count=row_floats, offset=offset)
        if should_swap:
            samples = samples.byteswap()
        pixels = samples.reshape(width, num_channels) * scale
        target = flipped_row(y, height)
        for c, channel in enumerate(channels):
            channel.row(target)[:] = pixels[:, c]

    logger.debug("Decoding %d rows (swap=%s) with %r", height, should_swap, pool)
    pool.parallel_for(0, height, decode_row)
    return channels


class PfmImageLoader(ImageLoader):
    """Loader for ``Pf``/``PF``/``PF4`` float maps."""

    name = "pfm"

    def __init__(self, pool: TaskPool | None = None) -> None:
        self.pool = pool

    def can_load_stream(self, stream: BinaryIO) -> bool:
        try:
            position = stream.tell()
        except (OSError, ValueError):
            return False
        try:
            head = stream.read(2)
        except (OSError, ValueError):
            head = b""
        try:
            stream.seek(position)
        except (OSError, ValueError):
            return False
        return len(head) == 2 and head[:1] == b"P" and head[1:2] in (b"F", b"f")

    def load(
        self,
        stream: BinaryIO,
        channel_selector: str = "",
        pool: TaskPool | None = None,
    ) -> tuple[ImageData, bool]:
        header = read_pfm_header(stream)
        pool = pool or self.pool or TaskPool()
        channels = decode_pfm_payload(stream, header, pool)

        result = ImageData()
        result.channels.extend(select_channels(channels, channel_selector))
        # PFM has no layers; every channel sits in the unnamed root layer.
        result.layers.append("")
        return result, False
