from __future__ import annotations

import io
import math

import numpy as np
import pytest

from floatmap.errors import InvalidFormat
from floatmap.io import read_pfm_header


def test_read_header_rgb_little_endian() -> None:
    stream = io.BytesIO(b"PF\n4 3\n-1.0\n" + b"\x00" * 4)

    header = read_pfm_header(stream)

    assert header.magic == "PF"
    assert header.size.width == 4
    assert header.size.height == 3
    assert header.channel_count == 3
    assert header.scale == 1.0
    assert header.little_endian is True
    assert header.byte_order == "little"
    assert header.num_bytes == 4 * 3 * 3 * 4
    assert stream.tell() == len(b"PF\n4 3\n-1.0\n")


@pytest.mark.parametrize(
    ("magic", "channels"),
    [("Pf", 1), ("PF", 3), ("PF4", 4)],
)
def test_magic_maps_to_channel_count(magic: str, channels: int) -> None:
    header = read_pfm_header(io.BytesIO(f"{magic}\n2 2\n1\n".encode()))
    assert header.channel_count == channels
    assert header.little_endian is False


@pytest.mark.parametrize("magic", ["P6", "pf", "PF3", "PFM"])
def test_unknown_magic_is_rejected(magic: str) -> None:
    with pytest.raises(InvalidFormat, match="magic") as excinfo:
        read_pfm_header(io.BytesIO(f"{magic}\n2 2\n-1\n".encode()))
    assert excinfo.value.value == magic


@pytest.mark.parametrize("scale", ["0", "-0.0", "nan", "inf", "-inf", "Infinity"])
def test_non_finite_or_zero_scale_is_rejected(scale: str) -> None:
    with pytest.raises(InvalidFormat, match="scale") as excinfo:
        read_pfm_header(io.BytesIO(f"PF\n2 2\n{scale}\n".encode()))
    value = excinfo.value.value
    assert value == 0 or not math.isfinite(value)


@pytest.mark.parametrize(("width", "height"), [(0, 4), (4, 0), (0, 0)])
def test_zero_pixels_is_rejected(width: int, height: int) -> None:
    with pytest.raises(InvalidFormat, match="zero pixels"):
        read_pfm_header(io.BytesIO(f"PF\n{width} {height}\n-1\n".encode()))


def test_negative_dimensions_are_rejected() -> None:
    with pytest.raises(InvalidFormat, match="dimensions"):
        read_pfm_header(io.BytesIO(b"PF\n-2 2\n-1\n"))


@pytest.mark.parametrize("header", [b"PF\n2x 2\n-1\n", b"PF\n2 two\n-1\n", b"PF\n2 2\nscale\n"])
def test_non_numeric_tokens_are_rejected(header: bytes) -> None:
    with pytest.raises(InvalidFormat):
        read_pfm_header(io.BytesIO(header))


@pytest.mark.parametrize("header", [b"", b"PF", b"PF\n2", b"PF\n2 2\n"])
def test_short_header_is_rejected(header: bytes) -> None:
    with pytest.raises(InvalidFormat):
        read_pfm_header(io.BytesIO(header))


def test_overlong_token_is_rejected() -> None:
    with pytest.raises(InvalidFormat, match="too long"):
        read_pfm_header(io.BytesIO(b"P" * 200 + b"\n2 2\n-1\n"))


def test_garbage_after_scale_is_skipped_up_to_terminator() -> None:
    header_bytes = b"Pf\n1 1\n-1.0abc  trailing\n"
    payload = np.float32(7.0).astype("<f4").tobytes()
    stream = io.BytesIO(header_bytes + payload)

    header = read_pfm_header(stream)

    assert header.scale == 1.0
    assert stream.read() == payload


def test_carriage_return_terminates_header() -> None:
    payload = b"\n\x00\x00\x80"
    stream = io.BytesIO(b"Pf 1 1 -1\r" + payload)

    read_pfm_header(stream)

    # Only the first terminator belongs to the header.
    assert stream.read() == payload


def test_arbitrary_whitespace_between_tokens() -> None:
    header = read_pfm_header(io.BytesIO(b"  PF4 \t\n 5\n\n 6 \t 2.5\n"))
    assert (header.size.width, header.size.height) == (5, 6)
    assert header.scale == 2.5
    assert header.little_endian is False
