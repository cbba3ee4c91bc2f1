"""Exceptions raised while decoding float-map images."""

from __future__ import annotations

from typing import Any

__all__ = ["InvalidFormat", "PfmError", "TruncatedData"]


class PfmError(ValueError):
    """Base class for all decoder failures."""


class InvalidFormat(PfmError):
    """The header is malformed or describes an impossible image.

    ``value`` holds the offending raw value (magic token, scale, dimensions).
    """

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


class TruncatedData(PfmError):
    """Fewer payload bytes were available than the header promised."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Not sufficient bytes to read ({actual} vs {expected})")
        self.expected = expected
        self.actual = actual
