"""Fuzzy channel-name matching and selector-driven channel ordering."""

from __future__ import annotations

import re
from collections.abc import Sequence

from .types import Channel

__all__ = ["matches_fuzzy", "select_channels", "split_selector"]

_SEPARATORS = re.compile(r"[,\s]+")


def split_selector(pattern: str) -> list[str]:
    """Split a selector into its lower-cased, non-empty parts."""
    return [part for part in _SEPARATORS.split(pattern.lower()) if part]


def _is_subsequence(needle: str, haystack: str) -> bool:
    remaining = iter(haystack)
    return all(char in remaining for char in needle)


def matches_fuzzy(name: str, pattern: str) -> int | None:
    """Return the rank of the first selector part matching ``name``.

    A part matches when its characters appear in ``name`` in order, ignoring
    case. An empty selector matches everything with rank 0; ``None`` means no
    part matched.
    """

    parts = split_selector(pattern)
    if not parts:
        return 0
    lowered = name.lower()
    for rank, part in enumerate(parts):
        if _is_subsequence(part, lowered):
            return rank
    return None


def select_channels(channels: Sequence[Channel], selector: str) -> list[Channel]:
    """Filter and order ``channels`` according to ``selector``.

    With an empty selector all channels pass through in their given order.
    Otherwise only matching channels are kept, sorted by match rank and then
    by original position.
    """

    matches: list[tuple[int, int]] = []
    for idx, channel in enumerate(channels):
        rank = matches_fuzzy(channel.name, selector)
        if rank is not None:
            matches.append((rank, idx))

    if selector:
        matches.sort()

    return [channels[idx] for _, idx in matches]
