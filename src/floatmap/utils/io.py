from __future__ import annotations

from pathlib import Path
from typing import Protocol


class _SupportsPath(Protocol):
    """Protocol for path-like objects accepted by Path."""

    def __fspath__(self) -> str:  # pragma: no cover - runtime protocol hook
        ...


StrPath = str | Path | _SupportsPath


def prepare_output(path: StrPath) -> Path:
    """Return ``path`` as a :class:`Path`, creating its parent directory."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    return p
