"""Image loaders and helpers for picking the right one for a stream."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO

from floatmap.errors import InvalidFormat
from floatmap.parallel import TaskPool
from floatmap.types import ImageData

from .base import ImageLoader, LoadResult
from .pfm import PfmHeader, PfmImageLoader, decode_pfm_payload, read_pfm_header

__all__ = [
    "DEFAULT_LOADERS",
    "ImageLoader",
    "LoadResult",
    "PfmHeader",
    "PfmImageLoader",
    "decode_pfm_payload",
    "find_loader",
    "load_image",
    "read_pfm_header",
]

DEFAULT_LOADERS: tuple[ImageLoader, ...] = (PfmImageLoader(),)


def find_loader(
    stream: BinaryIO, loaders: Sequence[ImageLoader] = DEFAULT_LOADERS
) -> ImageLoader | None:
    """Return the first loader that recognises ``stream``, or ``None``."""

    for loader in loaders:
        if loader.can_load_stream(stream):
            return loader
    return None


def load_image(
    path: str | Path,
    channel_selector: str = "",
    pool: TaskPool | None = None,
    loaders: Sequence[ImageLoader] = DEFAULT_LOADERS,
) -> tuple[ImageData, bool]:
    """Open ``path`` and decode it with the first matching loader."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    with path.open("rb") as stream:
        loader = find_loader(stream, loaders)
        if loader is None:
            raise InvalidFormat(f"No loader recognises {path}", str(path))
        return loader.load(stream, channel_selector, pool)
