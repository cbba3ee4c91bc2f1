"""Decoder interface shared by every image loader."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO

from floatmap.errors import PfmError
from floatmap.parallel import TaskPool
from floatmap.types import ImageData

__all__ = ["ImageLoader", "LoadResult"]


@dataclass(frozen=True, slots=True)
class LoadResult:
    """Outcome of :meth:`ImageLoader.try_load`: an image or a decoder error."""

    image: ImageData | None = None
    has_premultiplied_alpha: bool = False
    error: PfmError | None = None

    def __post_init__(self) -> None:
        if (self.image is None) == (self.error is None):
            raise ValueError("LoadResult needs exactly one of image or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> tuple[ImageData, bool]:
        if self.error is not None:
            raise self.error
        assert self.image is not None
        return self.image, self.has_premultiplied_alpha


class ImageLoader(ABC):
    """A decoder that can sniff and load one image format from a byte stream."""

    name: str = "image"

    @abstractmethod
    def can_load_stream(self, stream: BinaryIO) -> bool:
        """Report whether ``stream`` looks like this format, leaving it untouched."""

    @abstractmethod
    def load(
        self,
        stream: BinaryIO,
        channel_selector: str = "",
        pool: TaskPool | None = None,
    ) -> tuple[ImageData, bool]:
        """Decode ``stream`` and return the image and its premultiplied-alpha flag."""

    def try_load(
        self,
        stream: BinaryIO,
        channel_selector: str = "",
        pool: TaskPool | None = None,
    ) -> LoadResult:
        try:
            image, premultiplied = self.load(stream, channel_selector, pool)
        except PfmError as exc:
            return LoadResult(error=exc)
        return LoadResult(image=image, has_premultiplied_alpha=premultiplied)
