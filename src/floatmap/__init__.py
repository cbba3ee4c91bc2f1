"""floatmap: a parallel decoder for Portable Float Map (PFM) images.

The decoder reads the PFM header, validates it, fans the payload out across
rows on an injected :class:`~floatmap.parallel.TaskPool` and returns named
``float32`` channels selected by a fuzzy channel selector.
"""

from __future__ import annotations

from .errors import InvalidFormat, PfmError, TruncatedData
from .io import LoadResult, PfmImageLoader, load_image
from .parallel import TaskPool
from .selection import matches_fuzzy, select_channels
from .types import Channel, ImageData, ImageSize, make_channels
from .version import __version__

__all__ = [
    "__version__",
    "Channel",
    "ImageData",
    "ImageSize",
    "InvalidFormat",
    "LoadResult",
    "PfmError",
    "PfmImageLoader",
    "TaskPool",
    "TruncatedData",
    "load_image",
    "make_channels",
    "matches_fuzzy",
    "select_channels",
]
