"""Task-execution context used to fan decode work out across rows."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from joblib import Parallel, delayed

__all__ = ["TaskPool"]

logger = logging.getLogger(__name__)


class TaskPool:
    """Bounded thread pool exposing a blocking ``parallel_for``.

    Pools are owned by the host application and passed to loaders explicitly.
    ``num_workers=None`` sizes the pool to the machine's CPU count.
    """

    def __init__(self, num_workers: int | None = None) -> None:
        if num_workers is None:
            num_workers = os.cpu_count() or 1
        if num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {num_workers}")
        self.num_workers = int(num_workers)

    def __repr__(self) -> str:
        return f"TaskPool(num_workers={self.num_workers})"

    def parallel_for(self, start: int, end: int, fn: Callable[[int], None]) -> None:
        """Call ``fn(i)`` for every ``i`` in ``[start, end)``.

        Returns once all calls have completed. Calls are unordered relative to
        each other; an exception from any call is re-raised here.
        """

        if end <= start:
            return
        if self.num_workers == 1 or end - start == 1:
            for idx in range(start, end):
                fn(idx)
            return
        logger.debug("parallel_for [%d, %d) on %d workers", start, end, self.num_workers)
        Parallel(n_jobs=self.num_workers, backend="threading")(
            delayed(fn)(idx) for idx in range(start, end)
        )
