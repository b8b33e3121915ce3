# btp/store.py
# In-memory historical set with copy-on-write publication.

import threading
from typing import Iterable, Optional, Tuple

import structlog

from .config import SAMPLE_PROJECTS
from .schemas import HistoricalProject

logger = structlog.get_logger()


def sample_projects() -> Tuple[HistoricalProject, ...]:
    """The fixed reference set loaded at startup."""
    return tuple(HistoricalProject(**row) for row in SAMPLE_PROJECTS)


class HistoricalStore:
    """
    Owns the historical set for a session. Readers take a snapshot (an
    immutable tuple) and never lock; writers build a new tuple and publish
    it under a lock. Nothing is persisted.
    """

    def __init__(self, projects: Optional[Iterable[HistoricalProject]] = None):
        self._lock = threading.Lock()
        self._snapshot: Tuple[HistoricalProject, ...] = tuple(projects or ())

    def snapshot(self) -> Tuple[HistoricalProject, ...]:
        return self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    def seed_samples(self) -> int:
        """Replace the set with the sample projects; returns the new size."""
        return self.replace(sample_projects())

    def merge(self, projects: Iterable[HistoricalProject]) -> int:
        """Append imported records; returns how many were added."""
        new = tuple(projects)
        if not new:
            return 0
        with self._lock:
            self._snapshot = self._snapshot + new
            total = len(self._snapshot)
        logger.info("store_merge", added=len(new), total=total)
        return len(new)

    def replace(self, projects: Iterable[HistoricalProject]) -> int:
        new = tuple(projects)
        with self._lock:
            self._snapshot = new
        logger.info("store_replace", total=len(new))
        return len(new)

    def reset(self) -> None:
        self.replace(())


def default_store(seed: bool = True) -> HistoricalStore:
    store = HistoricalStore()
    if seed:
        store.seed_samples()
    return store
