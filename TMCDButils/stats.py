"""Concurrent counters for the ingestion pipeline."""

from __future__ import annotations

import logging
import threading
from typing import Dict

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_EVERY = 10000


class AtomicCounter:
    """Integer counter with its own lock."""

    def __init__(self, value: int = 0):
        self._value = value
        self._lock = threading.Lock()

    def increment(self, amount: int = 1) -> int:
        """Add ``amount`` and return the new value."""
        with self._lock:
            self._value += amount
            return self._value

    @property
    def value(self) -> int:
        return self._value


class IngestStats:
    """Preallocation, update and error counts shared by all workers."""

    def __init__(self, progress_every: int = DEFAULT_PROGRESS_EVERY):
        self.progress_every = progress_every
        self.preallocations = AtomicCounter()
        self.updates = AtomicCounter()
        self.errors = AtomicCounter()

    def record_preallocation(self) -> int:
        return self.preallocations.increment()

    def record_updates(self, count: int = 1) -> int:
        total = self.updates.increment(count)
        if self.progress_every and total // self.progress_every > (total - count) // self.progress_every:
            logger.info(
                "Progress: %d updates, %d preallocated documents",
                total,
                self.preallocations.value,
            )
        return total

    def record_error(self) -> int:
        return self.errors.increment()

    def snapshot(self) -> Dict[str, int]:
        return {
            "preallocations": self.preallocations.value,
            "updates": self.updates.value,
            "errors": self.errors.value,
        }

    def log_summary(self) -> None:
        snap = self.snapshot()
        logger.info("Preallocated documents: %d", snap["preallocations"])
        logger.info("Updates applied: %d", snap["updates"])
        logger.info("Errors: %d", snap["errors"])
