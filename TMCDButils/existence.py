"""Bounded cache of document ids known to exist in the store."""

from __future__ import annotations

import threading
import zlib
from collections import OrderedDict
from typing import Optional

from .stats import AtomicCounter

# Expected number of distinct monitor points, i.e. documents created per day
N_MONITOR_POINTS = 250000
DEFAULT_STRIPES = 16


class _Stripe:
    """Insertion-ordered set guarded by its own lock."""

    __slots__ = ("entries", "lock")

    def __init__(self):
        self.entries: "OrderedDict[str, None]" = OrderedDict()
        self.lock = threading.Lock()


class ExistenceCache:
    """Lock-striped, bounded set of document id strings.

    Ids hash to one stripe, but ``capacity`` is shared by all stripes: an
    id is only evicted once the whole cache holds more than ``capacity``
    entries. The victim is the oldest entry of the recording stripe, or of
    the next stripe holding one. Evicting an id only costs a later
    existence probe, because skeleton inserts tolerate duplicates.
    """

    def __init__(self, capacity: int = N_MONITOR_POINTS, stripes: int = DEFAULT_STRIPES):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        if stripes < 1:
            raise ValueError(f"stripes must be positive, got {stripes}")
        self.capacity = capacity
        self._stripes = tuple(_Stripe() for _ in range(min(stripes, capacity)))
        self._size = AtomicCounter()

    def _index(self, document_id: str) -> int:
        # stable across processes, unlike hash()
        return zlib.crc32(document_id.encode("utf-8")) % len(self._stripes)

    def contains(self, document_id: str) -> bool:
        stripe = self._stripes[self._index(document_id)]
        with stripe.lock:
            return document_id in stripe.entries

    __contains__ = contains

    def record(self, document_id: str) -> None:
        index = self._index(document_id)
        stripe = self._stripes[index]
        with stripe.lock:
            if document_id in stripe.entries:
                return
            stripe.entries[document_id] = None
        if self._size.increment() > self.capacity:
            self._evict_one(index, keep=document_id)

    def _evict_one(self, start: int, keep: str) -> None:
        # one stripe lock at a time, so concurrent evictions cannot deadlock
        count = len(self._stripes)
        for offset in range(count):
            stripe = self._stripes[(start + offset) % count]
            with stripe.lock:
                victim: Optional[str] = next(
                    (key for key in stripe.entries if key != keep), None
                )
                if victim is not None:
                    del stripe.entries[victim]
                    self._size.increment(-1)
                    return

    def clear(self) -> None:
        for stripe in self._stripes:
            with stripe.lock:
                removed = len(stripe.entries)
                stripe.entries.clear()
            self._size.increment(-removed)

    def __len__(self) -> int:
        return sum(len(stripe.entries) for stripe in self._stripes)
