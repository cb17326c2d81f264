"""Time-partitioned collection routing.

All documents of one calendar month share a collection named
``monitorData_<month>_<year>``. Index and shard key are declared the first
time a partition is seen by this process.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Tuple

from .backends.base import StoreBackend
from .model import DocumentID
from .schemas import COLLECTION_PREFIX, MONITOR_INDEX_NAME, MONITOR_INDEXES, MONITOR_SHARD_KEY

logger = logging.getLogger(__name__)

PartitionKey = Tuple[int, int]


def partition_key(document_id: DocumentID) -> PartitionKey:
    return document_id.month, document_id.year


def partition_name(document_id: DocumentID) -> str:
    return collection_name(*partition_key(document_id))


def collection_name(month: int, year: int) -> str:
    return f"{COLLECTION_PREFIX}_{month}_{year}"


class CollectionRouter:
    """Resolve document ids to cached, provisioned collection handles."""

    def __init__(self, backend: StoreBackend, shard: bool = False):
        self.backend = backend
        self.shard = shard
        self._handles: Dict[PartitionKey, Any] = {}
        self._locks: Dict[PartitionKey, threading.Lock] = {}

    def resolve(self, document_id: DocumentID):
        """Return the collection handle for ``document_id``'s partition."""
        return self.resolve_partition(*partition_key(document_id))

    def resolve_partition(self, month: int, year: int):
        key = (month, year)
        handle = self._handles.get(key)
        if handle is not None:
            return handle

        # setdefault is atomic, so racers for one key share a lock
        lock = self._locks.setdefault(key, threading.Lock())
        with lock:
            handle = self._handles.get(key)
            if handle is None:
                handle = self._provision(collection_name(month, year))
                self._handles[key] = handle
        return handle

    def _provision(self, name: str):
        is_new = not self.backend.collection_exists(name)
        handle = self.backend.get_collection(name)
        if is_new:
            logger.info("Provisioning partition %s", name)
            self.backend.ensure_index(handle, MONITOR_INDEXES, MONITOR_INDEX_NAME)
            if self.shard:
                self.backend.enable_sharding()
                self.backend.shard_collection(name, MONITOR_SHARD_KEY)
        return handle

    def cached_partitions(self) -> Dict[PartitionKey, Any]:
        return dict(self._handles)
