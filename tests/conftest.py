"""Shared fixtures: an in-memory, thread-safe store backend."""

from __future__ import annotations

import copy
import threading
from collections import Counter
from datetime import datetime, timezone

import pytest

from TMCDButils.backends.base import StoreBackend
from TMCDButils.existence import ExistenceCache
from TMCDButils.ingest import IngestContext
from TMCDButils.model import DocumentID, Metadata, Sample
from TMCDButils.router import CollectionRouter
from TMCDButils.stats import IngestStats


class FakeCollection:
    def __init__(self, name):
        self.name = name
        self.docs = {}
        self.indexes = {}
        self.lock = threading.Lock()


class FakeBackend(StoreBackend):
    """StoreBackend keeping documents in dicts, counting every call."""

    def __init__(self, existing=()):
        super().__init__("mongodb://fake/test")
        self.collections = {}
        self.created = set(existing)
        self.sharded = []
        self.calls = Counter()
        self.inserted = Counter()
        self._lock = threading.Lock()
        # when set, every existence probe waits here before returning
        self.probe_barrier = None

    def _count(self, name):
        with self._lock:
            self.calls[name] += 1

    def collection_exists(self, name):
        self._count("collection_exists")
        return name in self.created

    def get_collection(self, name):
        self._count("get_collection")
        with self._lock:
            return self.collections.setdefault(name, FakeCollection(name))

    def ensure_index(self, collection, keys, name):
        self._count("ensure_index")
        with collection.lock:
            collection.indexes[name] = list(keys)
        with self._lock:
            self.created.add(collection.name)
        return name

    def enable_sharding(self):
        self._count("enable_sharding")

    def shard_collection(self, name, key):
        self._count("shard_collection")
        with self._lock:
            self.sharded.append((name, list(key)))

    def document_exists(self, collection, document_id):
        self._count("document_exists")
        with collection.lock:
            found = document_id in collection.docs
        if self.probe_barrier is not None:
            self.probe_barrier.wait(timeout=5)
        return found

    def insert_document(self, collection, document):
        self._count("insert_document")
        with collection.lock:
            if document["_id"] in collection.docs:
                return False
            collection.docs[document["_id"]] = document
        with self._lock:
            self.inserted[document["_id"]] += 1
            self.created.add(collection.name)
        return True

    def update_fields(self, collection, document_id, fields, on_insert=None):
        self._count("update_fields")
        with collection.lock:
            doc = collection.docs.get(document_id)
            if doc is None:
                doc = {"_id": document_id}
                doc.update(copy.deepcopy(on_insert or {}))
                collection.docs[document_id] = doc
            for path, value in fields.items():
                target = doc
                *parents, leaf = path.split(".")
                for part in parents:
                    target = target.setdefault(part, {})
                target[leaf] = value
        with self._lock:
            self.created.add(collection.name)

    def document(self, document_id):
        """Return the stored document with ``_id == str(document_id)``."""
        key = str(document_id)
        for collection in self.collections.values():
            if key in collection.docs:
                return collection.docs[key]
        return None


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def context(backend):
    return IngestContext(
        backend=backend,
        router=CollectionRouter(backend),
        existence=ExistenceCache(capacity=1000, stripes=4),
        stats=IngestStats(progress_every=0),
    )


@pytest.fixture
def document_id():
    return DocumentID(2024, 5, 1, "DV10", "FrontEnd/Cryostat", "MP1")


@pytest.fixture
def metadata(document_id):
    return Metadata(document_id, "P1", "L", "SN1", 3, 1)


@pytest.fixture
def make_sample(metadata):
    def _make(hour=0, minute=0, second=0, value="7.2", meta=None):
        return Sample(meta or metadata, hour, minute, second, value)

    return _make


@pytest.fixture
def legacy_record():
    def _make(**overrides):
        record = {
            "componentName": "CONTROL/DV10/FrontEnd/Cryostat",
            "propertyName": "P1",
            "monitorPointName": "MP1",
            "location": "L",
            "serialNumber": "SN1",
            "index": 3,
            "monitorValue": "7.2",
            "date": datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc),
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def count_leaves():
    def _count(hourly):
        return sum(len(seconds) for minutes in hourly.values() for seconds in minutes.values())

    return _count
