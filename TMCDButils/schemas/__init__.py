"""Schema definitions for MongoDB documents and legacy records."""

from .monitor_document import (
    COLLECTION_PREFIX,
    MONITOR_DOCUMENT_SCHEMA,
    MONITOR_INDEX_NAME,
    MONITOR_INDEXES,
    MONITOR_SHARD_KEY,
)
from .validators import LegacyRecord

__all__ = [
    "COLLECTION_PREFIX",
    "MONITOR_DOCUMENT_SCHEMA",
    "MONITOR_INDEX_NAME",
    "MONITOR_INDEXES",
    "MONITOR_SHARD_KEY",
    "LegacyRecord",
]
