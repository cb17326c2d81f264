"""Abstract store backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Tuple

IndexKeys = List[Tuple[str, int]]


class StoreBackend(ABC):
    """Abstract interface that concrete store backends must implement.

    Collection handles are opaque to callers; the same handle is passed
    back to the document operations below.
    """

    def __init__(self, connection_string: str):
        self.connection_string = connection_string

    # ------------------------------------------------------------------
    # Collection provisioning
    # ------------------------------------------------------------------
    @abstractmethod
    def collection_exists(self, name: str) -> bool:
        """Return True if the named collection already exists."""

    @abstractmethod
    def get_collection(self, name: str) -> Any:
        """Return a handle for the named collection, creating it lazily."""

    @abstractmethod
    def ensure_index(self, collection: Any, keys: IndexKeys, name: str) -> str:
        """Create an index if missing and return its name."""

    @abstractmethod
    def enable_sharding(self) -> None:
        """Enable sharding for the database."""

    @abstractmethod
    def shard_collection(self, name: str, key: IndexKeys) -> None:
        """Shard the named collection on ``key``."""

    # ------------------------------------------------------------------
    # Document operations
    # ------------------------------------------------------------------
    @abstractmethod
    def document_exists(self, collection: Any, document_id: str) -> bool:
        """Return True if a document with ``_id == document_id`` exists."""

    @abstractmethod
    def insert_document(self, collection: Any, document: Mapping) -> bool:
        """Insert a new document.

        Returns False instead of raising when a document with the same
        ``_id`` already exists.
        """

    @abstractmethod
    def update_fields(
        self,
        collection: Any,
        document_id: str,
        fields: Dict[str, Any],
        on_insert: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Set ``fields`` on one document, creating it when absent."""

    def close(self) -> None:
        """Release the connection; a no-op by default."""
