"""Store backend factory."""

from __future__ import annotations

from typing import Optional

from .base import StoreBackend
from .mongodb import MongoDBBackend
from ..exceptions import ConnectionError


def get_backend(connection_string: Optional[str], database: Optional[str] = None,
                **kwargs) -> StoreBackend:
    """Return a MongoDB backend for a ``mongodb://`` connection string."""
    if not connection_string or not connection_string.startswith(("mongodb://", "mongodb+srv://")):
        raise ConnectionError(
            "MongoDB connection required. Set TMCDB_URL environment variable.\n"
            "Example: export TMCDB_URL=mongodb://host:port/database"
        )
    return MongoDBBackend(connection_string, database=database, **kwargs)


__all__ = ["StoreBackend", "MongoDBBackend", "get_backend"]
