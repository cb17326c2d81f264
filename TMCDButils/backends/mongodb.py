"""MongoDB backend implementation."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Dict, Mapping, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, DuplicateKeyError, OperationFailure, PyMongoError

from .base import IndexKeys, StoreBackend
from ..exceptions import ConnectionError, StoreError

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "OneMonitorPointPerDayPerDocument"

# Server codes meaning "already done" for sharding commands
_ALREADY_INITIALIZED = {20, 23}


def retry_on_error(max_tries: int = 3, delay: float = 1.0):
    """Decorator for retrying transient MongoDB failures.

    Duplicate keys are left for the caller to interpret.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            last_exc = None
            for attempt in range(max_tries):
                try:
                    return func(*args, **kwargs)
                except ConnectionFailure as exc:
                    last_exc = exc
                    if attempt == max_tries - 1:
                        raise ConnectionError(str(exc)) from exc
                    logger.warning("%s: transient failure (%s), retrying", func.__name__, exc)
                    time.sleep(delay * (2**attempt))
                except DuplicateKeyError:
                    raise
                except PyMongoError as exc:
                    raise StoreError(str(exc)) from exc
            raise ConnectionError(str(last_exc)) from last_exc

        return wrapper

    return decorator


class MongoDBBackend(StoreBackend):
    """MongoDB-based implementation of the StoreBackend interface."""

    def __init__(self, connection_string: str, database: Optional[str] = None,
                 max_pool_size: int = 50):
        super().__init__(connection_string)

        try:
            self.client = MongoClient(
                connection_string,
                maxPoolSize=max_pool_size,
                serverSelectionTimeoutMS=5000,
                retryWrites=True,
            )
            self.client.server_info()
        except ConnectionFailure as exc:
            raise ConnectionError(f"Cannot connect to MongoDB: {exc}") from exc

        if database:
            self.db = self.client.get_database(database)
        else:
            self.db = self.client.get_default_database(DEFAULT_DATABASE)
        logger.info("Connected to MongoDB database %s", self.db.name)

    # ------------------------------------------------------------------
    # Collection provisioning
    # ------------------------------------------------------------------
    @retry_on_error()
    def collection_exists(self, name: str) -> bool:
        return name in self.db.list_collection_names(filter={"name": name})

    def get_collection(self, name: str) -> Collection:
        # MongoDB creates the collection on first write
        return self.db.get_collection(name)

    @retry_on_error()
    def ensure_index(self, collection: Collection, keys: IndexKeys, name: str) -> str:
        return collection.create_index(keys, name=name)

    @retry_on_error()
    def enable_sharding(self) -> None:
        try:
            self.client.admin.command("enableSharding", self.db.name)
        except OperationFailure as exc:
            if exc.code not in _ALREADY_INITIALIZED:
                raise
            logger.debug("Sharding already enabled for %s", self.db.name)

    @retry_on_error()
    def shard_collection(self, name: str, key: IndexKeys) -> None:
        try:
            self.client.admin.command(
                "shardCollection", f"{self.db.name}.{name}", key=dict(key)
            )
        except OperationFailure as exc:
            if exc.code not in _ALREADY_INITIALIZED:
                raise
            logger.debug("Collection %s already sharded", name)

    # ------------------------------------------------------------------
    # Document operations
    # ------------------------------------------------------------------
    @retry_on_error()
    def document_exists(self, collection: Collection, document_id: str) -> bool:
        return collection.find_one({"_id": document_id}, projection={"_id": 1}) is not None

    @retry_on_error()
    def insert_document(self, collection: Collection, document: Mapping) -> bool:
        try:
            collection.insert_one(document)
        except DuplicateKeyError:
            return False
        return True

    @retry_on_error()
    def update_fields(
        self,
        collection: Collection,
        document_id: str,
        fields: Dict[str, Any],
        on_insert: Optional[Dict[str, Any]] = None,
    ) -> None:
        update = {"$set": fields}
        if on_insert:
            update["$setOnInsert"] = on_insert
        try:
            collection.update_one({"_id": document_id}, update, upsert=True)
        except DuplicateKeyError:
            # A concurrent upsert created the document first; it now matches.
            collection.update_one({"_id": document_id}, update, upsert=True)

    def close(self) -> None:
        self.client.close()
