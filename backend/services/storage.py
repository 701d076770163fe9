"""
storage.py
==========
Document-store gateway for the two logical collections, ``users`` and
``predictions``.

Primary backend: MongoDB via pymongo (one shared MongoClient per process).
Secondary backend: in-process dict store, selected with STORAGE_BACKEND=memory
for local development and tests.

Both backends upsert by id and query by plain equality filters. insert()
is the one atomic create: it refuses a taken id or unique field. Otherwise
nothing is transactional, and a read followed by a put is two independent
operations.
"""

from __future__ import annotations

import copy
import logging
from threading import Lock
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from pymongo import MongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from backend.config import Settings

logger = logging.getLogger(__name__)

USERS = "users"
PREDICTIONS = "predictions"

Record = Dict[str, Any]


def _matches(record: Record, filters: Optional[Dict[str, Any]]) -> bool:
    if not filters:
        return True
    return all(record.get(key) == value for key, value in filters.items())


class DuplicateRecordError(Exception):
    """Raised by insert() when the id or a unique field is already taken."""

    def __init__(self, collection: str, field: str):
        super().__init__(f"duplicate {field} in {collection}")
        self.collection = collection
        self.field = field


class DocumentStore:
    """Interface shared by the storage backends."""

    backend = "unresolved"

    def put(self, collection: str, doc_id: str, record: Record) -> None:
        raise NotImplementedError

    def insert(
        self,
        collection: str,
        doc_id: str,
        record: Record,
        unique: Iterable[str] = (),
    ) -> None:
        """Create a record atomically; no other record may share *doc_id* or any *unique* field."""
        raise NotImplementedError

    def get(self, collection: str, doc_id: str) -> Optional[Record]:
        raise NotImplementedError

    def query(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Record]:
        raise NotImplementedError

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass


class MemoryDocumentStore(DocumentStore):
    backend = "memory"

    def __init__(self):
        self._collections: Dict[str, Dict[str, Record]] = {}
        self._lock = Lock()

    def put(self, collection: str, doc_id: str, record: Record) -> None:
        with self._lock:
            self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(record)

    def insert(
        self,
        collection: str,
        doc_id: str,
        record: Record,
        unique: Iterable[str] = (),
    ) -> None:
        with self._lock:
            rows = self._collections.setdefault(collection, {})
            if doc_id in rows:
                raise DuplicateRecordError(collection, "_id")
            for field in unique:
                if any(r.get(field) == record.get(field) for r in rows.values()):
                    raise DuplicateRecordError(collection, field)
            rows[doc_id] = copy.deepcopy(record)

    def get(self, collection: str, doc_id: str) -> Optional[Record]:
        with self._lock:
            record = self._collections.get(collection, {}).get(doc_id)
            return copy.deepcopy(record) if record is not None else None

    def query(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Record]:
        with self._lock:
            rows = self._collections.get(collection, {}).values()
            return [copy.deepcopy(r) for r in rows if _matches(r, filters)]


class MongoDocumentStore(DocumentStore):
    backend = "mongo"

    def __init__(self, database_url: str, database_name: str, client: Optional[MongoClient] = None):
        if client is None:
            client = MongoClient(database_url, serverSelectionTimeoutMS=5000)
        self._client = client
        self._db = self._client[database_name]
        self._indexed: Set[Tuple[str, str]] = set()
        logger.info("Document store backend: mongo (database=%s)", database_name)

    @staticmethod
    def _strip(doc: Optional[Record]) -> Optional[Record]:
        if doc is None:
            return None
        doc.pop("_id", None)
        return doc

    def put(self, collection: str, doc_id: str, record: Record) -> None:
        self._db[collection].replace_one({"_id": doc_id}, {**record, "_id": doc_id}, upsert=True)

    def _ensure_unique_index(self, collection: str, field: str) -> None:
        if (collection, field) not in self._indexed:
            self._db[collection].create_index(field, unique=True)
            self._indexed.add((collection, field))

    def insert(
        self,
        collection: str,
        doc_id: str,
        record: Record,
        unique: Iterable[str] = (),
    ) -> None:
        unique = tuple(unique)
        for field in unique:
            self._ensure_unique_index(collection, field)
        try:
            self._db[collection].insert_one({**record, "_id": doc_id})
        except DuplicateKeyError as exc:
            raise DuplicateRecordError(collection, ", ".join(unique) or "_id") from exc

    def get(self, collection: str, doc_id: str) -> Optional[Record]:
        return self._strip(self._db[collection].find_one({"_id": doc_id}))

    def query(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Record]:
        return [self._strip(doc) for doc in self._db[collection].find(filters or {})]

    def ping(self) -> bool:
        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError as exc:
            logger.warning("Mongo ping failed: %s", exc)
            return False

    def close(self) -> None:
        self._client.close()


def create_store(settings: Settings) -> DocumentStore:
    """Build the document store selected by ``settings.storage_backend``."""
    if settings.storage_backend == "memory":
        logger.info("Document store backend: memory")
        return MemoryDocumentStore()
    if settings.storage_backend == "mongo":
        return MongoDocumentStore(settings.database_url, settings.database_name)
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.storage_backend!r}")
