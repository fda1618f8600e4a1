"""
MongoDB access for the Portfolio API.

One pydantic model maps to one collection (lowercased class name). The
`Database` handle is built by the application factory and shared by every
request; it opens the client on first use and keeps it for the life of the
process.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from bson import ObjectId
from pydantic import BaseModel
from pymongo import MongoClient, ReturnDocument
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

SortSpec = Sequence[Tuple[str, int]]


class DatabaseConfigurationError(RuntimeError):
    """Raised when no connection string has been configured."""


@dataclass
class ConnectionStatus:
    ok: bool
    error: Optional[str] = None
    collections: List[str] = field(default_factory=list)


def parse_object_id(value: str) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if not value or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def serialize_document(doc: Optional[dict]) -> Optional[dict]:
    """Expose the store-generated `_id` as a string `id`."""
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def _as_dict(data: Union[BaseModel, dict]) -> dict:
    if isinstance(data, BaseModel):
        return data.model_dump()
    return dict(data)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Database:
    def __init__(
        self,
        uri: Optional[str],
        name: str,
        client_factory: Callable[..., MongoClient] = MongoClient,
    ):
        self.uri = uri
        self.name = name
        self._client_factory = client_factory
        self._client = None
        self._db = None

    @property
    def connected(self) -> bool:
        return self._db is not None

    def connect(self):
        """Return the database handle, creating the client on first call.

        A failed attempt leaves nothing cached, so a later call starts over.
        """
        if self._db is not None:
            return self._db
        if not self.uri:
            raise DatabaseConfigurationError("Please define the MONGO_URI environment variable")
        client = None
        try:
            client = self._client_factory(self.uri)
            # MongoClient is lazy; ping so an unreachable server fails here.
            client.admin.command("ping")
        except PyMongoError:
            logger.exception("MongoDB connection failed")
            if client is not None:
                client.close()
            self._client = None
            self._db = None
            raise
        self._client = client
        self._db = client[self.name]
        logger.info("MongoDB connected (database=%s)", self.name)
        return self._db

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            logger.info("MongoDB connection closed")
        self._client = None
        self._db = None

    def collection(self, name: str):
        return self.connect()[name]

    def status(self) -> ConnectionStatus:
        try:
            names = self.connect().list_collection_names()
        except (DatabaseConfigurationError, PyMongoError) as exc:
            return ConnectionStatus(ok=False, error=str(exc))
        return ConnectionStatus(ok=True, collections=sorted(names))

    def ensure_indexes(self) -> None:
        self.collection("admin").create_index("email", unique=True)

    # Documents

    def create_document(self, collection_name: str, data: Union[BaseModel, dict]) -> str:
        data_dict = _as_dict(data)
        now = _now()
        data_dict["created_at"] = now
        data_dict["updated_at"] = now
        result = self.collection(collection_name).insert_one(data_dict)
        return str(result.inserted_id)

    def get_documents(
        self,
        collection_name: str,
        filter_dict: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        sort: Optional[SortSpec] = None,
    ) -> List[dict]:
        cursor = self.collection(collection_name).find(filter_dict or {})
        if sort:
            cursor = cursor.sort(list(sort))
        if limit:
            cursor = cursor.limit(limit)
        return [serialize_document(doc) for doc in cursor]

    def get_document(self, collection_name: str, document_id: str) -> Optional[dict]:
        oid = parse_object_id(document_id)
        if oid is None:
            return None
        return serialize_document(self.collection(collection_name).find_one({"_id": oid}))

    def find_one(self, collection_name: str, filter_dict: Dict[str, Any]) -> Optional[dict]:
        return serialize_document(self.collection(collection_name).find_one(filter_dict))

    def get_first_document(self, collection_name: str) -> Optional[dict]:
        return self.find_one(collection_name, {})

    def update_document(
        self, collection_name: str, document_id: str, data: Union[BaseModel, dict]
    ) -> Optional[dict]:
        oid = parse_object_id(document_id)
        if oid is None:
            return None
        changes = _as_dict(data)
        changes["updated_at"] = _now()
        res = self.collection(collection_name).find_one_and_update(
            {"_id": oid}, {"$set": changes}, return_document=ReturnDocument.AFTER
        )
        return serialize_document(res)

    def upsert_first_document(self, collection_name: str, data: Union[BaseModel, dict]) -> dict:
        """Update the single document of a one-record collection, creating it if absent."""
        changes = _as_dict(data)
        now = _now()
        changes["updated_at"] = now
        res = self.collection(collection_name).find_one_and_update(
            {},
            {"$set": changes, "$setOnInsert": {"created_at": now}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return serialize_document(res)

    def increment(self, collection_name: str, document_id: str, field_name: str) -> bool:
        oid = parse_object_id(document_id)
        if oid is None:
            return False
        res = self.collection(collection_name).update_one({"_id": oid}, {"$inc": {field_name: 1}})
        return res.matched_count == 1

    def delete_document(self, collection_name: str, document_id: str) -> bool:
        oid = parse_object_id(document_id)
        if oid is None:
            return False
        res = self.collection(collection_name).delete_one({"_id": oid})
        return res.deleted_count == 1

    def replace_documents(
        self, collection_name: str, items: Sequence[Union[BaseModel, dict]]
    ) -> List[dict]:
        """Swap the collection's contents for `items`.

        The new documents go in before the old ones are removed, so a failed
        insert leaves the previous contents in place.
        """
        coll = self.collection(collection_name)
        old_ids = [doc["_id"] for doc in coll.find({}, {"_id": 1})]
        now = _now()
        docs = []
        for item in items:
            doc = _as_dict(item)
            doc["created_at"] = now
            doc["updated_at"] = now
            docs.append(doc)
        if docs:
            coll.insert_many(docs)
        if old_ids:
            coll.delete_many({"_id": {"$in": old_ids}})
        return [serialize_document(doc) for doc in docs]

    def count_documents(self, collection_name: str, filter_dict: Optional[Dict[str, Any]] = None) -> int:
        return self.collection(collection_name).count_documents(filter_dict or {})
