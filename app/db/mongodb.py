"""
MongoDB Key-Value Backend

Each slot is one document in the kv_store collection:
    {"_id": <key>, "value": <json>, "updated_at": <datetime>}

WHY a document per slot?
- update_one on _id is atomic, so a write is all-or-nothing
- $setOnInsert with upsert gives put-if-absent without a race window
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from app.core.errors import StoreUnavailableError
from app.db.base import KeyValueStore

logger = logging.getLogger(__name__)

COLLECTION_NAME = "kv_store"


class MongoKeyValueStore(KeyValueStore):

    def __init__(self, collection: Collection, client: Optional[MongoClient] = None):
        self.collection = collection
        self.client = client

    @classmethod
    def from_uri(cls, uri: str, db_name: str) -> "MongoKeyValueStore":
        """Create a store backed by a new client (connection pooling handled by pymongo)."""
        client = MongoClient(uri)
        return cls(client[db_name][COLLECTION_NAME], client=client)

    def get(self, key: str) -> Optional[Any]:
        try:
            doc = self.collection.find_one({"_id": key})
        except PyMongoError as e:
            logger.error("Read of %s failed: %s", key, e)
            raise StoreUnavailableError(f"Could not read '{key}'") from e
        if doc is None:
            return None
        return doc.get("value")

    def set(self, key: str, value: Any) -> None:
        try:
            self.collection.update_one(
                {"_id": key},
                {"$set": {"value": value, "updated_at": datetime.now(timezone.utc)}},
                upsert=True
            )
        except PyMongoError as e:
            logger.error("Write of %s failed: %s", key, e)
            raise StoreUnavailableError(f"Could not write '{key}'") from e

    def set_if_absent(self, key: str, value: Any) -> bool:
        try:
            result = self.collection.update_one(
                {"_id": key},
                {"$setOnInsert": {"value": value, "updated_at": datetime.now(timezone.utc)}},
                upsert=True
            )
        except PyMongoError as e:
            logger.error("Insert of %s failed: %s", key, e)
            raise StoreUnavailableError(f"Could not write '{key}'") from e
        return result.upserted_id is not None

    def delete(self, key: str) -> None:
        try:
            self.collection.delete_one({"_id": key})
        except PyMongoError as e:
            logger.error("Delete of %s failed: %s", key, e)
            raise StoreUnavailableError(f"Could not delete '{key}'") from e

    def ping(self) -> bool:
        """
        Test if MongoDB is reachable.
        Returns True if connection successful, False otherwise.
        """
        if self.client is None:
            return True
        try:
            # ping command checks connection
            self.client.admin.command('ping')
            return True
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", e)
            return False
