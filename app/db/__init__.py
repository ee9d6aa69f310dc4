"""
Database module - durable key-value slots (SQL or MongoDB backend).
"""
from app.db.base import KeyValueStore, DB_KEY, SESSION_KEY
from app.core.config import Settings


def create_kv_store(settings: Settings) -> KeyValueStore:
    """Build the backend named by settings.store_backend."""
    if settings.store_backend == "mongo":
        from app.db.mongodb import MongoKeyValueStore
        return MongoKeyValueStore.from_uri(settings.mongodb_uri, settings.mongodb_db)
    if settings.store_backend == "sql":
        from app.db.sql import SqlKeyValueStore
        return SqlKeyValueStore(settings.database_url, echo=settings.debug)
    raise ValueError(f"Unknown store backend '{settings.store_backend}'. Use 'sql' or 'mongo'.")


__all__ = [
    "KeyValueStore",
    "DB_KEY",
    "SESSION_KEY",
    "create_kv_store"
]
