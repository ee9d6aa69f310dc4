import json
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.core.errors import StoreUnavailableError
from app.db.base import KeyValueStore

logger = logging.getLogger(__name__)

CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS kv_store (
        key VARCHAR(128) PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TIMESTAMP NOT NULL
    )
"""


class SqlKeyValueStore(KeyValueStore):
    """
    Key-value slots in a single SQL table.

    Works with any SQLAlchemy URL; SQLite file is the default.
    Each write is its own transaction, so a failed write leaves
    the previous value in place.
    """

    def __init__(self, database_url: str, echo: bool = False):
        connect_args = {}
        if database_url.startswith("sqlite"):
            # Routes may run in a threadpool
            connect_args["check_same_thread"] = False
        self.engine = create_engine(database_url, echo=echo, connect_args=connect_args)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        try:
            with self.engine.begin() as conn:
                conn.execute(text(CREATE_TABLE_SQL))
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Could not prepare key-value table: {e}") from e

    @contextmanager
    def get_db_session(self):
        """
        Context manager for database sessions.
        Usage:
            with store.get_db_session() as db:
                db.execute(text("SELECT * FROM kv_store"))
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get(self, key: str) -> Optional[Any]:
        try:
            with self.get_db_session() as db:
                row = db.execute(
                    text("SELECT value FROM kv_store WHERE key = :key"),
                    {"key": key}
                ).fetchone()
        except SQLAlchemyError as e:
            logger.error("Read of %s failed: %s", key, e)
            raise StoreUnavailableError(f"Could not read '{key}'") from e
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except ValueError as e:
            logger.error("Stored value for %s is not valid JSON: %s", key, e)
            raise StoreUnavailableError(f"Stored value for '{key}' is corrupt") from e

    def set(self, key: str, value: Any) -> None:
        try:
            with self.get_db_session() as db:
                db.execute(
                    text("""
                        INSERT INTO kv_store (key, value, updated_at)
                        VALUES (:key, :value, :updated_at)
                        ON CONFLICT (key) DO UPDATE
                        SET value = EXCLUDED.value, updated_at = EXCLUDED.updated_at
                    """),
                    {"key": key, "value": json.dumps(value), "updated_at": datetime.now(timezone.utc).isoformat()}
                )
        except SQLAlchemyError as e:
            logger.error("Write of %s failed: %s", key, e)
            raise StoreUnavailableError(f"Could not write '{key}'") from e

    def set_if_absent(self, key: str, value: Any) -> bool:
        try:
            with self.get_db_session() as db:
                db.execute(
                    text("""
                        INSERT INTO kv_store (key, value, updated_at)
                        VALUES (:key, :value, :updated_at)
                    """),
                    {"key": key, "value": json.dumps(value), "updated_at": datetime.now(timezone.utc).isoformat()}
                )
            return True
        except IntegrityError:
            return False
        except SQLAlchemyError as e:
            logger.error("Insert of %s failed: %s", key, e)
            raise StoreUnavailableError(f"Could not write '{key}'") from e

    def delete(self, key: str) -> None:
        try:
            with self.get_db_session() as db:
                db.execute(text("DELETE FROM kv_store WHERE key = :key"), {"key": key})
        except SQLAlchemyError as e:
            logger.error("Delete of %s failed: %s", key, e)
            raise StoreUnavailableError(f"Could not delete '{key}'") from e

    def ping(self) -> bool:
        """Returns True if connection successful, False otherwise."""
        try:
            with self.get_db_session() as db:
                row = db.execute(text("SELECT 1 as test")).fetchone()
                return row[0] == 1
        except SQLAlchemyError as e:
            logger.warning("SQL store ping failed: %s", e)
            return False
