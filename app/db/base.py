"""
Key-Value Store interface.

The portal keeps exactly two durable slots:
- DB_KEY: the whole Database record (users + drives)
- SESSION_KEY: the currently signed-in identity

Values are plain JSON-compatible Python objects (dict/list/str/...).
Backends raise StoreUnavailableError on any read/write failure.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

DB_KEY = "campusprep_db"
SESSION_KEY = "campusprep_auth_session"


class KeyValueStore(ABC):

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Insert or overwrite a value in a single atomic write."""

    @abstractmethod
    def set_if_absent(self, key: str, value: Any) -> bool:
        """Insert only when the key is missing. Returns True if inserted."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""

    @abstractmethod
    def ping(self) -> bool:
        """True if the backend is reachable."""
