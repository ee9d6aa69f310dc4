"""
Session Service - who is signed in right now.

The current identity lives in its own durable slot (SESSION_KEY), so a
restarted process picks up the last session. Exactly one session exists
per store.

Listener model: ONE subscriber at a time. subscribe() replaces any
previous subscriber and immediately replays the current state to the
new one. Every transition is written to the slot first, then the
subscriber is notified.
"""

import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.errors import StoreUnavailableError
from app.db.base import SESSION_KEY, KeyValueStore
from app.schemas.schemas import Identity, UserRole
from app.services.persistence_service import ADMIN_UID, PersistenceStore

logger = logging.getLogger(__name__)

AuthCallback = Callable[[Optional[Identity]], Union[None, Awaitable[None]]]


class SessionAuthenticator:

    def __init__(self, store: PersistenceStore, kv: KeyValueStore, admin_email: Optional[str] = None):
        self.store = store
        self.kv = kv
        self.admin_email = admin_email or get_settings().admin_email
        self._callback: Optional[AuthCallback] = None

    async def current_identity(self) -> Optional[Identity]:
        raw = self.kv.get(SESSION_KEY)
        if raw is None:
            return None
        try:
            return Identity.model_validate(raw)
        except ValidationError as e:
            logger.error("Stored session is malformed: %s", e)
            raise StoreUnavailableError("Stored session is corrupt") from e

    async def _notify(self, identity: Optional[Identity]) -> None:
        callback = self._callback
        if callback is None:
            return
        result = callback(identity)
        if inspect.isawaitable(result):
            await result

    async def _start_session(self, identity: Identity) -> Identity:
        self.kv.set(SESSION_KEY, identity.model_dump(mode="json"))
        logger.info("Signed in %s as %s", identity.uid, identity.role.value)
        await self._notify(identity)
        return identity

    # ============================================================
    # TRANSITIONS
    # Store errors propagate unchanged; state is untouched on failure.
    # ============================================================

    async def sign_up(self, email: str, password_secret: str) -> Identity:
        # Two writes: if the session slot write fails the account still
        # exists, and the user recovers with sign_in.
        identity = await self.store.register_user(email, password_secret)
        return await self._start_session(identity)

    async def sign_in(self, email: str, password_secret: str) -> Identity:
        identity = await self.store.authenticate(email, password_secret)
        return await self._start_session(identity)

    async def sign_in_as_admin(self) -> Identity:
        identity = Identity(uid=ADMIN_UID, email=self.admin_email, role=UserRole.admin)
        return await self._start_session(identity)

    async def sign_out(self) -> None:
        self.kv.delete(SESSION_KEY)
        logger.info("Signed out")
        await self._notify(None)

    # ============================================================
    # SUBSCRIPTION
    # ============================================================

    async def subscribe(self, callback: AuthCallback) -> Callable[[], None]:
        """
        Register the single auth-state subscriber.

        Replaces any previous subscriber, calls the new one once with
        the current identity (or None), and returns an unsubscribe function.
        """
        self._callback = callback
        current = await self.current_identity()
        result = callback(current)
        if inspect.isawaitable(result):
            await result

        def unsubscribe() -> None:
            # A later subscriber keeps its slot
            if self._callback == callback:
                self._callback = None

        return unsubscribe
