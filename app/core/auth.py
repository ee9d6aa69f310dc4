"""
Authentication Utility - service wiring and route guards.

Provides:
- Process-wide store / session / generator instances
- FastAPI dependencies for protected routes

There are no tokens: the portal has one session at a time, held by the
SessionAuthenticator. Tests swap the instances through
app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends, HTTPException, status

from app.core.config import get_settings
from app.db import KeyValueStore, create_kv_store
from app.schemas.schemas import Identity, UserRole
from app.services.generation_service import ContentGenerator
from app.services.persistence_service import PersistenceStore
from app.services.roadmap_service import RoadmapService
from app.services.session_service import SessionAuthenticator


@lru_cache()
def get_kv_store() -> KeyValueStore:
    return create_kv_store(get_settings())


@lru_cache()
def get_persistence_store() -> PersistenceStore:
    return PersistenceStore(get_kv_store())


@lru_cache()
def get_session_authenticator() -> SessionAuthenticator:
    return SessionAuthenticator(get_persistence_store(), get_kv_store())


@lru_cache()
def get_generator() -> ContentGenerator:
    return ContentGenerator()


def get_roadmap_service(
    store: PersistenceStore = Depends(get_persistence_store),
    generator: ContentGenerator = Depends(get_generator)
) -> RoadmapService:
    return RoadmapService(store, generator)


async def get_current_user(
    authenticator: SessionAuthenticator = Depends(get_session_authenticator)
) -> Identity:
    """
    FastAPI dependency - Get the signed-in identity.

    Usage:
        @app.get("/protected")
        async def route(user: Identity = Depends(get_current_user)):
            return user
    """
    identity = await authenticator.current_identity()
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in"
        )
    return identity


async def get_current_student(user: Identity = Depends(get_current_user)) -> Identity:
    """Dependency - Require student role."""
    if user.role != UserRole.student:
        raise HTTPException(status_code=403, detail="Students only")
    return user


async def get_current_admin(user: Identity = Depends(get_current_user)) -> Identity:
    """Dependency - Require admin role."""
    if user.role != UserRole.admin:
        raise HTTPException(status_code=403, detail="Admins only")
    return user
