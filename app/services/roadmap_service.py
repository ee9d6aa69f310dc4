"""
Roadmap Service - student roadmap workflows.

personalize  : save onboarding profile + first roadmap for the goal role
add_roadmap  : generate a roadmap for a new role (case-insensitive unique)
delete       : drop a roadmap by role
toggle_step  : flip one step's completed flag
replace      : full replacement of one roadmap (edit flow)

Generation always happens before any write, so a generator failure
leaves the stored roadmaps untouched. Generator calls block on the
network and run in a worker thread; store calls stay on the loop so
each read-modify-write is not interleaved.
"""

import asyncio
import logging
from typing import List

from app.core.errors import DuplicateRoadmapError, RoadmapNotFoundError
from app.schemas.schemas import Roadmap, StudentProfile
from app.services.generation_service import ContentGenerator
from app.services.persistence_service import PersistenceStore

logger = logging.getLogger(__name__)


class RoadmapService:

    def __init__(self, store: PersistenceStore, generator: ContentGenerator):
        self.store = store
        self.generator = generator

    async def _roadmaps(self, uid: str) -> List[Roadmap]:
        record = await self.store.load_user_document(uid)
        return list(record.roadmaps) if record else []

    async def personalize(self, uid: str, profile: StudentProfile) -> Roadmap:
        roadmap = await asyncio.to_thread(self.generator.generate_roadmap, profile.goal_role)
        await self.store.save_profile_and_roadmaps(uid, profile, [roadmap])
        logger.info("Personalized %s for %s", uid, profile.goal_role)
        return roadmap

    async def add_roadmap(self, uid: str, role: str) -> Roadmap:
        role = role.strip()
        roadmaps = await self._roadmaps(uid)
        # Check before spending a generation call
        if any(r.role.lower() == role.lower() for r in roadmaps):
            raise DuplicateRoadmapError(role)
        roadmap = await asyncio.to_thread(self.generator.generate_roadmap, role)
        await self.store.add_roadmap(uid, roadmap)
        return roadmap

    async def delete_roadmap(self, uid: str, role: str) -> List[Roadmap]:
        roadmaps = [r for r in await self._roadmaps(uid) if r.role != role]
        await self.store.save_roadmaps(uid, roadmaps)
        return roadmaps

    async def toggle_step(self, uid: str, role: str, step_index: int) -> Roadmap:
        roadmaps = await self._roadmaps(uid)
        for roadmap in roadmaps:
            if roadmap.role == role:
                if not 0 <= step_index < len(roadmap.steps):
                    raise RoadmapNotFoundError(role, step_index)
                step = roadmap.steps[step_index]
                step.completed = not step.completed
                await self.store.save_roadmaps(uid, roadmaps)
                return roadmap
        raise RoadmapNotFoundError(role)

    async def replace_roadmap(self, uid: str, updated: Roadmap) -> Roadmap:
        roadmaps = await self._roadmaps(uid)
        for i, roadmap in enumerate(roadmaps):
            if roadmap.role == updated.role:
                roadmaps[i] = updated
                await self.store.save_roadmaps(uid, roadmaps)
                return updated
        raise RoadmapNotFoundError(updated.role)
