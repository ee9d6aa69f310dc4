"""
Dashboard analytics for the student and admin home screens.
"""

from typing import List

from app.schemas.schemas import AdminDashboardResponse, Roadmap, StudentDashboardResponse
from app.services.persistence_service import PersistenceStore

RECENT_DRIVES = 3
RECENT_MOCK_TESTS = 4


def roadmap_progress(roadmaps: List[Roadmap]) -> int:
    """Completed steps over all steps, as a rounded percentage."""
    total = sum(len(r.steps) for r in roadmaps)
    if total == 0:
        return 0
    completed = sum(1 for r in roadmaps for s in r.steps if s.completed)
    return round(completed / total * 100)


async def student_dashboard(store: PersistenceStore, uid: str) -> StudentDashboardResponse:
    drives = await store.list_drives()
    record = await store.load_user_document(uid)
    roadmaps = record.roadmaps if record else []
    mock_tests = record.mock_tests if record else []
    return StudentDashboardResponse(
        goal_role=record.profile.goal_role if record and record.profile else None,
        upcoming_drives=len(drives),
        roadmap_progress=roadmap_progress(roadmaps),
        mock_tests_taken=len(mock_tests),
        recent_drives=drives[:RECENT_DRIVES],
        recent_mock_tests=mock_tests[:RECENT_MOCK_TESTS]
    )


async def admin_dashboard(store: PersistenceStore) -> AdminDashboardResponse:
    drives = await store.list_drives()
    return AdminDashboardResponse(
        total_drives=len(drives),
        total_students=await store.count_students()
    )
