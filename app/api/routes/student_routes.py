"""
Student Routes

GET /students/me - Get own profile, roadmaps and mock test history
POST /students/profile - Save onboarding profile and generate first roadmap
PUT /students/roadmaps - Replace all roadmaps
POST /students/roadmaps - Generate a roadmap for a new role
PATCH /students/roadmaps - Replace the roadmap with the same role (edit)
DELETE /students/roadmaps?role= - Delete a roadmap
POST /students/roadmaps/steps/{step_index}/toggle?role= - Toggle step completion
GET /students/mock-tests - Mock test history, newest first
POST /students/mock-tests - Record a finished mock test
GET /students/dashboard - Dashboard analytics

Roles are free text (e.g. "UI/UX Designer"), so they travel in the query
string or body, never as a path segment.
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from typing import List

from app.core.auth import get_current_student, get_persistence_store, get_roadmap_service
from app.core.errors import DuplicateRoadmapError, GenerationFailedError, RoadmapNotFoundError
from app.services.dashboard_service import student_dashboard
from app.services.persistence_service import PersistenceStore
from app.services.roadmap_service import RoadmapService
from app.schemas.schemas import (
    Identity, StudentProfile, Roadmap, AddRoadmapRequest, MockTestCreate, MockTestResult,
    UserDocumentResponse, StudentDashboardResponse, MessageResponse
)

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("/me", response_model=UserDocumentResponse)
async def get_document(
    student: Identity = Depends(get_current_student),
    store: PersistenceStore = Depends(get_persistence_store)
):
    record = await store.load_user_document(student.uid)
    if record is None:
        raise HTTPException(status_code=404, detail="Student record not found")
    return UserDocumentResponse(
        uid=student.uid, email=record.auth.email, profile=record.profile,
        roadmaps=record.roadmaps, mock_tests=record.mock_tests
    )


@router.post("/profile", response_model=Roadmap, status_code=201)
async def personalize(
    profile: StudentProfile,
    student: Identity = Depends(get_current_student),
    roadmaps: RoadmapService = Depends(get_roadmap_service)
):
    """
    Save the onboarding profile.

    A roadmap for the goal role is generated first; nothing is saved
    if generation fails.
    """
    try:
        return await roadmaps.personalize(student.uid, profile)
    except GenerationFailedError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.put("/roadmaps", response_model=List[Roadmap])
async def replace_roadmaps(
    roadmaps: List[Roadmap],
    student: Identity = Depends(get_current_student),
    store: PersistenceStore = Depends(get_persistence_store)
):
    await store.save_roadmaps(student.uid, roadmaps)
    return roadmaps


@router.post("/roadmaps", response_model=Roadmap, status_code=201)
async def add_roadmap(
    request: AddRoadmapRequest,
    student: Identity = Depends(get_current_student),
    roadmaps: RoadmapService = Depends(get_roadmap_service)
):
    """Generate a roadmap for another role. Roles are unique, ignoring case."""
    try:
        return await roadmaps.add_roadmap(student.uid, request.role)
    except DuplicateRoadmapError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationFailedError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.patch("/roadmaps", response_model=Roadmap)
async def edit_roadmap(
    roadmap: Roadmap,
    student: Identity = Depends(get_current_student),
    roadmaps: RoadmapService = Depends(get_roadmap_service)
):
    try:
        return await roadmaps.replace_roadmap(student.uid, roadmap)
    except RoadmapNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/roadmaps", response_model=MessageResponse)
async def delete_roadmap(
    role: str = Query(..., min_length=1),
    student: Identity = Depends(get_current_student),
    roadmaps: RoadmapService = Depends(get_roadmap_service)
):
    await roadmaps.delete_roadmap(student.uid, role)
    return MessageResponse(message=f"Roadmap '{role}' deleted")


@router.post("/roadmaps/steps/{step_index}/toggle", response_model=Roadmap)
async def toggle_step(
    step_index: int,
    role: str = Query(..., min_length=1),
    student: Identity = Depends(get_current_student),
    roadmaps: RoadmapService = Depends(get_roadmap_service)
):
    try:
        return await roadmaps.toggle_step(student.uid, role, step_index)
    except RoadmapNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/mock-tests", response_model=List[MockTestResult])
async def get_mock_tests(
    student: Identity = Depends(get_current_student),
    store: PersistenceStore = Depends(get_persistence_store)
):
    record = await store.load_user_document(student.uid)
    return record.mock_tests if record else []


@router.post("/mock-tests", response_model=MockTestResult, status_code=201)
async def record_mock_test(
    result: MockTestCreate,
    student: Identity = Depends(get_current_student),
    store: PersistenceStore = Depends(get_persistence_store)
):
    if result.score > result.total_questions:
        raise HTTPException(status_code=400, detail="Score cannot exceed total questions")
    return await store.append_mock_test_result(student.uid, result)


@router.get("/dashboard", response_model=StudentDashboardResponse)
async def dashboard(
    student: Identity = Depends(get_current_student),
    store: PersistenceStore = Depends(get_persistence_store)
):
    return await student_dashboard(store, student.uid)
