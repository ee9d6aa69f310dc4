"""
Admin Routes

GET /admin/dashboard - Drive and student counts
"""

from fastapi import APIRouter, Depends

from app.core.auth import get_current_admin, get_persistence_store
from app.services.dashboard_service import admin_dashboard
from app.services.persistence_service import PersistenceStore
from app.schemas.schemas import AdminDashboardResponse, Identity

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/dashboard", response_model=AdminDashboardResponse)
async def dashboard(
    admin: Identity = Depends(get_current_admin),
    store: PersistenceStore = Depends(get_persistence_store)
):
    return await admin_dashboard(store)
