"""
Drive Routes

GET /drives - List drives, newest first (optional search/role/company/from_date filters)
GET /drives/{drive_id} - Get one drive
POST /drives - Post a drive (admin only)
DELETE /drives/{drive_id} - Remove a drive (admin only)
"""

from datetime import date
from fastapi import APIRouter, HTTPException, Depends, Query
from typing import List, Optional

from app.core.auth import get_current_admin, get_persistence_store
from app.services.persistence_service import PersistenceStore, filter_drives
from app.schemas.schemas import Drive, DriveCreate, Identity, MessageResponse

router = APIRouter(prefix="/drives", tags=["Drives"])


@router.get("", response_model=List[Drive])
async def list_drives(
    search: str = Query("", description="Matches company, role or description"),
    role: str = Query(""),
    company: str = Query(""),
    from_date: Optional[date] = Query(None, description="Only drives on or after this date"),
    store: PersistenceStore = Depends(get_persistence_store)
):
    return filter_drives(await store.list_drives(), search, role, company, from_date)


@router.get("/{drive_id}", response_model=Drive)
async def get_drive(drive_id: str, store: PersistenceStore = Depends(get_persistence_store)):
    drive = await store.get_drive(drive_id)
    if drive is None:
        raise HTTPException(status_code=404, detail="Drive not found")
    return drive


@router.post("", response_model=Drive, status_code=201)
async def add_drive(
    drive: DriveCreate,
    admin: Identity = Depends(get_current_admin),
    store: PersistenceStore = Depends(get_persistence_store)
):
    """Post a new drive. The company logo URL is derived from the company name."""
    return await store.add_drive(drive)


@router.delete("/{drive_id}", response_model=MessageResponse)
async def remove_drive(
    drive_id: str,
    admin: Identity = Depends(get_current_admin),
    store: PersistenceStore = Depends(get_persistence_store)
):
    """Remove a drive. Unknown ids are ignored."""
    await store.remove_drive(drive_id)
    return MessageResponse(message="Drive removed")
