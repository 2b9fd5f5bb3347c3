# vms_sync/routers/cameras.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from vms_sync.database import get_db
from vms_sync.schemas.raw_payload import RawPayloadOut
from vms_sync.schemas.sync import UnifiedSyncResult
from vms_sync.schemas.unified_camera import UnifiedCameraOut
from vms_sync.services import raw_store
from vms_sync.services.unified_camera_service import (
    synchronize_unified,
    list_unified_cameras,
    analyze_field_structure,
)

router = APIRouter()


@router.post("/cameras/sync/{vms_type}", response_model=UnifiedSyncResult, summary="Build unified cameras of one VMS")
async def sync_unified(vms_type: str, db: Session = Depends(get_db)):
    """Applies the VMS's mapping rules to its last raw snapshot."""
    return await synchronize_unified(db, vms_type)


@router.get("/cameras", response_model=list[UnifiedCameraOut], summary="All unified cameras, paged")
def get_cameras(
    page: int = Query(0, ge=0),
    size: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return list_unified_cameras(db, page=page, size=size)


@router.get("/cameras/type/{vms_type}", response_model=list[UnifiedCameraOut], summary="Unified cameras of one VMS, paged")
def get_cameras_by_type(
    vms_type: str,
    page: int = Query(0, ge=0),
    size: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return list_unified_cameras(db, vms_type, page=page, size=size)


@router.get("/cameras/raw/{vms_type}", summary="Raw cameras of one VMS as last synced")
def get_raw_cameras(vms_type: str, db: Session = Depends(get_db)):
    return raw_store.read_all(db, vms_type)


@router.get("/cameras/raw/{vms_type}/payload", response_model=RawPayloadOut, summary="Last response body of one VMS")
def get_raw_payload(vms_type: str, db: Session = Depends(get_db)):
    """The body exactly as the VMS returned it on the last successful sync."""
    payload = raw_store.read_payload(db, vms_type)
    if payload is None:
        raise HTTPException(status_code=404, detail=f"No raw payload stored for '{vms_type}'")
    return payload


@router.get("/cameras/analyze/{vms_type}", summary="Field structure of one VMS's raw cameras")
def analyze_cameras(vms_type: str, db: Session = Depends(get_db)):
    """Source field names to use when writing mapping rules."""
    return analyze_field_structure(db, vms_type)
