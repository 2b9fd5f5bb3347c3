# vms_sync/routers/sync.py
"""
Raw synchronization endpoints.
POST /sync/{vms_type} pulls one VMS; POST /sync pulls every configured VMS.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from vms_sync.database import get_db
from vms_sync.config import settings
from vms_sync.schemas.sync import VmsSyncResult
from vms_sync.services.sync_service import synchronize_vendor, synchronize_all
from vms_sync.services.vendors import VMS_ADAPTERS

router = APIRouter()


@router.get("/sync/types", summary="Registered and configured VMS types")
def get_vms_types():
    return {
        "registered": sorted(VMS_ADAPTERS.keys()),
        "configured": sorted(settings.CONFIGURED_VMS.keys()),
    }


@router.post("/sync/{vms_type}", response_model=VmsSyncResult, summary="Sync raw cameras of one VMS")
async def sync_vms(vms_type: str, db: Session = Depends(get_db)):
    """Replaces the stored raw snapshot. Unified cameras are untouched — see POST /cameras/sync/{vms_type}."""
    count = await synchronize_vendor(db, vms_type)
    return VmsSyncResult(vms_type=vms_type, success=True, cameras=count)


@router.post("/sync", summary="Sync raw cameras of every configured VMS")
async def sync_all_vms():
    """Returns 207 when at least one VMS failed."""
    results = await synchronize_all()
    failed = [t for t, r in results.items() if not r["success"]]
    return JSONResponse(
        status_code=status.HTTP_207_MULTI_STATUS if failed else status.HTTP_200_OK,
        content={"results": results, "failed": failed},
    )
