# vms_sync/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB, and optionally VMS reachability.
"""

import requests
from requests.auth import HTTPDigestAuth
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from vms_sync.database import get_db
from vms_sync.config import settings
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(probe: bool = False, db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Configured VMS (pinged over HTTP when probe=true)
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "vms": {},
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    for vms_type, conn in settings.CONFIGURED_VMS.items():
        if not probe:
            result["vms"][vms_type] = "configured"
            continue
        try:
            resp = requests.get(
                f"{settings.VMS_SCHEME}://{conn['host']}:{conn['port']}/",
                auth=HTTPDigestAuth(conn["user"], conn["password"]),
                timeout=3,
                verify=settings.VMS_VERIFY_TLS,
            )
            result["vms"][vms_type] = "ok" if resp.status_code < 500 else f"http_{resp.status_code}"
        except requests.exceptions.ConnectionError:
            result["vms"][vms_type] = "unreachable"
            result["status"] = "degraded"
        except requests.exceptions.RequestException as e:
            result["vms"][vms_type] = f"error: {str(e)}"

    return result
