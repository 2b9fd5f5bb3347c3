from pydantic import BaseModel
from typing import Optional


class VmsSyncResult(BaseModel):
    vms_type: str
    success: bool
    cameras: int = 0
    error: Optional[str] = None


class UnifiedSyncResult(BaseModel):
    vms_type: str
    processed: int
    skipped: int
