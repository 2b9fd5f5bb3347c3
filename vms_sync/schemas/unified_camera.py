from pydantic import BaseModel
from datetime import datetime
from typing import Any, Optional


class UnifiedCameraOut(BaseModel):
    id: int
    vms_type: str
    channel_id: str
    name: str
    channel_name: str
    ip_address: str
    port: int
    http_port: int
    rtsp_url: Optional[str]
    is_enabled: bool
    status: str
    supports_ptz: bool
    supports_audio: bool
    original_id: str
    extra_fields: dict[str, Any]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
