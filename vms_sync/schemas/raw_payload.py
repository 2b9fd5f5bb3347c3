from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class RawPayloadOut(BaseModel):
    vms_type: str
    request_uri: Optional[str]
    raw_data: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
