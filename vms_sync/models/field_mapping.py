"""
Field mapping rule sets — one row per VMS type.
Transformations are stored as an ordered JSON list of
{sourceField, targetField, transformationType, parameters} objects.
Read by unified_camera_service, edited through the mappings router.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON
from vms_sync.database import Base


class FieldMapping(Base):
    __tablename__ = "vms_field_mappings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vms_type = Column(String(50), unique=True, nullable=False, index=True)
    channel_id_source_field = Column(String(200))   # None until an operator sets it
    transformations = Column(JSON, nullable=False, default=list)
    description = Column(Text)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<FieldMapping vms={self.vms_type} rules={len(self.transformations or [])}>"
