"""
Unified camera table — the canonical, vendor-agnostic camera record.
One row per (vms_type, channel_id); rows are fully replaced on every
transformation run. Target fields outside the canonical columns go to
extra_fields.
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON, UniqueConstraint
from vms_sync.database import Base


class UnifiedCamera(Base):
    __tablename__ = "vms_unified_cameras"
    __table_args__ = (UniqueConstraint("vms_type", "channel_id", name="uq_unified_vms_channel"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    vms_type = Column(String(50), nullable=False, index=True)
    channel_id = Column(String(100), nullable=False)

    name = Column(String(200), default="", nullable=False)
    channel_name = Column(String(200), default="", nullable=False)
    ip_address = Column(String(100), default="", nullable=False)
    port = Column(Integer, default=0, nullable=False)
    http_port = Column(Integer, default=0, nullable=False)
    rtsp_url = Column(String(500))
    is_enabled = Column(Boolean, default=True, nullable=False)
    status = Column(String(50), default="", nullable=False)
    supports_ptz = Column(Boolean, default=False, nullable=False)
    supports_audio = Column(Boolean, default=False, nullable=False)
    original_id = Column(String(200), default="", nullable=False)
    extra_fields = Column(JSON, default=dict, nullable=False)

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<UnifiedCamera {self.id} vms={self.vms_type} channel={self.channel_id}>"
