"""
Raw VMS snapshot tables.
Each synchronization cycle replaces every row of one VMS type wholesale:
the response body as received (audit), the extracted camera records, and the
key structure of the first record (used when writing mapping rules).
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON
from vms_sync.database import Base


class RawPayload(Base):
    __tablename__ = "vms_raw_payloads"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vms_type = Column(String(50), nullable=False, index=True)
    request_uri = Column(String(500))          # path only, never credentials
    raw_data = Column(Text)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<RawPayload {self.id} vms={self.vms_type} uri={self.request_uri}>"


class RawCamera(Base):
    __tablename__ = "vms_raw_cameras"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vms_type = Column(String(50), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # order produced by the extractor
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<RawCamera {self.id} vms={self.vms_type} pos={self.position}>"


class CameraFieldKeys(Base):
    __tablename__ = "vms_camera_keys"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vms_type = Column(String(50), unique=True, nullable=False, index=True)
    keys = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<CameraFieldKeys vms={self.vms_type}>"
