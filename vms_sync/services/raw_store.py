"""
Raw snapshot store — one full-replace snapshot per VMS type.

replace_all() deletes the previous payload, camera records and key structure
for the VMS type and inserts the new ones in a single commit, so a reader
sees either the old snapshot or the new one.
"""

from datetime import datetime
from typing import Any
from sqlalchemy.orm import Session
from vms_sync.models.raw_camera import RawPayload, RawCamera, CameraFieldKeys
from vms_sync.utils.logger import get_logger

logger = get_logger(__name__)


def extract_keys(record: Any) -> Any:
    """
    Key structure of a record: scalars map to their own key name, nested
    objects recurse, arrays are sampled by their first object element.
    """
    if not isinstance(record, dict):
        return {}

    result = {}
    for key, value in record.items():
        if isinstance(value, dict):
            result[key] = extract_keys(value)
        elif isinstance(value, list) and value and isinstance(value[0], dict):
            result[key] = [extract_keys(value[0])]
        else:
            result[key] = key
    return result


def replace_all(db: Session, vms_type: str, records: list[dict], raw_payload: str, request_uri: str) -> int:
    now = datetime.utcnow()
    try:
        db.query(RawPayload).filter(RawPayload.vms_type == vms_type).delete()
        db.query(RawCamera).filter(RawCamera.vms_type == vms_type).delete()
        db.query(CameraFieldKeys).filter(CameraFieldKeys.vms_type == vms_type).delete()

        db.add(RawPayload(vms_type=vms_type, request_uri=request_uri, raw_data=raw_payload, created_at=now))
        for position, record in enumerate(records):
            db.add(RawCamera(vms_type=vms_type, position=position, data=record, created_at=now))
        if records:
            db.add(CameraFieldKeys(vms_type=vms_type, keys=extract_keys(records[0]), created_at=now))
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"[{vms_type}] raw snapshot replaced: {len(records)} cameras")
    return len(records)


def read_all(db: Session, vms_type: str) -> list[dict]:
    rows = (
        db.query(RawCamera)
        .filter(RawCamera.vms_type == vms_type)
        .order_by(RawCamera.position)
        .all()
    )
    return [row.data for row in rows]


def read_keys(db: Session, vms_type: str):
    row = db.query(CameraFieldKeys).filter(CameraFieldKeys.vms_type == vms_type).first()
    return row.keys if row else None


def read_payload(db: Session, vms_type: str):
    return db.query(RawPayload).filter(RawPayload.vms_type == vms_type).first()
