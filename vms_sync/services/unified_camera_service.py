"""
Unified camera service — turns a VMS type's raw snapshot into unified camera
rows using its mapping rule set.

Rows are keyed by (vms_type, channel_id). Every run fully replaces each
matched row: canonical columns are reset from the new document and
extra_fields is overwritten. id and created_at survive.
"""

from datetime import datetime
from typing import Any, Optional
from sqlalchemy.orm import Session
from vms_sync.exceptions import UnknownVmsError
from vms_sync.models.unified_camera import UnifiedCamera
from vms_sync.services import raw_store
from vms_sync.services.mapping_service import get_mapping_rules
from vms_sync.services.transformation import (
    CHANNEL_ID_FIELD,
    UNIFIED_DEFAULTS,
    VMS_FIELD,
    apply_rules,
    resolve_channel_id,
    stringify,
    to_boolean,
    to_number,
)
from vms_sync.services.vendor_locks import vendor_lock
from vms_sync.services.vendors import VmsAdapter, get_adapter
from vms_sync.utils.logger import get_logger

logger = get_logger(__name__)

# document field -> (column, type)
CANONICAL_COLUMNS: dict[str, tuple[str, type]] = {
    "name":           ("name", str),
    "channel_name":   ("channel_name", str),
    "ip_address":     ("ip_address", str),
    "port":           ("port", int),
    "http_port":      ("http_port", int),
    "rtsp_url":       ("rtsp_url", str),
    "is_enabled":     ("is_enabled", bool),
    "status":         ("status", str),
    "supports_PTZ":   ("supports_ptz", bool),
    "supports_audio": ("supports_audio", bool),
    "original_id":    ("original_id", str),
}

_IDENTITY_FIELDS = {VMS_FIELD, CHANNEL_ID_FIELD}


def _coerce(field: str, value: Any, kind: type, vms_type: str):
    default = UNIFIED_DEFAULTS[field]
    if value is None:
        return default
    if kind is bool:
        return to_boolean(value)
    if kind is str:
        return stringify(value)

    number = to_number(value)
    if isinstance(number, (int, float)):
        try:
            return int(number)
        except (OverflowError, ValueError):
            pass
    logger.warning(f"[{vms_type}] {field}={value!r} is not an integer — using default {default}")
    return default


def _column_values(camera: dict) -> dict:
    vms_type = camera[VMS_FIELD]
    values = {}
    for field, (column, kind) in CANONICAL_COLUMNS.items():
        values[column] = _coerce(field, camera.get(field, UNIFIED_DEFAULTS[field]), kind, vms_type)
    return values


def upsert(db: Session, camera: dict) -> UnifiedCamera:
    """Insert or fully replace the row identified by (vms, channel_ID)."""
    vms_type = camera[VMS_FIELD]
    channel_id = stringify(camera[CHANNEL_ID_FIELD])
    now = datetime.utcnow()

    row = (
        db.query(UnifiedCamera)
        .filter(UnifiedCamera.vms_type == vms_type, UnifiedCamera.channel_id == channel_id)
        .first()
    )
    if row is None:
        row = UnifiedCamera(vms_type=vms_type, channel_id=channel_id, created_at=now)
        db.add(row)

    for column, value in _column_values(camera).items():
        setattr(row, column, value)
    row.extra_fields = {
        k: v for k, v in camera.items()
        if k not in CANONICAL_COLUMNS and k not in _IDENTITY_FIELDS
    }
    row.updated_at = now
    db.flush()
    return row


def _rtsp_adapter(vms_type: str) -> Optional[VmsAdapter]:
    try:
        return get_adapter(vms_type)
    except UnknownVmsError:
        logger.debug(f"[{vms_type}] no connection configured — rtsp_url left empty")
        return None


def transform_vendor(db: Session, vms_type: str, adapter: Optional[VmsAdapter] = None) -> dict:
    """Unlocked transform run; callers hold vendor_lock(vms_type)."""
    rules = get_mapping_rules(db, vms_type)
    records = raw_store.read_all(db, vms_type)

    if rules.channelIdTransformation is None:
        logger.warning(f"⚠️  [{vms_type}] no channel ID rule — {len(records)} raw cameras skipped")
        return {"vms_type": vms_type, "processed": 0, "skipped": len(records)}

    if adapter is None:
        adapter = _rtsp_adapter(vms_type)

    processed = skipped = 0
    try:
        for position, raw in enumerate(records):
            channel_id = resolve_channel_id(raw, rules)
            if channel_id is None:
                logger.debug(
                    f"[{vms_type}] raw camera {position} has no "
                    f"'{rules.channelIdTransformation.sourceField}' — skipped"
                )
                skipped += 1
                continue

            defaults = {"original_id": channel_id}
            if adapter is not None:
                defaults["rtsp_url"] = adapter.build_rtsp_url(channel_id) or None

            upsert(db, apply_rules(raw, rules, defaults=defaults))
            processed += 1
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"✅ [{vms_type}] unified cameras: {processed} processed, {skipped} skipped")
    return {"vms_type": vms_type, "processed": processed, "skipped": skipped}


async def synchronize_unified(db: Session, vms_type: str, adapter: Optional[VmsAdapter] = None) -> dict:
    async with vendor_lock(vms_type):
        return transform_vendor(db, vms_type, adapter=adapter)


def list_unified_cameras(
    db: Session,
    vms_type: Optional[str] = None,
    page: int = 0,
    size: Optional[int] = None,
) -> list[UnifiedCamera]:
    """Ordered by (vms_type, channel_id). size=None returns every row."""
    q = db.query(UnifiedCamera)
    if vms_type:
        q = q.filter(UnifiedCamera.vms_type == vms_type)
    q = q.order_by(UnifiedCamera.vms_type, UnifiedCamera.channel_id)
    if size is not None:
        q = q.offset(page * size).limit(size)
    return q.all()


def analyze_field_structure(db: Session, vms_type: str) -> dict:
    """Key structure of the last synced raw camera, for writing mapping rules."""
    records = raw_store.read_all(db, vms_type)
    return {
        "vms_type": vms_type,
        "camera_count": len(records),
        "keys": raw_store.read_keys(db, vms_type) or {},
    }
