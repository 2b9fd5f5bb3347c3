"""
Synchronization orchestrator — pulls each VMS's camera list and replaces
its raw snapshot.

One cycle per VMS type:
  adapter.collect()  (fetch + extract, bounded by VMS_SYNC_TIMEOUT_SECONDS)
  raw_store.replace_all()  (single transaction)

Nothing is written unless fetch and extraction both succeed. Errors are
logged here and re-raised; callers decide whether to report or carry on.
"""

import asyncio
from typing import Callable, Optional
from sqlalchemy.orm import Session
from vms_sync.config import settings
from vms_sync.database import SessionLocal
from vms_sync.exceptions import TransportError, VmsSyncError
from vms_sync.services import raw_store
from vms_sync.services.unified_camera_service import transform_vendor
from vms_sync.services.vendor_locks import vendor_lock
from vms_sync.services.vendors import VmsAdapter, get_adapter
from vms_sync.utils.logger import get_logger

logger = get_logger(__name__)


async def _sync_raw(db: Session, vms_type: str, adapter: Optional[VmsAdapter]) -> int:
    if adapter is None:
        adapter = get_adapter(vms_type)

    logger.info(f"🔄 [{vms_type}] synchronizing from {adapter.host}:{adapter.port}")
    try:
        result = await asyncio.wait_for(adapter.collect(), timeout=settings.VMS_SYNC_TIMEOUT_SECONDS)
    except asyncio.TimeoutError as e:
        raise TransportError(
            f"sync timed out after {settings.VMS_SYNC_TIMEOUT_SECONDS}s",
            vms_type=vms_type,
            url=f"{adapter.base_url}{adapter.path}",
        ) from e

    return raw_store.replace_all(
        db,
        vms_type,
        result.records,
        raw_payload=result.raw_payload,
        request_uri=result.request_uri,
    )


async def synchronize_vendor(db: Session, vms_type: str, adapter: Optional[VmsAdapter] = None) -> int:
    """Fetch one VMS's camera list and replace its raw snapshot. Returns the camera count."""
    async with vendor_lock(vms_type):
        try:
            count = await _sync_raw(db, vms_type, adapter)
        except VmsSyncError as e:
            logger.error(f"❌ [{vms_type}] sync failed: {e.message}")
            raise
        except Exception as e:
            logger.error(f"❌ [{vms_type}] sync failed: {e}", exc_info=True)
            raise

    logger.info(f"✅ [{vms_type}] {count} cameras stored")
    return count


async def _sync_one(vms_type: str, session_factory: Callable[[], Session]) -> dict:
    db = session_factory()
    try:
        count = await synchronize_vendor(db, vms_type)
        return {"success": True, "cameras": count}
    except Exception as e:
        return {"success": False, "error": str(e)}
    finally:
        db.close()


async def synchronize_all(session_factory: Callable[[], Session] = SessionLocal) -> dict:
    """
    Sync every configured VMS concurrently, one session per VMS.
    A failing VMS is reported in the result and never stops the others.
    """
    vms_types = list(settings.CONFIGURED_VMS.keys())
    if not vms_types:
        logger.warning("No VMS configured — nothing to synchronize.")
        return {}

    results = await asyncio.gather(*(_sync_one(t, session_factory) for t in vms_types))
    return dict(zip(vms_types, results))


async def run_vendor_cycle(db: Session, vms_type: str) -> dict:
    """Raw sync followed by the unified run, under one hold of the VMS lock."""
    async with vendor_lock(vms_type):
        adapter = get_adapter(vms_type)
        try:
            count = await _sync_raw(db, vms_type, adapter)
            unified = transform_vendor(db, vms_type, adapter=adapter)
        except VmsSyncError as e:
            logger.error(f"❌ [{vms_type}] cycle failed: {e.message}")
            raise
    return {"vms_type": vms_type, "cameras": count, **unified}


async def _cycle_one(vms_type: str, session_factory: Callable[[], Session]):
    db = session_factory()
    try:
        await run_vendor_cycle(db, vms_type)
    except Exception as e:
        logger.error(f"❌ [{vms_type}] periodic cycle error: {e}")
    finally:
        db.close()


async def _cycle_all(session_factory: Callable[[], Session]):
    await asyncio.gather(*(
        asyncio.create_task(_cycle_one(t, session_factory), name=f"vms-sync-{t}")
        for t in settings.CONFIGURED_VMS
    ))


async def start_periodic_sync(interval: int, session_factory: Callable[[], Session] = SessionLocal):
    """
    Run a full cycle for every configured VMS every `interval` seconds.
    Started once at backend startup when SYNC_INTERVAL_SECONDS > 0.
    """
    if interval <= 0:
        logger.warning("SYNC_INTERVAL_SECONDS is 0 — periodic sync disabled.")
        return

    logger.info(f"🚀 Periodic VMS sync every {interval}s for {list(settings.CONFIGURED_VMS.keys())}")
    while True:
        await _cycle_all(session_factory)
        await asyncio.sleep(interval)
