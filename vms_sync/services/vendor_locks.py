"""
Per-VMS-type asyncio locks.

The raw sync and the unified run for one VMS type never interleave, so the
transformation never reads a half-replaced raw snapshot. Different VMS types
never share a lock.
"""

import asyncio

_vendor_locks: dict[str, asyncio.Lock] = {}


def vendor_lock(vms_type: str) -> asyncio.Lock:
    lock = _vendor_locks.get(vms_type)
    if lock is None:
        lock = _vendor_locks[vms_type] = asyncio.Lock()
    return lock
