# tests/test_sync_service.py
"""Synchronization orchestrator with mocked adapters."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import pytest
from unittest.mock import MagicMock, AsyncMock, patch
from vms_sync.exceptions import TransportError, PayloadParseError
from vms_sync.models.unified_camera import UnifiedCamera
from vms_sync.schemas.field_mapping import ChannelIdTransformation, MappingRuleSet
from vms_sync.services import raw_store
from vms_sync.services.mapping_service import save_mapping_rules
from vms_sync.services.sync_service import synchronize_vendor, synchronize_all, run_vendor_cycle
from vms_sync.services.vendors import VendorAdapterResult


def make_adapter(records=None, error=None, vms_type="hanwha"):
    adapter = MagicMock()
    adapter.host = "10.0.0.5"
    adapter.port = 80
    adapter.base_url = "http://10.0.0.5:80"
    adapter.path = "/stw-cgi/media.cgi"
    adapter.build_rtsp_url.return_value = ""
    if error is not None:
        adapter.collect = AsyncMock(side_effect=error)
    else:
        adapter.collect = AsyncMock(return_value=VendorAdapterResult(
            vms_type=vms_type,
            request_uri="/stw-cgi/media.cgi",
            raw_payload='{"RegisteredCameras": []}',
            records=records or [],
        ))
    return adapter


class TestSynchronizeVendor:
    @pytest.mark.asyncio
    async def test_stores_snapshot(self, db):
        adapter = make_adapter([{"Channel": 0}, {"Channel": 1}])
        count = await synchronize_vendor(db, "hanwha", adapter=adapter)

        assert count == 2
        assert raw_store.read_all(db, "hanwha") == [{"Channel": 0}, {"Channel": 1}]
        payload = raw_store.read_payload(db, "hanwha")
        assert payload.request_uri == "/stw-cgi/media.cgi"
        assert payload.raw_data == '{"RegisteredCameras": []}'
        adapter.collect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_second_sync_replaces_first(self, db):
        await synchronize_vendor(db, "hanwha", adapter=make_adapter([{"Channel": 0}, {"Channel": 1}]))
        await synchronize_vendor(db, "hanwha", adapter=make_adapter([{"Channel": 5}]))
        assert raw_store.read_all(db, "hanwha") == [{"Channel": 5}]
        assert raw_store.read_keys(db, "hanwha") == {"Channel": "Channel"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        TransportError("HTTP 503", vms_type="hanwha", status_code=503),
        PayloadParseError("no camera array", vms_type="hanwha"),
    ])
    async def test_failure_leaves_previous_snapshot(self, db, error):
        await synchronize_vendor(db, "hanwha", adapter=make_adapter([{"Channel": 0}]))

        with pytest.raises(type(error)):
            await synchronize_vendor(db, "hanwha", adapter=make_adapter(error=error))
        assert raw_store.read_all(db, "hanwha") == [{"Channel": 0}]

    @pytest.mark.asyncio
    async def test_timeout_becomes_transport_error(self, db):
        async def hang():
            await asyncio.sleep(5)

        adapter = make_adapter()
        adapter.collect = hang
        with patch("vms_sync.services.sync_service.settings") as mock_settings:
            mock_settings.VMS_SYNC_TIMEOUT_SECONDS = 0.05
            with pytest.raises(TransportError) as exc:
                await synchronize_vendor(db, "hanwha", adapter=adapter)
        assert exc.value.vms_type == "hanwha"

    @pytest.mark.asyncio
    async def test_same_vendor_runs_serialized(self, session_factory):
        active = 0
        peak = 0

        async def slow_collect():
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.02)
            active -= 1
            return VendorAdapterResult("hanwha", "/stw-cgi/media.cgi", "{}", [{"Channel": 0}])

        adapters = [make_adapter(), make_adapter()]
        for a in adapters:
            a.collect = slow_collect

        sessions = [session_factory(), session_factory()]
        try:
            await asyncio.gather(*(synchronize_vendor(s, "hanwha", adapter=a) for s, a in zip(sessions, adapters)))
        finally:
            for s in sessions:
                s.close()
        assert peak == 1


class TestSynchronizeAll:
    @pytest.mark.asyncio
    async def test_one_failure_does_not_stop_others(self):
        async def fake_sync(db, vms_type):
            if vms_type == "naiz":
                raise TransportError("connection refused", vms_type="naiz")
            return 3

        session_factory = MagicMock()
        with patch("vms_sync.services.sync_service.settings") as mock_settings, \
             patch("vms_sync.services.sync_service.synchronize_vendor", side_effect=fake_sync):
            mock_settings.CONFIGURED_VMS = {"dahua": {}, "naiz": {}}
            results = await synchronize_all(session_factory)

        assert results["dahua"] == {"success": True, "cameras": 3}
        assert results["naiz"]["success"] is False
        assert "connection refused" in results["naiz"]["error"]
        assert session_factory.return_value.close.call_count == 2

    @pytest.mark.asyncio
    async def test_nothing_configured(self):
        with patch("vms_sync.services.sync_service.settings") as mock_settings:
            mock_settings.CONFIGURED_VMS = {}
            assert await synchronize_all(MagicMock()) == {}


@pytest.mark.asyncio
async def test_run_vendor_cycle_builds_unified_cameras(db):
    save_mapping_rules(db, MappingRuleSet(
        vmsType="hanwha",
        channelIdTransformation=ChannelIdTransformation(sourceField="Channel"),
    ))
    adapter = make_adapter([{"Channel": 0}, {"Channel": 1}])

    with patch("vms_sync.services.sync_service.get_adapter", return_value=adapter):
        summary = await run_vendor_cycle(db, "hanwha")

    assert summary == {"vms_type": "hanwha", "cameras": 2, "processed": 2, "skipped": 0}
    assert sorted(c.channel_id for c in db.query(UnifiedCamera).all()) == ["0", "1"]
