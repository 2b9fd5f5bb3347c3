"""
VMS adapters — one class per vendor, registered in VMS_ADAPTERS by type.

Each adapter issues exactly one GET against its vendor's camera-list endpoint
and hands the body to the matching extractor:

  dahua    /cgi-bin/configManager.cgi?action=getConfig&name=RemoteDevice   digest   dotted-key text
  emstone  /api/cameras                                                    basic    JSON "cameras"
  hanwha   /stw-cgi/media.cgi?msubmenu=cameraregister&action=view          digest   JSON "RegisteredCameras"
  naiz     /camera/list.cgi?id=…&password=…&key=all&method=get            query    XML Camera/CameraList/CameraListItem
"""

from dataclasses import dataclass, field
from typing import Optional

import httpx

from vms_sync.config import settings
from vms_sync.exceptions import UnknownVmsError
from vms_sync.services.extractors import parse_dotted_config, extract_json_array, extract_xml_items
from vms_sync.services.vms_client import VmsHttpClient
from vms_sync.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class VendorAdapterResult:
    vms_type: str
    request_uri: str          # path only, never credentials
    raw_payload: str
    records: list[dict] = field(default_factory=list)


class VmsAdapter:
    """Base adapter: connection details + fetch/extract/rtsp hooks."""

    vms_type: str = ""
    path: str = ""

    def __init__(self, conn: dict, client: Optional[VmsHttpClient] = None):
        self.host = conn["host"]
        self.port = conn["port"]
        self.user = conn["user"]
        self.password = conn["password"]
        self.client = client or VmsHttpClient()

    @property
    def base_url(self) -> str:
        return f"{settings.VMS_SCHEME}://{self.host}:{self.port}"

    def auth(self) -> Optional[httpx.Auth]:
        return None

    def query_params(self) -> Optional[dict]:
        return None

    def extract(self, body: str) -> list[dict]:
        raise NotImplementedError

    def build_rtsp_url(self, channel_id: str) -> str:
        """Empty string means the vendor has no RTSP template yet."""
        return ""

    async def fetch(self) -> str:
        return await self.client.get(
            f"{self.base_url}{self.path}",
            auth=self.auth(),
            params=self.query_params(),
            vms_type=self.vms_type,
        )

    async def collect(self) -> VendorAdapterResult:
        body = await self.fetch()
        records = self.extract(body)
        logger.info(f"[{self.vms_type}] extracted {len(records)} cameras from {self.host}")
        return VendorAdapterResult(
            vms_type=self.vms_type,
            request_uri=self.path,
            raw_payload=body,
            records=records,
        )


class DahuaNvr(VmsAdapter):
    vms_type = "dahua"
    path = "/cgi-bin/configManager.cgi?action=getConfig&name=RemoteDevice"

    def auth(self):
        return httpx.DigestAuth(self.user, self.password)

    def extract(self, body: str) -> list[dict]:
        return parse_dotted_config(body)


class EmstoneNvr(VmsAdapter):
    vms_type = "emstone"
    path = "/api/cameras"

    def auth(self):
        return httpx.BasicAuth(self.user, self.password)

    def extract(self, body: str) -> list[dict]:
        return extract_json_array(body, "cameras", vms_type=self.vms_type)

    def build_rtsp_url(self, channel_id: str) -> str:
        return f"rtsp://{self.user}:{self.password}@{self.host}/video{channel_id}"


class HanwhaVisionNvr(VmsAdapter):
    vms_type = "hanwha"
    path = "/stw-cgi/media.cgi?msubmenu=cameraregister&action=view"

    def auth(self):
        return httpx.DigestAuth(self.user, self.password)

    def extract(self, body: str) -> list[dict]:
        return extract_json_array(body, "RegisteredCameras", vms_type=self.vms_type)


class NaizVms(VmsAdapter):
    vms_type = "naiz"
    path = "/camera/list.cgi"

    def query_params(self):
        return {"id": self.user, "password": self.password, "key": "all", "method": "get"}

    def extract(self, body: str) -> list[dict]:
        return extract_xml_items(body, "Camera", "CameraList", "CameraListItem", vms_type=self.vms_type)


VMS_ADAPTERS: dict[str, type[VmsAdapter]] = {
    cls.vms_type: cls for cls in (DahuaNvr, EmstoneNvr, HanwhaVisionNvr, NaizVms)
}


def get_adapter(vms_type: str, client: Optional[VmsHttpClient] = None) -> VmsAdapter:
    """Build the adapter for a VMS type from settings.VMS."""
    adapter_cls = VMS_ADAPTERS.get(vms_type)
    if adapter_cls is None:
        raise UnknownVmsError(vms_type)

    conn = settings.CONFIGURED_VMS.get(vms_type)
    if conn is None:
        raise UnknownVmsError(vms_type, reason="is not configured or disabled")
    return adapter_cls(conn, client=client)
