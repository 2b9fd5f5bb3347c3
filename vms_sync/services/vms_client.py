"""
Thin async HTTP client used by every VMS adapter.

Endpoint: GET {scheme}://{host}:{port}{path}
Auth:     httpx.DigestAuth / httpx.BasicAuth supplied per call by the adapter
Raises TransportError on connection errors, timeouts and non-2xx responses.
"""

from typing import Optional

import httpx

from vms_sync.config import settings
from vms_sync.exceptions import TransportError
from vms_sync.utils.logger import get_logger

logger = get_logger(__name__)


class VmsHttpClient:
    def __init__(
        self,
        timeout: Optional[float] = None,
        verify: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = settings.VMS_REQUEST_TIMEOUT_SECONDS if timeout is None else timeout
        self.verify = settings.VMS_VERIFY_TLS if verify is None else verify
        self._transport = transport

    async def get(
        self,
        url: str,
        auth: Optional[httpx.Auth] = None,
        params: Optional[dict] = None,
        vms_type: Optional[str] = None,
    ) -> str:
        try:
            async with httpx.AsyncClient(
                auth=auth, timeout=self.timeout, verify=self.verify, transport=self._transport
            ) as client:
                response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise TransportError(f"timeout after {self.timeout}s: {e}", vms_type=vms_type, url=url) from e
        except httpx.HTTPError as e:
            raise TransportError(f"request failed: {e}", vms_type=vms_type, url=url) from e

        if not response.is_success:
            logger.warning(f"⚠️  [{vms_type}] {url} returned HTTP {response.status_code}")
            raise TransportError(
                f"VMS responded with HTTP {response.status_code}",
                vms_type=vms_type,
                url=url,
                status_code=response.status_code,
            )

        logger.debug(f"[{vms_type}] {url} → {len(response.content)} bytes")
        return response.text
