"""Signed HTTPS transport for OpenSRS requests"""
import hashlib
import logging
from typing import Optional

import httpx

from opensrs_gateway.opensrs.errors import OpenSRSConfigError
from opensrs_gateway.opensrs.parser import parse_response
from opensrs_gateway.opensrs.result import NETWORK_ERROR, TIMEOUT_ERROR, OpenSRSResult

logger = logging.getLogger(__name__)


def sign(xml: str, api_key: str) -> str:
    """OpenSRS request signature: ``md5(md5(xml + key) + key)`` as hex"""
    first = hashlib.md5((xml + api_key).encode("utf-8")).hexdigest()
    return hashlib.md5((first + api_key).encode("utf-8")).hexdigest()


class OpenSRSTransport:
    """Posts signed XML documents to the reseller endpoint.

    Failures never raise: they are returned as an ``OpenSRSResult`` with
    ``success=False`` and a local response code.
    """

    def __init__(
        self,
        username: str,
        api_key: str,
        host: str,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not username or not api_key:
            raise OpenSRSConfigError(
                "OpenSRS credentials are not configured. Set OPENSRS_RESELLER_USERNAME and OPENSRS_API_KEY"
            )
        if not host:
            raise OpenSRSConfigError("OpenSRS host is not configured")

        self.username = username
        self._api_key = api_key
        self.host = host.rstrip("/")
        self.timeout = timeout
        self._client = http_client or httpx.AsyncClient()
        self._owns_client = http_client is None

    def headers(self, xml: str) -> dict:
        return {
            "Content-Type": "text/xml",
            "X-Username": self.username,
            "X-Signature": sign(xml, self._api_key),
        }

    async def send(self, xml: str, label: str = "", timeout: Optional[float] = None) -> OpenSRSResult:
        """POST ``xml`` and parse the reply"""
        logger.info("OpenSRS request: %s", label)
        logger.debug("OpenSRS request XML: %s", xml)

        try:
            response = await self._client.post(
                self.host,
                content=xml.encode("utf-8"),
                headers=self.headers(xml),
                timeout=timeout or self.timeout,
            )
        except httpx.TimeoutException as e:
            logger.error("OpenSRS request %s timed out: %s", label, e)
            return OpenSRSResult.failure(f"Request timed out: {e}", TIMEOUT_ERROR)
        except httpx.HTTPError as e:
            logger.error("OpenSRS request %s failed: %s", label, e)
            return OpenSRSResult.failure(f"Network error: {e}", NETWORK_ERROR)

        if response.status_code >= 300:
            logger.error("OpenSRS request %s returned HTTP %s", label, response.status_code)
            return OpenSRSResult.failure(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                str(response.status_code),
                response.reason_phrase,
                http_status=response.status_code,
            )

        logger.debug("OpenSRS response XML: %s", response.text)
        result = parse_response(response.text)
        logger.info(
            "OpenSRS response: %s %s %s", label, result.response_code, result.response_text
        )
        return result

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()
