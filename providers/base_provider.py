"""
Base REST client for the GitHub and ClickUp APIs.
Owns timeouts and the mapping of transport failures to gateway errors.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from errors import UpstreamError, UpstreamTimeout
from settings import CONNECT_TIMEOUT, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


def build_timeout(request_timeout: Optional[float] = None, connect_timeout: Optional[float] = None) -> httpx.Timeout:
    """Bounded timeout applied to every outbound call"""
    return httpx.Timeout(
        request_timeout if request_timeout is not None else REQUEST_TIMEOUT,
        connect=connect_timeout if connect_timeout is not None else CONNECT_TIMEOUT,
    )


async def send_request(
    method: str,
    url: str,
    provider_name: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: Optional[httpx.Timeout] = None,
    **kwargs: Any,
) -> httpx.Response:
    """Send one HTTP request, converting transport failures

    Args:
        method: HTTP method
        url: Absolute URL
        provider_name: "GitHub" or "ClickUp", used in messages and logs
        transport: Optional httpx transport (tests inject a MockTransport)
        timeout: Timeout override, defaults to the configured timeouts
        **kwargs: Passed to ``httpx.AsyncClient.request``

    Returns:
        The HTTP response, whatever its status code

    Raises:
        UpstreamTimeout: The call timed out
        UpstreamError: The request could not be sent
    """
    async with httpx.AsyncClient(timeout=timeout or build_timeout(), transport=transport) as client:
        try:
            return await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"{provider_name} {method} {url} timed out: {e}")
            raise UpstreamTimeout(f"{provider_name} did not respond in time.") from e
        except httpx.RequestError as e:
            logger.error(f"{provider_name} {method} {url} failed: {e}")
            raise UpstreamError(f"Could not reach {provider_name}.") from e


class BaseProvider(ABC):
    """Abstract base class for the authenticated REST clients"""

    name = "provider"

    def __init__(
        self,
        base_url: str,
        access_token: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[httpx.Timeout] = None,
    ):
        """
        Initialize provider with endpoint and credentials

        Args:
            base_url: The provider's API base URL
            access_token: OAuth access token for the session
            transport: Optional httpx transport
            timeout: Optional timeout override
        """
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.transport = transport
        self.timeout = timeout or build_timeout()

    @abstractmethod
    def _get_headers(self) -> Dict[str, str]:
        """Build request headers carrying the access token"""

    async def request(self, method: str, path: str, expected: tuple = (200, 201), **kwargs: Any) -> Any:
        """Call ``path`` and return the decoded JSON body

        Raises:
            UpstreamError: Non-expected status or undecodable body
        """
        url = f"{self.base_url}{path}"
        response = await send_request(
            method,
            url,
            self.name,
            transport=self.transport,
            timeout=self.timeout,
            headers=self._get_headers(),
            **kwargs,
        )
        logger.debug(f"{self.name} {method} {path} -> {response.status_code}")

        if response.status_code not in expected:
            logger.error(f"{self.name} API error on {method} {path}: {response.status_code} - {response.text}")
            raise UpstreamError(
                f"{self.name} request failed.",
                upstream_status=response.status_code,
                body=response.text,
            )
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{self.name} returned invalid JSON for {method} {path}: {response.text}")
            raise UpstreamError(f"{self.name} returned an unreadable response.", body=response.text) from e

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)
