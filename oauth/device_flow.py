"""GitHub device authorization grant (RFC 8628)

Used instead of the redirect flow when GITHUB_AUTH_FLOW=device. The caller
starts the flow, shows the user code to the user, then polls until the user
has approved the device in the browser.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

import settings
from errors import UpstreamError
from providers import send_request
from .authorization import OAuthClientConfig
from .token_exchange import read_json_object

logger = logging.getLogger(__name__)

DEVICE_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:device_code"

# Errors that mean "ask again later", everything else is a rejection
_PENDING_ERRORS = ("authorization_pending", "slow_down")


@dataclass(frozen=True)
class DeviceAuthorization:
    """Instructions returned by the device code endpoint"""
    device_code: str
    user_code: str
    verification_uri: str
    expires_in: int
    interval: int


@dataclass(frozen=True)
class DevicePollResult:
    """Outcome of one poll: either still pending or a token"""
    access_token: Optional[str] = None
    slow_down: bool = False

    @property
    def pending(self) -> bool:
        return self.access_token is None


async def start_login(config: OAuthClientConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> DeviceAuthorization:
    """Request a device code and user code from GitHub

    Raises:
        UpstreamError: If GitHub refuses the request
    """
    response = await send_request(
        "POST",
        settings.GITHUB_DEVICE_CODE_URL,
        "GitHub",
        transport=transport,
        data={"client_id": config.github_client_id, "scope": settings.GITHUB_SCOPES.replace(",", " ")},
        headers={"Accept": "application/json"},
    )
    payload = read_json_object(response, "GitHub device code request", "GitHub device login could not be started.")
    if payload.get("error") or not payload.get("device_code") or not payload.get("user_code"):
        logger.error(f"GitHub device code request rejected: {response.text}")
        raise UpstreamError("GitHub device login could not be started.", body=response.text)

    return DeviceAuthorization(
        device_code=payload["device_code"],
        user_code=payload["user_code"],
        verification_uri=payload.get("verification_uri", "https://github.com/login/device"),
        expires_in=int(payload.get("expires_in", 900)),
        interval=int(payload.get("interval", 5)),
    )


async def finish_login(
    device_code: str,
    config: OAuthClientConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> DevicePollResult:
    """Poll GitHub once for the token behind ``device_code``

    Returns:
        A pending result while the user has not approved yet, otherwise the token

    Raises:
        UpstreamError: GitHub rejected the device code (expired, denied, ...)
    """
    response = await send_request(
        "POST",
        settings.GITHUB_TOKEN_URL,
        "GitHub",
        transport=transport,
        data={
            "client_id": config.github_client_id,
            "device_code": device_code,
            "grant_type": DEVICE_GRANT_TYPE,
        },
        headers={"Accept": "application/json"},
    )
    payload = read_json_object(response, "GitHub device token poll", "GitHub device login failed.")
    error = payload.get("error")
    if error in _PENDING_ERRORS:
        logger.debug(f"GitHub device login still pending ({error})")
        return DevicePollResult(slow_down=error == "slow_down")
    if error or not payload.get("access_token"):
        logger.error(f"GitHub device login rejected: {response.text}")
        raise UpstreamError(f"GitHub device login failed: {error or 'no token returned'}.", body=response.text)

    logger.info("GitHub access token obtained via device flow")
    return DevicePollResult(access_token=payload["access_token"])
